# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
g3release: release packaging orchestrator for the G3 workspace.

Stamps one version across the Debian changelog, the RPM spec and the build
environment, resolves the cargo feature set for a target platform, expands
the systemd template unit and assembles the packaging staging tree.
"""

__version__ = "0.1.0"
