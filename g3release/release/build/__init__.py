# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Toolchain invocation for the feature-flagged workspace build."""
