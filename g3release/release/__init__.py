# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release packaging subsystem for g3release.

Feature resolution, version stamping, metadata synchronization, unit
generation, build invocation and staging-tree assembly. Everything that
touches a package's on-disk metadata lives under this package.
"""
