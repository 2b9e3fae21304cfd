# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Compile-time feature selection for a target platform."""
