# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Staging-tree assembly for the packaging tool."""
