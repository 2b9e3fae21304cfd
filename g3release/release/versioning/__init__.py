# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Version parsing and rendering into each metadata grammar."""
