# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""systemd template unit generation."""
