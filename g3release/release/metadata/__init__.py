# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""On-disk package metadata: Debian changelog, RPM spec, path layout."""
