# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build-host information for g3release.

`info` reports what a packaging job needs to know before it starts: which
interpreter runs us, what machine we are on, and whether the external tools
the release flow shells out to are on PATH.
"""

import platform
import shutil
import sys
from typing import NamedTuple, Optional

MINIMUM_PYTHON = (3, 11)

# Tools invoked by the probe and the build step.
HOST_TOOLS = ("cargo", "pkg-config")


class SystemInfo(NamedTuple):
    python_version: str
    platform: str
    architecture: str
    hostname: str
    tools: dict[str, Optional[str]]


def check_minimum_python(version_info: tuple[int, ...] = tuple(sys.version_info[:2])) -> None:
    """
    Raises:
        RuntimeError: If the interpreter is older than MINIMUM_PYTHON.
    """
    if tuple(version_info[:2]) < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        running = ".".join(str(part) for part in version_info[:2])
        raise RuntimeError(f"g3release requires Python >= {required}, running {running}")


def locate_tools(names: tuple[str, ...] = HOST_TOOLS) -> dict[str, Optional[str]]:
    """Map each tool name to its resolved path, or None when it is not on PATH."""
    return {name: shutil.which(name) for name in names}


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
        tools=locate_tools(),
    )
