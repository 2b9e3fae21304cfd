# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build-host probing.

Collects the raw facts the resolver needs: which distro family we are
packaging for, which Lua version pkg-config knows about, and whether a system
OpenSSL is available. Each check swallows only "tool not found / non-zero
exit" and reports it as an absent value; deciding whether an absent value is
fatal is the resolver's job.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from g3release.logging.logger import get_logger
from g3release.release.features.resolver import PlatformFamily, PlatformHints

_logger: logging.Logger = get_logger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")
_RHEL_IDS = {"rhel", "centos", "rocky", "almalinux", "ol", "fedora", "amzn"}
# pkg-config module names for Lua differ between distros.
_LUA_MODULES = ("lua", "lua5.4", "lua-5.4", "lua5.3", "lua-5.3", "lua5.1", "luajit")


def _run_pkg_config(*args: str) -> Optional[str]:
    """Run pkg-config and return stripped stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["pkg-config", *args],
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def parse_os_release(text: str) -> dict[str, str]:
    """Parse /etc/os-release KEY=value lines, unquoting values."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        fields[key.strip()] = value.strip().strip("\"'")
    return fields


def detect_platform(os_release: Optional[dict[str, str]] = None) -> tuple[PlatformFamily, Optional[int]]:
    """Return (family, rhel_major) from os-release fields."""
    if os_release is None:
        try:
            os_release = parse_os_release(OS_RELEASE_PATH.read_text(encoding="utf-8"))
        except OSError:
            os_release = {}

    ids = {os_release.get("ID", "")} | set(os_release.get("ID_LIKE", "").split())
    if not ids & _RHEL_IDS:
        return PlatformFamily.DEBIAN, None

    major_text = os_release.get("VERSION_ID", "").split(".")[0]
    rhel_major = int(major_text) if major_text.isdigit() else None
    return PlatformFamily.RHEL, rhel_major


def probe_lua_version() -> Optional[str]:
    """Ask pkg-config for the Lua version (the `V` variable), trying known module names."""
    for module in _LUA_MODULES:
        version = _run_pkg_config("--variable=V", module)
        if version:
            return version
    return None


def probe_ssl_backend() -> Optional[str]:
    """Report "openssl" when pkg-config can find a system OpenSSL."""
    if _run_pkg_config("--exists", "openssl") is not None:
        return "openssl"
    return None


def probe_platform_hints(
    ssl_backend: Optional[str] = None,
    lua_version: Optional[str] = None,
    rhel_major: Optional[int] = None,
    extras: frozenset[str] = frozenset(),
) -> PlatformHints:
    """
    Probe the build host, letting explicit overrides win over each probe.

    Overrides exist so packaging jobs (and tests) can pin a result instead of
    depending on what happens to be installed.
    """
    family, detected_major = detect_platform()
    if rhel_major is not None:
        family, detected_major = PlatformFamily.RHEL, rhel_major

    hints = PlatformHints(
        family=family,
        rhel_major=detected_major,
        ssl_backend=ssl_backend if ssl_backend is not None else probe_ssl_backend(),
        lua_version=lua_version if lua_version is not None else probe_lua_version(),
        extras=extras,
    )
    _logger.debug(
        "Probed build host",
        extra={
            "family": hints.family.value,
            "rhel_major": hints.rhel_major,
            "ssl_backend": hints.ssl_backend,
            "lua_version": hints.lua_version,
        },
    )
    return hints
