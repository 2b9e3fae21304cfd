# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Feature Profile Resolver: turns probe results into cargo feature tokens.

The workspace is built with --no-default-features, so every capability the
packaged binaries need must be named explicitly:

    lua       lua54                Lua ABI the binaries link against
    ssl       vendored-tongsuo     TLS backend (system OpenSSL needs no token)
    resolver  c-ares               DNS resolver backend
    <extra>   quic                 optional transports

The same token list is used to compile and to label the artifact, so the
output order is fixed: lua, ssl, resolver, then extras sorted by name.

This module is pure. Probing the build host lives in probe.py; here we only
validate what the probe found and map it to tokens.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import Optional

from g3release.config.schema import FeatureConfig
from g3release.release.exceptions import ConfigurationError

_LUA_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)$")
_NO_BACKEND = {"", "none"}


class PlatformFamily(enum.Enum):
    DEBIAN = "debian"
    RHEL = "rhel"


class SslBackend(enum.Enum):
    """TLS backends the workspace can be built against."""

    OPENSSL = "openssl"
    VENDORED_OPENSSL = "vendored-openssl"
    VENDORED_TONGSUO = "vendored-tongsuo"
    VENDORED_BORINGSSL = "vendored-boringssl"
    VENDORED_AWS_LC = "vendored-aws-lc"

    @property
    def token(self) -> Optional[str]:
        # The system OpenSSL is what the crates link by default.
        if self is SslBackend.OPENSSL:
            return None
        return self.value


@dataclass(frozen=True)
class PlatformHints:
    """
    What the probe learned about the build host.

    Attributes:
        family: Target packaging family.
        rhel_major: RHEL (or derivative) major version, None on Debian.
        ssl_backend: Name of the detected SSL backend, None if nothing usable.
        lua_version: Lua version string as reported by pkg-config, e.g. "5.4".
        extras: Transport extras requested on top of the package config.
    """

    family: PlatformFamily = PlatformFamily.DEBIAN
    rhel_major: Optional[int] = None
    ssl_backend: Optional[str] = None
    lua_version: Optional[str] = None
    extras: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class FeatureProfile:
    """The resolved capability set for one build."""

    family: PlatformFamily
    ssl_backend: SslBackend
    lua_token: Optional[str] = None
    resolver: Optional[str] = None
    extras: tuple[str, ...] = ()
    rhel_major: Optional[int] = None

    def capabilities(self) -> dict[str, str]:
        """Logical capability name -> cargo feature token, in build order."""
        mapping: dict[str, str] = {}
        if self.lua_token is not None:
            mapping["lua"] = self.lua_token
        ssl_token = self.ssl_backend.token
        if ssl_token is not None:
            mapping["ssl"] = ssl_token
        if self.resolver is not None:
            mapping["resolver"] = self.resolver
        for extra in self.extras:
            mapping[extra] = extra
        return mapping

    def tokens(self) -> list[str]:
        return list(self.capabilities().values())

    @property
    def pkgconfig_package(self) -> str:
        """The pkg-config build dependency name on this platform."""
        if self.family is PlatformFamily.RHEL:
            if self.rhel_major is not None and self.rhel_major > 7:
                return "pkgconf"
            return "pkgconfig"
        return "pkg-config"


def lua_feature_token(lua_version: Optional[str]) -> str:
    """
    Derive the cargo feature for a Lua version: "5.4" -> "lua54".

    Raises:
        ConfigurationError: If the version is empty or not of the form X.Y.
    """
    if lua_version is None or not lua_version.strip():
        raise ConfigurationError(
            "Lua version probe returned nothing; install the Lua development "
            "package (lua-devel / liblua5.4-dev) or disable the lua feature"
        )
    match = _LUA_VERSION_PATTERN.match(lua_version.strip())
    if match is None:
        raise ConfigurationError(
            f"Lua version probe returned {lua_version!r}, expected a numeric X.Y version"
        )
    return f"lua{match.group(1)}{match.group(2)}"


def select_ssl_backend(hints: PlatformHints, pinned: Optional[str] = None) -> SslBackend:
    """
    Choose the SSL backend: a pinned backend from config wins over the probe.

    Raises:
        ConfigurationError: If no backend is available or the name is unknown.
    """
    name = pinned if pinned is not None else hints.ssl_backend
    if name is None or name.strip().lower() in _NO_BACKEND:
        dev_package = "openssl-devel" if hints.family is PlatformFamily.RHEL else "libssl-dev"
        raise ConfigurationError(
            f"No usable SSL backend found; install {dev_package} or pin a vendored "
            f"backend (one of: {', '.join(b.value for b in SslBackend if b.token)})"
        )
    try:
        return SslBackend(name.strip().lower())
    except ValueError as err:
        raise ConfigurationError(
            f"Unknown SSL backend {name!r}; expected one of: "
            f"{', '.join(b.value for b in SslBackend)}"
        ) from err


def resolve_profile(hints: PlatformHints, features: Optional[FeatureConfig] = None) -> FeatureProfile:
    """
    Validate probe results against the package's feature config.

    Raises:
        ConfigurationError: On a missing SSL backend or a bad Lua version.
    """
    features = features or FeatureConfig()

    ssl_backend = select_ssl_backend(hints, features.ssl_backend)
    lua_token = lua_feature_token(hints.lua_version) if features.lua else None
    extras = tuple(sorted(set(features.extras) | set(hints.extras)))

    return FeatureProfile(
        family=hints.family,
        ssl_backend=ssl_backend,
        lua_token=lua_token,
        resolver=features.resolver,
        extras=extras,
        rhel_major=hints.rhel_major,
    )


def resolve(hints: PlatformHints, features: Optional[FeatureConfig] = None) -> list[str]:
    """The ordered cargo feature tokens for a build. Same input, same list."""
    return resolve_profile(hints, features).tokens()
