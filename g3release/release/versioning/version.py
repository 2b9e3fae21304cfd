# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
VersionSpec: the one version value every metadata format is rendered from.

A version has three parts that the packaging grammars split differently:

    upstream  1.7.22 or 1.8.0~rc1   Debian: before the last '-'; RPM: Version:
    release   1                     Debian: after the last '-';  RPM: Release:
    full      1.7.22-1              build env var, changelog headers

Pre-release tags are written with '~' because both dpkg and rpm sort
"1.8.0~rc1" before "1.8.0". A '-' separator is accepted on input and
normalised, since '-' would be ambiguous with the Debian revision.
"""

import re
from dataclasses import dataclass
from typing import Optional

_UPSTREAM_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:[~-](?P<tag>[A-Za-z0-9.]+))?$"
)
_RELEASE_PATTERN = re.compile(r"^[1-9]\d*$")


@dataclass(frozen=True)
class VersionSpec:
    """An immutable MAJOR.MINOR.PATCH version plus release counter and optional tag."""

    major: int
    minor: int
    patch: int
    release: int = 1
    tag: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise ValueError(f"Version component '{name}' must be non-negative")
        if self.release < 1:
            raise ValueError(f"Release counter must be >= 1, got {self.release}")
        if self.tag is not None and not re.fullmatch(r"[A-Za-z0-9.]+", self.tag):
            raise ValueError(f"Invalid pre-release tag: {self.tag!r}")

    @property
    def base(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def upstream(self) -> str:
        if self.tag:
            return f"{self.base}~{self.tag}"
        return self.base

    @property
    def full(self) -> str:
        return f"{self.upstream}-{self.release}"

    def __str__(self) -> str:
        return self.full

    @classmethod
    def parse(cls, text: str, release: int = 1) -> "VersionSpec":
        """
        Parse an upstream version such as "1.7.22" or "1.8.0~rc1".

        Raises:
            ValueError: If the text is not MAJOR.MINOR.PATCH with an optional tag.
        """
        match = _UPSTREAM_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(
                f"Invalid version {text!r}: expected MAJOR.MINOR.PATCH, optionally followed by ~tag"
            )
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            release=release,
            tag=match["tag"],
        )

    @classmethod
    def parse_full(cls, text: str) -> "VersionSpec":
        """
        Parse a packaged version "<upstream>-<release>" as found in a Debian
        changelog header or an RPM changelog stanza.

        The split happens at the last '-', matching dpkg's rule for the
        Debian revision.

        Raises:
            ValueError: If there is no numeric release part or the upstream
                        part does not parse.
        """
        upstream, sep, release = text.strip().rpartition("-")
        if not sep or not _RELEASE_PATTERN.match(release):
            raise ValueError(f"Invalid packaged version {text!r}: expected <upstream>-<release>")
        return cls.parse(upstream, release=int(release))
