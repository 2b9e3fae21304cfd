# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Debian changelog grammar.

One entry looks like this (deb-changelog(5)):

    g3proxy (1.7.22-1) UNRELEASED; urgency=medium

      * New upstream release.

     -- G3proxy Maintainers <g3proxy-maintainers@devel.machine>  Fri, 04 Aug 2023 10:15:30 +0800

Two spaces separate the address from the date, and the date is RFC 2822.
We render the date with email.utils rather than strftime("%a, %d %b ...")
because strftime day and month names follow the process locale, and a
changelog written on a de_DE build host would otherwise read "Fr, 04 Aug".
"""

import re
from dataclasses import dataclass
from datetime import datetime
from email.utils import format_datetime, parsedate_to_datetime

from g3release.release.exceptions import FormatError
from g3release.release.versioning.version import VersionSpec

HEADER_ANCHOR = "changelog header"
TRAILER_ANCHOR = "maintainer trailer"

_HEADER_PATTERN = re.compile(
    r"^(?P<package>[a-z0-9][a-z0-9+.-]+) \((?P<version>[^()\s]+)\) "
    r"(?P<distribution>[^;]+); urgency=(?P<urgency>[A-Za-z]+)"
)
_TRAILER_PATTERN = re.compile(r"^ -- (?P<name>.+?) <(?P<email>[^<>]+)>  (?P<date>.+?)\s*$")


@dataclass(frozen=True)
class DebianChangelogEntry:
    """A single changelog entry, always rendered and replaced as a whole."""

    package: str
    version: VersionSpec
    distribution: str
    urgency: str
    maintainer_name: str
    maintainer_email: str
    timestamp: datetime
    changes: tuple[str, ...] = ("New upstream release.",)

    def render(self) -> str:
        lines = [
            f"{self.package} ({self.version.full}) {self.distribution}; urgency={self.urgency}",
            "",
        ]
        lines.extend(f"  * {change}" for change in self.changes)
        lines.extend(
            [
                "",
                f" -- {self.maintainer_name} <{self.maintainer_email}>  "
                f"{format_rfc2822(self.timestamp)}",
            ]
        )
        return "\n".join(lines) + "\n"


def format_rfc2822(timestamp: datetime) -> str:
    """Locale-independent RFC 2822 date, e.g. "Fri, 04 Aug 2023 10:15:30 +0800"."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()
    return format_datetime(timestamp)


@dataclass(frozen=True)
class ChangelogTopEntry:
    """The topmost entry as written, its version kept as the raw Debian string."""

    package: str
    version: str
    distribution: str
    urgency: str
    maintainer_name: str
    maintainer_email: str
    timestamp: datetime
    changes: tuple[str, ...]


def read_top_entry(text: str, path: object = "<changelog>") -> ChangelogTopEntry:
    """
    Check the header and trailer grammar of the topmost entry.

    Any Debian version string is accepted, epochs and backport suffixes
    included.

    Raises:
        FormatError: If the header or the maintainer trailer is missing or malformed.
    """
    lines = text.splitlines()
    start = next((i for i, line in enumerate(lines) if line.strip()), None)
    if start is None:
        raise FormatError(path, HEADER_ANCHOR, "changelog is empty")

    header = _HEADER_PATTERN.match(lines[start])
    if header is None:
        raise FormatError(path, HEADER_ANCHOR, f"unparseable line {lines[start]!r}")

    changes: list[str] = []
    for line in lines[start + 1 :]:
        trailer = _TRAILER_PATTERN.match(line)
        if trailer is not None:
            try:
                timestamp = parsedate_to_datetime(trailer["date"])
            except (TypeError, ValueError) as err:
                raise FormatError(path, TRAILER_ANCHOR, f"bad date {trailer['date']!r}") from err
            return ChangelogTopEntry(
                package=header["package"],
                version=header["version"],
                distribution=header["distribution"].strip(),
                urgency=header["urgency"],
                maintainer_name=trailer["name"],
                maintainer_email=trailer["email"],
                timestamp=timestamp,
                changes=tuple(changes),
            )
        if _HEADER_PATTERN.match(line):
            break
        stripped = line.strip()
        if stripped.startswith("* "):
            changes.append(stripped[2:])
        elif stripped and changes:
            changes[-1] = f"{changes[-1]} {stripped}"

    raise FormatError(path, TRAILER_ANCHOR, f"entry for {header['version']} has no ' -- ' line")


def parse_changelog(text: str, path: object = "<changelog>") -> DebianChangelogEntry:
    """
    Parse the first (topmost) entry of a changelog we rendered ourselves.

    Stricter than `read_top_entry`: the version must be a g3release
    MAJOR.MINOR.PATCH-N version.

    Raises:
        FormatError: If the header or the maintainer trailer of the first
                     entry is missing or malformed.
    """
    top = read_top_entry(text, path)
    try:
        version = VersionSpec.parse_full(top.version)
    except ValueError as err:
        raise FormatError(path, HEADER_ANCHOR, str(err)) from err

    return DebianChangelogEntry(
        package=top.package,
        version=version,
        distribution=top.distribution,
        urgency=top.urgency,
        maintainer_name=top.maintainer_name,
        maintainer_email=top.maintainer_email,
        timestamp=top.timestamp,
        changes=top.changes,
    )
