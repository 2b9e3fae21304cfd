# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Metadata Synchronizer: stamps one version into a package's changelog and spec.

Debian changelog: the whole file is replaced by the single new entry. The
packaging repo keeps only the latest release there; history lives in git.
The existing file must still parse as a changelog, so a wrong path or a
hand-mangled file is reported instead of being silently overwritten.

RPM spec: parsed into preamble + stanzas, Version:/Release: rewritten, the
new stanza put on top. A stanza for the same version-release is replaced,
which makes re-running a release idempotent apart from the dates.

Ordering guarantees:
  - both new file contents are computed before anything is written, so a
    FormatError in either file leaves both untouched
  - both files are staged as temp files before either is renamed into place
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from g3release.config.schema import IdentityConfig
from g3release.logging.logger import get_logger
from g3release.release.exceptions import ConfigurationError, FormatError
from g3release.release.metadata.debian import HEADER_ANCHOR, read_top_entry
from g3release.release.metadata.layout import PackageLayout
from g3release.release.metadata.rpm_spec import parse_spec
from g3release.release.versioning.stamper import RenderedVersion, render
from g3release.release.versioning.version import VersionSpec
from g3release.utils.filesystem import atomic_write_many, read_text_exact

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class SyncResult:
    package: str
    version: VersionSpec
    rendered: RenderedVersion
    changelog_path: Path
    spec_path: Path
    changelog_text: str
    spec_text: str
    written: bool


def _read_metadata(path: Path, package: str, kind: str) -> str:
    try:
        return read_text_exact(path)
    except (FileNotFoundError, IsADirectoryError) as err:
        raise ConfigurationError(f"No {kind} for package {package!r} at {path}") from err


def render_changelog(layout: PackageLayout, current: str, rendered: RenderedVersion) -> str:
    """
    Validate the current changelog and return its replacement.

    Raises:
        FormatError: If the current file has no parseable entry for this package.
    """
    existing = read_top_entry(current, layout.changelog)
    if existing.package != layout.name:
        raise FormatError(
            layout.changelog,
            HEADER_ANCHOR,
            f"top entry is for package {existing.package!r}, not {layout.name!r}",
        )
    return rendered.debian_changelog_block


def render_spec(
    layout: PackageLayout, current: str, version: VersionSpec, rendered: RenderedVersion
) -> str:
    """
    Return the RPM spec text with the new version and changelog stanza.

    Raises:
        FormatError: If %changelog, Version: or Release: is missing.
    """
    spec = parse_spec(current, layout.spec_file)
    spec = spec.with_version(version, layout.spec_file).with_stanza(rendered.rpm_stanza)
    return spec.serialize()


def sync_version(
    layout: PackageLayout,
    version: VersionSpec,
    now: Optional[datetime] = None,
    identity: Optional[IdentityConfig] = None,
    dry_run: bool = False,
) -> SyncResult:
    """
    Stamp `version` into the package's changelog and spec.

    Args:
        layout: Paths of the package's metadata files.
        version: The version being released.
        now: Clock reading for the changelog dates.
        identity: Changelog identity settings.
        dry_run: Compute the new contents but write nothing.

    Raises:
        ConfigurationError: A metadata file doesn't exist.
        FormatError: A metadata file lacks an expected anchor.
        OSError: Writing failed; the originals are untouched.
    """
    changelog_current = _read_metadata(layout.changelog, layout.name, "Debian changelog")
    spec_current = _read_metadata(layout.spec_file, layout.name, "RPM spec")

    rendered = render(version, layout.name, now=now, identity=identity)
    changelog_text = render_changelog(layout, changelog_current, rendered)
    spec_text = render_spec(layout, spec_current, version, rendered)

    if dry_run:
        _logger.info(
            "Dry run, metadata not written",
            extra={"package": layout.name, "version": version.full},
        )
    else:
        atomic_write_many({layout.changelog: changelog_text, layout.spec_file: spec_text})
        _logger.info(
            "Stamped package metadata",
            extra={
                "package": layout.name,
                "version": version.full,
                "changelog": str(layout.changelog),
                "spec": str(layout.spec_file),
            },
        )

    return SyncResult(
        package=layout.name,
        version=version,
        rendered=rendered,
        changelog_path=layout.changelog,
        spec_path=layout.spec_file,
        changelog_text=changelog_text,
        spec_text=spec_text,
        written=not dry_run,
    )
