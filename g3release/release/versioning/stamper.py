# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Version Stamper: renders one VersionSpec into every format that carries it.

    build_env_var           1.7.22-1
    debian_changelog_block  g3proxy (1.7.22-1) UNRELEASED; urgency=medium ...
    rpm_spec_fragment       * Fri Aug 04 2023 G3proxy Maintainers <...> - 1.7.22-1

All three come from the same VersionSpec and the same clock reading, so they
cannot drift apart within one run. Nothing here touches the filesystem.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from g3release.config.schema import IdentityConfig
from g3release.release.metadata.debian import DebianChangelogEntry, parse_changelog
from g3release.release.metadata.rpm_spec import RpmChangelogStanza
from g3release.release.versioning.version import VersionSpec


@dataclass(frozen=True)
class RenderedVersion:
    debian_entry: DebianChangelogEntry
    rpm_stanza: RpmChangelogStanza
    build_env_var: str

    @property
    def debian_changelog_block(self) -> str:
        return self.debian_entry.render()

    @property
    def rpm_spec_fragment(self) -> str:
        return self.rpm_stanza.render() + "\n"


def maintainer_name(package_name: str) -> str:
    """"g3proxy" -> "G3proxy Maintainers". Only the first letter changes case."""
    return f"{package_name[:1].upper()}{package_name[1:]} Maintainers"


def maintainer_email(package_name: str, domain: str = "devel.machine") -> str:
    return f"{package_name}-maintainers@{domain}"


def render(
    version: VersionSpec,
    package_name: str,
    now: Optional[datetime] = None,
    identity: Optional[IdentityConfig] = None,
) -> RenderedVersion:
    """
    Render a version for one package.

    Args:
        version: The version being released.
        package_name: Lower-case package name, e.g. "g3proxy".
        now: Clock reading for both changelog dates. Defaults to local time.
        identity: Distribution, urgency, maintainer domain and messages.
    """
    if not package_name:
        raise ValueError("package_name must not be empty")
    identity = identity or IdentityConfig()
    now = now or datetime.now().astimezone()

    name = maintainer_name(package_name)
    email = maintainer_email(package_name, identity.maintainer_domain)

    debian_entry = DebianChangelogEntry(
        package=package_name,
        version=version,
        distribution=identity.distribution,
        urgency=identity.urgency,
        maintainer_name=name,
        maintainer_email=email,
        timestamp=now,
        changes=(identity.debian_message,),
    )
    rpm_stanza = RpmChangelogStanza.create(
        timestamp=now,
        author=f"{name} <{email}>",
        version=version,
        message=identity.rpm_message,
    )
    return RenderedVersion(
        debian_entry=debian_entry,
        rpm_stanza=rpm_stanza,
        build_env_var=version.full,
    )


def parse_changelog_block(text: str) -> DebianChangelogEntry:
    """Parse a rendered Debian block back into its entry."""
    return parse_changelog(text)
