# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
PackageLayout: every path belonging to one package, named explicitly.

Components never build paths from the working directory; they receive a
PackageLayout. The conventional layout under the source root is:

    <root>/<pkg>/                          package_dir
    <root>/<pkg>/debian/changelog          changelog
    <root>/<pkg>/<pkg>.spec                spec_file
    <root>/<pkg>/service/<pkg>@.service.in service_template

Each path can be overridden from the package's config section.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from g3release.config.schema import PackageConfig
from g3release.release.exceptions import ConfigurationError


@dataclass(frozen=True)
class PackageLayout:
    name: str
    source_root: Path
    package_dir: Path
    changelog: Path
    spec_file: Path
    service_template: Path

    @property
    def unit_name(self) -> str:
        return f"{self.name}@.service"

    @classmethod
    def from_convention(
        cls,
        source_root: Path,
        name: str,
        package_config: Optional[PackageConfig] = None,
    ) -> "PackageLayout":
        """
        Build the layout for a package, applying config overrides.

        Raises:
            ConfigurationError: If the name is not a plain directory name or
                                the package directory doesn't exist.
        """
        if not name or name in {".", ".."} or "/" in name or "\\" in name:
            raise ConfigurationError(f"Invalid package name {name!r}")

        package_config = package_config or PackageConfig()
        package_dir = source_root / name
        if not package_dir.is_dir():
            raise ConfigurationError(
                f"Unknown package {name!r}: no directory at {package_dir}"
            )

        def _pick(override: Optional[str], default: Path) -> Path:
            return source_root / override if override is not None else default

        return cls(
            name=name,
            source_root=source_root,
            package_dir=package_dir,
            changelog=_pick(package_config.changelog, package_dir / "debian" / "changelog"),
            spec_file=_pick(package_config.spec_file, package_dir / f"{name}.spec"),
            service_template=_pick(
                package_config.service_template,
                package_dir / "service" / f"{name}@.service.in",
            ),
        )
