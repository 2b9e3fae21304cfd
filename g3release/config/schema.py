# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for g3release.

Every section is a frozen pydantic model:
  - frozen=True: a release run never mutates its settings
  - extra="forbid": a typo in a key fails loudly instead of being ignored
  - validate_default=True: even defaults get type-checked

A config file is optional. Without one, every package gets the defaults
below, which match the g3proxy packaging conventions. A file only needs to
list the packages that deviate from them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_RESOLVER_BACKENDS = ("c-ares", "hickory")


class GlobalConfig(BaseModel):
    """Cross-cutting settings: identity of the tool run, logging, source root."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(default="g3", description="Workspace identifier")
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )
    source_root: str = Field(
        default=".",
        description="Workspace root holding one directory per package",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return upper


class IdentityConfig(BaseModel):
    """
    Fixed parts of every changelog entry.

    The maintainer address is derived per package as
    `<pkg>-maintainers@<maintainer_domain>`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    distribution: str = Field(default="UNRELEASED", description="Debian target distribution")
    urgency: str = Field(default="medium", description="Debian upload urgency")
    maintainer_domain: str = Field(default="devel.machine")
    debian_message: str = Field(default="New upstream release.")
    rpm_message: str = Field(default="New upstream release")


class FeatureConfig(BaseModel):
    """Which optional capabilities the package's build wants."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    lua: bool = Field(default=True, description="Link against the system Lua")
    ssl_backend: Optional[str] = Field(
        default=None,
        description="Pin an SSL backend (e.g. 'vendored-tongsuo'); None means probe",
    )
    resolver: Optional[str] = Field(
        default="c-ares",
        description="DNS resolver backend feature, or None to use the crate default",
    )
    extras: list[str] = Field(
        default_factory=list,
        description="Additional transport features, e.g. ['quic']",
    )

    @field_validator("resolver")
    @classmethod
    def _check_resolver(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in _RESOLVER_BACKENDS:
            raise ValueError(f"resolver must be one of {', '.join(_RESOLVER_BACKENDS)}")
        return value


class BuildConfig(BaseModel):
    """How the Build Invoker drives cargo for this package."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    profile: str = Field(default="release-lto", description="cargo --profile")
    cargo_packages: list[str] = Field(
        default_factory=list,
        description="cargo --package list; empty means just the package itself",
    )
    binaries: list[str] = Field(
        default_factory=list,
        description="Executables to install; empty means the cargo package list",
    )
    version_env: str = Field(
        default="G3_PACKAGE_VERSION",
        description="Environment variable carrying the stamped version",
    )
    toolchain: str = Field(default="cargo", description="Build tool executable")


class InstallConfig(BaseModel):
    """Staging-tree layout, all relative to the staging root."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    bin_dir: str = Field(default="usr/bin")
    unit_dir: str = Field(default="lib/systemd/system")
    license_dir: str = Field(default="usr/share/licenses")
    doc_dir: str = Field(default="usr/share/doc")
    license_files: list[str] = Field(
        default_factory=lambda: ["LICENSE", "LICENSE-BUNDLED", "LICENSE-FOREIGN"],
        description="Relative to the source root",
    )
    doc_paths: list[str] = Field(
        default_factory=list,
        description="Files or directories relative to the source root",
    )
    service_binary: Optional[str] = Field(
        default=None,
        description="Binary the unit runs; defaults to the package name",
    )
    service_unit: bool = Field(
        default=True,
        description="Generate and stage a systemd template unit; false for packages without one",
    )


class PackageConfig(BaseModel):
    """
    One releasable package. The path overrides are relative to the source
    root; when unset, the conventional layout is used:

        <pkg>/debian/changelog
        <pkg>/<pkg>.spec
        <pkg>/service/<pkg>@.service.in
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    changelog: Optional[str] = Field(default=None)
    spec_file: Optional[str] = Field(default=None)
    service_template: Optional[str] = Field(default=None)
    features: FeatureConfig = Field(default_factory=FeatureConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)


class G3ReleaseConfig(BaseModel):
    """
    Top-level config container.

    Only `global:` is required. Packages not listed under `packages:` are
    released with a default PackageConfig.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    packages: dict[str, PackageConfig] = Field(default_factory=dict)

    def package(self, name: str) -> PackageConfig:
        """Return the config for a package, falling back to defaults."""
        return self.packages.get(name, PackageConfig())
