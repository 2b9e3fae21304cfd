# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release pipeline: one packaging run from version string to staging tree.

    resolve features ─┐
    expand unit ──────┤  pure, can fail without touching anything
                      ▼
    sync metadata ─► build ─► write unit ─► assemble staging tree

Everything that can fail on static misconfiguration (missing SSL backend,
bad Lua version, template mismatch, missing anchors) is checked before the
first write. `prepare_release` is the metadata-only subset used when the
surrounding packaging tool drives the build itself.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from g3release.config.schema import G3ReleaseConfig
from g3release.logging.logger import get_logger
from g3release.release.build.invoker import BuildRequest, BuildResult, artifact_path, invoke_build
from g3release.release.features.resolver import FeatureProfile, PlatformHints, resolve_profile
from g3release.release.install.assembler import InstallPlan, InstallResult, assemble
from g3release.release.metadata.layout import PackageLayout
from g3release.release.metadata.synchronizer import SyncResult, sync_version
from g3release.release.units.generator import expand, write_unit
from g3release.release.versioning.version import VersionSpec

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class ReleaseResult:
    package: str
    version: VersionSpec
    profile: FeatureProfile
    sync: SyncResult
    build: BuildResult
    unit_path: Optional[Path]
    install: Optional[InstallResult]


def package_layout(config: G3ReleaseConfig, source_root: Path, package: str) -> PackageLayout:
    return PackageLayout.from_convention(source_root, package, config.package(package))


def prepare_release(
    config: G3ReleaseConfig,
    source_root: Path,
    package: str,
    version: VersionSpec,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> SyncResult:
    """Stamp the version into the package's changelog and spec only."""
    layout = package_layout(config, source_root, package)
    return sync_version(layout, version, now=now, identity=config.identity, dry_run=dry_run)


def run_release(
    config: G3ReleaseConfig,
    source_root: Path,
    package: str,
    version: VersionSpec,
    hints: PlatformHints,
    staging_root: Path,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> ReleaseResult:
    """
    Run the full packaging flow for one package.

    Raises:
        ConfigurationError, FormatError, TemplateError: Static problems,
            raised before any file is written.
        BuildError, InstallError: Failures of the external collaborators.
    """
    package_config = config.package(package)
    layout = package_layout(config, source_root, package)

    profile = resolve_profile(hints, package_config.features)
    _logger.info(
        "Resolved feature profile",
        extra={"package": package, "features": ",".join(profile.tokens())},
    )

    install = package_config.install
    service_binary = install.service_binary or package
    binary_install_path = f"/{install.bin_dir.strip('/')}/{service_binary}"
    unit_text = None
    if install.service_unit:
        unit_text = expand(layout.service_template, binary_install_path)
    else:
        _logger.info(
            "Service unit disabled, skipping unit generation",
            extra={"package": package, "template": str(layout.service_template)},
        )

    sync = sync_version(layout, version, now=now, identity=config.identity, dry_run=dry_run)

    build_config = package_config.build
    cargo_packages = tuple(build_config.cargo_packages) or (package,)
    build = invoke_build(
        BuildRequest(
            workspace=source_root,
            cargo_packages=cargo_packages,
            features=tuple(profile.tokens()),
            version=sync.rendered.build_env_var,
            profile=build_config.profile,
            version_env=build_config.version_env,
            toolchain=build_config.toolchain,
        ),
        dry_run=dry_run,
    )

    if dry_run:
        _logger.info("Dry run, skipping unit and staging", extra={"package": package})
        return ReleaseResult(package, version, profile, sync, build, None, None)

    unit_path = None
    if unit_text is not None:
        unit_path = write_unit(unit_text, layout.package_dir / "service", layout.unit_name)

    binaries = tuple(build_config.binaries) or cargo_packages
    plan = InstallPlan(
        package=package,
        staging_root=staging_root,
        binaries=tuple(artifact_path(source_root, build_config.profile, b) for b in binaries),
        unit_file=unit_path,
        license_files=tuple(source_root / name for name in install.license_files),
        doc_paths=tuple(source_root / name for name in install.doc_paths),
        bin_dir=install.bin_dir,
        unit_dir=install.unit_dir,
        license_dir=install.license_dir,
        doc_dir=install.doc_dir,
    )
    installed = assemble(plan)

    _logger.info(
        "Release assembled",
        extra={"package": package, "version": version.full, "staging_root": str(staging_root)},
    )
    return ReleaseResult(package, version, profile, sync, build, unit_path, installed)
