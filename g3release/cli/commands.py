# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the g3release CLI.

Each handler loads config, bootstraps, does its work and returns an exit
code. Release errors are caught here, at the command boundary, and turned
into one structured error record plus the matching exit code:

    ConfigurationError, config file errors   CONFIG_ERROR
    FormatError, TemplateError               VALIDATION_ERROR
    BuildError, InstallError, OSError        RUNTIME_ERROR
    bad version argument                     USER_ERROR

No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path
from typing import Callable

from g3release.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)
from g3release.config.exceptions import ConfigError
from g3release.config.loader import default_config, find_config, load_config
from g3release.config.schema import G3ReleaseConfig
from g3release.logging.logger import get_logger
from g3release.release.exceptions import (
    BuildError,
    ConfigurationError,
    FormatError,
    InstallError,
    TemplateError,
)
from g3release.release.features.probe import probe_platform_hints
from g3release.release.features.resolver import PlatformHints
from g3release.release.versioning.version import VersionSpec
from g3release.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, G3ReleaseConfig | None, Path | None, logging.Logger]:
    """
    Shared setup: load config, run bootstrap, resolve the source root.

    Returns (exit_code, config, source_root, logger). If exit_code is not
    SUCCESS the caller returns it immediately.
    """
    logger = get_logger(f"g3release.cli.{command_name}", log_level=args.log_level)

    config_path = Path(args.config) if args.config is not None else None
    if config_path is None and args.source_root is not None:
        config_path = find_config(Path(args.source_root))

    try:
        if config_path is not None:
            config = load_config(config_path)
        else:
            config = default_config(log_level=args.log_level)
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, None, logger

    source_root = bootstrap(config.global_config)
    if args.source_root is not None:
        source_root = Path(args.source_root).resolve()

    return SUCCESS, config, source_root, logger


def _parse_version(args: argparse.Namespace, logger: logging.Logger) -> VersionSpec | None:
    try:
        return VersionSpec.parse(args.version)
    except ValueError as err:
        logger.error("Invalid version", extra={"version": args.version, "error": str(err)})
        return None


def _hints_from_args(args: argparse.Namespace) -> PlatformHints:
    return probe_platform_hints(
        ssl_backend=args.ssl_backend,
        lua_version=args.lua_version,
        rhel_major=args.rhel_major,
        extras=frozenset(args.extras),
    )


def _run_guarded(
    command_name: str,
    logger: logging.Logger,
    action: Callable[[], int],
) -> int:
    """Run a command body, mapping release errors to exit codes."""
    try:
        return action()
    except ConfigurationError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR
    except FormatError as err:
        logger.error(
            "Metadata format error",
            extra={
                "command": command_name,
                "error": str(err),
                "path": err.path,
                "anchor": err.anchor,
            },
        )
        return VALIDATION_ERROR
    except TemplateError as err:
        logger.error("Template error", extra={"command": command_name, "error": str(err)})
        return VALIDATION_ERROR
    except (BuildError, InstallError) as err:
        logger.error(f"{command_name} failed", extra={"command": command_name, "error": str(err)})
        return RUNTIME_ERROR
    except OSError as err:
        logger.error(
            f"{command_name} failed",
            extra={"command": command_name, "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR


def handle_prepare(args: argparse.Namespace) -> int:
    """Stamp a version into the package's Debian changelog and RPM spec."""
    exit_code, config, source_root, logger = _load_and_bootstrap(args, "prepare")
    if exit_code != SUCCESS:
        return exit_code

    version = _parse_version(args, logger)
    if version is None:
        return USER_ERROR

    def _action() -> int:
        from g3release.release.pipeline import prepare_release

        result = prepare_release(
            config, source_root, args.package, version, dry_run=args.dry_run
        )
        logger.info(
            "Prepare complete",
            extra={
                "package": result.package,
                "version": result.version.full,
                "written": result.written,
            },
        )
        return SUCCESS

    return _run_guarded("prepare", logger, _action)


def handle_features(args: argparse.Namespace) -> int:
    """Resolve and report the cargo feature list for a package."""
    exit_code, config, source_root, logger = _load_and_bootstrap(args, "features")
    if exit_code != SUCCESS:
        return exit_code

    def _action() -> int:
        from g3release.release.features.resolver import resolve_profile
        from g3release.release.pipeline import package_layout

        package_layout(config, source_root, args.package)
        profile = resolve_profile(_hints_from_args(args), config.package(args.package).features)
        logger.info(
            "Resolved features",
            extra={
                "package": args.package,
                "features": ",".join(profile.tokens()),
                "capabilities": profile.capabilities(),
                "pkgconfig": profile.pkgconfig_package,
            },
        )
        return SUCCESS

    return _run_guarded("features", logger, _action)


def handle_unit(args: argparse.Namespace) -> int:
    """Expand the package's systemd template unit."""
    exit_code, config, source_root, logger = _load_and_bootstrap(args, "unit")
    if exit_code != SUCCESS:
        return exit_code

    def _action() -> int:
        from g3release.release.pipeline import package_layout
        from g3release.release.units.generator import expand, write_unit

        layout = package_layout(config, source_root, args.package)
        install = config.package(args.package).install
        binary = install.service_binary or args.package
        text = expand(layout.service_template, f"/{install.bin_dir.strip('/')}/{binary}")

        if args.dry_run:
            logger.info("Dry run, unit not written", extra={"unit": layout.unit_name})
            return SUCCESS

        output_dir = (
            Path(args.output_dir) if args.output_dir is not None else layout.package_dir / "service"
        )
        write_unit(text, output_dir, layout.unit_name)
        return SUCCESS

    return _run_guarded("unit", logger, _action)


def handle_build(args: argparse.Namespace) -> int:
    """Run the full pipeline: stamp, build, generate unit, stage."""
    exit_code, config, source_root, logger = _load_and_bootstrap(args, "build")
    if exit_code != SUCCESS:
        return exit_code

    version = _parse_version(args, logger)
    if version is None:
        return USER_ERROR

    def _action() -> int:
        from g3release.release.pipeline import run_release

        result = run_release(
            config,
            source_root,
            args.package,
            version,
            hints=_hints_from_args(args),
            staging_root=Path(args.staging_dir),
            dry_run=args.dry_run,
        )
        logger.info(
            "Build complete",
            extra={
                "package": result.package,
                "version": result.version.full,
                "features": ",".join(result.profile.tokens()),
                "staged": len(result.install.installed) if result.install else 0,
            },
        )
        return SUCCESS

    return _run_guarded("build", logger, _action)


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = get_logger("g3release.cli.info", log_level=args.log_level)

    from g3release import __version__
    from g3release.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "g3release_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "tools": system_info.tools,
            "config": args.config,
        },
    )
    return SUCCESS
