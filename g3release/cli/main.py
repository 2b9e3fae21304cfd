# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for g3release.

A single root command; every operation is a subcommand:

    g3release prepare g3proxy 1.7.22
    g3release features g3proxy --lua-version 5.4 --ssl-backend vendored-tongsuo
    g3release unit g3proxy --output-dir build/units
    g3release build g3proxy 1.7.22 --staging-dir debian/tmp
    g3release info

Global options (--config, --log-level, --dry-run, --source-root and the
probe overrides) are inherited by every subcommand through a parent parser.
"""

import argparse
import sys

from g3release.cli.commands import (
    handle_build,
    handle_features,
    handle_info,
    handle_prepare,
    handle_unit,
)
from g3release.cli.exit_codes import USER_ERROR


def _build_global_parser(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """
    Parent parser with the options every subcommand accepts (add_help=False).

    The root parser holds the real defaults. Subcommand copies are built with
    suppress_defaults=True so that an option given before the subcommand is
    not overwritten by the subcommand's own default.
    """

    def _default(value: object) -> object:
        return argparse.SUPPRESS if suppress_defaults else value

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=_default(None),
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=_default("INFO"),
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=_default(False),
        dest="dry_run",
        help="Compute everything but write nothing and run no build.",
    )
    parent.add_argument(
        "--source-root",
        type=str,
        default=_default(None),
        dest="source_root",
        help="Workspace root holding the package directories (overrides config).",
    )
    return parent



def _build_probe_parser() -> argparse.ArgumentParser:
    """Overrides for the build-host probe, for commands that resolve features."""
    probe = argparse.ArgumentParser(add_help=False)
    probe.add_argument(
        "--ssl-backend",
        type=str,
        default=None,
        dest="ssl_backend",
        help="Use this SSL backend instead of probing (e.g. openssl, vendored-tongsuo).",
    )
    probe.add_argument(
        "--lua-version",
        type=str,
        default=None,
        dest="lua_version",
        help="Use this Lua version instead of asking pkg-config (e.g. 5.4).",
    )
    probe.add_argument(
        "--rhel-major",
        type=int,
        default=None,
        dest="rhel_major",
        help="Package for this RHEL major version instead of reading /etc/os-release.",
    )
    probe.add_argument(
        "--extra",
        action="append",
        default=[],
        dest="extras",
        help="Additional transport feature (repeatable), e.g. --extra quic.",
    )
    return probe


def build_parser() -> argparse.ArgumentParser:
    root_options = _build_global_parser()
    parent = _build_global_parser(suppress_defaults=True)
    probe = _build_probe_parser()

    root_parser = argparse.ArgumentParser(
        prog="g3release",
        description="g3release: version and feature synchronizer for G3 packages.",
        parents=[root_options],
    )
    subparsers = root_parser.add_subparsers(dest="command")

    prepare = subparsers.add_parser(
        "prepare", parents=[parent], help="Stamp a version into changelog and spec."
    )
    prepare.add_argument("package", help="Package directory name, e.g. g3proxy.")
    prepare.add_argument("version", help="Version to release, MAJOR.MINOR.PATCH.")
    prepare.set_defaults(func=handle_prepare)

    features = subparsers.add_parser(
        "features", parents=[parent, probe], help="Resolve the cargo feature list."
    )
    features.add_argument("package", help="Package directory name.")
    features.set_defaults(func=handle_features)

    unit = subparsers.add_parser(
        "unit", parents=[parent], help="Expand the systemd template unit."
    )
    unit.add_argument("package", help="Package directory name.")
    unit.add_argument(
        "--output-dir",
        type=str,
        default=None,
        dest="output_dir",
        help="Directory for <package>@.service (default: <package>/service).",
    )
    unit.set_defaults(func=handle_unit)

    build = subparsers.add_parser(
        "build", parents=[parent, probe], help="Stamp, build, generate units and stage."
    )
    build.add_argument("package", help="Package directory name.")
    build.add_argument("version", help="Version to release, MAJOR.MINOR.PATCH.")
    build.add_argument(
        "--staging-dir",
        type=str,
        required=True,
        dest="staging_dir",
        help="Packaging staging root (debian/tmp, %%{buildroot}).",
    )
    build.set_defaults(func=handle_build)

    info = subparsers.add_parser(
        "info", parents=[parent], help="Display environment and config info."
    )
    info.set_defaults(func=handle_info)

    return root_parser


def main() -> None:
    """
    Main CLI entrypoint, referenced by [project.scripts] in pyproject.toml.

    With no subcommand, shows help and exits with USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
