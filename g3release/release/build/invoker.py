# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build Invoker: runs the workspace build with the resolved feature set.

    G3_PACKAGE_VERSION=1.7.22-1 cargo build --frozen --offline \
        --profile release-lto --no-default-features \
        --features lua54,vendored-tongsuo,c-ares \
        --package g3proxy --package g3proxy-ctl ...

--frozen/--offline because packaging builds run from a vendored source
tarball with no network. The version variable is what the binaries print for
`--version`, so it must be the exact string stamped into the metadata.

No timeout is applied: whatever runs the packaging job owns that.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from g3release.logging.logger import get_logger
from g3release.release.exceptions import BuildError

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildRequest:
    workspace: Path
    cargo_packages: tuple[str, ...]
    features: tuple[str, ...]
    version: str
    profile: str = "release-lto"
    version_env: str = "G3_PACKAGE_VERSION"
    toolchain: str = "cargo"


@dataclass(frozen=True)
class BuildResult:
    command: tuple[str, ...]
    exit_code: int
    executed: bool


def build_command(request: BuildRequest) -> list[str]:
    """The toolchain argv for a request."""
    command = [
        request.toolchain,
        "build",
        "--frozen",
        "--offline",
        "--profile",
        request.profile,
        "--no-default-features",
    ]
    if request.features:
        command.extend(["--features", ",".join(request.features)])
    for package in request.cargo_packages:
        command.extend(["--package", package])
    return command


def build_env(request: BuildRequest, base: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Inherited environment plus the version variable."""
    env = dict(os.environ if base is None else base)
    env[request.version_env] = request.version
    return env


def artifact_path(workspace: Path, profile: str, binary: str) -> Path:
    """Where cargo leaves a binary for a profile."""
    return workspace / "target" / profile / binary


def invoke_build(request: BuildRequest, dry_run: bool = False) -> BuildResult:
    """
    Run the build, streaming toolchain output to our stdout/stderr.

    Raises:
        BuildError: The toolchain is missing or exited non-zero.
    """
    command = build_command(request)
    _logger.info(
        "Invoking build",
        extra={
            "command": " ".join(command),
            "version_env": request.version_env,
            "version": request.version,
            "dry_run": dry_run,
        },
    )
    if dry_run:
        return BuildResult(command=tuple(command), exit_code=0, executed=False)

    try:
        completed = subprocess.run(
            command,
            cwd=str(request.workspace),
            env=build_env(request),
            check=False,
        )
    except FileNotFoundError as err:
        raise BuildError(f"Build tool {request.toolchain!r} not found on PATH") from err

    if completed.returncode != 0:
        raise BuildError(
            f"Build failed with exit code {completed.returncode}: {' '.join(command)}"
        )

    _logger.info("Build finished", extra={"exit_code": completed.returncode})
    return BuildResult(command=tuple(command), exit_code=completed.returncode, executed=True)
