# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Install Assembler: places build outputs into the packaging staging tree.

    <staging>/usr/bin/<binary>                       0755
    <staging>/lib/systemd/system/<pkg>@.service      0644
    <staging>/usr/share/licenses/<pkg>/<license>     0644
    <staging>/usr/share/doc/<pkg>/<doc>              files or whole directories

The staging root is what debian/rules hands to dh_install or what rpmbuild
calls %{buildroot}. Every source is checked before the first copy, and if a
copy fails midway the files created so far are removed again: the staging
tree ends up complete or unchanged.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from g3release.logging.logger import get_logger
from g3release.release.exceptions import InstallError
from g3release.utils.filesystem import safe_delete

_logger: logging.Logger = get_logger(__name__)

BINARY_MODE = 0o755
DATA_MODE = 0o644


@dataclass(frozen=True)
class InstallPlan:
    package: str
    staging_root: Path
    binaries: tuple[Path, ...] = ()
    unit_file: Optional[Path] = None
    license_files: tuple[Path, ...] = ()
    doc_paths: tuple[Path, ...] = ()
    bin_dir: str = "usr/bin"
    unit_dir: str = "lib/systemd/system"
    license_dir: str = "usr/share/licenses"
    doc_dir: str = "usr/share/doc"


@dataclass
class InstallResult:
    staging_root: Path
    installed: list[Path] = field(default_factory=list)


def _copies(plan: InstallPlan) -> list[tuple[Path, Path, int]]:
    """(source, destination, mode) for every file and doc tree in the plan."""
    root = plan.staging_root
    copies = [(src, root / plan.bin_dir / src.name, BINARY_MODE) for src in plan.binaries]
    if plan.unit_file is not None:
        copies.append((plan.unit_file, root / plan.unit_dir / plan.unit_file.name, DATA_MODE))
    license_root = root / plan.license_dir / plan.package
    copies.extend((src, license_root / src.name, DATA_MODE) for src in plan.license_files)
    doc_root = root / plan.doc_dir / plan.package
    copies.extend((src, doc_root / src.name, DATA_MODE) for src in plan.doc_paths)
    return copies


def _copy_one(source: Path, destination: Path, mode: int, created: list[Path]) -> None:
    """Copy a file or directory tree, recording each file as soon as it exists."""
    if source.is_dir():
        for item in sorted(source.rglob("*")):
            if item.is_file():
                _copy_one(item, destination / item.relative_to(source), mode, created)
        return

    if destination.exists():
        raise InstallError(f"Refusing to overwrite staged file {destination}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    created.append(destination)
    shutil.copyfile(source, destination)
    destination.chmod(mode)


def assemble(plan: InstallPlan) -> InstallResult:
    """
    Copy everything in the plan into the staging tree.

    Raises:
        InstallError: A source is missing or a copy failed. No new files are
                      left behind in either case.
    """
    copies = _copies(plan)
    missing = [str(src) for src, _, _ in copies if not src.exists()]
    if missing:
        raise InstallError(f"Cannot stage {plan.package}: missing {', '.join(missing)}")

    result = InstallResult(staging_root=plan.staging_root)
    try:
        for source, destination, mode in copies:
            _copy_one(source, destination, mode, result.installed)
    except (OSError, InstallError) as err:
        for path in result.installed:
            safe_delete(path)
        _logger.warning(
            "Rolled back partial staging after failure",
            extra={"package": plan.package, "removed": len(result.installed)},
        )
        if isinstance(err, InstallError):
            raise
        raise InstallError(f"Staging {plan.package} failed: {err}") from err

    _logger.info(
        "Staged package files",
        extra={
            "package": plan.package,
            "staging_root": str(plan.staging_root),
            "file_count": len(result.installed),
        },
    )
    return result
