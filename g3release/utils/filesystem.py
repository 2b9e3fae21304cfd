# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Safe filesystem operations for g3release.

Metadata files are rewritten in place, and a packaging job can be killed at
any moment (Ctrl-C, CI timeout, OOM). So a target file is never opened for
writing directly: new content goes to a temp file in the target's own
directory and is renamed over the original. Rename within one filesystem is
atomic on POSIX, so a reader sees either the old bytes or the new bytes.

`atomic_write_many` extends this to a set of files: every temp file is
written first, and only then are they renamed into place. A failure while
staging leaves every original untouched.
"""

import os
import shutil
import tempfile
from pathlib import Path

_TEMP_PREFIX = ".g3release_tmp_"
NEW_FILE_MODE = 0o644


def _stage(target_path: Path, content: str, encoding: str) -> Path:
    """
    Write content to a temp file next to target_path and return its path.

    newline="" keeps line endings exactly as given, so content read with
    newline="" round-trips byte for byte. The temp file takes the mode of
    the file it replaces, or NEW_FILE_MODE for a new file.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        newline="",
        dir=str(target_path.parent),
        prefix=_TEMP_PREFIX,
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        os.fsync(temp_fd.fileno())
        # mkstemp creates 0600; the rename must not change the target's mode.
        if target_path.exists():
            shutil.copymode(target_path, temp_path)
        else:
            os.chmod(temp_path, NEW_FILE_MODE)
    except BaseException:
        temp_fd.close()
        temp_path.unlink(missing_ok=True)
        raise
    temp_fd.close()
    return temp_path


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically.

    If anything goes wrong before the rename (disk full, permissions, crash),
    the target keeps its old content and the temp file is removed.

    Raises:
        OSError: If the write or rename fails.
    """
    atomic_write_many({target_path: content}, encoding=encoding)


def atomic_write_many(files: dict[Path, str], encoding: str = "utf-8") -> None:
    """
    Write several files, staging all of them before renaming any.

    Args:
        files: Mapping of target path to full new content.
        encoding: Text encoding to use for every file.

    Raises:
        OSError: If staging or renaming fails. Staged temp files that were
                 not renamed are always removed.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for target_path, content in files.items():
            staged.append((_stage(target_path, content, encoding), target_path))

        while staged:
            temp_path, target_path = staged[0]
            os.replace(temp_path, target_path)
            staged.pop(0)
    finally:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)


def read_text_exact(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file without newline translation.

    Raises:
        FileNotFoundError: If the path doesn't exist.
        IsADirectoryError: If the path is a directory.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    with file_path.open("r", encoding=encoding, newline="") as handle:
        return handle.read()


def safe_delete(file_path: Path) -> bool:
    """
    Delete a file if it exists. Returns whether anything was actually deleted.

    Raises:
        OSError: If the file exists but can't be deleted.
    """
    if file_path.exists():
        file_path.unlink()
        return True
    return False
