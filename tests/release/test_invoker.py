# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the Build Invoker. The toolchain is never actually run.
"""

import subprocess
from pathlib import Path
from typing import Any

import pytest

from g3release.release.build import invoker
from g3release.release.build.invoker import (
    BuildRequest,
    artifact_path,
    build_command,
    build_env,
    invoke_build,
)
from g3release.release.exceptions import BuildError


@pytest.fixture()
def request_(tmp_path: Path) -> BuildRequest:
    return BuildRequest(
        workspace=tmp_path,
        cargo_packages=("g3proxy", "g3proxy-ctl"),
        features=("lua54", "vendored-tongsuo", "c-ares"),
        version="1.7.22-1",
    )


class _Recorder:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, command: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append((command, kwargs))
        return subprocess.CompletedProcess(command, self.returncode)


def test_command_line(request_: BuildRequest) -> None:
    assert build_command(request_) == [
        "cargo", "build", "--frozen", "--offline",
        "--profile", "release-lto", "--no-default-features",
        "--features", "lua54,vendored-tongsuo,c-ares",
        "--package", "g3proxy", "--package", "g3proxy-ctl",
    ]


def test_no_features_flag_when_empty(tmp_path: Path) -> None:
    request = BuildRequest(workspace=tmp_path, cargo_packages=("g3iploc",), features=(), version="1.0.0-1")
    assert "--features" not in build_command(request)


def test_env_carries_version(request_: BuildRequest) -> None:
    env = build_env(request_, base={"PATH": "/usr/bin"})
    assert env == {"PATH": "/usr/bin", "G3_PACKAGE_VERSION": "1.7.22-1"}


def test_successful_build(request_: BuildRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _Recorder()
    monkeypatch.setattr(invoker.subprocess, "run", recorder)

    result = invoke_build(request_)

    assert result.executed
    assert result.exit_code == 0
    command, kwargs = recorder.calls[0]
    assert command == build_command(request_)
    assert kwargs["cwd"] == str(request_.workspace)
    assert kwargs["env"]["G3_PACKAGE_VERSION"] == "1.7.22-1"


def test_failed_build_raises(request_: BuildRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(invoker.subprocess, "run", _Recorder(returncode=101))
    with pytest.raises(BuildError, match="exit code 101"):
        invoke_build(request_)


def test_missing_toolchain_raises(request_: BuildRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(command: list[str], **kwargs: Any) -> None:
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(invoker.subprocess, "run", missing)
    with pytest.raises(BuildError, match="not found"):
        invoke_build(request_)


def test_dry_run_does_not_execute(request_: BuildRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _Recorder()
    monkeypatch.setattr(invoker.subprocess, "run", recorder)

    result = invoke_build(request_, dry_run=True)

    assert not result.executed
    assert result.command == tuple(build_command(request_))
    assert recorder.calls == []


def test_artifact_path(tmp_path: Path) -> None:
    assert artifact_path(tmp_path, "release-lto", "g3proxy") == tmp_path / "target" / "release-lto" / "g3proxy"
