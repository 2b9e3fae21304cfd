# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for g3release tests.

The main fixture is a miniature workspace with one package, g3proxy, laid
out the way the real repository lays it out: a Debian changelog holding the
previous release, an RPM spec, a service template and the license files.
"""

import textwrap
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

CHANGELOG_TEXT = textwrap.dedent("""\
    g3proxy (1.7.21-1) UNRELEASED; urgency=medium

      * New upstream release.

     -- G3proxy Maintainers <g3proxy-maintainers@devel.machine>  Fri, 04 Aug 2023 10:15:30 +0800
""")

SPEC_TEXT = textwrap.dedent("""\
    %if 0%{?rhel} > 7
    %undefine _debugsource_packages
    %define pkgconfig_real pkgconf
    %endif

    %define build_profile release-lto

    Name:           g3proxy
    Version:        1.7.21
    Release:        1%{?dist}
    Summary:        Generic proxy for G3 Project

    License:        Apache-2.0
    Source0:        %{name}-%{version}.tar.xz

    BuildRequires:  gcc, make, %{pkgconfig_real}, capnproto
    Requires:       systemd

    %description
    Generic proxy for G3 Project


    %build
    G3_PACKAGE_VERSION="%{version}-%{release}"
    export G3_PACKAGE_VERSION


    %files
    %{_bindir}/g3proxy
    /lib/systemd/system/g3proxy@.service
    %license LICENSE


    %changelog
    * Fri Aug 04 2023 G3proxy Maintainers <g3proxy-maintainers@devel.machine> - 1.7.21-1
    - New upstream release
""")

UNIT_TEMPLATE_TEXT = textwrap.dedent("""\
    [Unit]
    Description=G3 generic proxy %i
    After=syslog.target network-online.target
    Wants=network-online.target

    [Service]
    Type=exec
    RuntimeDirectory=g3proxy
    ExecStart=@BIN_PATH@ -c /etc/g3proxy/%i/main.yaml -s -G %i
    ExecReload=/bin/kill -HUP $MAINPID
    KillMode=mixed
    Restart=on-failure

    [Install]
    WantedBy=multi-user.target
""")


@pytest.fixture()
def fixed_now() -> datetime:
    """A Friday, so the expected dates match the previous release's format."""
    return datetime(2023, 8, 4, 10, 15, 30, tzinfo=timezone(timedelta(hours=8)))


@pytest.fixture()
def source_root(tmp_path: Path) -> Path:
    """A workspace holding the g3proxy package metadata and license files."""
    root = tmp_path / "workspace"
    package_dir = root / "g3proxy"
    (package_dir / "debian").mkdir(parents=True)
    (package_dir / "service").mkdir()

    (package_dir / "debian" / "changelog").write_text(CHANGELOG_TEXT, encoding="utf-8")
    (package_dir / "g3proxy.spec").write_text(SPEC_TEXT, encoding="utf-8")
    (package_dir / "service" / "g3proxy@.service.in").write_text(
        UNIT_TEMPLATE_TEXT, encoding="utf-8"
    )
    for name in ("LICENSE", "LICENSE-BUNDLED", "LICENSE-FOREIGN"):
        (root / name).write_text(f"{name} text\n", encoding="utf-8")
    return root


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "INFO"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
