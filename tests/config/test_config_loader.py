# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config loader, the entry point for all config loading.

We test:
  1. Valid YAML loads into a frozen, correct config object
  2. Missing required fields raise ConfigValidationError
  3. Unknown fields raise ConfigValidationError (extra="forbid")
  4. Broken YAML raises ConfigLoadError
  5. Running without a file gives the packaging defaults
"""

import textwrap
from pathlib import Path

import pytest

from g3release.config.exceptions import ConfigLoadError, ConfigValidationError
from g3release.config.loader import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG_VERSION,
    default_config,
    find_config,
    load_config,
)


class TestLoadValidConfig:
    def test_loads_minimal_valid_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.global_config.config_version == "1.0.0"
        assert config.global_config.log_level == "DEBUG"
        assert config.global_config.project_name == "g3"
        assert config.packages == {}

    def test_unlisted_package_gets_defaults(self, tmp_config_file: Path) -> None:
        package = load_config(tmp_config_file).package("g3proxy")
        assert package.build.profile == "release-lto"
        assert package.features.resolver == "c-ares"
        assert package.install.license_files == ["LICENSE", "LICENSE-BUNDLED", "LICENSE-FOREIGN"]
        assert package.install.service_unit is True

    def test_loads_package_sections(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
              source_root: "/src/g3"
            identity:
              distribution: "bookworm"
            packages:
              g3proxy:
                features:
                  ssl_backend: "vendored-tongsuo"
                  extras: ["quic"]
                build:
                  cargo_packages: ["g3proxy", "g3proxy-ctl", "g3proxy-ftp", "g3proxy-lua"]
                install:
                  doc_paths: ["g3proxy/doc"]
        """)
        config_file = tmp_path / "full.yaml"
        config_file.write_text(content, encoding="utf-8")

        config = load_config(config_file)
        assert config.global_config.source_root == "/src/g3"
        assert config.identity.distribution == "bookworm"
        g3proxy = config.package("g3proxy")
        assert g3proxy.features.ssl_backend == "vendored-tongsuo"
        assert g3proxy.features.extras == ["quic"]
        assert g3proxy.build.cargo_packages[-1] == "g3proxy-lua"
        assert g3proxy.install.doc_paths == ["g3proxy/doc"]


class TestLoadInvalidConfig:
    def test_missing_required_field_raises_validation_error(
        self, invalid_config_file: Path
    ) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(invalid_config_file)

    def test_unknown_field_raises_validation_error(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
            packages:
              g3proxy:
                biuld:
                  profile: "release"
        """)
        config_file = tmp_path / "unknown_field.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_wrong_type_raises_validation_error(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
            packages:
              g3proxy:
                features:
                  lua: "sometimes"
        """)
        config_file = tmp_path / "wrong_type.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_broken_yaml_raises_load_error(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(broken_yaml_file)

    def test_non_mapping_raises_load_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- just\n- a\n- list\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(config_file)

    def test_nonexistent_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(tmp_path / "does_not_exist.yaml")

    def test_directory_path_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(tmp_path)


class TestDefaultConfig:
    def test_defaults(self) -> None:
        config = default_config()
        assert config.global_config.config_version == DEFAULT_CONFIG_VERSION
        assert config.global_config.source_root == "."
        assert config.identity.distribution == "UNRELEASED"

    def test_arguments_are_applied(self) -> None:
        config = default_config(source_root="/work", log_level="debug")
        assert config.global_config.source_root == "/work"
        assert config.global_config.log_level == "DEBUG"


class TestConfigImmutability:
    def test_cannot_mutate_frozen_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        with pytest.raises(Exception):
            config.global_config.log_level = "ERROR"  # type: ignore[misc]

    def test_cannot_mutate_nested_section(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        with pytest.raises(Exception):
            config.identity.urgency = "high"  # type: ignore[misc]


class TestFindConfig:
    def test_finds_workspace_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('global:\n  config_version: "1.0.0"\n', encoding="utf-8")
        assert find_config(tmp_path) == config_file

    def test_no_workspace_config(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None
