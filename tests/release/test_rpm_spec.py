# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the RPM spec model: parse, edit, serialize.
"""

from datetime import datetime
from pathlib import Path

import pytest

from g3release.release.exceptions import FormatError
from g3release.release.metadata.rpm_spec import (
    CHANGELOG_ANCHOR,
    RELEASE_ANCHOR,
    VERSION_ANCHOR,
    RpmChangelogStanza,
    format_rpm_date,
    parse_spec,
)
from g3release.release.versioning.version import VersionSpec


@pytest.fixture()
def spec_text(source_root: Path) -> str:
    return (source_root / "g3proxy" / "g3proxy.spec").read_text(encoding="utf-8")


def _stanza(label: str, body: str = "- New upstream release") -> RpmChangelogStanza:
    return RpmChangelogStanza(
        header=f"* Fri Aug 04 2023 G3proxy Maintainers <g3proxy-maintainers@devel.machine> - {label}",
        body=(body,),
    )


def test_untouched_spec_serializes_identically(spec_text: str) -> None:
    assert parse_spec(spec_text).serialize() == spec_text


def test_splits_at_changelog_marker(spec_text: str) -> None:
    spec = parse_spec(spec_text)
    assert spec.preamble[0] == "%if 0%{?rhel} > 7\n"
    assert all(CHANGELOG_ANCHOR not in line for line in spec.preamble)
    assert len(spec.changelog) == 1
    assert spec.changelog[0].label == "1.7.21-1"
    assert spec.changelog[0].body == ("- New upstream release",)


def test_multiple_stanzas_keep_their_bodies() -> None:
    text = (
        "Version: 1.0.0\nRelease: 1\n%changelog\n"
        "* Mon Aug 07 2023 A <a@b> - 1.0.1-1\n- two\n- lines\n\n\n"
        "* Fri Aug 04 2023 A <a@b> - 1.0.0-1\n- one\n"
    )
    spec = parse_spec(text)
    assert [s.label for s in spec.changelog] == ["1.0.1-1", "1.0.0-1"]
    assert spec.changelog[0].body == ("- two", "- lines")


def test_missing_changelog_is_a_format_error() -> None:
    with pytest.raises(FormatError) as excinfo:
        parse_spec("Name: g3proxy\nVersion: 1.0.0\n", "g3proxy/g3proxy.spec")
    assert excinfo.value.anchor == CHANGELOG_ANCHOR
    assert "g3proxy/g3proxy.spec" in str(excinfo.value)


class TestWithVersion:
    def test_rewrites_version_keeping_alignment(self, spec_text: str) -> None:
        spec = parse_spec(spec_text).with_version(VersionSpec.parse("1.7.22"))
        assert "Version:        1.7.22\n" in spec.preamble
        assert "Release:        1%{?dist}\n" in spec.preamble

    def test_release_counter_keeps_dist_suffix(self, spec_text: str) -> None:
        spec = parse_spec(spec_text).with_version(VersionSpec(1, 7, 22, release=3))
        assert "Release:        3%{?dist}\n" in spec.preamble

    def test_only_version_and_release_lines_change(self, spec_text: str) -> None:
        before = parse_spec(spec_text)
        after = before.with_version(VersionSpec(1, 7, 22, release=2))
        changed = [(a, b) for a, b in zip(before.preamble, after.preamble) if a != b]
        assert len(before.preamble) == len(after.preamble)
        assert [a.split(":")[0] for a, _ in changed] == ["Version", "Release"]

    def test_crlf_line_endings_are_preserved(self) -> None:
        text = "Name: x\r\nVersion: 1.0.0\r\nRelease: 1\r\n%changelog\r\n"
        spec = parse_spec(text).with_version(VersionSpec(1, 0, 1))
        assert spec.preamble == ("Name: x\r\n", "Version: 1.0.1\r\n", "Release: 1\r\n")

    def test_tag_names_are_case_insensitive(self) -> None:
        text = "name: x\nversion:  1.0.0\nRELEASE: 2%{?dist}\n%changelog\n"
        spec = parse_spec(text).with_version(VersionSpec(1, 0, 1, release=3))
        assert spec.preamble == ("name: x\n", "version:  1.0.1\n", "RELEASE: 3%{?dist}\n")

    def test_missing_version_is_a_format_error(self) -> None:
        spec = parse_spec("Name: x\nRelease: 1\n%changelog\n")
        with pytest.raises(FormatError) as excinfo:
            spec.with_version(VersionSpec(1, 0, 0))
        assert excinfo.value.anchor == VERSION_ANCHOR

    def test_missing_release_is_a_format_error(self) -> None:
        spec = parse_spec("Name: x\nVersion: 1.0.0\n%changelog\n")
        with pytest.raises(FormatError) as excinfo:
            spec.with_version(VersionSpec(1, 0, 0))
        assert excinfo.value.anchor == RELEASE_ANCHOR

    def test_macro_release_is_a_format_error(self) -> None:
        spec = parse_spec("Version: 1.0.0\nRelease: %{rel}%{?dist}\n%changelog\n")
        with pytest.raises(FormatError, match="release counter"):
            spec.with_version(VersionSpec(1, 0, 0))


class TestWithStanza:
    def test_new_stanza_goes_on_top(self, spec_text: str) -> None:
        spec = parse_spec(spec_text).with_stanza(_stanza("1.7.22-1"))
        assert [s.label for s in spec.changelog] == ["1.7.22-1", "1.7.21-1"]

    def test_same_label_is_replaced(self, spec_text: str) -> None:
        spec = parse_spec(spec_text).with_stanza(_stanza("1.7.21-1", "- Rebuilt"))
        assert len(spec.changelog) == 1
        assert spec.changelog[0].body == ("- Rebuilt",)

    def test_serialized_layout(self) -> None:
        spec = parse_spec("Version: 1.0.0\nRelease: 1\n\n%changelog\n* Fri Aug 04 2023 A <a@b> - 1.0.0-1\n- one\n")
        text = spec.with_stanza(_stanza("1.0.1-1")).serialize()
        assert text.endswith(
            "%changelog\n"
            "* Fri Aug 04 2023 G3proxy Maintainers <g3proxy-maintainers@devel.machine> - 1.0.1-1\n"
            "- New upstream release\n"
            "\n"
            "* Fri Aug 04 2023 A <a@b> - 1.0.0-1\n"
            "- one\n"
        )


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (datetime(2023, 8, 4), "Fri Aug 04 2023"),
        (datetime(2024, 1, 1), "Mon Jan 01 2024"),
        (datetime(2025, 12, 31), "Wed Dec 31 2025"),
    ],
)
def test_rpm_date_format(moment: datetime, expected: str) -> None:
    assert format_rpm_date(moment) == expected
