"""
Tests for the server version algebra.
"""

import pytest
from packaging.version import Version

from edgedb_portable.exceptions import FilterParseError, VersionParseError
from edgedb_portable.models.version import (
    Build,
    Filter,
    FilterMinor,
    MinorKind,
    MinorVersion,
    Specific,
)


class TestSpecificParse:
    """Tests for Specific.parse."""

    @pytest.mark.parametrize(
        "text, major, kind, value",
        [
            ("2.1", 2, MinorKind.MINOR, 1),
            ("3.0", 3, MinorKind.MINOR, 0),
            ("3.0-dev.7012", 3, MinorKind.DEV, 7012),
            ("1.0-alpha.3", 1, MinorKind.ALPHA, 3),
            ("1.0-beta.2", 1, MinorKind.BETA, 2),
            ("1.0-rc.4", 1, MinorKind.RC, 4),
            ("1-rc.4", 1, MinorKind.RC, 4),
        ],
    )
    def test_valid(self, text, major, kind, value):
        version = Specific.parse(text)
        assert version.major == major
        assert version.minor == MinorVersion(kind, value)

    @pytest.mark.parametrize(
        "text",
        ["", "2", "x.1", "2.1-rc.1", "2.0-gamma.1", "2.1.3", "2.0rc1", "v2.1", " 2.1", "2.1.post1", "1!2.1", "2.1+abc"],
    )
    def test_invalid(self, text):
        with pytest.raises(VersionParseError):
            Specific.parse(text)

    def test_str(self):
        assert str(Specific.parse("2.1")) == "2.1"
        assert str(Specific.parse("1-beta.2")) == "1.0-beta.2"
        assert str(Specific.parse("3.0-dev.7012")) == "3.0-dev.7012"


class TestSpecificOrdering:
    """Tests for ordering of specific versions."""

    def test_minor_kinds_ordered_by_stability(self):
        versions = [
            Specific.parse(v)
            for v in ["1.0", "1.0-rc.1", "1.0-dev.10", "1.0-beta.2", "1.0-alpha.5"]
        ]
        assert [str(v) for v in sorted(versions)] == [
            "1.0-dev.10",
            "1.0-alpha.5",
            "1.0-beta.2",
            "1.0-rc.1",
            "1.0",
        ]

    def test_major_wins(self):
        assert Specific.parse("2.0-dev.1") > Specific.parse("1.9")

    def test_numeric_not_lexicographic(self):
        assert Specific.parse("2.10") > Specific.parse("2.9")

    def test_agrees_with_pep440(self):
        texts = ["2.1", "1.0-rc.2", "2.0-dev.7012", "1-alpha.3", "1.0-beta.2", "2.0"]
        by_specific = sorted(texts, key=Specific.parse)
        by_pep440 = sorted(texts, key=Version)
        assert by_specific == by_pep440
        assert Specific.parse("2.0-dev.7012").pep440 == Version("2.0.dev7012")

    def test_legacy_form_equals_full_form(self):
        assert Specific.parse("1-alpha.3") == Specific.parse("1.0-alpha.3")


class TestFilter:
    """Tests for Filter parsing and matching."""

    @pytest.mark.parametrize("text", ["2", "2.1", "1.0-alpha.2", "1.0-beta.1", "1.0-rc.3"])
    def test_str_round_trip(self, text):
        assert str(Filter.parse(text)) == text

    @pytest.mark.parametrize(
        "text",
        ["", "nightly", "2.1-rc.1", "3.0-dev.1", "2.", "*", " 2", "2.1 ", "2.1rc1", "1-beta.2", "2.1.0"],
    )
    def test_invalid(self, text):
        with pytest.raises(FilterParseError):
            Filter.parse(text)

    def test_dev_minor_rejected(self):
        with pytest.raises(ValueError):
            FilterMinor(MinorKind.DEV, 1)

    @pytest.mark.parametrize(
        "flt, build, expected",
        [
            ("2", "2.0+abc", True),
            ("2", "2.5+abc", True),
            ("2", "2.0-dev.100+abc", True),
            ("2", "3.0+abc", False),
            ("2.1", "2.1+abc", True),
            ("2.1", "2.3+abc", True),
            ("2.1", "2.0+abc", False),
            ("2.1", "2.2-dev.5+abc", False),
            ("1.0-beta.2", "1.0-beta.1", False),
            ("1.0-beta.2", "1.0-beta.2", True),
            ("1.0-beta.2", "1.0-rc.1", True),
            ("1.0-beta.2", "1.0", True),
            ("1.0-beta.2", "1.0-alpha.9", False),
            ("1.0-rc.1", "1.2", True),
        ],
    )
    def test_matches(self, flt, build, expected):
        assert Filter.parse(flt).matches(Build.parse(build)) is expected


class TestBuild:
    """Tests for Build versions."""

    def test_metadata(self):
        build = Build.parse("2.1+a4b3c2d")
        assert build.metadata == "a4b3c2d"
        assert build.specific() == Specific.parse("2.1")
        assert str(build) == "2.1+a4b3c2d"

    def test_without_metadata(self):
        build = Build.parse("2.1")
        assert build.metadata is None

    def test_equality_by_text(self):
        assert Build.parse("2.1+a") == Build.parse("2.1+a")
        assert Build.parse("2.1+a") != Build.parse("2.1+b")

    @pytest.mark.parametrize("text", ["2.1+", "latest", "+abc", "2.1+a/b"])
    def test_invalid(self, text):
        with pytest.raises(VersionParseError) as exc_info:
            Build.parse(text)
        assert exc_info.value.text == text
