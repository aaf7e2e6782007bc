"""Tests for the shared data model."""

import pytest

from statfier.models import UNKNOWN_BUG_TYPE, UNKNOWN_LINE, ToolKind, Violation, parse_line


class TestParseLine:
    """Test reported line number normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("12", 12),
            (" 10 ", 10),
            ("+7", 7),
            (42, 42),
            ("-3", -3),
            ("2147483647", 2147483647),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_line(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, True, "", "abc", "1_0", "١٢", "1.5", "2147483648", "0x10"],
    )
    def test_invalid_is_unknown(self, raw):
        assert parse_line(raw) == UNKNOWN_LINE


class TestViolation:
    """Test violation construction."""

    def test_create_normalizes(self):
        violation = Violation.create("/s/A.java", "1_0", None, ToolKind.CODENAVI)

        assert violation.line == UNKNOWN_LINE
        assert violation.bug_type == UNKNOWN_BUG_TYPE
        assert str(violation) == "[CodeNavi] UNKNOWN at line -1"
