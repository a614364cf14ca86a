"""Tests for shared parsing utilities."""

from __future__ import annotations

import pytest

from moisa.infrastructure.common.parsers import parse_int


class TestParseInt:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0", 0),
            ("42", 42),
            (" 7 ", 7),
            ("+3", 3),
            ("-1", -1),
            ("007", 7),
        ],
    )
    def test_plain_decimal(self, raw: str, expected: int) -> None:
        assert parse_int(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "  ", "x", "1.5", "2_0", "1_000", "٣", "２", "1e3", "0x10", "5a"],
    )
    def test_anything_else_is_unset(self, raw: str | None) -> None:
        assert parse_int(raw) is None
