"""
Tests for phone normalization.
"""

import pytest

from webinar_wrapper.webinars.phone import normalize_phone


class TestNormalizePhone:
    def test_ten_digits_get_default_country_code(self) -> None:
        assert normalize_phone("5551234567") == "+15551234567"

    def test_longer_numbers_keep_their_country_code(self) -> None:
        assert normalize_phone("915551234567") == "+915551234567"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("(555) 123-4567", "+15551234567"),
            ("+91 98765 43210", "+919876543210"),
            ("+1-555-123-4567", "+15551234567"),
            (5551234567, "+15551234567"),
        ],
    )
    def test_strips_formatting(self, raw: object, expected: str) -> None:
        assert normalize_phone(raw) == expected

    def test_configured_country_code(self) -> None:
        assert normalize_phone("9876543210", default_country_code="+91") == "+919876543210"

    def test_short_numbers_are_prefixed(self) -> None:
        assert normalize_phone("12345") == "+112345"

    @pytest.mark.parametrize("raw", [None, "", "   ", "n/a", "+"])
    def test_no_digits_gives_empty_string(self, raw: object) -> None:
        assert normalize_phone(raw) == ""

    @pytest.mark.parametrize("raw", ["+915551234567", "44 20 7946 0958", "5551234567"])
    def test_idempotent(self, raw: str) -> None:
        once = normalize_phone(raw)
        assert normalize_phone(once) == once
