"""Tests for shared helpers."""

from datetime import UTC, date, datetime

from eduregistry.utils import age_on, is_country_code, normalize_email, start_of_day


class TestIsCountryCode:
    """Tests for ISO 3166-1 alpha-3 checks."""

    def test_valid_codes(self):
        assert is_country_code("NGA")
        assert is_country_code("GHA")

    def test_invalid_codes(self):
        assert not is_country_code("NG")
        assert not is_country_code("nga")
        assert not is_country_code("NGA1")
        assert not is_country_code("")


class TestNormalizeEmail:
    def test_strips_and_lowercases(self):
        assert normalize_email("  School@Example.COM ") == "school@example.com"


class TestAgeOn:
    """Tests for age computation."""

    def test_birthday_today(self):
        """Test that the birthday itself counts as a full year."""
        assert age_on(date(2015, 6, 15), date(2025, 6, 15)) == 10

    def test_day_before_birthday(self):
        assert age_on(date(2015, 6, 15), date(2025, 6, 14)) == 9

    def test_leap_day(self):
        """Test that a 29 February birthday completes on 1 March in common years."""
        assert age_on(date(2012, 2, 29), date(2025, 2, 28)) == 12
        assert age_on(date(2012, 2, 29), date(2025, 3, 1)) == 13


class TestStartOfDay:
    def test_midnight_utc(self):
        assert start_of_day(date(2015, 6, 15)) == datetime(2015, 6, 15, tzinfo=UTC)
