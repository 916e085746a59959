"""Tests for child age validation."""

from datetime import date

import pytest

from eduregistry.core.modules.parent.validators import validate_child_age
from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.errors import ValidationError

TODAY = date(2025, 6, 15)


class TestValidateChildAge:
    """Tests for level-specific age bounds."""

    def test_primary_bounds(self):
        """Test that primary accepts ages 3 to 15."""
        validate_child_age(SchoolLevel.PRIMARY, date(2022, 6, 15), TODAY)  # 3
        validate_child_age(SchoolLevel.PRIMARY, date(2010, 6, 16), TODAY)  # 14, turns 15 tomorrow
        with pytest.raises(ValidationError, match="between 3 and 15"):
            validate_child_age(SchoolLevel.PRIMARY, date(2022, 6, 16), TODAY)  # 2

    def test_secondary_bounds(self):
        """Test that secondary accepts ages 10 to 24."""
        validate_child_age(SchoolLevel.SECONDARY, date(2015, 6, 15), TODAY)  # 10
        validate_child_age(SchoolLevel.SECONDARY, date(2001, 1, 1), TODAY)  # 24
        with pytest.raises(ValidationError, match="between 10 and 24"):
            validate_child_age(SchoolLevel.SECONDARY, date(2000, 1, 1), TODAY)  # 25

    def test_tertiary_minimum(self):
        """Test that tertiary requires 16 or older."""
        validate_child_age(SchoolLevel.TERTIARY, date(2009, 6, 15), TODAY)  # 16
        with pytest.raises(ValidationError, match="16 years or older"):
            validate_child_age(SchoolLevel.TERTIARY, date(2009, 6, 16), TODAY)  # 15

    def test_future_birth_date_rejected(self):
        """Test that dates of birth after today are rejected."""
        with pytest.raises(ValidationError, match="future"):
            validate_child_age(SchoolLevel.PRIMARY, date(2025, 6, 16), TODAY)
