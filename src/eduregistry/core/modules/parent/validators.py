from datetime import date

from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.errors import ValidationError
from eduregistry.utils import age_on


def validate_child_age(level: SchoolLevel, date_of_birth: date, today: date) -> None:
    """Check the child's age fits the chosen level.

    Bounds (inclusive):
    - primary: 3 to 15
    - secondary: 10 to 24
    - tertiary: 16 and older

    Raises:
        ValidationError: If the age is outside the bounds for the level
    """
    if date_of_birth > today:
        raise ValidationError("Date of birth cannot be in the future")

    age = age_on(date_of_birth, today)
    if level == SchoolLevel.PRIMARY and not 3 <= age <= 15:
        raise ValidationError("Primary level students should typically be between 3 and 15 years old")
    if level == SchoolLevel.SECONDARY and not 10 <= age <= 24:
        raise ValidationError("Secondary level students should typically be between 10 and 24 years old")
    if level == SchoolLevel.TERTIARY and age < 16:
        raise ValidationError("Tertiary level students should be 16 years or older")
