"""Global sequential counters behind hierarchical registration numbers."""

import re
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field


class CounterType(StrEnum):
    """Entity types that receive a registration number."""

    COUNTRY = "country"
    SCHOOL = "school"
    STUDENT = "student"
    INDIVIDUAL = "individual"
    CHILD = "child"


@dataclass(frozen=True)
class CounterSpec:
    """Per-type configuration of the generic counter engine.

    One counter per entity type; all schools (students, ...) share one
    incrementing integer regardless of their parent.
    """

    counter_type: CounterType
    cache_key: str
    tag: str  # Segment tag placed before the sequence, e.g. SCH
    separator: str  # Between the parent registration number and the tag
    pattern: re.Pattern[str]  # Captures the trailing sequence of a registration number
    collection: str
    field: str  # Path of the registration number inside a document
    nested: bool = False  # Registration numbers live in embedded sub-documents

    def compose(self, parent: str, sequence: int) -> str:
        """Build a registration number, e.g. NGA1 + 3 -> NGA1/SCH3."""
        return f"{parent}{self.separator}{self.tag}{sequence}"

    def parse_sequence(self, registration_number: str | None) -> int:
        """Extract the trailing sequence, 0 if the number does not match."""
        if not registration_number:
            return 0
        match = self.pattern.search(registration_number)
        return int(match.group(1)) if match else 0


COUNTER_SPECS: dict[CounterType, CounterSpec] = {
    CounterType.COUNTRY: CounterSpec(
        counter_type=CounterType.COUNTRY,
        cache_key="global:countryCounter",
        tag="",
        separator="",  # NGA1: alpha-3 code directly followed by the sequence
        pattern=re.compile(r"^[A-Z]+(\d+)$"),
        collection="countries",
        field="registration_number",
    ),
    CounterType.SCHOOL: CounterSpec(
        counter_type=CounterType.SCHOOL,
        cache_key="global:schoolCounter",
        tag="SCH",
        separator="/",
        pattern=re.compile(r"SCH(\d+)$"),
        collection="schools",
        field="registration_number",
    ),
    CounterType.STUDENT: CounterSpec(
        counter_type=CounterType.STUDENT,
        cache_key="global:studentCounter",
        tag="STU",
        separator="/",
        pattern=re.compile(r"STU(\d+)$"),
        collection="students",
        field="registration_number",
    ),
    CounterType.INDIVIDUAL: CounterSpec(
        counter_type=CounterType.INDIVIDUAL,
        cache_key="global:individualCounter",
        tag="IND",
        separator="/",
        pattern=re.compile(r"IND(\d+)$"),
        collection="individuals",
        field="registration_number",
    ),
    CounterType.CHILD: CounterSpec(
        counter_type=CounterType.CHILD,
        cache_key="global:childCounter",
        tag="CHD",
        separator="/",
        pattern=re.compile(r"CHD(\d+)$"),
        collection="parents",
        field="children.registration_number",
        nested=True,
    ),
}

# Parents before dependents: school, individual and child numbers embed the
# country number, student numbers embed the school number.
INIT_ORDER: tuple[CounterType, ...] = (
    CounterType.COUNTRY,
    CounterType.SCHOOL,
    CounterType.INDIVIDUAL,
    CounterType.CHILD,
    CounterType.STUDENT,
)


class CounterHealth(BaseModel):
    """Diagnostic snapshot of one cached counter."""

    healthy: bool = Field(..., description="Whether the cached value is present and valid")
    value: int | None = Field(None, description="Last issued sequence number")
    error: str | None = Field(None, description="Reason the counter is unhealthy")
