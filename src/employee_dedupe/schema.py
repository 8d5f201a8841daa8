from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class EmployeeField(StrEnum):
    NAME = "name"
    TITLE = "title"
    COUNTRY = "country"
    SALARY = "salary"
    COMPARATIO = "comparatio"
    PERFORMANCE_RATING = "performance_rating"
    FUTURE_TALENT = "future_talent"
    TIME_IN_ROLE = "time_in_role"
    TIME_SINCE_RAISE = "time_since_raise"


class FieldKind(StrEnum):
    NAME = "name"
    TEXT = "text"
    CATEGORICAL = "categorical"
    AMOUNT = "amount"
    NUMBER = "number"
    RATING = "rating"
    BOOLEAN = "boolean"
    MONTHS = "months"


class AuditLevel(StrEnum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class FieldDescriptor:
    """Describes how one canonical employee field is compared, merged and audited."""

    field: EmployeeField
    label: str
    kind: FieldKind
    audit: AuditLevel = AuditLevel.OPTIONAL
    conflict: bool = False

    def value_of(self, record: object) -> Any:
        return getattr(record, self.field.value, None)


FIELD_DESCRIPTORS: dict[EmployeeField, FieldDescriptor] = {
    descriptor.field: descriptor
    for descriptor in (
        FieldDescriptor(EmployeeField.NAME, "Full Name", FieldKind.NAME, AuditLevel.REQUIRED, conflict=True),
        FieldDescriptor(EmployeeField.TITLE, "Job Title", FieldKind.TEXT, AuditLevel.REQUIRED, conflict=True),
        FieldDescriptor(
            EmployeeField.COUNTRY, "Country", FieldKind.CATEGORICAL, AuditLevel.RECOMMENDED, conflict=True
        ),
        FieldDescriptor(EmployeeField.SALARY, "Salary", FieldKind.AMOUNT, AuditLevel.REQUIRED, conflict=True),
        FieldDescriptor(EmployeeField.COMPARATIO, "Comparatio", FieldKind.NUMBER),
        FieldDescriptor(
            EmployeeField.PERFORMANCE_RATING,
            "Performance Rating",
            FieldKind.RATING,
            AuditLevel.RECOMMENDED,
            conflict=True,
        ),
        FieldDescriptor(EmployeeField.FUTURE_TALENT, "Future Talent", FieldKind.BOOLEAN),
        FieldDescriptor(EmployeeField.TIME_IN_ROLE, "Time in Role", FieldKind.MONTHS),
        FieldDescriptor(EmployeeField.TIME_SINCE_RAISE, "Time Since Raise", FieldKind.MONTHS),
    )
}

CANONICAL_FIELDS: tuple[EmployeeField, ...] = tuple(FIELD_DESCRIPTORS)
CONFLICT_FIELDS: tuple[EmployeeField, ...] = tuple(
    field for field, descriptor in FIELD_DESCRIPTORS.items() if descriptor.conflict
)
REQUIRED_FIELDS: tuple[EmployeeField, ...] = tuple(
    field for field, descriptor in FIELD_DESCRIPTORS.items() if descriptor.audit is AuditLevel.REQUIRED
)
RECOMMENDED_FIELDS: tuple[EmployeeField, ...] = tuple(
    field for field, descriptor in FIELD_DESCRIPTORS.items() if descriptor.audit is AuditLevel.RECOMMENDED
)


def descriptor_for(field: EmployeeField | str) -> FieldDescriptor:
    return FIELD_DESCRIPTORS[EmployeeField(field)]


def field_value(record: object, field: EmployeeField | str) -> Any:
    return descriptor_for(field).value_of(record)


def is_empty(value: object) -> bool:
    """Single definition of a missing value across scoring, merging and auditing.

    ``None`` and blank strings are empty. Composite values (salary, rating)
    report their own emptiness through an ``is_empty`` method.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    check = getattr(value, "is_empty", None)
    if callable(check):
        return bool(check())
    return False
