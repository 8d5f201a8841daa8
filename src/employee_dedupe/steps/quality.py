from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from employee_dedupe.models import CompletenessReport, EmployeeRecord, QualityReport
from employee_dedupe.schema import CANONICAL_FIELDS, REQUIRED_FIELDS, field_value, is_empty

logger = logging.getLogger(__name__)

_GRADES = (
    (0.95, "A+"),
    (0.9, "A"),
    (0.85, "B+"),
    (0.8, "B"),
    (0.75, "C+"),
    (0.7, "C"),
    (0.6, "D"),
)


class QualityAuditor:
    """Data-quality scan over a full record set, independent of deduplication.

    Missing name, title or positive salary is an issue; missing performance
    rating or country is a warning. ``quality_score`` charges one point per
    issue and half a point per warning, relative to the record count.
    """

    def __init__(self, unknown_country: str = "unknown") -> None:
        self._unknown_country = unknown_country.lower()

    def audit(self, records: Sequence[EmployeeRecord]) -> QualityReport:
        issues: list[str] = []
        warnings: list[str] = []

        for record in records:
            if is_empty(record.name):
                issues.append(f"Employee {record.id}: Missing name")
            if is_empty(record.title):
                issues.append(f"Employee {record.display_name}: Missing job title")
            if not _has_positive_salary(record):
                issues.append(f"Employee {record.display_name}: Invalid salary")

            if is_empty(record.performance_rating):
                warnings.append(f"Employee {record.display_name}: Missing performance rating")
            if not _is_known_country(record.country, self._unknown_country):
                warnings.append(f"Employee {record.display_name}: Missing or unknown country")

        if records:
            quality_score = max(0.0, 1.0 - (len(issues) + 0.5 * len(warnings)) / len(records))
        else:
            quality_score = 1.0

        id_counts = Counter(record.id for record in records)
        duplicate_ids = {record_id: count for record_id, count in id_counts.items() if count > 1}

        logger.info(
            "Audited %d records: %d issues, %d warnings, score %.3f",
            len(records),
            len(issues),
            len(warnings),
            quality_score,
        )
        return QualityReport(
            total_employees=len(records),
            issues=issues,
            warnings=warnings,
            quality_score=quality_score,
            grade=quality_grade(quality_score),
            completeness=assess_completeness(records),
            duplicate_ids=duplicate_ids,
        )


def assess_completeness(records: Sequence[EmployeeRecord]) -> CompletenessReport:
    optional_fields = [field for field in CANONICAL_FIELDS if field not in REQUIRED_FIELDS]
    total_required = len(records) * len(REQUIRED_FIELDS)
    total_optional = len(records) * len(optional_fields)

    completed_required = sum(
        1 for record in records for field in REQUIRED_FIELDS if not is_empty(field_value(record, field))
    )
    completed_optional = sum(
        1 for record in records for field in optional_fields if not is_empty(field_value(record, field))
    )

    required_score = completed_required / total_required if total_required else 1.0
    optional_score = completed_optional / total_optional if total_optional else 1.0
    return CompletenessReport(
        score=required_score * 0.8 + optional_score * 0.2,
        required_completeness=required_score,
        optional_completeness=optional_score,
        missing_required=total_required - completed_required,
        missing_optional=total_optional - completed_optional,
    )


def quality_grade(score: float) -> str:
    for floor, grade in _GRADES:
        if score >= floor:
            return grade
    return "F"


def _has_positive_salary(record: EmployeeRecord) -> bool:
    salary = record.salary
    if salary is None or salary.amount is None:
        return False
    try:
        return float(salary.amount) > 0
    except (TypeError, ValueError):
        return False


def _is_known_country(country: object, unknown: str) -> bool:
    if not isinstance(country, str) or is_empty(country):
        return False
    return country.strip().lower() != unknown
