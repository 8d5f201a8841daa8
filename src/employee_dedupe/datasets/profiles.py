from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from employee_dedupe.models import EmployeeRecord, PerformanceRating, Salary

# Flat CSV layout read and written by the CLI.
EMPLOYEE_COLUMNS = [
    "ID",
    "NAME",
    "TITLE",
    "COUNTRY",
    "SALARY_AMOUNT",
    "SALARY_CURRENCY",
    "COMPARATIO",
    "PERFORMANCE_SCORE",
    "PERFORMANCE_TEXT",
    "FUTURE_TALENT",
    "TIME_IN_ROLE",
    "TIME_SINCE_RAISE",
]

PROVENANCE_COLUMNS = ["MERGED_FROM", "MERGED_AT"]

_TRUE_VALUES = {"true", "yes", "y", "1"}
_FALSE_VALUES = {"false", "no", "n", "0"}


def record_from_row(row: Mapping[str, Any]) -> EmployeeRecord:
    """Build a record from a flat row; malformed numbers become ``None``."""
    amount = _number(row.get("SALARY_AMOUNT"))
    currency = _text(row.get("SALARY_CURRENCY"))
    score = _number(row.get("PERFORMANCE_SCORE"))
    rating_text = _text(row.get("PERFORMANCE_TEXT"))
    merged_from = _text(row.get("MERGED_FROM"))

    known = set(EMPLOYEE_COLUMNS) | set(PROVENANCE_COLUMNS)
    return EmployeeRecord(
        id=str(row["ID"]).strip(),
        name=_text(row.get("NAME")),
        title=_text(row.get("TITLE")),
        country=_text(row.get("COUNTRY")),
        salary=Salary(amount=amount, currency=currency) if amount is not None else None,
        comparatio=_number(row.get("COMPARATIO")),
        performance_rating=(
            PerformanceRating(score=score, text=rating_text)
            if score is not None or rating_text is not None
            else None
        ),
        future_talent=_flag(row.get("FUTURE_TALENT")),
        time_in_role=_number(row.get("TIME_IN_ROLE")),
        time_since_raise=_number(row.get("TIME_SINCE_RAISE")),
        attributes={key: value for key, value in row.items() if key not in known and key is not None},
        merged_from=tuple(merged_from.split("|")) if merged_from else (),
        merged_at=_text(row.get("MERGED_AT")),
    )


def record_to_row(record: EmployeeRecord) -> dict[str, Any]:
    salary = record.salary
    rating = record.performance_rating
    return {
        "ID": record.id,
        "NAME": record.name or "",
        "TITLE": record.title or "",
        "COUNTRY": record.country or "",
        "SALARY_AMOUNT": _cell(salary.amount if salary else None),
        "SALARY_CURRENCY": (salary.currency or "") if salary else "",
        "COMPARATIO": _cell(record.comparatio),
        "PERFORMANCE_SCORE": _cell(rating.score if rating else None),
        "PERFORMANCE_TEXT": (rating.text or "") if rating else "",
        "FUTURE_TALENT": "" if record.future_talent is None else str(record.future_talent).lower(),
        "TIME_IN_ROLE": _cell(record.time_in_role),
        "TIME_SINCE_RAISE": _cell(record.time_since_raise),
        "MERGED_FROM": "|".join(record.merged_from),
        "MERGED_AT": record.merged_at or "",
        **record.attributes,
    }


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any) -> float | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return float(text.replace(",", ""))
    except ValueError:
        return None


def _flag(value: Any) -> bool | None:
    text = _text(value)
    if text is None:
        return None
    lowered = text.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _cell(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if isinstance(value, float) and value.is_integer() else str(value)
