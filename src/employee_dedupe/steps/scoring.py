from __future__ import annotations

import logging
from collections.abc import Callable

from employee_dedupe.config import MatchingConfig
from employee_dedupe.models import EmployeeRecord, PerformanceRating, Salary, SimilarityResult
from employee_dedupe.schema import EmployeeField, FieldKind, descriptor_for
from employee_dedupe.steps.similarity import (
    categorical_equality,
    name_similarity,
    numeric_proximity,
    text_similarity,
)

logger = logging.getLogger(__name__)


class WeightedRecordScorer:
    """Weighted multi-field similarity between two employee records.

    The aggregate is ``sum(weight * field_score)`` over the configured weights.
    A pair is a duplicate when the aggregate reaches ``duplicate_threshold`` or
    the name alone reaches ``name_override_threshold``.
    """

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self._config = config or MatchingConfig()
        self._comparators: dict[FieldKind, Callable[[object, object], float]] = {
            FieldKind.NAME: self._compare_names,
            FieldKind.TEXT: text_similarity,
            FieldKind.CATEGORICAL: categorical_equality,
            FieldKind.AMOUNT: self._compare_amounts,
            FieldKind.NUMBER: self._compare_amounts,
            FieldKind.MONTHS: self._compare_amounts,
            FieldKind.RATING: self._compare_amounts,
            FieldKind.BOOLEAN: _compare_flags,
        }

    @property
    def config(self) -> MatchingConfig:
        return self._config

    def score(self, left: EmployeeRecord, right: EmployeeRecord) -> SimilarityResult:
        per_field: dict[EmployeeField, float] = {}
        aggregate = 0.0
        for field, weight in self._config.weights.items():
            descriptor = descriptor_for(field)
            comparator = self._comparators[descriptor.kind]
            field_score = comparator(_comparable(descriptor.value_of(left)), _comparable(descriptor.value_of(right)))
            per_field[field] = field_score
            aggregate += weight * field_score

        aggregate = min(1.0, max(0.0, aggregate))
        name_score = per_field.get(EmployeeField.NAME, 0.0)
        is_duplicate = (
            aggregate >= self._config.duplicate_threshold
            or name_score >= self._config.name_override_threshold
        )
        if is_duplicate:
            logger.debug(
                "Duplicate pair %s/%s aggregate=%.3f name=%.3f", left.id, right.id, aggregate, name_score
            )
        return SimilarityResult(
            is_duplicate=is_duplicate,
            aggregate=aggregate,
            per_field=per_field,
            reasons=self._reasons(per_field),
        )

    def _reasons(self, per_field: dict[EmployeeField, float]) -> list[str]:
        reasons: list[str] = []
        if per_field.get(EmployeeField.NAME, 0.0) >= self._config.name_override_threshold:
            reasons.append("Names are very similar")
        if per_field.get(EmployeeField.TITLE, 0.0) >= self._config.title_reason_threshold:
            reasons.append("Job titles match closely")
        if per_field.get(EmployeeField.COUNTRY, 0.0) >= 1.0:
            reasons.append("Same country/location")
        if per_field.get(EmployeeField.SALARY, 0.0) >= self._config.salary_reason_threshold:
            reasons.append("Similar salary ranges")
        if not reasons:
            reasons.append("Low overall similarity")
        return reasons

    def _compare_names(self, left: object, right: object) -> float:
        return name_similarity(
            left,
            right,
            max_token_edits=self._config.token_max_edits,
            token_match_score=self._config.token_match_score,
        )

    def _compare_amounts(self, left: object, right: object) -> float:
        return numeric_proximity(left, right, self._config.salary_bands, self._config.salary_floor)


def _comparable(value: object) -> object:
    if isinstance(value, Salary):
        return value.amount
    if isinstance(value, PerformanceRating):
        return value.score
    return value


def _compare_flags(left: object, right: object) -> float:
    if not isinstance(left, bool) or not isinstance(right, bool):
        return 0.0
    return 1.0 if left == right else 0.0
