from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from employee_dedupe.engine import DetectionEngine
from employee_dedupe.errors import ReviewError
from employee_dedupe.models import (
    DetectionResult,
    DuplicateGroup,
    EmployeeRecord,
    FieldOption,
    MergeDecision,
    PerformanceRating,
    Salary,
)
from employee_dedupe.schema import FIELD_DESCRIPTORS, EmployeeField, FieldKind
from employee_dedupe.steps.merge import GapFillMergeResolver, apply_selections

logger = logging.getLogger(__name__)


class ReviewAction(StrEnum):
    MERGE = "merge"
    KEEP_SEPARATE = "keep_separate"
    SKIP = "skip"


@dataclass(slots=True)
class ReviewDecision:
    group_id: str
    action: ReviewAction
    merged_employee: EmployeeRecord | None = None


@dataclass(slots=True)
class ReviewSummary:
    total_groups: int
    merged_groups: int
    kept_separate: int
    skipped: int
    decisions: list[ReviewDecision] = field(default_factory=list)


def similarity_band(confidence: float) -> str:
    if confidence >= 0.9:
        return "high"
    if confidence >= 0.7:
        return "medium"
    return "low"


def format_value(value: Any, kind: FieldKind) -> str:
    if value is None:
        return "Not specified"
    if kind is FieldKind.AMOUNT and isinstance(value, Salary):
        if value.amount is None:
            return "Not specified"
        amount = f"{value.amount:,.0f}"
        return f"{amount} {value.currency}" if value.currency else amount
    if kind is FieldKind.RATING and isinstance(value, PerformanceRating):
        return value.text or (f"{value.score:g}" if value.score is not None else "Not specified")
    if kind is FieldKind.NUMBER and isinstance(value, (int, float)):
        return f"{value:.2f}"
    if kind is FieldKind.BOOLEAN:
        return "Yes" if value else "No"
    return str(value)


class ReviewSession:
    """Walks the groups of one detection and records a decision per group.

    Decisions are only collected here; ``apply`` executes the merges through
    the engine in one pass. A later decision for the same group replaces the
    earlier one.
    """

    def __init__(
        self,
        engine: DetectionEngine,
        result: DetectionResult,
        resolver: GapFillMergeResolver | None = None,
    ) -> None:
        self._engine = engine
        self._result = result
        self._resolver = resolver or GapFillMergeResolver()
        self._position = 0
        self._decisions: dict[str, ReviewDecision] = {}

    @property
    def groups(self) -> list[DuplicateGroup]:
        return self._result.duplicate_groups

    @property
    def position(self) -> int:
        return self._position

    @property
    def finished(self) -> bool:
        return self._position >= len(self.groups)

    def current(self) -> DuplicateGroup | None:
        if self.finished:
            return None
        return self.groups[self._position]

    def next(self) -> DuplicateGroup | None:
        if self._position < len(self.groups):
            self._position += 1
        return self.current()

    def previous(self) -> DuplicateGroup | None:
        if self._position > 0:
            self._position -= 1
        return self.current()

    def field_options(
        self,
        records: Sequence[EmployeeRecord],
        group: DuplicateGroup | None = None,
    ) -> dict[EmployeeField, list[FieldOption]]:
        group = group or self._require_current()
        members = [records[idx] for idx in group.member_indices]
        return {field: self._resolver.field_options(members, field) for field in FIELD_DESCRIPTORS}

    def merge(self, selections: Mapping[EmployeeField | str, Any] | None = None) -> DuplicateGroup | None:
        group = self._require_current()
        merged = group.suggested_merge.merged_record
        if selections:
            merged = apply_selections(merged, selections)
        self._record(ReviewDecision(group_id=group.id, action=ReviewAction.MERGE, merged_employee=merged))
        return self.next()

    def keep_separate(self) -> DuplicateGroup | None:
        group = self._require_current()
        self._record(ReviewDecision(group_id=group.id, action=ReviewAction.KEEP_SEPARATE))
        return self.next()

    def skip(self) -> DuplicateGroup | None:
        self._require_current()
        return self.next()

    def decisions(self) -> list[ReviewDecision]:
        return list(self._decisions.values())

    def summary(self) -> ReviewSummary:
        decisions = self.decisions()
        merged = sum(1 for decision in decisions if decision.action is ReviewAction.MERGE)
        kept = sum(1 for decision in decisions if decision.action is ReviewAction.KEEP_SEPARATE)
        return ReviewSummary(
            total_groups=len(self.groups),
            merged_groups=merged,
            kept_separate=kept,
            skipped=len(self.groups) - merged - kept,
            decisions=decisions,
        )

    def apply(self, records: Sequence[EmployeeRecord]) -> list[EmployeeRecord]:
        updated = list(records)
        for decision in self._decisions.values():
            if decision.action is not ReviewAction.MERGE:
                continue
            updated = self._engine.execute_merge(
                decision.group_id,
                updated,
                MergeDecision(merged_employee=decision.merged_employee),
                session=self._result.session,
            )
        return updated

    def _record(self, decision: ReviewDecision) -> None:
        logger.debug("Review decision %s for group %s", decision.action, decision.group_id)
        self._decisions[decision.group_id] = decision

    def _require_current(self) -> DuplicateGroup:
        group = self.current()
        if group is None:
            raise ReviewError("no duplicate group is under review")
        return group
