from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from employee_dedupe.schema import EmployeeField


@dataclass(frozen=True, slots=True)
class Salary:
    amount: float | None
    currency: str | None = None

    def is_empty(self) -> bool:
        return self.amount is None


@dataclass(frozen=True, slots=True)
class PerformanceRating:
    """Numeric rating on a 1-5 scale plus the source system's display text."""

    score: float | None = None
    text: str | None = None

    def is_empty(self) -> bool:
        return self.score is None and not (self.text or "").strip()


@dataclass(frozen=True, slots=True)
class EmployeeRecord:
    """Canonical representation of one personnel record.

    ``attributes`` keeps extra source columns that have no canonical field.
    ``merged_from`` and ``merged_at`` are only set on records produced by a merge.
    """

    id: str
    name: str | None = None
    title: str | None = None
    country: str | None = None
    salary: Salary | None = None
    comparatio: float | None = None
    performance_rating: PerformanceRating | None = None
    future_talent: bool | None = None
    time_in_role: float | None = None
    time_since_raise: float | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    merged_from: tuple[str, ...] = ()
    merged_at: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(slots=True)
class SimilarityResult:
    """Pairwise comparison of two records."""

    is_duplicate: bool
    aggregate: float
    per_field: dict[EmployeeField, float]
    reasons: list[str]


@dataclass(slots=True)
class MergeConflict:
    field: EmployeeField
    values: list[Any]
    suggestion: str = "manual_review"


@dataclass(slots=True)
class MergeSuggestion:
    base_record_id: str
    merged_record: EmployeeRecord
    conflicts: list[MergeConflict]
    action: str = "merge"


@dataclass(slots=True)
class FieldOption:
    """One distinct value of a field and the 1-based group positions holding it."""

    value: Any
    sources: list[int]


@dataclass(slots=True)
class DuplicateGroup:
    """Records judged to be the same person, valid only for the snapshot it came from."""

    id: str
    member_indices: list[int]
    member_ids: list[str]
    confidence: float
    suggested_merge: MergeSuggestion


@dataclass(slots=True)
class MergePreview:
    original_count: int
    merged_record: EmployeeRecord
    conflicts: list[MergeConflict]
    confidence: float


@dataclass(slots=True)
class Suggestion:
    group_id: str
    confidence: float
    preview: MergePreview
    action: str = "merge"
    auto_merge: bool = False


@dataclass(slots=True)
class MergeDecision:
    """Reviewer-approved merge; ``None`` falls back to the engine's suggestion."""

    merged_employee: EmployeeRecord | None = None


@dataclass(slots=True)
class MergeHistoryEntry:
    group_id: str
    original_records: list[EmployeeRecord]
    merged_record: EmployeeRecord
    merged_at: str


@dataclass(slots=True)
class DetectionSession:
    """Mutable state of one detect/merge conversation.

    Holds the groups of the most recent detection, the append-only merge log and
    the ids of groups that were already applied. Not safe for concurrent use.
    """

    groups: dict[str, DuplicateGroup] = field(default_factory=dict)
    merge_history: list[MergeHistoryEntry] = field(default_factory=list)
    applied_group_ids: set[str] = field(default_factory=set)


@dataclass(slots=True)
class DetectionResult:
    duplicate_groups: list[DuplicateGroup]
    total_duplicates: int
    affected_employees: int
    suggestions: list[Suggestion]
    session: DetectionSession


@dataclass(slots=True)
class CompletenessReport:
    score: float
    required_completeness: float
    optional_completeness: float
    missing_required: int
    missing_optional: int


@dataclass(slots=True)
class QualityReport:
    total_employees: int
    issues: list[str]
    warnings: list[str]
    quality_score: float
    grade: str
    completeness: CompletenessReport
    duplicate_ids: dict[str, int] = field(default_factory=dict)
