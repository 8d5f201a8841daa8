from __future__ import annotations

from typing import Protocol, Sequence

from employee_dedupe.models import EmployeeRecord, MergeConflict, MergeSuggestion, SimilarityResult


class RecordScorer(Protocol):
    """Pairwise similarity between two records."""

    def score(self, left: EmployeeRecord, right: EmployeeRecord) -> SimilarityResult:
        ...


class DuplicateClusterer(Protocol):
    """Partition records into disjoint groups of >= 2 member indices."""

    def cluster(self, records: Sequence[EmployeeRecord]) -> list[list[int]]:
        ...


class MergeResolver(Protocol):
    """Turn one duplicate group into a merged record plus conflicts."""

    def merge(self, records: Sequence[EmployeeRecord]) -> EmployeeRecord:
        ...

    def find_conflicts(self, records: Sequence[EmployeeRecord]) -> list[MergeConflict]:
        ...

    def suggest(self, records: Sequence[EmployeeRecord]) -> MergeSuggestion:
        ...
