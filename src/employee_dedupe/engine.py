from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timezone
from itertools import combinations

from employee_dedupe.config import MatchingConfig
from employee_dedupe.errors import GroupAlreadyMergedError, GroupNotFoundError, StaleGroupError
from employee_dedupe.interfaces import DuplicateClusterer, MergeResolver, RecordScorer
from employee_dedupe.models import (
    DetectionResult,
    DetectionSession,
    DuplicateGroup,
    EmployeeRecord,
    MergeDecision,
    MergeHistoryEntry,
    MergePreview,
    Suggestion,
)
from employee_dedupe.steps.clustering import build_clusterer
from employee_dedupe.steps.merge import GapFillMergeResolver
from employee_dedupe.steps.scoring import WeightedRecordScorer

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _merged_id() -> str:
    return f"merged_{uuid.uuid4().hex}"


class DetectionEngine:
    """Duplicate detection and merge execution over caller-owned record lists.

    The engine holds configuration and collaborators only. Groups and merge
    history live in a ``DetectionSession`` passed into each call, and record
    lists are never modified in place.
    """

    def __init__(
        self,
        config: MatchingConfig | None = None,
        scorer: RecordScorer | None = None,
        clusterer: DuplicateClusterer | None = None,
        resolver: MergeResolver | None = None,
        clock: Callable[[], str] = _utc_now,
        id_factory: Callable[[], str] = _merged_id,
    ) -> None:
        self._config = config or MatchingConfig()
        self._scorer = scorer or WeightedRecordScorer(self._config)
        self._clusterer = clusterer or build_clusterer(self._scorer, self._config.strategy)
        self._resolver = resolver or GapFillMergeResolver()
        self._clock = clock
        self._id_factory = id_factory

    @property
    def config(self) -> MatchingConfig:
        return self._config

    def detect_duplicates(
        self,
        records: Sequence[EmployeeRecord],
        session: DetectionSession | None = None,
    ) -> DetectionResult:
        session = session if session is not None else DetectionSession()
        run_token = uuid.uuid4().hex[:8]

        groups: list[DuplicateGroup] = []
        for member_indices in self._clusterer.cluster(records):
            members = [records[idx] for idx in member_indices]
            groups.append(
                DuplicateGroup(
                    id=f"dup_{run_token}_{member_indices[0]}",
                    member_indices=list(member_indices),
                    member_ids=[member.id for member in members],
                    confidence=self.group_confidence(members),
                    suggested_merge=self._resolver.suggest(members),
                )
            )

        session.groups = {group.id: group for group in groups}
        suggestions = [self._suggestion(group) for group in groups]
        affected = sum(len(group.member_indices) for group in groups)
        logger.info(
            "Detected %d duplicate groups covering %d of %d records",
            len(groups),
            affected,
            len(records),
        )
        return DetectionResult(
            duplicate_groups=groups,
            total_duplicates=len(groups),
            affected_employees=affected,
            suggestions=suggestions,
            session=session,
        )

    def group_confidence(self, members: Sequence[EmployeeRecord]) -> float:
        """Mean aggregate similarity over every distinct pair of members."""
        scores = [self._scorer.score(left, right).aggregate for left, right in combinations(members, 2)]
        if not scores:
            return 0.0
        return sum(scores) / len(scores)

    def execute_merge(
        self,
        group_id: str,
        records: Sequence[EmployeeRecord],
        decision: MergeDecision | None = None,
        *,
        session: DetectionSession,
    ) -> list[EmployeeRecord]:
        """Replace a group's members with one merged record and log the merge.

        Returns a new list: members are removed and the merged record, carrying a
        fresh id plus ``merged_from``/``merged_at`` provenance, is appended.
        """
        group = session.groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        if group_id in session.applied_group_ids:
            raise GroupAlreadyMergedError(group_id)

        positions = self._locate_members(group, records)
        originals = [records[position] for position in positions]

        merged = group.suggested_merge.merged_record
        if decision is not None and decision.merged_employee is not None:
            merged = decision.merged_employee

        merged_at = self._clock()
        updated = list(records)
        for position in sorted(positions, reverse=True):
            del updated[position]
        updated.append(
            replace(
                merged,
                id=self._fresh_id(records),
                merged_from=tuple(record.id for record in originals),
                merged_at=merged_at,
            )
        )

        session.applied_group_ids.add(group_id)
        session.merge_history.append(
            MergeHistoryEntry(
                group_id=group_id,
                original_records=originals,
                merged_record=merged,
                merged_at=merged_at,
            )
        )
        logger.info("Merged group %s: %d records -> 1", group_id, len(originals))
        return updated

    def merge_history(self, session: DetectionSession) -> list[MergeHistoryEntry]:
        return list(session.merge_history)

    def _fresh_id(self, records: Sequence[EmployeeRecord]) -> str:
        taken = {record.id for record in records}
        record_id = self._id_factory()
        while record_id in taken:
            record_id = self._id_factory()
        return record_id

    def _suggestion(self, group: DuplicateGroup) -> Suggestion:
        suggestion = group.suggested_merge
        return Suggestion(
            group_id=group.id,
            confidence=group.confidence,
            preview=MergePreview(
                original_count=len(group.member_indices),
                merged_record=suggestion.merged_record,
                conflicts=suggestion.conflicts,
                confidence=group.confidence,
            ),
            action=suggestion.action,
            auto_merge=group.confidence >= self._config.auto_merge_threshold,
        )

    def _locate_members(self, group: DuplicateGroup, records: Sequence[EmployeeRecord]) -> list[int]:
        in_place = all(
            idx < len(records) and records[idx].id == member_id
            for idx, member_id in zip(group.member_indices, group.member_ids)
        )
        if in_place:
            return list(group.member_indices)

        # an earlier merge shifted the list; fall back to ids, each of which
        # must name exactly one record
        id_counts = Counter(record.id for record in records)
        member_counts = Counter(group.member_ids)
        missing = [member_id for member_id in member_counts if id_counts[member_id] == 0]
        ambiguous = sorted(
            member_id for member_id in member_counts if id_counts[member_id] > 1 or member_counts[member_id] > 1
        )
        if missing or ambiguous:
            raise StaleGroupError(group.id, missing, ambiguous)
        positions_by_id = {record.id: position for position, record in enumerate(records)}
        logger.debug("Group %s re-located by id after the record list changed", group.id)
        return [positions_by_id[member_id] for member_id in group.member_ids]

