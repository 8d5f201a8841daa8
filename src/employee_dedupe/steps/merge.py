from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from employee_dedupe.models import EmployeeRecord, FieldOption, MergeConflict, MergeSuggestion
from employee_dedupe.schema import CANONICAL_FIELDS, CONFLICT_FIELDS, EmployeeField, field_value, is_empty

logger = logging.getLogger(__name__)


def completeness(record: EmployeeRecord) -> float:
    """Fraction of the canonical fields that hold a value."""
    filled = sum(1 for field in CANONICAL_FIELDS if not is_empty(field_value(record, field)))
    return filled / len(CANONICAL_FIELDS)


class GapFillMergeResolver:
    """Merge a duplicate group by filling gaps in its most complete record.

    The base keeps every value it has. Remaining members are visited in group
    order and may only fill fields that are still empty, so the first member
    holding a value wins. This is not a majority vote; disagreements are
    reported separately by ``find_conflicts``.
    """

    def choose_base(self, records: Sequence[EmployeeRecord]) -> EmployeeRecord:
        return records[self._base_position(records)]

    def merge(self, records: Sequence[EmployeeRecord]) -> EmployeeRecord:
        if not records:
            raise ValueError("cannot merge an empty group")
        base_position = self._base_position(records)
        base = records[base_position]

        updates: dict[str, Any] = {}
        attributes = dict(base.attributes)
        for position, other in enumerate(records):
            if position == base_position:
                continue
            for field in CANONICAL_FIELDS:
                current = updates.get(field.value, field_value(base, field))
                candidate = field_value(other, field)
                if is_empty(current) and not is_empty(candidate):
                    updates[field.value] = candidate
            for key, candidate in other.attributes.items():
                if is_empty(attributes.get(key)) and not is_empty(candidate):
                    attributes[key] = candidate

        if updates:
            logger.debug("Filled %s on base %s from other members", sorted(updates), base.id)
        return replace(base, attributes=attributes, **updates)

    def find_conflicts(self, records: Sequence[EmployeeRecord]) -> list[MergeConflict]:
        conflicts: list[MergeConflict] = []
        for field in CONFLICT_FIELDS:
            distinct: list[Any] = []
            for record in records:
                value = field_value(record, field)
                if is_empty(value) or value in distinct:
                    continue
                distinct.append(value)
            if len(distinct) > 1:
                conflicts.append(MergeConflict(field=field, values=distinct))
        return conflicts

    def suggest(self, records: Sequence[EmployeeRecord]) -> MergeSuggestion:
        base = self.choose_base(records)
        return MergeSuggestion(
            base_record_id=base.id,
            merged_record=self.merge(records),
            conflicts=self.find_conflicts(records),
        )

    def field_options(self, records: Sequence[EmployeeRecord], field: EmployeeField | str) -> list[FieldOption]:
        """Distinct values of one field with the 1-based group positions that hold them."""
        options: list[FieldOption] = []
        for position, record in enumerate(records, start=1):
            value = field_value(record, field)
            if is_empty(value):
                value = None
            for option in options:
                if option.value == value:
                    option.sources.append(position)
                    break
            else:
                options.append(FieldOption(value=value, sources=[position]))
        return options

    def _base_position(self, records: Sequence[EmployeeRecord]) -> int:
        best_position = 0
        best_score = -1.0
        for position, record in enumerate(records):
            score = completeness(record)
            if score > best_score:
                best_position, best_score = position, score
        return best_position


def apply_selections(record: EmployeeRecord, selections: Mapping[EmployeeField | str, Any]) -> EmployeeRecord:
    """Override canonical fields with reviewer-chosen values."""
    updates = {EmployeeField(field).value: value for field, value in selections.items()}
    return replace(record, **updates)
