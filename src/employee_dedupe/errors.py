from __future__ import annotations


class DedupeError(Exception):
    """Base class for every error raised by employee_dedupe."""


class ConfigError(DedupeError):
    """Matching configuration is inconsistent or out of range."""


class GroupNotFoundError(DedupeError):
    def __init__(self, group_id: str) -> None:
        super().__init__(f"Duplicate group not found: {group_id}")
        self.group_id = group_id


class GroupAlreadyMergedError(DedupeError):
    def __init__(self, group_id: str) -> None:
        super().__init__(f"Duplicate group was already merged: {group_id}")
        self.group_id = group_id


class StaleGroupError(DedupeError):
    """The record list no longer identifies every member of a duplicate group exactly once."""

    def __init__(self, group_id: str, missing_ids: list[str], ambiguous_ids: list[str] | None = None) -> None:
        ambiguous_ids = ambiguous_ids or []
        problems = []
        if missing_ids:
            problems.append(f"missing records: {', '.join(missing_ids)}")
        if ambiguous_ids:
            problems.append(f"ids shared by several records: {', '.join(ambiguous_ids)}")
        super().__init__(f"Duplicate group {group_id} is stale; {'; '.join(problems)}")
        self.group_id = group_id
        self.missing_ids = missing_ids
        self.ambiguous_ids = ambiguous_ids


class ReviewError(DedupeError):
    """A review decision was recorded with no group under review."""
