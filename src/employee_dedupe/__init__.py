"""Duplicate detection and merge resolution for employee records."""

from employee_dedupe.config import ClusteringStrategy, MatchingConfig
from employee_dedupe.engine import DetectionEngine
from employee_dedupe.errors import DedupeError, GroupNotFoundError
from employee_dedupe.models import (
    DetectionResult,
    DetectionSession,
    DuplicateGroup,
    EmployeeRecord,
    MergeDecision,
    PerformanceRating,
    Salary,
)
from employee_dedupe.schema import EmployeeField

__all__ = [
    "ClusteringStrategy",
    "MatchingConfig",
    "DetectionEngine",
    "DedupeError",
    "GroupNotFoundError",
    "DetectionResult",
    "DetectionSession",
    "DuplicateGroup",
    "EmployeeRecord",
    "MergeDecision",
    "PerformanceRating",
    "Salary",
    "EmployeeField",
]
