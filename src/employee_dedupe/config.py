from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from typing import Any

from employee_dedupe.errors import ConfigError
from employee_dedupe.schema import EmployeeField


class ClusteringStrategy(StrEnum):
    CONNECTED_COMPONENTS = "connected-components"
    REPRESENTATIVE = "representative"


DEFAULT_WEIGHTS: Mapping[EmployeeField, float] = {
    EmployeeField.NAME: 0.5,
    EmployeeField.TITLE: 0.2,
    EmployeeField.COUNTRY: 0.2,
    EmployeeField.SALARY: 0.1,
}

# (max relative difference, score), checked in order.
DEFAULT_SALARY_BANDS: tuple[tuple[float, float], ...] = ((0.1, 0.9), (0.2, 0.7), (0.5, 0.5))


@dataclass(frozen=True)
class MatchingConfig:
    """Weights and thresholds for scoring, clustering and merge suggestions.

    Weights are not re-normalized when a field is missing on one side, so sparse
    records score lower than complete ones.
    """

    weights: Mapping[EmployeeField, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    duplicate_threshold: float = 0.8
    name_override_threshold: float = 0.9
    token_max_edits: int = 1
    token_match_score: float = 0.9
    salary_bands: tuple[tuple[float, float], ...] = DEFAULT_SALARY_BANDS
    salary_floor: float = 0.2
    title_reason_threshold: float = 0.8
    salary_reason_threshold: float = 0.8
    strategy: ClusteringStrategy = ClusteringStrategy.CONNECTED_COMPONENTS
    auto_merge_threshold: float = 0.95

    def __post_init__(self) -> None:
        try:
            weights = {EmployeeField(key): float(value) for key, value in self.weights.items()}
            strategy = ClusteringStrategy(self.strategy)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if any(value < 0 for value in weights.values()):
            raise ConfigError("field weights must be non-negative")
        if sum(weights.values()) > 1.0 + 1e-9:
            raise ConfigError("field weights must sum to at most 1.0")
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "strategy", strategy)

        for name in (
            "duplicate_threshold",
            "name_override_threshold",
            "token_match_score",
            "salary_floor",
            "title_reason_threshold",
            "salary_reason_threshold",
            "auto_merge_threshold",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")
        if self.token_max_edits < 0:
            raise ConfigError("token_max_edits must be non-negative")

        bands = tuple((float(limit), float(score)) for limit, score in self.salary_bands)
        limits = [limit for limit, _ in bands]
        if limits != sorted(limits):
            raise ConfigError("salary_bands must be ordered by increasing relative difference")
        object.__setattr__(self, "salary_bands", bands)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "MatchingConfig":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        try:
            return cls(**mapping)
        except (TypeError, ValueError) as exc:
            raise ConfigError(str(exc)) from exc

    def with_strategy(self, strategy: ClusteringStrategy | str) -> "MatchingConfig":
        return replace(self, strategy=ClusteringStrategy(strategy))
