"""Per-field similarity functions.

Every function returns a score in [0, 1] and degrades to 0.0 on missing or
malformed input instead of raising.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from employee_dedupe.config import DEFAULT_SALARY_BANDS

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def levenshtein(left: str, right: str) -> int:
    if left == right:
        return 0
    if not left:
        return len(right)
    if not right:
        return len(left)

    prev = list(range(len(right) + 1))
    for i, c1 in enumerate(left, start=1):
        curr = [i]
        for j, c2 in enumerate(right, start=1):
            cost = 0 if c1 == c2 else 1
            curr.append(min(curr[j - 1] + 1, prev[j] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def normalize_name(value: object) -> str:
    if not isinstance(value, str):
        return ""
    cleaned = _PUNCTUATION.sub("", value.lower())
    return _WHITESPACE.sub(" ", cleaned).strip()


def normalize_text(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.lower().strip()


def levenshtein_ratio(left: str, right: str) -> float:
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0
    return 1.0 - levenshtein(left, right) / max(len(left), len(right))


def name_similarity(
    left: object,
    right: object,
    *,
    max_token_edits: int = 1,
    token_match_score: float = 0.9,
) -> float:
    """Fuzzy name match tolerant of token reordering, middle names and one-letter typos."""
    clean_left = normalize_name(left)
    clean_right = normalize_name(right)
    if not clean_left or not clean_right:
        return 0.0
    if clean_left == clean_right:
        return 1.0

    # single-letter tokens (initials) do not take part in the token match
    left_tokens = [token for token in clean_left.split(" ") if len(token) > 1]
    right_tokens = [token for token in clean_right.split(" ") if len(token) > 1]
    if left_tokens and right_tokens and (
        _tokens_covered(left_tokens, right_tokens, max_token_edits)
        or _tokens_covered(right_tokens, left_tokens, max_token_edits)
    ):
        return token_match_score

    return levenshtein_ratio(clean_left, clean_right)


def text_similarity(left: object, right: object) -> float:
    return levenshtein_ratio(normalize_text(left), normalize_text(right))


def categorical_equality(left: object, right: object) -> float:
    clean_left = normalize_text(left)
    clean_right = normalize_text(right)
    if not clean_left or not clean_right:
        return 0.0
    return 1.0 if clean_left == clean_right else 0.0


def numeric_proximity(
    left: object,
    right: object,
    bands: Sequence[tuple[float, float]] = DEFAULT_SALARY_BANDS,
    floor: float = 0.2,
) -> float:
    """Step-function closeness of two non-negative amounts by relative difference."""
    a = _as_number(left)
    b = _as_number(right)
    if a is None or b is None:
        return 0.0
    if a == b:
        return 1.0

    average = (a + b) / 2
    if average <= 0:
        return 0.0
    relative = abs(a - b) / average
    for limit, score in bands:
        if relative <= limit:
            return score
    return floor


def _tokens_covered(tokens: Sequence[str], others: Sequence[str], max_edits: int) -> bool:
    return all(any(levenshtein(token, other) <= max_edits for other in others) for token in tokens)


def _as_number(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if not math.isfinite(number) or number < 0:
        return None
    return number
