from __future__ import annotations

from typing import Sequence

import numpy as np

from skillbridge.matching import DEFAULT_MATCHER, SkillMatcher

FULL_MATCH = 100


def _clamp(value: int, low: int = 0, high: int = FULL_MATCH) -> int:
    return max(low, min(high, value))


def _satisfied_vector(
    required: Sequence[str], possessed: Sequence[str], matcher: SkillMatcher
) -> np.ndarray:
    return np.fromiter(
        (matcher.satisfied(skill, possessed) for skill in required),
        dtype=bool,
        count=len(required),
    )


def percentage(matched: int, total: int) -> int:
    """Half-up rounded percentage; an empty total counts as fully matched."""
    if total <= 0:
        return FULL_MATCH
    # integer form of floor(matched / total * 100 + 0.5)
    return _clamp((matched * 200 + total) // (2 * total))


def match_score(
    required: Sequence[str],
    possessed: Sequence[str],
    matcher: SkillMatcher | None = None,
) -> int:
    required = list(required)
    if not required:
        return FULL_MATCH
    matcher = matcher or DEFAULT_MATCHER
    hits = _satisfied_vector(required, list(possessed), matcher)
    return percentage(int(np.count_nonzero(hits)), len(required))


def stable_order(scores: Sequence[int]) -> list[int]:
    """Indices ordering ``scores`` descending, ties kept in input order."""
    if not len(scores):
        return []
    keys = -np.asarray(scores, dtype=np.int64)
    return [int(i) for i in np.argsort(keys, kind="stable")]
