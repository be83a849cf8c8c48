"""
Skill normalization and the pluggable matching policy.

Every scorer in the engine asks one question: is this required skill
satisfied by the user's skills? The answer comes from a ``SkillMatcher`` so
the policy can change without touching the ranker, the project recommender or
the gap analyzer.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol

from skillbridge.exceptions import ConfigurationError

_WHITESPACE = re.compile(r"\s+")


def normalize_skill(name: str) -> str:
    return _WHITESPACE.sub(" ", (name or "").casefold()).strip()


class SkillMatcher(Protocol):
    name: str

    def satisfied(self, required: str, user_skills: Iterable[str]) -> bool:
        ...


class SubstringMatcher:
    """
    Bidirectional containment on normalized names.

    "Java" matches "JavaScript" and the other way round. This favours recall
    over precision and is kept that way on purpose; use ``ExactMatcher`` when
    the looser behaviour is not wanted.
    """

    name = "substring"

    def satisfied(self, required: str, user_skills: Iterable[str]) -> bool:
        target = normalize_skill(required)
        if not target:
            return False
        for skill in user_skills:
            candidate = normalize_skill(skill)
            if candidate and (target in candidate or candidate in target):
                return True
        return False


class ExactMatcher:
    name = "exact"

    def satisfied(self, required: str, user_skills: Iterable[str]) -> bool:
        target = normalize_skill(required)
        if not target:
            return False
        return any(normalize_skill(skill) == target for skill in user_skills)


MATCHERS: dict[str, type] = {
    SubstringMatcher.name: SubstringMatcher,
    ExactMatcher.name: ExactMatcher,
}

DEFAULT_MATCHER = SubstringMatcher()


def get_matcher(name: str) -> SkillMatcher:
    key = normalize_skill(name)
    if key not in MATCHERS:
        raise ConfigurationError(
            f"Unknown skill matcher {name!r}; expected one of {sorted(MATCHERS)}"
        )
    return MATCHERS[key]()


def matching_skills(
    required: Iterable[str],
    possessed: Iterable[str],
    matcher: SkillMatcher | None = None,
) -> list[str]:
    matcher = matcher or DEFAULT_MATCHER
    possessed = list(possessed)
    return [skill for skill in required if matcher.satisfied(skill, possessed)]
