"""
Request-level flow: fetch the profile, compute, persist, respond.

Computation is pure and finishes before anything is written, so a rejected
write never discards results that were already produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from loguru import logger

from skillbridge.catalogs import Catalog
from skillbridge.exceptions import (
    PersistenceError,
    ProfileNotFoundError,
    SkillBridgeError,
    UnsupportedRecommendationError,
)
from skillbridge.matching import DEFAULT_MATCHER, SkillMatcher
from skillbridge.models import RECOMMENDATION_KINDS, Profile, RecommendationOutcome
from skillbridge.recommendations import filter_opportunities, rank_opportunities, recommend_projects
from skillbridge.skill_gaps import analyze_skill_gap
from skillbridge.stores import Store


@dataclass(frozen=True)
class PersistTarget:
    table: str
    conflict_key: str


PERSIST_TARGETS = {
    "internships": PersistTarget("internship_matches", "user_id,internship_id"),
    "projects": PersistTarget("project_recommendations", "user_id,title"),
    "skills": PersistTarget("skill_gaps", "user_id,target_role"),
}


class RecommendationService:
    def __init__(
        self,
        store: Store,
        catalog: Catalog,
        matcher: SkillMatcher | None = None,
        opportunity_limit: int | None = 20,
        strict_persistence: bool = True,
    ):
        self.store = store
        self.catalog = catalog
        self.matcher = matcher or DEFAULT_MATCHER
        self.opportunity_limit = opportunity_limit
        self.strict_persistence = strict_persistence
        self._engines: dict[str, Callable[[Profile, Mapping[str, str]], list[Any]]] = {
            "internships": self._internships,
            "projects": self._projects,
            "skills": self._skills,
        }

    def _internships(self, profile: Profile, filters: Mapping[str, str]) -> list[Any]:
        opportunities = filter_opportunities(self.store.list_active_opportunities(), **filters)
        return rank_opportunities(
            opportunities, profile.skill_names(), self.matcher, limit=self.opportunity_limit
        )

    def _projects(self, profile: Profile, filters: Mapping[str, str]) -> list[Any]:
        return recommend_projects(self.catalog.project_templates, profile, self.matcher)

    def _skills(self, profile: Profile, filters: Mapping[str, str]) -> list[Any]:
        return [analyze_skill_gap(profile, self.catalog.roles, self.catalog.learning, self.matcher)]

    def compute(self, profile: Profile, kind: str, filters: Mapping[str, str] | None = None) -> list[Any]:
        """
        Run the engine for ``kind`` without touching the store's write side.

        ``filters`` (``search``, ``location``, ``type_``) narrow the internship
        listing before ranking; the other kinds ignore them.
        """
        if kind not in self._engines:
            raise UnsupportedRecommendationError(kind)
        return self._engines[kind](profile, dict(filters or {}))

    def persist(self, user_id: str, kind: str, results: list[Any]) -> None:
        target = PERSIST_TARGETS[kind]
        for result in results:
            self.store.upsert(target.table, result.to_record(user_id), target.conflict_key)

    @staticmethod
    def payload(kind: str, results: list[Any]) -> Any:
        if kind == "skills":
            return results[0].to_payload()
        return [result.to_payload() for result in results]

    def generate(
        self, user_id: str, kind: str, filters: Mapping[str, str] | None = None
    ) -> RecommendationOutcome:
        logger.info(f"Generating {kind} recommendations for user {user_id}")
        if kind not in RECOMMENDATION_KINDS:
            exc = UnsupportedRecommendationError(kind)
            return RecommendationOutcome(kind=kind, ok=False, error=str(exc), error_type=type(exc).__name__)

        try:
            profile = self.store.get_profile(user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)
            results = self.compute(profile, kind, filters)
        except SkillBridgeError as exc:
            logger.warning(f"{kind} recommendations for {user_id} failed: {exc}")
            return RecommendationOutcome(kind=kind, ok=False, error=str(exc), error_type=type(exc).__name__)
        except Exception as exc:
            logger.exception(f"Unexpected error computing {kind} recommendations for {user_id}")
            return RecommendationOutcome(kind=kind, ok=False, error=str(exc), error_type=type(exc).__name__)

        payload = self.payload(kind, results)
        try:
            self.persist(user_id, kind, results)
        except Exception as exc:
            message = f"Results computed but not saved: {exc}"
            logger.warning(message)
            if self.strict_persistence:
                return RecommendationOutcome(
                    kind=kind,
                    ok=False,
                    recommendations=payload,
                    error=str(exc),
                    error_type=PersistenceError.__name__,
                    warnings=[message],
                )
            return RecommendationOutcome(kind=kind, ok=True, recommendations=payload, warnings=[message])

        logger.info(f"Stored {len(results)} {kind} result(s) for user {user_id}")
        return RecommendationOutcome(kind=kind, ok=True, recommendations=payload)
