from __future__ import annotations

from loguru import logger

from skillbridge.catalogs import LearningCatalog, RoleSkillProfiles
from skillbridge.matching import DEFAULT_MATCHER, SkillMatcher
from skillbridge.models import LearningPathItem, Profile, SkillGapReport
from skillbridge.scoring import match_score


def build_learning_path(missing: list[str], learning: LearningCatalog) -> list[LearningPathItem]:
    return [
        LearningPathItem(
            skill=skill,
            priority=learning.priority_for(skill),
            estimated_weeks=learning.weeks_for(skill),
            resources=learning.resources_for(skill),
        )
        for skill in missing
    ]


def analyze_skill_gap(
    profile: Profile,
    roles: RoleSkillProfiles,
    learning: LearningCatalog,
    matcher: SkillMatcher | None = None,
) -> SkillGapReport:
    """
    Compare a profile against the skill profile of its target role.

    Unrecognized target roles use the default role's skills; the report still
    carries the role string the user gave. An empty role is reported as the
    default role.
    """
    matcher = matcher or DEFAULT_MATCHER
    possessed = profile.skill_names()
    required, used_fallback = roles.required_for(profile.target_role)
    if used_fallback:
        logger.info(
            f"No skill profile for role {profile.target_role!r}; using {roles.default_role!r}"
        )

    missing = [skill for skill in required if not matcher.satisfied(skill, possessed)]
    return SkillGapReport(
        target_role=profile.target_role or roles.default_role,
        required_skills=required,
        missing_skills=missing,
        current_match_percentage=match_score(required, possessed, matcher),
        learning_path=build_learning_path(missing, learning),
        used_fallback=used_fallback,
    )
