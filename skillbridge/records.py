from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from skillbridge.models import SKILL_LEVELS, Opportunity, Profile, ProjectTemplate, Skill

OPPORTUNITY_FIELDS = {
    "id",
    "title",
    "skills_required",
    "company_name",
    "location",
    "type",
    "external_url",
    "source",
    "is_active",
    "is_featured",
    "match_score",
    "matching_skills",
}


def _as_str_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


_LEVELS_BY_KEY = {level.casefold(): level for level in SKILL_LEVELS}


def _skill_level(value: Any, skill_name: str) -> str:
    key = str(value or "").strip().casefold()
    if not key:
        return "Beginner"
    if key not in _LEVELS_BY_KEY:
        logger.warning(f"Unknown level {value!r} for skill {skill_name!r}; treating it as Beginner")
        return "Beginner"
    return _LEVELS_BY_KEY[key]


def skill_from_record(raw: Mapping[str, Any]) -> Skill:
    name = str(raw.get("skill_name") or raw.get("name") or "").strip()
    return Skill(
        name=name,
        level=_skill_level(raw.get("skill_level") or raw.get("level"), name),
        years_experience=max(0, int(raw.get("years_experience") or 0)),
    )


def profile_from_record(raw: Mapping[str, Any]) -> Profile:
    skills_raw = raw.get("user_skills")
    if skills_raw is None:
        skills_raw = raw.get("skills", [])
    skills = [skill_from_record(item) for item in skills_raw or []]
    return Profile(
        id=str(raw["id"]),
        branch=raw.get("branch") or "",
        target_role=raw.get("target_role") or "",
        skills=[skill for skill in skills if skill.name],
        full_name=raw.get("full_name") or "",
    )


def opportunity_from_record(raw: Mapping[str, Any]) -> Opportunity:
    return Opportunity(
        id=str(raw["id"]),
        title=raw.get("title") or "",
        skills_required=_as_str_list(raw.get("skills_required")),
        company_name=raw.get("company_name") or "",
        location=raw.get("location") or "",
        type=raw.get("type") or "",
        external_url=raw.get("external_url") or "",
        source=raw.get("source") or "",
        is_active=bool(raw.get("is_active", True)),
        is_featured=bool(raw.get("is_featured", False)),
        metadata={k: v for k, v in raw.items() if k not in OPPORTUNITY_FIELDS},
    )


def template_from_record(raw: Mapping[str, Any]) -> ProjectTemplate:
    return ProjectTemplate(
        title=raw["title"],
        tech_stack=tuple(_as_str_list(raw.get("tech_stack"))),
        suitable_for=frozenset(_as_str_list(raw.get("suitable_for"))),
        description=raw.get("description", ""),
        difficulty=raw.get("difficulty", ""),
        estimated_duration=raw.get("estimated_duration", ""),
        impact_score=int(raw.get("impact_score", 0)),
        learning_outcomes=tuple(_as_str_list(raw.get("learning_outcomes"))),
    )
