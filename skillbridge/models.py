from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]
Priority = Literal["High", "Medium", "Low"]

SKILL_LEVELS = ("Beginner", "Intermediate", "Advanced", "Expert")
RECOMMENDATION_KINDS = ("internships", "projects", "skills")


@dataclass(frozen=True)
class Skill:
    name: str
    level: SkillLevel = "Beginner"
    years_experience: int = 0

    def __post_init__(self):
        if self.level not in SKILL_LEVELS:
            raise ValueError(f"Unknown skill level: {self.level!r}")
        if self.years_experience < 0:
            raise ValueError("years_experience must be non-negative")


@dataclass
class Profile:
    id: str
    branch: str
    target_role: str
    skills: list[Skill] = field(default_factory=list)
    full_name: str = ""

    def __post_init__(self):
        seen: set[str] = set()
        unique: list[Skill] = []
        for skill in self.skills:
            if skill.name in seen:
                continue
            seen.add(skill.name)
            unique.append(skill)
        self.skills = unique

    def skill_names(self) -> list[str]:
        return [skill.name for skill in self.skills]


@dataclass
class Opportunity:
    id: str
    title: str
    skills_required: list[str]
    company_name: str = ""
    location: str = ""
    type: str = ""
    external_url: str = ""
    source: str = ""
    is_active: bool = True
    is_featured: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    match_score: int | None = None
    matching_skills: list[str] = field(default_factory=list)

    def annotated(self, score: int, matching: list[str]) -> Opportunity:
        return replace(
            self,
            skills_required=list(self.skills_required),
            metadata=dict(self.metadata),
            match_score=score,
            matching_skills=list(matching),
        )


@dataclass(frozen=True)
class ProjectTemplate:
    title: str
    tech_stack: tuple[str, ...]
    suitable_for: frozenset[str]
    description: str = ""
    difficulty: str = ""
    estimated_duration: str = ""
    impact_score: int = 0
    learning_outcomes: tuple[str, ...] = ()


@dataclass(frozen=True)
class Resource:
    title: str
    url: str


@dataclass
class LearningPathItem:
    skill: str
    priority: Priority
    estimated_weeks: int
    resources: list[Resource]


@dataclass
class SkillGapReport:
    target_role: str
    required_skills: list[str]
    missing_skills: list[str]
    current_match_percentage: int
    learning_path: list[LearningPathItem]
    used_fallback: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "target_role": self.target_role,
            "current_match_percentage": self.current_match_percentage,
            "missing_skills": list(self.missing_skills),
            "learning_path": [
                {
                    "skill": item.skill,
                    "priority": item.priority,
                    "estimated_weeks": item.estimated_weeks,
                    "resources": [
                        {"title": res.title, "url": res.url} for res in item.resources
                    ],
                }
                for item in self.learning_path
            ],
        }

    def to_record(self, user_id: str) -> dict[str, Any]:
        payload = self.to_payload()
        return {
            "user_id": user_id,
            "target_role": payload["target_role"],
            "missing_skills": payload["missing_skills"],
            "current_match_percentage": payload["current_match_percentage"],
            "learning_path": payload["learning_path"],
        }


@dataclass
class ScoredOpportunity:
    opportunity: Opportunity
    score: int

    def to_payload(self) -> dict[str, Any]:
        opp = self.opportunity
        return {
            **opp.metadata,
            "id": opp.id,
            "title": opp.title,
            "company_name": opp.company_name,
            "location": opp.location,
            "type": opp.type,
            "skills_required": list(opp.skills_required),
            "external_url": opp.external_url,
            "source": opp.source,
            "is_featured": opp.is_featured,
            "is_active": opp.is_active,
            "match_score": self.score,
            "matching_skills": list(opp.matching_skills),
        }

    def to_record(self, user_id: str) -> dict[str, Any]:
        return {
            "user_id": user_id,
            "internship_id": self.opportunity.id,
            "match_score": self.score,
            "matching_skills": list(self.opportunity.matching_skills),
        }


@dataclass
class ProjectRecommendation:
    template: ProjectTemplate
    score: int
    matching_skills: list[str]

    def to_payload(self) -> dict[str, Any]:
        tpl = self.template
        return {
            "title": tpl.title,
            "description": tpl.description,
            "difficulty": tpl.difficulty,
            "estimated_duration": tpl.estimated_duration,
            "tech_stack": list(tpl.tech_stack),
            "learning_outcomes": list(tpl.learning_outcomes),
            "impact_score": tpl.impact_score,
            "suitable_for": sorted(tpl.suitable_for),
            "skill_match_score": self.score,
            "matching_skills": list(self.matching_skills),
        }

    def to_record(self, user_id: str) -> dict[str, Any]:
        tpl = self.template
        return {
            "user_id": user_id,
            "title": tpl.title,
            "description": tpl.description,
            "difficulty": tpl.difficulty,
            "estimated_duration": tpl.estimated_duration,
            "tech_stack": list(tpl.tech_stack),
            "learning_outcomes": list(tpl.learning_outcomes),
            "impact_score": tpl.impact_score,
            "skill_match_score": self.score,
        }


@dataclass
class RecommendationOutcome:
    kind: str
    ok: bool
    recommendations: Any = None
    error: str | None = None
    error_type: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.ok and not self.recommendations
