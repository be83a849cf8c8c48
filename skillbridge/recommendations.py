from __future__ import annotations

from typing import Iterable, Sequence

from skillbridge.matching import SkillMatcher, matching_skills, normalize_skill
from skillbridge.models import (
    Opportunity,
    Profile,
    ProjectRecommendation,
    ProjectTemplate,
    ScoredOpportunity,
)
from skillbridge.scoring import match_score, stable_order

TOP_N_PROJECTS = 3


def rank_opportunities(
    opportunities: Iterable[Opportunity],
    possessed: Sequence[str],
    matcher: SkillMatcher | None = None,
    limit: int | None = None,
) -> list[ScoredOpportunity]:
    possessed = list(possessed)
    scored: list[ScoredOpportunity] = []
    for opportunity in opportunities:
        required = list(opportunity.skills_required)
        score = match_score(required, possessed, matcher)
        matched = matching_skills(required, possessed, matcher)
        scored.append(ScoredOpportunity(opportunity=opportunity.annotated(score, matched), score=score))

    ranked = [scored[i] for i in stable_order([item.score for item in scored])]
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def filter_opportunities(
    opportunities: Iterable[Opportunity],
    search: str = "",
    location: str = "",
    type_: str = "",
) -> list[Opportunity]:
    """Listing filters: title/company search, location containment, exact type."""
    term = normalize_skill(search)
    place = normalize_skill(location)
    results = []
    for opportunity in opportunities:
        if term and term not in normalize_skill(opportunity.title) and term not in normalize_skill(
            opportunity.company_name
        ):
            continue
        if place and place not in normalize_skill(opportunity.location):
            continue
        if type_ and opportunity.type != type_:
            continue
        results.append(opportunity)
    return results


def eligible_templates(
    templates: Iterable[ProjectTemplate], branch: str
) -> list[ProjectTemplate]:
    return [template for template in templates if branch in template.suitable_for]


def recommend_projects(
    templates: Iterable[ProjectTemplate],
    profile: Profile,
    matcher: SkillMatcher | None = None,
    top_n: int = TOP_N_PROJECTS,
) -> list[ProjectRecommendation]:
    possessed = profile.skill_names()
    candidates = [
        ProjectRecommendation(
            template=template,
            score=match_score(template.tech_stack, possessed, matcher),
            matching_skills=matching_skills(template.tech_stack, possessed, matcher),
        )
        for template in eligible_templates(templates, profile.branch)
    ]
    ordered = [candidates[i] for i in stable_order([item.score for item in candidates])]
    return ordered[:top_n]
