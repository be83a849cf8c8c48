from __future__ import annotations

from skillbridge.catalogs import load_catalog, load_sample_opportunities
from skillbridge.exceptions import PersistenceError
from skillbridge.models import Profile, Skill
from skillbridge.orchestrator import RecommendationService
from skillbridge.stores import InMemoryStore


class RejectingStore(InMemoryStore):
    def upsert(self, table, record, conflict_key):
        raise PersistenceError("write rejected")


class BrokenStore(InMemoryStore):
    def get_profile(self, user_id):
        raise ConnectionError("database unreachable")


def _profile(**overrides) -> Profile:
    values = {
        "id": "u1",
        "branch": "Computer Science Engineering",
        "target_role": "Data Scientist",
        "skills": [Skill("Python", "Advanced", 2), Skill("SQL", "Intermediate", 1)],
    }
    values.update(overrides)
    return Profile(**values)


def _service(store: InMemoryStore, **kwargs) -> RecommendationService:
    return RecommendationService(store=store, catalog=load_catalog(), **kwargs)


def _store(profile: Profile | None = None, cls=InMemoryStore) -> InMemoryStore:
    store = cls(opportunities=load_sample_opportunities())
    store.add_profile(profile or _profile())
    return store


def test_missing_profile_fails_without_output():
    store = _store()
    outcome = _service(store).generate("ghost", "skills")
    assert not outcome.ok
    assert outcome.error == "Profile not found"
    assert outcome.error_type == "ProfileNotFoundError"
    assert outcome.recommendations is None
    assert store.records("skill_gaps") == []


def test_unknown_kind_fails():
    outcome = _service(_store()).generate("u1", "mentors")
    assert not outcome.ok
    assert outcome.error_type == "UnsupportedRecommendationError"


def test_internships_ranked_and_persisted():
    store = _store()
    outcome = _service(store).generate("u1", "internships")
    assert outcome.ok
    scores = [item["match_score"] for item in outcome.recommendations]
    assert scores == sorted(scores, reverse=True)
    assert outcome.recommendations[0]["id"] == "swiggy-ds-intern"
    assert outcome.recommendations[0]["matching_skills"] == ["Python", "SQL"]
    assert len(store.records("internship_matches")) == 6


def test_internship_limit_applies():
    outcome = _service(_store(), opportunity_limit=2).generate("u1", "internships")
    assert len(outcome.recommendations) == 2


def test_internship_filters_narrow_listing_before_ranking():
    store = _store()
    outcome = _service(store).generate(
        "u1", "internships", {"location": "bangalore", "type_": "Summer Internship"}
    )
    assert outcome.ok
    assert [item["id"] for item in outcome.recommendations][0] == "swiggy-ds-intern"
    assert {item["location"] for item in outcome.recommendations} == {"Bangalore"}
    assert {item["type"] for item in outcome.recommendations} == {"Summer Internship"}
    assert len(store.records("internship_matches")) == len(outcome.recommendations) == 2


def test_filters_ignored_for_other_kinds():
    service = _service(_store())
    plain = service.generate("u1", "projects")
    filtered = service.generate("u1", "projects", {"search": "nothing matches this"})
    assert filtered.recommendations == plain.recommendations


def test_projects_rerun_overwrites_records():
    store = _store()
    service = _service(store)
    first = service.generate("u1", "projects")
    second = service.generate("u1", "projects")
    assert first.recommendations == second.recommendations
    assert len(first.recommendations) == 3
    assert len(store.records("project_recommendations")) == 3


def test_projects_empty_for_ineligible_branch():
    store = _store(_profile(branch="Mechanical Engineering"))
    outcome = _service(store).generate("u1", "projects")
    assert outcome.ok
    assert outcome.recommendations == []
    assert outcome.is_empty


def test_skill_gap_report_upserted_per_role():
    store = _store()
    service = _service(store)
    outcome = service.generate("u1", "skills")
    service.generate("u1", "skills")
    assert outcome.ok
    assert outcome.recommendations["target_role"] == "Data Scientist"
    assert outcome.recommendations["current_match_percentage"] == 25
    rows = store.records("skill_gaps")
    assert len(rows) == 1
    assert rows[0]["user_id"] == "u1"


def test_persistence_failure_keeps_computed_results():
    outcome = _service(_store(cls=RejectingStore)).generate("u1", "skills")
    assert not outcome.ok
    assert outcome.error == "write rejected"
    assert outcome.error_type == "PersistenceError"
    assert outcome.recommendations["missing_skills"]
    assert outcome.warnings


def test_lenient_persistence_reports_warning():
    outcome = _service(_store(cls=RejectingStore), strict_persistence=False).generate("u1", "projects")
    assert outcome.ok
    assert len(outcome.recommendations) == 3
    assert "write rejected" in outcome.warnings[0]


def test_fetch_exception_surfaces_message():
    outcome = _service(_store(cls=BrokenStore)).generate("u1", "internships")
    assert not outcome.ok
    assert outcome.error == "database unreachable"
