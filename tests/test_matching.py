from __future__ import annotations

import pytest

from skillbridge.exceptions import ConfigurationError
from skillbridge.matching import (
    ExactMatcher,
    SubstringMatcher,
    get_matcher,
    matching_skills,
    normalize_skill,
)


def test_normalize_trims_and_casefolds():
    assert normalize_skill("  Node.JS ") == "node.js"
    assert normalize_skill("Data   Structures") == "data structures"
    assert normalize_skill("") == ""


def test_substring_matcher_is_bidirectional():
    matcher = SubstringMatcher()
    assert matcher.satisfied("Java", ["JavaScript"])
    assert matcher.satisfied("JavaScript", ["java"])
    assert not matcher.satisfied("Rust", ["Python", "Go"])


def test_substring_matcher_ignores_blank_user_skills():
    matcher = SubstringMatcher()
    assert not matcher.satisfied("Python", ["", "   "])
    assert not matcher.satisfied("", ["Python"])


def test_exact_matcher_requires_equal_names():
    matcher = ExactMatcher()
    assert matcher.satisfied("python", [" Python "])
    assert not matcher.satisfied("Java", ["JavaScript"])


def test_get_matcher_resolves_known_names():
    assert isinstance(get_matcher("substring"), SubstringMatcher)
    assert isinstance(get_matcher("EXACT"), ExactMatcher)
    with pytest.raises(ConfigurationError):
        get_matcher("embedding")


def test_matching_skills_keeps_required_order():
    required = ["SQL", "Django", "Python"]
    assert matching_skills(required, ["python", "sql"]) == ["SQL", "Python"]
    assert matching_skills(required, ["python"], ExactMatcher()) == ["Python"]
