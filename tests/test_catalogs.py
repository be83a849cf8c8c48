from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from skillbridge.catalogs import DATA_DIR, RoleSkillProfiles, load_catalog, load_sample_opportunities
from skillbridge.exceptions import ConfigurationError


def test_bundled_catalog_loads():
    catalog = load_catalog()
    assert catalog.roles.default_role == "software developer"
    assert "data scientist" in catalog.roles.roles
    assert len(catalog.project_templates) == 4
    assert "Python" in catalog.learning.core_skills
    assert catalog.learning.default_weeks == 4


def test_role_lookup_is_case_insensitive():
    catalog = load_catalog()
    skills, fallback = catalog.roles.required_for("  DATA Scientist ")
    assert not fallback
    assert skills[0] == "Python"


def test_role_table_built_directly_normalizes_names():
    roles = RoleSkillProfiles(roles={"software developer": ("Git",)}, default_role="Software Developer")
    assert roles.default_role == "software developer"
    assert roles.required_for("Blockchain Engineer") == (["Git"], True)
    assert roles.required_for(" SOFTWARE developer") == (["Git"], False)


def test_tables_are_read_only():
    catalog = load_catalog()
    with pytest.raises(TypeError):
        catalog.roles.roles["new role"] = ("Go",)


def test_custom_data_dir_replaces_tables(tmp_path: Path):
    for item in DATA_DIR.glob("*.json"):
        shutil.copy(item, tmp_path / item.name)
    (tmp_path / "role_skill_profiles.json").write_text(
        json.dumps({"default_role": "Generalist", "roles": {"Generalist": ["Git", "SQL"]}}),
        encoding="utf-8",
    )
    catalog = load_catalog(tmp_path)
    assert catalog.roles.required_for("anything") == (["Git", "SQL"], True)


def test_default_role_must_exist(tmp_path: Path):
    for item in DATA_DIR.glob("*.json"):
        shutil.copy(item, tmp_path / item.name)
    (tmp_path / "role_skill_profiles.json").write_text(
        json.dumps({"default_role": "missing", "roles": {"Generalist": ["Git"]}}),
        encoding="utf-8",
    )
    with pytest.raises(ConfigurationError):
        load_catalog(tmp_path)


def test_missing_or_broken_files_raise_configuration_error(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        load_catalog(tmp_path)
    (tmp_path / "sample_opportunities.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_sample_opportunities(tmp_path)


def test_sample_opportunities_keep_extra_columns():
    opportunities = load_sample_opportunities()
    assert len(opportunities) == 6
    assert opportunities[0].metadata["salary_min"] == 15000
    assert all(opp.is_active for opp in opportunities)
