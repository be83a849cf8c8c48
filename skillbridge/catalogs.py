"""
Static lookup tables used by the engine.

The role table, the learning catalog (weeks, resources, core skills) and the
project templates ship as JSON under ``skillbridge/data``. Point
``SKILLBRIDGE_DATA_DIR`` at another directory holding files with the same
names to replace them. Loaded tables are read-only and shared between
requests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from loguru import logger

from skillbridge.exceptions import ConfigurationError
from skillbridge.matching import normalize_skill
from skillbridge.models import Opportunity, Priority, ProjectTemplate, Resource
from skillbridge.records import opportunity_from_record, template_from_record

DATA_DIR = Path(__file__).resolve().parent / "data"

ROLE_PROFILES_FILE = "role_skill_profiles.json"
LEARNING_CATALOG_FILE = "learning_catalog.json"
PROJECT_TEMPLATES_FILE = "project_templates.json"
SAMPLE_OPPORTUNITIES_FILE = "sample_opportunities.json"


def _read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Catalog file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Catalog file is not valid JSON: {path}: {exc}") from exc


@dataclass(frozen=True)
class RoleSkillProfiles:
    roles: Mapping[str, tuple[str, ...]]
    default_role: str

    def __post_init__(self):
        # lookups are keyed by normalized role names
        normalized = {normalize_skill(role): tuple(skills) for role, skills in self.roles.items()}
        object.__setattr__(self, "roles", MappingProxyType(normalized))
        object.__setattr__(self, "default_role", normalize_skill(self.default_role))
        if self.default_role not in self.roles:
            raise ConfigurationError(
                f"Default role {self.default_role!r} has no skill profile"
            )
        if not self.roles[self.default_role]:
            raise ConfigurationError("Default role skill profile must not be empty")

    @classmethod
    def from_mapping(cls, roles: Mapping[str, list[str]], default_role: str) -> RoleSkillProfiles:
        return cls(roles=roles, default_role=default_role)

    def required_for(self, target_role: str) -> tuple[list[str], bool]:
        """Return the required skills for a role and whether the default was used."""
        key = normalize_skill(target_role)
        if key in self.roles:
            return list(self.roles[key]), False
        return list(self.roles[self.default_role]), True


@dataclass(frozen=True)
class LearningCatalog:
    weeks: Mapping[str, int]
    resources: Mapping[str, tuple[Resource, ...]]
    core_skills: frozenset[str]
    default_weeks: int = 4

    def __post_init__(self):
        if self.default_weeks < 1:
            raise ConfigurationError("default_weeks must be a positive integer")
        bad = sorted(skill for skill, weeks in self.weeks.items() if weeks < 1)
        if bad:
            raise ConfigurationError(f"Week estimates must be positive: {bad}")

    def priority_for(self, skill: str) -> Priority:
        return "High" if skill in self.core_skills else "Medium"

    def weeks_for(self, skill: str) -> int:
        return self.weeks.get(skill, self.default_weeks)

    def resources_for(self, skill: str) -> list[Resource]:
        found = self.resources.get(skill)
        if found:
            return list(found)
        return [Resource(title=f"Learn {skill}", url="#")]


@dataclass(frozen=True)
class Catalog:
    roles: RoleSkillProfiles
    learning: LearningCatalog
    project_templates: tuple[ProjectTemplate, ...] = field(default_factory=tuple)


def load_role_profiles(path: Path) -> RoleSkillProfiles:
    raw = _read_json(path)
    try:
        return RoleSkillProfiles.from_mapping(raw["roles"], raw.get("default_role", "software developer"))
    except (KeyError, TypeError, AttributeError) as exc:
        raise ConfigurationError(f"Malformed role profile file {path}: {exc}") from exc


def load_learning_catalog(path: Path) -> LearningCatalog:
    raw = _read_json(path)
    try:
        resources = {
            skill: tuple(Resource(title=item["title"], url=item["url"]) for item in items)
            for skill, items in raw.get("resources", {}).items()
        }
        return LearningCatalog(
            weeks=MappingProxyType({k: int(v) for k, v in raw.get("weeks", {}).items()}),
            resources=MappingProxyType(resources),
            core_skills=frozenset(raw.get("core_skills", [])),
            default_weeks=int(raw.get("default_weeks", 4)),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ConfigurationError(f"Malformed learning catalog {path}: {exc}") from exc


def load_project_templates(path: Path) -> tuple[ProjectTemplate, ...]:
    raw = _read_json(path)
    try:
        return tuple(template_from_record(item) for item in raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed project template file {path}: {exc}") from exc


def load_sample_opportunities(data_dir: Path | None = None) -> list[Opportunity]:
    path = (data_dir or DATA_DIR) / SAMPLE_OPPORTUNITIES_FILE
    raw = _read_json(path)
    return [opportunity_from_record(item) for item in raw]


def load_catalog(data_dir: Path | None = None) -> Catalog:
    base = data_dir or DATA_DIR
    catalog = Catalog(
        roles=load_role_profiles(base / ROLE_PROFILES_FILE),
        learning=load_learning_catalog(base / LEARNING_CATALOG_FILE),
        project_templates=load_project_templates(base / PROJECT_TEMPLATES_FILE),
    )
    logger.debug(
        f"Loaded catalog from {base}: {len(catalog.roles.roles)} roles, "
        f"{len(catalog.project_templates)} project templates"
    )
    return catalog
