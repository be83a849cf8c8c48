from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping, Protocol

import requests
from loguru import logger

from skillbridge.catalogs import load_sample_opportunities
from skillbridge.exceptions import PersistenceError, StoreError
from skillbridge.models import Opportunity, Profile
from skillbridge.records import opportunity_from_record, profile_from_record


class Store(Protocol):
    name: str

    def get_profile(self, user_id: str) -> Profile | None:
        ...

    def list_active_opportunities(self) -> list[Opportunity]:
        ...

    def upsert(self, table: str, record: Mapping[str, Any], conflict_key: str) -> None:
        ...


def conflict_values(record: Mapping[str, Any], conflict_key: str) -> tuple:
    columns = [column.strip() for column in conflict_key.split(",") if column.strip()]
    missing = [column for column in columns if column not in record]
    if not columns or missing:
        raise PersistenceError(f"Record is missing conflict columns {missing or conflict_key!r}")
    return tuple(record[column] for column in columns)


class InMemoryStore:
    """Dict-backed store; upserts replace the row sharing the conflict key."""

    name = "memory"

    def __init__(
        self,
        profiles: Iterable[Profile] = (),
        opportunities: Iterable[Opportunity] = (),
    ):
        self._profiles = {profile.id: profile for profile in profiles}
        self._opportunities = list(opportunities)
        self._tables: dict[str, dict[tuple, dict[str, Any]]] = {}

    def add_profile(self, profile: Profile) -> None:
        self._profiles[profile.id] = profile

    def get_profile(self, user_id: str) -> Profile | None:
        return self._profiles.get(user_id)

    def list_active_opportunities(self) -> list[Opportunity]:
        return [opp for opp in self._opportunities if opp.is_active]

    def upsert(self, table: str, record: Mapping[str, Any], conflict_key: str) -> None:
        key = conflict_values(record, conflict_key)
        self._tables.setdefault(table, {})[key] = copy.deepcopy(dict(record))

    def records(self, table: str) -> list[dict[str, Any]]:
        return list(self._tables.get(table, {}).values())


class SupabaseStore:
    """
    Store backed by a Supabase project through its PostgREST endpoint.

    Tables used: ``profiles`` (joined with ``user_skills``), ``internships``
    and the result tables written by the orchestrator.
    """

    name = "supabase"

    def __init__(self, url: str, api_key: str, timeout: float = 12.0, session: requests.Session | None = None):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _get(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        try:
            response = self.session.get(
                f"{self.base_url}/{table}", headers=self.headers, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as exc:
            raise StoreError(
                f"Query on {table} failed: {exc}", status_code=exc.response.status_code if exc.response is not None else None
            ) from exc
        except (requests.RequestException, ValueError) as exc:
            raise StoreError(f"Query on {table} failed: {exc}") from exc
        if not isinstance(payload, list):
            raise StoreError(f"Unexpected payload from {table}: {type(payload).__name__}")
        return payload

    def get_profile(self, user_id: str) -> Profile | None:
        rows = self._get("profiles", {"select": "*,user_skills(*)", "id": f"eq.{user_id}"})
        if not rows:
            return None
        return profile_from_record(rows[0])

    def list_active_opportunities(self) -> list[Opportunity]:
        rows = self._get("internships", {"select": "*", "is_active": "eq.true"})
        return [opportunity_from_record(row) for row in rows]

    def upsert(self, table: str, record: Mapping[str, Any], conflict_key: str) -> None:
        headers = {**self.headers, "Prefer": "resolution=merge-duplicates,return=minimal"}
        try:
            response = self.session.post(
                f"{self.base_url}/{table}",
                headers=headers,
                params={"on_conflict": conflict_key},
                json=dict(record),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise PersistenceError(
                f"Upsert into {table} failed: {exc}", status_code=exc.response.status_code if exc.response is not None else None
            ) from exc
        except requests.RequestException as exc:
            raise PersistenceError(f"Upsert into {table} failed: {exc}") from exc
        logger.debug(f"Upserted into {table} on {conflict_key}")


def build_store(settings) -> Store:
    if settings.store == "supabase":
        return SupabaseStore(settings.supabase_url, settings.supabase_key, timeout=settings.request_timeout)
    return InMemoryStore(opportunities=load_sample_opportunities(settings.data_dir))
