# howmuch/storage/supabase_store.py

"""Hosted Supabase (PostgREST) backend for the catalog and submissions."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from howmuch.errors import StoreError
from howmuch.models.price_observation import PriceObservation
from howmuch.models.service import Service
from howmuch.storage.base_store import (
    PriceStore,
    observation_to_row,
    parse_timestamp,
    row_to_observation,
    row_to_service,
)

logger = logging.getLogger("howmuch.store.supabase")

_OBSERVATION_LIMIT = 100


def _quoted(value: str) -> str:
    """Double-quote a PostgREST filter value so ``,.:()`` stay literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _contains_pattern(text: str) -> str:
    """ILIKE pattern matching *text* anywhere, ``%`` and ``_`` literal.

    PostgREST turns ``*`` into ``%``, so a ``*`` in the query still
    acts as a wildcard.
    """
    escaped = (
        text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return _quoted(f"*{escaped}*")


class SupabaseStore(PriceStore):
    """Catalog and submissions stored in a Supabase project.

    The client is created lazily on first use so that constructing the
    store never touches the network.
    """

    name = "supabase"

    def __init__(self, url: str, key: str) -> None:
        self._url = url
        self._key = key
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazy-initialize the Supabase client."""
        if self._client is not None:
            return self._client
        if not self._url or not self._key:
            raise StoreError(
                "SUPABASE_URL / SUPABASE_ANON_KEY must be set"
            )
        from supabase import create_client

        try:
            self._client = create_client(self._url, self._key)
        except Exception as exc:
            raise StoreError(
                f"Cannot create Supabase client: {exc}"
            ) from exc
        logger.info("Connected to Supabase: %s", self._url)
        return self._client

    def _execute(
        self,
        operation: str,
        build: Callable[[Any], Any],
    ) -> list[dict[str, Any]]:
        """Run a query builder and return its rows, wrapping failures."""
        client = self._get_client()
        try:
            response = build(client).execute()
        except Exception as exc:
            raise StoreError(
                f"Supabase {operation} failed: {exc}"
            ) from exc
        rows: list[dict[str, Any]] = list(response.data or [])
        return rows

    # ── Catalog ──────────────────────────────────────────

    def list_services(self) -> list[Service]:
        rows = self._execute(
            "list_services",
            lambda c: c.table("services").select("*").order("name"),
        )
        return [row_to_service(r) for r in rows]

    def get_service(self, service_id: str) -> Service | None:
        rows = self._execute(
            "get_service",
            lambda c: c.table("services")
            .select("*")
            .eq("id", service_id)
            .limit(1),
        )
        return row_to_service(rows[0]) if rows else None

    def list_services_by_category(
        self, category: str,
    ) -> list[Service]:
        rows = self._execute(
            "list_services_by_category",
            lambda c: c.table("services")
            .select("*")
            .eq("category", category)
            .order("name"),
        )
        return [row_to_service(r) for r in rows]

    # ── Submissions ──────────────────────────────────────

    def insert_observations(
        self,
        observations: list[PriceObservation],
        source: str,
    ) -> int:
        if not observations:
            return 0
        now = datetime.now().astimezone()
        rows = [observation_to_row(o, source, now) for o in observations]
        self._execute(
            "insert_observations",
            lambda c: c.table("price_submissions").insert(rows),
        )
        logger.info("Saved %d %s prices to Supabase", len(rows), source)
        return len(rows)

    def find_observations(
        self, service_id: str, location_query: str,
    ) -> list[PriceObservation]:
        rows = self._execute(
            "find_observations",
            lambda c: c.table("price_submissions")
            .select("*")
            .eq("service_id", service_id)
            .or_(
                f"location_zip.eq.{_quoted(location_query)},"
                f"location_city.ilike.{_contains_pattern(location_query)}"
            )
            .order("created_at", desc=True)
            .limit(_OBSERVATION_LIMIT),
        )
        return [row_to_observation(r) for r in rows]

    def source_counts(
        self,
    ) -> tuple[dict[str, int], datetime | None]:
        rows = self._execute(
            "source_counts",
            lambda c: c.table("price_submissions").select(
                "source, created_at"
            ),
        )
        counts: dict[str, int] = {}
        latest: datetime | None = None
        for row in rows:
            source = str(row.get("source") or "user")
            counts[source] = counts.get(source, 0) + 1
            ts = parse_timestamp(row.get("created_at"))
            if ts is not None and (latest is None or ts > latest):
                latest = ts
        return counts, latest
