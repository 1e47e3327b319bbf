# howmuch/storage/sqlite_store.py

"""SQLite-backed catalog and price submission store."""

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path

from howmuch.data import sample_data
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

logger = logging.getLogger("howmuch.store.sqlite")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS services (
    id               TEXT PRIMARY KEY,
    name             TEXT NOT NULL,
    category         TEXT NOT NULL,
    icon             TEXT NOT NULL DEFAULT '',
    description      TEXT,
    national_average REAL,
    price_range_min  REAL,
    price_range_max  REAL,
    created_at       TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS price_submissions (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    service_id      TEXT NOT NULL REFERENCES services(id),
    price           REAL NOT NULL CHECK (price > 0),
    location_zip    TEXT,
    location_city   TEXT,
    location_state  TEXT,
    location_region TEXT,
    description     TEXT,
    service_date    TEXT,
    created_at      TEXT NOT NULL,
    source          TEXT NOT NULL DEFAULT 'user'
);

CREATE INDEX IF NOT EXISTS idx_submissions_service_created
    ON price_submissions(service_id, created_at);
"""

_INSERT_SUBMISSION = (
    "INSERT INTO price_submissions "
    "(service_id, price, location_zip, location_city, location_state, "
    " location_region, description, service_date, created_at, source) "
    "VALUES (:service_id, :price, :location_zip, :location_city, "
    " :location_state, :location_region, :description, :service_date, "
    " :created_at, :source)"
)


class SqliteStore(PriceStore):
    """Local file database with the same schema as the hosted backend.

    The catalog is seeded from the sample services the first time the
    file is opened.
    """

    name = "sqlite"

    def __init__(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(
                str(db_path), check_same_thread=False,
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.executescript(_SCHEMA)
            self._seed_catalog()
        except sqlite3.Error as exc:
            raise StoreError(
                f"Cannot open SQLite store at {db_path}: {exc}"
            ) from exc
        logger.debug("SqliteStore opened at %s", db_path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _seed_catalog(self) -> None:
        now = datetime.now().isoformat()
        self._conn.executemany(
            "INSERT OR IGNORE INTO services "
            "(id, name, category, icon, description, national_average, "
            " price_range_min, price_range_max, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    s.id,
                    s.name,
                    s.category,
                    s.icon,
                    s.description,
                    s.national_average,
                    s.price_range.min,
                    s.price_range.max,
                    now,
                )
                for s in sample_data.SERVICES
            ],
        )
        self._conn.commit()

    def _query(
        self, sql: str, params: tuple[object, ...] = (),
    ) -> list[sqlite3.Row]:
        try:
            with self._lock:
                return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite query failed: {exc}") from exc

    # ── Catalog ──────────────────────────────────────────

    def list_services(self) -> list[Service]:
        rows = self._query("SELECT * FROM services ORDER BY name")
        return [row_to_service(dict(r)) for r in rows]

    def get_service(self, service_id: str) -> Service | None:
        rows = self._query(
            "SELECT * FROM services WHERE id = ?", (service_id,),
        )
        return row_to_service(dict(rows[0])) if rows else None

    def list_services_by_category(
        self, category: str,
    ) -> list[Service]:
        rows = self._query(
            "SELECT * FROM services WHERE category = ? ORDER BY name",
            (category,),
        )
        return [row_to_service(dict(r)) for r in rows]

    # ── Submissions ──────────────────────────────────────

    def insert_observations(
        self,
        observations: list[PriceObservation],
        source: str,
    ) -> int:
        now = datetime.now()
        rows = [observation_to_row(o, source, now) for o in observations]
        try:
            with self._lock:
                with self._conn:
                    self._conn.executemany(_INSERT_SUBMISSION, rows)
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite insert failed: {exc}") from exc
        if rows:
            logger.info(
                "Recorded %d %s submissions", len(rows), source,
            )
        return len(rows)

    def find_observations(
        self, service_id: str, location_query: str,
    ) -> list[PriceObservation]:
        # Same rule as matches_location: exact zip or city substring
        rows = self._query(
            "SELECT * FROM price_submissions "
            "WHERE service_id = ? "
            "  AND (location_zip = ? "
            "       OR INSTR(LOWER(COALESCE(location_city, '')), ?) > 0) "
            "ORDER BY created_at DESC, id DESC",
            (service_id, location_query, location_query.lower()),
        )
        return [row_to_observation(dict(r)) for r in rows]

    def source_counts(
        self,
    ) -> tuple[dict[str, int], datetime | None]:
        rows = self._query(
            "SELECT source, COUNT(*) AS n, MAX(created_at) AS latest "
            "FROM price_submissions GROUP BY source",
        )
        counts = {str(r["source"]): int(r["n"]) for r in rows}
        stamps = [
            ts
            for ts in (parse_timestamp(r["latest"]) for r in rows)
            if ts is not None
        ]
        return counts, max(stamps, default=None)
