# howmuch/storage/store_factory.py

"""Pick the persistence backend from environment configuration."""

import logging
from pathlib import Path

from howmuch.config.settings import Settings
from howmuch.errors import StoreError
from howmuch.storage.base_store import PriceStore
from howmuch.storage.sqlite_store import SqliteStore
from howmuch.storage.supabase_store import SupabaseStore

logger = logging.getLogger("howmuch.store")


def create_store(
    settings: type[Settings] = Settings,
) -> PriceStore | None:
    """Return the configured store, or ``None`` for the sample-data path.

    Supabase credentials win over a local SQLite path. Missing
    configuration is not an error.
    """
    if settings.supabase_configured():
        logger.info("Using Supabase store at %s", settings.SUPABASE_URL)
        return SupabaseStore(
            settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY,
        )
    if settings.DB_PATH:
        logger.info("Using SQLite store at %s", settings.DB_PATH)
        try:
            return SqliteStore(Path(settings.DB_PATH))
        except StoreError as exc:
            logger.warning(
                "SQLite store unavailable, using sample data: %s", exc,
            )
            return None
    logger.info(
        "No database configured, serving static sample data"
    )
    return None
