# howmuch/services/fallback.py

"""One fallback policy for every read against the persistence backend."""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from howmuch.errors import StoreError
from howmuch.storage.base_store import PriceStore

logger = logging.getLogger("howmuch.fallback")

T = TypeVar("T")


async def with_fallback(
    primary: PriceStore | None,
    fallback: PriceStore,
    call: Callable[[PriceStore], T],
    operation: str,
) -> T:
    """Run *call* against *primary*, or against *fallback* if that fails.

    Store calls block, so they run in a worker thread. Only
    :class:`StoreError` triggers the fallback; anything else is a bug and
    propagates. With no primary configured the fallback answers directly.
    """
    if primary is None:
        logger.debug("%s: no database configured, using %s",
                     operation, fallback.name)
        return await asyncio.to_thread(call, fallback)
    try:
        return await asyncio.to_thread(call, primary)
    except StoreError as exc:
        logger.warning(
            "%s: %s unavailable, using %s data: %s",
            operation,
            primary.name,
            fallback.name,
            exc,
        )
    return await asyncio.to_thread(call, fallback)
