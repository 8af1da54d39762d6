from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from app.providers.base import ProviderAdapter
from app.schemas.provider import QuoteSnapshot, SearchSnapshot
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


logger = logging.getLogger(__name__)


async def _fetch_quote(
    adapter: ProviderAdapter, symbol: str, timeout: float | None
) -> QuoteSnapshot:
    try:
        return await asyncio.wait_for(adapter.fetch_quote(symbol), timeout)
    except asyncio.TimeoutError:
        return QuoteSnapshot(provider=adapter.name, symbol=symbol, status="timeout")
    except Exception:
        logger.exception("Quote adapter %s crashed for %s", adapter.name, symbol)
        return QuoteSnapshot(provider=adapter.name, symbol=symbol, status="unavailable")


async def _search(
    adapter: ProviderAdapter, query: str, timeout: float | None
) -> SearchSnapshot:
    try:
        return await asyncio.wait_for(adapter.search(query), timeout)
    except asyncio.TimeoutError:
        return SearchSnapshot(provider=adapter.name, query=query, status="timeout")
    except Exception:
        logger.exception("Search adapter %s crashed for %r", adapter.name, query)
        return SearchSnapshot(provider=adapter.name, query=query, status="unavailable")


async def fetch_with_fallback(
    symbol: str,
    adapters: Sequence[ProviderAdapter],
    timeout: float | None = None,
) -> QuoteRecord | None:
    """Try ``adapters`` in order and return the first quote carrying a price.

    Lower-priority adapters after the winner only contribute static
    descriptive fields through ``describe``. Returns ``None`` when no adapter
    produced a price.
    """
    resolved: QuoteRecord | None = None
    remaining: Sequence[ProviderAdapter] = ()
    for index, adapter in enumerate(adapters):
        snapshot = await _fetch_quote(adapter, symbol, timeout)
        if snapshot.status == "ok" and snapshot.quote and snapshot.quote.has_price():
            logger.info("Resolved %s via %s", symbol, adapter.name)
            resolved = snapshot.quote
            remaining = adapters[index + 1 :]
            break
        logger.info("Adapter %s gave no price for %s (%s)", adapter.name, symbol, snapshot.status)

    if resolved is None:
        logger.warning("No adapter could resolve a price for %s", symbol)
        return None

    for adapter in remaining:
        resolved = resolved.merge_missing(adapter.describe(symbol))
    return resolved


async def search_all(
    query: str,
    adapters: Sequence[ProviderAdapter],
    timeout: float | None = None,
) -> list[SearchResult]:
    """Run every adapter concurrently and concatenate results in adapter order.

    Each adapter has its own timeout; duplicates are left for the ranker.
    """
    snapshots = await asyncio.gather(
        *(_search(adapter, query, timeout) for adapter in adapters)
    )
    results: list[SearchResult] = []
    for snapshot in snapshots:
        if snapshot.status == "ok":
            logger.info("Search source %s returned %d results", snapshot.provider, len(snapshot.results))
            results.extend(snapshot.results)
        else:
            logger.info("Search source %s skipped (%s)", snapshot.provider, snapshot.status)
    return results
