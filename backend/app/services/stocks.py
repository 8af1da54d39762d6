from __future__ import annotations

import asyncio
import datetime
import logging
from collections.abc import Sequence

from app.providers.base import ProviderAdapter
from app.providers.selector import fetch_with_fallback, search_all
from app.ranking.ranking import dedupe_and_rank
from app.reference.catalog import ReferenceCatalog, normalize_symbol
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResponse
from app.synthetic.fill import fill_quote, fill_search_result


logger = logging.getLogger(__name__)


async def resolve_stock(
    symbol: str,
    adapters: Sequence[ProviderAdapter],
    catalog: ReferenceCatalog,
    timeout: float | None = None,
    hints: QuoteRecord | None = None,
) -> QuoteRecord | None:
    quote = await fetch_with_fallback(symbol, adapters, timeout)
    if quote is None:
        return None
    return fill_quote(quote.merge_missing(hints), catalog)


async def resolve_stocks(
    symbols: Sequence[str],
    adapters: Sequence[ProviderAdapter],
    catalog: ReferenceCatalog,
    timeout: float | None = None,
) -> list[QuoteRecord]:
    by_key: dict[str, str] = {}
    for symbol in symbols:
        by_key.setdefault(normalize_symbol(symbol), symbol)
    unique = list(by_key.values())
    quotes = await asyncio.gather(
        *(resolve_stock(symbol, adapters, catalog, timeout) for symbol in unique)
    )
    resolved = [quote for quote in quotes if quote is not None]
    if len(resolved) < len(unique):
        logger.info("Resolved %d of %d requested symbols", len(resolved), len(unique))
    return resolved


async def search_stocks(
    query: str,
    adapters: Sequence[ProviderAdapter],
    fallback: Sequence[ProviderAdapter],
    catalog: ReferenceCatalog,
    max_results: int = 15,
    timeout: float | None = None,
) -> SearchResponse:
    now = datetime.datetime.now(datetime.UTC)
    cleaned = query.strip()
    if not cleaned:
        return SearchResponse(quotes=[], source="empty_query", query=query, timestamp=now)

    source = "multi_source"
    results = dedupe_and_rank(await search_all(cleaned, adapters, timeout), cleaned, max_results)
    if not results and fallback:
        logger.info("No live search results for %r; using fallback sources", cleaned)
        source = "reference_fallback"
        results = dedupe_and_rank(await search_all(cleaned, fallback, timeout), cleaned, max_results)

    quotes = [fill_search_result(result, catalog) for result in results]
    return SearchResponse(
        quotes=quotes,
        source=source,
        query=cleaned,
        result_count=len(quotes),
        timestamp=now,
    )
