from __future__ import annotations

import re
from typing import Any

from app.providers.base import ProviderAdapter
from app.providers.http import as_float, as_text, get_json
from app.schemas.provider import SearchSnapshot
from app.schemas.search import SearchResult


_SEARCH_PATH = "/api/company/search/"
_COMPANY_URL_RE = re.compile(r"/company/([A-Za-z0-9&_-]+)/")


def _symbol_for(item: dict) -> tuple[str, str] | None:
    bse_code = item.get("bse_code")
    if bse_code:
        return f"{bse_code}.BO", "BSE"
    match = _COMPANY_URL_RE.search(str(item.get("url") or ""))
    if match is None:
        return None
    code = match.group(1).upper()
    if code.isdigit():
        return f"{code}.BO", "BSE"
    return f"{code}.NS", "NSE"


def parse_search(payload: Any) -> list[SearchResult] | None:
    if isinstance(payload, dict):
        items = payload.get("results") or []
    elif isinstance(payload, list):
        items = payload
    else:
        return None
    if not isinstance(items, list):
        return None

    results: list[SearchResult] = []
    for item in items:
        if not isinstance(item, dict) or not as_text(item.get("name")):
            continue
        resolved = _symbol_for(item)
        if resolved is None:
            continue
        symbol, exchange = resolved
        results.append(
            SearchResult(
                symbol=symbol,
                name=item["name"],
                region="India",
                exchange=exchange,
                sector=as_text(item.get("sector")),
                source="screener_in",
                market_cap=as_float(item.get("market_cap")),
            )
        )
    return results


class ScreenerAdapter(ProviderAdapter):
    """Search-only adapter; screener.in offers no public quote endpoint."""

    name = "screener"

    async def search(self, query: str) -> SearchSnapshot:
        status, payload = await get_json(
            self.session,
            f"{self.settings.screener_base_url.rstrip('/')}{_SEARCH_PATH}",
            params={"q": query},
            headers=self.headers,
            timeout=self.settings.search_timeout_seconds,
        )
        if status != "ok":
            return SearchSnapshot(provider=self.name, query=query, status=status)

        results = parse_search(payload)
        if results is None:
            return SearchSnapshot(provider=self.name, query=query, status="malformed")
        return SearchSnapshot(
            provider=self.name,
            query=query,
            status="ok" if results else "empty",
            results=results,
        )
