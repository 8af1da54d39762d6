from __future__ import annotations

from typing import Any

from app.providers.base import ProviderAdapter
from app.providers.http import as_dict, as_float, as_int, as_text, get_json
from app.reference.catalog import normalize_symbol
from app.schemas.provider import QuoteSnapshot, SearchSnapshot
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


_QUOTE_PATH = "/api/quote-equity"
_AUTOCOMPLETE_PATH = "/api/search/autocomplete"


def parse_quote(symbol: str, payload: Any) -> QuoteRecord | None:
    if not isinstance(payload, dict):
        return None
    price_info = payload.get("priceInfo")
    if not isinstance(price_info, dict):
        return None
    intraday = as_dict(price_info.get("intraDayHighLow"))
    week = as_dict(price_info.get("weekHighLow"))
    info = as_dict(payload.get("info"))
    metadata = as_dict(payload.get("metadata"))
    order_book = as_dict(payload.get("marketDeptOrderBook"))

    return QuoteRecord(
        symbol=symbol,
        name=as_text(info.get("companyName")),
        price=as_float(price_info.get("lastPrice")),
        change=as_float(price_info.get("change")),
        change_percent=as_float(price_info.get("pChange")),
        volume=as_int(order_book.get("totalTradedVolume")),
        day_high=as_float(intraday.get("max")),
        day_low=as_float(intraday.get("min")),
        fifty_two_week_high=as_float(week.get("max")),
        fifty_two_week_low=as_float(week.get("min")),
        pe_ratio=as_float(metadata.get("pdSymbolPe")),
        sector=as_text(metadata.get("industry")) or as_text(info.get("industry")),
        exchange="NSE",
        source="nse",
    )


def parse_autocomplete(query: str, payload: Any) -> list[SearchResult] | None:
    if not isinstance(payload, dict):
        return None
    symbols = payload.get("symbols") or []
    if not isinstance(symbols, list):
        return None
    needle = query.casefold()
    results: list[SearchResult] = []
    for item in symbols:
        if not isinstance(item, dict):
            continue
        symbol = item.get("symbol")
        if not symbol or needle not in str(symbol).casefold():
            continue
        results.append(
            SearchResult(
                symbol=f"{symbol}.NS",
                name=as_text(item.get("symbol_info")) or as_text(item.get("name")) or str(symbol),
                region="India",
                exchange="NSE",
                sector=as_text(item.get("industry")),
                source="nse_official",
            )
        )
    return results


class NSEAdapter(ProviderAdapter):
    name = "nse"

    @property
    def headers(self) -> dict[str, str]:
        return {
            **super().headers,
            "Accept-Language": "en-US,en;q=0.9",
            "Referer": f"{self.settings.nse_base_url.rstrip('/')}/",
        }

    def _url(self, path: str) -> str:
        return f"{self.settings.nse_base_url.rstrip('/')}{path}"

    async def fetch_quote(self, symbol: str) -> QuoteSnapshot:
        status, payload = await get_json(
            self.session,
            self._url(_QUOTE_PATH),
            params={"symbol": normalize_symbol(symbol)},
            headers=self.headers,
            timeout=self.settings.quote_timeout_seconds,
        )
        if status != "ok":
            return QuoteSnapshot(provider=self.name, symbol=symbol, status=status)

        quote = parse_quote(symbol, payload)
        if quote is None:
            return QuoteSnapshot(provider=self.name, symbol=symbol, status="malformed")
        if not quote.has_price():
            return QuoteSnapshot(provider=self.name, symbol=symbol, status="empty", quote=quote)
        return QuoteSnapshot(provider=self.name, symbol=symbol, status="ok", quote=quote)

    async def search(self, query: str) -> SearchSnapshot:
        status, payload = await get_json(
            self.session,
            self._url(_AUTOCOMPLETE_PATH),
            params={"q": query},
            headers=self.headers,
            timeout=self.settings.search_timeout_seconds,
        )
        if status != "ok":
            return SearchSnapshot(provider=self.name, query=query, status=status)

        results = parse_autocomplete(query, payload)
        if results is None:
            return SearchSnapshot(provider=self.name, query=query, status="malformed")
        return SearchSnapshot(
            provider=self.name,
            query=query,
            status="ok" if results else "empty",
            results=results,
        )
