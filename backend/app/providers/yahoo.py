from __future__ import annotations

from typing import Any

from app.providers.base import ProviderAdapter
from app.providers.http import as_dict, as_float, as_int, as_text, get_json
from app.schemas.provider import QuoteSnapshot, SearchSnapshot
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


_CHART_PATH = "/v8/finance/chart/{symbol}"
_SEARCH_PATH = "/v1/finance/search"


def _chart_symbol(symbol: str, suffix: str) -> str:
    if "." in symbol or not suffix:
        return symbol
    return f"{symbol}{suffix}"


def _last_value(values: Any) -> Any:
    if not isinstance(values, list):
        return None
    for value in reversed(values):
        if value is not None:
            return value
    return None


def parse_chart(symbol: str, payload: Any) -> QuoteRecord | None:
    if not isinstance(payload, dict):
        return None
    chart = payload.get("chart")
    if not isinstance(chart, dict):
        return None
    results = chart.get("result")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return None
    result = results[0]
    meta = result.get("meta") or {}
    if not isinstance(meta, dict):
        return None

    price = as_float(meta.get("regularMarketPrice"))
    previous_close = as_float(meta.get("previousClose") or meta.get("chartPreviousClose"))
    change = None
    change_percent = None
    if price is not None and previous_close:
        change = price - previous_close
        change_percent = change / previous_close * 100

    quotes = as_dict(result.get("indicators")).get("quote")
    first_quote = quotes[0] if isinstance(quotes, list) and quotes else None
    volume = as_int(_last_value(as_dict(first_quote).get("volume")))

    return QuoteRecord(
        symbol=symbol,
        name=as_text(meta.get("longName")) or as_text(meta.get("shortName")),
        price=price,
        change=change,
        change_percent=change_percent,
        volume=volume,
        day_high=as_float(meta.get("regularMarketDayHigh")),
        day_low=as_float(meta.get("regularMarketDayLow")),
        fifty_two_week_high=as_float(meta.get("fiftyTwoWeekHigh")),
        fifty_two_week_low=as_float(meta.get("fiftyTwoWeekLow")),
        exchange=as_text(meta.get("fullExchangeName")) or as_text(meta.get("exchangeName")),
        source="yahoo_finance",
    )


def parse_search(payload: Any) -> list[SearchResult] | None:
    if not isinstance(payload, dict):
        return None
    quotes = payload.get("quotes")
    if quotes is None:
        return []
    if not isinstance(quotes, list):
        return None
    results: list[SearchResult] = []
    for item in quotes:
        if not isinstance(item, dict) or not item.get("symbol"):
            continue
        symbol = str(item["symbol"])
        results.append(
            SearchResult(
                symbol=symbol,
                name=as_text(item.get("longname")) or as_text(item.get("shortname")) or symbol,
                type=as_text(item.get("quoteType")) or as_text(item.get("typeDisp")) or "EQUITY",
                region=as_text(item.get("region")),
                exchange=as_text(item.get("exchDisp")) or as_text(item.get("exchange")),
                sector=as_text(item.get("sector")) or as_text(item.get("sectorDisp")),
                source="yahoo_finance",
                price=as_float(item.get("regularMarketPrice")),
                market_cap=as_float(item.get("marketCap")),
            )
        )
    return results


class YahooFinanceAdapter(ProviderAdapter):
    name = "yahoo"

    def _url(self, path: str) -> str:
        return f"{self.settings.yahoo_base_url.rstrip('/')}{path}"

    async def fetch_quote(self, symbol: str) -> QuoteSnapshot:
        chart_symbol = _chart_symbol(symbol, self.settings.default_exchange_suffix)
        status, payload = await get_json(
            self.session,
            self._url(_CHART_PATH.format(symbol=chart_symbol)),
            headers=self.headers,
            timeout=self.settings.quote_timeout_seconds,
        )
        if status != "ok":
            return QuoteSnapshot(provider=self.name, symbol=symbol, status=status)

        quote = parse_chart(symbol, payload)
        if quote is None:
            return QuoteSnapshot(provider=self.name, symbol=symbol, status="malformed")
        if not quote.has_price():
            return QuoteSnapshot(provider=self.name, symbol=symbol, status="empty", quote=quote)
        return QuoteSnapshot(provider=self.name, symbol=symbol, status="ok", quote=quote)

    async def search(self, query: str) -> SearchSnapshot:
        status, payload = await get_json(
            self.session,
            self._url(_SEARCH_PATH),
            params={"q": query, "quotesCount": "15"},
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
