import asyncio

from app.config.settings import ProviderSettings
from app.providers.base import ProviderAdapter
from app.providers.selector import fetch_with_fallback, search_all
from app.schemas.provider import QuoteSnapshot, SearchSnapshot
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


class FakeAdapter(ProviderAdapter):
    def __init__(
        self,
        name: str,
        quote: QuoteRecord | None = None,
        status: str = "ok",
        results: list[SearchResult] | None = None,
        described: QuoteRecord | None = None,
        delay: float = 0.0,
        crash: bool = False,
    ) -> None:
        super().__init__(None, ProviderSettings())
        self.name = name
        self.quote = quote
        self.status = status
        self.results = results or []
        self.described = described
        self.delay = delay
        self.crash = crash
        self.quote_calls = 0
        self.search_calls = 0

    async def fetch_quote(self, symbol: str) -> QuoteSnapshot:
        self.quote_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.crash:
            raise RuntimeError("boom")
        return QuoteSnapshot(provider=self.name, symbol=symbol, status=self.status, quote=self.quote)

    async def search(self, query: str) -> SearchSnapshot:
        self.search_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.crash:
            raise RuntimeError("boom")
        return SearchSnapshot(provider=self.name, query=query, status=self.status, results=self.results)

    def describe(self, symbol: str) -> QuoteRecord | None:
        return self.described


def test_fetch_with_fallback_returns_none_when_all_fail() -> None:
    adapters = [
        FakeAdapter("yahoo", status="unavailable"),
        FakeAdapter("nse", status="rate_limited"),
        FakeAdapter("reference", status="empty", quote=QuoteRecord(symbol="XYZ", name="Xyz")),
    ]

    assert asyncio.run(fetch_with_fallback("XYZ", adapters)) is None
    assert [adapter.quote_calls for adapter in adapters] == [1, 1, 1]


def test_fetch_with_fallback_stops_at_first_priced_quote() -> None:
    first = FakeAdapter("yahoo", status="empty", quote=QuoteRecord(symbol="TCS", name="TCS"))
    second = FakeAdapter("nse", quote=QuoteRecord(symbol="TCS", price=3500.0, source="nse"))
    third = FakeAdapter("other", quote=QuoteRecord(symbol="TCS", price=1.0, source="other"))

    quote = asyncio.run(fetch_with_fallback("TCS", [first, second, third]))

    assert quote is not None
    assert quote.price == 3500.0
    assert quote.source == "nse"
    assert third.quote_calls == 0


def test_fetch_with_fallback_backfills_from_lower_priority_describe() -> None:
    live = FakeAdapter("yahoo", quote=QuoteRecord(symbol="TCS", price=3500.0, name="Live Name"))
    reference = FakeAdapter(
        "reference",
        described=QuoteRecord(symbol="TCS", name="Catalog Name", sector="IT Services", roe=45.2),
    )

    quote = asyncio.run(fetch_with_fallback("TCS", [live, reference]))

    assert quote is not None
    assert quote.name == "Live Name"
    assert quote.sector == "IT Services"
    assert quote.roe == 45.2
    assert reference.quote_calls == 0


def test_fetch_with_fallback_treats_zero_price_as_missing() -> None:
    zero = FakeAdapter("yahoo", quote=QuoteRecord(symbol="TCS", price=0.0))
    live = FakeAdapter("nse", quote=QuoteRecord(symbol="TCS", price=10.0))

    quote = asyncio.run(fetch_with_fallback("TCS", [zero, live]))

    assert quote is not None
    assert quote.price == 10.0


def test_fetch_with_fallback_survives_crash_and_timeout() -> None:
    crashing = FakeAdapter("crash", crash=True)
    hung = FakeAdapter("hung", delay=5.0, quote=QuoteRecord(symbol="TCS", price=1.0))
    live = FakeAdapter("live", quote=QuoteRecord(symbol="TCS", price=42.0))

    quote = asyncio.run(fetch_with_fallback("TCS", [crashing, hung, live], timeout=0.05))

    assert quote is not None
    assert quote.price == 42.0


def test_search_all_concatenates_in_adapter_order() -> None:
    first = FakeAdapter("a", results=[SearchResult(symbol="A", name="A", source="a")])
    empty = FakeAdapter("b", status="empty")
    second = FakeAdapter("c", results=[SearchResult(symbol="C", name="C", source="c")])

    results = asyncio.run(search_all("x", [first, empty, second]))

    assert [item.symbol for item in results] == ["A", "C"]


def test_search_all_hung_adapter_does_not_block_others() -> None:
    hung = FakeAdapter("hung", delay=5.0, results=[SearchResult(symbol="H", name="H", source="h")])
    crashing = FakeAdapter("crash", crash=True)
    live = FakeAdapter("live", results=[SearchResult(symbol="L", name="L", source="l")])

    async def run() -> tuple[list[SearchResult], float]:
        loop = asyncio.get_running_loop()
        started = loop.time()
        results = await search_all("x", [hung, crashing, live], timeout=0.05)
        return results, loop.time() - started

    results, elapsed = asyncio.run(run())

    assert [item.symbol for item in results] == ["L"]
    assert elapsed < 2.0
    assert hung.search_calls == 1
