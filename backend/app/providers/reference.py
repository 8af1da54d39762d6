from __future__ import annotations

from app.config.settings import ProviderSettings
from app.providers.base import ProviderAdapter
from app.reference.catalog import ReferenceCatalog
from app.schemas.provider import QuoteSnapshot, SearchSnapshot
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


class ReferenceAdapter(ProviderAdapter):
    """Adapter over the static reference catalog. It never supplies a live price."""

    name = "reference"

    def __init__(self, catalog: ReferenceCatalog, settings: ProviderSettings) -> None:
        super().__init__(None, settings)
        self.catalog = catalog

    async def fetch_quote(self, symbol: str) -> QuoteSnapshot:
        quote = self.describe(symbol)
        if quote is None:
            return QuoteSnapshot(provider=self.name, symbol=symbol, status="empty")
        return QuoteSnapshot(provider=self.name, symbol=symbol, status="empty", quote=quote)

    async def search(self, query: str) -> SearchSnapshot:
        results = [
            SearchResult(
                symbol=company.listed_symbol,
                name=company.name,
                region=company.region,
                exchange=company.exchange,
                sector=company.sector,
                logo=self.catalog.logo_url(company.symbol),
                source="reference_catalog",
            )
            for company in self.catalog.search(query)
        ]
        return SearchSnapshot(
            provider=self.name,
            query=query,
            status="ok" if results else "empty",
            results=results,
        )

    def describe(self, symbol: str) -> QuoteRecord | None:
        quote = self.catalog.describe(symbol)
        if quote is not None:
            quote = quote.model_copy(update={"source": "reference_catalog"})
        return quote
