from __future__ import annotations

import aiohttp

from app.config.settings import ProviderSettings
from app.schemas.provider import QuoteSnapshot, SearchSnapshot
from app.schemas.quote import QuoteRecord


class ProviderAdapter:
    """One upstream source translated into the common record shapes.

    Adapters never raise for upstream trouble and never retry; a failed call
    comes back as a snapshot with a non-``ok`` status.
    """

    name = "provider"

    def __init__(
        self, session: aiohttp.ClientSession | None, settings: ProviderSettings
    ) -> None:
        self.session = session
        self.settings = settings

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.settings.user_agent, "Accept": "application/json"}

    async def fetch_quote(self, symbol: str) -> QuoteSnapshot:
        return QuoteSnapshot(provider=self.name, symbol=symbol, status="unavailable")

    async def search(self, query: str) -> SearchSnapshot:
        return SearchSnapshot(provider=self.name, query=query, status="unavailable")

    def describe(self, symbol: str) -> QuoteRecord | None:
        """Static knowledge about ``symbol`` that needs no network call."""
        return None
