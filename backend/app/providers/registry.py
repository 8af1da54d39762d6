from __future__ import annotations

from collections.abc import Sequence

import aiohttp

from app.config.settings import ProviderSettings
from app.providers.base import ProviderAdapter
from app.providers.nse import NSEAdapter
from app.providers.reference import ReferenceAdapter
from app.providers.screener import ScreenerAdapter
from app.providers.yahoo import YahooFinanceAdapter
from app.reference.catalog import ReferenceCatalog


_NETWORK_ADAPTERS: dict[str, type[ProviderAdapter]] = {
    YahooFinanceAdapter.name: YahooFinanceAdapter,
    NSEAdapter.name: NSEAdapter,
    ScreenerAdapter.name: ScreenerAdapter,
}


def build_adapters(
    names: Sequence[str],
    session: aiohttp.ClientSession | None,
    catalog: ReferenceCatalog,
    settings: ProviderSettings,
) -> list[ProviderAdapter]:
    """Instantiate adapters in the configured priority order."""
    adapters: list[ProviderAdapter] = []
    for name in names:
        key = name.strip().lower()
        if key == ReferenceAdapter.name:
            adapters.append(ReferenceAdapter(catalog, settings))
            continue
        adapter_cls = _NETWORK_ADAPTERS.get(key)
        if adapter_cls is None:
            raise ValueError(f"Unknown provider adapter: {name!r}")
        adapters.append(adapter_cls(session, settings))
    return adapters
