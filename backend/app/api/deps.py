from __future__ import annotations

from functools import lru_cache

import aiohttp
from fastapi import Depends

from app.analysis.backends import GenerationBackend, build_backends
from app.config.settings import settings
from app.http.session import get_http_session
from app.providers.base import ProviderAdapter
from app.providers.registry import build_adapters
from app.reference.catalog import ReferenceCatalog, default_catalog


@lru_cache(maxsize=1)
def get_catalog() -> ReferenceCatalog:
    return default_catalog()


def get_quote_adapters(
    session: aiohttp.ClientSession = Depends(get_http_session),
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> list[ProviderAdapter]:
    return build_adapters(settings.providers.quote_adapters, session, catalog, settings.providers)


def get_search_adapters(
    session: aiohttp.ClientSession = Depends(get_http_session),
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> list[ProviderAdapter]:
    return build_adapters(settings.providers.search_adapters, session, catalog, settings.providers)


def get_search_fallback_adapters(
    session: aiohttp.ClientSession = Depends(get_http_session),
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> list[ProviderAdapter]:
    return build_adapters(
        settings.providers.search_fallback_adapters, session, catalog, settings.providers
    )


def get_generation_backends(
    session: aiohttp.ClientSession = Depends(get_http_session),
) -> list[GenerationBackend]:
    return build_backends(session, settings.analysis)
