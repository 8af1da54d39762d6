# backend/app/http/session.py

from collections.abc import AsyncGenerator

import aiohttp

from app.config.settings import settings


async def get_http_session() -> AsyncGenerator[aiohttp.ClientSession, None]:
    """FastAPI dependency to get an outbound HTTP session for one request."""
    async with aiohttp.ClientSession(
        headers={"User-Agent": settings.providers.user_agent}
    ) as session:
        yield session
