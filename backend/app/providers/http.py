from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from app.schemas.provider import ProviderStatus


logger = logging.getLogger(__name__)


async def get_json(
    session: aiohttp.ClientSession,
    url: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = 10.0,
) -> tuple[ProviderStatus, Any]:
    """GET ``url`` and decode the JSON body.

    Returns a ``(status, payload)`` pair instead of raising; payload is ``None``
    unless status is ``"ok"``.
    """
    try:
        async with session.get(
            url,
            params=params,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            if response.status == 429:
                logger.warning("Rate limited by %s", url)
                return "rate_limited", None
            if response.status >= 400:
                logger.warning("Upstream %s answered %s", url, response.status)
                return "unavailable", None
            body = await response.text()
        payload = json.loads(body)
    except asyncio.TimeoutError:
        logger.warning("Timed out after %ss calling %s", timeout, url)
        return "timeout", None
    except aiohttp.ClientError as exc:
        logger.warning("Transport error calling %s: %s", url, exc)
        return "unavailable", None
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Non-JSON body from %s", url)
        return "malformed", None
    return "ok", payload


def as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace(",", ""))
        except ValueError:
            return None
    return None


def as_int(value: Any) -> int | None:
    number = as_float(value)
    if number is None:
        return None
    return int(number)


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
