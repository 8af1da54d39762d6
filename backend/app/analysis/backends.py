from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from app.config.settings import AnalysisSettings


logger = logging.getLogger(__name__)

_COMPLETION_TOKEN_FAMILIES = ("gpt-5", "gpt-4.1", "o3", "o4")


class BackendUnavailable(Exception):
    """A generation backend failed, answered non-2xx, or returned no content."""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.backend = backend
        self.status_code = status_code

        parts = [message]
        if backend:
            parts.append(f"backend={backend}")
        if status_code:
            parts.append(f"status={status_code}")
        super().__init__(f"{parts[0]} ({', '.join(parts[1:])})" if len(parts) > 1 else parts[0])


class GenerationBackend:
    name = "backend"
    model = "none"

    async def generate(self, system_prompt: str, prompt: str) -> str:
        raise BackendUnavailable("Backend not implemented", backend=self.name)


class ChatCompletionBackend(GenerationBackend):
    """OpenAI-compatible chat completions endpoint for one model."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        name: str,
        model: str,
        api_key: str,
        base_url: str,
        timeout: float = 60.0,
    ) -> None:
        self.session = session
        self.name = name
        self.model = model
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def build_body(self, system_prompt: str, prompt: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "top_p": 0.9,
        }
        if any(family in self.model for family in _COMPLETION_TOKEN_FAMILIES):
            body["max_completion_tokens"] = 4000
        else:
            body["max_tokens"] = 3000
            body["temperature"] = 0.7
        return body

    async def generate(self, system_prompt: str, prompt: str) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with self.session.post(
                url,
                json=self.build_body(system_prompt, prompt),
                headers=headers,
                timeout=self.timeout,
            ) as response:
                body = await response.text()
                if response.status >= 300:
                    logger.warning("Backend %s answered %s: %s", self.name, response.status, body[:500])
                    raise BackendUnavailable(
                        "Non-success response", backend=self.name, status_code=response.status
                    )
            payload = json.loads(body)
        except asyncio.TimeoutError as exc:
            raise BackendUnavailable("Timed out", backend=self.name) from exc
        except aiohttp.ClientError as exc:
            raise BackendUnavailable(f"Transport error: {exc}", backend=self.name) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise BackendUnavailable("Non-JSON response", backend=self.name) from exc

        content = _first_message_content(payload)
        if not content.strip():
            raise BackendUnavailable("Empty content", backend=self.name)
        return content


def _first_message_content(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


def build_backends(
    session: aiohttp.ClientSession, settings: AnalysisSettings
) -> list[GenerationBackend]:
    if not settings.api_key:
        logger.info("No generation API key configured; analysis will use templates")
        return []
    return [
        ChatCompletionBackend(
            session,
            name=backend.name,
            model=backend.model,
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
        )
        for backend in settings.backends
    ]
