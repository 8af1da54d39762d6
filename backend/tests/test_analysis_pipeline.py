import asyncio
import json
import re

import pytest

from app.analysis.backends import BackendUnavailable, ChatCompletionBackend, GenerationBackend
from app.analysis.categories import resolve_category
from app.analysis.pipeline import TEMPLATE_BACKEND, run_analysis
from app.analysis.templates import recommendation
from app.config.settings import AnalysisSettings
from app.schemas.analysis import AnalysisCategory
from app.schemas.quote import QuoteRecord


BRAND_TOKENS = re.compile(r"OpenAI|GPT-[0-9]+|Gemini|Google AI|Claude|Anthropic", re.IGNORECASE)


class FailingBackend(GenerationBackend):
    def __init__(self, name: str) -> None:
        self.name = name
        self.model = f"{name}-model"
        self.calls = 0

    async def generate(self, system_prompt: str, prompt: str) -> str:
        self.calls += 1
        raise BackendUnavailable("down", backend=self.name, status_code=503)


class StaticBackend(GenerationBackend):
    def __init__(self, name: str, text: str) -> None:
        self.name = name
        self.model = f"{name}-model"
        self.text = text
        self.calls = 0
        self.prompts: list[str] = []

    async def generate(self, system_prompt: str, prompt: str) -> str:
        self.calls += 1
        self.prompts.append(prompt)
        return self.text


def build_settings() -> AnalysisSettings:
    return AnalysisSettings()


def build_quote(**overrides) -> QuoteRecord:
    values = {
        "symbol": "TCS",
        "name": "Tata Consultancy Services Limited",
        "price": 3500.0,
        "change_percent": 0.8,
        "market_cap": "₹12,80,000 Cr",
        "pe_ratio": 28.5,
        "roe": 45.2,
        "sector": "IT Services",
    }
    values.update(overrides)
    return QuoteRecord(**values)


def test_all_backends_failing_renders_template() -> None:
    backends = [FailingBackend("primary"), FailingBackend("secondary")]

    response = asyncio.run(run_analysis(build_quote(), "fundamentals", backends, build_settings()))

    assert response.analysis.strip()
    assert response.backend == TEMPLATE_BACKEND
    assert response.data_quality == "Market Data + Template Analysis"
    assert len(response.charts) == 2
    assert len(response.tables) == 2
    assert BRAND_TOKENS.search(response.analysis) is None
    assert [backend.calls for backend in backends] == [1, 1]


def test_no_backends_configured_renders_template() -> None:
    response = asyncio.run(run_analysis(build_quote(), "shareholding", [], build_settings()))

    assert "Shareholding Pattern Analysis" in response.analysis
    assert response.charts[0].type == "pie"


def test_backend_narrative_is_redacted() -> None:
    backend = StaticBackend(
        "primary", "Report generated by GPT-4 from OpenAI, powered by Claude AI today."
    )

    response = asyncio.run(run_analysis(build_quote(), "overview", [backend], build_settings()))

    assert BRAND_TOKENS.search(response.analysis) is None
    assert "Advanced AI" in response.analysis
    assert response.backend == "primary-model"
    assert response.data_quality == "Live Market Data + AI Analysis (primary)"


def test_empty_backend_answer_moves_to_next_backend() -> None:
    empty = StaticBackend("primary", "   ")
    failing = FailingBackend("secondary")
    good = StaticBackend("backup", "Solid fundamentals.")

    response = asyncio.run(
        run_analysis(build_quote(), "overview", [empty, failing, good], build_settings())
    )

    assert response.analysis == "Solid fundamentals."
    assert response.backend == "backup-model"
    assert [empty.calls, failing.calls, good.calls] == [1, 1, 1]


def test_first_answer_wins() -> None:
    first = StaticBackend("primary", "First.")
    second = StaticBackend("secondary", "Second.")

    response = asyncio.run(run_analysis(build_quote(), "overview", [first, second], build_settings()))

    assert response.analysis == "First."
    assert second.calls == 0


def test_unknown_category_uses_overview_datasets() -> None:
    settings = build_settings()
    unknown = asyncio.run(run_analysis(build_quote(), "management", [], settings))
    overview = asyncio.run(run_analysis(build_quote(), "overview", [], settings))

    assert [chart.title for chart in unknown.charts] == [chart.title for chart in overview.charts]
    assert [table.title for table in unknown.tables] == [table.title for table in overview.tables]


def test_custom_query_is_reflected_in_prompt_and_fallback() -> None:
    backend = StaticBackend("primary", "Answer.")
    asyncio.run(
        run_analysis(
            build_quote(), "custom", [backend], build_settings(), custom_query="Is the dividend safe?"
        )
    )
    fallback = asyncio.run(
        run_analysis(build_quote(), "custom", [], build_settings(), custom_query="Is the dividend safe?")
    )

    assert "Is the dividend safe?" in backend.prompts[0]
    assert fallback.analysis.startswith("**Custom Analysis for Tata Consultancy Services Limited**")
    assert len(fallback.charts) == 2


def test_resolve_category_aliases() -> None:
    assert resolve_category("Fundamentals") is AnalysisCategory.FUNDAMENTALS
    assert resolve_category("cashflow") is AnalysisCategory.FINANCIALS
    assert resolve_category("competitors") is AnalysisCategory.OVERVIEW
    assert resolve_category(None) is AnalysisCategory.OVERVIEW


def test_recommendation_thresholds() -> None:
    settings = build_settings()

    assert recommendation(build_quote(pe_ratio=15.0, roe=20.0), settings) == "BUY"
    assert recommendation(build_quote(pe_ratio=15.0, roe=20.0, change_percent=-2.0), settings) == "HOLD"
    assert recommendation(build_quote(pe_ratio=22.0, roe=20.0), settings) == "HOLD"
    assert recommendation(build_quote(pe_ratio=40.0), settings) == "WATCH"


def test_chat_backend_body_depends_on_model_family() -> None:
    newer = ChatCompletionBackend(None, "primary", "gpt-4.1", "key", "https://example.test/v1")
    older = ChatCompletionBackend(None, "backup", "gpt-4o", "key", "https://example.test/v1")

    newer_body = newer.build_body("system", "prompt")
    older_body = older.build_body("system", "prompt")

    assert newer_body["max_completion_tokens"] == 4000
    assert "temperature" not in newer_body
    assert older_body["max_tokens"] == 3000
    assert older_body["temperature"] == 0.7
    assert older_body["messages"][1] == {"role": "user", "content": "prompt"}


class FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self.body = body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def text(self) -> str:
        return self.body.decode("utf-8")


class FakeSession:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self.body = body
        self.calls = 0

    def post(self, url, **kwargs) -> FakeResponse:
        self.calls += 1
        return FakeResponse(self.status, self.body)


def chat_backend(name: str, body: bytes, status: int = 200) -> ChatCompletionBackend:
    return ChatCompletionBackend(
        FakeSession(status, body), name, f"{name}-model", "key", "https://example.test/v1"
    )


class CrashingBackend(GenerationBackend):
    name = "crashing"
    model = "crashing-model"

    async def generate(self, system_prompt: str, prompt: str) -> str:
        raise KeyError(0)


def test_chat_backend_rejects_choices_object() -> None:
    backend = chat_backend("primary", json.dumps({"choices": {"first": 1}}).encode())

    with pytest.raises(BackendUnavailable):
        asyncio.run(backend.generate("system", "prompt"))


def test_chat_backend_rejects_undecodable_body() -> None:
    backend = chat_backend("primary", b"\xff\xfe{\"choices\": []}")

    with pytest.raises(BackendUnavailable):
        asyncio.run(backend.generate("system", "prompt"))


def test_chat_backend_returns_message_content() -> None:
    body = {"choices": [{"message": {"role": "assistant", "content": "Looks steady."}}]}
    backend = chat_backend("primary", json.dumps(body).encode())

    assert asyncio.run(backend.generate("system", "prompt")) == "Looks steady."


def test_chat_backend_non_success_status_is_unavailable() -> None:
    backend = chat_backend("primary", b"quota exceeded", status=429)

    with pytest.raises(BackendUnavailable) as excinfo:
        asyncio.run(backend.generate("system", "prompt"))

    assert excinfo.value.status_code == 429


def test_malformed_backend_replies_fall_back_to_template() -> None:
    backends = [
        chat_backend("primary", json.dumps({"choices": {"first": 1}}).encode()),
        chat_backend("secondary", b"\xff\xfe{\"choices\": []}"),
        CrashingBackend(),
    ]

    response = asyncio.run(run_analysis(build_quote(), "overview", backends, build_settings()))

    assert response.backend == TEMPLATE_BACKEND
    assert response.analysis.strip()
    assert [backend.session.calls for backend in backends[:2]] == [1, 1]


def test_backend_after_crash_still_answers() -> None:
    good = StaticBackend("backup", "Recovered.")

    response = asyncio.run(
        run_analysis(build_quote(), "overview", [CrashingBackend(), good], build_settings())
    )

    assert response.analysis == "Recovered."
    assert response.backend == "backup-model"
