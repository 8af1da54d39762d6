from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence

from app.analysis.backends import BackendUnavailable, GenerationBackend
from app.analysis.categories import resolve_category
from app.analysis.datasets import chart_pair, table_pair
from app.analysis.prompts import build_prompt, system_prompt
from app.analysis.redaction import redact
from app.analysis.templates import render_fallback
from app.config.settings import AnalysisSettings
from app.schemas.analysis import AnalysisResponse
from app.schemas.quote import QuoteRecord


logger = logging.getLogger(__name__)

TEMPLATE_BACKEND = "template-fallback"


async def run_analysis(
    quote: QuoteRecord,
    analysis_type: str,
    backends: Sequence[GenerationBackend],
    settings: AnalysisSettings,
    custom_query: str | None = None,
) -> AnalysisResponse:
    """Generate narrative for ``quote`` and attach the category's charts and tables.

    Backends are tried one after another; the first non-empty answer wins.
    When none answers, a deterministic template is rendered instead.
    """
    category = resolve_category(analysis_type)
    prompt = build_prompt(quote, category, custom_query)
    instructions = system_prompt(settings.product_name)

    narrative = ""
    backend_id = TEMPLATE_BACKEND
    data_quality = "Market Data + Template Analysis"
    for backend in backends:
        logger.info("Attempting analysis with %s (%s)", backend.name, backend.model)
        try:
            text = await backend.generate(instructions, prompt)
        except BackendUnavailable as exc:
            logger.warning("Backend failed: %s", exc)
            continue
        except Exception:
            logger.exception("Backend %s crashed", backend.name)
            continue
        if not isinstance(text, str) or not text.strip():
            logger.warning("Empty response from %s, trying next", backend.name)
            continue
        narrative = text
        backend_id = backend.model
        data_quality = f"Live Market Data + AI Analysis ({backend.name})"
        break

    if not narrative:
        logger.info("No backend answered for %s; rendering %s template", quote.symbol, category.value)
        narrative = render_fallback(quote, category, settings, custom_query)

    return AnalysisResponse(
        analysis=redact(narrative, settings.redactions),
        charts=chart_pair(quote, category),
        tables=table_pair(quote, category),
        data_quality=data_quality,
        backend=backend_id,
        stock=quote,
        last_updated=datetime.datetime.now(datetime.UTC),
    )
