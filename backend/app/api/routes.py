import logging
from typing import Any, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.analysis.backends import GenerationBackend
from app.analysis.pipeline import run_analysis
from app.api.deps import (
    get_catalog,
    get_generation_backends,
    get_quote_adapters,
    get_search_adapters,
    get_search_fallback_adapters,
)
from app.config.settings import settings
from app.providers.base import ProviderAdapter
from app.reference.catalog import ReferenceCatalog, normalize_symbol
from app.schemas.analysis import (
    AnalysisRequest,
    AnalysisResponse,
    FetchMultipleStocksRequest,
    FetchSingleStockRequest,
    MultipleStocksResponse,
    SingleStockResponse,
)
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResponse
from app.schemas.validation import ValidationResult
from app.services.stocks import resolve_stock, resolve_stocks, search_stocks
from app.validation.validator import validate_analysis_payload

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_on_validation_fail(validation: ValidationResult) -> None:
    if validation.status == "fail":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Invalid request parameters.",
                "validation": validation.model_dump(),
            },
        )


def _hints_from_request(symbol: str, request: AnalysisRequest) -> QuoteRecord:
    return QuoteRecord(
        symbol=symbol,
        name=request.stock_name,
        price=request.current_price,
        market_cap=request.market_cap,
        pe_ratio=request.pe_ratio,
    )


async def _analyse(
    request: AnalysisRequest,
    adapters: list[ProviderAdapter],
    backends: list[GenerationBackend],
    catalog: ReferenceCatalog,
) -> AnalysisResponse:
    symbol = normalize_symbol(request.stock_symbol)
    logger.info("Generating %s analysis for %s", request.analysis_type, symbol)
    stock = await resolve_stock(
        symbol,
        adapters,
        catalog,
        settings.providers.quote_timeout_seconds,
        hints=_hints_from_request(symbol, request),
    )
    if stock is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"No market data found for {symbol}."},
        )
    return await run_analysis(
        stock,
        request.analysis_type,
        backends,
        settings.analysis,
        custom_query=request.custom_query,
    )


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/search", response_model=SearchResponse)
async def search_stocks_endpoint(
    q: str = Query(default=""),
    adapters: list[ProviderAdapter] = Depends(get_search_adapters),
    fallback: list[ProviderAdapter] = Depends(get_search_fallback_adapters),
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> SearchResponse:
    try:
        return await search_stocks(
            q,
            adapters,
            fallback,
            catalog,
            max_results=settings.search.max_results,
            timeout=settings.providers.search_timeout_seconds,
        )
    except Exception:
        logger.exception("Stock search failed for %r", q)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Stock search is temporarily unavailable."},
        )


@router.post("/analysis", response_model=None)
async def analysis_endpoint(
    payload: Any = Body(...),
    adapters: list[ProviderAdapter] = Depends(get_quote_adapters),
    backends: list[GenerationBackend] = Depends(get_generation_backends),
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> Union[SingleStockResponse, MultipleStocksResponse, AnalysisResponse]:
    request, validation = validate_analysis_payload(payload)
    _raise_on_validation_fail(validation)
    timeout = settings.providers.quote_timeout_seconds

    try:
        if isinstance(request, FetchSingleStockRequest):
            stock = await resolve_stock(request.symbol, adapters, catalog, timeout)
            return SingleStockResponse(stock=stock)

        if isinstance(request, FetchMultipleStocksRequest):
            stocks = await resolve_stocks(request.symbols, adapters, catalog, timeout)
            return MultipleStocksResponse(stocks=stocks)

        return await _analyse(request, adapters, backends, catalog)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Analysis request failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Analysis service is temporarily unavailable."},
        )
