from __future__ import annotations

import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.quote import QuoteRecord


class AnalysisCategory(str, Enum):
    OVERVIEW = "overview"
    FUNDAMENTALS = "fundamentals"
    FINANCIALS = "financials"
    SHAREHOLDING = "shareholding"
    CUSTOM = "custom"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FetchSingleStockRequest(_CamelModel):
    action: Literal["fetchSingleStock"]
    symbol: str = Field(min_length=1)


class FetchMultipleStocksRequest(_CamelModel):
    action: Literal["fetchMultipleStocks"]
    symbols: list[str]


class AnalysisRequest(_CamelModel):
    stock_symbol: str = Field(min_length=1)
    analysis_type: str = Field(min_length=1)
    custom_query: Optional[str] = None
    stock_name: Optional[str] = None
    current_price: Optional[float] = None
    market_cap: Optional[str] = None
    pe_ratio: Optional[float] = None


class SingleStockResponse(_CamelModel):
    stock: Optional[QuoteRecord] = None
    success: bool = True


class MultipleStocksResponse(_CamelModel):
    stocks: list[QuoteRecord] = Field(default_factory=list)
    success: bool = True


class ChartSpec(_CamelModel):
    type: Literal["line", "bar", "pie"]
    title: str
    data: list[dict[str, Any]]


class TableSpec(_CamelModel):
    title: str
    headers: list[str]
    rows: list[list[str]]


class AnalysisResponse(_CamelModel):
    analysis: str
    charts: list[ChartSpec]
    tables: list[TableSpec]
    data_quality: str
    backend: str
    stock: QuoteRecord
    last_updated: datetime.datetime
