from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SearchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str
    name: str
    type: str = "EQUITY"
    region: Optional[str] = None
    exchange: Optional[str] = None
    sector: Optional[str] = None
    logo: Optional[str] = None
    source: str
    price: Optional[float] = None
    market_cap: Optional[float] = None


class SearchResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    quotes: list[SearchResult] = Field(default_factory=list)
    source: str
    query: str = ""
    result_count: int = 0
    timestamp: datetime.datetime
