from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


ProviderStatus = Literal[
    "ok", "empty", "unavailable", "malformed", "timeout", "rate_limited"
]


class QuoteSnapshot(BaseModel):
    provider: str
    symbol: str
    status: ProviderStatus = "unavailable"
    quote: Optional[QuoteRecord] = None


class SearchSnapshot(BaseModel):
    provider: str
    query: str
    status: ProviderStatus = "unavailable"
    results: list[SearchResult] = Field(default_factory=list)
