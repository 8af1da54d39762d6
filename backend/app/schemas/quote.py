from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class QuoteRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str
    name: Optional[str] = None
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    market_cap: Optional[str] = None
    pe_ratio: Optional[float] = None
    pb_ratio: Optional[float] = None
    roe: Optional[float] = None
    roa: Optional[float] = None
    debt_to_equity: Optional[float] = None
    current_ratio: Optional[float] = None
    promoter_holding: Optional[float] = None
    institutional_holding: Optional[float] = None
    public_holding: Optional[float] = None
    sector: Optional[str] = None
    exchange: Optional[str] = None
    logo: Optional[str] = None
    volume: Optional[int] = None
    day_high: Optional[float] = None
    day_low: Optional[float] = None
    fifty_two_week_high: Optional[float] = None
    fifty_two_week_low: Optional[float] = None
    description: Optional[str] = None
    headquarters: Optional[str] = None
    ceo: Optional[str] = None
    employees: Optional[str] = None
    founded: Optional[str] = None
    website: Optional[str] = None
    source: Optional[str] = None

    def has_price(self) -> bool:
        return self.price is not None and self.price > 0

    def missing_fields(self) -> list[str]:
        return [
            field_name
            for field_name in type(self).model_fields
            if _is_empty(getattr(self, field_name))
        ]

    def merge_missing(self, other: QuoteRecord | None) -> QuoteRecord:
        """Return a copy with gaps filled from ``other``; existing values win."""
        if other is None:
            return self.model_copy()
        updates = {}
        for field_name in self.missing_fields():
            value = getattr(other, field_name)
            if not _is_empty(value):
                updates[field_name] = value
        return self.model_copy(update=updates)


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False
