from __future__ import annotations

from app.reference.catalog import ReferenceCatalog, normalize_symbol
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult


NOT_AVAILABLE = "Not available"
UNKNOWN_SECTOR = "Unknown"

# Share count assumed when estimating market cap from price alone.
ASSUMED_SHARES_OUTSTANDING = 1_000_000_000
RANGE_52W_SPREAD = 0.30

PLACEHOLDER_RATIOS: dict[str, float] = {
    "pe_ratio": 20.0,
    "pb_ratio": 3.0,
    "roe": 15.0,
    "roa": 8.0,
    "debt_to_equity": 0.5,
    "current_ratio": 1.5,
    "promoter_holding": 50.0,
    "institutional_holding": 30.0,
    "public_holding": 20.0,
}

_TEXT_FIELDS = ("description", "headquarters", "ceo", "employees", "founded", "website")


def format_market_cap(value: float) -> str:
    if value >= 1e12:
        return f"₹{value / 1e12:.1f} L Cr"
    if value >= 1e10:
        return f"₹{value / 1e10:.0f} K Cr"
    if value >= 1e7:
        return f"₹{value / 1e7:.0f} Cr"
    return f"₹{value:.0f}"


def exchange_for(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if cleaned.endswith(".BO"):
        return "BSE"
    return "NSE"


def _region_for(exchange: str | None) -> str:
    if exchange in ("NSE", "BSE"):
        return "India"
    return "Unknown"


def fill_quote(record: QuoteRecord, catalog: ReferenceCatalog) -> QuoteRecord:
    """Fill every empty field of a resolved quote without touching real values.

    Static catalog values are used first, then deterministic placeholders
    derived from the record itself. Applying it twice gives the same record.
    """
    filled = record.merge_missing(catalog.describe(record.symbol))
    missing = set(filled.missing_fields())
    if not missing:
        return filled

    name = filled.name or f"{normalize_symbol(filled.symbol)} Limited"
    updates: dict[str, object] = {}
    if "name" in missing:
        updates["name"] = name
    if "sector" in missing:
        updates["sector"] = UNKNOWN_SECTOR
    if "exchange" in missing:
        updates["exchange"] = exchange_for(filled.symbol)
    if "logo" in missing:
        updates["logo"] = catalog.logo_url(filled.symbol, name)
    if "source" in missing:
        updates["source"] = "synthetic"
    for field_name, value in PLACEHOLDER_RATIOS.items():
        if field_name in missing:
            updates[field_name] = value
    for field_name in _TEXT_FIELDS:
        if field_name in missing:
            updates[field_name] = NOT_AVAILABLE

    price = filled.price
    if price is not None and price > 0:
        if "market_cap" in missing:
            updates["market_cap"] = format_market_cap(price * ASSUMED_SHARES_OUTSTANDING)
        if "change" in missing:
            updates["change"] = 0.0
        if "change_percent" in missing:
            updates["change_percent"] = 0.0
        if "volume" in missing:
            updates["volume"] = 0
        if "day_high" in missing:
            updates["day_high"] = price
        if "day_low" in missing:
            updates["day_low"] = price
        if "fifty_two_week_high" in missing:
            updates["fifty_two_week_high"] = round(price * (1 + RANGE_52W_SPREAD), 2)
        if "fifty_two_week_low" in missing:
            updates["fifty_two_week_low"] = round(price * (1 - RANGE_52W_SPREAD), 2)
    elif "market_cap" in missing:
        updates["market_cap"] = "N/A"

    return filled.model_copy(update=updates)


def fill_search_result(result: SearchResult, catalog: ReferenceCatalog) -> SearchResult:
    company = catalog.get(result.symbol)
    updates: dict[str, object] = {}
    if not result.logo:
        updates["logo"] = catalog.logo_url(result.symbol, result.name)
    if not result.sector:
        updates["sector"] = company.sector if company else UNKNOWN_SECTOR
    exchange = result.exchange
    if not exchange:
        exchange = company.exchange if company else exchange_for(result.symbol)
        updates["exchange"] = exchange
    if not result.region:
        updates["region"] = company.region if company else _region_for(exchange)
    if not result.type:
        updates["type"] = "EQUITY"
    if not updates:
        return result
    return result.model_copy(update=updates)
