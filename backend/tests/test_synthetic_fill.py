from app.reference.catalog import default_catalog
from app.schemas.quote import QuoteRecord
from app.schemas.search import SearchResult
from app.synthetic.fill import (
    NOT_AVAILABLE,
    PLACEHOLDER_RATIOS,
    fill_quote,
    fill_search_result,
    format_market_cap,
)


def test_fill_quote_leaves_no_gaps_and_is_deterministic() -> None:
    catalog = default_catalog()
    record = QuoteRecord(symbol="ZZZTEST", price=100.0)

    filled = fill_quote(record, catalog)

    assert filled.missing_fields() == []
    assert filled.name == "ZZZTEST Limited"
    assert filled.sector == "Unknown"
    assert filled.exchange == "NSE"
    assert filled.source == "synthetic"
    assert filled.pe_ratio == PLACEHOLDER_RATIOS["pe_ratio"]
    assert filled.description == NOT_AVAILABLE
    assert filled.logo.startswith("https://ui-avatars.com/api/?name=Z")
    assert fill_quote(record, catalog) == filled


def test_fill_quote_is_idempotent() -> None:
    catalog = default_catalog()
    once = fill_quote(QuoteRecord(symbol="RELIANCE", price=2900.0, source="yahoo_finance"), catalog)

    assert fill_quote(once, catalog) == once


def test_fill_quote_never_overwrites_real_values() -> None:
    catalog = default_catalog()
    record = QuoteRecord(
        symbol="TCS",
        price=3500.0,
        name="Live TCS",
        pe_ratio=31.0,
        change_percent=-1.2,
        source="nse",
    )

    filled = fill_quote(record, catalog)

    assert filled.price == 3500.0
    assert filled.name == "Live TCS"
    assert filled.pe_ratio == 31.0
    assert filled.change_percent == -1.2
    assert filled.source == "nse"
    assert filled.sector == "IT Services"
    assert filled.logo == "https://logo.clearbit.com/tcs.com"


def test_fill_quote_derives_price_fields() -> None:
    filled = fill_quote(QuoteRecord(symbol="ZZZTEST.BO", price=200.0), default_catalog())

    assert filled.fifty_two_week_high == 260.0
    assert filled.fifty_two_week_low == 140.0
    assert filled.day_high == 200.0
    assert filled.day_low == 200.0
    assert filled.volume == 0
    assert filled.change == 0.0
    assert filled.exchange == "BSE"
    assert filled.market_cap == format_market_cap(200.0 * 1_000_000_000)


def test_format_market_cap_uses_indian_units() -> None:
    assert format_market_cap(2.5e12) == "₹2.5 L Cr"
    assert format_market_cap(5e10) == "₹5 K Cr"
    assert format_market_cap(3e7) == "₹3 Cr"


def test_fill_search_result_prefers_catalog_values() -> None:
    catalog = default_catalog()
    result = SearchResult(symbol="AAPL", name="Apple Inc.", source="yahoo_finance")

    filled = fill_search_result(result, catalog)

    assert filled.sector == "Technology"
    assert filled.exchange == "NASDAQ"
    assert filled.region == "US"
    assert filled.logo == "https://logo.clearbit.com/apple.com"


def test_fill_search_result_uses_avatar_for_unknown_symbol() -> None:
    result = SearchResult(symbol="NEWCO.NS", name="newco industries", source="nse_official")

    filled = fill_search_result(result, default_catalog())

    assert filled.logo.startswith("https://ui-avatars.com/api/?name=N")
    assert filled.sector == "Unknown"
    assert filled.exchange == "NSE"
    assert filled.region == "India"
