from app.schemas.analysis import (
    AnalysisRequest,
    FetchMultipleStocksRequest,
    FetchSingleStockRequest,
)
from app.validation.validator import validate_analysis_payload


def test_single_stock_symbol_is_normalized() -> None:
    request, validation = validate_analysis_payload({"action": "fetchSingleStock", "symbol": " tcs "})

    assert isinstance(request, FetchSingleStockRequest)
    assert request.symbol == "TCS"
    assert validation.status == "ok"


def test_multiple_stocks_drops_blanks_and_duplicates() -> None:
    request, validation = validate_analysis_payload(
        {"action": "fetchMultipleStocks", "symbols": ["reliance", " ", "RELIANCE", "tcs"]}
    )

    assert isinstance(request, FetchMultipleStocksRequest)
    assert request.symbols == ["RELIANCE", "TCS"]
    assert validation.status == "warn"
    assert validation.issues[0].field == "symbols"


def test_analysis_request_uses_camel_case_fields() -> None:
    request, validation = validate_analysis_payload(
        {
            "stockSymbol": "infy.ns",
            "analysisType": "fundamentals",
            "customQuery": "Margins?",
            "currentPrice": 1500.5,
        }
    )

    assert isinstance(request, AnalysisRequest)
    assert request.stock_symbol == "INFY.NS"
    assert request.custom_query == "Margins?"
    assert request.current_price == 1500.5
    assert validation.status == "ok"


def test_unknown_action_fails() -> None:
    request, validation = validate_analysis_payload({"action": "deleteEverything"})

    assert request is None
    assert validation.status == "fail"
    assert validation.issues[0].field == "action"


def test_missing_required_fields_fail() -> None:
    request, validation = validate_analysis_payload({"stockSymbol": "TCS"})

    assert request is None
    assert validation.status == "fail"
    assert any(issue.field == "analysisType" for issue in validation.issues)


def test_blank_symbol_fails() -> None:
    request, validation = validate_analysis_payload({"action": "fetchSingleStock", "symbol": "   "})

    assert request is None
    assert validation.status == "fail"


def test_non_object_body_fails() -> None:
    request, validation = validate_analysis_payload(["TCS"])

    assert request is None
    assert validation.issues[0].field == "body"


def test_multiple_stocks_dedupes_on_normalized_symbol() -> None:
    request, validation = validate_analysis_payload(
        {"action": "fetchMultipleStocks", "symbols": ["RELIANCE", "reliance.ns", "TCS.BO", "tcs"]}
    )

    assert request.symbols == ["RELIANCE", "TCS.BO"]
    assert validation.status == "ok"
