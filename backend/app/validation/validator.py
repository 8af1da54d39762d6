from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ValidationError

from app.reference.catalog import normalize_symbol
from app.schemas.analysis import (
    AnalysisRequest,
    FetchMultipleStocksRequest,
    FetchSingleStockRequest,
)
from app.schemas.validation import ValidationIssue, ValidationResult


AnalysisPayload = Union[FetchSingleStockRequest, FetchMultipleStocksRequest, AnalysisRequest]

_ACTIONS: dict[str, type[BaseModel]] = {
    "fetchSingleStock": FetchSingleStockRequest,
    "fetchMultipleStocks": FetchMultipleStocksRequest,
}


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    status = "ok"
    if any(issue.level == "fail" for issue in issues):
        status = "fail"
    elif issues:
        status = "warn"
    return ValidationResult(status=status, issues=issues)


def _issues_from_error(exc: ValidationError) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        issues.append(ValidationIssue(field=field, level="fail", message=error.get("msg", "Invalid value.")))
    return issues


def validate_analysis_payload(payload: Any) -> tuple[AnalysisPayload | None, ValidationResult]:
    """Parse the analysis endpoint body into one of its three request shapes."""
    if not isinstance(payload, dict):
        return None, _result(
            [ValidationIssue(field="body", level="fail", message="Request body must be a JSON object.")]
        )

    action = payload.get("action")
    if action is not None:
        model = _ACTIONS.get(action) if isinstance(action, str) else None
        if model is None:
            return None, _result(
                [ValidationIssue(field="action", level="fail", message=f"Unknown action: {action!r}.")]
            )
    else:
        model = AnalysisRequest

    try:
        request = model.model_validate(payload)
    except ValidationError as exc:
        return None, _result(_issues_from_error(exc))

    issues: list[ValidationIssue] = []
    if isinstance(request, FetchSingleStockRequest):
        symbol = request.symbol.strip().upper()
        if not symbol:
            issues.append(ValidationIssue(field="symbol", level="fail", message="Symbol is required."))
        request = request.model_copy(update={"symbol": symbol})

    elif isinstance(request, FetchMultipleStocksRequest):
        symbols = [symbol.strip().upper() for symbol in request.symbols]
        blanks = [index for index, symbol in enumerate(symbols) if not symbol]
        if blanks:
            issues.append(
                ValidationIssue(
                    field="symbols",
                    level="warn",
                    message="Ignored blank symbols at positions: " + ", ".join(map(str, blanks)),
                )
            )
        unique: dict[str, str] = {}
        for symbol in symbols:
            if symbol:
                unique.setdefault(normalize_symbol(symbol), symbol)
        request = request.model_copy(update={"symbols": list(unique.values())})

    else:
        symbol = request.stock_symbol.strip().upper()
        if not symbol:
            issues.append(ValidationIssue(field="stockSymbol", level="fail", message="Stock symbol is required."))
        if not request.analysis_type.strip():
            issues.append(ValidationIssue(field="analysisType", level="fail", message="Analysis type is required."))
        request = request.model_copy(update={"stock_symbol": symbol})

    result = _result(issues)
    if result.status == "fail":
        return None, result
    return request, result
