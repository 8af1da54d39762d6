from __future__ import annotations

from app.schemas.analysis import AnalysisCategory


_ALIASES: dict[str, AnalysisCategory] = {
    "balance-sheet": AnalysisCategory.FINANCIALS,
    "cashflow": AnalysisCategory.FINANCIALS,
    "pnl": AnalysisCategory.FINANCIALS,
    "quarterly": AnalysisCategory.FINANCIALS,
}


def resolve_category(analysis_type: str | None) -> AnalysisCategory:
    key = (analysis_type or "").strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return AnalysisCategory(key)
    except ValueError:
        return AnalysisCategory.OVERVIEW


def dataset_category(category: AnalysisCategory) -> AnalysisCategory:
    """Category whose fixed charts and tables are attached to the response."""
    if category is AnalysisCategory.CUSTOM:
        return AnalysisCategory.OVERVIEW
    return category
