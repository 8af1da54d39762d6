from __future__ import annotations

from collections.abc import Iterable

from app.schemas.search import SearchResult


def dedupe(results: Iterable[SearchResult]) -> list[SearchResult]:
    """Keep the first record seen for each symbol."""
    seen: set[str] = set()
    unique: list[SearchResult] = []
    for result in results:
        if result.symbol in seen:
            continue
        seen.add(result.symbol)
        unique.append(result)
    return unique


def relevance_key(result: SearchResult, query: str) -> tuple[bool, bool, bool, bool]:
    needle = query.strip().casefold()
    symbol = result.symbol.casefold()
    name = result.name.casefold()
    # False sorts first, so each element is "does not match".
    return (
        symbol != needle,
        not symbol.startswith(needle),
        not name.startswith(needle),
        needle not in symbol,
    )


def dedupe_and_rank(
    results: Iterable[SearchResult], query: str, max_results: int = 15
) -> list[SearchResult]:
    unique = dedupe(results)
    ranked = sorted(unique, key=lambda result: relevance_key(result, query))
    return ranked[:max_results]
