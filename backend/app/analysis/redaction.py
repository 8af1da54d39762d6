from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

from app.config.settings import RedactionRule


@lru_cache(maxsize=64)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def redact(text: str, rules: Iterable[RedactionRule]) -> str:
    """Apply each pattern -> replacement rule in order."""
    for rule in rules:
        text = _compile(rule.pattern).sub(rule.replacement, text)
    return text
