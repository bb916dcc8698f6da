# src/xaiprecompute/llm/token_budget.py - v1
"""Token estimation for cache metadata."""

from __future__ import annotations

import math

_CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / _CHARS_PER_TOKEN)
