# src/xaiprecompute/explanation/base_method.py - v1
"""Pluggable explanation method interface.

The synthesizer only depends on this ABC, so a genuine attribution method can
replace the heuristic stand-ins without touching the engine or orchestrator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from xaiprecompute.core.models import Explanation


class ExplanationMethod(ABC):
    """Derives an Explanation from a question and its generated answer."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Method identifier stored on every Explanation."""

    @abstractmethod
    def explain(self, query: str, answer: str) -> Explanation:
        """Build the explanation. May raise any exception on bad input."""
