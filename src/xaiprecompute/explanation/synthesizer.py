# src/xaiprecompute/explanation/synthesizer.py - v1
"""Wraps an ExplanationMethod so every failure surfaces as SynthesisError."""

from __future__ import annotations

import logging

from xaiprecompute.core.errors import SynthesisError
from xaiprecompute.core.models import Explanation
from xaiprecompute.explanation.base_method import ExplanationMethod

logger = logging.getLogger(__name__)


class ExplanationSynthesizer:
    """Derives an Explanation for a question/answer pair.

    Args:
        method: Explanation strategy (heuristic, surrogate or basic).
    """

    def __init__(self, method: ExplanationMethod) -> None:
        self._method = method

    @property
    def method(self) -> ExplanationMethod:
        return self._method

    def synthesize(self, query: str, answer: str) -> Explanation:
        """Run the method; any exception is re-raised as SynthesisError."""
        try:
            explanation = self._method.explain(query, answer)
        except Exception as e:
            raise SynthesisError(
                f"Explanation synthesis failed ({self._method.name}): {e}"
            ) from e
        logger.debug(
            "Synthesized %s explanation: tab=%s, features=%d, confidence=%d",
            self._method.name, explanation.primary_tab,
            len(explanation.features), explanation.confidence,
        )
        return explanation
