# src/xaiprecompute/explanation/basic.py - v1
"""Fixed explanation used when XAI enrichment is disabled (ENABLE_XAI=false)."""

from __future__ import annotations

from xaiprecompute.core.models import Explanation
from xaiprecompute.explanation.base_method import ExplanationMethod

BASIC_CONFIDENCE = 75

BASIC_PROMPTS = [
    "Can you explain this further?",
    "What are the key factors?",
    "What should we do next?",
    "How confident are you?",
]


class BasicExplanationMethod(ExplanationMethod):
    """Wraps the answer as insight text with a fixed confidence."""

    @property
    def name(self) -> str:
        return "basic"

    def explain(self, query: str, answer: str) -> Explanation:
        return Explanation(
            primary_tab="insight",
            insight_text=answer,
            reasoning_text="Analysis based on available data and established patterns.",
            projection_text="Outcomes depend on implementation of recommended actions.",
            confidence=BASIC_CONFIDENCE,
            suggested_prompts=list(BASIC_PROMPTS),
            method=self.name,
        )
