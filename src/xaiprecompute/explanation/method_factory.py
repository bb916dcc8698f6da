# src/xaiprecompute/explanation/method_factory.py - v1
"""Factory for explanation method instantiation from settings."""

from __future__ import annotations

import random

from xaiprecompute.config.settings import Settings
from xaiprecompute.explanation.base_method import ExplanationMethod


def create_explanation_method(
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> ExplanationMethod:
    """Instantiate the configured explanation method.

    Args:
        settings: Application settings. Defaults to the heuristic method.
        rng: Random source. Defaults to one seeded with
            ``settings.explanation_seed`` (unseeded when that is None).

    Returns:
        Configured ExplanationMethod implementation.
    """
    if settings is not None and not settings.enable_xai:
        from xaiprecompute.explanation.basic import BasicExplanationMethod
        return BasicExplanationMethod()

    if rng is None:
        seed = None if settings is None else settings.explanation_seed
        rng = random.Random(seed)  # noqa: S311

    method = "heuristic" if settings is None else settings.explanation_method

    if method == "surrogate":
        from xaiprecompute.explanation.surrogate import SurrogateAttributionMethod
        return SurrogateAttributionMethod(model_id=settings.surrogate_model_id, rng=rng)

    # Default: heuristic
    from xaiprecompute.explanation.heuristic import HeuristicExplanationMethod
    return HeuristicExplanationMethod(rng=rng)
