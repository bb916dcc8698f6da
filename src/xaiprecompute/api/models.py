# src/xaiprecompute/api/models.py - v1
"""Payload shapes of the HTTP proxy endpoints consumed by the chat front end.

The proxies themselves live outside this package. These models describe what
they return so callers can validate the data: ``POST /api/openai`` yields a
ProxyExplanation, ``POST /api/weather`` a WeatherReport.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import Field, ValidationError

from xaiprecompute.core.errors import SchemaError
from xaiprecompute.core.models import CamelModel, TabName

ExplanationType = Literal["insight", "reasoning", "projection", "error"]


class ProxyCompletion(CamelModel):
    """JSON body the completion model is instructed to answer with."""

    explanation_type: ExplanationType
    content: str


class ProxyExplanation(CamelModel):
    """Explanation returned by the completion proxy: one filled tab."""

    default_tab: TabName
    insight: str | None = None
    reasoning: str | None = None
    projection: str | None = None
    confidence: int | None = None
    show_shap_chart: bool = False
    show_dag: bool = Field(default=False, alias="showDAG")
    highlighted_features: list[str] = Field(default_factory=list)
    graph_nodes: list[str] = Field(default_factory=list)
    suggested_prompts: list[str] = Field(default_factory=list)

    @classmethod
    def from_completion(cls, completion: ProxyCompletion) -> ProxyExplanation:
        """An "error" type is shown on the insight tab."""
        kind = completion.explanation_type
        tab: TabName = "insight" if kind == "error" else kind
        return cls(default_tab=tab, **{tab: completion.content})


def parse_proxy_completion(content: str) -> ProxyExplanation:
    """Parse the model's JSON answer into a ProxyExplanation.

    The explanation type is matched case-insensitively.

    Raises:
        SchemaError: Content is not JSON, or the type or content is invalid.
    """
    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid response format: {e}") from e
    if not isinstance(data, dict):
        raise SchemaError("Invalid response schema: expected a JSON object")

    data = dict(data)
    data["explanationType"] = str(data.get("explanationType")).lower()
    try:
        completion = ProxyCompletion.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"Invalid response schema: {e.error_count()} error(s)") from e
    return ProxyExplanation.from_completion(completion)


class WeatherReport(CamelModel):
    """Current conditions returned by the weather proxy."""

    location: str
    temperature: float
    description: str | None = None

    @classmethod
    def from_openweather(cls, data: dict[str, Any]) -> WeatherReport:
        """Build from an OpenWeatherMap current-weather payload (metric units).

        Raises:
            SchemaError: Required fields are missing.
        """
        try:
            weather = data.get("weather") or [{}]
            return cls(
                location=data["name"],
                temperature=data["main"]["temp"],
                description=weather[0].get("description"),
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise SchemaError(f"Invalid weather payload: {e}") from e
