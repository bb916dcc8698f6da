# src/xaiprecompute/explanation/surrogate.py - v1
"""Surrogate-model explanations: simulated LIME and SHAP over a feature vector.

A registered SurrogateModel declares named input features with weights and
baselines. The question and answer are mapped onto that feature vector by
keyword scoring, then LIME-style local weights and SHAP-style attributions
are sampled from the injected random source. Like the heuristic method this
only imitates attribution; no model is evaluated.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from xaiprecompute.core.models import (
    MAX_CONCEPT_NODES,
    MAX_CONFIDENCE,
    MAX_FEATURES,
    AlternativeOutcome,
    ConceptEdge,
    ConceptGraph,
    ConceptNode,
    Explanation,
    Feature,
)
from xaiprecompute.explanation.base_method import ExplanationMethod
from xaiprecompute.explanation.text import format_feature_name, round_half_up

FeatureValue = float | str


class SurrogateModel(BaseModel):
    """Declared shape of a model whose predictions are being explained."""

    id: str
    name: str
    type: Literal["classification", "regression", "nlp", "multimodal"]
    features: list[str]
    target_variable: str
    feature_weights: dict[str, float] = Field(default_factory=dict)
    baselines: dict[str, FeatureValue] = Field(default_factory=dict)
    accuracy: float = 0.0
    training_data: str = ""


DEFAULT_MODELS: tuple[SurrogateModel, ...] = (
    SurrogateModel(
        id="threat_assessment_v1",
        name="Threat Assessment Model",
        type="classification",
        features=[
            "flight_deviation", "speed_change", "communication_status",
            "geographic_vector", "time_of_day", "weather_conditions",
            "aircraft_type", "flight_plan_status",
        ],
        target_variable="threat_level",
        feature_weights={
            "flight_deviation": 0.8, "speed_change": 0.7,
            "communication_status": 0.9, "geographic_vector": 0.6,
            "time_of_day": 0.3, "weather_conditions": 0.4,
            "aircraft_type": 0.5, "flight_plan_status": 0.7,
        },
        baselines={
            "flight_deviation": 0, "speed_change": 0, "communication_status": 1,
            "geographic_vector": 0.5, "time_of_day": 12, "weather_conditions": 0.5,
            "aircraft_type": "civilian", "flight_plan_status": "filed",
        },
        accuracy=0.92,
        training_data="Historical incident data (2015-2023)",
    ),
    SurrogateModel(
        id="response_optimization_v1",
        name="Response Optimization Model",
        type="regression",
        features=[
            "threat_level", "available_assets", "response_time", "resource_cost",
            "success_probability", "collateral_risk", "political_sensitivity",
        ],
        target_variable="optimal_response_score",
        accuracy=0.88,
        training_data="Military exercise data and simulations",
    ),
)

# Keywords scored for numeric features; unlisted features use their own name parts.
FEATURE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "flight_deviation": ("deviation", "course", "path"),
    "speed_change": ("speed", "velocity", "acceleration"),
    "geographic_vector": ("location", "position", "geographic"),
    "weather_conditions": ("weather", "conditions"),
    "threat_level": ("threat", "danger", "hostile"),
    "available_assets": ("asset", "resource", "aircraft"),
    "response_time": ("time", "immediate", "delay"),
    "resource_cost": ("cost", "resource", "expensive"),
    "success_probability": ("success", "probability", "likely"),
    "collateral_risk": ("collateral", "civilian", "risk"),
    "political_sensitivity": ("political", "diplomatic", "sensitive"),
}

KEYWORD_HIT_SCORE = 0.3
KEYWORD_NOISE = 0.2
DEFAULT_FEATURE_WEIGHT = 0.5
GRAPH_FEATURES = MAX_CONCEPT_NODES - 1
STRONG_INFLUENCE = 0.3
DEFAULT_HOUR = 12

_CLOCK_TIME = re.compile(r"\b(\d{1,2}):(\d{2})\b")

SURROGATE_PROMPTS = [
    "Why are these features most important?",
    "How reliable is this explanation?",
    "What would change the prediction?",
    "Show me the model's reasoning process",
]


@dataclass(frozen=True)
class _Attribution:
    lime: list[tuple[str, float]]
    fidelity: float
    shap: dict[str, float]
    prediction: float


class SurrogateAttributionMethod(ExplanationMethod):
    """Explains answers through a registered surrogate model.

    Args:
        model_id: Registered model to explain against.
        rng: Random source for the simulated attributions.
        models: Initial registry; defaults to DEFAULT_MODELS.
    """

    def __init__(
        self,
        model_id: str = "threat_assessment_v1",
        rng: random.Random | None = None,
        models: list[SurrogateModel] | tuple[SurrogateModel, ...] = DEFAULT_MODELS,
    ) -> None:
        self._rng = rng or random.Random()
        self._models: dict[str, SurrogateModel] = {m.id: m for m in models}
        self._model_id = model_id

    @property
    def name(self) -> str:
        return "surrogate"

    # --- Registry ---

    def register_model(self, model: SurrogateModel) -> None:
        self._models[model.id] = model

    def get_model(self, model_id: str) -> SurrogateModel | None:
        return self._models.get(model_id)

    def available_models(self) -> list[SurrogateModel]:
        return list(self._models.values())

    # --- Explanation ---

    def explain(self, query: str, answer: str) -> Explanation:
        model = self._models.get(self._model_id)
        if model is None:
            raise KeyError(f"Model {self._model_id} not found")

        inputs = self.build_inputs(model, f"{query} {answer}")
        attribution = self._attribute(model, inputs)
        ranked = sorted(attribution.shap.items(), key=lambda kv: abs(kv[1]), reverse=True)

        shap_total = sum(abs(v) for v in attribution.shap.values())
        confidence = (attribution.fidelity * 100 + min(shap_total * 100, 95.0)) / 2

        return Explanation(
            primary_tab="reasoning",
            insight_text=self._insight_text(attribution),
            reasoning_text=self._reasoning_text(ranked, attribution, confidence),
            projection_text=self._projection_text(ranked),
            key_factors=[name for name, _ in attribution.lime[:5]],
            features=[
                Feature(name=format_feature_name(name), importance=value)
                for name, value in ranked[:MAX_FEATURES]
            ],
            concept_graph=self._graph(ranked),
            alternatives=self._alternatives(ranked),
            confidence=round_half_up(min(confidence, MAX_CONFIDENCE)),
            suggested_prompts=list(SURROGATE_PROMPTS),
            method=self.name,
        )

    def build_inputs(self, model: SurrogateModel, text: str) -> dict[str, FeatureValue]:
        """Map free text onto the model's feature vector."""
        lowered = text.lower()
        inputs: dict[str, FeatureValue] = {}
        for feature in model.features:
            if feature == "communication_status":
                inputs[feature] = 0 if "communication" in lowered else 1
            elif feature == "time_of_day":
                match = _CLOCK_TIME.search(lowered)
                inputs[feature] = int(match.group(1)) if match else DEFAULT_HOUR
            elif feature == "aircraft_type":
                inputs[feature] = "military" if "military" in lowered else "civilian"
            elif feature == "flight_plan_status":
                inputs[feature] = "filed" if "plan" in lowered else "unknown"
            else:
                keywords = FEATURE_KEYWORDS.get(feature, tuple(feature.split("_")))
                inputs[feature] = self._keyword_score(lowered, keywords)
        return inputs

    def _keyword_score(self, text: str, keywords: tuple[str, ...]) -> float:
        hits = sum(1 for k in keywords if k in text)
        return min(1.0, hits * KEYWORD_HIT_SCORE + self._rng.random() * KEYWORD_NOISE)

    def _attribute(
        self, model: SurrogateModel, inputs: dict[str, FeatureValue]
    ) -> _Attribution:
        lime = [(f, self._rng.uniform(-1.0, 1.0)) for f in model.features]
        lime.sort(key=lambda kv: abs(kv[1]), reverse=True)
        fidelity = 0.85 + self._rng.random() * 0.1

        shap: dict[str, float] = {}
        for feature in model.features:
            value = inputs.get(feature, 0)
            magnitude = min(abs(value), 1.0) if isinstance(value, (int, float)) else 0.5
            weight = model.feature_weights.get(feature, DEFAULT_FEATURE_WEIGHT)
            shap[feature] = weight * magnitude * self._rng.uniform(-1.0, 1.0)

        prediction = max(0.0, min(1.0, 0.5 + sum(shap.values())))
        return _Attribution(lime=lime[:MAX_FEATURES], fidelity=fidelity, shap=shap, prediction=prediction)

    # --- Rendering ---

    @staticmethod
    def _insight_text(attribution: _Attribution) -> str:
        lines = ["Key factors identified in the analysis:"]
        for name, weight in attribution.lime[:3]:
            impact = "increases" if weight > 0 else "decreases"
            lines.append(f"- {format_feature_name(name)}: {impact} prediction confidence")
        lines.append(f"- Model prediction confidence: {attribution.prediction * 100:.1f}%")
        return "\n".join(lines)

    @staticmethod
    def _reasoning_text(
        ranked: list[tuple[str, float]], attribution: _Attribution, confidence: float
    ) -> str:
        lines = [f"Explanation analysis ({confidence:.1f}% confidence):"]
        for name, value in ranked[:3]:
            impact = "positive" if value > 0 else "negative"
            strength = "strong" if abs(value) > STRONG_INFLUENCE else "moderate"
            lines.append(f"- {format_feature_name(name)}: {strength} {impact} influence")
        lines.append(f"- Local explanation fidelity: {attribution.fidelity * 100:.1f}%")
        return "\n".join(lines)

    @staticmethod
    def _projection_text(ranked: list[tuple[str, float]]) -> str:
        lines = ["Prediction sensitivity analysis:"]
        if ranked:
            lines.append(f"- Most influential factor: {format_feature_name(ranked[0][0])}")
            lines.append("- Changing this factor would significantly impact the prediction")
        lines.append("- Model shows high sensitivity to input variations")
        return "\n".join(lines)

    @staticmethod
    def _graph(ranked: list[tuple[str, float]]) -> ConceptGraph:
        top = ranked[:GRAPH_FEATURES]
        nodes = [
            ConceptNode(id=f"feature_{i}", label=format_feature_name(name))
            for i, (name, _) in enumerate(top)
        ]
        nodes.append(ConceptNode(id="prediction", label="Prediction"))
        edges = [ConceptEdge(source=f"feature_{i}", target="prediction") for i in range(len(top))]
        return ConceptGraph(nodes=nodes, edges=edges)

    @staticmethod
    def _alternatives(ranked: list[tuple[str, float]]) -> list[AlternativeOutcome]:
        alternatives: list[AlternativeOutcome] = []
        if ranked:
            label = format_feature_name(ranked[0][0])
            alternatives.append(AlternativeOutcome(
                title=f"Modified {label}",
                details=f"If {label.lower()} were different, the prediction would change significantly.",
            ))
        alternatives.append(AlternativeOutcome(
            title="High Confidence Scenario",
            details="All key factors align to support the current prediction with high certainty.",
        ))
        alternatives.append(AlternativeOutcome(
            title="Uncertainty Scenario",
            details="Conflicting indicators create uncertainty, requiring additional data for confident prediction.",
        ))
        return alternatives
