# src/xaiprecompute/explanation/heuristic.py - v1
"""Keyword-driven pseudo-explanation (SHAP/LIME look-alike).

This is a deliberately approximate stand-in for a real attribution method:
feature importances are a random perturbation scaled by keyword frequency,
and the concept graph is a fixed chain over matched concept categories. It is
suitable for demos and for exercising the precompute pipeline, not for
statistically grounded explanations.

The random source is injected. Pass ``random.Random(seed)`` for reproducible
output.

Pipeline:
    1. Pick the primary tab from the question wording
    2. Extract up to 8 keyword features and score them
    3. Match up to 6 concept categories and chain them into a graph
    4. Attach fixed alternative scenarios, tab texts and prompts
    5. Score confidence from answer length and total importance
"""

from __future__ import annotations

import random
import re

from xaiprecompute.core.models import (
    MAX_CONCEPT_NODES,
    MAX_CONFIDENCE,
    MAX_FEATURES,
    MAX_SUGGESTED_PROMPTS,
    AlternativeOutcome,
    ConceptEdge,
    ConceptGraph,
    ConceptNode,
    Explanation,
    Feature,
    TabName,
)
from xaiprecompute.explanation.base_method import ExplanationMethod
from xaiprecompute.explanation.text import (
    PROJECTION_MARKERS,
    REASONING_MARKERS,
    leading_sentences,
    round_half_up,
    sentences_with,
    title_label,
)

REASONING_CUES = ("why", "how", "because")
PROJECTION_CUES = ("what if", "predict", "future")

TACTICAL_TERMS = (
    "aircraft", "threat", "intercept", "radar",
    "missile", "defense", "attack", "surveillance",
)
TEMPORAL_TERMS = ("time", "speed", "duration", "timeline", "immediate", "delayed")
GEOGRAPHIC_TERMS = ("location", "position", "distance", "altitude", "coordinates")

# (keywords, label suffix) in scan order
_FEATURE_GROUPS: tuple[tuple[tuple[str, ...], str], ...] = (
    (TACTICAL_TERMS, ""),
    (TEMPORAL_TERMS, " Factor"),
    (GEOGRAPHIC_TERMS, " Data"),
)

CONCEPT_PATTERNS: dict[str, re.Pattern[str]] = {
    "aircraft": re.compile(r"\b(aircraft|plane|jet|fighter)\b", re.IGNORECASE),
    "threat": re.compile(r"\b(threat|danger|risk|hazard)\b", re.IGNORECASE),
    "intercept": re.compile(r"\b(intercept|engage|respond|deploy)\b", re.IGNORECASE),
    "sensor": re.compile(r"\b(radar|sensor|detection|surveillance)\b", re.IGNORECASE),
    "kinematics": re.compile(r"\b(speed|velocity|acceleration|movement)\b", re.IGNORECASE),
    "geography": re.compile(r"\b(location|position|coordinates|geography)\b", re.IGNORECASE),
    "time": re.compile(r"\b(time|timeline|duration|immediate)\b", re.IGNORECASE),
    "decision": re.compile(r"\b(decision|analysis|assessment|evaluation)\b", re.IGNORECASE),
}

ALTERNATIVE_SCENARIOS: tuple[AlternativeOutcome, ...] = (
    AlternativeOutcome(
        title="Optimal Response Scenario",
        details="Best-case outcome with immediate and effective response measures implemented.",
    ),
    AlternativeOutcome(
        title="Delayed Response Scenario",
        details="Consequences of delayed decision-making and response implementation.",
    ),
    AlternativeOutcome(
        title="Resource Constraint Scenario",
        details="Alternative approach when primary resources are unavailable or limited.",
    ),
)

_KEY_FACTORS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("aircraft", "flight"), "aircraft_behavior"),
    (("threat", "danger"), "threat_assessment"),
    (("speed", "velocity"), "speed_analysis"),
    (("time", "timeline"), "temporal_factors"),
    (("location", "position"), "geographic_factors"),
)

_MILITARY_CUES = ("aircraft", "military", "defense")

PERTURBATION_RANGE = 0.4
FREQUENCY_CAP = 10
EARLY_MENTION_BOOST = 1.2


def select_primary_tab(query: str) -> TabName:
    lowered = query.lower()
    if any(cue in lowered for cue in REASONING_CUES):
        return "reasoning"
    if any(cue in lowered for cue in PROJECTION_CUES):
        return "projection"
    return "insight"


def extract_features(text: str) -> list[tuple[str, str]]:
    """Matched (keyword, label) pairs in scan order, capped at 8."""
    lowered = text.lower()
    found: list[tuple[str, str]] = []
    for keywords, suffix in _FEATURE_GROUPS:
        for keyword in keywords:
            if keyword in lowered:
                found.append((keyword, f"{title_label(keyword)}{suffix}"))
    return found[:MAX_FEATURES]


def importance_weight(keyword: str, text: str) -> float:
    """Frequency (capped at 10 hits, scaled to [0, 1]) boosted for early mentions."""
    lowered = text.lower()
    frequency = min(lowered.count(keyword) / FREQUENCY_CAP, 1.0)
    first = lowered.find(keyword)
    position = EARLY_MENTION_BOOST if 0 <= first < len(lowered) / 2 else 1.0
    return frequency * position


def extract_concepts(text: str) -> list[str]:
    """First match per concept category, deduplicated, capped at 6."""
    concepts: list[str] = []
    for pattern in CONCEPT_PATTERNS.values():
        match = pattern.search(text)
        if match:
            label = title_label(match.group(0))
            if label not in concepts:
                concepts.append(label)
    return concepts[:MAX_CONCEPT_NODES]


def build_concept_graph(concepts: list[str]) -> ConceptGraph:
    """Linear chain over the concepts plus one feedback edge for graphs of 4+."""
    nodes = [ConceptNode(id=f"node_{i}", label=c) for i, c in enumerate(concepts)]
    edges = [
        ConceptEdge(source=f"node_{i}", target=f"node_{i + 1}")
        for i in range(len(nodes) - 1)
    ]
    if len(nodes) > 3:
        edges.append(ConceptEdge(source="node_0", target=f"node_{len(nodes) - 1}"))
    return ConceptGraph(nodes=nodes, edges=edges)


def compute_confidence(answer: str, features: list[Feature]) -> int:
    length_score = min(len(answer) / 500 * 50, 50.0)
    importance_score = min(sum(abs(f.importance) for f in features) * 100, 30.0)
    return round_half_up(min(20 + length_score + importance_score, MAX_CONFIDENCE))


def extract_key_factors(query: str) -> list[str]:
    lowered = query.lower()
    return [factor for cues, factor in _KEY_FACTORS if any(c in lowered for c in cues)]


def suggest_prompts(query: str, tab: TabName) -> list[str]:
    lowered = query.lower()
    prompts: list[str] = []
    if any(c in lowered for c in _MILITARY_CUES):
        prompts += ["What are the tactical implications?", "How does this affect mission success?"]
    if tab == "reasoning":
        prompts += ["What factors led to this conclusion?", "How reliable is this analysis?"]
    elif tab == "projection":
        prompts += ["What are the alternative outcomes?", "How can we mitigate risks?"]
    prompts.append("Explain the confidence level")
    return prompts[:MAX_SUGGESTED_PROMPTS]


class HeuristicExplanationMethod(ExplanationMethod):
    """Randomized keyword heuristic. See module docstring."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "heuristic"

    def explain(self, query: str, answer: str) -> Explanation:
        combined = f"{query} {answer}"
        tab = select_primary_tab(query)

        features = [
            Feature(
                name=label,
                importance=self._perturbation() * importance_weight(keyword, combined),
            )
            for keyword, label in extract_features(combined)
        ]

        return Explanation(
            primary_tab=tab,
            insight_text=leading_sentences(answer),
            reasoning_text=sentences_with(answer, REASONING_MARKERS),
            projection_text=sentences_with(answer, PROJECTION_MARKERS),
            key_factors=extract_key_factors(query),
            features=features,
            concept_graph=build_concept_graph(extract_concepts(combined)),
            alternatives=[a.model_copy() for a in ALTERNATIVE_SCENARIOS],
            confidence=compute_confidence(answer, features),
            suggested_prompts=suggest_prompts(query, tab),
            method=self.name,
        )

    def _perturbation(self) -> float:
        return self._rng.uniform(-PERTURBATION_RANGE, PERTURBATION_RANGE)
