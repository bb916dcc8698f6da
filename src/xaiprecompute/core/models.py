# src/xaiprecompute/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; the cache, engine, jobs and exporters all
import the explanation types from here. JSON output uses camelCase aliases,
Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

TabName = Literal["insight", "reasoning", "projection"]

MAX_FEATURES = 8
MAX_CONCEPT_NODES = 6
MAX_SUGGESTED_PROMPTS = 4
MAX_CONFIDENCE = 95


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === EXPLANATION PARTS ===


class Feature(CamelModel):
    """Signed importance of one extracted feature (SHAP-like)."""

    name: str
    importance: float = Field(ge=-1.0, le=1.0)


class ConceptNode(CamelModel):
    id: str
    label: str


class ConceptEdge(CamelModel):
    """Directed edge between two concept node ids."""

    source: str = Field(alias="from")
    target: str = Field(alias="to")


class ConceptGraph(CamelModel):
    """Small DAG of concepts referenced by a query/answer pair."""

    nodes: list[ConceptNode] = Field(default_factory=list, max_length=MAX_CONCEPT_NODES)
    edges: list[ConceptEdge] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_edges(self) -> ConceptGraph:
        ids = [n.id for n in self.nodes]
        if len(set(ids)) != len(ids):
            raise ValueError("concept node ids must be unique")
        known = set(ids)
        for edge in self.edges:
            if edge.source not in known or edge.target not in known:
                raise ValueError(
                    f"edge {edge.source}->{edge.target} references an unknown node"
                )
        return self


class AlternativeOutcome(CamelModel):
    title: str
    details: str


# === EXPLANATION ===


class Explanation(CamelModel):
    """Tabbed pseudo-explanation attached to every cached answer."""

    primary_tab: TabName = "insight"
    insight_text: str = ""
    reasoning_text: str = ""
    projection_text: str = ""
    key_factors: list[str] = Field(default_factory=list)
    features: list[Feature] = Field(default_factory=list, max_length=MAX_FEATURES)
    concept_graph: ConceptGraph = Field(default_factory=ConceptGraph)
    alternatives: list[AlternativeOutcome] = Field(default_factory=list)
    confidence: int = Field(default=0, ge=0, le=MAX_CONFIDENCE)
    suggested_prompts: list[str] = Field(
        default_factory=list, max_length=MAX_SUGGESTED_PROMPTS
    )
    method: str = "heuristic"

    def tab_text(self, tab: TabName) -> str:
        """Return the free text for one tab."""
        return getattr(self, f"{tab}_text")
