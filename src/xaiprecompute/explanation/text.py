# src/xaiprecompute/explanation/text.py - v2
"""Sentence helpers shared by the explanation methods."""

from __future__ import annotations

import math
import re

_SENTENCE_END = re.compile(r"[.!?]+")

INSIGHT_SENTENCES = 3
TAB_SENTENCES = 2

REASONING_MARKERS = ("because", "due to", "therefore", "analysis")
PROJECTION_MARKERS = ("will", "would", "expect", "likely")


def split_sentences(text: str) -> list[str]:
    """Split on sentence terminators, dropping empty fragments."""
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


def join_sentences(sentences: list[str]) -> str:
    if not sentences:
        return ""
    return ". ".join(sentences) + "."


def leading_sentences(text: str, count: int = INSIGHT_SENTENCES) -> str:
    return join_sentences(split_sentences(text)[:count])


def sentences_with(text: str, markers: tuple[str, ...], count: int = TAB_SENTENCES) -> str:
    """First ``count`` sentences mentioning any marker (case-insensitive)."""
    picked = [
        s for s in split_sentences(text)
        if any(re.search(rf"\b{re.escape(m)}\b", s.lower()) for m in markers)
    ]
    return join_sentences(picked[:count])


def title_label(word: str) -> str:
    """'RADAR' / 'radar' -> 'Radar'."""
    return word[:1].upper() + word[1:].lower()


def format_feature_name(feature: str) -> str:
    """'flight_deviation' -> 'Flight Deviation'."""
    return " ".join(title_label(w) for w in feature.split("_") if w)


def round_half_up(value: float) -> int:
    """Round halves up: 32.5 -> 33, where round() gives 32."""
    return math.floor(value + 0.5)
