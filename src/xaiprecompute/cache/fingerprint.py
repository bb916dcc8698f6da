# src/xaiprecompute/cache/fingerprint.py - v2
"""Content-addressed keys for precomputed queries.

Two queries that are equal after trimming and lower-casing always map to the
same key, which is what lets repeated questions across jobs hit the cache.
"""

from __future__ import annotations

import hashlib


def normalize_query(query: str) -> str:
    """Normalize query text: strip surrounding whitespace, lowercase."""
    return query.strip().lower()


def query_key(query: str) -> str:
    """SHA-256 hex digest of the normalized query."""
    return hashlib.sha256(normalize_query(query).encode("utf-8")).hexdigest()
