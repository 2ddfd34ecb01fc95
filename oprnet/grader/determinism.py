"""Hashing helpers shared by every node that grades the same cohort."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def content_hash(content: bytes) -> bytes:
    """SHA-256 of the raw entry content, independent of any re-serialization."""
    return hashlib.sha256(content).digest()


def compute_hash(data: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form of ``data``.

    Keys are sorted and separators fixed so two nodes holding equal data
    produce equal digests. Floats go through ``repr``, which round-trips
    float64 exactly.
    """
    raw = json.dumps(data, sort_keys=True, separators=(",", ":"), allow_nan=False)
    return hashlib.sha256(raw.encode()).hexdigest()


__all__ = ["compute_hash", "content_hash"]
