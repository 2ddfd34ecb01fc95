"""Price snapshot holder used when this node assembles its own OPR."""

from .snapshot import (
    DEFAULT_TTL_SECONDS,
    PegAssets,
    PegItem,
    PriceSnapshotCache,
    build_v1_content,
    round_to_8,
)

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "PegAssets",
    "PegItem",
    "PriceSnapshotCache",
    "build_v1_content",
    "round_to_8",
]
