"""Checks on the previous-winner list carried by every OPR."""

from __future__ import annotations

from typing import Sequence

# Winners are named by the first 8 bytes of their entry hash, hex encoded.
WINNER_ID_LENGTH = 16

_HEX_DIGITS = frozenset("0123456789abcdef")


def _is_winner_id(value: object) -> bool:
    return (
        isinstance(value, str)
        and len(value) == WINNER_ID_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )


def verify_winner_format(winners: Sequence[object], count: int) -> bool:
    """True if ``winners`` holds exactly ``count`` distinct, well-formed ids."""
    if len(winners) != count:
        return False
    if not all(_is_winner_id(w) for w in winners):
        return False
    return len(set(winners)) == count


def verify_winners(claimed: Sequence[str], authoritative: Sequence[str]) -> bool:
    """True if the claimed winners, as a set, equal the authoritative set.

    Duplicates are not collapsed into a pass here: run verify_winner_format
    first so a repeated id is rejected as a format violation.
    """
    return set(claimed) == set(authoritative)


__all__ = ["WINNER_ID_LENGTH", "verify_winner_format", "verify_winners"]
