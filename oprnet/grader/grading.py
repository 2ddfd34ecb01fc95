"""Consensus averaging and quartic deviation grading for version 1 OPRs.

This is the shared scoring path: every node runs it over the same cohort
and must land on bit-identical floats. No randomness, no external state,
and every accumulation walks the records and the assets in a fixed order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .determinism import compute_hash
from .models import GradingOPR


def average_v1(oprs: Sequence[GradingOPR]) -> NDArray[np.float64]:
    """Per-asset mean of absolute prices across the cohort.

    Sums first and divides once per asset. The element-wise ``+=`` keeps
    the additions in cohort order, which is what keeps nodes in agreement;
    a reduction like ``np.sum(axis=0)`` is free to reorder them.

    Raises:
        ValueError: if the cohort is empty.
    """
    if not oprs:
        raise ValueError("cannot average an empty cohort")

    avg = np.zeros(len(oprs[0].schema), dtype=np.float64)

    # Negative prices count by magnitude so sign flips can't cancel out.
    # Finite prices can still sum past float64 range; that position is inf.
    with np.errstate(over="ignore"):
        for o in oprs:
            avg += np.abs(np.asarray(o.ordered_assets(), dtype=np.float64))

    avg /= np.float64(len(oprs))
    return avg


def grade_v1(avg: Sequence[float], opr: GradingOPR) -> float:
    """Sum of the fourth powers of relative deviations from the average.

    Lower is better. Positions where the average is zero are skipped. The
    result overwrites ``opr.grade``.

    Raises:
        ValueError: if ``avg`` and the record's assets differ in length.
    """
    assets = opr.ordered_assets()
    if len(assets) != len(avg):
        raise ValueError(
            f"average has {len(avg)} positions, record has {len(assets)} assets"
        )

    grade = 0.0
    for value, mean in zip(assets, avg):
        mean = float(mean)
        if mean > 0:
            d = (value - mean) / mean
            grade += d * d * d * d
    opr.grade = grade
    return grade


def _rank_key(o: GradingOPR) -> tuple[bool, float, bytes]:
    finite = math.isfinite(o.grade)
    return (not finite, o.grade if finite else 0.0, o.opr_hash)


@dataclass
class CohortGrades:
    """Output of one aggregate+grade round with its audit trail."""

    average: list[float] = field(default_factory=list)
    grades: dict[str, float] = field(default_factory=dict)  # entry_hash hex -> grade
    ranked: list[GradingOPR] = field(default_factory=list)  # best first
    fingerprint: str = ""


def grade_cohort(oprs: Sequence[GradingOPR]) -> CohortGrades:
    """Average the cohort once and grade every record against it.

    Records are ranked by grade, ascending, with ties broken on the
    content hash so the order never depends on arrival order. A record
    whose grade is not finite (the average overflowed) ranks after every
    finite one. This is a single round; dropping the worst and repeating
    is left to the caller.
    """
    avg = average_v1(oprs)
    for o in oprs:
        grade_v1(avg, o)

    ranked = sorted(oprs, key=_rank_key)
    result = CohortGrades(
        average=[float(v) for v in avg],
        grades={o.entry_hash.hex(): o.grade for o in ranked},
        ranked=ranked,
    )
    # float.hex is exact and also covers inf/nan, which JSON cannot carry
    result.fingerprint = compute_hash({
        "average": [v.hex() for v in result.average],
        "grades": [[o.opr_hash.hex(), o.grade.hex()] for o in ranked],
    })
    return result


__all__ = ["CohortGrades", "average_v1", "grade_cohort", "grade_v1"]
