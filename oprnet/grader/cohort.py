"""Build the cohort of valid OPRs for one height."""

from __future__ import annotations

from typing import Iterable, Sequence

import bittensor as bt

from .assets import V1_SCHEMA, AssetSchema
from .errors import GraderError
from .models import GradingOPR, RawEntry
from .validate import validate_v1


def collect_cohort(
    entries: Iterable[RawEntry],
    height: int,
    winners: Sequence[str],
    schema: AssetSchema = V1_SCHEMA,
) -> list[GradingOPR]:
    """Validate entries for ``height`` and keep the valid ones in input order.

    Rejected entries are logged and skipped, including entries recorded at
    a different ledger height. An entry whose content hash matches an
    earlier valid entry is a copied submission and is dropped.
    """
    cohort: list[GradingOPR] = []
    seen: set[bytes] = set()
    rejected = 0
    duplicates = 0

    for entry in entries:
        if entry.height != height:
            rejected += 1
            bt.logging.debug({
                "opr_rejected": {
                    "entry_hash": entry.entry_hash.hex(),
                    "kind": "HeightMismatch",
                    "reason": f"entry recorded at height {entry.height}",
                }
            })
            continue

        try:
            opr = validate_v1(
                entry.entry_hash,
                entry.ext_ids,
                height,
                winners,
                entry.content,
                schema=schema,
            )
        except GraderError as e:
            rejected += 1
            bt.logging.debug({
                "opr_rejected": {
                    "entry_hash": entry.entry_hash.hex(),
                    "kind": e.kind,
                    "reason": e.message,
                }
            })
            continue

        if opr.opr_hash in seen:
            duplicates += 1
            bt.logging.debug({
                "opr_duplicate": {
                    "entry_hash": entry.entry_hash.hex(),
                    "opr_hash": opr.opr_hash.hex(),
                }
            })
            continue

        seen.add(opr.opr_hash)
        cohort.append(opr)

    bt.logging.info({
        "opr_cohort": {
            "height": height,
            "valid": len(cohort),
            "rejected": rejected,
            "duplicates": duplicates,
        }
    })
    return cohort


__all__ = ["collect_cohort"]
