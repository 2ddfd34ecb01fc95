"""Asset price snapshots for the node's own OPR.

Fetching prices from third-party sources happens elsewhere; this module
only holds the result. PriceSnapshotCache keeps the last snapshot and its
fetch time behind a lock so the sources are queried at most once per TTL
no matter how many callers ask.
"""

from __future__ import annotations

import math
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Sequence

import bittensor as bt

from oprnet.grader.assets import V1_SCHEMA, AssetSchema
from oprnet.grader.models import V1Content

# Just shy of one ledger block (600s), so each block gets fresh data
DEFAULT_TTL_SECONDS = 580


def round_to_8(v: float) -> float:
    """Round to 8 decimals, halves away from zero."""
    return math.copysign(math.floor(abs(v * 1e8) + 0.5), v) / 1e8


@dataclass(frozen=True)
class PegItem:
    """One asset price and the unix timestamp it was quoted at."""

    value: float
    when: int = 0

    def clone(self, randomize: float = 0.0, rng: random.Random | None = None) -> PegItem:
        """Copy, optionally nudged by up to +/- randomize/2 of the value.

        Randomization is a test aid for running several local miners that
        must not submit identical records.
        """
        if randomize <= 0:
            return PegItem(value=self.value, when=self.when)
        rng = rng or random
        half = randomize / 2
        value = (
            self.value
            + self.value * (half * rng.random())
            - self.value * (half * rng.random())
        )
        return PegItem(value=round_to_8(value), when=self.when)


class PegAssets(dict):
    """Mapping of asset code -> PegItem."""

    def clone(self, randomize: float = 0.0, rng: random.Random | None = None) -> PegAssets:
        return PegAssets({code: item.clone(randomize, rng) for code, item in self.items()})

    def values_by_code(self) -> dict[str, float]:
        return {code: item.value for code, item in self.items()}


class PriceSnapshotCache:
    """Single-writer cache of the latest PegAssets with a time-to-live."""

    def __init__(
        self,
        fetcher: Callable[[], PegAssets],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        randomize: float = 0.0,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ):
        self._fetcher = fetcher
        self.ttl_seconds = ttl_seconds
        self.randomize = randomize
        self._clock = clock
        self._rng = rng
        self._lock = threading.Lock()
        self._last: PegAssets | None = None
        self._last_time: float | None = None

    def get(self) -> PegAssets:
        """Return a copy of the current snapshot, refetching if it is stale.

        A failed fetch clears the fetch time so the next call retries, and
        the error propagates to the caller.
        """
        with self._lock:
            now = self._clock()
            delta = now - self._last_time if self._last_time is not None else None
            if self._last is not None and delta is not None and delta < self.ttl_seconds:
                return self._last.clone(self.randomize, self._rng)

            bt.logging.info({"price_snapshot": {"status": "fetching", "delta_time": delta}})
            self._last_time = now
            try:
                peg = self._fetcher()
            except Exception as e:
                self._last_time = None
                bt.logging.warning({"price_snapshot": {"status": "fetch_failed", "error": str(e)}})
                raise

            self._last = PegAssets(peg)
            bt.logging.debug({"price_snapshot": self._last.values_by_code()})
            return self._last.clone(self.randomize, self._rng)

    def invalidate(self) -> None:
        with self._lock:
            self._last_time = None


def build_v1_content(
    height: int,
    winners: Sequence[str],
    prices: PegAssets,
    schema: AssetSchema = V1_SCHEMA,
    coinbase: str = "",
    miner_id: str = "",
) -> bytes:
    """Serialize this node's OPR for ``height`` from a price snapshot.

    The native token is always published as 0. Raises KeyError if the
    snapshot lacks any other schema code.
    """
    assets = {}
    for code in schema.codes:
        if schema.is_native(code):
            assets[code] = 0.0
        else:
            assets[code] = prices[code].value

    content = V1Content(
        coinbase_address=coinbase,
        height=height,
        previous_winners=list(winners),
        miner_id=miner_id,
        assets=assets,
    )
    return content.to_json_bytes()


__all__ = [
    "DEFAULT_TTL_SECONDS",
    "PegAssets",
    "PegItem",
    "PriceSnapshotCache",
    "build_v1_content",
    "round_to_8",
]
