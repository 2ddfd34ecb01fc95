"""Versioned asset schema for oracle price records.

The schema fixes the canonical asset order. Every record's asset mapping
is projected into this order before any positional math, so the average
vector and each record's values line up across the whole cohort.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


# Code of the network's own token. It has no external market price and is
# carried as a placeholder, so it is exempt from the nonzero rule.
NATIVE_ASSET = "PNT"

V1_ASSETS: tuple[str, ...] = (
    "PNT",
    # currencies
    "USD", "EUR", "JPY", "GBP", "CAD", "CHF", "INR", "SGD", "CNY", "HKD",
    "KRW", "BRL", "PHP", "MXN",
    # precious metals
    "XAU", "XAG", "XPD", "XPT",
    # digital currencies
    "XBT", "ETH", "LTC", "RVN", "XBC", "FCT", "BNB", "XLM", "ADA", "XMR",
    "DASH", "ZEC", "DCR",
)


@dataclass(frozen=True)
class AssetSchema:
    """Ordered list of asset codes accepted by one protocol version."""

    version: int
    codes: tuple[str, ...]
    native: str = NATIVE_ASSET

    def __len__(self) -> int:
        return len(self.codes)

    def __contains__(self, code: object) -> bool:
        return code in self.codes

    def is_native(self, code: str) -> bool:
        return code == self.native

    def ordered_values(self, assets: Mapping[str, float]) -> list[float]:
        """Project an asset mapping into canonical order.

        Raises KeyError if a schema code is missing.
        """
        return [float(assets[code]) for code in self.codes]


V1_SCHEMA = AssetSchema(version=1, codes=V1_ASSETS)


__all__ = ["NATIVE_ASSET", "V1_ASSETS", "V1_SCHEMA", "AssetSchema"]
