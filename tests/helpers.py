"""Builders for OPR entries used across the test suite."""

import hashlib
import json

from oprnet.grader.assets import V1_ASSETS

WINNERS = [f"{i:016x}" for i in range(1, 11)]


def make_assets(**overrides) -> dict:
    """Valid V1 asset mapping: PNT at 0, every other code nonzero."""
    assets = {code: float(i) for i, code in enumerate(V1_ASSETS)}
    assets["PNT"] = 0.0
    assets.update(overrides)
    return assets


def make_content(height: int = 100, winners=None, assets=None, **extra) -> bytes:
    body = {
        "coinbase": "FA2jK2HcLnRdS94dEcU27rF3meoJfpUcZPSinpb7AwQvPRY6RL1Q",
        "dbht": height,
        "winners": list(WINNERS if winners is None else winners),
        "minerid": "miner-1",
        "assets": make_assets() if assets is None else assets,
    }
    body.update(extra)
    return json.dumps(body).encode()


def make_ext_ids(difficulty: int = 42, version: bytes = b"\x01", nonce: bytes = b"nonce") -> list:
    return [nonce, difficulty.to_bytes(8, "big"), version]


def make_entry_hash(content: bytes, nonce: bytes = b"nonce") -> bytes:
    return hashlib.sha256(content + nonce).digest()


