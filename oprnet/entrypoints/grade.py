"""Command line entrypoint for grading a cohort or building this node's OPR.

    oprnet-grade grade --input cohort.json --height 206422
    oprnet-grade build --prices prices.json --height 206423 --winners winners.json

The cohort file holds {"winners": [...], "entries": [{entry_hash, ext_ids,
content, height}, ...]} with byte fields hex encoded.
"""

from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path
from typing import Any

import bittensor as bt
from pydantic import ValidationError

from oprnet.base.config import GraderConfig, add_args, apply_logging, load_config
from oprnet.grader.cohort import collect_cohort
from oprnet.grader.grading import grade_cohort
from oprnet.grader.models import RawEntry
from oprnet.polling.snapshot import (
    PegAssets,
    PegItem,
    PriceSnapshotCache,
    build_v1_content,
    round_to_8,
)


def _read_json(path: str) -> Any:
    with open(path) as f:
        return json.load(f)


def _load_prices(path: str) -> PegAssets:
    """Read a snapshot file of {code: value} or {code: {"value", "when"}}.

    Values are rounded to 8 decimals as they are read.
    """
    raw = _read_json(path)
    peg = PegAssets()
    for code, item in raw.items():
        if isinstance(item, dict):
            peg[code] = PegItem(value=round_to_8(float(item["value"])), when=int(item.get("when", 0)))
        else:
            peg[code] = PegItem(value=round_to_8(float(item)))
    return peg


def _parse_entries(raw: list[Any]) -> list[RawEntry]:
    """Parse cohort file entries, skipping any that are malformed."""
    entries = []
    for i, item in enumerate(raw):
        try:
            entries.append(RawEntry.model_validate(item))
        except ValidationError as e:
            bt.logging.debug({
                "entry_malformed": {
                    "index": i,
                    "errors": [err["msg"] for err in e.errors()],
                }
            })
    return entries


def _finite_or_none(v: float) -> float | None:
    return v if math.isfinite(v) else None


def run_grade(args: argparse.Namespace, config: GraderConfig) -> int:
    data = _read_json(args.input)
    winners = data.get("winners", [])
    entries = _parse_entries(data.get("entries", []))

    cohort = collect_cohort(entries, args.height, winners)
    if not cohort:
        bt.logging.error({"oprnet_grade": "no_valid_entries", "height": args.height})
        return 1

    result = grade_cohort(cohort)
    out = {
        "height": args.height,
        "average": [_finite_or_none(v) for v in result.average],
        "ranking": [
            {
                "short_hash": o.short_hash,
                "entry_hash": o.entry_hash.hex(),
                "opr_hash": o.opr_hash.hex(),
                "self_reported_difficulty": o.self_reported_difficulty,
                "grade": _finite_or_none(o.grade),
            }
            for o in result.ranked
        ],
        "fingerprint": result.fingerprint,
    }
    text = json.dumps(out, indent=2)
    if args.output:
        Path(args.output).write_text(text)
    else:
        print(text)
    return 0


def run_build(args: argparse.Namespace, config: GraderConfig) -> int:
    winners = _read_json(args.winners)
    cache = PriceSnapshotCache(
        fetcher=lambda: _load_prices(args.prices),
        ttl_seconds=config.snapshot_ttl_seconds,
        randomize=config.randomize,
    )
    prices = cache.get()
    try:
        content = build_v1_content(
            args.height,
            winners,
            prices,
            coinbase=args.coinbase,
            miner_id=args.miner_id,
        )
    except KeyError as e:
        bt.logging.error({"oprnet_build": "missing_asset", "asset": str(e)})
        return 1

    if args.output:
        Path(args.output).write_bytes(content)
    else:
        print(content.decode())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="OPR validation and grading")
    bt.logging.add_args(parser)
    add_args(parser)
    sub = parser.add_subparsers(dest="command", required=True)

    grade = sub.add_parser("grade", help="Validate and grade a cohort for one height")
    grade.add_argument("--input", type=str, required=True)
    grade.add_argument("--height", type=int, required=True)
    grade.add_argument("--output", type=str, default=None)

    build = sub.add_parser("build", help="Assemble this node's OPR content")
    build.add_argument("--prices", type=str, required=True)
    build.add_argument("--height", type=int, required=True)
    build.add_argument("--winners", type=str, required=True, help="JSON list of previous winners")
    build.add_argument("--coinbase", type=str, default="")
    build.add_argument("--miner-id", dest="miner_id", type=str, default="")
    build.add_argument("--output", type=str, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args)
    apply_logging(config)

    bt.logging.info({"oprnet_config": config.model_dump(), "command": args.command})

    if args.command == "grade":
        return run_grade(args, config)
    return run_build(args, config)


if __name__ == "__main__":
    sys.exit(main())
