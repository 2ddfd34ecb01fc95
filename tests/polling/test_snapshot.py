"""Tests for the price snapshot cache and content builder."""

import json
import random

import pytest

from helpers import WINNERS, make_entry_hash, make_ext_ids

from oprnet.grader.assets import V1_ASSETS
from oprnet.grader.validate import validate_v1
from oprnet.polling.snapshot import (
    PegAssets,
    PegItem,
    PriceSnapshotCache,
    build_v1_content,
    round_to_8,
)


def _make_peg(scale: float = 1.0) -> PegAssets:
    return PegAssets({
        code: PegItem(value=(i + 1) * scale, when=1_700_000_000)
        for i, code in enumerate(V1_ASSETS)
    })


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingFetcher:
    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail

    def __call__(self) -> PegAssets:
        self.calls += 1
        if self.fail:
            raise ConnectionError("source down")
        return _make_peg(scale=float(self.calls))


class TestRounding:

    def test_round(self):
        assert round_to_8(0.123456789) == pytest.approx(0.12345679, abs=1e-15)
        assert round_to_8(1.6e-8) == pytest.approx(2e-8, abs=1e-15)
        assert round_to_8(-1.6e-8) == pytest.approx(-2e-8, abs=1e-15)
        assert round_to_8(42.0) == 42.0


class TestPegItem:

    def test_clone_without_randomize_is_exact(self):
        item = PegItem(value=9123.456789, when=5)
        assert item.clone() == item

    def test_randomized_clone_stays_in_band(self):
        rng = random.Random(11)
        item = PegItem(value=100.0, when=5)
        for _ in range(200):
            c = item.clone(randomize=0.1, rng=rng)
            assert 95.0 <= c.value <= 105.0
            assert c.when == 5

    def test_assets_clone_is_a_copy(self):
        peg = _make_peg()
        copy = peg.clone()
        copy["XBT"] = PegItem(value=-1.0)
        assert peg["XBT"].value != -1.0


class TestPriceSnapshotCache:

    def test_reuses_snapshot_within_ttl(self):
        clock = FakeClock()
        fetcher = CountingFetcher()
        cache = PriceSnapshotCache(fetcher, ttl_seconds=580, clock=clock)

        first = cache.get()
        clock.now += 579
        second = cache.get()
        assert fetcher.calls == 1
        assert first == second

    def test_refetches_after_ttl(self):
        clock = FakeClock()
        fetcher = CountingFetcher()
        cache = PriceSnapshotCache(fetcher, ttl_seconds=580, clock=clock)

        cache.get()
        clock.now += 580
        snap = cache.get()
        assert fetcher.calls == 2
        assert snap["USD"].value == 4.0  # index 1, scale 2

    def test_returned_snapshot_is_a_copy(self):
        cache = PriceSnapshotCache(CountingFetcher(), clock=FakeClock())
        snap = cache.get()
        snap["XBT"] = PegItem(value=0.0)
        assert cache.get()["XBT"].value != 0.0

    def test_failed_fetch_reraises_and_retries(self):
        clock = FakeClock()
        fetcher = CountingFetcher(fail=True)
        cache = PriceSnapshotCache(fetcher, clock=clock)

        with pytest.raises(ConnectionError):
            cache.get()
        fetcher.fail = False
        cache.get()
        assert fetcher.calls == 2

    def test_failed_refresh_keeps_retrying(self):
        clock = FakeClock()
        fetcher = CountingFetcher()
        cache = PriceSnapshotCache(fetcher, ttl_seconds=10, clock=clock)
        cache.get()

        clock.now += 11
        fetcher.fail = True
        with pytest.raises(ConnectionError):
            cache.get()
        fetcher.fail = False
        cache.get()
        assert fetcher.calls == 3

    def test_invalidate(self):
        fetcher = CountingFetcher()
        cache = PriceSnapshotCache(fetcher, clock=FakeClock())
        cache.get()
        cache.invalidate()
        cache.get()
        assert fetcher.calls == 2


class TestBuildContent:

    def test_built_content_passes_validation(self):
        content = build_v1_content(
            200, WINNERS, _make_peg(), coinbase="FA1", miner_id="node-a",
        )
        opr = validate_v1(make_entry_hash(content), make_ext_ids(), 200, WINNERS, content)
        assert opr.opr.miner_id == "node-a"
        assert opr.opr.assets["PNT"] == 0.0
        assert opr.opr.assets["XBT"] == 20.0

    def test_wire_layout(self):
        body = json.loads(build_v1_content(7, WINNERS, _make_peg()))
        assert list(body) == ["coinbase", "dbht", "winners", "minerid", "assets"]
        assert list(body["assets"]) == list(V1_ASSETS)

    def test_missing_asset_in_snapshot(self):
        peg = _make_peg()
        del peg["ETH"]
        with pytest.raises(KeyError):
            build_v1_content(7, WINNERS, peg)
