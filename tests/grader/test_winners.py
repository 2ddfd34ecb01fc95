"""Tests for previous-winner list checks."""

import pytest

from helpers import WINNERS

from oprnet.grader.winners import verify_winner_format, verify_winners


class TestWinnerFormat:

    def test_valid_list(self, winners):
        assert verify_winner_format(winners, 10)

    @pytest.mark.parametrize("n", [0, 1, 9, 11])
    def test_wrong_count(self, n):
        winners = [f"{i:016x}" for i in range(1, n + 1)]
        assert not verify_winner_format(winners, 10)

    @pytest.mark.parametrize("bad", [
        "",
        "0123456789abcde",     # 15 chars
        "0123456789abcdef0",   # 17 chars
        "0123456789ABCDEF",    # upper case
        "0123456789abcdeg",    # not hex
        " 123456789abcdef",
    ])
    def test_malformed_id(self, bad):
        assert not verify_winner_format(WINNERS[:9] + [bad], 10)

    @pytest.mark.parametrize("bad", [None, 1234567890123456, b"0123456789abcdef"])
    def test_non_string_id(self, bad):
        assert not verify_winner_format(WINNERS[:9] + [bad], 10)

    def test_duplicates_rejected(self):
        assert not verify_winner_format(WINNERS[:9] + [WINNERS[3]], 10)


class TestWinnerMembership:

    def test_same_set_any_order(self, winners):
        assert verify_winners(list(reversed(winners)), WINNERS)

    def test_missing_element(self):
        assert not verify_winners(WINNERS[:9], WINNERS)

    def test_extra_element(self):
        assert not verify_winners(WINNERS + ["00000000000000ff"], WINNERS)

    def test_substituted_element(self):
        claimed = WINNERS[:9] + ["00000000000000ff"]
        assert not verify_winners(claimed, WINNERS)
