"""Pairwise settlement aggregation and net position helpers."""

import pytest

from wagers.logic.settlement import (
    PairLines,
    build_settlements,
    differential_settlements,
    net_positions,
    player_net_amount,
    settle_pair,
)
from wagers.logic.types import Settlement, SettlementLine
from wagers.tests.conftest import create_roster


class TestSettlePair:
    def test_positive_net_means_a_pays(self):
        pair = PairLines("ann", "bob", [SettlementLine(label="Front 9", amount=10)])
        settlement = settle_pair(pair)

        assert settlement.from_player_id == "ann"
        assert settlement.to_player_id == "bob"
        assert settlement.amount == 10

    def test_negative_net_flips_orientation(self):
        pair = PairLines(
            "ann",
            "bob",
            [SettlementLine(label="Front 9", amount=-10), SettlementLine(label="Back 9", amount=4)],
        )
        settlement = settle_pair(pair)

        assert settlement.from_player_id == "bob"
        assert settlement.to_player_id == "ann"
        assert settlement.amount == 6
        assert [(line.label, line.amount) for line in settlement.breakdown] == [("Front 9", 10), ("Back 9", -4)]

    def test_breakdown_sums_to_amount(self):
        pair = PairLines(
            "ann",
            "bob",
            [SettlementLine(label="a", amount=7.5), SettlementLine(label="b", amount=-2.5)],
        )
        settlement = settle_pair(pair)

        assert sum(line.amount for line in settlement.breakdown) == pytest.approx(settlement.amount)

    def test_cancelling_lines_settle_nothing(self):
        pair = PairLines(
            "ann",
            "bob",
            [SettlementLine(label="Front 9", amount=10), SettlementLine(label="Back 9", amount=-10)],
        )
        assert settle_pair(pair) is None

    def test_float_noise_treated_as_settled(self):
        pair = PairLines("ann", "bob", [SettlementLine(label="x", amount=0.1 + 0.2 - 0.3)])
        assert settle_pair(pair) is None

    def test_build_drops_empty_pairs(self):
        pairs = [
            PairLines("ann", "bob", []),
            PairLines("ann", "cat", [SettlementLine(label="x", amount=3)]),
        ]
        settlements = build_settlements(pairs)

        assert len(settlements) == 1
        assert settlements[0].to_player_id == "cat"


class TestDifferentialSettlements:
    def test_every_pair_settles_on_difference(self):
        players = create_roster("ann", "bob", "cat")
        settlements = differential_settlements(players, {"ann": 4, "bob": 1, "cat": 0}, 2.0, "Skins")

        by_pair = {(s.from_player_id, s.to_player_id): s.amount for s in settlements}
        assert by_pair == {("bob", "ann"): 6, ("cat", "ann"): 8, ("cat", "bob"): 2}

    def test_label_shows_both_totals(self):
        players = create_roster("ann", "bob")
        settlements = differential_settlements(players, {"ann": 1.5, "bob": 3}, 1, "Skins")

        assert settlements[0].breakdown[0].label == "Skins: 1.5 vs 3"

    def test_missing_totals_count_as_zero(self):
        players = create_roster("ann", "bob")
        settlements = differential_settlements(players, {"ann": 2}, 5, "Wolf points")

        assert settlements[0].from_player_id == "bob"
        assert settlements[0].amount == 10

    def test_zero_unit_value(self):
        players = create_roster("ann", "bob")
        assert differential_settlements(players, {"ann": 2, "bob": 0}, 0, "Skins") == []


class TestNetPositions:
    def _settlements(self):
        return [
            Settlement(from_player_id="bob", to_player_id="ann", amount=10),
            Settlement(from_player_id="cat", to_player_id="ann", amount=5),
            Settlement(from_player_id="cat", to_player_id="bob", amount=2.5),
        ]

    def test_positions_sum_to_zero(self):
        positions = net_positions(self._settlements())

        assert positions == {"ann": -15, "bob": 7.5, "cat": 7.5}
        assert sum(positions.values()) == pytest.approx(0)

    def test_player_net_amount(self):
        settlements = self._settlements()

        assert player_net_amount("ann", settlements) == -15
        assert player_net_amount("cat", settlements) == 7.5

    def test_uninvolved_player_is_even(self):
        assert player_net_amount("dan", self._settlements()) == 0

    def test_no_settlements(self):
        assert net_positions([]) == {}
