"""
Skins: carryover, void ties, final-hole splits, the in-order scoring
contract and differential settlements.
"""

import logging

import pytest

from wagers.logic.enums import HandicapMode
from wagers.logic.exceptions import InvalidSettingsError
from wagers.logic.settings import SkinsSettings
from wagers.logic.settlement import net_positions
from wagers.logic.skins import SkinsInput, calculate_skins_settlements, calculate_skins_status
from wagers.tests.conftest import create_player, create_roster, create_score, create_scores, hole_time


def _input(scores=(), *, players=None, **settings) -> SkinsInput:
    values = {"skin_value": 5, "handicap_mode": HandicapMode.NONE}
    values.update(settings)
    return SkinsInput(
        settings=SkinsSettings(**values),
        players=players if players is not None else create_roster("ann", "bob", "cat"),
        scores=tuple(scores),
    )


class TestCarryover:
    def test_tie_then_outright_win_collects_carryover(self):
        scores = create_scores({"ann": [4, 3], "bob": [4, 4], "cat": [4, 4]})

        after_first = calculate_skins_status(_input(scores[:1] + scores[2:3] + scores[4:5]))
        assert after_first.current_carryover == 1
        assert after_first.skins_for("ann") == 0

        status = calculate_skins_status(_input(scores))
        assert status.skins_for("ann") == 2
        assert status.current_carryover == 0
        assert status.hole_results[0].is_tied is True
        assert status.hole_results[1].winner_id == "ann"
        assert status.hole_results[1].skins_value == 2

    def test_carryover_accumulates_across_ties(self):
        scores = create_scores({"ann": [4, 4, 4, 3], "bob": [4, 4, 4, 4], "cat": [5, 4, 4, 4]})
        status = calculate_skins_status(_input(scores))

        assert status.skins_for("ann") == 4
        assert [r.skins_value for r in status.hole_results] == [1, 2, 3, 4]

    def test_ties_void_without_carryovers(self):
        scores = create_scores({"ann": [4, 3], "bob": [4, 4], "cat": [4, 4]})
        status = calculate_skins_status(_input(scores, allow_carryovers=False))

        assert status.skins_for("ann") == 1
        assert status.current_carryover == 0
        assert status.total_skins_awarded == 1
        assert status.hole_results[1].skins_value == 1

    def test_two_way_tie_among_three_still_carries(self):
        scores = create_scores({"ann": [3], "bob": [3], "cat": [5]})
        status = calculate_skins_status(_input(scores))

        assert status.hole_results[0].is_tied is True
        assert status.hole_results[0].winner_id is None
        assert status.current_carryover == 1


class TestFinalHoleTies:
    def _nine_holes(self):
        # ann wins holes 1-8, hole 9 tied between ann and bob
        return create_scores({"ann": [3] * 8 + [3], "bob": [4] * 8 + [3], "cat": [4] * 8 + [4]})

    def test_final_tie_splits_carryover(self):
        status = calculate_skins_status(_input(self._nine_holes(), num_holes=9))

        assert status.skins_for("ann") == 8.5
        assert status.skins_for("bob") == 0.5
        assert status.skins_for("cat") == 0
        assert status.current_carryover == 0
        assert status.total_skins_awarded == 9
        assert status.hole_results[-1].split_among == ("ann", "bob")
        assert status.is_round_complete is True

    def test_split_disabled_leaves_carryover(self):
        status = calculate_skins_status(_input(self._nine_holes(), num_holes=9, split_final_ties=False))

        assert status.skins_for("ann") == 8
        assert status.current_carryover == 1
        assert status.hole_results[-1].split_among == ()

    def test_no_split_before_final_hole(self):
        scores = create_scores({"ann": [3], "bob": [3], "cat": [4]})
        status = calculate_skins_status(_input(scores, num_holes=9))

        assert status.current_carryover == 1
        assert status.total_skins_awarded == 0

    def test_split_carries_accumulated_stake(self):
        scores = create_scores({"ann": [4] * 8 + [3], "bob": [4] * 8 + [3], "cat": [4] * 9})
        status = calculate_skins_status(_input(scores, num_holes=9))

        assert status.skins_for("ann") == 4.5
        assert status.skins_for("bob") == 4.5
        assert status.total_skins_awarded == 9


class TestHoleOrdering:
    """Holes are scored in order; play stops at the first incomplete hole."""

    def test_stops_at_first_gap(self, caplog):
        scores = (
            create_score("ann", 1, 3),
            create_score("bob", 1, 4),
            create_score("cat", 1, 4),
            create_score("ann", 2, 3),
            create_score("bob", 2, 4),
            create_score("ann", 3, 3),
            create_score("bob", 3, 4),
            create_score("cat", 3, 4),
        )
        with caplog.at_level(logging.WARNING):
            status = calculate_skins_status(_input(scores))

        assert [r.hole_number for r in status.hole_results] == [1]
        assert status.unreached_holes == (3,)
        assert status.current_hole == 1
        assert status.skins_for("ann") == 1
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings[0].msg["event"] == "skins holes scored past a gap are not counted yet"
        assert warnings[0].msg["unreached_holes"] == [3]

    def test_gap_filled_scores_everything(self):
        scores = create_scores({"ann": [3, 3, 3], "bob": [4, 4, 4], "cat": [4, 4, 4]})
        status = calculate_skins_status(_input(scores))

        assert status.unreached_holes == ()
        assert status.skins_for("ann") == 3

    def test_corrected_score_uses_latest_entry(self):
        scores = (
            *create_scores({"ann": [3], "bob": [4], "cat": [4]}),
            create_score("bob", 1, 3, recorded_at=hole_time(1, minutes=30)),
        )
        status = calculate_skins_status(_input(scores))

        assert status.hole_results[0].is_tied is True

    def test_empty_round(self):
        status = calculate_skins_status(_input())

        assert status.hole_results == ()
        assert status.current_hole == 0
        assert status.total_skins_available == 18
        assert status.is_round_complete is False


class TestSkinsHandicaps:
    def _status(self, scores, *handicaps):
        ids = ("ann", "bob", "cat")
        players = tuple(
            create_player(pid, handicap=hcp, position=i) for i, (pid, hcp) in enumerate(zip(ids, handicaps))
        )
        return calculate_skins_status(
            _input(
                scores,
                players=players,
                handicap_mode=HandicapMode.FULL,
                hole_handicap_ratings=tuple(range(1, 19)),
            )
        )

    def test_strokes_play_off_the_low(self):
        # cat's two strokes fall on holes 1 and 2, one each
        status = self._status(create_scores({"ann": [4], "bob": [5], "cat": [4]}), 0, 1, 2)

        nets = {n.player_id: n.net_score for n in status.hole_results[0].player_net_scores}
        assert nets == {"ann": 4, "bob": 4, "cat": 3}
        assert status.hole_results[0].winner_id == "cat"

    def test_single_stroke_per_hole_below_eighteen(self):
        status = self._status(create_scores({"ann": [4], "bob": [5], "cat": [5]}), 0, 1, 2)

        nets = {n.player_id: n.net_score for n in status.hole_results[0].player_net_scores}
        assert nets == {"ann": 4, "bob": 4, "cat": 4}
        assert status.hole_results[0].winner_id is None
        assert status.current_carryover == 1

    def test_second_stroke_on_hardest_holes_above_eighteen(self):
        # 20 strokes: two on holes 1 and 2, one everywhere else
        scores = create_scores({"ann": [4, 4, 4], "bob": [4, 4, 4], "cat": [5, 6, 5]})
        status = self._status(scores, 0, 0, 20)

        cat_nets = [
            next(n.net_score for n in hole.player_net_scores if n.player_id == "cat") for hole in status.hole_results
        ]
        assert cat_nets == [3, 4, 4]
        assert status.hole_results[0].winner_id == "cat"
        assert status.hole_results[1].is_tied is True
        assert status.current_carryover == 2


class TestSkinsSettlements:
    def test_pairwise_differential(self):
        scores = create_scores({"ann": [3] * 8 + [3], "bob": [4] * 8 + [3], "cat": [4] * 9})
        settlements = calculate_skins_settlements(_input(scores, num_holes=9))

        by_pair = {(s.from_player_id, s.to_player_id): s for s in settlements}
        assert by_pair[("bob", "ann")].amount == 40
        assert by_pair[("cat", "ann")].amount == 42.5
        assert by_pair[("cat", "bob")].amount == 2.5
        assert by_pair[("bob", "ann")].breakdown[0].label == "Skins: 8.5 vs 0.5"

    def test_equal_counts_settle_nothing(self):
        scores = create_scores({"ann": [3, 4], "bob": [4, 3], "cat": [4, 4]})
        settlements = calculate_skins_settlements(_input(scores, players=create_roster("ann", "bob", "cat")))

        pairs = {(s.from_player_id, s.to_player_id) for s in settlements}
        assert pairs == {("cat", "ann"), ("cat", "bob")}

    def test_zero_sum(self):
        scores = create_scores({"ann": [3, 4, 4, 5], "bob": [4, 3, 4, 5], "cat": [4, 4, 3, 4]})
        settlements = calculate_skins_settlements(_input(scores))

        assert sum(net_positions(settlements).values()) == pytest.approx(0)

    def test_negative_skin_value_rejected(self):
        with pytest.raises(InvalidSettingsError, match="skin_value"):
            calculate_skins_status(_input(skin_value=-1))
