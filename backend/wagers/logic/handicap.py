"""
Handicap stroke allocation.

The higher-handicap player receives strokes on the hardest-rated holes.
Each hole has a stroke index (1 = hardest). A player receiving 6 strokes
gets one extra stroke on the 6 holes with the lowest stroke index; totals
above 18 wrap around and give the hardest holes a second stroke.

Two reference policies exist and are deliberately kept apart:

- pairwise (``match_strokes``): strokes relative to one opponent, used by
  Nassau and singles match play.
- off the low (``field_strokes``): strokes relative to the lowest handicap
  in the supplied pool, used by skins, wolf and team match play.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from wagers.logic.enums import HandicapMode
from wagers.logic.exceptions import InvalidSettingsError
from wagers.logic.models import Player
from wagers.logic.settings import DEFAULT_STROKE_INDEX, check_stroke_index

HANDICAP_MULTIPLIERS: dict[HandicapMode, Decimal] = {
    HandicapMode.NONE: Decimal(0),
    HandicapMode.FULL: Decimal(1),
    HandicapMode.PARTIAL: Decimal("0.8"),
}


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def strokes_received(player_handicap: float, reference_handicap: float, mode: HandicapMode) -> int:
    """
    Total strokes a player receives against a reference handicap.

    Zero when handicaps are off or the player is not the higher handicap.
    Otherwise the difference times the mode multiplier, rounded half up.
    """
    if mode == HandicapMode.NONE:
        return 0
    diff = Decimal(str(player_handicap)) - Decimal(str(reference_handicap))
    if diff <= 0:
        return 0
    return _round_half_up(diff * HANDICAP_MULTIPLIERS[mode])


def allocate_strokes_to_holes(
    total_strokes: int,
    stroke_index: Sequence[int] = DEFAULT_STROKE_INDEX,
) -> dict[int, int]:
    """
    Allocate ``total_strokes`` to holes, hardest first.

    Returns hole number -> strokes on that hole for every hole of the index.
    Raises InvalidSettingsError for a stroke index of the wrong shape.
    """
    check_stroke_index(stroke_index)
    allocation = dict.fromkeys(range(1, len(stroke_index) + 1), 0)
    if total_strokes <= 0:
        return allocation

    # stable sort keeps hole order for equal ranks
    ranked_holes = [hole for hole, _ in sorted(enumerate(stroke_index, start=1), key=lambda pair: pair[1])]

    full_passes, extra = divmod(total_strokes, len(ranked_holes))
    for rank, hole in enumerate(ranked_holes):
        allocation[hole] = full_passes + (1 if rank < extra else 0)
    return allocation


def net_score(gross_strokes: int, strokes_on_hole: int) -> int:
    return gross_strokes - strokes_on_hole


def match_strokes(
    handicap_a: float,
    handicap_b: float,
    mode: HandicapMode,
    stroke_index: Sequence[int] = DEFAULT_STROKE_INDEX,
) -> tuple[dict[int, int], dict[int, int]]:
    """Pairwise allocation for a one-on-one match. Only the higher handicap gets strokes."""
    return (
        allocate_strokes_to_holes(strokes_received(handicap_a, handicap_b, mode), stroke_index),
        allocate_strokes_to_holes(strokes_received(handicap_b, handicap_a, mode), stroke_index),
    )


def field_strokes(
    players: Sequence[Player],
    mode: HandicapMode,
    stroke_index: Sequence[int] = DEFAULT_STROKE_INDEX,
) -> dict[str, dict[int, int]]:
    """Off-the-low allocation: each player plays off the lowest handicap in ``players``."""
    if not players:
        raise InvalidSettingsError("cannot allocate field strokes for an empty roster")
    lowest = min(p.playing_handicap for p in players)
    return {
        p.id: allocate_strokes_to_holes(strokes_received(p.playing_handicap, lowest, mode), stroke_index)
        for p in players
    }
