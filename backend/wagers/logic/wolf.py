"""
Wolf scoring.

Wolf is a four-player rotating format. On each hole:

1. The wolf picks a partner, goes alone, or declares blind (alone before
   anyone has teed off).
2. Wolf side (wolf + partner) plays the field (everyone else).
3. Best net ball per side decides the hole.
4. Points are worth 1x with a partner, 2x alone, 3x blind.

The wolf rotates through the configured order. On holes 17 and 18 the
player in last place becomes the wolf. Handicaps play off the low.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from wagers.logic.enums import WolfChoiceType, WolfSide
from wagers.logic.exceptions import UnknownPlayerError
from wagers.logic.handicap import field_strokes, net_score
from wagers.logic.models import Player, ScoreEntry, WolfChoice, ordered_players
from wagers.logic.scorecard import Scorecard
from wagers.logic.settings import WolfSettings, validate_settings
from wagers.logic.settlement import differential_settlements
from wagers.logic.types import (
    PlayerPoints,
    Settlement,
    WolfHoleResult,
    WolfLiveStatus,
)

logger = structlog.get_logger()

LAST_PLACE_WOLF_FROM_HOLE = 17

CHOICE_MULTIPLIERS: dict[WolfChoiceType, int] = {
    WolfChoiceType.PARTNER: 1,
    WolfChoiceType.ALONE: 2,
    WolfChoiceType.BLIND: 3,
}


class WolfInput(BaseModel):
    """Snapshot of one wolf game."""

    model_config = ConfigDict(frozen=True)

    settings: WolfSettings
    players: tuple[Player, ...]
    scores: tuple[ScoreEntry, ...] = ()
    wolf_choices: tuple[WolfChoice, ...] = ()


def wolf_for_hole(hole_number: int, wolf_order: Sequence[str], point_totals: Mapping[str, int]) -> str:
    """
    Return the wolf for a hole.

    Standard rotation cycles through ``wolf_order``. From hole 17 the player
    with the fewest points is wolf, ties going to the earliest in the order.
    """
    if hole_number >= LAST_PLACE_WOLF_FROM_HOLE:
        return min(wolf_order, key=lambda pid: point_totals.get(pid, 0))
    return wolf_order[(hole_number - 1) % len(wolf_order)]


def _find_choice(choices: Sequence[WolfChoice], hole_number: int, wolf_id: str) -> WolfChoice | None:
    for choice in choices:
        if choice.hole_number == hole_number and choice.wolf_player_id == wolf_id:
            return choice
    return None


def _effective_choice(choice: WolfChoice, settings: WolfSettings) -> WolfChoiceType:
    if choice.choice == WolfChoiceType.BLIND and not settings.blind_wolf:
        logger.warning("blind wolf is disabled, scoring as alone", hole=choice.hole_number, wolf=choice.wolf_player_id)
        return WolfChoiceType.ALONE
    return choice.choice


def _hole_points(
    wolf_side: list[str],
    field_side: list[str],
    nets: Mapping[str, int],
    multiplier: int,
) -> tuple[WolfSide, dict[str, int]]:
    """Score one hole. Winners each take ``multiplier`` from every opponent."""
    wolf_best = min(nets[pid] for pid in wolf_side)
    field_best = min(nets[pid] for pid in field_side)

    points = dict.fromkeys(nets, 0)
    if wolf_best == field_best:
        return WolfSide.TIE, points

    if wolf_best < field_best:
        side, winners, losers = WolfSide.WOLF, wolf_side, field_side
    else:
        side, winners, losers = WolfSide.FIELD, field_side, wolf_side
    for pid in winners:
        points[pid] = multiplier * len(losers)
    for pid in losers:
        points[pid] = -multiplier * len(winners)
    return side, points


def calculate_wolf_status(wolf_input: WolfInput) -> WolfLiveStatus:
    """
    Calculate the live status of a wolf game.

    Holes are processed in order. Processing stops at the first hole whose
    wolf has not chosen yet (``needs_wolf_choice``) or that is missing any
    player's score.
    """
    settings = wolf_input.settings
    players = ordered_players(wolf_input.players)
    validate_settings(settings, players)

    player_ids = [p.id for p in players]
    roster = set(player_ids)
    for choice in wolf_input.wolf_choices:
        for pid in (choice.wolf_player_id, choice.partner_id):
            if pid is not None and pid not in roster:
                raise UnknownPlayerError(player_id=pid, source=f"wolf choice on hole {choice.hole_number}")

    wolf_order = tuple(settings.wolf_order) if settings.wolf_order else tuple(player_ids)
    card = Scorecard(wolf_input.scores, roster)
    stroke_maps = field_strokes(players, settings.handicap_mode, settings.hole_handicap_ratings)

    totals: dict[str, int] = dict.fromkeys(player_ids, 0)
    hole_results: list[WolfHoleResult] = []
    current_wolf_id: str | None = None
    needs_wolf_choice = False
    available_partners: tuple[str, ...] = ()

    for hole in range(1, settings.num_holes + 1):
        wolf_id = wolf_for_hole(hole, wolf_order, totals)
        current_wolf_id = wolf_id

        choice = _find_choice(wolf_input.wolf_choices, hole, wolf_id)
        if choice is None:
            needs_wolf_choice = True
            available_partners = tuple(pid for pid in player_ids if pid != wolf_id)
            break

        if not card.has_all(player_ids, hole):
            break

        choice_type = _effective_choice(choice, settings)
        multiplier = CHOICE_MULTIPLIERS[choice_type]
        wolf_side = [wolf_id, choice.partner_id] if choice.partner_id else [wolf_id]
        field_side = [pid for pid in player_ids if pid not in wolf_side]
        nets = {pid: net_score(card.strokes(pid, hole) or 0, stroke_maps[pid].get(hole, 0)) for pid in player_ids}

        side, points = _hole_points(wolf_side, field_side, nets, multiplier)
        for pid, delta in points.items():
            totals[pid] += delta

        hole_results.append(
            WolfHoleResult(
                hole_number=hole,
                wolf_player_id=wolf_id,
                choice=choice_type,
                partner_id=choice.partner_id,
                winning_side=side,
                points_per_player=tuple(PlayerPoints(player_id=pid, points=points[pid]) for pid in player_ids),
                multiplier=multiplier,
            )
        )
        logger.debug("wolf hole scored", hole=hole, wolf=wolf_id, choice=choice_type, winner=side)

    holes_scored = len(hole_results)
    is_round_complete = holes_scored == settings.num_holes

    unreached = tuple(
        hole for hole in card.complete_holes(player_ids, settings.num_holes) if hole > holes_scored + 1
    )
    if unreached:
        logger.warning(
            "wolf holes scored past a gap are not counted yet",
            stopped_at_hole=holes_scored + 1,
            unreached_holes=list(unreached),
        )

    return WolfLiveStatus(
        hole_results=tuple(hole_results),
        point_totals=tuple(PlayerPoints(player_id=pid, points=totals[pid]) for pid in player_ids),
        current_wolf_id=current_wolf_id,
        wolf_rotation=wolf_order,
        current_hole=hole_results[-1].hole_number if hole_results else 0,
        is_round_complete=is_round_complete,
        needs_wolf_choice=needs_wolf_choice,
        available_partners=available_partners,
        unreached_holes=unreached,
    )


def calculate_wolf_settlements(wolf_input: WolfInput) -> list[Settlement]:
    """Pairwise point differential x point value, paid by the lower total."""
    status = calculate_wolf_status(wolf_input)
    players = ordered_players(wolf_input.players)
    totals: dict[str, float] = {entry.player_id: entry.points for entry in status.point_totals}
    return differential_settlements(players, totals, wolf_input.settings.point_value, "Wolf points")
