"""
Nassau scoring.

Nassau is three independent match-play bets per player pair:

- front nine (holes 1-9)
- back nine (holes 10-18)
- overall (holes 1-18)

Each hole: lower net score wins the hole, equal nets halve it. The region
leader is whoever has won more holes in that region. A region is decided
once every hole is scored or the margin exceeds the holes remaining.

A 9-hole round has a single region over holes 1-9, settled as "Match".

Presses are side bets started by a trailing player. A press is scored like
its parent region, restricted to the holes from its start hole to the end
of the region.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

import structlog
from pydantic import BaseModel, ConfigDict

from wagers.logic.enums import BASE_BET_FOR_REGION, PRESS_BET_FOR_REGION, NassauRegion
from wagers.logic.exceptions import InvalidSettingsError, UnknownPlayerError
from wagers.logic.handicap import match_strokes, net_score
from wagers.logic.models import Bet, Player, ScoreEntry, ordered_players
from wagers.logic.scorecard import Scorecard
from wagers.logic.settings import NassauSettings, validate_settings
from wagers.logic.settlement import PairLines, build_settlements
from wagers.logic.types import (
    HoleResult,
    NassauLiveStatus,
    NassauMatchStatus,
    PressStatus,
    RegionStatus,
    Settlement,
    SettlementLine,
    SuggestedPress,
    standing_from_wins,
)

logger = structlog.get_logger()

REGION_HOLES: dict[NassauRegion, tuple[int, ...]] = {
    NassauRegion.FRONT: tuple(range(1, 10)),
    NassauRegion.BACK: tuple(range(10, 19)),
    NassauRegion.OVERALL: tuple(range(1, 19)),
}

REGION_LABELS: dict[NassauRegion, str] = {
    NassauRegion.FRONT: "Front 9",
    NassauRegion.BACK: "Back 9",
    NassauRegion.OVERALL: "Overall 18",
}

NINE_HOLE_LABEL = "Match"

_PRESS_REASON_SUFFIX: dict[NassauRegion, str] = {
    NassauRegion.FRONT: "on front 9",
    NassauRegion.BACK: "on back 9",
    NassauRegion.OVERALL: "overall",
}


class NassauInput(BaseModel):
    """Snapshot of one Nassau game."""

    model_config = ConfigDict(frozen=True)

    settings: NassauSettings
    players: tuple[Player, ...]
    bets: tuple[Bet, ...] = ()
    scores: tuple[ScoreEntry, ...] = ()


class _PairContext:
    """Everything needed to score units between two players."""

    def __init__(
        self,
        player_a: Player,
        player_b: Player,
        card: Scorecard,
        settings: NassauSettings,
    ) -> None:
        self.player_a_id = player_a.id
        self.player_b_id = player_b.id
        self.card = card
        self.strokes_a, self.strokes_b = match_strokes(
            player_a.playing_handicap,
            player_b.playing_handicap,
            settings.handicap_mode,
            settings.hole_handicap_ratings,
        )

    def both_scored(self, hole: int) -> bool:
        return self.card.has_all((self.player_a_id, self.player_b_id), hole)

    def score_holes(self, holes: Sequence[int]) -> tuple[list[HoleResult], int, int]:
        """Score every hole of ``holes`` both players have played. Unplayed holes are skipped."""
        results: list[HoleResult] = []
        a_wins = 0
        b_wins = 0
        for hole in holes:
            gross_a = self.card.strokes(self.player_a_id, hole)
            gross_b = self.card.strokes(self.player_b_id, hole)
            if gross_a is None or gross_b is None:
                continue
            net_a = net_score(gross_a, self.strokes_a.get(hole, 0))
            net_b = net_score(gross_b, self.strokes_b.get(hole, 0))
            winner_id = None
            if net_a < net_b:
                winner_id = self.player_a_id
                a_wins += 1
            elif net_b < net_a:
                winner_id = self.player_b_id
                b_wins += 1
            results.append(HoleResult(hole_number=hole, winner_id=winner_id, player_a_net=net_a, player_b_net=net_b))
        return results, a_wins, b_wins


def _score_region(ctx: _PairContext, bet: Bet, region: NassauRegion) -> RegionStatus:
    holes = REGION_HOLES[region]
    results, a_wins, b_wins = ctx.score_holes(holes)
    margin = abs(a_wins - b_wins)
    holes_played = len(results)
    holes_remaining = len(holes) - holes_played
    return RegionStatus(
        bet_id=bet.id,
        region=region,
        standing=standing_from_wins(a_wins, b_wins, ctx.player_a_id, ctx.player_b_id),
        margin=margin,
        holes_played=holes_played,
        holes_remaining=holes_remaining,
        is_complete=holes_played == len(holes) or margin > holes_remaining,
        hole_results=tuple(results),
    )


def _press_start_hole(ctx: _PairContext, press: Bet, region_holes: tuple[int, ...]) -> tuple[int, bool, bool]:
    """
    Resolve where a press starts.

    Returns (start_hole, inferred, ambiguous). Presses recorded with an
    explicit start hole are taken as-is. Older rows without one are inferred
    from timestamps: the press starts after the holes whose scores were
    recorded before the press was created. That inference is only trustworthy
    when scores were entered in hole order, so out-of-order entry is flagged.
    """
    if press.start_hole is not None:
        if press.start_hole not in region_holes:
            raise InvalidSettingsError(
                f"press {press.id} starts on hole {press.start_hole} outside the {press.bet_type.region.value} region"
            )
        return press.start_hole, False, False

    recorded_before: list[int] = []
    for hole in region_holes:
        if not ctx.both_scored(hole):
            continue
        entry = ctx.card.get(ctx.player_a_id, hole)
        if entry is not None and entry.recorded_at < press.created_at:
            recorded_before.append(hole)

    start_index = min(len(recorded_before), len(region_holes) - 1)
    ambiguous = recorded_before != list(region_holes[: len(recorded_before)])
    return region_holes[start_index], True, ambiguous


def _score_press(ctx: _PairContext, press: Bet) -> PressStatus:
    region_holes = REGION_HOLES[press.bet_type.region]
    start_hole, inferred, ambiguous = _press_start_hole(ctx, press, region_holes)
    if ambiguous:
        logger.warning(
            "press start hole inferred from out-of-order scores",
            press_id=press.id,
            parent_bet_id=press.parent_bet_id,
            inferred_start_hole=start_hole,
        )

    press_holes = tuple(h for h in region_holes if h >= start_hole)
    results, a_wins, b_wins = ctx.score_holes(press_holes)
    margin = abs(a_wins - b_wins)
    holes_played = len(results)
    holes_remaining = len(press_holes) - holes_played
    return PressStatus(
        bet_id=press.id,
        parent_bet_id=press.parent_bet_id or "",
        bet_type=press.bet_type,
        start_hole=start_hole,
        end_hole=region_holes[-1],
        amount=press.amount,
        standing=standing_from_wins(a_wins, b_wins, ctx.player_a_id, ctx.player_b_id),
        margin=margin,
        holes_played=holes_played,
        is_complete=holes_played == len(press_holes) or margin > holes_remaining,
        start_hole_inferred=inferred,
        attribution_ambiguous=ambiguous,
    )


def _find_base_bet(bets: Sequence[Bet], region: NassauRegion, player_a_id: str, player_b_id: str) -> Bet | None:
    bet_type = BASE_BET_FOR_REGION[region]
    for bet in bets:
        if bet.bet_type == bet_type and bet.involves(player_a_id, player_b_id):
            return bet
    return None


def _suggest_press(
    settings: NassauSettings,
    ctx: _PairContext,
    region_status: RegionStatus,
    parent: Bet,
    press_count: int,
) -> SuggestedPress | None:
    if region_status.is_complete or region_status.margin < settings.press_trigger:
        return None
    if settings.press_limit and press_count >= settings.press_limit:
        return None
    trailing_id = ctx.player_b_id if region_status.leader_id == ctx.player_a_id else ctx.player_a_id
    region = region_status.region
    return SuggestedPress(
        match_player_a_id=ctx.player_a_id,
        match_player_b_id=ctx.player_b_id,
        bet_type=PRESS_BET_FOR_REGION[region],
        start_hole=REGION_HOLES[region][0] + region_status.holes_played,
        trailing_player_id=trailing_id,
        parent_bet_id=parent.id,
        reason=f"{region_status.margin} down {_PRESS_REASON_SUFFIX[region]}",
    )


def _check_bet_players(bets: Sequence[Bet], roster_ids: set[str]) -> None:
    for bet in bets:
        for player_id in (bet.player_a_id, bet.player_b_id):
            if player_id not in roster_ids:
                raise UnknownPlayerError(player_id=player_id, source=f"bet {bet.id}")


def _check_press_parents(bets: Sequence[Bet]) -> None:
    """Each press must point at the base bet of its own region between the same two players."""
    by_id = {bet.id: bet for bet in bets}
    for press in bets:
        if not press.bet_type.is_press:
            continue
        parent = by_id.get(press.parent_bet_id or "")
        if parent is None:
            raise InvalidSettingsError(f"press {press.id} references missing parent bet {press.parent_bet_id!r}")
        if parent.bet_type != BASE_BET_FOR_REGION[press.bet_type.region]:
            raise InvalidSettingsError(
                f"press {press.id} is a {press.bet_type.region.value} press "
                f"but its parent {parent.id} is {parent.bet_type.value}"
            )
        if not parent.involves(press.player_a_id, press.player_b_id):
            raise InvalidSettingsError(f"press {press.id} and its parent {parent.id} are between different players")


def calculate_nassau_status(nassau_input: NassauInput) -> NassauLiveStatus:
    """
    Calculate the live status of a Nassau game.

    Every pair of players with base bets plays its own match:
    2 players -> 1 match, 3 -> 3 matches, 4 -> 6 matches.
    """
    settings = nassau_input.settings
    players = ordered_players(nassau_input.players)
    validate_settings(settings, players)
    roster_ids = {p.id for p in players}
    _check_bet_players(nassau_input.bets, roster_ids)
    _check_press_parents(nassau_input.bets)

    card = Scorecard(nassau_input.scores, roster_ids)
    is_nine = settings.num_holes == 9
    active_regions = (NassauRegion.FRONT,) if is_nine else tuple(NassauRegion)

    matches: list[NassauMatchStatus] = []
    suggestions: list[SuggestedPress] = []

    for player_a, player_b in combinations(players, 2):
        base_bets = {
            region: _find_base_bet(nassau_input.bets, region, player_a.id, player_b.id) for region in active_regions
        }
        if any(bet is None for bet in base_bets.values()):
            logger.debug("nassau pair has no base bets", player_a=player_a.id, player_b=player_b.id)
            continue

        ctx = _PairContext(player_a, player_b, card, settings)
        regions = {region: _score_region(ctx, bet, region) for region, bet in base_bets.items() if bet is not None}

        pair_presses = [
            bet
            for bet in nassau_input.bets
            if bet.bet_type.is_press and bet.bet_type.region in regions and bet.involves(player_a.id, player_b.id)
        ]
        presses = tuple(_score_press(ctx, press) for press in pair_presses)

        matches.append(
            NassauMatchStatus(
                player_a_id=player_a.id,
                player_b_id=player_b.id,
                front_nine=regions[NassauRegion.FRONT],
                back_nine=regions.get(NassauRegion.BACK),
                overall=regions.get(NassauRegion.OVERALL),
                presses=presses,
            )
        )

        if not settings.auto_press:
            continue
        for region, region_status in regions.items():
            press_count = sum(1 for press in pair_presses if press.bet_type.region == region)
            parent = base_bets[region]
            if parent is None:
                continue
            suggestion = _suggest_press(settings, ctx, region_status, parent, press_count)
            if suggestion is not None:
                suggestions.append(suggestion)

    is_round_complete = bool(matches) and all(region.is_complete for match in matches for region in match.regions)

    return NassauLiveStatus(
        matches=tuple(matches),
        current_hole=card.highest_hole(),
        is_round_complete=is_round_complete,
        suggested_presses=tuple(suggestions),
    )


def _unit_line(label: str, amount: float, leader_id: str | None, player_a_id: str) -> SettlementLine:
    """Signed line from player A's side: positive when A owes B."""
    if leader_id is None:
        return SettlementLine(label=label, amount=0)
    if leader_id == player_a_id:
        return SettlementLine(label=label, amount=-amount)
    return SettlementLine(label=label, amount=amount)


def calculate_nassau_settlements(nassau_input: NassauInput) -> list[Settlement]:
    """
    Calculate final settlements for a Nassau game.

    For each decided region and each decided press, the loser owes the
    amount to the winner. Halved regions add a zero line to the breakdown.
    Returns one net settlement per pair that owes anything.
    """
    settings = nassau_input.settings
    status = calculate_nassau_status(nassau_input)
    is_nine = settings.num_holes == 9
    region_amounts = {
        NassauRegion.FRONT: settings.front_bet,
        NassauRegion.BACK: settings.back_bet,
        NassauRegion.OVERALL: settings.overall_bet,
    }

    pairs: list[PairLines] = []
    for match in status.matches:
        lines: list[SettlementLine] = []
        for region_status in match.regions:
            label = NINE_HOLE_LABEL if is_nine else REGION_LABELS[region_status.region]
            leader_id = region_status.leader_id if region_status.is_complete else None
            lines.append(_unit_line(label, region_amounts[region_status.region], leader_id, match.player_a_id))

        press_numbers: dict[NassauRegion, int] = {}
        for press in match.presses:
            region = press.bet_type.region
            press_numbers[region] = press_numbers.get(region, 0) + 1
            if not press.is_complete or press.leader_id is None:
                continue
            label = f"{region.value.capitalize()} Press #{press_numbers[region]}"
            lines.append(_unit_line(label, press.amount, press.leader_id, match.player_a_id))

        pairs.append(PairLines(match.player_a_id, match.player_b_id, lines))

    settlements = build_settlements(pairs)
    logger.debug("nassau settled", settlements=len(settlements), matches=len(status.matches))
    return settlements
