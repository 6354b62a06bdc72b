"""
Match play scoring.

Hole-by-hole competition: the lower net score wins the hole, equal nets
halve it. The match is reported as "X, 2 UP, 5 to play" and closes out
as soon as the margin exceeds the holes remaining ("X wins 3&2").

- Singles: round-robin pairwise matches with pairwise handicap strokes.
- Teams: two teams play best ball; strokes play off the lowest handicap of
  the combined pool rather than pairwise.

Holes are scored in order and a match stops at the first hole that is not
fully scored.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from itertools import combinations

import structlog
from pydantic import BaseModel, ConfigDict

from wagers.logic.enums import MatchPlayType
from wagers.logic.handicap import field_strokes, match_strokes, net_score
from wagers.logic.models import Player, ScoreEntry, ordered_players
from wagers.logic.scorecard import Scorecard
from wagers.logic.settings import MatchPlaySettings, validate_settings
from wagers.logic.settlement import PairLines, build_settlements
from wagers.logic.types import (
    HoleResult,
    MatchPlayLiveStatus,
    MatchPlayMatchStatus,
    Settlement,
    SettlementLine,
    standing_from_wins,
)

logger = structlog.get_logger()

# returns the side's net score on a hole, or None when the hole is not fully scored
SideNet = Callable[[int], int | None]


class MatchPlayInput(BaseModel):
    """Snapshot of one match play game."""

    model_config = ConfigDict(frozen=True)

    settings: MatchPlaySettings
    players: tuple[Player, ...]
    scores: tuple[ScoreEntry, ...] = ()


def generate_status_text(
    leader_name: str | None,
    margin: int,
    holes_remaining: int,
    *,
    is_complete: bool,
) -> str:
    """
    Describe a match the way golfers call it.

    "ALL SQUARE, 3 to play", "Ann, 2 UP, 5 to play", "Ann wins 3&2",
    "Ann wins 1 UP" (decided on the last hole) or "Halved".
    """
    if is_complete:
        if leader_name is None or margin == 0:
            return "Halved"
        if holes_remaining == 0:
            return f"{leader_name} wins {margin} UP"
        return f"{leader_name} wins {margin}&{holes_remaining}"

    if leader_name is None or margin == 0:
        return f"ALL SQUARE, {holes_remaining} to play"
    return f"{leader_name}, {margin} UP, {holes_remaining} to play"


def _play_match(
    num_holes: int,
    side_a_ids: tuple[str, ...],
    side_b_ids: tuple[str, ...],
    net_a: SideNet,
    net_b: SideNet,
    names: Mapping[str, str],
) -> MatchPlayMatchStatus:
    """Run one match hole by hole until it closes out or reaches an unscored hole."""
    player_a_id = side_a_ids[0]
    player_b_id = side_b_ids[0]
    results: list[HoleResult] = []
    a_wins = 0
    b_wins = 0
    closed = False

    for hole in range(1, num_holes + 1):
        a = net_a(hole)
        b = net_b(hole)
        if a is None or b is None:
            break

        winner_id = None
        if a < b:
            winner_id = player_a_id
            a_wins += 1
        elif b < a:
            winner_id = player_b_id
            b_wins += 1
        results.append(HoleResult(hole_number=hole, winner_id=winner_id, player_a_net=a, player_b_net=b))

        if abs(a_wins - b_wins) > num_holes - hole:
            closed = True
            break

    holes_played = len(results)
    holes_remaining = num_holes - holes_played
    margin = abs(a_wins - b_wins)
    standing = standing_from_wins(a_wins, b_wins, player_a_id, player_b_id)
    is_complete = closed or holes_played == num_holes
    is_dormie = not closed and 0 < margin == holes_remaining

    leader_name = None
    if margin:
        leader_ids = side_a_ids if a_wins > b_wins else side_b_ids
        leader_name = " & ".join(names[pid] for pid in leader_ids)

    return MatchPlayMatchStatus(
        player_a_id=player_a_id,
        player_b_id=player_b_id,
        side_a_ids=side_a_ids,
        side_b_ids=side_b_ids,
        hole_results=tuple(results),
        standing=standing,
        margin=margin,
        holes_played=holes_played,
        holes_remaining=holes_remaining,
        is_complete=is_complete,
        is_dormie=is_dormie,
        status_text=generate_status_text(leader_name, margin, holes_remaining, is_complete=is_complete),
    )


def _singles_match(
    player_a: Player,
    player_b: Player,
    card: Scorecard,
    settings: MatchPlaySettings,
    names: Mapping[str, str],
) -> MatchPlayMatchStatus:
    strokes_a, strokes_b = match_strokes(
        player_a.playing_handicap,
        player_b.playing_handicap,
        settings.handicap_mode,
        settings.hole_handicap_ratings,
    )

    def net_a(hole: int) -> int | None:
        gross = card.strokes(player_a.id, hole)
        return None if gross is None else net_score(gross, strokes_a.get(hole, 0))

    def net_b(hole: int) -> int | None:
        gross = card.strokes(player_b.id, hole)
        return None if gross is None else net_score(gross, strokes_b.get(hole, 0))

    return _play_match(settings.num_holes, (player_a.id,), (player_b.id,), net_a, net_b, names)


def _best_ball(team_ids: Sequence[str], card: Scorecard, stroke_maps: Mapping[str, Mapping[int, int]]) -> SideNet:
    def net(hole: int) -> int | None:
        if not card.has_all(team_ids, hole):
            return None
        return min(net_score(card.strokes(pid, hole) or 0, stroke_maps[pid].get(hole, 0)) for pid in team_ids)

    return net


def _teams_match(
    players: Sequence[Player],
    card: Scorecard,
    settings: MatchPlaySettings,
    names: Mapping[str, str],
) -> MatchPlayMatchStatus:
    by_id = {p.id: p for p in players}
    team_a = tuple(settings.team_a)
    team_b = tuple(settings.team_b)
    pool = [by_id[pid] for pid in (*team_a, *team_b)]
    stroke_maps = field_strokes(pool, settings.handicap_mode, settings.hole_handicap_ratings)
    return _play_match(
        settings.num_holes,
        team_a,
        team_b,
        _best_ball(team_a, card, stroke_maps),
        _best_ball(team_b, card, stroke_maps),
        names,
    )


def calculate_match_play_status(match_input: MatchPlayInput) -> MatchPlayLiveStatus:
    """Calculate every match of a match play game."""
    settings = match_input.settings
    players = ordered_players(match_input.players)
    validate_settings(settings, players)

    card = Scorecard(match_input.scores, {p.id for p in players})
    names = {p.id: p.display_name for p in players}

    if settings.match_type == MatchPlayType.TEAMS:
        matches = [_teams_match(players, card, settings, names)]
    else:
        matches = [_singles_match(a, b, card, settings, names) for a, b in combinations(players, 2)]

    for match in matches:
        logger.debug(
            "match play status",
            side_a=list(match.side_a_ids),
            side_b=list(match.side_b_ids),
            status=match.status_text,
        )

    return MatchPlayLiveStatus(
        matches=tuple(matches),
        current_hole=max((m.holes_played for m in matches), default=0),
        is_round_complete=bool(matches) and all(m.is_complete for m in matches),
    )


def _result_label(match: MatchPlayMatchStatus) -> str:
    if match.holes_remaining > 0:
        return f"Match Play: {match.margin}&{match.holes_remaining}"
    return f"Match Play: {match.margin} UP"


def calculate_match_play_settlements(match_input: MatchPlayInput) -> list[Settlement]:
    """
    Calculate match play settlements.

    Singles: each decided match pays the full bet from loser to winner;
    halved matches pay nothing.

    Teams: the bet is split evenly across the winning team, and every
    losing member pays every winning member that share, so the money moved
    is the bet times the size of the losing team.
    """
    settings = match_input.settings
    status = calculate_match_play_status(match_input)
    pairs: list[PairLines] = []

    for match in status.matches:
        if not match.is_complete or match.leader_id is None:
            continue
        if match.leader_id == match.player_a_id:
            winners, losers = match.side_a_ids, match.side_b_ids
        else:
            winners, losers = match.side_b_ids, match.side_a_ids
        share = settings.total_bet / len(winners)
        label = _result_label(match)
        for loser_id in losers:
            for winner_id in winners:
                pairs.append(PairLines(loser_id, winner_id, [SettlementLine(label=label, amount=share)]))

    return build_settlements(pairs)
