"""
Skins scoring.

Skins is a per-hole bet: the unique lowest net score wins the skin. A tie
carries the skin over to the next hole when carryovers are enabled,
otherwise the skin is dead. Handicaps play off the low.

Holes are scored strictly in order. Scoring stops at the first hole that
is missing any player's score; fully scored holes after that gap are not
scored yet and are reported as ``unreached_holes``.
"""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict

from wagers.logic.handicap import field_strokes, net_score
from wagers.logic.models import Player, ScoreEntry, ordered_players
from wagers.logic.scorecard import Scorecard
from wagers.logic.settings import SkinsSettings, validate_settings
from wagers.logic.settlement import differential_settlements
from wagers.logic.types import (
    PlayerNet,
    PlayerSkins,
    Settlement,
    SkinsHoleResult,
    SkinsLiveStatus,
)

logger = structlog.get_logger()


class SkinsInput(BaseModel):
    """Snapshot of one skins game."""

    model_config = ConfigDict(frozen=True)

    settings: SkinsSettings
    players: tuple[Player, ...]
    scores: tuple[ScoreEntry, ...] = ()


def calculate_skins_status(skins_input: SkinsInput) -> SkinsLiveStatus:
    """Calculate skins won per player, the current carryover and per-hole results."""
    settings = skins_input.settings
    players = ordered_players(skins_input.players)
    validate_settings(settings, players)

    player_ids = [p.id for p in players]
    card = Scorecard(skins_input.scores, player_ids)
    stroke_maps = field_strokes(players, settings.handicap_mode, settings.hole_handicap_ratings)

    skins_count: dict[str, float] = dict.fromkeys(player_ids, 0)
    hole_results: list[SkinsHoleResult] = []
    carryover = 0
    total_awarded: float = 0

    for hole in range(1, settings.num_holes + 1):
        if not card.has_all(player_ids, hole):
            break

        nets = tuple(
            PlayerNet(player_id=pid, net_score=net_score(card.strokes(pid, hole) or 0, stroke_maps[pid].get(hole, 0)))
            for pid in player_ids
        )
        low = min(n.net_score for n in nets)
        low_ids = [n.player_id for n in nets if n.net_score == low]
        stake = 1 + carryover

        if len(low_ids) == 1:
            winner_id = low_ids[0]
            skins_count[winner_id] += stake
            total_awarded += stake
            carryover = 0
            hole_results.append(
                SkinsHoleResult(
                    hole_number=hole,
                    winner_id=winner_id,
                    skins_value=stake,
                    is_tied=False,
                    player_net_scores=nets,
                )
            )
            logger.debug("skin won", hole=hole, winner=winner_id, skins=stake)
            continue

        # tie: carry the skin forward, or let it die
        if settings.allow_carryovers:
            carryover += 1
        hole_results.append(
            SkinsHoleResult(
                hole_number=hole,
                winner_id=None,
                skins_value=stake,
                is_tied=True,
                player_net_scores=nets,
            )
        )

    last = hole_results[-1] if hole_results else None
    if (
        last is not None
        and last.hole_number == settings.num_holes
        and last.is_tied
        and carryover > 0
        and settings.split_final_ties
    ):
        low = min(n.net_score for n in last.player_net_scores)
        tied_ids = tuple(n.player_id for n in last.player_net_scores if n.net_score == low)
        share = carryover / len(tied_ids)
        for pid in tied_ids:
            skins_count[pid] += share
        total_awarded += carryover
        logger.debug("final carryover split", skins=carryover, players=list(tied_ids))
        carryover = 0
        hole_results[-1] = last.model_copy(update={"split_among": tied_ids})

    holes_scored = len(hole_results)
    unreached = tuple(
        hole for hole in card.complete_holes(player_ids, settings.num_holes) if hole > holes_scored + 1
    )
    if unreached:
        logger.warning(
            "skins holes scored past a gap are not counted yet",
            missing_hole=holes_scored + 1,
            unreached_holes=list(unreached),
        )

    return SkinsLiveStatus(
        hole_results=tuple(hole_results),
        skins_per_player=tuple(PlayerSkins(player_id=pid, skins_won=skins_count[pid]) for pid in player_ids),
        current_carryover=carryover,
        current_hole=hole_results[-1].hole_number if hole_results else 0,
        is_round_complete=holes_scored == settings.num_holes,
        total_skins_awarded=total_awarded,
        total_skins_available=settings.num_holes,
        unreached_holes=unreached,
    )


def calculate_skins_settlements(skins_input: SkinsInput) -> list[Settlement]:
    """
    Calculate pairwise skins settlements.

    For each pair (A, B): (A's skins - B's skins) x skin value, paid by
    whoever won fewer skins.
    """
    status = calculate_skins_status(skins_input)
    players = ordered_players(skins_input.players)
    totals = {entry.player_id: entry.skins_won for entry in status.skins_per_player}
    return differential_settlements(players, totals, skins_input.settings.skin_value, "Skins")
