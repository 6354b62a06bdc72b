from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from wagers.logic.enums import BetType, WolfChoiceType
from wagers.logic.models import Bet, Player, ScoreEntry, WolfChoice

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


GAME_ID = "game-1"
ROUND_START = datetime(2026, 5, 2, 8, 0, tzinfo=UTC)


# ============================================================================
# Roster Helpers
# ============================================================================


def create_player(
    player_id: str,
    name: str | None = None,
    *,
    handicap: float | None = 0,
    guest_handicap: float | None = None,
    position: int = 0,
) -> Player:
    """Create a Player with sensible defaults for testing."""
    return Player(
        id=player_id,
        name=name if name is not None else player_id.capitalize(),
        handicap=handicap,
        guest_handicap=guest_handicap,
        position=position,
    )


def create_roster(*player_ids: str) -> tuple[Player, ...]:
    """Scratch players seated in the given order."""
    return tuple(create_player(pid, position=i) for i, pid in enumerate(player_ids))


# ============================================================================
# Score Helpers
# ============================================================================


def hole_time(hole_number: int, *, minutes: int = 0) -> datetime:
    """Timestamp for a score on ``hole_number`` entered during normal play."""
    return ROUND_START + timedelta(minutes=15 * hole_number + minutes)


def create_score(
    player_id: str,
    hole_number: int,
    strokes: int,
    *,
    recorded_at: datetime | None = None,
) -> ScoreEntry:
    return ScoreEntry(
        game_id=GAME_ID,
        hole_number=hole_number,
        player_id=player_id,
        strokes=strokes,
        recorded_at=recorded_at if recorded_at is not None else hole_time(hole_number),
    )


def create_scores(strokes_by_player: Mapping[str, Sequence[int]], *, first_hole: int = 1) -> tuple[ScoreEntry, ...]:
    """Build score rows from per-player stroke lists, one entry per consecutive hole."""
    return tuple(
        create_score(player_id, first_hole + offset, strokes)
        for player_id, strokes_list in strokes_by_player.items()
        for offset, strokes in enumerate(strokes_list)
    )


# ============================================================================
# Bet and Choice Helpers
# ============================================================================


def create_bet(
    bet_id: str,
    bet_type: BetType,
    player_a_id: str = "ann",
    player_b_id: str = "bob",
    *,
    amount: float = 10,
    parent_bet_id: str | None = None,
    created_at: datetime | None = None,
    start_hole: int | None = None,
) -> Bet:
    return Bet(
        id=bet_id,
        bet_type=bet_type,
        player_a_id=player_a_id,
        player_b_id=player_b_id,
        amount=amount,
        parent_bet_id=parent_bet_id,
        created_at=created_at if created_at is not None else ROUND_START,
        start_hole=start_hole,
    )


def create_base_bets(
    player_a_id: str = "ann",
    player_b_id: str = "bob",
    *,
    amount: float = 10,
    nine_holes: bool = False,
) -> tuple[Bet, ...]:
    """Base Nassau bets for one pair."""
    prefix = f"{player_a_id}-{player_b_id}"
    bet_types = (BetType.FRONT_9,) if nine_holes else (BetType.FRONT_9, BetType.BACK_9, BetType.OVERALL_18)
    return tuple(
        create_bet(f"{prefix}-{bet_type.value}", bet_type, player_a_id, player_b_id, amount=amount)
        for bet_type in bet_types
    )


def partner_choice(hole_number: int, wolf_id: str, partner_id: str) -> WolfChoice:
    return WolfChoice(
        hole_number=hole_number,
        wolf_player_id=wolf_id,
        choice=WolfChoiceType.PARTNER,
        partner_id=partner_id,
    )


def solo_choice(hole_number: int, wolf_id: str, *, blind: bool = False) -> WolfChoice:
    return WolfChoice(
        hole_number=hole_number,
        wolf_player_id=wolf_id,
        choice=WolfChoiceType.BLIND if blind else WolfChoiceType.ALONE,
    )
