"""
Engine entry point for callers holding a whole-game snapshot.

Dispatches to the engine matching the settings type and converts rule
violations into a RejectedSnapshot so the caller can report an invalid
configuration instead of rendering meaningless numbers.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from wagers.logic.enums import EngineErrorCode, GameType
from wagers.logic.exceptions import InvalidSettingsError, UnknownPlayerError, WagerRuleError
from wagers.logic.match_play import MatchPlayInput, calculate_match_play_settlements, calculate_match_play_status
from wagers.logic.models import Bet, Player, ScoreEntry, WolfChoice
from wagers.logic.nassau import NassauInput, calculate_nassau_settlements, calculate_nassau_status
from wagers.logic.settings import (
    GameSettings,
    MatchPlaySettings,
    NassauSettings,
    SkinsSettings,
    WolfSettings,
)
from wagers.logic.skins import SkinsInput, calculate_skins_settlements, calculate_skins_status
from wagers.logic.types import (
    MatchPlayLiveStatus,
    NassauLiveStatus,
    Settlement,
    SkinsLiveStatus,
    WolfLiveStatus,
)
from wagers.logic.wolf import WolfInput, calculate_wolf_settlements, calculate_wolf_status

logger = structlog.get_logger()

LiveStatus = NassauLiveStatus | SkinsLiveStatus | WolfLiveStatus | MatchPlayLiveStatus

T = TypeVar("T")


class GameSnapshot(BaseModel):
    """One consistent read of everything recorded for a game."""

    model_config = ConfigDict(frozen=True)

    game_id: str
    settings: GameSettings
    players: tuple[Player, ...]
    scores: tuple[ScoreEntry, ...] = ()
    bets: tuple[Bet, ...] = ()
    wolf_choices: tuple[WolfChoice, ...] = ()

    @property
    def game_type(self) -> GameType:
        return self.settings.type


class RejectedSnapshot(BaseModel):
    """The snapshot cannot produce a result."""

    model_config = ConfigDict(frozen=True)

    game_id: str
    code: EngineErrorCode
    message: str


def _error_code(error: Exception) -> EngineErrorCode:
    if isinstance(error, UnknownPlayerError):
        return EngineErrorCode.UNKNOWN_PLAYER
    if isinstance(error, ValidationError):
        return EngineErrorCode.VALIDATION_ERROR
    return EngineErrorCode.INVALID_SETTINGS


def _check_score_games(snapshot: GameSnapshot) -> None:
    for entry in snapshot.scores:
        if entry.game_id != snapshot.game_id:
            raise InvalidSettingsError(
                f"score for {entry.player_id} on hole {entry.hole_number} belongs to game {entry.game_id!r}"
            )


def _run(snapshot: GameSnapshot, operation: str, compute: Callable[[], T]) -> T | RejectedSnapshot:
    structlog.contextvars.bind_contextvars(game_id=snapshot.game_id, game_type=snapshot.game_type)
    try:
        _check_score_games(snapshot)
        return compute()
    except (WagerRuleError, ValidationError) as e:
        logger.warning("snapshot rejected", operation=operation, error=str(e))
        return RejectedSnapshot(game_id=snapshot.game_id, code=_error_code(e), message=str(e))
    finally:
        structlog.contextvars.unbind_contextvars("game_id", "game_type")


def _status(snapshot: GameSnapshot) -> LiveStatus:
    settings = snapshot.settings
    if isinstance(settings, NassauSettings):
        return calculate_nassau_status(
            NassauInput(settings=settings, players=snapshot.players, bets=snapshot.bets, scores=snapshot.scores)
        )
    if isinstance(settings, SkinsSettings):
        return calculate_skins_status(SkinsInput(settings=settings, players=snapshot.players, scores=snapshot.scores))
    if isinstance(settings, WolfSettings):
        return calculate_wolf_status(
            WolfInput(
                settings=settings,
                players=snapshot.players,
                scores=snapshot.scores,
                wolf_choices=snapshot.wolf_choices,
            )
        )
    if isinstance(settings, MatchPlaySettings):
        return calculate_match_play_status(
            MatchPlayInput(settings=settings, players=snapshot.players, scores=snapshot.scores)
        )
    raise TypeError(f"unsupported settings type: {type(settings).__name__}")


def _settlements(snapshot: GameSnapshot) -> list[Settlement]:
    settings = snapshot.settings
    if isinstance(settings, NassauSettings):
        return calculate_nassau_settlements(
            NassauInput(settings=settings, players=snapshot.players, bets=snapshot.bets, scores=snapshot.scores)
        )
    if isinstance(settings, SkinsSettings):
        return calculate_skins_settlements(
            SkinsInput(settings=settings, players=snapshot.players, scores=snapshot.scores)
        )
    if isinstance(settings, WolfSettings):
        return calculate_wolf_settlements(
            WolfInput(
                settings=settings,
                players=snapshot.players,
                scores=snapshot.scores,
                wolf_choices=snapshot.wolf_choices,
            )
        )
    if isinstance(settings, MatchPlaySettings):
        return calculate_match_play_settlements(
            MatchPlayInput(settings=settings, players=snapshot.players, scores=snapshot.scores)
        )
    raise TypeError(f"unsupported settings type: {type(settings).__name__}")


def compute_status(snapshot: GameSnapshot) -> LiveStatus | RejectedSnapshot:
    """Live status for display on every score change."""
    return _run(snapshot, "status", lambda: _status(snapshot))


def compute_settlements(snapshot: GameSnapshot) -> list[Settlement] | RejectedSnapshot:
    """Final settlements once the round is over."""
    result = _run(snapshot, "settlements", lambda: _settlements(snapshot))
    if not isinstance(result, RejectedSnapshot):
        logger.info("settlements computed", game_id=snapshot.game_id, count=len(result))
    return result
