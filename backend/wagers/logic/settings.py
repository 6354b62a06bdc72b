"""Per-format game settings - created once at game start, read-only afterwards."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from wagers.logic.enums import GameType, HandicapMode, MatchPlayType
from wagers.logic.exceptions import InvalidSettingsError, UnknownPlayerError
from wagers.logic.models import Player

# Standard stroke index ordering (most common US allocation).
# Odd indexes on the front nine, even indexes on the back nine.
DEFAULT_STROKE_INDEX: tuple[int, ...] = (
    # hole:  1  2   3  4   5  6   7  8   9
    7, 3, 11, 1, 13, 5, 15, 9, 17,
    # hole: 10  11  12  13  14  15  16  17  18
    8, 4, 12, 2, 14, 6, 16, 10, 18,
)

SUPPORTED_NUM_HOLES = (9, 18)
STROKE_INDEX_LENGTH = 18
WOLF_NUM_PLAYERS = 4
MIN_PLAYERS = 2


class CourseSettings(BaseModel):
    """Settings shared by every format."""

    model_config = ConfigDict(frozen=True)

    num_holes: int = 18
    handicap_mode: HandicapMode = HandicapMode.FULL
    hole_handicap_ratings: tuple[int, ...] = DEFAULT_STROKE_INDEX
    hole_pars: tuple[int, ...] | None = None  # display only


class NassauSettings(CourseSettings):
    """Front / back / overall match bets with optional presses."""

    type: Literal[GameType.NASSAU] = GameType.NASSAU
    front_bet: float = 0
    back_bet: float = 0
    overall_bet: float = 0
    auto_press: bool = True
    press_trigger: int = 2  # holes down before a press is suggested
    press_limit: int = 0  # per region per pair, 0 = unlimited


class SkinsSettings(CourseSettings):
    """Per-hole skins with carryover."""

    type: Literal[GameType.SKINS] = GameType.SKINS
    skin_value: float = 0
    allow_carryovers: bool = True
    split_final_ties: bool = True


class WolfSettings(CourseSettings):
    """Four-player rotating wolf."""

    type: Literal[GameType.WOLF] = GameType.WOLF
    point_value: float = 0
    blind_wolf: bool = False
    wolf_order: tuple[str, ...] | None = None


class MatchPlaySettings(CourseSettings):
    """Holes-won match play, singles round-robin or two teams."""

    type: Literal[GameType.MATCH_PLAY] = GameType.MATCH_PLAY
    match_type: MatchPlayType = MatchPlayType.SINGLES
    total_bet: float = 0
    team_a: tuple[str, ...] = ()
    team_b: tuple[str, ...] = ()


GameSettings = Annotated[
    NassauSettings | SkinsSettings | WolfSettings | MatchPlaySettings,
    Field(discriminator="type"),
]


def _stroke_index_errors(stroke_index: Sequence[int]) -> list[str]:
    if len(stroke_index) != STROKE_INDEX_LENGTH:
        return [f"hole_handicap_ratings has {len(stroke_index)} entries (expected {STROKE_INDEX_LENGTH})"]
    if sorted(stroke_index) != list(range(1, STROKE_INDEX_LENGTH + 1)):
        return [f"hole_handicap_ratings must rank holes 1..{STROKE_INDEX_LENGTH} exactly once"]
    return []


def check_stroke_index(stroke_index: Sequence[int]) -> None:
    """Raise InvalidSettingsError unless ``stroke_index`` ranks all 18 holes once."""
    errors = _stroke_index_errors(stroke_index)
    if errors:
        raise InvalidSettingsError("; ".join(errors))


def _check_roster_ids(ids: Sequence[str], roster_ids: set[str], source: str) -> None:
    for player_id in ids:
        if player_id not in roster_ids:
            raise UnknownPlayerError(player_id=player_id, source=source)


def validate_settings(
    settings: NassauSettings | SkinsSettings | WolfSettings | MatchPlaySettings,
    players: Sequence[Player],
) -> None:
    """Validate that settings and roster can produce a meaningful result.

    Collects every problem and raises a single InvalidSettingsError. Raises
    UnknownPlayerError when a settings field names a player outside the roster.
    """
    errors: list[str] = []

    if settings.num_holes not in SUPPORTED_NUM_HOLES:
        errors.append(f"num_holes={settings.num_holes} is not supported (9 or 18)")
    errors.extend(_stroke_index_errors(settings.hole_handicap_ratings))

    roster_ids = [p.id for p in players]
    if len(set(roster_ids)) != len(roster_ids):
        errors.append("roster contains duplicate player ids")
    if len(players) < MIN_PLAYERS:
        errors.append(f"roster has {len(players)} players (at least {MIN_PLAYERS} required)")

    if isinstance(settings, NassauSettings):
        if min(settings.front_bet, settings.back_bet, settings.overall_bet) < 0:
            errors.append("nassau bet amounts must not be negative")
        if settings.press_trigger < 1:
            errors.append(f"press_trigger={settings.press_trigger} must be at least 1")
        if settings.press_limit < 0:
            errors.append(f"press_limit={settings.press_limit} must not be negative")
    elif isinstance(settings, SkinsSettings):
        if settings.skin_value < 0:
            errors.append("skin_value must not be negative")
    elif isinstance(settings, WolfSettings):
        if settings.point_value < 0:
            errors.append("point_value must not be negative")
        if len(players) != WOLF_NUM_PLAYERS:
            errors.append(f"wolf needs exactly {WOLF_NUM_PLAYERS} players (got {len(players)})")
        if settings.wolf_order is not None:
            _check_roster_ids(settings.wolf_order, set(roster_ids), "wolf_order")
            if sorted(settings.wolf_order) != sorted(roster_ids):
                errors.append("wolf_order must list every player exactly once")
    elif isinstance(settings, MatchPlaySettings):
        if settings.total_bet < 0:
            errors.append("total_bet must not be negative")
        if settings.match_type == MatchPlayType.TEAMS:
            _check_roster_ids(settings.team_a, set(roster_ids), "team_a")
            _check_roster_ids(settings.team_b, set(roster_ids), "team_b")
            if not settings.team_a or not settings.team_b:
                errors.append("teams match play needs two non-empty teams")
            if set(settings.team_a) & set(settings.team_b):
                errors.append("a player cannot be on both teams")

    if errors:
        raise InvalidSettingsError("; ".join(errors))
