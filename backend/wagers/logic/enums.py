"""
String enum definitions for golf wagering concepts.
"""

from enum import Enum


class GameType(str, Enum):
    """Wagering format played for a round."""

    NASSAU = "nassau"
    SKINS = "skins"
    WOLF = "wolf"
    MATCH_PLAY = "match_play"


class HandicapMode(str, Enum):
    """How much of a handicap difference is converted into strokes."""

    NONE = "none"
    FULL = "full"  # 100% of the difference
    PARTIAL = "partial"  # 80% of the difference


class NassauRegion(str, Enum):
    """Independent hole ranges bet on between a Nassau pair."""

    FRONT = "front"
    BACK = "back"
    OVERALL = "overall"


class BetType(str, Enum):
    """Stored Nassau bet kinds. Presses reference a base bet as parent."""

    FRONT_9 = "front_9"
    BACK_9 = "back_9"
    OVERALL_18 = "overall_18"
    FRONT_PRESS = "front_press"
    BACK_PRESS = "back_press"
    OVERALL_PRESS = "overall_press"

    @property
    def region(self) -> NassauRegion:
        return _BET_TYPE_REGIONS[self]

    @property
    def is_press(self) -> bool:
        return self in _PRESS_TYPES


_BET_TYPE_REGIONS: dict[BetType, NassauRegion] = {
    BetType.FRONT_9: NassauRegion.FRONT,
    BetType.BACK_9: NassauRegion.BACK,
    BetType.OVERALL_18: NassauRegion.OVERALL,
    BetType.FRONT_PRESS: NassauRegion.FRONT,
    BetType.BACK_PRESS: NassauRegion.BACK,
    BetType.OVERALL_PRESS: NassauRegion.OVERALL,
}

_PRESS_TYPES = frozenset({BetType.FRONT_PRESS, BetType.BACK_PRESS, BetType.OVERALL_PRESS})

BASE_BET_FOR_REGION: dict[NassauRegion, BetType] = {
    NassauRegion.FRONT: BetType.FRONT_9,
    NassauRegion.BACK: BetType.BACK_9,
    NassauRegion.OVERALL: BetType.OVERALL_18,
}

PRESS_BET_FOR_REGION: dict[NassauRegion, BetType] = {
    NassauRegion.FRONT: BetType.FRONT_PRESS,
    NassauRegion.BACK: BetType.BACK_PRESS,
    NassauRegion.OVERALL: BetType.OVERALL_PRESS,
}


class WolfChoiceType(str, Enum):
    """Decision made by the wolf before a hole is played."""

    PARTNER = "partner"
    ALONE = "alone"
    BLIND = "blind"  # declared alone before anyone teed off


class WolfSide(str, Enum):
    """Outcome of a wolf hole."""

    WOLF = "wolf"
    FIELD = "field"
    TIE = "tie"


class MatchPlayType(str, Enum):
    """Match play pairing mode."""

    SINGLES = "singles"
    TEAMS = "teams"


class EngineErrorCode(str, Enum):
    """Error codes returned when a snapshot is rejected."""

    INVALID_SETTINGS = "invalid_settings"
    UNKNOWN_PLAYER = "unknown_player"
    VALIDATION_ERROR = "validation_error"
