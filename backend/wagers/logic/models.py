"""
Input records supplied by the persistence layer for one game.

All records are immutable for the duration of a computation. The engine
never mutates them and never keeps them between calls.
"""

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wagers.logic.enums import BetType, WolfChoiceType

MAX_HOLES = 18


class Player(BaseModel):
    """A round participant. Guests carry a substituted handicap."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    handicap: float | None = None
    guest_handicap: float | None = None
    position: int = 0

    @property
    def playing_handicap(self) -> float:
        if self.handicap is not None:
            return self.handicap
        if self.guest_handicap is not None:
            return self.guest_handicap
        return 0

    @property
    def display_name(self) -> str:
        """First name for status lines, falling back to the id."""
        if self.name.strip():
            return self.name.split()[0]
        return self.id


class ScoreEntry(BaseModel):
    """Gross strokes recorded by one player on one hole."""

    model_config = ConfigDict(frozen=True)

    game_id: str
    hole_number: int = Field(ge=1, le=MAX_HOLES)
    player_id: str
    strokes: int = Field(ge=1)
    recorded_at: datetime


class Bet(BaseModel):
    """
    A Nassau wager between two players.

    Presses point at their base bet through ``parent_bet_id`` and carry their
    own amount. ``start_hole`` is captured when a press is created; rows
    written without it fall back to timestamp inference.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    bet_type: BetType
    player_a_id: str
    player_b_id: str
    amount: float = Field(ge=0)
    parent_bet_id: str | None = None
    created_at: datetime
    start_hole: int | None = Field(default=None, ge=1, le=MAX_HOLES)

    @model_validator(mode="after")
    def _check_press_link(self) -> "Bet":
        if self.bet_type.is_press and self.parent_bet_id is None:
            raise ValueError(f"press {self.id} must reference a parent bet")
        if not self.bet_type.is_press and self.parent_bet_id is not None:
            raise ValueError(f"base bet {self.id} cannot have a parent bet")
        if self.player_a_id == self.player_b_id:
            raise ValueError(f"bet {self.id} needs two different players")
        return self

    def involves(self, player_a_id: str, player_b_id: str) -> bool:
        """Check whether the bet is between the two players, in either order."""
        return {self.player_a_id, self.player_b_id} == {player_a_id, player_b_id}


class WolfChoice(BaseModel):
    """The wolf's decision for one hole."""

    model_config = ConfigDict(frozen=True)

    hole_number: int = Field(ge=1, le=MAX_HOLES)
    wolf_player_id: str
    choice: WolfChoiceType
    partner_id: str | None = None

    @model_validator(mode="after")
    def _check_partner(self) -> "WolfChoice":
        if self.choice == WolfChoiceType.PARTNER:
            if self.partner_id is None:
                raise ValueError("partner choice requires partner_id")
            if self.partner_id == self.wolf_player_id:
                raise ValueError("wolf cannot partner with themselves")
        elif self.partner_id is not None:
            raise ValueError(f"{self.choice.value} choice cannot name a partner")
        return self


def ordered_players(players: Sequence[Player]) -> list[Player]:
    """Roster sorted by pairing position. Equal positions keep their input order."""
    return sorted(players, key=lambda p: p.position)
