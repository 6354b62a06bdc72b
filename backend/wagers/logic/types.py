"""
Pydantic models for computed engine results.

Nothing here is stored: every status and settlement is recomputed from the
current snapshot of scores on each call.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from wagers.logic.enums import BetType, NassauRegion, WolfChoiceType, WolfSide


class AllSquare(BaseModel):
    """Nobody leads the unit (margin 0)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all_square"] = "all_square"


class Leading(BaseModel):
    """One side leads the unit."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leading"] = "leading"
    player_id: str


Standing = Annotated[AllSquare | Leading, Field(discriminator="kind")]

ALL_SQUARE = AllSquare()


def standing_from_wins(a_wins: int, b_wins: int, player_a_id: str, player_b_id: str) -> AllSquare | Leading:
    if a_wins > b_wins:
        return Leading(player_id=player_a_id)
    if b_wins > a_wins:
        return Leading(player_id=player_b_id)
    return ALL_SQUARE


class _StandingMixin(BaseModel):
    standing: Standing = ALL_SQUARE

    @property
    def leader_id(self) -> str | None:
        if isinstance(self.standing, Leading):
            return self.standing.player_id
        return None


class HoleResult(BaseModel):
    """Outcome of one hole between two sides. ``winner_id`` is None when halved."""

    model_config = ConfigDict(frozen=True)

    hole_number: int
    winner_id: str | None
    player_a_net: int
    player_b_net: int


class RegionStatus(_StandingMixin):
    """Running state of one Nassau region between a pair."""

    model_config = ConfigDict(frozen=True)

    bet_id: str
    region: NassauRegion
    margin: int
    holes_played: int
    holes_remaining: int
    is_complete: bool
    hole_results: tuple[HoleResult, ...] = ()


class PressStatus(_StandingMixin):
    """A press scored over its restricted hole range."""

    model_config = ConfigDict(frozen=True)

    bet_id: str
    parent_bet_id: str
    bet_type: BetType
    start_hole: int
    end_hole: int
    amount: float
    margin: int
    holes_played: int
    is_complete: bool
    start_hole_inferred: bool = False
    attribution_ambiguous: bool = False


class SuggestedPress(BaseModel):
    """A press the trailing player may want to start."""

    model_config = ConfigDict(frozen=True)

    match_player_a_id: str
    match_player_b_id: str
    bet_type: BetType
    start_hole: int
    trailing_player_id: str
    parent_bet_id: str
    reason: str


class NassauMatchStatus(BaseModel):
    """All Nassau units between one pair. Back and overall are absent for 9-hole rounds."""

    model_config = ConfigDict(frozen=True)

    player_a_id: str
    player_b_id: str
    front_nine: RegionStatus
    back_nine: RegionStatus | None = None
    overall: RegionStatus | None = None
    presses: tuple[PressStatus, ...] = ()

    @property
    def regions(self) -> tuple[RegionStatus, ...]:
        return tuple(r for r in (self.front_nine, self.back_nine, self.overall) if r is not None)


class NassauLiveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    matches: tuple[NassauMatchStatus, ...]
    current_hole: int
    is_round_complete: bool
    suggested_presses: tuple[SuggestedPress, ...] = ()


class PlayerNet(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    net_score: int


class SkinsHoleResult(BaseModel):
    """One skins hole. ``skins_value`` is the stake that was contested."""

    model_config = ConfigDict(frozen=True)

    hole_number: int
    winner_id: str | None
    skins_value: int
    is_tied: bool
    player_net_scores: tuple[PlayerNet, ...]
    split_among: tuple[str, ...] = ()  # final-hole tie split recipients


class PlayerSkins(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    skins_won: float


class SkinsLiveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    hole_results: tuple[SkinsHoleResult, ...]
    skins_per_player: tuple[PlayerSkins, ...]
    current_carryover: int
    current_hole: int
    is_round_complete: bool
    total_skins_awarded: float
    total_skins_available: int
    unreached_holes: tuple[int, ...] = ()

    def skins_for(self, player_id: str) -> float:
        for entry in self.skins_per_player:
            if entry.player_id == player_id:
                return entry.skins_won
        return 0


class PlayerPoints(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    points: int


class WolfHoleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    hole_number: int
    wolf_player_id: str
    choice: WolfChoiceType
    partner_id: str | None
    winning_side: WolfSide
    points_per_player: tuple[PlayerPoints, ...]
    multiplier: int


class WolfLiveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    hole_results: tuple[WolfHoleResult, ...]
    point_totals: tuple[PlayerPoints, ...]
    current_wolf_id: str | None
    wolf_rotation: tuple[str, ...]
    current_hole: int
    is_round_complete: bool
    needs_wolf_choice: bool
    available_partners: tuple[str, ...] = ()
    unreached_holes: tuple[int, ...] = ()

    def points_for(self, player_id: str) -> int:
        for entry in self.point_totals:
            if entry.player_id == player_id:
                return entry.points
        return 0


class MatchPlayMatchStatus(_StandingMixin):
    """
    One match play match.

    For team matches ``player_a_id``/``player_b_id`` are the first members of
    each team and a leading standing names the leading team's first member.
    """

    model_config = ConfigDict(frozen=True)

    player_a_id: str
    player_b_id: str
    side_a_ids: tuple[str, ...]
    side_b_ids: tuple[str, ...]
    hole_results: tuple[HoleResult, ...]
    margin: int
    holes_played: int
    holes_remaining: int
    is_complete: bool
    is_dormie: bool
    status_text: str


class MatchPlayLiveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    matches: tuple[MatchPlayMatchStatus, ...]
    current_hole: int
    is_round_complete: bool


class SettlementLine(BaseModel):
    """One contributing item. Positive ``amount`` means the payer owes it."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: float


class Settlement(BaseModel):
    """Net money owed from one player to another."""

    model_config = ConfigDict(frozen=True)

    from_player_id: str
    to_player_id: str
    amount: float
    breakdown: tuple[SettlementLine, ...] = ()
