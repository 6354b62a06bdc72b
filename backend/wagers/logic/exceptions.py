"""Typed domain exceptions for wager engine rule violations.

Engines raise subclasses of WagerRuleError instead of letting degenerate
input turn into meaningless numbers (a minimum over an empty roster, a
stroke index of the wrong length). The service boundary catches them and
converts them into a RejectedSnapshot result.
"""


class WagerRuleError(Exception):
    """Base exception for wager engine rule violations."""


class InvalidSettingsError(WagerRuleError):
    """Game settings or roster cannot produce a meaningful result."""


class UnknownPlayerError(WagerRuleError):
    """A settings field or input row references a player missing from the roster.

    Attributes:
        player_id: The unknown player id.
        source: Where the reference was found (e.g. "team_a", "bet b-1").

    """

    def __init__(self, *, player_id: str, source: str) -> None:
        self.player_id = player_id
        self.source = source
        super().__init__(f"unknown player {player_id!r} referenced by {source}")
