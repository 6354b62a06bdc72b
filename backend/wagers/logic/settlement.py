"""
Pairwise settlement aggregation shared by every wagering format.

Each format only decides which signed line items apply between two
players. This module turns those lines into one net Settlement per pair,
so the payer/payee orientation and the zero-sum property live in one place.

Sign convention for ``PairLines.lines``: a positive amount means player A
owes player B on that line, a negative amount means B owes A.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from itertools import combinations

from wagers.logic.models import Player
from wagers.logic.types import Settlement, SettlementLine

# amounts below this are treated as settled (float noise from fractional skins)
SETTLEMENT_EPSILON = 1e-9


@dataclass(frozen=True)
class PairLines:
    """Signed line items between two players, oriented from player A."""

    player_a_id: str
    player_b_id: str
    lines: list[SettlementLine] = field(default_factory=list)


def settle_pair(pair: PairLines) -> Settlement | None:
    """Collapse one pair's lines into a net settlement, or None when they cancel out."""
    net = sum(line.amount for line in pair.lines)
    if abs(net) < SETTLEMENT_EPSILON:
        return None
    if net > 0:
        return Settlement(
            from_player_id=pair.player_a_id,
            to_player_id=pair.player_b_id,
            amount=net,
            breakdown=tuple(pair.lines),
        )
    # flip orientation so breakdown amounts are from the payer's point of view
    return Settlement(
        from_player_id=pair.player_b_id,
        to_player_id=pair.player_a_id,
        amount=-net,
        breakdown=tuple(SettlementLine(label=line.label, amount=-line.amount) for line in pair.lines),
    )


def build_settlements(pairs: Iterable[PairLines]) -> list[Settlement]:
    """Net every pair, dropping pairs that owe each other nothing."""
    settlements = []
    for pair in pairs:
        settlement = settle_pair(pair)
        if settlement is not None:
            settlements.append(settlement)
    return settlements


def differential_settlements(
    players: Sequence[Player],
    totals: dict[str, float],
    unit_value: float,
    label_prefix: str,
) -> list[Settlement]:
    """
    Settle every pair on the difference of their totals times ``unit_value``.

    Used by formats that accumulate a per-player count (skins, wolf points).
    Equal totals settle nothing.
    """
    pairs = []
    for player_a, player_b in combinations(players, 2):
        total_a = totals.get(player_a.id, 0)
        total_b = totals.get(player_b.id, 0)
        if total_a == total_b:
            continue
        label = f"{label_prefix}: {_format_count(total_a)} vs {_format_count(total_b)}"
        # A owes B when B finished ahead
        amount = (total_b - total_a) * unit_value
        pairs.append(PairLines(player_a.id, player_b.id, [SettlementLine(label=label, amount=amount)]))
    return build_settlements(pairs)


def _format_count(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0")


def net_positions(settlements: Iterable[Settlement]) -> dict[str, float]:
    """Net amount per player: positive = owes money, negative = is owed. Sums to zero."""
    positions: dict[str, float] = defaultdict(float)
    for settlement in settlements:
        positions[settlement.from_player_id] += settlement.amount
        positions[settlement.to_player_id] -= settlement.amount
    return dict(positions)


def player_net_amount(player_id: str, settlements: Iterable[Settlement]) -> float:
    """Total a player owes (positive) or is owed (negative) across all settlements."""
    return net_positions(settlements).get(player_id, 0)
