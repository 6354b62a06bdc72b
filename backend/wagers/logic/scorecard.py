"""Lookup over the score log of one game."""

from collections.abc import Collection, Iterable, Sequence

from wagers.logic.exceptions import UnknownPlayerError
from wagers.logic.models import ScoreEntry


class Scorecard:
    """
    Latest score entry per (player, hole).

    The log may contain several rows for the same player and hole when a
    score was corrected; the most recently recorded row wins. When
    ``roster_ids`` is given, a row from anyone else raises UnknownPlayerError.
    """

    def __init__(self, scores: Iterable[ScoreEntry], roster_ids: Collection[str] | None = None) -> None:
        self._entries: dict[tuple[str, int], ScoreEntry] = {}
        for entry in scores:
            if roster_ids is not None and entry.player_id not in roster_ids:
                raise UnknownPlayerError(player_id=entry.player_id, source=f"score on hole {entry.hole_number}")
            key = (entry.player_id, entry.hole_number)
            current = self._entries.get(key)
            if current is None or entry.recorded_at >= current.recorded_at:
                self._entries[key] = entry

    def get(self, player_id: str, hole_number: int) -> ScoreEntry | None:
        return self._entries.get((player_id, hole_number))

    def strokes(self, player_id: str, hole_number: int) -> int | None:
        entry = self._entries.get((player_id, hole_number))
        return entry.strokes if entry is not None else None

    def has_all(self, player_ids: Sequence[str], hole_number: int) -> bool:
        """Check that every player in ``player_ids`` has a score on the hole."""
        return all((pid, hole_number) in self._entries for pid in player_ids)

    def highest_hole(self) -> int:
        """Highest hole number with any score, 0 when nothing is recorded."""
        return max((hole for _, hole in self._entries), default=0)

    def complete_holes(self, player_ids: Sequence[str], num_holes: int) -> list[int]:
        return [hole for hole in range(1, num_holes + 1) if self.has_all(player_ids, hole)]
