"""Vote groupings during deliberation."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fakeartist.core.models import InGame, Player


class VoteTally:
    """Read-only view of the authoritative votes map.

    The tally is never updated from locally cast votes. It is rebuilt from
    every vote-update broadcast so concurrent voters always converge on the
    server's map.

    Attributes:
        players: Seated players in turn order.
        votes: Map of voter id to accused player id.
    """

    def __init__(self, players: list[Player], votes: dict[str, str]) -> None:
        """Initialize the tally.

        Args:
            players: Seated players in turn order.
            votes: Map of voter id to accused player id.
        """
        self.players = list(players)
        self.votes = dict(votes)

    @classmethod
    def from_game(cls, game: InGame) -> VoteTally:
        """Build a tally from an in-game facet."""
        return cls(game.players, game.votes)

    def voters_for(self, candidate: Player) -> list[Player]:
        """Players whose vote targets ``candidate``, in turn order."""
        return [p for p in self.players if self.votes.get(p.id) == candidate.id]

    def counts(self) -> dict[str, int]:
        """Number of votes per accused player id."""
        return dict(Counter(self.votes.values()))

    def leading(self) -> list[Player]:
        """Players with the most votes; empty when nobody voted."""
        counts = self.counts()
        if not counts:
            return []
        top = max(counts.values())
        return [p for p in self.players if counts.get(p.id) == top]

    def has_voted(self, player: Player) -> bool:
        """Whether ``player`` has cast a vote."""
        return player.id in self.votes

    @property
    def complete(self) -> bool:
        """Whether every seated player has voted."""
        return bool(self.players) and all(p.id in self.votes for p in self.players)
