from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .enums import Faction
from .map import Battlefield


@dataclass
class BattleOutcome:
    """Final state of one simulation run."""
    winner: Optional[Faction] = None
    rounds: int = 0
    hit_points: int = 0
    survivors: Dict[Faction, int] = field(default_factory=dict)
    starting_counts: Dict[Faction, int] = field(default_factory=dict)

    @property
    def score(self) -> int:
        """Remaining hit points of the winning side times completed rounds."""
        return self.hit_points * self.rounds

    def losses(self, faction: Faction) -> int:
        return self.starting_counts.get(faction, 0) - self.survivors.get(faction, 0)

    @property
    def flawless(self) -> bool:
        return self.winner is not None and self.losses(self.winner) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner": self.winner.name.lower() if self.winner else None,
            "rounds": self.rounds,
            "hit_points": self.hit_points,
            "score": self.score,
            "survivors": {f.name.lower(): n for f, n in self.survivors.items()},
            "losses": {f.name.lower(): self.losses(f) for f in self.starting_counts},
        }

    def __str__(self) -> str:
        side = self.winner.plural.title() if self.winner else "Nobody"
        return (f"Combat ends after {self.rounds} full rounds\n"
                f"{side} win with {self.hit_points} total hit points left\n"
                f"Outcome: {self.rounds} * {self.hit_points} = {self.score}")


def evaluate_outcome(
    battlefield: Battlefield,
    rounds: int,
    winner: Faction,
    starting_counts: Optional[Dict[Faction, int]] = None,
) -> BattleOutcome:
    survivors = battlefield.faction_counts()
    return BattleOutcome(
        winner=winner,
        rounds=rounds,
        hit_points=battlefield.total_hit_points(winner),
        survivors=survivors,
        starting_counts=dict(starting_counts) if starting_counts is not None else dict(survivors),
    )
