from dataclasses import dataclass
from .enums import Faction, DEFAULT_HIT_POINTS, DEFAULT_ATTACK_POWER

@dataclass
class Combatant:
    faction: Faction
    hit_points: int = DEFAULT_HIT_POINTS
    attack_power: int = DEFAULT_ATTACK_POWER
    uid: int = 0

    def __post_init__(self):
        if self.hit_points <= 0:
            raise ValueError(f"hit_points must be positive, got {self.hit_points}")
        if self.attack_power <= 0:
            raise ValueError(f"attack_power must be positive, got {self.attack_power}")

    @property
    def is_alive(self) -> bool:
        return self.hit_points > 0

    @property
    def glyph(self) -> str:
        return self.faction.glyph

    @property
    def name(self) -> str:
        return f"{self.faction.name.title()} #{self.uid}"

    def is_enemy(self, other: "Combatant") -> bool:
        return self.faction != other.faction

    def take_damage(self, amount: int) -> bool:
        """Subtract ``amount`` (never below zero). Returns True if this killed the combatant."""
        if amount < 0:
            raise ValueError(f"damage must not be negative, got {amount}")
        was_alive = self.is_alive
        self.hit_points = max(0, self.hit_points - amount)
        return was_alive and not self.is_alive

    def __repr__(self) -> str:
        return f"{self.glyph}({self.hit_points})"
