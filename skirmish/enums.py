from enum import Enum
from typing import Dict


class Faction(Enum):
    ELF = "E"
    GOBLIN = "G"

    @property
    def glyph(self) -> str:
        return self.value

    @property
    def plural(self) -> str:
        return "elves" if self is Faction.ELF else "goblins"

    def opponent(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF


class TerrainType(Enum):
    OPEN = "open"
    WALL = "wall"


class AttackOutcome(Enum):
    MISSED = "missed"
    HIT = "hit"
    KILLED = "killed"


class BattleState(Enum):
    RUNNING = "running"
    WON = "won"


DEFAULT_HIT_POINTS = 200
DEFAULT_ATTACK_POWER = 3

# Safety valves for malformed maps
DEFAULT_MAX_ROUNDS = 10_000
DEFAULT_STALL_LIMIT = 2

WALL_GLYPH = "#"
OPEN_GLYPH = "."
MARKER_GLYPH = "?"

DEFAULT_GLYPHS: Dict[str, Faction] = {
    Faction.ELF.glyph: Faction.ELF,
    Faction.GOBLIN.glyph: Faction.GOBLIN,
}


def validate_glyphs(glyphs: Dict[str, Faction]) -> bool:
    if len(glyphs) != 2 or set(glyphs.values()) != set(Faction):
        return False
    reserved = {WALL_GLYPH, OPEN_GLYPH}
    return all(len(g) == 1 and g not in reserved for g in glyphs)
