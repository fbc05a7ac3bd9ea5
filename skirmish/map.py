from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, List, Dict, Iterable, Iterator, Mapping
from .enums import (
    Faction, TerrainType, DEFAULT_HIT_POINTS, DEFAULT_ATTACK_POWER, DEFAULT_GLYPHS,
    WALL_GLYPH, OPEN_GLYPH, validate_glyphs,
)
from .errors import MalformedMap, NoCombatants, OutOfBounds, IllegalMove
from .participant import Combatant

@total_ordering
@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def __lt__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    def adjacent(self) -> List["Position"]:
        # up, left, right, down: already reading order
        return [
            Position(self.x, self.y - 1),
            Position(self.x - 1, self.y),
            Position(self.x + 1, self.y),
            Position(self.x, self.y + 1),
        ]

    def manhattan_distance(self, other: "Position") -> int:
        return abs(other.x - self.x) + abs(other.y - self.y)

    def __repr__(self) -> str:
        return f"({self.x},{self.y})"

@dataclass
class Tile:
    x: int
    y: int
    terrain_type: TerrainType = TerrainType.OPEN
    occupant: Optional[Combatant] = None
    occupant_glyph: Optional[str] = None

    @property
    def passable(self) -> bool:
        return self.terrain_type != TerrainType.WALL

    @property
    def is_wall(self) -> bool:
        return not self.passable

    @property
    def is_open(self) -> bool:
        return self.passable and self.occupant is None

    @property
    def is_occupied(self) -> bool:
        return self.occupant is not None

    def can_enter(self) -> bool:
        return self.is_open

    @property
    def glyph(self) -> str:
        if self.occupant is not None:
            return self.occupant_glyph or self.occupant.glyph
        return WALL_GLYPH if self.is_wall else OPEN_GLYPH

    def __repr__(self) -> str:
        return f"Tile({self.x},{self.y},{self.glyph})"

class Battlefield:
    """Static terrain plus a sparse map of the combatants still alive."""

    def __init__(self, width: int, height: int, walls: Iterable[Position] = ()):
        if width <= 0 or height <= 0:
            raise MalformedMap(f"battlefield must have a positive size, got {width}x{height}")
        self.width = width
        self.height = height
        self.terrain: List[List[TerrainType]] = [
            [TerrainType.OPEN for _ in range(width)] for _ in range(height)
        ]
        for pos in walls:
            self._check_bounds(pos)
            self.terrain[pos.y][pos.x] = TerrainType.WALL
        self.combatants: Dict[Position, Combatant] = {}
        self.glyphs: Dict[Faction, str] = {f: g for g, f in DEFAULT_GLYPHS.items()}

    @classmethod
    def from_text(
        cls,
        text: str,
        attack_power: Optional[Mapping[Faction, int]] = None,
        hit_points: int = DEFAULT_HIT_POINTS,
        glyphs: Optional[Mapping[str, Faction]] = None,
    ) -> "Battlefield":
        """
        Parse a text map: ``#`` wall, ``.`` open floor, one glyph per faction.

        Rows must all have the same length and the outer border must be wall;
        both factions must be present. Factions missing from ``attack_power``
        fight with the default power.
        """
        glyph_table = dict(glyphs or DEFAULT_GLYPHS)
        if not validate_glyphs(glyph_table):
            raise ValueError(f"need exactly one single-character glyph per faction, got {glyph_table}")
        powers = {f: DEFAULT_ATTACK_POWER for f in Faction}
        powers.update(attack_power or {})

        rows = text.replace("\r", "").split("\n")
        while rows and not rows[-1]:
            rows.pop()
        if not rows:
            raise MalformedMap("map is empty")
        width = len(rows[0])
        if width == 0:
            raise MalformedMap("first row is empty", line=0)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise MalformedMap(f"row has length {len(row)}, expected {width}", line=y)

        walls: List[Position] = []
        placements: List[tuple] = []
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch == WALL_GLYPH:
                    walls.append(Position(x, y))
                elif ch in glyph_table:
                    placements.append((Position(x, y), glyph_table[ch]))
                elif ch != OPEN_GLYPH:
                    raise MalformedMap(f"unknown glyph {ch!r}", line=y, column=x)

        battlefield = cls(width, len(rows), walls)
        battlefield.glyphs = {f: g for g, f in glyph_table.items()}
        for pos in battlefield.border():
            if not battlefield.is_wall(pos):
                raise MalformedMap("map border must be wall", line=pos.y, column=pos.x)
        for uid, (pos, faction) in enumerate(placements):
            battlefield.place(pos, Combatant(faction, hit_points, powers[faction], uid=uid))

        counts = battlefield.faction_counts()
        missing = [f.name.lower() for f in Faction if counts[f] == 0]
        if missing:
            raise NoCombatants(f"no combatants for: {', '.join(missing)}")
        return battlefield

    # --- lookup -------------------------------------------------------------

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def _check_bounds(self, pos: Position) -> None:
        if not self.in_bounds(pos):
            raise OutOfBounds(f"{pos} outside {self.width}x{self.height} battlefield")

    def cell_at(self, pos: Position) -> Tile:
        self._check_bounds(pos)
        occupant = self.combatants.get(pos)
        glyph = self.glyphs[occupant.faction] if occupant is not None else None
        return Tile(pos.x, pos.y, self.terrain[pos.y][pos.x], occupant, glyph)

    def is_wall(self, pos: Position) -> bool:
        self._check_bounds(pos)
        return self.terrain[pos.y][pos.x] == TerrainType.WALL

    def is_open(self, pos: Position) -> bool:
        if not self.in_bounds(pos):
            return False
        return self.terrain[pos.y][pos.x] == TerrainType.OPEN and pos not in self.combatants

    def combatant_at(self, pos: Position) -> Optional[Combatant]:
        self._check_bounds(pos)
        return self.combatants.get(pos)

    def positions(self) -> Iterator[Position]:
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    def border(self) -> List[Position]:
        return [p for p in self.positions()
                if p.x in (0, self.width - 1) or p.y in (0, self.height - 1)]

    def neighbors(self, pos: Position) -> List[Position]:
        return [n for n in pos.adjacent() if self.in_bounds(n)]

    def open_neighbors(self, pos: Position) -> List[Position]:
        return [n for n in self.neighbors(pos) if self.is_open(n)]

    def combatant_positions(self) -> List[Position]:
        return sorted(self.combatants)

    def positions_of(self, faction: Faction) -> List[Position]:
        return sorted(p for p, c in self.combatants.items() if c.faction == faction)

    def enemy_positions(self, faction: Faction) -> List[Position]:
        return sorted(p for p, c in self.combatants.items() if c.faction != faction)

    def faction_counts(self) -> Dict[Faction, int]:
        counts = {f: 0 for f in Faction}
        for c in self.combatants.values():
            counts[c.faction] += 1
        return counts

    def total_hit_points(self, faction: Faction) -> int:
        return sum(c.hit_points for c in self.combatants.values() if c.faction == faction)

    # --- mutation -----------------------------------------------------------

    def place(self, pos: Position, combatant: Combatant) -> None:
        if not self.is_open(pos):
            raise IllegalMove(f"cannot place {combatant.name} on {self.cell_at(pos)}")
        self.combatants[pos] = combatant

    def move_combatant(self, src: Position, dst: Position) -> None:
        combatant = self.combatant_at(src)
        if combatant is None:
            raise IllegalMove(f"no combatant at {src}")
        if src.manhattan_distance(dst) != 1:
            raise IllegalMove(f"{src} -> {dst} is not a single orthogonal step")
        if not self.is_open(dst):
            raise IllegalMove(f"{dst} is not open")
        del self.combatants[src]
        self.combatants[dst] = combatant

    def apply_damage(self, pos: Position, amount: int) -> bool:
        combatant = self.combatant_at(pos)
        if combatant is None:
            raise IllegalMove(f"no combatant at {pos} to damage")
        return combatant.take_damage(amount)

    def remove_if_dead(self, pos: Position) -> bool:
        combatant = self.combatant_at(pos)
        if combatant is None or combatant.is_alive:
            return False
        del self.combatants[pos]
        return True

    # --- display ------------------------------------------------------------

    def render(
        self,
        annotate: bool = False,
        markers: Optional[Mapping[Position, str]] = None,
        axes: bool = False,
    ) -> str:
        """
        Map text in the input alphabet, optionally with per-row hit points and markers.

        With ``axes`` a header of column digits is printed first and every row is
        prefixed with its row digit (both modulo 10).
        """
        markers = markers or {}
        lines: List[str] = []
        if axes:
            lines.append("  " + "".join(str(x % 10) for x in range(self.width)))
        for y in range(self.height):
            line_chars: List[str] = []
            row_units: List[str] = []
            for x in range(self.width):
                pos = Position(x, y)
                occupant = self.combatants.get(pos)
                if occupant is not None:
                    glyph = self.glyphs[occupant.faction]
                    line_chars.append(glyph)
                    row_units.append(f"{glyph}({occupant.hit_points})")
                elif pos in markers and self.is_open(pos):
                    line_chars.append(markers[pos])
                else:
                    line_chars.append(WALL_GLYPH if self.terrain[y][x] == TerrainType.WALL else OPEN_GLYPH)
            line = "".join(line_chars)
            if axes:
                line = f"{y % 10} " + line
            if annotate and row_units:
                line += "   " + ", ".join(row_units)
            lines.append(line)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        counts = self.faction_counts()
        return (f"Battlefield({self.width}x{self.height}, "
                + ", ".join(f"{f.name.lower()}={n}" for f, n in counts.items()) + ")")
