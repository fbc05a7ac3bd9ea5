"""
Battlefield tests: map parsing, lookups, mutation and rendering.
"""

import unittest
from skirmish import (
    Battlefield,
    Position,
    Faction,
    TerrainType,
    MalformedMap,
    NoCombatants,
    OutOfBounds,
    IllegalMove,
    SAMPLE_BATTLES,
    DEFAULT_HIT_POINTS,
    DEFAULT_ATTACK_POWER,
)


CROSSROADS = SAMPLE_BATTLES["Crossroads"].map_text


def _rows(*rows: str) -> str:
    return "\n".join(rows)


class TestPosition(unittest.TestCase):
    """Reading order and adjacency."""

    def test_reading_order_compares_row_first(self):
        self.assertLess(Position(5, 1), Position(0, 2))
        self.assertLess(Position(1, 3), Position(2, 3))
        self.assertGreater(Position(0, 4), Position(9, 3))

    def test_sorting(self):
        points = [Position(3, 2), Position(1, 1), Position(0, 2), Position(4, 1)]
        self.assertEqual(sorted(points), [Position(1, 1), Position(4, 1), Position(0, 2), Position(3, 2)])

    def test_adjacent_order(self):
        """Up, left, right, down."""
        self.assertEqual(
            Position(2, 2).adjacent(),
            [Position(2, 1), Position(1, 2), Position(3, 2), Position(2, 3)],
        )

    def test_hashable(self):
        self.assertEqual(len({Position(1, 1), Position(1, 1), Position(1, 2)}), 2)


class TestParsing(unittest.TestCase):
    """Battlefield.from_text."""

    def test_dimensions_and_counts(self):
        bf = Battlefield.from_text(CROSSROADS)
        self.assertEqual((bf.width, bf.height), (7, 7))
        self.assertEqual(bf.faction_counts(), {Faction.ELF: 2, Faction.GOBLIN: 4})

    def test_combatant_positions_reading_order(self):
        bf = Battlefield.from_text(CROSSROADS)
        self.assertEqual(
            bf.combatant_positions(),
            [Position(2, 1), Position(4, 2), Position(5, 2), Position(5, 3), Position(3, 4), Position(5, 4)],
        )

    def test_default_stats(self):
        bf = Battlefield.from_text(CROSSROADS)
        for pos in bf.combatant_positions():
            unit = bf.combatant_at(pos)
            self.assertEqual(unit.hit_points, DEFAULT_HIT_POINTS)
            self.assertEqual(unit.attack_power, DEFAULT_ATTACK_POWER)

    def test_attack_power_per_faction(self):
        bf = Battlefield.from_text(CROSSROADS, attack_power={Faction.ELF: 15})
        self.assertEqual(bf.combatant_at(Position(4, 2)).attack_power, 15)
        self.assertEqual(bf.combatant_at(Position(2, 1)).attack_power, DEFAULT_ATTACK_POWER)

    def test_custom_hit_points(self):
        bf = Battlefield.from_text(CROSSROADS, hit_points=50)
        self.assertEqual(bf.total_hit_points(Faction.GOBLIN), 200)

    def test_uids_follow_reading_order(self):
        bf = Battlefield.from_text(CROSSROADS)
        uids = [bf.combatant_at(p).uid for p in bf.combatant_positions()]
        self.assertEqual(uids, list(range(6)))

    def test_trailing_newline_and_crlf(self):
        bf = Battlefield.from_text(CROSSROADS.replace("\n", "\r\n") + "\r\n\r\n")
        self.assertEqual((bf.width, bf.height), (7, 7))

    def test_short_row_rejected(self):
        with self.assertRaises(MalformedMap) as ctx:
            Battlefield.from_text(_rows("#####", "#E.G#", "####"))
        self.assertEqual(ctx.exception.line, 2)

    def test_unknown_glyph(self):
        with self.assertRaises(MalformedMap) as ctx:
            Battlefield.from_text(_rows("#####", "#EXG#", "#####"))
        self.assertEqual((ctx.exception.line, ctx.exception.column), (1, 2))
        self.assertIn("unknown glyph", ctx.exception.user_message)

    def test_empty_map(self):
        with self.assertRaises(MalformedMap):
            Battlefield.from_text("")
        with self.assertRaises(MalformedMap):
            Battlefield.from_text("\n\n")

    def test_open_border_rejected(self):
        with self.assertRaises(MalformedMap):
            Battlefield.from_text(_rows("#####", "#E.G.", "#####"))

    def test_missing_faction(self):
        with self.assertRaises(NoCombatants):
            Battlefield.from_text(_rows("#####", "#E.E#", "#####"))
        with self.assertRaises(NoCombatants):
            Battlefield.from_text(_rows("#####", "#...#", "#####"))

    def test_errors_are_value_errors(self):
        """Callers can treat bad maps as plain ValueError."""
        with self.assertRaises(ValueError):
            Battlefield.from_text(_rows("###", "#E#"))

    def test_custom_glyphs(self):
        bf = Battlefield.from_text(
            _rows("#####", "#A.B#", "#####"),
            glyphs={"A": Faction.ELF, "B": Faction.GOBLIN},
        )
        self.assertEqual(bf.combatant_at(Position(1, 1)).faction, Faction.ELF)
        self.assertEqual(bf.render(), _rows("#####", "#A.B#", "#####"))
        self.assertEqual(bf.cell_at(Position(1, 1)).glyph, "A")
        self.assertEqual(bf.cell_at(Position(3, 1)).glyph, "B")
        self.assertEqual(bf.cell_at(Position(2, 1)).glyph, ".")

    def test_bad_glyph_table(self):
        with self.assertRaises(ValueError):
            Battlefield.from_text(CROSSROADS, glyphs={"E": Faction.ELF, "#": Faction.GOBLIN})

    def test_idempotent_construction(self):
        a = Battlefield.from_text(CROSSROADS)
        b = Battlefield.from_text(CROSSROADS)
        self.assertEqual(a.render(annotate=True), b.render(annotate=True))
        self.assertEqual(a.combatant_positions(), b.combatant_positions())
        self.assertEqual(a.terrain, b.terrain)


class TestLookup(unittest.TestCase):

    def setUp(self):
        self.bf = Battlefield.from_text(CROSSROADS)

    def test_cell_kinds(self):
        self.assertTrue(self.bf.cell_at(Position(0, 0)).is_wall)
        self.assertEqual(self.bf.cell_at(Position(0, 0)).terrain_type, TerrainType.WALL)
        self.assertTrue(self.bf.cell_at(Position(1, 1)).is_open)
        goblin = self.bf.cell_at(Position(2, 1))
        self.assertTrue(goblin.is_occupied)
        self.assertEqual(goblin.occupant.faction, Faction.GOBLIN)
        self.assertFalse(goblin.can_enter())

    def test_out_of_bounds(self):
        for pos in (Position(7, 0), Position(0, 7), Position(-1, 3)):
            with self.assertRaises(OutOfBounds):
                self.bf.cell_at(pos)
        self.assertFalse(self.bf.is_open(Position(-1, 3)))

    def test_neighbors(self):
        self.assertEqual(
            self.bf.neighbors(Position(1, 1)),
            [Position(1, 0), Position(0, 1), Position(2, 1), Position(1, 2)],
        )
        self.assertEqual(self.bf.neighbors(Position(0, 0)), [Position(1, 0), Position(0, 1)])

    def test_open_neighbors(self):
        # (1,1): up wall, left wall, right goblin, down open
        self.assertEqual(self.bf.open_neighbors(Position(1, 1)), [Position(1, 2)])

    def test_positions_by_faction(self):
        self.assertEqual(self.bf.positions_of(Faction.ELF), [Position(4, 2), Position(5, 4)])
        self.assertEqual(self.bf.enemy_positions(Faction.ELF), self.bf.positions_of(Faction.GOBLIN))


class TestMutation(unittest.TestCase):

    def setUp(self):
        self.bf = Battlefield.from_text(_rows("######", "#E..G#", "#.#..#", "######"))

    def test_move(self):
        self.bf.move_combatant(Position(1, 1), Position(2, 1))
        self.assertTrue(self.bf.is_open(Position(1, 1)))
        self.assertEqual(self.bf.combatant_at(Position(2, 1)).faction, Faction.ELF)

    def test_illegal_moves(self):
        with self.assertRaises(IllegalMove):
            self.bf.move_combatant(Position(1, 1), Position(3, 1))  # two cells
        with self.assertRaises(IllegalMove):
            self.bf.move_combatant(Position(1, 1), Position(1, 0))  # wall
        with self.assertRaises(IllegalMove):
            self.bf.move_combatant(Position(2, 1), Position(3, 1))  # nobody there
        with self.assertRaises(IllegalMove):
            self.bf.move_combatant(Position(1, 1), Position(2, 2))  # diagonal

    def test_damage_saturates_and_removal(self):
        pos = Position(4, 1)
        self.assertFalse(self.bf.apply_damage(pos, 199))
        self.assertFalse(self.bf.remove_if_dead(pos))
        self.assertTrue(self.bf.apply_damage(pos, 50))
        self.assertEqual(self.bf.combatant_at(pos).hit_points, 0)
        self.assertTrue(self.bf.remove_if_dead(pos))
        self.assertTrue(self.bf.is_open(pos))
        self.assertEqual(self.bf.faction_counts()[Faction.GOBLIN], 0)


class TestRender(unittest.TestCase):

    def test_round_trip(self):
        bf = Battlefield.from_text(CROSSROADS)
        self.assertEqual(bf.render(), CROSSROADS)
        self.assertEqual(str(bf), CROSSROADS)

    def test_annotated(self):
        bf = Battlefield.from_text(CROSSROADS)
        bf.apply_damage(Position(5, 2), 3)
        lines = bf.render(annotate=True).split("\n")
        self.assertEqual(lines[0], "#######")
        self.assertEqual(lines[1], "#.G...#   G(200)")
        self.assertEqual(lines[2], "#...EG#   E(200), G(197)")

    def test_markers_only_on_open_cells(self):
        bf = Battlefield.from_text(_rows("#####", "#E.G#", "#####"))
        text = bf.render(markers={Position(2, 1): "?", Position(1, 1): "?", Position(0, 0): "?"})
        self.assertEqual(text, _rows("#####", "#E?G#", "#####"))

    def test_axes(self):
        bf = Battlefield.from_text(_rows("#####", "#E.G#", "#####"))
        self.assertEqual(bf.render(axes=True), _rows(
            "  01234",
            "0 #####",
            "1 #E.G#",
            "2 #####",
        ))
        lines = bf.render(annotate=True, axes=True).split("\n")
        self.assertEqual(lines[2], "1 #E.G#   E(200), G(200)")

    def test_axes_wrap_at_ten(self):
        bf = Battlefield.from_text(_rows("#" * 12, "#E" + "." * 8 + "G#", "#" * 12))
        self.assertEqual(bf.render(axes=True).split("\n")[0], "  012345678901")


if __name__ == "__main__":
    unittest.main()
