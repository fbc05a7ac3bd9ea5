from dataclasses import dataclass
from typing import Dict, Optional

from .enums import Faction


@dataclass(frozen=True)
class SampleBattle:
    name: str
    map_text: str
    winner: Faction
    rounds: int
    hit_points: int
    score: int
    # minimal flawless elf power and the score it yields, where known
    elf_power: Optional[int] = None
    tuned_score: Optional[int] = None


SAMPLE_BATTLES: Dict[str, SampleBattle] = {
    b.name: b for b in [
        SampleBattle(
            name="Crossroads",
            map_text="\n".join([
                "#######",
                "#.G...#",
                "#...EG#",
                "#.#.#G#",
                "#..G#E#",
                "#.....#",
                "#######",
            ]),
            winner=Faction.GOBLIN, rounds=47, hit_points=590, score=27730,
            elf_power=15, tuned_score=4988,
        ),
        SampleBattle(
            name="Pillbox",
            map_text="\n".join([
                "#######",
                "#G..#E#",
                "#E#E.E#",
                "#G.##.#",
                "#...#E#",
                "#...E.#",
                "#######",
            ]),
            winner=Faction.ELF, rounds=37, hit_points=982, score=36334,
            # elves already win here; no published tuning result
        ),
        SampleBattle(
            name="Split Ranks",
            map_text="\n".join([
                "#######",
                "#E..EG#",
                "#.#G.E#",
                "#E.##E#",
                "#G..#.#",
                "#..E#.#",
                "#######",
            ]),
            winner=Faction.ELF, rounds=46, hit_points=859, score=39514,
            elf_power=4, tuned_score=31284,
        ),
        SampleBattle(
            name="Cellar",
            map_text="\n".join([
                "#######",
                "#E.G#.#",
                "#.#G..#",
                "#G.#.G#",
                "#G..#.#",
                "#...E.#",
                "#######",
            ]),
            winner=Faction.GOBLIN, rounds=35, hit_points=793, score=27755,
            elf_power=15, tuned_score=3478,
        ),
        SampleBattle(
            name="Corridor",
            map_text="\n".join([
                "#######",
                "#.E...#",
                "#.#..G#",
                "#.###.#",
                "#E#G#G#",
                "#...#G#",
                "#######",
            ]),
            winner=Faction.GOBLIN, rounds=54, hit_points=536, score=28944,
            elf_power=12, tuned_score=6474,
        ),
        SampleBattle(
            name="Open Hall",
            map_text="\n".join([
                "#########",
                "#G......#",
                "#.E.#...#",
                "#..##..G#",
                "#...##..#",
                "#...#...#",
                "#.G...G.#",
                "#.....G.#",
                "#########",
            ]),
            winner=Faction.GOBLIN, rounds=20, hit_points=937, score=18740,
            elf_power=34, tuned_score=1140,
        ),
    ]
}

DEFAULT_BATTLE = "Crossroads"
