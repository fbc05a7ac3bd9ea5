# Skirmish grid-combat package

from .engine import SkirmishEngine, AttackResult, TurnResult
from .participant import Combatant
from .map import Battlefield, Position, Tile
from .outcome import BattleOutcome, evaluate_outcome
from .pathfinding import distance_map, in_range_cells, choose_destination, first_step, next_step, shortest_path
from .batch import PowerTuner, TuningConfig, TuningResult, TrialRecord, run_battle, check_monotonic
from .scenarios import SampleBattle, SAMPLE_BATTLES, DEFAULT_BATTLE
from .enums import (
    Faction, TerrainType, AttackOutcome, BattleState,
    DEFAULT_HIT_POINTS, DEFAULT_ATTACK_POWER,
)
from .errors import (
    SkirmishError, MalformedMap, NoCombatants, OutOfBounds, IllegalMove,
    SimulationStalled, TuningExhausted,
)

__version__ = "1.0.0"
__all__ = [
    "SkirmishEngine", "AttackResult", "TurnResult",
    "Combatant",
    "Battlefield", "Position", "Tile",
    "BattleOutcome", "evaluate_outcome",
    "distance_map", "in_range_cells", "choose_destination", "first_step", "next_step", "shortest_path",
    "PowerTuner", "TuningConfig", "TuningResult", "TrialRecord", "run_battle", "check_monotonic",
    "SampleBattle", "SAMPLE_BATTLES", "DEFAULT_BATTLE",
    "Faction", "TerrainType", "AttackOutcome", "BattleState",
    "DEFAULT_HIT_POINTS", "DEFAULT_ATTACK_POWER",
    "SkirmishError", "MalformedMap", "NoCombatants", "OutOfBounds", "IllegalMove",
    "SimulationStalled", "TuningExhausted",
]
