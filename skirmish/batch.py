"""
Attack-power tuning for the skirmish simulator.

Re-runs the whole battle from the original map with a raised attack power
for one faction until that faction wins without losing anybody.

Usage:
    from skirmish.batch import PowerTuner, TuningConfig

    config = TuningConfig(map_text=text, strategy="linear")
    result = PowerTuner.run(config, progress_callback=lambda i, n: ...)
    print(result.summary())

Both strategies assume that a flawless win, once reached, stays reached for
every higher power. That holds for most maps but is not guaranteed; use
``check_monotonic`` to verify it for a given map before trusting "binary".
"""

from __future__ import annotations

import concurrent.futures
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .engine import SkirmishEngine
from .enums import Faction, DEFAULT_ATTACK_POWER, DEFAULT_HIT_POINTS, DEFAULT_MAX_ROUNDS, DEFAULT_STALL_LIMIT
from .errors import TuningExhausted
from .map import Battlefield
from .outcome import BattleOutcome

STRATEGIES = ("linear", "binary")


def run_battle(
    map_text: str,
    attack_power: Optional[Dict[Faction, int]] = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    stall_limit: int = DEFAULT_STALL_LIMIT,
) -> BattleOutcome:
    """Build a fresh battlefield from ``map_text`` and fight to the end."""
    battlefield = Battlefield.from_text(map_text, attack_power=attack_power)
    engine = SkirmishEngine(battlefield, max_rounds=max_rounds, stall_limit=stall_limit)
    return engine.run()


@dataclass
class TuningConfig:
    """Configuration for a tuning search.

    Parameters
    ----------
    map_text : str
        The original map; every trial parses it again.
    faction : Faction
        Faction whose attack power is raised. The other keeps the default.
    start_power, max_power : int
        Inclusive search range.
    strategy : str
        "linear" (ascending scan) or "binary".
    workers : int
        Processes used by the linear scan. 1 runs trials in-process.
    max_rounds, stall_limit : int
        Safety valves handed to every engine.
    """

    map_text: str = ""
    faction: Faction = Faction.ELF
    start_power: int = DEFAULT_ATTACK_POWER + 1
    max_power: int = DEFAULT_HIT_POINTS
    strategy: str = "linear"
    workers: int = 1
    max_rounds: int = DEFAULT_MAX_ROUNDS
    stall_limit: int = DEFAULT_STALL_LIMIT

    def validate(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy {self.strategy!r}, expected one of {STRATEGIES}")
        if self.start_power <= 0 or self.max_power < self.start_power:
            raise ValueError(f"bad power range {self.start_power}..{self.max_power}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.max_rounds < 1 or self.stall_limit < 1:
            raise ValueError(f"max_rounds and stall_limit must be at least 1, "
                             f"got {self.max_rounds} and {self.stall_limit}")
        # fail fast on a bad map before any trial is spawned
        Battlefield.from_text(self.map_text)


@dataclass
class TrialRecord:
    """Result of one battle at one attack power."""
    attack_power: int = 0
    winner: Optional[Faction] = None
    rounds: int = 0
    score: int = 0
    losses: int = 0
    flawless: bool = False
    outcome: Optional[BattleOutcome] = None


@dataclass
class TuningResult:
    """Minimal flawless power plus every trial that led to it."""
    faction: Faction = Faction.ELF
    records: List[TrialRecord] = field(default_factory=list)
    attack_power: int = 0
    outcome: Optional[BattleOutcome] = None
    elapsed_seconds: float = 0.0

    @property
    def num_trials(self) -> int:
        return len(self.records)

    @property
    def score(self) -> int:
        return self.outcome.score if self.outcome else 0

    def summary(self) -> str:
        lines = [
            f"=== Tuning Result: {self.faction.name.lower()} attack power ===",
            f"Trials: {self.num_trials} in {self.elapsed_seconds:.2f}s",
        ]
        for r in sorted(self.records, key=lambda r: r.attack_power):
            side = r.winner.name.lower() if r.winner else "nobody"
            mark = " <- flawless" if r.flawless else ""
            lines.append(f"  power {r.attack_power}: {side} win after {r.rounds} rounds, "
                         f"{r.losses} lost, score {r.score}{mark}")
        lines.append(f"Minimal power: {self.attack_power} (score {self.score})")
        return "\n".join(lines)


def _run_trial(map_text: str, faction: Faction, power: int, max_rounds: int, stall_limit: int) -> TrialRecord:
    outcome = run_battle(map_text, {faction: power}, max_rounds=max_rounds, stall_limit=stall_limit)
    return TrialRecord(
        attack_power=power,
        winner=outcome.winner,
        rounds=outcome.rounds,
        score=outcome.score,
        losses=outcome.losses(faction),
        flawless=outcome.winner == faction and outcome.losses(faction) == 0,
        outcome=outcome,
    )


class PowerTuner:
    """Searches for the smallest attack power giving a flawless win."""

    @staticmethod
    def run(
        config: TuningConfig,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> TuningResult:
        config.validate()
        result = TuningResult(faction=config.faction)
        t0 = time.time()

        if config.strategy == "binary":
            best = PowerTuner._binary(config, result, progress_callback)
        elif config.workers > 1:
            best = PowerTuner._linear_parallel(config, result, progress_callback)
        else:
            best = PowerTuner._linear(config, result, progress_callback)

        result.elapsed_seconds = time.time() - t0
        if best is None:
            raise TuningExhausted(
                f"{config.faction.plural} never win without losses for powers "
                f"{config.start_power}..{config.max_power}"
            )
        result.attack_power = best.attack_power
        result.outcome = best.outcome
        return result

    @staticmethod
    def _trial(config: TuningConfig, power: int) -> TrialRecord:
        return _run_trial(config.map_text, config.faction, power, config.max_rounds, config.stall_limit)

    @staticmethod
    def _linear(config, result, progress_callback) -> Optional[TrialRecord]:
        total = config.max_power - config.start_power + 1
        for i, power in enumerate(range(config.start_power, config.max_power + 1)):
            record = PowerTuner._trial(config, power)
            result.records.append(record)
            if progress_callback:
                progress_callback(i + 1, total)
            if record.flawless:
                return record
        return None

    @staticmethod
    def _linear_parallel(config, result, progress_callback) -> Optional[TrialRecord]:
        total = config.max_power - config.start_power + 1
        done = 0
        with concurrent.futures.ProcessPoolExecutor(max_workers=config.workers) as executor:
            for chunk_start in range(config.start_power, config.max_power + 1, config.workers):
                powers = range(chunk_start, min(chunk_start + config.workers, config.max_power + 1))
                futures: Dict[concurrent.futures.Future, int] = {
                    executor.submit(
                        _run_trial, config.map_text, config.faction, power,
                        config.max_rounds, config.stall_limit,
                    ): power
                    for power in powers
                }
                chunk: List[TrialRecord] = []
                for future in concurrent.futures.as_completed(futures):
                    chunk.append(future.result())
                    done += 1
                    if progress_callback:
                        progress_callback(done, total)
                chunk.sort(key=lambda r: r.attack_power)
                result.records.extend(chunk)
                for record in chunk:
                    if record.flawless:
                        return record
        return None

    @staticmethod
    def _binary(config, result, progress_callback) -> Optional[TrialRecord]:
        lo, hi = config.start_power, config.max_power
        # upper bound of trials: ceil(log2(range)) + 1
        total = max(1, (hi - lo + 1).bit_length() + 1)
        best: Optional[TrialRecord] = None
        while lo <= hi:
            mid = (lo + hi) // 2
            record = PowerTuner._trial(config, mid)
            result.records.append(record)
            if progress_callback:
                progress_callback(min(len(result.records), total), total)
            if record.flawless:
                best = record
                hi = mid - 1
            else:
                lo = mid + 1
        return best


def check_monotonic(map_text: str, faction: Faction, powers: List[int]) -> List[int]:
    """
    Powers (after the first) at which ``faction`` keeps fewer combatants alive
    than at the power before. An empty list means the sampled powers behave
    monotonically on this map.
    """
    violations: List[int] = []
    previous: Optional[int] = None
    for power in sorted(powers):
        outcome = run_battle(map_text, {faction: power})
        alive = outcome.survivors.get(faction, 0)
        if previous is not None and alive < previous:
            violations.append(power)
        previous = alive
    return violations


def trial_table(result: TuningResult) -> List[Dict[str, Any]]:
    """Rows suitable for a table widget, ordered by power."""
    return [
        {
            "attack_power": r.attack_power,
            "winner": r.winner.name.lower() if r.winner else None,
            "rounds": r.rounds,
            "losses": r.losses,
            "score": r.score,
            "flawless": r.flawless,
        }
        for r in sorted(result.records, key=lambda r: r.attack_power)
    ]
