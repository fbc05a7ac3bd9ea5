from dataclasses import dataclass
from typing import List, Optional, Set, Dict
from .participant import Combatant
from .map import Battlefield, Position
from .enums import Faction, AttackOutcome, BattleState, DEFAULT_MAX_ROUNDS, DEFAULT_STALL_LIMIT
from .errors import SimulationStalled
from .outcome import BattleOutcome, evaluate_outcome
from .pathfinding import distance_map, choose_destination, first_step

@dataclass
class AttackResult:
    outcome: AttackOutcome = AttackOutcome.MISSED
    target: Optional[Position] = None
    remaining_hp: int = 0

    @property
    def landed(self) -> bool:
        return self.outcome != AttackOutcome.MISSED

@dataclass
class TurnResult:
    start: Position
    end: Position
    attack: AttackResult
    ended_battle: bool = False

    @property
    def moved(self) -> bool:
        return self.start != self.end

class SkirmishEngine:
    def __init__(self, battlefield: Battlefield, max_rounds: int = DEFAULT_MAX_ROUNDS,
                 stall_limit: int = DEFAULT_STALL_LIMIT, echo: bool = False):
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be at least 1, got {max_rounds}")
        if stall_limit < 1:
            raise ValueError(f"stall_limit must be at least 1, got {stall_limit}")
        self.battlefield = battlefield
        self.round = 0
        self.state = BattleState.RUNNING
        self.winner: Optional[Faction] = None
        self.max_rounds = max_rounds
        self.stall_limit = stall_limit
        self.echo = echo
        self.combat_log: List[str] = []
        self.starting_counts: Dict[Faction, int] = battlefield.faction_counts()
        self.casualties: Dict[Faction, int] = {f: 0 for f in Faction}
        self._quiet_rounds = 0

    def log(self, message: str):
        self.combat_log.append(message)
        if self.echo:
            print(message)

    def is_combat_ended(self) -> bool:
        return self.state == BattleState.WON

    # --- combat resolver ----------------------------------------------------

    def enemies_in_range(self, pos: Position) -> List[Position]:
        attacker = self.battlefield.combatant_at(pos)
        if attacker is None:
            return []
        targets = []
        for n in self.battlefield.neighbors(pos):
            other = self.battlefield.combatant_at(n)
            if other is not None and other.is_alive and attacker.is_enemy(other):
                targets.append(n)
        return sorted(targets, key=lambda p: (self.battlefield.combatant_at(p).hit_points, p.y, p.x))

    def try_attack(self, pos: Position) -> AttackResult:
        targets = self.enemies_in_range(pos)
        if not targets:
            return AttackResult(AttackOutcome.MISSED)
        attacker = self.battlefield.combatant_at(pos)
        target_pos = targets[0]
        defender = self.battlefield.combatant_at(target_pos)
        died = self.battlefield.apply_damage(target_pos, attacker.attack_power)
        if died:
            self.battlefield.remove_if_dead(target_pos)
            self.casualties[defender.faction] += 1
            self.log(f"{attacker.name} at {pos} kills {defender.name} at {target_pos}.")
            return AttackResult(AttackOutcome.KILLED, target_pos, 0)
        self.log(f"{attacker.name} at {pos} hits {defender.name} at {target_pos} for "
                 f"{attacker.attack_power} ({defender.hit_points} HP left).")
        return AttackResult(AttackOutcome.HIT, target_pos, defender.hit_points)

    # --- round scheduler ----------------------------------------------------

    def take_turn(self, pos: Position) -> TurnResult:
        unit = self.battlefield.combatant_at(pos)
        if unit is None:
            raise ValueError(f"no combatant at {pos} to take a turn")
        if not self.battlefield.enemy_positions(unit.faction):
            self._declare_winner(unit.faction)
            return TurnResult(pos, pos, AttackResult(), ended_battle=True)

        attack = self.try_attack(pos)
        if attack.landed:
            return TurnResult(pos, pos, attack)

        distances = distance_map(self.battlefield, pos)
        destination = choose_destination(self.battlefield, pos, distances)
        if destination is None:
            return TurnResult(pos, pos, attack)
        step = first_step(self.battlefield, pos, destination, distances)
        if step is None:
            return TurnResult(pos, pos, attack)
        self.battlefield.move_combatant(pos, step)
        self.log(f"{unit.name} moves {pos} -> {step} (heading for {destination}).")
        return TurnResult(pos, step, self.try_attack(step))

    def _declare_winner(self, faction: Faction) -> None:
        self.state = BattleState.WON
        self.winner = faction
        self.log(f"No enemies left for the {faction.plural}: combat ends after {self.round} full rounds.")

    def play_round(self) -> bool:
        """Run one round. Returns False if the battle ended before every unit acted."""
        if self.is_combat_ended():
            return False
        if self.round >= self.max_rounds:
            raise SimulationStalled(f"no winner after {self.round} rounds", rounds=self.round)
        turn_order = self.battlefield.combatant_positions()
        resolved: Set[Position] = set()
        changed = False
        for pos in turn_order:
            if pos in resolved:
                continue
            turn = self.take_turn(pos)
            if turn.ended_battle:
                return False
            if turn.moved:
                resolved.add(turn.end)
                changed = True
            if turn.attack.landed:
                changed = True
            if turn.attack.outcome == AttackOutcome.KILLED:
                resolved.add(turn.attack.target)
        self.round += 1
        self.log(f"=== End of round {self.round} ===")
        self._quiet_rounds = 0 if changed else self._quiet_rounds + 1
        if self._quiet_rounds >= self.stall_limit:
            raise SimulationStalled(
                f"nothing moved or attacked for {self._quiet_rounds} rounds; factions cannot reach each other",
                rounds=self.round,
            )
        return True

    def run(self) -> BattleOutcome:
        while not self.is_combat_ended():
            self.play_round()
        return self.outcome()

    def outcome(self) -> Optional[BattleOutcome]:
        if not self.is_combat_ended():
            return None
        return evaluate_outcome(self.battlefield, self.round, self.winner, self.starting_counts)

    def get_combat_summary(self) -> str:
        lines = [f"\n=== Combat Status (after {self.round} full rounds) ==="]
        for pos in self.battlefield.combatant_positions():
            c: Combatant = self.battlefield.combatant_at(pos)
            lines.append(f"{c.name} @ {pos.x},{pos.y}: {c.hit_points} HP | power {c.attack_power}")
        for faction in Faction:
            lines.append(f"{faction.plural.title()} lost: {self.casualties[faction]}/{self.starting_counts[faction]}")
        if self.winner is not None:
            lines.append(f"Winner: {self.winner.plural.title()}")
        return "\n".join(lines)
