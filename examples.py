#!/usr/bin/env python3
"""
Example usage of the Skirmish grid-combat simulator

This script walks through the core features: parsing a map, planning a
move, playing rounds by hand, running a full battle and tuning the elves'
attack power until they win without a single loss.
"""

from skirmish import (
    Battlefield, SkirmishEngine, Faction, Position, PowerTuner, TuningConfig,
    SAMPLE_BATTLES, next_step, shortest_path, choose_destination,
)


def example_1_parse_and_render():
    """Example 1: Build a battlefield from text and show it."""
    print("=" * 70)
    print("EXAMPLE 1: Parsing a Map")
    print("=" * 70)

    battlefield = Battlefield.from_text(SAMPLE_BATTLES["Crossroads"].map_text)
    print(battlefield.render(annotate=True))
    print(repr(battlefield))
    print()


def example_2_movement_plan():
    """Example 2: Where does the first elf want to go?"""
    print("=" * 70)
    print("EXAMPLE 2: Movement Planning")
    print("=" * 70)

    battlefield = Battlefield.from_text("\n".join([
        "#######",
        "#E..G.#",
        "#...#.#",
        "#.G.#G#",
        "#######",
    ]))
    origin = Position(1, 1)
    destination = choose_destination(battlefield, origin)
    path = shortest_path(battlefield, origin, destination)
    print(f"Elf at {origin} heads for {destination}, first step {next_step(battlefield, origin)}")
    print(battlefield.render(markers={p: "+" for p in path}))
    print()


def example_3_round_by_round():
    """Example 3: Step through the first rounds of a battle."""
    print("=" * 70)
    print("EXAMPLE 3: Round by Round")
    print("=" * 70)

    engine = SkirmishEngine(Battlefield.from_text(SAMPLE_BATTLES["Crossroads"].map_text))
    for _ in range(3):
        engine.play_round()
        print(f"After round {engine.round}:")
        print(engine.battlefield.render(annotate=True))
        print()


def example_4_full_battles():
    """Example 4: Fight every sample battle to the end."""
    print("=" * 70)
    print("EXAMPLE 4: Full Battles")
    print("=" * 70)

    for name, sample in SAMPLE_BATTLES.items():
        engine = SkirmishEngine(Battlefield.from_text(sample.map_text))
        outcome = engine.run()
        print(f"--- {name} ---")
        print(outcome)
        print()


def example_5_power_tuning():
    """Example 5: Smallest elf attack power for a flawless win."""
    print("=" * 70)
    print("EXAMPLE 5: Power Tuning")
    print("=" * 70)

    config = TuningConfig(map_text=SAMPLE_BATTLES["Crossroads"].map_text, faction=Faction.ELF)
    result = PowerTuner.run(config)
    print(result.summary())
    print()


def main():
    """Run all examples."""
    print("\n")
    print("*" * 70)
    print("SKIRMISH - EXAMPLES")
    print("*" * 70)
    print("\n")

    example_1_parse_and_render()
    example_2_movement_plan()
    example_3_round_by_round()
    example_4_full_battles()
    example_5_power_tuning()

    print("=" * 70)
    print("All examples completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
