"""
Movement planning on the battlefield.

Every step costs one move, so plain breadth-first search gives exact
distances. A unit heads for the nearest open cell next to an enemy (reading
order breaks ties) and takes the reading-order-first step that stays on a
shortest path there. The step is found with a second search run backwards
from the destination instead of storing a path per cell.

Usage:
    dest = choose_destination(battlefield, origin)
    step = first_step(battlefield, origin, dest)
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Dict, List, Optional

from .enums import Faction

if TYPE_CHECKING:
    from .map import Battlefield, Position


def distance_map(battlefield: Battlefield, source: Position) -> Dict[Position, int]:
    """Steps from ``source`` to every open cell it can reach (source itself at 0)."""
    distances = {source: 0}
    queue = deque([source])
    while queue:
        pos = queue.popleft()
        cost = distances[pos] + 1
        for nxt in battlefield.neighbors(pos):
            if nxt in distances or not battlefield.is_open(nxt):
                continue
            distances[nxt] = cost
            queue.append(nxt)
    return distances


def in_range_cells(battlefield: Battlefield, faction: Faction) -> List[Position]:
    """Open cells from which a member of ``faction`` could attack an enemy, in reading order."""
    cells = set()
    for enemy_pos in battlefield.enemy_positions(faction):
        cells.update(battlefield.open_neighbors(enemy_pos))
    return sorted(cells)


def choose_destination(
    battlefield: Battlefield,
    origin: Position,
    distances: Optional[Dict[Position, int]] = None,
) -> Optional[Position]:
    unit = battlefield.combatant_at(origin)
    if unit is None:
        return None
    if distances is None:
        distances = distance_map(battlefield, origin)
    reachable = [p for p in in_range_cells(battlefield, unit.faction) if p in distances]
    if not reachable:
        return None
    return min(reachable, key=lambda p: (distances[p], p.y, p.x))


def first_step(
    battlefield: Battlefield,
    origin: Position,
    destination: Position,
    distances: Optional[Dict[Position, int]] = None,
) -> Optional[Position]:
    if distances is None:
        distances = distance_map(battlefield, origin)
    if destination not in distances or destination == origin:
        return None
    total = distances[destination]
    backward = distance_map(battlefield, destination)
    candidates = [
        n for n in battlefield.open_neighbors(origin)
        if distances.get(n) == 1 and n in backward and backward[n] + 1 == total
    ]
    if not candidates:
        return None
    return min(candidates)


def next_step(battlefield: Battlefield, origin: Position) -> Optional[Position]:
    distances = distance_map(battlefield, origin)
    destination = choose_destination(battlefield, origin, distances)
    if destination is None:
        return None
    return first_step(battlefield, origin, destination, distances)


def shortest_path(battlefield: Battlefield, origin: Position, destination: Position) -> Optional[List[Position]]:
    """
    Cells walked from ``origin`` (exclusive) to ``destination`` (inclusive),
    taking the reading-order-first step at every fork. ``None`` if unreachable.
    """
    forward = distance_map(battlefield, origin)
    if destination not in forward:
        return None
    backward = distance_map(battlefield, destination)
    path: List[Position] = []
    current = origin
    remaining = forward[destination]
    while remaining > 0:
        remaining -= 1
        current = min(
            n for n in battlefield.open_neighbors(current)
            if backward.get(n) == remaining
        )
        path.append(current)
    return path
