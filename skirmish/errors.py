"""
Exception types raised by the skirmish simulator.

Construction-time problems (bad map text, missing factions) are fatal and
reported to the caller before any round is played. Lookups outside the grid
and illegal moves indicate a bug in the caller, not bad input.
"""
from typing import Optional


class SkirmishError(Exception):
    """Base exception for simulator errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class MalformedMap(SkirmishError, ValueError):
    """Map text cannot be turned into a battlefield."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        where = ""
        if line is not None:
            where = f" (line {line + 1}" + (f", column {column + 1})" if column is not None else ")")
        super().__init__(message + where, user_message=f"Malformed map: {message}{where}")
        self.line = line
        self.column = column


class NoCombatants(SkirmishError, ValueError):
    """A faction has nobody on the map."""
    pass


class OutOfBounds(SkirmishError, IndexError):
    """Lookup outside the battlefield's declared width/height."""
    pass


class IllegalMove(SkirmishError, ValueError):
    """Move that breaks the one-step-into-open-cell rule."""
    pass


class SimulationStalled(SkirmishError, RuntimeError):
    """Battle cannot reach a winner (e.g. factions walled off from each other)."""
    def __init__(self, message: str, rounds: int = 0):
        super().__init__(message)
        self.rounds = rounds


class TuningExhausted(SkirmishError):
    """No attack power in the searched range produced a flawless win."""
    pass
