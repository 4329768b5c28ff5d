"""Match time: day counter, phase durations and late-match balance curve."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from arena_sim.core.config import (
    DAY_DURATION_LATE,
    DAY_DURATION_TABLE,
    LOCKDOWN_DAY,
    PHASE_TABLE,
)


class Phase(str, Enum):
    LOBBY = "LOBBY"
    DAY = "DAY"
    NIGHT = "NIGHT"
    GAME_OVER = "GAME_OVER"


@dataclass(frozen=True)
class PhaseBalance:
    """Day-dependent tuning: how easy evasion is and how hard the zone bites."""

    run_success_chance: float
    zone_damage: int


def day_duration(day: int) -> int:
    """Seconds of decision time for a day; shrinks as the match matures."""
    for last_day, seconds in DAY_DURATION_TABLE:
        if day <= last_day:
            return seconds
    return DAY_DURATION_LATE


def phase_balance(day: int) -> PhaseBalance:
    chance, zone = PHASE_TABLE[0][1], PHASE_TABLE[0][2]
    for first_day, row_chance, row_zone in PHASE_TABLE:
        if day >= first_day:
            chance, zone = row_chance, row_zone
    return PhaseBalance(run_success_chance=chance, zone_damage=zone)


class MatchClock:
    """Tracks the current day of a match."""

    def __init__(self, day: int = 1) -> None:
        self.day: int = day

    def advance(self) -> None:
        """Advance the clock by one day."""
        self.day += 1

    @property
    def duration(self) -> int:
        return day_duration(self.day)

    def is_lockdown(self) -> bool:
        return self.day >= LOCKDOWN_DAY
