"""Structured match log with kinds, verbosity control and narration templates."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, TextIO

from numpy.random import Generator


@dataclass
class LogEntry:
    """A single log entry."""

    day: int
    text: str
    kind: str
    involved_ids: list[str] = field(default_factory=list)
    data: dict = field(default_factory=dict)


class MatchLogger:
    """Append-only match log; echoes filtered lines to stdout and/or a file."""

    # Kind constants
    SYSTEM = "system"
    DAMAGE = "damage"
    DEFENSE = "defense"
    DEATH = "death"
    EAT = "eat"
    REST = "rest"
    HEAL = "heal"
    ITEM = "item"
    WARNING = "warning"
    HAZARD = "hazard"
    CHAT = "chat"

    _VERBOSITY_MAP = {
        SYSTEM: 0,
        DEATH: 0,
        WARNING: 0,
        HAZARD: 0,
        DAMAGE: 1,
        DEFENSE: 1,
        HEAL: 1,
        ITEM: 1,
        EAT: 2,
        REST: 2,
        CHAT: 3,
    }

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = False,
    ) -> None:
        """
        verbosity levels:
            0 = system, deaths, hazards and warnings
            1 = + combat, heals and item pickups
            2 = + eating and resting
            3 = everything (chat included)
        """
        self.verbosity = verbosity
        self.entries: list[LogEntry] = []
        self._buffer: list[LogEntry] = []
        self._file: Optional[TextIO] = None
        self._stdout = stdout

        if log_file:
            os.makedirs(os.path.dirname(log_file) if os.path.dirname(log_file) else ".", exist_ok=True)
            self._file = open(log_file, "w", encoding="utf-8")

    def log(
        self,
        kind: str,
        text: str,
        involved_ids: Optional[list[str]] = None,
        day: int = 0,
        **data,
    ) -> LogEntry:
        entry = LogEntry(
            day=day,
            text=text,
            kind=kind,
            involved_ids=list(involved_ids or []),
            data=data,
        )
        self.entries.append(entry)
        self._buffer.append(entry)
        return entry

    def flush_day(self, day: int) -> None:
        """Echo buffered lines that pass the verbosity filter."""
        for entry in self._buffer:
            if self._VERBOSITY_MAP.get(entry.kind, 1) <= self.verbosity:
                line = f"[Day {entry.day:>4}] [{entry.kind:<10}] {entry.text}"
                if self._stdout:
                    print(line)
                if self._file:
                    self._file.write(line + "\n")
        self._buffer.clear()

        if self._file:
            self._file.flush()

    def for_day(self, day: int) -> list[LogEntry]:
        return [e for e in self.entries if e.day == day]

    def get_narrative(self, day: int) -> str:
        """Human-readable summary of a specific day."""
        day_entries = self.for_day(day)
        if not day_entries:
            return f"Day {day}: Nothing notable happened."

        lines = [f"=== Day {day} ==="]
        for entry in day_entries:
            lines.append(f"  [{entry.kind}] {entry.text}")
        return "\n".join(lines)

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None


# =============================================================================
# Narration
# =============================================================================

_TEMPLATES: dict[str, list[str]] = {
    "ATTACK_HIT": [
        "{source} strikes {target} (-{val} HP).",
        "{source} lands a solid hit on {target} (-{val} HP).",
        "{target} takes a hit from {source} (-{val} HP).",
    ],
    "SHOOT_HIT": [
        "{target} is hit by a precise shot (-{val} HP).",
        "{target} takes a clean shot (-{val} HP).",
        "{source} fires a round into {target} (-{val} HP).",
    ],
    "ATTACK_BLOCKED": [
        "{target} blocks the strike (-{val} HP).",
        "{target} deflects the attack (-{val} HP).",
    ],
    "ATTACK_DODGED": [
        "{target} dodges the attack.",
        "{target} avoids the blow.",
        "{target} evades the strike.",
    ],
    "CORPSE": ["{source} attacks a corpse."],
    "EAT": ["{source} eats a ration.", "{source} consumes stored food."],
    "REST": ["{source} rests briefly.", "{source} takes a short rest."],
    "HEAL": ["{source} recovers (+{val} HP).", "{source} treats the wounds of {target} (+{val} HP)."],
    "RUN_LOOT": ["{source} found {item}.", "{source} scavenged {item}."],
    "RUN_EMPTY": ["{source} slips away empty-handed.", "{source} escapes into the brush."],
    "RUN_FAIL": ["{source} stumbled (-{val} HP).", "{source} tripped while running (-{val} HP)."],
    "CORNERED": ["{source} is cornered and forced to fight."],
    "DEATH": ["{source} has fallen.", "{source} died.", "{source} collapsed."],
    "STUN": ["{source} collapses from exhaustion."],
    "STUN_RECOVERY": ["{source} staggers back to their feet."],
    "ZONE": ["{source} was caught outside the shrinking zone."],
}


def describe(key: str, rng: Generator, **params) -> str:
    """Pick a template variant for ``key`` and fill it."""
    variants = _TEMPLATES.get(key)
    if not variants:
        return ""
    template = variants[int(rng.integers(0, len(variants)))]
    return template.format(**params)
