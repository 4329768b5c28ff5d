"""Participant model: vitals, status, cooldowns, buffs and roster generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from numpy.random import Generator

from arena_sim.core.config import (
    MAX_PLAYERS,
    NAMES_LIST,
    START_FATIGUE,
    START_HP,
    START_HUNGER,
)


class Status(str, Enum):
    ALIVE = "ALIVE"
    STUNNED = "STUNNED"
    DEAD = "DEAD"


@dataclass
class Cooldowns:
    """Days remaining before an action can be chosen again."""

    eat: int = 0
    rest: int = 0
    run: int = 0
    shoot: int = 0
    eat_count: int = 0
    rest_count: int = 0

    def get(self, action_name: str) -> int:
        return getattr(self, action_name.lower(), 0)

    def decay(self, ran: bool, run_reset: int) -> None:
        """One night passes. RUN locks for ``run_reset`` days after use."""
        self.eat = max(0, self.eat - 1)
        self.rest = max(0, self.rest - 1)
        self.shoot = max(0, self.shoot - 1)
        self.run = run_reset if ran else max(0, self.run - 1)


@dataclass
class Buffs:
    """Per-cycle modifiers, cleared at day-advance."""

    damage_bonus: int = 0
    ignore_fatigue: bool = False

    def reset(self) -> None:
        self.damage_bonus = 0
        self.ignore_fatigue = False


class Entity:
    """A single contestant, human-controlled or autonomous."""

    def __init__(self, entity_id: str, name: str, is_autonomous: bool) -> None:
        self.id = entity_id
        self.name = name
        self.is_autonomous = is_autonomous
        self.connected: bool = True

        # Vitals
        self.hp: int = START_HP
        self.hunger: int = START_HUNGER
        self.fatigue: int = START_FATIGUE
        self.status: Status = Status.ALIVE

        # Bookkeeping
        self.cooldowns = Cooldowns()
        self.buffs = Buffs()
        self.last_action: Optional[str] = None
        self.kills: int = 0
        self.has_weapon: bool = False
        self.inventory: list[str] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_alive(self) -> bool:
        """True for ALIVE and STUNNED; only DEAD is out of the match."""
        return self.status != Status.DEAD

    @property
    def is_stunned(self) -> bool:
        return self.status == Status.STUNNED

    @property
    def is_dead(self) -> bool:
        return self.status == Status.DEAD

    @property
    def decides_automatically(self) -> bool:
        return self.is_autonomous or not self.connected

    def __repr__(self) -> str:
        return (
            f"Entity({self.id!r}, hp={self.hp}, hunger={self.hunger}, "
            f"fatigue={self.fatigue}, status={self.status.value})"
        )


def generate_roster(
    roster: list[str],
    rng: Generator,
    capacity: int = MAX_PLAYERS,
) -> list[Entity]:
    """Human-supplied names first, then autonomous fill-in up to ``capacity``.

    The first name in ``roster`` is the local human; the remaining supplied
    names are pre-joined humans. Display names double as identities.
    """
    if not roster:
        raise ValueError("roster must contain at least the local player")
    if len(roster) > capacity:
        raise ValueError(f"roster of {len(roster)} exceeds capacity {capacity}")
    if len(set(roster)) != len(roster):
        raise ValueError("roster names must be unique")

    entities = [Entity(name, name, is_autonomous=False) for name in roster]

    available = [n for n in NAMES_LIST if n not in roster]
    order = rng.permutation(len(available))
    pool = [available[int(i)] for i in order]
    for i in range(capacity - len(roster)):
        name = pool[i] if i < len(pool) else f"Bot-{i + 1}"
        entities.append(Entity(name, name, is_autonomous=True))
    return entities
