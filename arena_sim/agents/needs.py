"""Vitals arithmetic: every hp/hunger/fatigue write goes through here.

Keeps the invariants hp in [0, MAX_HP], resources in [0, RESOURCE_MAX],
hp == 0 implies DEAD, and DEAD is absorbing.
"""

from __future__ import annotations

from typing import Optional

from arena_sim.agents.entity import Entity, Status
from arena_sim.core.config import MAX_HP, REGEN_FATIGUE, REGEN_HUNGER, RESOURCE_MAX


def clamp(value: float, low: int, high: int) -> int:
    return int(max(low, min(high, value)))


def pay_costs(entity: Entity, hunger_cost: int, fatigue_cost: int) -> None:
    """Deduct an action's cost, waived entirely under the cost-waiver buff."""
    if entity.buffs.ignore_fatigue:
        return
    entity.hunger = clamp(entity.hunger - hunger_cost, 0, RESOURCE_MAX)
    entity.fatigue = clamp(entity.fatigue - fatigue_cost, 0, RESOURCE_MAX)


def restore(entity: Entity, hunger: int = 0, fatigue: int = 0, hp: int = 0) -> None:
    if entity.is_dead:
        return
    entity.hunger = clamp(entity.hunger + hunger, 0, RESOURCE_MAX)
    entity.fatigue = clamp(entity.fatigue + fatigue, 0, RESOURCE_MAX)
    entity.hp = clamp(entity.hp + hp, 0, MAX_HP)


def apply_damage(entity: Entity, amount: int) -> bool:
    """Subtract hp. Returns True when this hit killed the entity."""
    if entity.is_dead or amount <= 0:
        return False
    entity.hp = clamp(entity.hp - amount, 0, MAX_HP)
    if entity.hp == 0:
        kill(entity)
        return True
    return False


def kill(entity: Entity) -> None:
    entity.hp = 0
    entity.status = Status.DEAD


def is_depleted(hunger: int, fatigue: int) -> bool:
    return hunger <= 0 or fatigue <= 0


def refresh_stun(
    entity: Entity,
    projected_hunger: Optional[int] = None,
    projected_fatigue: Optional[int] = None,
) -> Optional[Status]:
    """Re-evaluate STUNNED from resource levels.

    ``projected_*`` let the caller account for a restoration that has been
    decided but not yet applied. Returns the new status when it changed.
    """
    if entity.is_dead:
        return None
    hunger = entity.hunger if projected_hunger is None else projected_hunger
    fatigue = entity.fatigue if projected_fatigue is None else projected_fatigue
    if entity.status == Status.ALIVE and is_depleted(hunger, fatigue):
        entity.status = Status.STUNNED
        return Status.STUNNED
    if entity.status == Status.STUNNED and not is_depleted(hunger, fatigue):
        entity.status = Status.ALIVE
        return Status.ALIVE
    return None


def nightly_regeneration(entity: Entity) -> None:
    restore(entity, hunger=REGEN_HUNGER, fatigue=REGEN_FATIGUE)
