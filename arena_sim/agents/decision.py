"""Heuristic action choice for autonomous contestants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from numpy.random import Generator

from arena_sim.agents.entity import Entity, Status
from arena_sim.combat.actions import ActionKind, PendingAction

LOW_HUNGER: int = 40
LOW_FATIGUE: int = 40
LOW_HP: int = 50


@dataclass(frozen=True)
class HazardFlags:
    """What tonight holds, as far as a contestant can know."""

    zone_shrink: bool = False
    monster_hunt: bool = False
    eruption: bool = False
    toxic_gas: bool = False


class DecisionEngine:
    """First-match-wins priority rules. Reads state, never writes it."""

    def __init__(self, rng: Generator) -> None:
        self._rng = rng

    def decide_all(
        self,
        entities: list[Entity],
        flags: HazardFlags,
        lockdown: bool = False,
        include: Optional[Iterable[str]] = None,
    ) -> dict[str, PendingAction]:
        """Choices for every non-dead entity that decides automatically.

        ``include`` names extra entities to decide for regardless of their
        autonomy flag (a human on autopilot).
        """
        extra = set(include or ())
        choices: dict[str, PendingAction] = {}
        for entity in entities:
            if entity.is_dead:
                continue
            if not (entity.decides_automatically or entity.id in extra):
                continue
            choices[entity.id] = self.decide(
                entity, entities, flags, lockdown,
                aggressive=entity.is_autonomous or entity.id in extra,
            )
        return choices

    def decide(
        self,
        entity: Entity,
        entities: list[Entity],
        flags: HazardFlags,
        lockdown: bool = False,
        aggressive: Optional[bool] = None,
    ) -> PendingAction:
        if aggressive is None:
            aggressive = entity.is_autonomous
        # 1. Stunned: recovery only
        if entity.status == Status.STUNNED:
            return PendingAction.simple(self._recovery_choice(entity))

        # 2-5. Hazard days override everything else
        if flags.zone_shrink:
            return PendingAction.simple(ActionKind.RUN)
        if flags.monster_hunt:
            return PendingAction.simple(ActionKind.DEFEND)
        if flags.eruption:
            return PendingAction.simple(ActionKind.RUN)
        if flags.toxic_gas:
            return PendingAction.simple(ActionKind.DEFEND)

        # 6. Ordinary day
        targets = [e for e in entities if e.id != entity.id and e.status == Status.ALIVE]
        if not lockdown and entity.hunger < LOW_HUNGER and entity.cooldowns.eat == 0:
            return PendingAction.simple(ActionKind.EAT)
        if not lockdown and entity.fatigue < LOW_FATIGUE and entity.cooldowns.rest == 0:
            return PendingAction.simple(ActionKind.REST)
        if entity.has_weapon and targets:
            return PendingAction.shoot(self._pick(targets).id)
        if entity.hp < LOW_HP:
            return PendingAction.simple(ActionKind.DEFEND)
        if targets and aggressive:
            return PendingAction.attack(self._pick(targets).id)
        # disconnected humans turtle instead of picking fights
        return PendingAction.simple(ActionKind.DEFEND)

    def _recovery_choice(self, entity: Entity) -> ActionKind:
        if entity.hunger <= 0:
            return ActionKind.EAT
        if entity.fatigue <= 0:
            return ActionKind.REST
        return ActionKind.EAT if self._rng.random() < 0.5 else ActionKind.REST

    def _pick(self, candidates: list[Entity]) -> Entity:
        return candidates[int(self._rng.integers(0, len(candidates)))]
