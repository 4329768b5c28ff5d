"""Action kinds, their costs, the per-day pending choice and its gatekeeper."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from arena_sim.agents.entity import Entity, Status
from arena_sim.core.clock import Phase
from arena_sim.core.config import (
    COST_ATTACK_FATIGUE,
    COST_ATTACK_HUNGER,
    COST_DEFEND_FATIGUE,
    COST_DEFEND_HUNGER,
    COST_HEAL_FATIGUE,
    COST_RUN_FATIGUE,
    COST_RUN_HUNGER,
    PISTOL_COST_FATIGUE,
    PISTOL_COST_HUNGER,
)


class ActionKind(str, Enum):
    ATTACK = "ATTACK"
    SHOOT = "SHOOT"
    DEFEND = "DEFEND"
    RUN = "RUN"
    EAT = "EAT"
    REST = "REST"
    HEAL = "HEAL"
    NONE = "NONE"


# (hunger, fatigue) paid up front; EAT/REST restore instead of costing
ACTION_COSTS: dict[ActionKind, tuple[int, int]] = {
    ActionKind.ATTACK: (COST_ATTACK_HUNGER, COST_ATTACK_FATIGUE),
    ActionKind.SHOOT: (PISTOL_COST_HUNGER, PISTOL_COST_FATIGUE),
    ActionKind.DEFEND: (COST_DEFEND_HUNGER, COST_DEFEND_FATIGUE),
    ActionKind.RUN: (COST_RUN_HUNGER, COST_RUN_FATIGUE),
    ActionKind.HEAL: (0, COST_HEAL_FATIGUE),
    ActionKind.EAT: (0, 0),
    ActionKind.REST: (0, 0),
    ActionKind.NONE: (0, 0),
}

TARGETED_ACTIONS = frozenset({ActionKind.ATTACK, ActionKind.SHOOT, ActionKind.HEAL})
RECOVERY_ACTIONS = frozenset({ActionKind.EAT, ActionKind.REST})
# resolved one by one in shuffled order
SEQUENTIAL_ACTIONS = frozenset({
    ActionKind.ATTACK, ActionKind.SHOOT, ActionKind.EAT, ActionKind.REST, ActionKind.HEAL,
})
_COOLDOWN_SLOTS = {
    ActionKind.EAT: "eat",
    ActionKind.REST: "rest",
    ActionKind.RUN: "run",
    ActionKind.SHOOT: "shoot",
}


def action_cost(kind: ActionKind) -> tuple[int, int]:
    return ACTION_COSTS[kind]


@dataclass(frozen=True)
class PendingAction:
    """One entity's choice for the current day."""

    kind: ActionKind = ActionKind.NONE
    target_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.target_id is not None and self.kind not in TARGETED_ACTIONS:
            raise ValueError(f"{self.kind.value} does not take a target")

    # -- constructors ---------------------------------------------------
    @classmethod
    def attack(cls, target_id: str) -> "PendingAction":
        return cls(ActionKind.ATTACK, target_id)

    @classmethod
    def shoot(cls, target_id: str) -> "PendingAction":
        return cls(ActionKind.SHOOT, target_id)

    @classmethod
    def heal(cls, target_id: Optional[str] = None) -> "PendingAction":
        return cls(ActionKind.HEAL, target_id)

    @classmethod
    def simple(cls, kind: ActionKind) -> "PendingAction":
        return cls(kind)

    @property
    def is_none(self) -> bool:
        return self.kind == ActionKind.NONE


NO_ACTION = PendingAction()


class RejectReason(str, Enum):
    WRONG_PHASE = "not the decision phase"
    UNKNOWN_ENTITY = "no such participant"
    UNKNOWN_ACTION = "no such action"
    DEAD = "eliminated participants cannot act"
    STUNNED = "stunned: only EAT or REST allowed"
    LOCKDOWN = "lockdown: EAT and REST are disabled"
    COOLDOWN = "action is on cooldown"
    INSUFFICIENT_HUNGER = "not enough hunger"
    INSUFFICIENT_FATIGUE = "not enough fatigue"
    NO_WEAPON = "no ranged weapon"
    INVALID_TARGET = "invalid target"


@dataclass(frozen=True)
class Verdict:
    accepted: bool
    reason: Optional[RejectReason] = None

    def __bool__(self) -> bool:
        return self.accepted


ACCEPTED = Verdict(True)


class ActionValidator:
    """Gates a human submission before it may become the pending action.

    Checks run in a fixed order and the first failure wins, so the feedback
    cue always names the most fundamental problem.
    """

    def validate(
        self,
        action: PendingAction,
        entity: Optional[Entity],
        phase: Phase,
        entities: Mapping[str, Entity],
        lockdown: bool = False,
    ) -> Verdict:
        kind = action.kind
        if phase != Phase.DAY:
            return Verdict(False, RejectReason.WRONG_PHASE)
        if entity is None:
            return Verdict(False, RejectReason.UNKNOWN_ENTITY)
        if entity.status == Status.DEAD:
            return Verdict(False, RejectReason.DEAD)
        if entity.status == Status.STUNNED and kind not in RECOVERY_ACTIONS:
            return Verdict(False, RejectReason.STUNNED)
        if lockdown and kind in RECOVERY_ACTIONS:
            return Verdict(False, RejectReason.LOCKDOWN)

        slot = _COOLDOWN_SLOTS.get(kind)
        if slot and entity.cooldowns.get(slot) > 0:
            return Verdict(False, RejectReason.COOLDOWN)

        if not entity.buffs.ignore_fatigue:
            hunger_cost, fatigue_cost = action_cost(kind)
            if entity.hunger < hunger_cost:
                return Verdict(False, RejectReason.INSUFFICIENT_HUNGER)
            if entity.fatigue < fatigue_cost:
                return Verdict(False, RejectReason.INSUFFICIENT_FATIGUE)

        if kind == ActionKind.SHOOT and not entity.has_weapon:
            return Verdict(False, RejectReason.NO_WEAPON)
        if not self._target_ok(action, entity, entities):
            return Verdict(False, RejectReason.INVALID_TARGET)
        return ACCEPTED

    @staticmethod
    def _target_ok(action: PendingAction, entity: Entity, entities: Mapping[str, Entity]) -> bool:
        if action.kind in (ActionKind.ATTACK, ActionKind.SHOOT):
            target = entities.get(action.target_id) if action.target_id else None
            return target is not None and target.id != entity.id and not target.is_dead
        if action.kind == ActionKind.HEAL and action.target_id is not None:
            target = entities.get(action.target_id)
            return target is not None and not target.is_dead
        return True
