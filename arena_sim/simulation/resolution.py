"""Night resolution: turns one day's simultaneous choices into ordered events.

Standard nights work on a deep copy of the roster. Zone-shrink eliminations,
action costs, the small EAT/REST heal and stun transitions are applied to that
copy, which then replaces the live roster. Everything else (damage, heals,
restores, loot) is only described by events and lands during playback.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from itertools import count
from typing import Iterable, Optional

from numpy.random import Generator

from arena_sim.agents import needs
from arena_sim.agents.decision import DecisionEngine, HazardFlags
from arena_sim.agents.entity import Entity, Status
from arena_sim.combat import damage
from arena_sim.combat.actions import (
    NO_ACTION,
    RECOVERY_ACTIONS,
    SEQUENTIAL_ACTIONS,
    ActionKind,
    PendingAction,
    action_cost,
)
from arena_sim.core.clock import phase_balance
from arena_sim.core.config import (
    EAT_HP_REGEN,
    EAT_REGEN,
    HEAL_AMOUNT,
    ITEMS_LIST,
    LOCKDOWN_DAY,
    LOOT_CHANCE,
    MAX_HP,
    RESOURCE_MAX,
    REST_HP_REGEN,
    REST_REGEN,
    RUN_FAIL_DAMAGE,
)
from arena_sim.simulation.events import (
    AttackEvent,
    BattleEvent,
    CorneredEvent,
    DeathEvent,
    EatEvent,
    HazardKind,
    HazardSchedule,
    HealEvent,
    RestEvent,
    RunEvent,
    ShootEvent,
    StunEvent,
    StunRecoveryEvent,
)
from arena_sim.viz.logger import describe


@dataclass
class NightPlan:
    """Output of one resolution pass."""

    day: int
    entities: list[Entity]
    choices: dict[str, PendingAction]
    hazard: Optional[HazardKind] = None
    events: list[BattleEvent] = field(default_factory=list)
    critical_multiplier: float = 1.0
    run_disabled: bool = False

    @property
    def is_mass_hazard(self) -> bool:
        return self.hazard is not None


class ResolutionEngine:
    """Resolves a night; the only producer of battle events."""

    def __init__(self, rng: Generator, decision_engine: Optional[DecisionEngine] = None) -> None:
        self._rng = rng
        self.decision_engine = decision_engine or DecisionEngine(rng)
        self._event_ids = count(1)

    def resolve(
        self,
        entities: list[Entity],
        pending: dict[str, PendingAction],
        day: int,
        schedule: HazardSchedule,
        autopilot: Iterable[str] = (),
    ) -> NightPlan:
        hazard = schedule.mass_hazard(day)
        zone_shrink = schedule.is_zone_shrink(day)
        flags = HazardFlags(
            zone_shrink=zone_shrink,
            monster_hunt=hazard == HazardKind.MONSTER,
            eruption=hazard == HazardKind.ERUPTION,
            toxic_gas=hazard == HazardKind.GAS,
        )

        # 1. Stable snapshot
        working = copy.deepcopy(entities)

        # 2. One action per surviving entity
        choices = self._collect(working, pending, flags, day >= LOCKDOWN_DAY, autopilot)
        for entity in working:
            if entity.is_alive:
                entity.last_action = choices[entity.id].kind.value

        # Mass hazards skip combat; playback applies their effect later
        if hazard is not None:
            return NightPlan(day=day, entities=working, choices=choices, hazard=hazard)

        plan = NightPlan(day=day, entities=working, choices=choices)
        by_id = {e.id: e for e in working}

        # 3. Zone shrink kills everyone who did not run, before anything else
        if zone_shrink:
            for entity in working:
                if entity.is_alive and choices[entity.id].kind != ActionKind.RUN:
                    needs.kill(entity)
                    plan.events.append(DeathEvent(
                        source_id=entity.id,
                        description=describe("ZONE", self._rng, source=entity.name),
                    ))

        # 4. Match-phase modifiers
        alive_count = sum(1 for e in working if e.is_alive)
        plan.critical_multiplier = damage.critical_multiplier(alive_count)
        plan.run_disabled = damage.run_disabled(alive_count)
        balance = phase_balance(day)

        # mitigation reads fatigue as it stood when the night began
        dusk_fatigue = {e.id: e.fatigue for e in working}

        # 5. Costs, small heals and stun transitions
        active = self._pay_and_settle(working, choices, plan)

        defended = {eid for eid, act in active.items() if act.kind == ActionKind.DEFEND}
        projected_hp = {e.id: e.hp for e in working}

        # 6. Evasion
        escaped: set[str] = set()
        for eid, act in active.items():
            if act.kind != ActionKind.RUN:
                continue
            runner = by_id[eid]
            if self._rng.random() < balance.run_success_chance:
                escaped.add(eid)
                plan.events.append(self._run_success(runner))
            else:
                projected_hp[eid] = max(0, projected_hp[eid] - RUN_FAIL_DAMAGE)
                plan.events.append(RunEvent(
                    source_id=eid,
                    escaped=False,
                    fail_damage=RUN_FAIL_DAMAGE,
                    description=describe("RUN_FAIL", self._rng, source=runner.name, val=RUN_FAIL_DAMAGE),
                ))

        # 7. Sequential actions in a random order fixed here
        sequential = [(eid, act) for eid, act in active.items() if act.kind in SEQUENTIAL_ACTIONS]
        order = self._rng.permutation(len(sequential))
        for index in order:
            eid, act = sequential[int(index)]
            if projected_hp[eid] <= 0:
                continue
            event = self._resolve_one(
                by_id[eid], act, by_id, projected_hp, defended, escaped,
                plan.critical_multiplier, balance.zone_damage, dusk_fatigue,
            )
            if event is not None:
                plan.events.append(event)

        plan.events = [replace(e, event_id=self._next_event_id()) for e in plan.events]
        return plan

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _next_event_id(self) -> str:
        return f"ev-{next(self._event_ids):06d}"


    def _collect(
        self,
        working: list[Entity],
        pending: dict[str, PendingAction],
        flags: HazardFlags,
        lockdown: bool,
        autopilot: Iterable[str],
    ) -> dict[str, PendingAction]:
        decided = self.decision_engine.decide_all(working, flags, lockdown, include=autopilot)
        choices: dict[str, PendingAction] = {}
        for entity in working:
            if entity.is_dead:
                continue
            choices[entity.id] = decided.get(entity.id) or pending.get(entity.id, NO_ACTION)
        return choices

    def _pay_and_settle(
        self,
        working: list[Entity],
        choices: dict[str, PendingAction],
        plan: NightPlan,
    ) -> dict[str, PendingAction]:
        """Deduct costs and re-evaluate stuns. Returns the actions that proceed."""
        active: dict[str, PendingAction] = {}
        for entity in working:
            if entity.is_dead:
                continue
            action = choices[entity.id]
            if action.kind == ActionKind.RUN and plan.run_disabled:
                action = PendingAction.simple(ActionKind.DEFEND)
                plan.events.append(CorneredEvent(
                    source_id=entity.id,
                    description=describe("CORNERED", self._rng, source=entity.name),
                ))

            needs.pay_costs(entity, *action_cost(action.kind))

            projected_hunger = projected_fatigue = None
            if action.kind == ActionKind.EAT:
                needs.restore(entity, hp=EAT_HP_REGEN)
                projected_hunger = min(RESOURCE_MAX, entity.hunger + EAT_REGEN)
            elif action.kind == ActionKind.REST:
                needs.restore(entity, hp=REST_HP_REGEN)
                projected_fatigue = min(RESOURCE_MAX, entity.fatigue + REST_REGEN)

            change = needs.refresh_stun(entity, projected_hunger, projected_fatigue)
            if change == Status.STUNNED:
                plan.events.append(StunEvent(
                    source_id=entity.id,
                    description=describe("STUN", self._rng, source=entity.name),
                ))
            elif change == Status.ALIVE:
                plan.events.append(StunRecoveryEvent(
                    source_id=entity.id,
                    description=describe("STUN_RECOVERY", self._rng, source=entity.name),
                ))

            if entity.is_stunned and action.kind not in RECOVERY_ACTIONS:
                continue
            if action.kind != ActionKind.NONE:
                active[entity.id] = action
        return active

    def _run_success(self, runner: Entity) -> RunEvent:
        if self._rng.random() < LOOT_CHANCE:
            index = int(self._rng.integers(0, len(ITEMS_LIST)))
            return RunEvent(
                source_id=runner.id,
                escaped=True,
                item_index=index + 1,
                description=describe("RUN_LOOT", self._rng, source=runner.name, item=ITEMS_LIST[index]),
            )
        return RunEvent(
            source_id=runner.id,
            escaped=True,
            description=describe("RUN_EMPTY", self._rng, source=runner.name),
        )

    def _resolve_one(
        self,
        actor: Entity,
        action: PendingAction,
        by_id: dict[str, Entity],
        projected_hp: dict[str, int],
        defended: set[str],
        escaped: set[str],
        multiplier: float,
        zone_bonus: int,
        dusk_fatigue: dict[str, int],
    ) -> Optional[BattleEvent]:
        kind = action.kind
        if kind == ActionKind.EAT:
            return EatEvent(
                source_id=actor.id,
                amount=EAT_REGEN,
                description=describe("EAT", self._rng, source=actor.name),
            )
        if kind == ActionKind.REST:
            return RestEvent(
                source_id=actor.id,
                amount=REST_REGEN,
                description=describe("REST", self._rng, source=actor.name),
            )
        if kind == ActionKind.HEAL:
            target = by_id.get(action.target_id or actor.id)
            if target is None or projected_hp[target.id] <= 0:
                return None
            projected_hp[target.id] = min(MAX_HP, projected_hp[target.id] + HEAL_AMOUNT)
            return HealEvent(
                source_id=actor.id,
                target=target.id,
                amount=HEAL_AMOUNT,
                description=describe("HEAL", self._rng, source=actor.name, target=target.name, val=HEAL_AMOUNT),
            )
        if kind in (ActionKind.ATTACK, ActionKind.SHOOT):
            return self._strike(
                actor, action, by_id, projected_hp, defended, escaped,
                multiplier, zone_bonus, dusk_fatigue,
            )
        return None

    def _strike(
        self,
        actor: Entity,
        action: PendingAction,
        by_id: dict[str, Entity],
        projected_hp: dict[str, int],
        defended: set[str],
        escaped: set[str],
        multiplier: float,
        zone_bonus: int,
        dusk_fatigue: dict[str, int],
    ) -> Optional[BattleEvent]:
        event_cls = ShootEvent if action.kind == ActionKind.SHOOT else AttackEvent
        target = by_id.get(action.target_id) if action.target_id else None
        if target is None:
            return None

        if target.is_dead or projected_hp[target.id] <= 0:
            return event_cls(
                source_id=actor.id,
                target=target.id,
                missed=True,
                description=describe("CORPSE", self._rng, source=actor.name),
            )
        if target.id in escaped:
            return event_cls(
                source_id=actor.id,
                target=target.id,
                missed=True,
                description=describe("ATTACK_DODGED", self._rng, target=target.name),
            )

        if action.kind == ActionKind.SHOOT:
            base = damage.roll_ranged(self._rng)
            blocked = False
        else:
            base = damage.roll_melee(self._rng)
            blocked = target.id in defended
        amount = damage.compute_damage(
            base,
            multiplier=multiplier,
            flat_bonus=actor.buffs.damage_bonus,
            zone_bonus=zone_bonus,
            defender_fatigue=dusk_fatigue[target.id] if blocked else None,
        )
        projected_hp[target.id] = max(0, projected_hp[target.id] - amount)

        if blocked:
            key = "ATTACK_BLOCKED"
        else:
            key = "SHOOT_HIT" if action.kind == ActionKind.SHOOT else "ATTACK_HIT"
        return event_cls(
            source_id=actor.id,
            target=target.id,
            damage=amount,
            blocked=blocked,
            description=describe(key, self._rng, source=actor.name, target=target.name, val=amount),
        )
