"""Sequential reveal of a night's events on the cooperative timer.

At most one event is current. Each event's numeric effect lands at its impact
instant and the event is cleared at its end instant, which lets the next one
be pulled. Mass-hazard nights replace the event stream with a single delayed
resolution. When nothing is left the controller is told to advance the day.
"""

from __future__ import annotations

from typing import Callable, Optional

from numpy.random import Generator

from arena_sim.agents import needs
from arena_sim.agents.entity import Entity, Status
from arena_sim.combat.actions import ActionKind, action_cost
from arena_sim.core.config import (
    DEFAULT_EVENT_TIMING_MS,
    EAT_COOLDOWN,
    EVENT_TIMING_MS,
    GAS_DAMAGE,
    HAZARD_DELAY_MS,
    MONSTER_DAMAGE,
    PLAYBACK_PULL_DELAY_MS,
    REST_COOLDOWN,
    VOLCANO_DAMAGE,
)
from arena_sim.core.scheduler import TimerScheduler
from arena_sim.economy.inventory import item_by_index
from arena_sim.simulation.events import (
    BattleEvent,
    CorneredEvent,
    DeathEvent,
    EatEvent,
    HazardKind,
    HealEvent,
    RestEvent,
    RunEvent,
    StrikeEvent,
)
from arena_sim.simulation.resolution import NightPlan
from arena_sim.simulation.state import MatchState
from arena_sim.viz.logger import MatchLogger, describe

PLAYBACK_OWNER = "playback"

# counter action, damage otherwise, summary line
_HAZARD_RULES: dict[HazardKind, tuple[ActionKind, int, str]] = {
    HazardKind.ERUPTION: (ActionKind.RUN, VOLCANO_DAMAGE, "The volcano erupts. {n} contestants are caught by the lava."),
    HazardKind.GAS: (ActionKind.DEFEND, GAS_DAMAGE, "An acid storm sweeps the arena. {n} contestants breathe the gas."),
    HazardKind.MONSTER: (ActionKind.DEFEND, MONSTER_DAMAGE, "The monster hunts tonight. {n} contestants are found."),
}


def event_timing(event: BattleEvent) -> tuple[int, int]:
    """(total duration, impact instant) in milliseconds for ``event``."""
    return EVENT_TIMING_MS.get(event.kind, DEFAULT_EVENT_TIMING_MS)


class PlaybackQueue:
    """Reveals one night's outcome event by event."""

    def __init__(
        self,
        state: MatchState,
        scheduler: TimerScheduler,
        rng: Generator,
        on_drained: Callable[[], None],
    ) -> None:
        self.state = state
        self.scheduler = scheduler
        self._rng = rng
        self._on_drained = on_drained

    def start(self, plan: NightPlan) -> None:
        """Take ownership of a resolved night and begin revealing it."""
        self.state.event_queue = list(plan.events)
        self.state.current_event = None
        self.state.active_hazard = plan.hazard
        if plan.hazard is not None:
            self.scheduler.call_later(
                HAZARD_DELAY_MS[plan.hazard.value], self._resolve_hazard, owner=PLAYBACK_OWNER,
            )
        else:
            self._schedule_pull()

    def pull(self) -> Optional[BattleEvent]:
        """Make the front event current and time its impact and end.

        Returns None and signals the controller when the queue is empty.
        """
        if self.state.current_event is not None:
            raise RuntimeError(
                f"playback pull while {self.state.current_event.event_id} is still current"
            )
        if not self.state.event_queue:
            self._on_drained()
            return None

        event = self.state.event_queue.pop(0)
        self.state.current_event = event
        total, impact = event_timing(event)
        self.scheduler.call_later(impact, lambda: self.apply_impact(event), owner=PLAYBACK_OWNER)
        self.scheduler.call_later(total, self._finish, owner=PLAYBACK_OWNER)
        return event

    def _schedule_pull(self) -> None:
        self.scheduler.call_later(PLAYBACK_PULL_DELAY_MS, self.pull, owner=PLAYBACK_OWNER)

    def _finish(self) -> None:
        self.state.current_event = None
        self._schedule_pull()

    # ------------------------------------------------------------------
    # Impact
    # ------------------------------------------------------------------

    def apply_impact(self, event: BattleEvent) -> None:
        """Apply the event's numeric effect to the live roster and log it."""
        if isinstance(event, StrikeEvent):
            self._impact_strike(event)
        elif isinstance(event, RunEvent):
            self._impact_run(event)
        elif isinstance(event, (EatEvent, RestEvent)):
            self._impact_recovery(event)
        elif isinstance(event, HealEvent):
            target = self.state.get(event.target)
            if target is not None:
                needs.restore(target, hp=event.amount)
            self._log(MatchLogger.HEAL, event)
        elif isinstance(event, DeathEvent):
            self._log(MatchLogger.DEATH, event)
        elif isinstance(event, CorneredEvent):
            self._log(MatchLogger.DEFENSE, event)
        else:
            # stun transitions and anything informational
            self._log(MatchLogger.SYSTEM, event)

    def _impact_strike(self, event: StrikeEvent) -> None:
        if event.is_miss:
            self._log(MatchLogger.DEFENSE, event)
            return
        source = self.state.get(event.source_id)
        target = self.state.get(event.target)
        killed = target is not None and needs.apply_damage(target, event.damage)
        self._log(MatchLogger.DEFENSE if event.is_blocked else MatchLogger.DAMAGE, event)
        if killed:
            if source is not None:
                source.kills += 1
            self._log_death(target, killer=source)

    def _impact_run(self, event: RunEvent) -> None:
        runner = self.state.get(event.source_id)
        if runner is None:
            return
        if not event.escaped:
            killed = needs.apply_damage(runner, event.fail_damage)
            self._log(MatchLogger.DAMAGE, event)
            if killed:
                self._log_death(runner)
            return
        item = item_by_index(event.item_index) if event.item_index is not None else None
        if item is not None and runner.is_alive:
            runner.inventory.append(item)
            self._log(MatchLogger.ITEM, event, item=item)
        else:
            self._log(MatchLogger.DEFENSE, event)

    def _impact_recovery(self, event: EatEvent | RestEvent) -> None:
        entity = self.state.get(event.source_id)
        if entity is None or entity.is_dead:
            return
        cooldowns = entity.cooldowns
        if isinstance(event, EatEvent):
            needs.restore(entity, hunger=event.amount)
            cooldowns.eat = EAT_COOLDOWN
            cooldowns.eat_count += 1
            self._log(MatchLogger.EAT, event)
        else:
            needs.restore(entity, fatigue=event.amount)
            cooldowns.rest = REST_COOLDOWN
            cooldowns.rest_count += 1
            self._log(MatchLogger.REST, event)

    # ------------------------------------------------------------------
    # Mass hazards
    # ------------------------------------------------------------------

    def _resolve_hazard(self) -> None:
        hazard = self.state.active_hazard
        if hazard is None:
            return
        counter, hazard_damage, summary = _HAZARD_RULES[hazard]
        hit = 0
        for entity in self.state.living():
            if entity.last_action == counter.value:
                needs.pay_costs(entity, *action_cost(counter))
                if needs.refresh_stun(entity) == Status.STUNNED:
                    self.state.log(
                        MatchLogger.SYSTEM,
                        describe("STUN", self._rng, source=entity.name),
                        [entity.id],
                    )
                continue
            hit += 1
            if needs.apply_damage(entity, hazard_damage):
                self._log_death(entity)

        self.state.log(
            MatchLogger.HAZARD,
            summary.format(n=hit),
            hazard=hazard.value,
            damage=hazard_damage,
            hit=hit,
        )
        self.state.active_hazard = None
        if hazard == HazardKind.MONSTER:
            next_day = self.state.schedule.roll_next_monster(self.state.day, self._rng)
            self.state.log(MatchLogger.SYSTEM, "The monster retreats into the dark.", next_day=next_day)
        self._on_drained()

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _log(self, kind: str, event: BattleEvent, **data) -> None:
        self.state.log(
            kind,
            event.description,
            event.involved_ids,
            event_id=event.event_id,
            event_kind=event.kind,
            value=event.value,
            **data,
        )

    def _log_death(self, entity: Entity, killer: Optional[Entity] = None) -> None:
        data = {"killer": killer.id} if killer is not None else {}
        self.state.log(
            MatchLogger.DEATH,
            describe("DEATH", self._rng, source=entity.name),
            [entity.id],
            **data,
        )
