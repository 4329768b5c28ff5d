"""Day/cycle controller: LOBBY -> DAY <-> NIGHT -> GAME_OVER.

A cycle is one DAY countdown followed by the NIGHT that resolves it:

  1. DAY     - humans submit actions; the countdown ticks once a second
  2. DUSK    - countdown hits zero; the night is resolved into events
  3. NIGHT   - the playback queue reveals the events one by one
  4. SETTLE  - a short pause once playback has drained
  5. UPKEEP  - cooldowns, buffs, regeneration, weapon drop, monster calendar
  6. DAWN    - winner check, then the next DAY with its hazard warning
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
from numpy.random import Generator

from arena_sim.agents import needs
from arena_sim.agents.decision import DecisionEngine
from arena_sim.agents.entity import Entity, Status, generate_roster
from arena_sim.combat.actions import (
    TARGETED_ACTIONS,
    ActionKind,
    ActionValidator,
    PendingAction,
    RejectReason,
    Verdict,
)
from arena_sim.core.clock import Phase
from arena_sim.core.config import (
    COUNTDOWN_TICK_MS,
    MAX_PLAYERS,
    NIGHT_SETTLE_MS,
    PISTOL_CHANCE,
    PISTOL_END_DAY,
    PISTOL_START_DAY,
    RUN_COOLDOWN,
)
from arena_sim.core.scheduler import TimerScheduler
from arena_sim.economy import inventory
from arena_sim.simulation.events import HazardSchedule
from arena_sim.simulation.metrics import MetricsCollector
from arena_sim.simulation.playback import PlaybackQueue
from arena_sim.simulation.resolution import NightPlan, ResolutionEngine
from arena_sim.simulation.state import MatchSnapshot, MatchState
from arena_sim.social.chat import ChatMessage
from arena_sim.viz.logger import MatchLogger, describe

COUNTDOWN_OWNER = "countdown"
CONTROLLER_OWNER = "controller"


class MatchEngine:
    """Owns one match and everything that may write to it."""

    def __init__(
        self,
        seed: Optional[int] = 42,
        rng: Optional[Generator] = None,
        logger: Optional[MatchLogger] = None,
        human_autopilot: bool = False,
        capacity: int = MAX_PLAYERS,
        scheduler: Optional[TimerScheduler] = None,
    ) -> None:
        self.rng: Generator = rng if rng is not None else np.random.default_rng(seed)
        self.logger = logger or MatchLogger()
        self.scheduler = scheduler or TimerScheduler()
        self.human_autopilot = human_autopilot
        self.capacity = capacity

        self.validator = ActionValidator()
        self.decision_engine = DecisionEngine(self.rng)
        self.resolution = ResolutionEngine(self.rng, self.decision_engine)
        self.metrics = MetricsCollector()

        self.state: Optional[MatchState] = None
        self.playback: Optional[PlaybackQueue] = None
        self._plan: Optional[NightPlan] = None
        self._alive_at_dusk: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, roster: list[str]) -> MatchState:
        """Fill the roster up to capacity and open day 1."""
        if self.state is not None and self.state.phase in (Phase.DAY, Phase.NIGHT):
            raise RuntimeError(f"cannot start a match during {self.state.phase.value}")

        entities = generate_roster(roster, self.rng, self.capacity)
        schedule = HazardSchedule.roll(self.rng)
        self.state = MatchState(entities, schedule, self.logger, human_id=roster[0])
        self.playback = PlaybackQueue(self.state, self.scheduler, self.rng, self._on_playback_drained)
        self.metrics = MetricsCollector()

        humans = sum(1 for e in entities if not e.is_autonomous)
        self.state.log(
            MatchLogger.SYSTEM,
            f"The games begin: {len(entities)} contestants ({humans} human).",
            schedule={
                "eruption": schedule.eruption_day,
                "gas": schedule.gas_day,
                "monster": schedule.next_monster_day,
            },
        )
        self._begin_day()
        return self.state

    def leave(self) -> None:
        """Tear the match down. No timer from it fires afterwards."""
        self.scheduler.cancel_all()
        if self.state is None:
            return
        self.state.phase = Phase.LOBBY
        self.state.pending.clear()
        self.state.event_queue.clear()
        self.state.current_event = None
        self.state.active_hazard = None
        self.state.countdown = 0
        self.state.log(MatchLogger.SYSTEM, "Match abandoned.")
        self.logger.flush_day(self.state.day)

    @property
    def phase(self) -> Phase:
        return self.state.phase if self.state is not None else Phase.LOBBY

    @property
    def day(self) -> int:
        return self.state.day if self.state is not None else 0

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def snapshot(self) -> MatchSnapshot:
        return self._require_state().snapshot()

    # ------------------------------------------------------------------
    # External inputs
    # ------------------------------------------------------------------

    def submit_action(
        self,
        entity_id: str,
        kind: Union[ActionKind, str],
        target_id: Optional[str] = None,
    ) -> Verdict:
        """Validate a human's choice and make it the pending action.

        Resubmitting replaces the pending action; a rejection leaves it
        untouched and sets the feedback cue.
        """
        if self.state is None:
            return Verdict(False, RejectReason.WRONG_PHASE)

        state = self.state
        try:
            action_kind = ActionKind(kind)
        except ValueError:
            verdict = Verdict(False, RejectReason.UNKNOWN_ACTION)
        else:
            if target_id is not None and action_kind not in TARGETED_ACTIONS:
                verdict = Verdict(False, RejectReason.INVALID_TARGET)
            else:
                action = PendingAction(action_kind, target_id)
                verdict = self.validator.validate(
                    action,
                    state.get(entity_id),
                    state.phase,
                    state.by_id,
                    lockdown=state.clock.is_lockdown(),
                )
        if not verdict:
            state.feedback = verdict.reason.value
            return verdict
        state.pending[entity_id] = action
        state.feedback = None
        return verdict

    def use_item(self, entity_id: str, item: str) -> bool:
        state = self._require_state()
        entity = state.get(entity_id)
        if state.phase != Phase.DAY or entity is None or not inventory.use_item(entity, item):
            state.feedback = f"cannot use {item}"
            return False

        change = needs.refresh_stun(entity)
        state.feedback = None
        state.log(MatchLogger.ITEM, f"{entity.name} uses {item}.", [entity.id], item=item)
        if change == Status.ALIVE:
            state.log(MatchLogger.SYSTEM, describe("STUN_RECOVERY", self.rng, source=entity.name), [entity.id])
        return True

    def send_chat(self, sender_id: str, text: str, recipient_id: Optional[str] = None) -> ChatMessage:
        state = self._require_state()
        sender = state.get(sender_id)
        if sender is None:
            raise ValueError(f"unknown chat sender: {sender_id}")
        recipient = None
        if recipient_id is not None:
            recipient = state.get(recipient_id)
            if recipient is None:
                raise ValueError(f"unknown whisper recipient: {recipient_id}")

        message = state.chat.post(
            sender_id=sender.id,
            sender_name=sender.name,
            text=text,
            day=state.day,
            recipient_id=recipient.id if recipient else None,
            recipient_name=recipient.name if recipient else None,
        )
        if recipient is None:
            state.log(MatchLogger.CHAT, f"{sender.name}: {text}", [sender.id])
        else:
            state.log(MatchLogger.CHAT, f"{sender.name} -> {recipient.name}: {text}", [sender.id, recipient.id])
        return message

    def surrender(self, entity_id: str) -> bool:
        state = self._require_state()
        entity = state.get(entity_id)
        if state.phase != Phase.DAY or entity is None or entity.is_dead:
            return False
        needs.kill(entity)
        state.pending.pop(entity_id, None)
        state.log(MatchLogger.DEATH, f"{entity.name} has surrendered.", [entity.id])
        return True

    def set_connected(self, entity_id: str, connected: bool) -> None:
        """A disconnected human is driven by the decision engine."""
        entity = self._require_state().get(entity_id)
        if entity is None:
            raise ValueError(f"unknown participant: {entity_id}")
        entity.connected = connected

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def _begin_day(self) -> None:
        state = self._require_state()
        state.phase = Phase.DAY
        state.countdown = state.clock.duration
        state.pending.clear()
        state.feedback = None
        state.warning = state.schedule.warning_for(state.day)

        state.log(MatchLogger.SYSTEM, f"Day {state.day} begins. {state.alive_count()} contestants remain.")
        if state.warning is not None:
            state.log(
                MatchLogger.WARNING,
                f"{state.warning.title}: {state.warning.subtitle}",
                hazard=state.warning.kind.value,
                due=state.warning.day,
            )
        self.scheduler.call_later(COUNTDOWN_TICK_MS, self._tick, owner=COUNTDOWN_OWNER)

    def _tick(self) -> None:
        state = self._require_state()
        if state.phase != Phase.DAY:
            return
        state.countdown -= 1
        if state.countdown <= 0:
            self.end_day()
        else:
            self.scheduler.call_later(COUNTDOWN_TICK_MS, self._tick, owner=COUNTDOWN_OWNER)

    def end_day(self) -> NightPlan:
        """Close the decision window now and resolve the night."""
        state = self._require_state()
        if state.phase != Phase.DAY:
            raise RuntimeError(f"cannot resolve a night from {state.phase.value}")
        self.scheduler.cancel_owner(COUNTDOWN_OWNER)
        state.countdown = 0
        state.phase = Phase.NIGHT
        self._alive_at_dusk = state.alive_count()

        plan = self.resolution.resolve(
            state.entities,
            state.pending,
            state.day,
            state.schedule,
            autopilot=self._autopilot_ids(),
        )
        state.entities = plan.entities
        self._plan = plan

        if plan.is_mass_hazard:
            state.log(MatchLogger.HAZARD, f"Night {state.day}: {plan.hazard.value} strikes the arena.")
        else:
            state.log(MatchLogger.SYSTEM, f"Night {state.day} falls. {len(plan.events)} things happen in the dark.")
        self.playback.start(plan)
        return plan

    def _on_playback_drained(self) -> None:
        self.scheduler.call_later(NIGHT_SETTLE_MS, self._advance_day, owner=CONTROLLER_OWNER)

    def _advance_day(self) -> None:
        state = self._require_state()
        if state.phase != Phase.NIGHT:
            raise RuntimeError(f"cannot advance the day from {state.phase.value}")
        day = state.day

        # 5. Upkeep
        for entity in state.living():
            entity.cooldowns.decay(ran=entity.last_action == ActionKind.RUN.value, run_reset=RUN_COOLDOWN)
            entity.buffs.reset()
            needs.nightly_regeneration(entity)
            if needs.refresh_stun(entity) == Status.ALIVE:
                state.log(MatchLogger.SYSTEM, describe("STUN_RECOVERY", self.rng, source=entity.name), [entity.id])
        self._maybe_drop_weapon(day)
        if state.schedule.next_monster_day <= day:
            state.schedule.roll_next_monster(day, self.rng)

        self.metrics.record_death(max(0, self._alive_at_dusk - state.alive_count()))
        self.metrics.collect_daily(
            day,
            state.entities,
            self._plan.choices if self._plan else None,
            self._plan.hazard.value if self._plan and self._plan.hazard else None,
        )
        self._plan = None

        # 6. Winner check
        survivors = state.living()
        if len(survivors) <= 1:
            state.phase = Phase.GAME_OVER
            state.winner_id = survivors[0].id if survivors else None
            if survivors:
                state.log(MatchLogger.SYSTEM, f"{survivors[0].name} is the last one standing.", [survivors[0].id])
            else:
                state.log(MatchLogger.SYSTEM, "Nobody survived the arena.")
            self.logger.flush_day(day)
            return

        self.logger.flush_day(day)
        state.clock.advance()
        self._begin_day()

    def _maybe_drop_weapon(self, day: int) -> Optional[Entity]:
        state = self._require_state()
        if not PISTOL_START_DAY <= day <= PISTOL_END_DAY:
            return None
        living = state.living()
        if not living or any(e.has_weapon for e in living):
            return None
        if self.rng.random() >= PISTOL_CHANCE:
            return None
        lucky = living[int(self.rng.integers(0, len(living)))]
        lucky.has_weapon = True
        state.log(MatchLogger.ITEM, f"A sponsor parachute drops a pistol to {lucky.name}.", [lucky.id])
        return lucky

    # ------------------------------------------------------------------
    # Drivers
    # ------------------------------------------------------------------

    def run_day(self, limit_ms: Optional[int] = None) -> bool:
        """Fire timers until the next day opens or the match ends."""
        state = self._require_state()
        start_day = state.day
        return self.scheduler.run_until(
            lambda: state.phase == Phase.GAME_OVER or (state.phase == Phase.DAY and state.day > start_day),
            limit_ms,
        )

    def run_night(self) -> bool:
        """Skip the rest of the countdown, then play the night out."""
        if self.phase == Phase.DAY:
            self.end_day()
        return self.run_day()

    def run_to_completion(self, max_days: int = 300) -> Optional[str]:
        """Play whole cycles until GAME_OVER. Returns the winner id."""
        state = self._require_state()
        while state.phase != Phase.GAME_OVER and state.day <= max_days:
            if not self.run_day():
                break
        return state.winner_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _autopilot_ids(self) -> list[str]:
        if not self.human_autopilot:
            return []
        return [e.id for e in self._require_state().entities if not e.is_autonomous]

    def _require_state(self) -> MatchState:
        if self.state is None:
            raise RuntimeError("no match in progress; call start() first")
        return self.state
