"""The single owned match aggregate and the read-only views handed outward."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from arena_sim.agents.entity import Entity
from arena_sim.combat.actions import NO_ACTION, PendingAction
from arena_sim.core.clock import MatchClock, Phase
from arena_sim.simulation.events import BattleEvent, HazardKind, HazardSchedule, HazardWarning
from arena_sim.social.chat import ChatLog, ChatMessage
from arena_sim.viz.logger import LogEntry, MatchLogger


class MatchState:
    """Everything a match owns.

    Write access by component:
      controller  - phase, clock, countdown, winner, warning, schedule
      resolution  - event_queue, entities (snapshot swap), active_hazard
      playback    - current_event, vitals via agents.needs
    """

    def __init__(
        self,
        entities: list[Entity],
        schedule: HazardSchedule,
        logger: MatchLogger,
        human_id: Optional[str] = None,
    ) -> None:
        self.phase: Phase = Phase.LOBBY
        self.clock = MatchClock()
        self.countdown: int = 0
        self.entities: list[Entity] = entities
        self.schedule = schedule
        self.logger = logger
        self.chat = ChatLog()
        self.human_id = human_id

        self.pending: dict[str, PendingAction] = {}
        self.event_queue: list[BattleEvent] = []
        self.current_event: Optional[BattleEvent] = None
        self.active_hazard: Optional[HazardKind] = None
        self.warning: Optional[HazardWarning] = None
        self.winner_id: Optional[str] = None
        self.feedback: Optional[str] = None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def day(self) -> int:
        return self.clock.day

    @property
    def by_id(self) -> dict[str, Entity]:
        return {e.id: e for e in self.entities}

    def get(self, entity_id: Optional[str]) -> Optional[Entity]:
        if entity_id is None:
            return None
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def living(self) -> list[Entity]:
        return [e for e in self.entities if e.is_alive]

    def alive_count(self) -> int:
        return sum(1 for e in self.entities if e.is_alive)

    def pending_for(self, entity_id: str) -> PendingAction:
        return self.pending.get(entity_id, NO_ACTION)

    def log(self, kind: str, text: str, involved_ids: Optional[list[str]] = None, **data) -> LogEntry:
        return self.logger.log(kind, text, involved_ids, day=self.day, **data)

    def snapshot(self) -> "MatchSnapshot":
        return MatchSnapshot(
            phase=self.phase,
            day=self.day,
            countdown=self.countdown,
            entities=tuple(EntityView.of(e) for e in self.entities),
            logs=tuple(self.logger.entries),
            messages=tuple(self.chat.messages),
            current_event=self.current_event,
            active_hazard=self.active_hazard,
            warning=self.warning,
            winner_id=self.winner_id,
            feedback=self.feedback,
        )


@dataclass(frozen=True)
class EntityView:
    id: str
    name: str
    is_autonomous: bool
    hp: int
    hunger: int
    fatigue: int
    status: str
    cooldowns: tuple[tuple[str, int], ...]
    last_action: Optional[str]
    kills: int
    has_weapon: bool
    inventory: tuple[str, ...]
    damage_bonus: int
    ignore_fatigue: bool

    @classmethod
    def of(cls, entity: Entity) -> "EntityView":
        cd = entity.cooldowns
        return cls(
            id=entity.id,
            name=entity.name,
            is_autonomous=entity.is_autonomous,
            hp=entity.hp,
            hunger=entity.hunger,
            fatigue=entity.fatigue,
            status=entity.status.value,
            cooldowns=(("eat", cd.eat), ("rest", cd.rest), ("run", cd.run), ("shoot", cd.shoot)),
            last_action=entity.last_action,
            kills=entity.kills,
            has_weapon=entity.has_weapon,
            inventory=tuple(entity.inventory),
            damage_bonus=entity.buffs.damage_bonus,
            ignore_fatigue=entity.buffs.ignore_fatigue,
        )


@dataclass(frozen=True)
class MatchSnapshot:
    """What rendering and audio collaborators are allowed to see."""

    phase: Phase
    day: int
    countdown: int
    entities: tuple[EntityView, ...]
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)
    messages: tuple[ChatMessage, ...] = field(default_factory=tuple)
    current_event: Optional[BattleEvent] = None
    active_hazard: Optional[HazardKind] = None
    warning: Optional[HazardWarning] = None
    winner_id: Optional[str] = None
    feedback: Optional[str] = None

    def entity(self, entity_id: str) -> Optional[EntityView]:
        for view in self.entities:
            if view.id == entity_id:
                return view
        return None

    @property
    def alive_ids(self) -> list[str]:
        return [v.id for v in self.entities if v.status != "DEAD"]
