"""Battle events emitted by night resolution, and the hazard calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from numpy.random import Generator

from arena_sim.core.config import (
    GAS_MAX_DAY,
    GAS_MIN_DAY,
    HAZARD_WARNING_LEAD_DAYS,
    MONSTER_INTERVAL_MAX,
    MONSTER_INTERVAL_MIN,
    MONSTER_START_DAY,
    MONSTER_START_JITTER,
    VOLCANO_MAX_DAY,
    VOLCANO_MIN_DAY,
    ZONE_SHRINK_DAYS,
)


# =============================================================================
# Battle events - data only, one class per kind
# =============================================================================

@dataclass(frozen=True)
class BattleEvent:
    """Base record. ``kind`` is fixed per subclass.

    ``event_id`` is stamped by the resolution pass that emits the event.
    """

    kind: ClassVar[str] = "EVENT"

    source_id: str
    description: str
    event_id: str = field(default="", compare=False)

    @property
    def target_id(self) -> Optional[str]:
        return None

    @property
    def value(self) -> Optional[int]:
        return None

    @property
    def is_miss(self) -> bool:
        return False

    @property
    def is_blocked(self) -> bool:
        return False

    @property
    def involved_ids(self) -> list[str]:
        return [i for i in (self.source_id, self.target_id) if i]


@dataclass(frozen=True)
class StrikeEvent(BattleEvent):
    """Shared shape of ATTACK and SHOOT outcomes."""

    target: str = ""
    damage: int = 0
    missed: bool = False
    blocked: bool = False

    @property
    def target_id(self) -> Optional[str]:
        return self.target

    @property
    def value(self) -> Optional[int]:
        return None if self.missed else self.damage

    @property
    def is_miss(self) -> bool:
        return self.missed

    @property
    def is_blocked(self) -> bool:
        return self.blocked


@dataclass(frozen=True)
class AttackEvent(StrikeEvent):
    kind: ClassVar[str] = "ATTACK"


@dataclass(frozen=True)
class ShootEvent(StrikeEvent):
    kind: ClassVar[str] = "SHOOT"

    @property
    def involved_ids(self) -> list[str]:
        # the shooter stays hidden in the log
        return [self.target] if self.target else []


@dataclass(frozen=True)
class RunEvent(BattleEvent):
    """Evasion outcome. On success ``item_index`` is 1-based or None."""

    kind: ClassVar[str] = "RUN"

    escaped: bool = True
    item_index: Optional[int] = None
    fail_damage: int = 0

    @property
    def value(self) -> Optional[int]:
        return self.item_index if self.escaped else self.fail_damage

    @property
    def is_miss(self) -> bool:
        return not self.escaped


@dataclass(frozen=True)
class CorneredEvent(BattleEvent):
    """RUN downgraded to DEFEND during the final duel."""

    kind: ClassVar[str] = "DEFEND"


@dataclass(frozen=True)
class RecoveryEvent(BattleEvent):
    """EAT or REST; ``amount`` restores the matching resource at impact."""

    amount: int = 0

    @property
    def value(self) -> Optional[int]:
        return self.amount


@dataclass(frozen=True)
class EatEvent(RecoveryEvent):
    kind: ClassVar[str] = "EAT"


@dataclass(frozen=True)
class RestEvent(RecoveryEvent):
    kind: ClassVar[str] = "REST"


@dataclass(frozen=True)
class HealEvent(BattleEvent):
    kind: ClassVar[str] = "HEAL"

    target: str = ""
    amount: int = 0

    @property
    def target_id(self) -> Optional[str]:
        return self.target

    @property
    def value(self) -> Optional[int]:
        return self.amount


@dataclass(frozen=True)
class DeathEvent(BattleEvent):
    kind: ClassVar[str] = "DEATH"


@dataclass(frozen=True)
class StunEvent(BattleEvent):
    kind: ClassVar[str] = "STUN"


@dataclass(frozen=True)
class StunRecoveryEvent(BattleEvent):
    kind: ClassVar[str] = "STUN_RECOVERY"


# =============================================================================
# Hazards
# =============================================================================

class HazardKind(str, Enum):
    ERUPTION = "ERUPTION"
    GAS = "GAS"
    MONSTER = "MONSTER"
    ZONE_SHRINK = "ZONE_SHRINK"


_WARNING_TEXT: dict[HazardKind, tuple[str, str]] = {
    HazardKind.ERUPTION: ("SEISMIC ACTIVITY", "Eruption expected tomorrow. Only RUN escapes the lava."),
    HazardKind.GAS: ("TOXIC FRONT", "Acid storm tomorrow. Only DEFEND protects your lungs."),
    HazardKind.MONSTER: ("TRACKS IN THE MUD", "Monster hunt tomorrow. Only DEFEND keeps you hidden."),
    HazardKind.ZONE_SHRINK: ("PERIMETER CLOSING", "The zone shrinks tomorrow. RUN or die."),
}


@dataclass(frozen=True)
class HazardWarning:
    kind: HazardKind
    day: int
    title: str
    subtitle: str


@dataclass
class HazardSchedule:
    """Per-match hazard calendar. Written only at day-advance."""

    eruption_day: int
    gas_day: int
    next_monster_day: int
    zone_shrink_days: tuple[int, ...] = ZONE_SHRINK_DAYS

    @classmethod
    def roll(cls, rng: Generator) -> "HazardSchedule":
        return cls(
            eruption_day=int(rng.integers(VOLCANO_MIN_DAY, VOLCANO_MAX_DAY + 1)),
            gas_day=int(rng.integers(GAS_MIN_DAY, GAS_MAX_DAY + 1)),
            next_monster_day=MONSTER_START_DAY + int(rng.integers(0, MONSTER_START_JITTER + 1)),
        )

    def is_zone_shrink(self, day: int) -> bool:
        return day in self.zone_shrink_days

    def is_monster(self, day: int) -> bool:
        return day == self.next_monster_day and not self.is_zone_shrink(day)

    def mass_hazard(self, day: int) -> Optional[HazardKind]:
        """Night-replacing hazard for ``day``; eruption > gas > monster."""
        if day == self.eruption_day:
            return HazardKind.ERUPTION
        if day == self.gas_day:
            return HazardKind.GAS
        if self.is_monster(day):
            return HazardKind.MONSTER
        return None

    def hazards_on(self, day: int) -> list[HazardKind]:
        kinds = []
        if day == self.eruption_day:
            kinds.append(HazardKind.ERUPTION)
        if day == self.gas_day:
            kinds.append(HazardKind.GAS)
        if self.is_monster(day):
            kinds.append(HazardKind.MONSTER)
        if self.is_zone_shrink(day):
            kinds.append(HazardKind.ZONE_SHRINK)
        return kinds

    def roll_next_monster(self, day: int, rng: Generator) -> int:
        self.next_monster_day = day + int(rng.integers(MONSTER_INTERVAL_MIN, MONSTER_INTERVAL_MAX + 1))
        return self.next_monster_day

    def warning_for(self, day: int) -> Optional[HazardWarning]:
        """Advance notice issued on ``day`` for a hazard due shortly after."""
        upcoming = self.hazards_on(day + HAZARD_WARNING_LEAD_DAYS)
        if not upcoming:
            return None
        kind = upcoming[0]
        title, subtitle = _WARNING_TEXT[kind]
        return HazardWarning(kind=kind, day=day + HAZARD_WARNING_LEAD_DAYS, title=title, subtitle=subtitle)
