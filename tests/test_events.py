"""
Tests for battle event variants and the hazard calendar.
"""

from arena_sim.core.config import (
    GAS_MAX_DAY,
    GAS_MIN_DAY,
    MONSTER_START_DAY,
    MONSTER_START_JITTER,
    VOLCANO_MAX_DAY,
    VOLCANO_MIN_DAY,
)
from arena_sim.simulation.events import (
    AttackEvent,
    HazardKind,
    HazardSchedule,
    RunEvent,
    ShootEvent,
)


class TestEventVariants:
    """Kind discriminant plus kind-specific payload."""

    def test_strike_payload(self):
        hit = AttackEvent(source_id="A", target="B", damage=33, blocked=True, description="")
        assert hit.kind == "ATTACK"
        assert hit.target_id == "B"
        assert hit.value == 33
        assert hit.is_blocked
        assert hit.involved_ids == ["A", "B"]

    def test_miss_has_no_value(self):
        miss = AttackEvent(source_id="A", target="B", missed=True, description="")
        assert miss.is_miss
        assert miss.value is None

    def test_shooter_hidden(self):
        shot = ShootEvent(source_id="A", target="B", damage=90, description="")
        assert shot.involved_ids == ["B"]

    def test_run_value_slot(self):
        loot = RunEvent(source_id="A", escaped=True, item_index=3, description="")
        fall = RunEvent(source_id="A", escaped=False, fail_damage=10, description="")
        assert loot.value == 3
        assert not loot.is_miss
        assert fall.value == 10
        assert fall.is_miss

    def test_id_not_part_of_equality(self):
        a = AttackEvent(source_id="A", target="B", description="", event_id="ev-000001")
        b = AttackEvent(source_id="A", target="B", description="", event_id="ev-000002")
        assert a == b


class TestHazardSchedule:
    """Per-match calendar."""

    def test_roll_windows(self, rng):
        for _ in range(200):
            schedule = HazardSchedule.roll(rng)
            assert VOLCANO_MIN_DAY <= schedule.eruption_day <= VOLCANO_MAX_DAY
            assert GAS_MIN_DAY <= schedule.gas_day <= GAS_MAX_DAY
            assert MONSTER_START_DAY <= schedule.next_monster_day <= MONSTER_START_DAY + MONSTER_START_JITTER

    def test_precedence(self):
        """Eruption beats gas beats monster."""
        schedule = HazardSchedule(eruption_day=12, gas_day=12, next_monster_day=12)
        assert schedule.mass_hazard(12) == HazardKind.ERUPTION
        schedule.eruption_day = 99
        assert schedule.mass_hazard(12) == HazardKind.GAS
        schedule.gas_day = 99
        assert schedule.mass_hazard(12) == HazardKind.MONSTER
        assert schedule.mass_hazard(13) is None

    def test_monster_yields_to_zone(self):
        schedule = HazardSchedule(eruption_day=12, gas_day=5, next_monster_day=30)
        assert schedule.is_zone_shrink(30)
        assert schedule.mass_hazard(30) is None

    def test_next_monster(self, rng):
        schedule = HazardSchedule(eruption_day=12, gas_day=5, next_monster_day=31)
        for _ in range(50):
            nxt = schedule.roll_next_monster(31, rng)
            assert 32 <= nxt <= 34

    def test_warning_one_day_ahead(self):
        schedule = HazardSchedule(eruption_day=12, gas_day=5, next_monster_day=31)
        warning = schedule.warning_for(4)
        assert warning.kind == HazardKind.GAS
        assert warning.day == 5
        assert schedule.warning_for(19).kind == HazardKind.ZONE_SHRINK
        assert schedule.warning_for(7) is None
