"""
Tests for damage rolls, phase modifiers and DEFEND mitigation.
"""

import pytest

from arena_sim.combat import damage
from arena_sim.core.config import (
    DAMAGE_MAX,
    DAMAGE_MIN,
    DEFEND_MITIGATION_CEILING,
    DEFEND_MITIGATION_FLOOR,
    PISTOL_DAMAGE_MAX,
    PISTOL_DAMAGE_MIN,
)


class TestRolls:
    """Inclusive integer ranges."""

    def test_melee_range(self, rng):
        rolls = {damage.roll_melee(rng) for _ in range(500)}
        assert min(rolls) == DAMAGE_MIN
        assert max(rolls) == DAMAGE_MAX

    def test_ranged_range(self, rng):
        rolls = [damage.roll_ranged(rng) for _ in range(500)]
        assert all(PISTOL_DAMAGE_MIN <= r <= PISTOL_DAMAGE_MAX for r in rolls)


class TestPhaseModifiers:
    def test_critical_multiplier(self):
        assert damage.critical_multiplier(6) == 1.0
        assert damage.critical_multiplier(5) == pytest.approx(1.2)
        assert damage.critical_multiplier(1) == pytest.approx(1.2)

    def test_run_disabled(self):
        assert not damage.run_disabled(3)
        assert damage.run_disabled(2)


class TestMitigation:
    """Monotonic in fatigue, inside the floor/ceiling band, never negative."""

    def test_band_edges(self):
        assert damage.mitigation_fraction(0) == pytest.approx(DEFEND_MITIGATION_FLOOR)
        assert damage.mitigation_fraction(100) == pytest.approx(DEFEND_MITIGATION_CEILING)

    def test_monotonic_and_bounded(self):
        fractions = [damage.mitigation_fraction(f) for f in range(0, 101)]
        assert all(a <= b for a, b in zip(fractions, fractions[1:]))
        assert all(DEFEND_MITIGATION_FLOOR <= f <= DEFEND_MITIGATION_CEILING for f in fractions)

    def test_mitigated_damage_monotonic(self):
        hits = [damage.compute_damage(40, defender_fatigue=f) for f in range(0, 101, 10)]
        assert all(a >= b for a, b in zip(hits, hits[1:]))
        assert all(h >= 0 for h in hits)


class TestComputeDamage:
    """Multiply first, then add flat bonuses, then mitigate."""

    def test_plain(self):
        assert damage.compute_damage(35) == 35

    def test_critical_then_bonuses(self):
        # 35 * 1.2 = 42, + 15 sharpening, + 5 zone
        assert damage.compute_damage(35, multiplier=1.2, flat_bonus=15, zone_bonus=5) == 62

    def test_mitigation_applies_to_the_whole_hit(self):
        # (30 + 10) halved at zero fatigue
        assert damage.compute_damage(30, zone_bonus=10, defender_fatigue=0) == 20

    def test_never_negative(self):
        assert damage.compute_damage(0, flat_bonus=-50) == 0
