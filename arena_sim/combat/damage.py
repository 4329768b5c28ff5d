"""Damage rolls, the late-match critical multiplier and DEFEND mitigation."""

from __future__ import annotations

import math

from numpy.random import Generator

from arena_sim.core.config import (
    CRITICAL_DAMAGE_MULTIPLIER,
    CRITICAL_PLAYER_COUNT,
    DAMAGE_MAX,
    DAMAGE_MIN,
    DEFEND_MITIGATION_CEILING,
    DEFEND_MITIGATION_FLOOR,
    FINAL_DUEL_COUNT,
    PISTOL_DAMAGE_MAX,
    PISTOL_DAMAGE_MIN,
    RESOURCE_MAX,
)


def roll(rng: Generator, low: int, high: int) -> int:
    """Inclusive integer roll."""
    return int(rng.integers(low, high + 1))


def roll_melee(rng: Generator) -> int:
    return roll(rng, DAMAGE_MIN, DAMAGE_MAX)


def roll_ranged(rng: Generator) -> int:
    return roll(rng, PISTOL_DAMAGE_MIN, PISTOL_DAMAGE_MAX)


def critical_multiplier(alive_count: int) -> float:
    return CRITICAL_DAMAGE_MULTIPLIER if alive_count <= CRITICAL_PLAYER_COUNT else 1.0


def run_disabled(alive_count: int) -> bool:
    return alive_count <= FINAL_DUEL_COUNT


def mitigation_fraction(defender_fatigue: int) -> float:
    """Share of a blow absorbed by DEFEND, rising linearly with fatigue."""
    fraction = max(0.0, min(1.0, defender_fatigue / RESOURCE_MAX))
    return DEFEND_MITIGATION_FLOOR + (DEFEND_MITIGATION_CEILING - DEFEND_MITIGATION_FLOOR) * fraction


def compute_damage(
    base: int,
    multiplier: float = 1.0,
    flat_bonus: int = 0,
    zone_bonus: int = 0,
    defender_fatigue: int | None = None,
) -> int:
    """Final integer damage.

    Order: multiply the roll by the critical multiplier, add the attacker's
    flat bonus and the zone modifier, then mitigate if the defender blocked
    (``defender_fatigue`` given). Never negative.
    """
    raw = base * multiplier + flat_bonus + zone_bonus
    if defender_fatigue is not None:
        raw *= 1.0 - mitigation_fraction(defender_fatigue)
    return max(0, math.floor(raw))
