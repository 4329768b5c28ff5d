"""
Pytest fixtures for arena tests.
"""

from __future__ import annotations

import numpy as np
import pytest

from arena_sim.agents.entity import Entity
from arena_sim.simulation.engine import MatchEngine
from arena_sim.simulation.events import HazardSchedule


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so every test is replayable."""
    return np.random.default_rng(1234)


@pytest.fixture
def quiet_schedule() -> HazardSchedule:
    """A calendar with no hazards inside the first weeks."""
    return HazardSchedule(eruption_day=999, gas_day=999, next_monster_day=999, zone_shrink_days=())


@pytest.fixture
def make_entity():
    """Factory for hand-built contestants."""

    def _make(name: str, autonomous: bool = False, **vitals) -> Entity:
        entity = Entity(name, name, is_autonomous=autonomous)
        for key, value in vitals.items():
            setattr(entity, key, value)
        return entity

    return _make


@pytest.fixture
def duel(make_entity) -> list[Entity]:
    """Two humans, nobody else."""
    return [make_entity("Alice"), make_entity("Bob")]


@pytest.fixture
def engine() -> MatchEngine:
    """A seeded engine with a full roster, day 1 open."""
    match = MatchEngine(seed=7)
    match.start(["Player"])
    return match


@pytest.fixture
def quiet_engine(quiet_schedule) -> MatchEngine:
    """Full roster, but the hazard calendar is empty."""
    match = MatchEngine(seed=7)
    match.start(["Player"])
    match.state.schedule = quiet_schedule
    return match
