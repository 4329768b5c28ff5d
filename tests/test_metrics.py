"""
Tests for per-night metrics, the summary report and the static plots.
"""

import csv
import os

import pytest

from arena_sim.agents import needs
from arena_sim.combat.actions import ActionKind, PendingAction
from arena_sim.simulation.engine import MatchEngine
from arena_sim.simulation.metrics import MetricsCollector
from arena_sim.viz.dashboard import Dashboard


@pytest.fixture
def short_match():
    """Three nights of a seeded full match."""
    engine = MatchEngine(seed=21, human_autopilot=True)
    engine.start(["Player"])
    for _ in range(3):
        engine.run_day()
    return engine


class TestMetricsCollector:
    def test_collect(self, make_entity):
        alice = make_entity("Alice", kills=2, has_weapon=True)
        bob = make_entity("Bob")
        needs.kill(bob)
        choices = {
            "Alice": PendingAction.attack("Bob"),
            "Bob": PendingAction.simple(ActionKind.DEFEND),
        }
        metrics = MetricsCollector()
        metrics.record_death()
        snap = metrics.collect_daily(4, [alice, bob], choices, hazard="GAS")

        assert (snap.alive, snap.dead, snap.deaths) == (1, 1, 1)
        assert snap.avg_hp == 200
        assert snap.action_counts == {"ATTACK": 1, "DEFEND": 1}
        assert snap.weapon_holder == "Alice"
        assert (snap.top_killer, snap.top_kills) == ("Alice", 2)
        # the death counter resets per night
        assert metrics.collect_daily(5, [alice, bob]).deaths == 0
        assert metrics.total_deaths == 1

    def test_empty_summary(self):
        assert MetricsCollector().summary_report() == "No data available for the specified period."

    def test_summary(self, short_match):
        report = short_match.metrics.summary_report()
        assert report.startswith("=== Match Summary: Day 1 to Day 3 ===")
        assert "Action Distribution" in report

    def test_csv(self, short_match, tmp_path):
        path = tmp_path / "out" / "metrics.csv"
        short_match.metrics.export_csv(str(path))

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert [int(r["day"]) for r in rows] == [1, 2, 3]
        assert all(int(r["alive"]) <= 24 for r in rows)


class TestDashboard:
    def test_report_files(self, short_match, tmp_path):
        paths = Dashboard.comprehensive_report(short_match.metrics, str(tmp_path))
        assert len(paths) == 4
        assert all(os.path.exists(p) for p in paths)

    def test_nothing_to_plot(self, tmp_path):
        assert Dashboard.comprehensive_report(MetricsCollector(), str(tmp_path)) == []
