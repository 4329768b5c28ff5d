"""Per-night data collection, match statistics and export."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from arena_sim.agents.entity import Entity, Status

if TYPE_CHECKING:
    from arena_sim.combat.actions import PendingAction


@dataclass
class DailySnapshot:
    """State of the arena after one night has fully played out."""

    day: int = 0
    alive: int = 0
    stunned: int = 0
    dead: int = 0
    deaths: int = 0
    avg_hp: float = 0.0
    avg_hunger: float = 0.0
    avg_fatigue: float = 0.0
    action_counts: dict[str, int] = field(default_factory=dict)
    hazard: str = ""
    weapon_holder: str = ""
    top_killer: str = ""
    top_kills: int = 0


class MetricsCollector:
    """Collects one snapshot per completed cycle."""

    def __init__(self) -> None:
        self.snapshots: list[DailySnapshot] = []
        self._nightly_deaths: int = 0

    def record_death(self, count: int = 1) -> None:
        self._nightly_deaths += count

    def collect_daily(
        self,
        day: int,
        entities: list[Entity],
        choices: Optional[dict[str, PendingAction]] = None,
        hazard: Optional[str] = None,
    ) -> DailySnapshot:
        """Collect all metrics for the night that closed ``day``."""
        living = [e for e in entities if e.is_alive]
        n = len(living)

        action_counts: dict[str, int] = {}
        for action in (choices or {}).values():
            name = action.kind.value
            action_counts[name] = action_counts.get(name, 0) + 1

        holder = next((e.name for e in living if e.has_weapon), "")
        killer = max(entities, key=lambda e: e.kills, default=None)

        snapshot = DailySnapshot(
            day=day,
            alive=n,
            stunned=sum(1 for e in living if e.status == Status.STUNNED),
            dead=len(entities) - n,
            deaths=self._nightly_deaths,
            avg_hp=sum(e.hp for e in living) / max(1, n),
            avg_hunger=sum(e.hunger for e in living) / max(1, n),
            avg_fatigue=sum(e.fatigue for e in living) / max(1, n),
            action_counts=action_counts,
            hazard=hazard or "",
            weapon_holder=holder,
            top_killer=killer.name if killer is not None and killer.kills > 0 else "",
            top_kills=killer.kills if killer is not None else 0,
        )
        self.snapshots.append(snapshot)
        self._nightly_deaths = 0
        return snapshot

    @property
    def total_deaths(self) -> int:
        return sum(s.deaths for s in self.snapshots)

    def export_csv(self, filepath: str) -> None:
        """Export all snapshots to CSV."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "day", "alive", "stunned", "dead", "deaths", "avg_hp",
                "avg_hunger", "avg_fatigue", "attacks", "shots", "defends",
                "runs", "eats", "rests", "heals", "hazard", "weapon_holder",
                "top_killer", "top_kills",
            ])
            for s in self.snapshots:
                counts = s.action_counts
                writer.writerow([
                    s.day, s.alive, s.stunned, s.dead, s.deaths,
                    f"{s.avg_hp:.1f}", f"{s.avg_hunger:.1f}", f"{s.avg_fatigue:.1f}",
                    counts.get("ATTACK", 0), counts.get("SHOOT", 0),
                    counts.get("DEFEND", 0), counts.get("RUN", 0),
                    counts.get("EAT", 0), counts.get("REST", 0),
                    counts.get("HEAL", 0), s.hazard, s.weapon_holder,
                    s.top_killer, s.top_kills,
                ])

    def summary_report(self, start_day: int = 0, end_day: Optional[int] = None) -> str:
        """Generate a human-readable summary of the match."""
        relevant = [
            s for s in self.snapshots
            if s.day >= start_day and (end_day is None or s.day <= end_day)
        ]
        if not relevant:
            return "No data available for the specified period."

        first = relevant[0]
        last = relevant[-1]
        total_deaths = sum(s.deaths for s in relevant)
        hazards = [s for s in relevant if s.hazard]
        bloodiest = max(relevant, key=lambda s: s.deaths)

        lines = [
            f"=== Match Summary: Day {first.day} to Day {last.day} ===",
            f"Duration: {last.day - first.day + 1} days",
            f"",
            f"Contestants alive: {first.alive + first.deaths} -> {last.alive}",
            f"  Total deaths: {total_deaths}",
            f"  Bloodiest night: day {bloodiest.day} ({bloodiest.deaths} deaths)",
            f"  Hazard nights: {len(hazards)}",
            f"",
            f"Final Vitals (survivors):",
            f"  Avg HP: {last.avg_hp:.1f}",
            f"  Avg hunger: {last.avg_hunger:.1f}/100",
            f"  Avg fatigue: {last.avg_fatigue:.1f}/100",
            f"  Stunned: {last.stunned}",
        ]
        if last.top_killer:
            lines.append(f"  Most kills: {last.top_killer} ({last.top_kills})")

        totals: dict[str, int] = {}
        for s in relevant:
            for name, count in s.action_counts.items():
                totals[name] = totals.get(name, 0) + count
        if totals:
            lines.append(f"")
            lines.append(f"Action Distribution (whole match):")
            total_actions = sum(totals.values())
            for name, count in sorted(totals.items(), key=lambda x: -x[1]):
                pct = count / max(1, total_actions) * 100
                lines.append(f"  {name}: {count} ({pct:.0f}%)")

        if hazards:
            lines.append(f"")
            lines.append(f"Hazards:")
            for s in hazards:
                lines.append(f"  Day {s.day}: {s.hazard} ({s.deaths} deaths)")

        return "\n".join(lines)
