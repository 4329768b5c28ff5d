"""Static matplotlib report for a finished match."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import matplotlib
matplotlib.use("Agg")  # Headless: reports are only ever written to disk
import matplotlib.pyplot as plt
import numpy as np

from arena_sim.core.config import LOCKDOWN_DAY, REPORT_DPI, ZONE_SHRINK_DAYS

if TYPE_CHECKING:
    from arena_sim.simulation.metrics import MetricsCollector

ACTION_ORDER = ["ATTACK", "SHOOT", "DEFEND", "RUN", "EAT", "REST", "HEAL", "NONE"]


class Dashboard:
    """Post-hoc plots built from a ``MetricsCollector``."""

    @staticmethod
    def _mark_calendar(ax, last_day: int) -> None:
        for day in ZONE_SHRINK_DAYS:
            if day <= last_day:
                ax.axvline(x=day, color="r", linestyle="--", alpha=0.4)
        if LOCKDOWN_DAY <= last_day:
            ax.axvspan(LOCKDOWN_DAY, last_day, alpha=0.1, color="grey", zorder=0)

    @staticmethod
    def comprehensive_report(metrics: MetricsCollector, output_dir: str) -> list[str]:
        """Generate all plots and save to output directory. Returns the paths."""
        os.makedirs(output_dir, exist_ok=True)

        snapshots = metrics.snapshots
        if not snapshots:
            return []

        days = [s.day for s in snapshots]
        last_day = days[-1]
        written: list[str] = []

        # Survivors
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(days, [s.alive for s in snapshots], "b-", linewidth=2, label="Alive")
        ax.plot(days, [s.stunned for s in snapshots], color="orange", linewidth=1.5, label="Stunned")
        ax.bar(days, [s.deaths for s in snapshots], color="r", alpha=0.4, label="Deaths")
        Dashboard._mark_calendar(ax, last_day)
        ax.set_title("Contestants Over Time")
        ax.set_xlabel("Day")
        ax.set_ylabel("Contestants")
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)
        written.append(Dashboard._save(fig, output_dir, "survivors.png"))

        # Vitals
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(days, [s.avg_hp / 2 for s in snapshots], "g-", linewidth=1.5, label="HP (half scale)")
        ax.plot(days, [s.avg_hunger for s in snapshots], color="orange", linewidth=1.5, label="Hunger")
        ax.plot(days, [s.avg_fatigue for s in snapshots], "c-", linewidth=1.5, label="Fatigue")
        Dashboard._mark_calendar(ax, last_day)
        ax.set_title("Average Vitals of Survivors")
        ax.set_xlabel("Day")
        ax.set_ylabel("Points")
        ax.set_ylim(0, 100)
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)
        written.append(Dashboard._save(fig, output_dir, "vitals.png"))

        # Action mix (stacked share per night)
        fig, ax = plt.subplots(figsize=(10, 5))
        totals = np.array([max(1, sum(s.action_counts.values())) for s in snapshots], dtype=float)
        bottom = np.zeros(len(snapshots))
        colors = plt.cm.Set2.colors
        for i, name in enumerate(ACTION_ORDER):
            share = np.array([s.action_counts.get(name, 0) for s in snapshots], dtype=float) / totals
            if not share.any():
                continue
            ax.bar(days, share, bottom=bottom, color=colors[i % len(colors)], label=name.title(), width=1.0)
            bottom += share
        ax.set_title("Action Mix per Night")
        ax.set_xlabel("Day")
        ax.set_ylabel("Share of actions")
        ax.set_ylim(0, 1)
        ax.legend(fontsize=7, loc="upper left", ncol=4)
        written.append(Dashboard._save(fig, output_dir, "action_mix.png"))

        # Killers
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.step(days, [s.top_kills for s in snapshots], "m-", where="post", linewidth=1.5)
        for s in snapshots:
            if s.hazard:
                ax.annotate(s.hazard.title(), (s.day, s.top_kills), fontsize=7, rotation=45)
        ax.set_title("Leading Kill Count")
        ax.set_xlabel("Day")
        ax.set_ylabel("Kills")
        ax.grid(True, alpha=0.3)
        written.append(Dashboard._save(fig, output_dir, "kills.png"))

        print(f"Reports saved to {output_dir}/")
        return written

    @staticmethod
    def _save(fig, output_dir: str, filename: str) -> str:
        path = os.path.join(output_dir, filename)
        fig.savefig(path, dpi=REPORT_DPI)
        plt.close(fig)
        return path
