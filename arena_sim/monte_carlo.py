"""Monte Carlo analysis: play N matches with different seeds, aggregate statistics."""

from __future__ import annotations

import csv
import os
import statistics
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class RunResult:
    """Summary of a single match."""
    seed: int
    final_day: int
    winner: str
    winner_is_human: bool
    winner_kills: int
    winner_hp: int
    survivors: int
    total_deaths: int
    zone_deaths: int
    hazard_deaths: int
    first_blood_day: int  # first night with a death, or -1
    pistol_day: int       # day the pistol dropped, or -1
    dominant_action: str
    elapsed_seconds: float


def stat_line(label: str, values: list[float], fmt: str = ".1f") -> str:
    if not values:
        return f"  {label}: no data"
    mn = min(values)
    mx = max(values)
    avg = statistics.mean(values)
    med = statistics.median(values)
    std = statistics.stdev(values) if len(values) > 1 else 0
    return f"  {label:<30s}  mean={avg:{fmt}}  median={med:{fmt}}  std={std:{fmt}}  min={mn:{fmt}}  max={mx:{fmt}}"


def run_single(seed: int, players: Optional[list[str]] = None, max_days: int = 300) -> RunResult:
    """Play one match to the end and return its summary."""
    from arena_sim.core.config import ZONE_SHRINK_DAYS
    from arena_sim.simulation.engine import MatchEngine

    engine = MatchEngine(seed=seed, human_autopilot=True)
    engine.logger.verbosity = -1

    state = engine.start(players or ["Player"])

    t0 = time.time()
    engine.run_to_completion(max_days)
    elapsed = time.time() - t0

    snaps = engine.metrics.snapshots
    winner = state.get(state.winner_id)

    first_blood = next((s.day for s in snaps if s.deaths > 0), -1)
    pistol_day = next((s.day for s in snaps if s.weapon_holder), -1)
    zone_deaths = sum(s.deaths for s in snaps if s.day in ZONE_SHRINK_DAYS)
    hazard_deaths = sum(s.deaths for s in snaps if s.hazard)

    totals: dict[str, int] = {}
    for s in snaps:
        for name, count in s.action_counts.items():
            totals[name] = totals.get(name, 0) + count
    dominant = max(totals, key=totals.get) if totals else "NONE"

    return RunResult(
        seed=seed,
        final_day=state.day,
        winner=winner.name if winner else "",
        winner_is_human=bool(winner and not winner.is_autonomous),
        winner_kills=winner.kills if winner else 0,
        winner_hp=winner.hp if winner else 0,
        survivors=state.alive_count(),
        total_deaths=engine.metrics.total_deaths,
        zone_deaths=zone_deaths,
        hazard_deaths=hazard_deaths,
        first_blood_day=first_blood,
        pistol_day=pistol_day,
        dominant_action=dominant,
        elapsed_seconds=elapsed,
    )


def monte_carlo(
    n_runs: int = 20,
    players: Optional[list[str]] = None,
    max_days: int = 300,
    output_dir: str = "results/monte_carlo",
) -> list[RunResult]:
    """Run N matches with seeds drawn from a fixed generator and report aggregate stats."""

    os.makedirs(output_dir, exist_ok=True)
    results: list[RunResult] = []
    rng = np.random.default_rng(0)
    seeds = [int(s) for s in rng.integers(0, 100_000, size=n_runs)]

    print(f"=== Monte Carlo Arena ===")
    print(f"Runs: {n_runs} | Max days/run: {max_days}")
    print(f"Seeds: {seeds[:5]}{'...' if n_runs > 5 else ''}")
    print()

    total_t0 = time.time()

    for i, seed in enumerate(seeds):
        t0 = time.time()
        result = run_single(seed, players, max_days)
        results.append(result)
        elapsed = time.time() - t0
        status = result.winner or "NO WINNER"
        print(
            f"  Run {i+1:>3}/{n_runs} | seed={seed:>5} | "
            f"day={result.final_day:>3} | "
            f"deaths={result.total_deaths:>3} | "
            f"kills={result.winner_kills:>2} | "
            f"{status} | {elapsed:.1f}s"
        )

    total_elapsed = time.time() - total_t0
    print(f"\nAll {n_runs} runs completed in {total_elapsed:.1f}s "
          f"({total_elapsed/max(1, n_runs):.1f}s avg)")

    # ── Aggregate Statistics ──────────────────────────────────────────
    print("\n" + "=" * 70)
    print("AGGREGATE RESULTS")
    print("=" * 70)

    print("\nMATCH LENGTH")
    print(stat_line("Final day", [r.final_day for r in results]))
    first_bloods = [r.first_blood_day for r in results if r.first_blood_day >= 0]
    print(stat_line("First blood day", first_bloods))

    print("\nDEATHS")
    print(stat_line("Total deaths", [r.total_deaths for r in results]))
    print(stat_line("Zone-shrink deaths", [r.zone_deaths for r in results]))
    print(stat_line("Hazard-night deaths", [r.hazard_deaths for r in results]))

    print("\nWINNERS")
    print(stat_line("Winner kills", [r.winner_kills for r in results if r.winner]))
    print(stat_line("Winner HP", [r.winner_hp for r in results if r.winner]))
    no_winner = sum(1 for r in results if not r.winner)
    human_wins = sum(1 for r in results if r.winner_is_human)
    print(f"  Matches without a winner: {no_winner}/{n_runs} ({no_winner/max(1, n_runs)*100:.0f}%)")
    print(f"  Human wins: {human_wins}/{n_runs} ({human_wins/max(1, n_runs)*100:.0f}%)")

    armed = [r.pistol_day for r in results if r.pistol_day >= 0]
    if armed:
        print(f"  Pistol dropped: {len(armed)}/{n_runs} runs "
              f"(avg day {statistics.mean(armed):.0f}, range {min(armed)}-{max(armed)})")
    else:
        print(f"  Pistol dropped: 0/{n_runs} runs")

    print("\nDOMINANT ACTION")
    act_freq: dict[str, int] = {}
    for r in results:
        act_freq[r.dominant_action] = act_freq.get(r.dominant_action, 0) + 1
    for act, count in sorted(act_freq.items(), key=lambda x: -x[1]):
        print(f"  '{act}': {count}/{n_runs} runs ({count/max(1, n_runs)*100:.0f}%)")

    # ── Export CSV ────────────────────────────────────────────────────
    csv_path = os.path.join(output_dir, "monte_carlo_results.csv")
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "seed", "final_day", "winner", "winner_is_human", "winner_kills",
            "winner_hp", "survivors", "deaths", "zone_deaths", "hazard_deaths",
            "first_blood_day", "pistol_day", "dominant_action", "elapsed_s",
        ])
        for r in results:
            writer.writerow([
                r.seed, r.final_day, r.winner, int(r.winner_is_human),
                r.winner_kills, r.winner_hp, r.survivors, r.total_deaths,
                r.zone_deaths, r.hazard_deaths, r.first_blood_day,
                r.pistol_day, r.dominant_action, f"{r.elapsed_seconds:.2f}",
            ])
    print(f"\nResults exported to {csv_path}")

    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Monte Carlo arena simulation")
    parser.add_argument("--runs", type=int, default=20, help="Number of matches")
    parser.add_argument("--players", nargs="+", default=["Player"], help="Human display names")
    parser.add_argument("--max-days", type=int, default=300, help="Safety cap on match length")
    parser.add_argument("--output-dir", type=str, default="results/monte_carlo")
    args = parser.parse_args()

    monte_carlo(
        n_runs=args.runs,
        players=args.players,
        max_days=args.max_days,
        output_dir=args.output_dir,
    )
