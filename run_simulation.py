"""
Arena Simulation Runner
=======================
Play one full match headless and write the log, metrics and charts.

Usage:
    python run_simulation.py                              # defaults: seed 42, one human
    python run_simulation.py --seed 7 --players Ana Ben   # custom run
    python run_simulation.py --help                       # full options
"""

from __future__ import annotations

import argparse
import os
import sys
import time

# Ensure arena_sim package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def run() -> None:
    parser = argparse.ArgumentParser(
        description="Arena Elimination Simulation - Run & Visualize",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--players", nargs="+", default=["Player"], help="Human display names, local player first")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--max-days", type=int, default=300, help="Safety cap on match length")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2, 3])
    args = parser.parse_args()

    from arena_sim.core.clock import Phase
    from arena_sim.simulation.engine import MatchEngine
    from arena_sim.viz.logger import MatchLogger

    # ── Banner ──────────────────────────────────────────────────────────
    print("=" * 60)
    print("  Arena Elimination Simulation")
    print("=" * 60)
    print(f"  Humans     : {', '.join(args.players)}")
    print(f"  Seed       : {args.seed}")
    print(f"  Max days   : {args.max_days}")
    print(f"  Output     : {args.output_dir}/")
    print("=" * 60)
    print()

    # ── Initialize ──────────────────────────────────────────────────────
    engine = MatchEngine(
        seed=args.seed,
        logger=MatchLogger(
            verbosity=args.verbosity,
            log_file=os.path.join(args.output_dir, "match.log"),
            stdout=(args.verbosity > 0),
        ),
        human_autopilot=True,
    )

    print("Filling the roster and rolling the hazard calendar...")
    t0 = time.time()
    state = engine.start(args.players)
    print(f"  Done in {time.time() - t0:.2f}s")
    print(f"  Contestants : {len(state.entities)}")
    print(f"  Toxic gas   : day {state.schedule.gas_day}")
    print(f"  Eruption    : day {state.schedule.eruption_day}")
    print(f"  Monster     : from day {state.schedule.next_monster_day}")
    print()

    # ── Run match with progress ─────────────────────────────────────────
    print("Playing the match ...")
    t0 = time.time()

    try:
        while engine.phase != Phase.GAME_OVER and engine.day <= args.max_days:
            if not engine.run_day():
                break
            day = engine.day if engine.phase == Phase.GAME_OVER else engine.day - 1
            if day % 5 == 0 or engine.phase == Phase.GAME_OVER:
                elapsed = time.time() - t0
                rate = day / max(0.01, elapsed)
                print(f"  Day {day:>4}  |  Alive: {state.alive_count():>2}  |  {rate:.1f} days/s")
    except KeyboardInterrupt:
        print("\n  Interrupted by user.")
        engine.leave()

    elapsed = time.time() - t0
    print(f"\nMatch finished in {elapsed:.1f}s")
    winner = state.get(state.winner_id)
    if winner is not None:
        print(f"  Winner: {winner.name} ({winner.kills} kills)")
    elif engine.phase == Phase.GAME_OVER:
        print("  Nobody survived.")
    print()

    # ── Export data ─────────────────────────────────────────────────────
    os.makedirs(args.output_dir, exist_ok=True)
    engine.metrics.export_csv(os.path.join(args.output_dir, "metrics.csv"))
    engine.logger.close()

    # ── Print summary report ────────────────────────────────────────────
    print(engine.metrics.summary_report())
    print()

    # ── Save PNGs ───────────────────────────────────────────────────────
    try:
        from arena_sim.viz.dashboard import Dashboard
        Dashboard.comprehensive_report(engine.metrics, args.output_dir)
    except Exception as e:
        print(f"  (Could not save PNGs: {e})")


if __name__ == "__main__":
    run()
