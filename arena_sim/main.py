"""Entry point for a headless arena match."""

from __future__ import annotations

import argparse
import os
import time


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Arena Elimination Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--players", nargs="+", default=["Player"], help="Human display names, local player first")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--max-days", type=int, default=300, help="Safety cap on match length")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2, 3], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--log-file", type=str, default=None, help="Path to log file")
    parser.add_argument("--no-report", action="store_true", help="Skip the matplotlib report")

    args = parser.parse_args(argv)

    # Import here to allow --help without loading everything
    from arena_sim.simulation.engine import MatchEngine
    from arena_sim.viz.logger import MatchLogger

    print(f"=== Arena Elimination Simulation ===")
    print(f"Humans: {', '.join(args.players)} | Seed: {args.seed}")
    print(f"Output: {args.output_dir}")
    print()

    logger = MatchLogger(
        verbosity=args.verbosity,
        log_file=args.log_file or os.path.join(args.output_dir, "match.log"),
        stdout=(args.verbosity > 0),
    )
    # Humans have nobody at the keyboard in a headless run
    engine = MatchEngine(seed=args.seed, logger=logger, human_autopilot=True)

    state = engine.start(args.players)
    print(f"Roster: {len(state.entities)} contestants")
    print(f"Hazards: gas day {state.schedule.gas_day}, eruption day {state.schedule.eruption_day}, "
          f"first monster day {state.schedule.next_monster_day}")
    print()

    t0 = time.time()
    try:
        winner_id = engine.run_to_completion(args.max_days)
    except KeyboardInterrupt:
        print("\nMatch interrupted by user")
        engine.leave()
        winner_id = None

    elapsed = time.time() - t0
    print(f"\nMatch complete: {engine.day} days in {elapsed:.2f}s "
          f"({engine.scheduler.now_ms / 1000:.0f}s of arena time)")
    winner = state.get(winner_id)
    if winner is not None:
        print(f"Winner: {winner.name} ({winner.kills} kills, {winner.hp} HP)")
    elif engine.is_over:
        print("No survivors.")

    # Export results
    os.makedirs(args.output_dir, exist_ok=True)

    csv_path = os.path.join(args.output_dir, "metrics.csv")
    engine.metrics.export_csv(csv_path)
    print(f"Metrics exported to {csv_path}")

    if not args.no_report:
        try:
            from arena_sim.viz.dashboard import Dashboard
            Dashboard.comprehensive_report(engine.metrics, args.output_dir)
        except Exception as e:
            print(f"Could not generate plots: {e}")

    print()
    print(engine.metrics.summary_report())

    logger.close()
    print(f"\nAll results saved to {args.output_dir}/")


if __name__ == "__main__":
    main()
