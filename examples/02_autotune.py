#!/usr/bin/env python3
"""Autotune - Random search for altitude PID gains.

Runs the autotuner on a background worker, prints progress while it runs,
then applies the best gains and compares them against the configured ones.
Press Ctrl+C to cancel; the best gains found so far are still reported.

Usage:
    python examples/02_autotune.py --samples 100 --seed 42
    python examples/02_autotune.py --wind 0.0
"""

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from controllers.config import load_config_from_yaml
from simulation import run_simulation
from tuning import AutotuneWorker, TuningState, apply_gains
from validation.metrics import print_metrics


def main():
    parser = argparse.ArgumentParser(description='Random-search autotune of altitude PID gains')
    parser.add_argument('--samples', type=int, default=None,
                        help='Number of random gain sets to evaluate (default: from config)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for gains and wind')
    parser.add_argument('--wind', type=float, default=None,
                        help='Wind magnitude in m/s^2 (default: from config)')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to YAML config file')
    parser.add_argument('--verbose', action='store_true',
                        help='Log every improvement')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    config = load_config_from_yaml(args.config)
    env = config.environment
    if args.wind is not None:
        env = replace(env, disturbance_magnitude=args.wind)

    print("\n" + "="*60)
    print("Altitude PID Autotune")
    print("="*60)
    print(f"Wind: {env.disturbance_magnitude:.2f} m/s^2, seed: {args.seed}")
    print()

    worker = AutotuneWorker(
        env,
        sample_count=args.samples,
        rng=args.seed,
        config=config.tuning,
    )
    worker.start()

    try:
        while worker.is_running():
            status = worker.get_status()
            if status is None:
                time.sleep(0.1)
                continue
            if status.state == TuningState.IN_PROGRESS and status.best is not None:
                print(f"  {status.message}  best score: {status.best_score:.2f}")
    except KeyboardInterrupt:
        print("\nCancelling...")
        worker.cancel()

    final = worker.wait()
    print()
    print(final.message)

    if worker.result is None:
        print("No gains to apply.")
        return

    tuned = apply_gains(worker.result)
    print(f"Best gains: kp={tuned.kp:.3f}, ki={tuned.ki:.3f}, kd={tuned.kd:.3f}")

    # Compare configured and tuned gains on the same wind sequence
    baseline = run_simulation(config.gains, env, rng=0)
    improved = run_simulation(tuned, env, rng=0)
    print_metrics(baseline.metrics, name="Configured gains")
    print_metrics(improved.metrics, name="Tuned gains")


if __name__ == "__main__":
    main()
