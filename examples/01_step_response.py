#!/usr/bin/env python3
"""Step Response - Altitude PID Demo

This example demonstrates:
- Loading the altitude configuration from YAML
- Running one closed-loop simulation
- Extracting rise time, overshoot and settling time
- Plotting altitude and thrust

Expected output: The vehicle climbs from 0 to 10 m in under a second,
overshoots, and settles within a few seconds despite the wind.

Usage:
    python examples/01_step_response.py
"""

import sys
import matplotlib.pyplot as plt
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from controllers.config import load_config_from_yaml, print_current_config
from simulation import run_simulation
from validation.metrics import SETTLING_THRESHOLD, print_metrics


def main():
    print("=" * 60)
    print("Altitude Step Response")
    print("=" * 60)
    print()

    # 1. Load configuration
    config = load_config_from_yaml()
    print_current_config(config)

    env = config.environment

    # 2. Run simulation (seeded so the wind is repeatable)
    print(f"Running {env.horizon}s simulation ({env.step_count} steps)...")
    result = run_simulation(config.gains, env, rng=0)
    print_metrics(result.metrics, name="Altitude PID")

    df = result.to_dataframe()
    print(f"Final altitude: {df['position'].iloc[-1]:.3f} m "
          f"(target: {env.setpoint:.1f} m)")
    print(f"Peak thrust:    {df['control_output'].max():.1f} N")
    print()

    # 3. Visualization
    fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)
    fig.suptitle(
        f"Altitude PID Step Response (kp={config.gains.kp}, "
        f"ki={config.gains.ki}, kd={config.gains.kd})",
        fontsize=16, fontweight='bold',
    )

    # Plot 1: Altitude
    ax1 = axes[0]
    ax1.plot(df['time'], df['setpoint'], 'k--', label='Setpoint', linewidth=2)
    ax1.plot(df['time'], df['position'], 'b-', label='Altitude', linewidth=1.5)
    band = SETTLING_THRESHOLD * env.setpoint
    ax1.axhspan(env.setpoint - band, env.setpoint + band, color='g', alpha=0.15,
                label='2% band')
    ax1.axvline(x=result.metrics.rise_time, color='r', linestyle=':', label='Rise time')
    ax1.axvline(x=result.metrics.settling_time, color='g', linestyle=':', label='Settling time')
    ax1.set_ylabel('Altitude (m)', fontsize=12)
    ax1.set_title('Altitude: Setpoint vs Actual', fontsize=13)
    ax1.legend(loc='best', fontsize=10)
    ax1.grid(True, alpha=0.3)

    # Plot 2: Thrust (first step derivative kick dominates the scale)
    ax2 = axes[1]
    ax2.plot(df['time'].iloc[1:], df['control_output'].iloc[1:], 'r-',
             label='Thrust', linewidth=1.5)
    ax2.axhline(y=env.mass * env.gravity, color='k', linestyle='--', linewidth=1,
                label='Hover thrust')
    ax2.set_xlabel('Time (s)', fontsize=12)
    ax2.set_ylabel('Thrust (N)', fontsize=12)
    ax2.set_title('Control Output', fontsize=13)
    ax2.legend(loc='best', fontsize=10)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    print("Displaying results plot...")
    print("   - Top: Altitude (blue line should settle inside the green band)")
    print("   - Bottom: Thrust around the hover value")
    print()
    print("Next steps:")
    print("  - Try examples/02_autotune.py to search for better gains")
    print()

    plt.show()


if __name__ == "__main__":
    main()
