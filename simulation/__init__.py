"""Simulation module for closed-loop altitude dynamics.

This module provides the vertical plant model and the runner that couples it
to the PID controller.
"""

from simulation.vertical_dynamics import integrate_vertical, vertical_acceleration
from simulation.simulation_runner import SimulationResult, run_simulation, simulate

__all__ = [
    "integrate_vertical",
    "vertical_acceleration",
    "SimulationResult",
    "run_simulation",
    "simulate",
]
