"""Result data structures."""

from .trajectory import SimulationTrajectory

__all__ = ["SimulationTrajectory"]
