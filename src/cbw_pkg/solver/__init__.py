"""Numerical solvers."""

from .base import Derivative, SolverBase, FixedStepSolverBase
from .rk4 import RK4Solver, integrate_rk4

__all__ = [
    'Derivative',
    'SolverBase',
    'FixedStepSolverBase',
    'RK4Solver',
    'integrate_rk4',
]
