"""Base classes for numerical solvers."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Any, Callable, Optional, Tuple
import math
import numpy as np

from ..config.constants import STEP_TOLERANCE
from ..contracts.errors import SolverError

# dFFM, dFM = derivative(age, ffm, fm)
Derivative = Callable[[np.ndarray, np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]]


class SolverBase(ABC):
    """Base class for all numerical solvers."""

    def __init__(self, name: str):
        self.name = name
        self.last_result: Optional[Any] = None
        self.convergence_info: Dict[str, Any] = {}

    @abstractmethod
    def solve(self, *args, **kwargs) -> Any:
        """Solve the numerical problem."""
        pass

    def get_convergence_info(self) -> Dict[str, Any]:
        """Get information about the last solve."""
        return self.convergence_info.copy()


class FixedStepSolverBase(SolverBase):
    """Base class for fixed-step ODE solvers over a population."""

    def __init__(self, name: str, dt: float):
        super().__init__(name)
        if not math.isfinite(dt) or dt <= 0:
            raise SolverError(f"Time step must be positive and finite, got {dt}", {"dt": dt})
        self.dt = float(dt)

    def n_steps(self, days: float) -> int:
        """Number of full steps that fit in ``days``.

        A small tolerance absorbs representation error so that e.g. 365 days
        at dt = 0.1 gives 3650 steps.
        """
        if not math.isfinite(days) or days < 0:
            raise SolverError(f"Simulated days must be non-negative and finite, got {days}", {"days": days})
        return int(math.floor(days / self.dt + STEP_TOLERANCE))
