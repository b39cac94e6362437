"""Base interface for body-composition models."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Tuple
import numpy as np

from ..data_structures.trajectory import SimulationTrajectory


class BodyCompositionModel(ABC):
    """Base interface for population body-composition models.

    A model owns an immutable population and parameter set and exposes the
    right-hand side of its ODE system so that any fixed-step integrator can
    drive it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this model."""
        pass

    @property
    @abstractmethod
    def model_type(self) -> str:
        """Model family reported in the trajectory."""
        pass

    @property
    @abstractmethod
    def nind(self) -> int:
        """Number of individuals simulated."""
        pass

    @abstractmethod
    def derivatives(self,
                    t: np.ndarray,
                    ffm: np.ndarray,
                    fm: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Compute dFFM/dt and dFM/dt [kg/day].

        Args:
            t: Age of each individual [years]
            ffm: Fat-free mass [kg]
            fm: Fat mass [kg]

        Returns:
            Tuple of (dFFM, dFM) arrays of length nind
        """
        pass

    @abstractmethod
    def simulate(self, days: float) -> SimulationTrajectory:
        """Integrate the model forward for ``days`` days."""
        pass

    def get_state_names(self) -> List[str]:
        return ["fat_free_mass", "fat_mass"]
