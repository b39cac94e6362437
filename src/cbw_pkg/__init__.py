"""Child body-weight simulation: Hall et al. dynamic model for ages 2-18."""

from .contracts.errors import CBWError
from .contracts.types import IntakeSpec, LogisticIntake, TableIntake
from .data_structures.trajectory import SimulationTrajectory
from .domain.population import Population
from .models.child import ChildWeightModel

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CBWError",
    "IntakeSpec",
    "LogisticIntake",
    "TableIntake",
    "SimulationTrajectory",
    "Population",
    "ChildWeightModel",
]
