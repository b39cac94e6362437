"""Body-composition models."""

from .base import BodyCompositionModel
from .child import ChildWeightModel, general_ode, partition, rho_ffm
from .intake import (
    IntakeModel,
    LogisticIntakeModel,
    TableIntakeModel,
    build_intake_model,
)

__all__ = [
    'BodyCompositionModel',
    'ChildWeightModel',
    'general_ode',
    'partition',
    'rho_ffm',
    'IntakeModel',
    'LogisticIntakeModel',
    'TableIntakeModel',
    'build_intake_model',
]
