"""Configuration: model constants, pydantic settings and their loading."""

from . import constants
from .load import default_config, load_config
from .model import (
    AppConfig,
    IntakeConfig,
    ModelConfig,
    PopulationConfig,
    RunConfig,
    SolverConfig,
)
from .validation import validate_config

__all__ = [
    "constants",
    "AppConfig",
    "RunConfig",
    "PopulationConfig",
    "IntakeConfig",
    "SolverConfig",
    "ModelConfig",
    "load_config",
    "default_config",
    "validate_config",
]
