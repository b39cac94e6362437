"""Core contracts and interfaces."""

from .errors import (
    CBWError,
    ConfigError,
    ValidationError,
    DimensionMismatch,
    InvalidBmiCategory,
    OutOfRangeInput,
    ModelError,
    IntakeIndexOutOfRange,
    NonPhysicalState,
    SolverError,
)
from .types import IntakeSpec, LogisticIntake, TableIntake

__all__ = [
    "CBWError",
    "ConfigError",
    "ValidationError",
    "DimensionMismatch",
    "InvalidBmiCategory",
    "OutOfRangeInput",
    "ModelError",
    "IntakeIndexOutOfRange",
    "NonPhysicalState",
    "SolverError",
    "IntakeSpec",
    "LogisticIntake",
    "TableIntake",
]
