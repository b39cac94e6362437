"""Error definitions for the CBW package."""

from __future__ import annotations
from typing import Dict, Optional


class CBWError(Exception):
    """Base exception for all CBW package errors."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(CBWError):
    """Configuration-related errors."""
    pass


class ValidationError(ConfigError):
    """Input validation errors."""
    pass


class DimensionMismatch(ValidationError):
    """Input vectors or intake table of inconsistent length."""
    pass


class InvalidBmiCategory(ValidationError):
    """BMI category outside {1, 2, 3, 4}."""
    pass


class OutOfRangeInput(ValidationError):
    """Physiological value outside the supported range (checked when validation is requested)."""
    pass


class ModelError(CBWError):
    """Model execution errors."""
    pass


class IntakeIndexOutOfRange(ModelError):
    """Table-mode day index resolves outside the supplied intake table."""
    pass


class NonPhysicalState(ModelError):
    """Negative or non-finite fat-free or fat mass after an integration step."""
    pass


class SolverError(CBWError):
    """Integrator setup errors."""
    pass
