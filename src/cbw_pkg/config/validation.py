"""Configuration validation utilities."""

from typing import List
import structlog

from ..contracts.errors import ValidationError
from .constants import MAX_AGE_YEARS, MIN_AGE_YEARS
from .model import AppConfig

logger = structlog.get_logger()

LARGE_STEP_DAYS = 7.0


def validate_config(config: AppConfig) -> None:
    """Validate configuration for common issues and conflicts.

    Args:
        config: Configuration to validate

    Raises:
        ValidationError: If configuration is invalid
    """
    errors: List[str] = []
    warnings: List[str] = []

    _validate_population(config, errors, warnings)
    _validate_intake(config, errors)
    _validate_solver(config, warnings)

    for warning in warnings:
        logger.warning(warning)

    if errors:
        raise ValidationError(
            f"Configuration validation failed: {'; '.join(errors)}"
        )


def _validate_population(config: AppConfig, errors: List[str], warnings: List[str]) -> None:
    """Check population vectors are consistent."""
    lengths = config.population.lengths()
    if len(set(lengths.values())) != 1:
        errors.append(f"Population vectors have inconsistent lengths: {lengths}")
    if lengths["age"] == 0:
        errors.append("Population must contain at least one individual")

    outside = [a for a in config.population.age if not MIN_AGE_YEARS <= a <= MAX_AGE_YEARS]
    if outside:
        warnings.append(
            f"Ages {outside} lie outside the {MIN_AGE_YEARS:g}-{MAX_AGE_YEARS:g} year reference range"
        )


def _validate_intake(config: AppConfig, errors: List[str]) -> None:
    """Check the selected intake mode has its data."""
    intake = config.intake
    if intake.mode == "logistic":
        missing = intake.missing_logistic_coefficients()
        if missing:
            errors.append(f"Logistic intake is missing coefficients: {missing}")
        elif intake.nu == 0:
            errors.append("Logistic intake exponent nu must be non-zero")
        return

    if intake.table is None and intake.table_csv is None:
        errors.append("Table intake requires 'table' or 'table_csv'")
    elif intake.table is not None:
        n_individuals = len(config.population.age)
        widths = {len(row) for row in intake.table}
        if widths != {n_individuals}:
            errors.append(
                f"Intake table rows must have {n_individuals} columns, got {sorted(widths)}"
            )


def _validate_solver(config: AppConfig, warnings: List[str]) -> None:
    """Validate solver configuration."""
    solver = config.solver

    if solver.dt > LARGE_STEP_DAYS:
        warnings.append(
            f"dt={solver.dt} days is large for daily intake dynamics"
        )

    if solver.days < solver.dt:
        warnings.append(
            f"days={solver.days} is shorter than dt={solver.dt}; only the initial state is returned"
        )

    if not solver.check_state:
        warnings.append("Non-physical state checks are disabled")
