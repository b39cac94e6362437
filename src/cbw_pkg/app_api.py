"""Main API facade for the CBW package.

All high-level operations used by the CLI flow through these functions:
configuration handling, model construction, simulation and summaries.
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Union
import pandas as pd
import structlog

from .config import AppConfig, default_config, load_config, validate_config
from .contracts.errors import ConfigError
from .data_structures.trajectory import SimulationTrajectory
from .domain.population import Population
from .models.child import ChildWeightModel

logger = structlog.get_logger()


def get_default_config() -> AppConfig:
    """Get default configuration.

    Returns:
        Default configuration: one 10-year-old boy of normal BMI on a
        logistic intake curve, simulated for one year at dt = 1 day
    """
    return default_config()


def load_config_from_file(path: Union[str, Path]) -> AppConfig:
    """Load and validate configuration from file.

    Args:
        path: Path to configuration file

    Returns:
        Loaded and validated configuration

    Raises:
        ConfigError: If configuration cannot be loaded or is invalid
    """
    config = load_config(path)
    validate_config(config)
    return config


def validate_configuration(config: AppConfig) -> None:
    """Validate configuration for common issues.

    Raises:
        ValidationError: If configuration has errors
    """
    validate_config(config)


def build_population(config: AppConfig) -> Population:
    """Build the population described by the configuration."""
    pop = config.population
    return Population.from_arrays(
        age=pop.age,
        sex=pop.sex,
        bmi_category=pop.bmi_category,
        ffm=pop.ffm,
        fm=pop.fm,
        validate=config.run.validate_inputs,
    )


def build_model(config: AppConfig, base_dir: Optional[Union[str, Path]] = None) -> ChildWeightModel:
    """Construct a child weight model from configuration.

    Args:
        config: Application configuration
        base_dir: Directory against which a relative intake CSV path resolves

    Returns:
        Model ready to simulate
    """
    population = build_population(config)
    intake = config.intake.to_spec(Path(base_dir) if base_dir is not None else None)
    return ChildWeightModel(
        population,
        intake,
        dt=config.solver.dt,
        validate=config.run.validate_inputs,
        coefficients=config.model.coefficients or None,
        check_state=config.solver.check_state,
    )


def run_simulation(
    config: AppConfig,
    days: Optional[float] = None,
    base_dir: Optional[Union[str, Path]] = None,
) -> SimulationTrajectory:
    """Build the configured model and simulate it.

    Args:
        config: Application configuration
        days: Horizon override; defaults to ``config.solver.days``
        base_dir: Directory against which a relative intake CSV path resolves

    Returns:
        Simulation trajectory
    """
    model = build_model(config, base_dir=base_dir)
    horizon = config.solver.days if days is None else days
    return model.simulate(horizon)


def summarize_trajectory(trajectory: SimulationTrajectory) -> pd.DataFrame:
    """Initial and final body composition per individual."""
    return pd.DataFrame({
        "individual": range(trajectory.nind),
        "age_start": trajectory.age[:, 0],
        "age_end": trajectory.age[:, -1],
        "ffm_start": trajectory.ffm[:, 0],
        "ffm_end": trajectory.ffm[:, -1],
        "fm_start": trajectory.fm[:, 0],
        "fm_end": trajectory.fm[:, -1],
        "bw_start": trajectory.body_weight[:, 0],
        "bw_end": trajectory.body_weight[:, -1],
        "bw_change": trajectory.body_weight[:, -1] - trajectory.body_weight[:, 0],
    })


def save_trajectory(trajectory: SimulationTrajectory, path: Union[str, Path]) -> Path:
    """Write the long-format trajectory to CSV.

    Raises:
        ConfigError: If the output directory does not exist
    """
    path = Path(path)
    if not path.parent.exists():
        raise ConfigError(f"Output directory does not exist: {path.parent}")
    trajectory.to_dataframe().to_csv(path, index=False)
    logger.info("Trajectory saved", path=str(path), rows=trajectory.nind * trajectory.n_points)
    return path
