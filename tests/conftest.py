"""Pytest configuration and fixtures."""

import sys
import tempfile
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

import numpy as np
import pytest
import structlog

from cbw_pkg.config import AppConfig
from cbw_pkg.contracts.types import LogisticIntake
from cbw_pkg.domain.population import Population
from cbw_pkg.models.child import ChildWeightModel


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI commands reconfigure structlog; restore defaults after every test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_dir():
    """Temporary directory for test artifacts."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def sample_config() -> AppConfig:
    """Sample configuration for testing."""
    return AppConfig()


@pytest.fixture
def logistic_spec() -> LogisticIntake:
    return LogisticIntake(K=2000.0, Q=1.0, A=500.0, B=0.01, nu=1.0, C=1.0)


@pytest.fixture
def population() -> Population:
    """Three children of the same age, mixed sex and BMI category."""
    return Population.from_arrays(
        age=[8.0, 8.0, 8.0],
        sex=[0.0, 1.0, 0.5],
        bmi_category=[1, 2, 4],
        ffm=[18.0, 19.5, 27.0],
        fm=[2.5, 4.4, 11.0],
    )


@pytest.fixture
def single_boy_model(logistic_spec) -> ChildWeightModel:
    """Normal-weight 10-year-old boy on the default logistic intake."""
    return ChildWeightModel.from_logistic(
        age=[10.0], sex=[0.0], bmi_category=[2], ffm=[25.0], fm=[8.0],
        K=2000.0, Q=1.0, A=500.0, B=0.01, nu=1.0, C=1.0, dt=1.0,
    )


@pytest.fixture
def sample_toml_config(temp_dir: Path) -> Path:
    """Sample TOML configuration file with two children."""
    config_content = """
[run]
validate_inputs = true

[population]
age = [6.0, 6.0]
sex = [0.0, 1.0]
bmi_category = [2, 3]
ffm = [16.0, 17.5]
fm = [3.2, 5.7]

[intake]
mode = "logistic"
K = 1900.0
Q = 1.0
A = 900.0
B = 0.2
nu = 1.0
C = 1.0

[solver]
dt = 1.0
days = 30
"""

    config_file = temp_dir / "test_config.toml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def constant_table():
    """Builder for a constant intake table of shape (rows, nind)."""
    def _build(rows: int, values) -> np.ndarray:
        return np.tile(np.asarray(values, dtype=float), (rows, 1))
    return _build
