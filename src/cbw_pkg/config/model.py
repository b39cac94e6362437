"""Configuration data models."""

from __future__ import annotations
from typing import Dict, List, Optional, Union
from pathlib import Path
import numpy as np
import pandas as pd
from pydantic import BaseModel, Field, field_validator

from ..contracts.errors import ConfigError
from ..contracts.types import IntakeSpec, LogisticIntake, TableIntake
from .constants import BMI_CATEGORIES


class PopulationConfig(BaseModel):
    """Individuals to simulate, one list entry per child."""

    age: List[float] = Field(default_factory=lambda: [10.0], description="Age [years]")
    sex: List[float] = Field(default_factory=lambda: [0.0], description="0 = male, 1 = female")
    bmi_category: List[int] = Field(default_factory=lambda: [2], description="1-4: under, normal, over, obese")
    ffm: List[float] = Field(default_factory=lambda: [25.0], description="Initial fat-free mass [kg]")
    fm: List[float] = Field(default_factory=lambda: [8.0], description="Initial fat mass [kg]")

    @field_validator("bmi_category")
    @classmethod
    def validate_bmi_category(cls, v: List[int]) -> List[int]:
        invalid = [c for c in v if c not in BMI_CATEGORIES]
        if invalid:
            raise ValueError(f"bmi_category values must be in {BMI_CATEGORIES}, got {invalid}")
        return v

    def lengths(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in ("age", "sex", "bmi_category", "ffm", "fm")}


class IntakeConfig(BaseModel):
    """Energy intake: logistic curve coefficients or a measured table."""

    mode: str = "logistic"
    K: Optional[float] = 2000.0
    Q: Optional[float] = 1.0
    A: Optional[float] = 500.0
    B: Optional[float] = 0.01
    nu: Optional[float] = 1.0
    C: float = 1.0
    table: Optional[List[List[float]]] = Field(default=None, description="Rows = days, columns = individuals")
    table_csv: Optional[str] = Field(default=None, description="CSV file with one column per individual")

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        valid_modes = {"logistic", "table"}
        if v not in valid_modes:
            raise ValueError(f"mode must be one of {valid_modes}")
        return v

    def missing_logistic_coefficients(self) -> List[str]:
        return [name for name in ("K", "Q", "A", "B", "nu") if getattr(self, name) is None]

    def to_spec(self, base_dir: Optional[Path] = None) -> IntakeSpec:
        """Build the intake specification used by the model.

        Args:
            base_dir: Directory that relative ``table_csv`` paths resolve against

        Raises:
            ConfigError: If the selected mode lacks its data
        """
        if self.mode == "logistic":
            missing = self.missing_logistic_coefficients()
            if missing:
                raise ConfigError(f"Logistic intake is missing coefficients: {missing}")
            return LogisticIntake(K=self.K, Q=self.Q, A=self.A, B=self.B, nu=self.nu, C=self.C)

        if self.table is not None:
            return TableIntake(np.asarray(self.table, dtype=float))
        if self.table_csv is not None:
            path = Path(self.table_csv)
            if base_dir is not None and not path.is_absolute():
                path = Path(base_dir) / path
            if not path.exists():
                raise ConfigError(f"Intake table not found: {path}")
            frame = pd.read_csv(path)
            return TableIntake(frame.to_numpy(dtype=float))
        raise ConfigError("Table intake requires 'table' or 'table_csv'")


class SolverConfig(BaseModel):
    """RK4 integration settings."""

    dt: float = Field(1.0, gt=0, description="Step size [days]")
    days: float = Field(365.0, ge=0, description="Simulated horizon [days]")
    check_state: bool = True


class ModelConfig(BaseModel):
    """Model coefficient overrides, as a scalar or a [male, female] pair."""

    coefficients: Dict[str, Union[float, List[float]]] = Field(default_factory=dict)


class RunConfig(BaseModel):
    """Run execution configuration."""

    validate_inputs: bool = False
    output: Optional[str] = Field(default=None, description="CSV path for the long-format trajectory")


class AppConfig(BaseModel):
    """Complete application configuration."""

    run: RunConfig = Field(default_factory=RunConfig)
    population: PopulationConfig = Field(default_factory=PopulationConfig)
    intake: IntakeConfig = Field(default_factory=IntakeConfig)
    solver: SolverConfig = Field(default_factory=SolverConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)

    @classmethod
    def from_toml_file(cls, path: Union[Path, str]) -> "AppConfig":
        """Load configuration from TOML file."""
        try:
            import tomllib
        except ImportError:
            import tomli as tomllib

        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data)
