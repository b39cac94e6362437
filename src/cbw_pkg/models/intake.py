"""Energy intake models.

Intake is resolved once per model from an ``IntakeSpec``: either a measured
day-by-individual table or a generalised logistic curve. Both evaluate on the
shared simulation clock, i.e. the first entry of the age vector.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import math
import numpy as np

from ..config.constants import DAYS_PER_YEAR, STEP_TOLERANCE
from ..contracts.errors import (
    DimensionMismatch,
    IntakeIndexOutOfRange,
    OutOfRangeInput,
    ValidationError,
)
from ..contracts.types import IntakeSpec, LogisticIntake, TableIntake


class IntakeModel(ABC):
    """Daily energy intake [kcal/day] for every individual at a simulated age."""

    def __init__(self, nind: int):
        self.nind = nind

    @abstractmethod
    def __call__(self, t: np.ndarray) -> np.ndarray:
        """Evaluate intake at the age vector ``t`` [years]."""
        pass

    def check_horizon(self, nsims: int) -> None:
        """Raise if a run of ``nsims`` steps cannot be served."""
        return None


class LogisticIntakeModel(IntakeModel):
    """Richards curve A + (K - A) / (C + Q exp(-B t))^(1/nu), t in years."""

    def __init__(self, spec: LogisticIntake, nind: int):
        super().__init__(nind)
        if spec.nu == 0:
            raise ValidationError("Logistic intake exponent nu must be non-zero", {"nu": spec.nu})
        self.spec = spec

    def value(self, t: float) -> float:
        s = self.spec
        base = s.C + s.Q * math.exp(-s.B * t)
        if base <= 0:
            raise ValidationError(
                f"Logistic intake denominator C + Q exp(-B t) must be positive, got {base} at age {t}",
                {"age": t, "base": base},
            )
        return s.A + (s.K - s.A) / base ** (1.0 / s.nu)

    def __call__(self, t: np.ndarray) -> np.ndarray:
        t0 = float(np.atleast_1d(t)[0])
        return np.full(self.nind, self.value(t0))


class TableIntakeModel(IntakeModel):
    """Measured intake; row ``floor(365 * (t - start_age) / dt)`` applies at age ``t``."""

    def __init__(self, spec: TableIntake, start_age: float, dt: float, nind: int, validate: bool = False):
        super().__init__(nind)
        table = np.array(spec.table, dtype=float)
        if table.ndim == 1 and nind == 1:
            table = table.reshape(-1, 1)
        if table.ndim != 2 or table.shape[1] != nind:
            raise DimensionMismatch(
                f"Intake table must have shape (days, {nind}), got {table.shape}",
                {"shape": table.shape, "nind": nind},
            )
        if table.shape[0] == 0:
            raise DimensionMismatch("Intake table has no rows", {"shape": table.shape})
        if not np.all(np.isfinite(table)):
            raise ValidationError("Intake table contains non-finite values")
        if validate and (table < 0).any():
            raise OutOfRangeInput(
                "Intake table contains negative values",
                {"rows": np.unique(np.argwhere(table < 0)[:, 0]).tolist()},
            )
        table.setflags(write=False)
        self.table = table
        self.start_age = float(start_age)
        self.dt = float(dt)

    @property
    def n_rows(self) -> int:
        return self.table.shape[0]

    def day_index(self, t: np.ndarray) -> int:
        """Table row for age ``t``; step boundaries resolve to the new row."""
        t0 = float(np.atleast_1d(t)[0])
        return int(math.floor(DAYS_PER_YEAR * (t0 - self.start_age) / self.dt + STEP_TOLERANCE))

    def __call__(self, t: np.ndarray) -> np.ndarray:
        index = self.day_index(t)
        if index < 0 or index >= self.n_rows:
            raise IntakeIndexOutOfRange(
                f"Intake day index {index} outside table with {self.n_rows} rows",
                {"index": index, "n_rows": self.n_rows},
            )
        return self.table[index].copy()

    def check_horizon(self, nsims: int) -> None:
        # Step i reads rows i - 1 (first three stages) and i (last stage).
        if nsims + 1 > self.n_rows:
            raise IntakeIndexOutOfRange(
                f"Simulation of {nsims} steps needs {nsims + 1} intake rows, table has {self.n_rows}",
                {"index": nsims, "n_rows": self.n_rows},
            )


def build_intake_model(
    spec: IntakeSpec,
    nind: int,
    start_age: float,
    dt: float,
    validate: bool = False,
) -> IntakeModel:
    """Resolve an intake specification into an evaluator."""
    if isinstance(spec, LogisticIntake):
        return LogisticIntakeModel(spec, nind)
    if isinstance(spec, TableIntake):
        return TableIntakeModel(spec, start_age, dt, nind, validate=validate)
    raise ValidationError(f"Unsupported intake specification: {type(spec).__name__}")
