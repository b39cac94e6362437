"""Type definitions for model inputs."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import numpy as np


@dataclass(frozen=True)
class TableIntake:
    """Measured daily energy intake."""

    table: np.ndarray
    """Energy intake [kcal/day], shape (days, individuals); row i is day i since start"""


@dataclass(frozen=True)
class LogisticIntake:
    """Generalised logistic (Richards) intake curve shared by the whole population.

    intake(t) = A + (K - A) / (C + Q * exp(-B * t)) ** (1 / nu), with t in years.
    """

    K: float
    """Upper asymptote [kcal/day]"""

    Q: float
    """Scale of the exponential term"""

    A: float
    """Lower asymptote [kcal/day]"""

    B: float
    """Growth rate [1/year]"""

    nu: float
    """Shape exponent, must be non-zero"""

    C: float = 1.0
    """Offset inside the power term"""


IntakeSpec = Union[TableIntake, LogisticIntake]
