"""Sex-specific physiological constants of the child weight model.

Every constant is stored as a (male, female) pair and resolved per individual as
``male * (1 - sex) + female * sex``, so fractional sex weights blend linearly.
Values follow Hall et al. (2013) and Katan et al. (2016).
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union
import numpy as np
import structlog

from ..contracts.errors import ConfigError

logger = structlog.get_logger()

SEX_COEFFICIENTS: Dict[str, Tuple[float, float]] = {
    # Linear reference curves (kept for reference, not used by the ODE)
    "ffm_beta0": (2.9, 3.8),
    "ffm_beta1": (2.9, 2.3),
    "fm_beta0": (1.2, 0.56),
    "fm_beta1": (0.41, 0.74),
    # Energy expenditure
    "K": (800.0, 700.0),
    "deltamax": (19.0, 17.0),
    # Growth forcing (Growth_dynamic)
    "A": (3.2, 2.3),
    "B": (9.6, 8.4),
    "D": (10.1, 1.1),
    "tA": (4.7, 4.5),         # years
    "tB": (12.5, 11.7),       # years
    "tD": (15.0, 16.2),       # years
    "tauA": (2.5, 1.0),       # years
    "tauB": (1.0, 0.9),       # years
    "tauD": (1.5, 0.7),       # years
    # Energy-balance forcing (EB_impact)
    "A_EB": (7.2, 16.5),
    "B_EB": (30.0, 47.0),
    "D_EB": (21.0, 41.0),
    "tA_EB": (5.6, 4.8),
    "tB_EB": (9.8, 9.1),
    "tD_EB": (15.0, 13.5),
    "tauA_EB": (15.0, 7.0),
    "tauB_EB": (1.5, 1.0),
    "tauD_EB": (2.0, 1.5),
    # Secondary growth impact (Growth_impact)
    "A1": (3.2, 2.3),
    "B1": (9.6, 8.4),
    "D1": (10.0, 1.1),
    "tA1": (4.7, 4.5),
    "tB1": (12.5, 11.7),
    "tD1": (15.0, 16.0),
    "tauA1": (1.0, 1.0),
    "tauB1": (0.94, 0.94),
    "tauD1": (0.69, 0.69),
}

CoefficientOverride = Union[float, Tuple[float, float], Sequence[float]]


@dataclass(frozen=True)
class ChildParameters:
    """Per-individual physiological constants, each an array of length nind."""

    ffm_beta0: np.ndarray
    ffm_beta1: np.ndarray
    fm_beta0: np.ndarray
    fm_beta1: np.ndarray
    K: np.ndarray
    deltamax: np.ndarray
    A: np.ndarray
    B: np.ndarray
    D: np.ndarray
    tA: np.ndarray
    tB: np.ndarray
    tD: np.ndarray
    tauA: np.ndarray
    tauB: np.ndarray
    tauD: np.ndarray
    A_EB: np.ndarray
    B_EB: np.ndarray
    D_EB: np.ndarray
    tA_EB: np.ndarray
    tB_EB: np.ndarray
    tD_EB: np.ndarray
    tauA_EB: np.ndarray
    tauB_EB: np.ndarray
    tauD_EB: np.ndarray
    A1: np.ndarray
    B1: np.ndarray
    D1: np.ndarray
    tA1: np.ndarray
    tB1: np.ndarray
    tD1: np.ndarray
    tauA1: np.ndarray
    tauB1: np.ndarray
    tauD1: np.ndarray

    @property
    def nind(self) -> int:
        return len(self.K)

    def growth_terms(self) -> Tuple[np.ndarray, ...]:
        """Parameter group of the growth forcing term."""
        return (self.A, self.B, self.D, self.tA, self.tB, self.tD,
                self.tauA, self.tauB, self.tauD)

    def eb_terms(self) -> Tuple[np.ndarray, ...]:
        """Parameter group of the energy-balance forcing term."""
        return (self.A_EB, self.B_EB, self.D_EB, self.tA_EB, self.tB_EB, self.tD_EB,
                self.tauA_EB, self.tauB_EB, self.tauD_EB)

    def growth_impact_terms(self) -> Tuple[np.ndarray, ...]:
        """Parameter group of the secondary growth impact term."""
        return (self.A1, self.B1, self.D1, self.tA1, self.tB1, self.tD1,
                self.tauA1, self.tauB1, self.tauD1)

    def to_dict(self) -> Dict[str, np.ndarray]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _as_pair(name: str, value: CoefficientOverride) -> Tuple[float, float]:
    if np.isscalar(value):
        return float(value), float(value)
    pair = tuple(float(v) for v in value)
    if len(pair) != 2:
        raise ConfigError(
            f"Coefficient override for {name} must be a scalar or a (male, female) pair",
            {"name": name, "value": value},
        )
    return pair


def resolve_parameters(
    sex: Union[Sequence[float], np.ndarray],
    coefficients: Optional[Mapping[str, CoefficientOverride]] = None,
) -> ChildParameters:
    """Blend male and female constants for every individual.

    Args:
        sex: Sex weights (0 = male, 1 = female); not range-checked here
        coefficients: Optional overrides of entries in SEX_COEFFICIENTS, either
            a scalar applied to both sexes or a (male, female) pair

    Returns:
        Immutable parameter set with one value per individual

    Raises:
        ConfigError: If an override names an unknown coefficient
    """
    table = dict(SEX_COEFFICIENTS)
    if coefficients:
        unknown = set(coefficients) - set(table)
        if unknown:
            raise ConfigError(
                f"Unknown model coefficients: {sorted(unknown)}",
                {"unknown": sorted(unknown)},
            )
        for name, value in coefficients.items():
            table[name] = _as_pair(name, value)
        logger.debug("Applied coefficient overrides", names=sorted(coefficients))

    sex = np.asarray(sex, dtype=float)
    values = {}
    for name, (male, female) in table.items():
        blended = male * (1.0 - sex) + female * sex
        blended.setflags(write=False)
        values[name] = blended
    return ChildParameters(**values)
