"""Reference body-composition curves for children aged 2-18.

Fat-free and fat mass of reference children by age, sex and BMI category,
compiled from Fomon et al. (1982), Haschke (1989), Ellis et al. (2000) and
Deurenberg et al. (1991). Ages 2-4 are not stratified by BMI category.

Tables are indexed ``[age - 2, category - 1, sex]`` with sex 0 = male and
1 = female; values are in kg.
"""

from __future__ import annotations
from typing import Sequence, Union
import numpy as np

from ..config.constants import (
    BMI_CATEGORIES,
    N_REFERENCE_AGES,
    REFERENCE_MAX_AGE,
    REFERENCE_MIN_AGE,
)
from ..contracts.errors import InvalidBmiCategory

ArrayLike = Union[Sequence[float], np.ndarray]


def _table(rows) -> np.ndarray:
    table = np.array(rows, dtype=float)
    table.setflags(write=False)
    return table


#                 underweight          normal               overweight           obese
FFM_REFERENCE_TABLE = _table([
    [(10.134, 9.477), (10.134, 9.477), (10.134, 9.477), (10.134, 9.477)],   # 2
    [(12.099, 11.494), (12.099, 11.494), (12.099, 11.494), (12.099, 11.494)],  # 3
    [(14.0, 13.2), (14.0, 13.2), (14.0, 13.2), (14.0, 13.2)],               # 4
    [(13.54, 12.45), (14.85, 13.78), (16.21, 15.71), (18.37, 18.81)],       # 5
    [(15.68, 12.69), (16.09, 14.95), (17.97, 17.54), (21.24, 20.16)],       # 6
    [(18.85, 14.42), (17.84, 17.13), (20.14, 20.15), (24.47, 23.31)],       # 7
    [(19.08, 15.98), (19.98, 18.51), (23.46, 22.86), (28.09, 26.66)],       # 8
    [(20.23, 19.52), (22.49, 20.97), (25.96, 25.51), (30.82, 30.43)],       # 9
    [(20.37, 20.12), (24.89, 24.04), (29.20, 28.86), (34.86, 32.19)],       # 10
    [(21.89, 25.15), (26.92, 27.03), (32.76, 34.25), (37.89, 38.15)],       # 11
    [(25.60, 26.63), (29.91, 30.50), (37.16, 36.51), (43.62, 42.63)],       # 12
    [(30.52, 26.47), (34.82, 34.59), (43.11, 40.20), (47.03, 45.31)],       # 13
    [(31.05, 29.63), (39.96, 36.49), (45.87, 41.33), (52.54, 46.58)],       # 14
    [(36.28, 37.05), (43.25, 38.77), (49.94, 42.44), (55.78, 47.64)],       # 15
    [(41.04, 34.60), (45.41, 38.45), (53.66, 44.30), (59.45, 49.83)],       # 16
    [(44.75, 36.61), (47.55, 39.81), (55.59, 44.43), (61.07, 48.59)],       # 17
    [(41.59, 36.38), (48.67, 41.01), (56.70, 46.73), (62.52, 49.89)],       # 18
])

FM_REFERENCE_TABLE = _table([
    [(2.456, 2.433), (2.456, 2.433), (2.456, 2.433), (2.456, 2.433)],       # 2
    [(2.576, 2.606), (2.576, 2.606), (2.576, 2.606), (2.576, 2.606)],       # 3
    [(2.7, 2.8), (2.7, 2.8), (2.7, 2.8), (2.7, 2.8)],                       # 4
    [(2.05, 2.33), (3.10, 3.72), (4.13, 5.19), (5.60, 7.58)],               # 5
    [(2.13, 2.33), (3.23, 3.80), (4.43, 5.67), (6.91, 8.27)],               # 6
    [(2.36, 2.38), (3.49, 4.20), (5.08, 6.50), (8.05, 9.60)],               # 7
    [(2.49, 2.61), (3.85, 4.41), (5.75, 7.35), (9.80, 11.61)],              # 8
    [(2.49, 3.36), (4.25, 5.00), (6.41, 8.39), (10.41, 14.26)],             # 9
    [(2.58, 3.28), (4.50, 5.69), (7.64, 9.61), (13.15, 15.76)],             # 10
    [(2.90, 4.16), (4.89, 6.44), (8.92, 12.13), (14.56, 19.70)],            # 11
    [(2.80, 4.45), (5.52, 7.57), (10.43, 13.45), (18.72, 21.80)],           # 12
    [(3.65, 3.63), (6.86, 9.41), (12.58, 15.76), (21.70, 25.10)],           # 13
    [(3.09, 5.11), (7.72, 10.38), (14.07, 16.88), (23.93, 29.30)],          # 14
    [(4.33, 5.79), (8.71, 11.07), (16.44, 17.06), (26.63, 28.89)],          # 15
    [(4.86, 5.32), (9.22, 10.74), (17.43, 18.07), (28.70, 30.17)],          # 16
    [(5.29, 5.68), (10.04, 10.78), (18.74, 17.86), (29.78, 30.29)],         # 17
    [(4.65, 6.74), (10.05, 11.19), (18.89, 19.14), (34.51, 29.10)],         # 18
])

_LAST_ROW = N_REFERENCE_AGES - 1


def blend_reference_table(table: np.ndarray, sex: ArrayLike, bmi_category: ArrayLike) -> np.ndarray:
    """Select each individual's category column and blend male/female values.

    Args:
        table: Reference table of shape (17, 4, 2)
        sex: Sex weights (0 = male, 1 = female, fractional values blend)
        bmi_category: BMI categories 1-4

    Returns:
        Per-individual reference values by age row, shape (17, nind)

    Raises:
        InvalidBmiCategory: If a category is outside {1, 2, 3, 4}
    """
    sex = np.asarray(sex, dtype=float)
    categories = np.asarray(bmi_category, dtype=float)
    invalid = ~np.isin(categories, BMI_CATEGORIES)
    if invalid.any():
        raise InvalidBmiCategory(
            f"BMI category must be one of {BMI_CATEGORIES}",
            {"individuals": np.flatnonzero(invalid).tolist(), "values": categories[invalid].tolist()},
        )
    column = categories.astype(int) - 1
    selected = table[:, column, :]                      # (17, nind, 2)
    return selected[:, :, 0] * (1.0 - sex) + selected[:, :, 1] * sex


def interpolate_reference(rows: np.ndarray, age: ArrayLike) -> np.ndarray:
    """Piecewise-linear lookup of per-individual reference rows at the given ages.

    Ages at or above 18 return the age-18 row; ages below 2 use the 2-3 bracket
    with the fractional part of the age, without extrapolation.
    """
    age = np.asarray(age, dtype=float)
    whole = np.floor(age)
    jmin = np.clip(whole, REFERENCE_MIN_AGE, REFERENCE_MAX_AGE - 1).astype(int) - REFERENCE_MIN_AGE
    jmax = np.minimum(jmin + 1, _LAST_ROW)
    frac = age - whole

    individuals = np.arange(rows.shape[1])
    lower = rows[jmin, individuals]
    upper = rows[jmax, individuals]
    values = lower + frac * (upper - lower)
    return np.where(age >= REFERENCE_MAX_AGE, rows[_LAST_ROW, individuals], values)


class ReferenceCurves:
    """Age-interpolated reference fat-free and fat mass for a population.

    The sex/category blend is computed once at construction; each lookup is a
    direct index into the blended rows.
    """

    def __init__(self, sex: ArrayLike, bmi_category: ArrayLike):
        self.sex = np.asarray(sex, dtype=float)
        self.bmi_category = np.asarray(bmi_category).astype(int)
        self._ffm_rows = blend_reference_table(FFM_REFERENCE_TABLE, self.sex, self.bmi_category)
        self._fm_rows = blend_reference_table(FM_REFERENCE_TABLE, self.sex, self.bmi_category)

    @property
    def nind(self) -> int:
        return self._ffm_rows.shape[1]

    @property
    def ffm_rows(self) -> np.ndarray:
        """Blended fat-free mass rows, shape (17, nind)."""
        return self._ffm_rows.copy()

    @property
    def fm_rows(self) -> np.ndarray:
        """Blended fat mass rows, shape (17, nind)."""
        return self._fm_rows.copy()

    def ffm(self, age: ArrayLike) -> np.ndarray:
        """Reference fat-free mass [kg] at the given ages."""
        return interpolate_reference(self._ffm_rows, age)

    def fm(self, age: ArrayLike) -> np.ndarray:
        """Reference fat mass [kg] at the given ages."""
        return interpolate_reference(self._fm_rows, age)
