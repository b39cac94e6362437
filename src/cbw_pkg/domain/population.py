"""Population of individuals simulated in lockstep."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Sequence, Union
import numpy as np

from ..config.constants import BMI_CATEGORIES, MAX_AGE_YEARS, MIN_AGE_YEARS
from ..contracts.errors import (
    DimensionMismatch,
    InvalidBmiCategory,
    OutOfRangeInput,
    ValidationError,
)

ArrayLike = Union[Sequence[float], np.ndarray]


def _as_vector(name: str, values: ArrayLike) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.ndim == 0:
        array = array.reshape(1)
    if array.ndim != 1:
        raise DimensionMismatch(
            f"{name} must be one-dimensional, got shape {array.shape}",
            {"name": name, "shape": array.shape},
        )
    if not np.all(np.isfinite(array)):
        raise ValidationError(f"{name} contains non-finite values", {"name": name})
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Population:
    """Invariant attributes and initial body composition of a batch of children.

    All arrays have length ``nind``. ``sex`` is a blend weight (0 = male,
    1 = female). ``bmi_category`` is 1-4 (under, normal, over, obese).
    Shapes, finiteness and categories are checked on every construction;
    physiological ranges only through ``check_ranges``.
    """

    age: np.ndarray
    sex: np.ndarray
    bmi_category: np.ndarray
    ffm: np.ndarray
    fm: np.ndarray

    def __post_init__(self):
        vectors = {}
        for name in ("age", "sex", "bmi_category", "ffm", "fm"):
            vectors[name] = _as_vector(name, getattr(self, name))
            object.__setattr__(self, name, vectors[name])

        lengths = {name: len(v) for name, v in vectors.items()}
        if len(set(lengths.values())) != 1:
            raise DimensionMismatch(
                f"Population vectors have inconsistent lengths: {lengths}",
                {"lengths": lengths},
            )
        if lengths["age"] == 0:
            raise DimensionMismatch("Population must contain at least one individual")

        invalid = ~np.isin(self.bmi_category, BMI_CATEGORIES)
        if invalid.any():
            raise InvalidBmiCategory(
                f"BMI category must be one of {BMI_CATEGORIES}",
                {
                    "individuals": np.flatnonzero(invalid).tolist(),
                    "values": self.bmi_category[invalid].tolist(),
                },
            )

    @classmethod
    def from_arrays(
        cls,
        age: ArrayLike,
        sex: ArrayLike,
        bmi_category: ArrayLike,
        ffm: ArrayLike,
        fm: ArrayLike,
        validate: bool = False,
    ) -> "Population":
        """Build a population, checking shapes and BMI categories.

        Args:
            age: Age [years]
            sex: Sex weight in [0, 1]
            bmi_category: BMI category 1-4
            ffm: Initial fat-free mass [kg]
            fm: Initial fat mass [kg]
            validate: Also check physiological ranges

        Raises:
            DimensionMismatch: If vectors differ in length or are empty
            InvalidBmiCategory: If a category is outside {1, 2, 3, 4}
            OutOfRangeInput: If validate is set and a value is out of range
        """
        population = cls(age=age, sex=sex, bmi_category=bmi_category, ffm=ffm, fm=fm)
        if validate:
            population.check_ranges()
        return population

    @property
    def nind(self) -> int:
        return len(self.age)

    @property
    def body_weight(self) -> np.ndarray:
        return self.ffm + self.fm

    def check_ranges(self) -> None:
        """Raise OutOfRangeInput for values outside the modelled physiology."""
        checks: Dict[str, np.ndarray] = {
            f"age outside [{MIN_AGE_YEARS}, {MAX_AGE_YEARS}]":
                (self.age < MIN_AGE_YEARS) | (self.age > MAX_AGE_YEARS),
            "sex outside [0, 1]": (self.sex < 0.0) | (self.sex > 1.0),
            "ffm not positive": self.ffm <= 0.0,
            "fm not positive": self.fm <= 0.0,
        }
        problems = {
            label: np.flatnonzero(mask).tolist()
            for label, mask in checks.items()
            if mask.any()
        }
        if problems:
            raise OutOfRangeInput(
                f"Population values out of range: {'; '.join(problems)}",
                problems,
            )
