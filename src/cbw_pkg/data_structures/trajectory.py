"""Simulation trajectory container."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
import numpy as np
import pandas as pd

from ..base import DataStructure
from ..config.constants import MODEL_TYPE
from ..contracts.errors import DimensionMismatch


@dataclass(frozen=True)
class SimulationTrajectory(DataStructure):
    """Population trajectory over ``nsims + 1`` time points.

    Matrices are indexed ``[individual, step]``; ``time`` is the elapsed time
    in days shared by all individuals.
    """

    time: np.ndarray
    age: np.ndarray
    ffm: np.ndarray
    fm: np.ndarray
    body_weight: np.ndarray
    correct_values: bool = True
    model_type: str = MODEL_TYPE

    def __post_init__(self):
        for name in ("time", "age", "ffm", "fm", "body_weight"):
            getattr(self, name).setflags(write=False)

    @property
    def nind(self) -> int:
        return self.ffm.shape[0]

    @property
    def n_points(self) -> int:
        return len(self.time)

    @property
    def nsims(self) -> int:
        return self.n_points - 1

    def validate(self) -> bool:
        expected = (self.nind, self.n_points)
        for name in ("age", "ffm", "fm", "body_weight"):
            shape = getattr(self, name).shape
            if shape != expected:
                raise DimensionMismatch(
                    f"Trajectory field {name} has shape {shape}, expected {expected}",
                    {"field": name, "shape": shape, "expected": expected},
                )
        return True

    def final_state(self) -> Dict[str, np.ndarray]:
        """Age and body composition of every individual at the last step."""
        return {
            "age": self.age[:, -1].copy(),
            "ffm": self.ffm[:, -1].copy(),
            "fm": self.fm[:, -1].copy(),
            "body_weight": self.body_weight[:, -1].copy(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Time": self.time,
            "Age": self.age,
            "Fat_Free_Mass": self.ffm,
            "Fat_Mass": self.fm,
            "Body_Weight": self.body_weight,
            "Correct_Values": self.correct_values,
            "Model_Type": self.model_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationTrajectory":
        trajectory = cls(
            time=np.asarray(data["Time"], dtype=float),
            age=np.asarray(data["Age"], dtype=float),
            ffm=np.asarray(data["Fat_Free_Mass"], dtype=float),
            fm=np.asarray(data["Fat_Mass"], dtype=float),
            body_weight=np.asarray(data["Body_Weight"], dtype=float),
            correct_values=bool(data.get("Correct_Values", True)),
            model_type=data.get("Model_Type", MODEL_TYPE),
        )
        trajectory.validate()
        return trajectory

    def to_dataframe(self) -> pd.DataFrame:
        """Long-format table with one row per individual and time point."""
        nind, n_points = self.nind, self.n_points
        return pd.DataFrame({
            "individual": np.repeat(np.arange(nind), n_points),
            "step": np.tile(np.arange(n_points), nind),
            "time": np.tile(self.time, nind),
            "age": self.age.ravel(),
            "ffm": self.ffm.ravel(),
            "fm": self.fm.ravel(),
            "body_weight": self.body_weight.ravel(),
        })
