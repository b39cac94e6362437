"""Dynamic weight-change model for children (Hall et al. 2013).

Fat-free mass and fat mass evolve as

    dFFM/dt = (p (I - E) + G) / rhoFFM
    dFM/dt  = ((1 - p) (I - E) - G) / rhoFM

where I is energy intake, E energy expenditure, G the growth forcing and p the
Forbes partition of the energy imbalance. E is the closed-form solution of the
implicit balance that includes the cost of tissue synthesis and adaptive
thermogenesis relative to a reference intake computed from reference children
of the same age, sex and BMI category.
"""

from __future__ import annotations
from typing import Mapping, Optional, Sequence, Tuple, Union
import numpy as np
import structlog

from ..config.constants import (
    DELTA_H,
    DELTA_MIN,
    DELTA_P,
    FFM_MAINTENANCE,
    FFM_SYNTHESIS,
    FM_MAINTENANCE,
    FM_SYNTHESIS,
    FORBES_C,
    MODEL_TYPE,
    RHO_FFM_INTERCEPT,
    RHO_FFM_SLOPE,
    RHO_FM_KCAL_KG,
    THERMIC_FACTOR,
)
from ..contracts.types import IntakeSpec, LogisticIntake, TableIntake
from ..data_structures.trajectory import SimulationTrajectory
from ..domain.parameters import CoefficientOverride, resolve_parameters
from ..domain.population import Population
from ..domain.reference import ReferenceCurves
from ..solver.rk4 import RK4Solver
from .base import BodyCompositionModel
from .intake import build_intake_model

logger = structlog.get_logger()

ArrayLike = Union[Sequence[float], np.ndarray]


def general_ode(t: np.ndarray,
                A: np.ndarray, B: np.ndarray, D: np.ndarray,
                tA: np.ndarray, tB: np.ndarray, tD: np.ndarray,
                tauA: np.ndarray, tauB: np.ndarray, tauD: np.ndarray) -> np.ndarray:
    """Exponential decay plus two Gaussian bumps in age [years]."""
    return (A * np.exp(-(t - tA) / tauA)
            + B * np.exp(-0.5 * ((t - tB) / tauB) ** 2)
            + D * np.exp(-0.5 * ((t - tD) / tauD) ** 2))


def rho_ffm(ffm: np.ndarray) -> np.ndarray:
    """Energy density of fat-free mass [kcal/kg]."""
    return RHO_FFM_SLOPE * ffm + RHO_FFM_INTERCEPT


def partition(ffm: np.ndarray, fm: np.ndarray) -> np.ndarray:
    """Fraction of an energy imbalance routed to fat-free mass."""
    c = FORBES_C * rho_ffm(ffm) / RHO_FM_KCAL_KG
    return c / (c + fm)


class ChildWeightModel(BodyCompositionModel):
    """Children's body-composition model for a population of individuals.

    Args:
        population: Ages, sex weights, BMI categories and initial composition
        intake: Measured table or logistic intake curve
        dt: Integration step [days]
        validate: Check physiological ranges of the inputs
        coefficients: Overrides of the sex-specific coefficient table
        check_state: Raise on negative or non-finite mass after a step
    """

    def __init__(
        self,
        population: Population,
        intake: IntakeSpec,
        dt: float = 1.0,
        validate: bool = False,
        coefficients: Optional[Mapping[str, CoefficientOverride]] = None,
        check_state: bool = True,
    ):
        if validate:
            population.check_ranges()
        self.population = population
        self.intake_spec = intake
        self.validate = validate
        self.solver = RK4Solver(dt=dt, check_state=check_state)
        self.params = resolve_parameters(population.sex, coefficients)
        self.reference = ReferenceCurves(population.sex, population.bmi_category)
        self.intake_model = build_intake_model(
            intake,
            nind=population.nind,
            start_age=float(population.age[0]),
            dt=self.solver.dt,
            validate=validate,
        )

    @classmethod
    def from_intake_table(
        cls,
        age: ArrayLike,
        sex: ArrayLike,
        bmi_category: ArrayLike,
        ffm: ArrayLike,
        fm: ArrayLike,
        intake_table: ArrayLike,
        dt: float = 1.0,
        validate: bool = False,
        **kwargs,
    ) -> "ChildWeightModel":
        """Build a model from measured intake, one row per day and one column per individual."""
        population = Population.from_arrays(age, sex, bmi_category, ffm, fm)
        return cls(population, TableIntake(np.asarray(intake_table, dtype=float)), dt=dt,
                   validate=validate, **kwargs)

    @classmethod
    def from_logistic(
        cls,
        age: ArrayLike,
        sex: ArrayLike,
        bmi_category: ArrayLike,
        ffm: ArrayLike,
        fm: ArrayLike,
        K: float,
        Q: float,
        A: float,
        B: float,
        nu: float,
        C: float,
        dt: float = 1.0,
        validate: bool = False,
        **kwargs,
    ) -> "ChildWeightModel":
        """Build a model whose intake follows a generalised logistic curve in age."""
        population = Population.from_arrays(age, sex, bmi_category, ffm, fm)
        spec = LogisticIntake(K=K, Q=Q, A=A, B=B, nu=nu, C=C)
        return cls(population, spec, dt=dt, validate=validate, **kwargs)

    @property
    def name(self) -> str:
        return "hall_children"

    @property
    def model_type(self) -> str:
        return MODEL_TYPE

    @property
    def nind(self) -> int:
        return self.population.nind

    @property
    def dt(self) -> float:
        return self.solver.dt

    @property
    def correct_values(self) -> bool:
        # Any failed check raises, so a constructed model always reports True.
        return True

    # Forcing terms

    def growth_dynamic(self, t: np.ndarray) -> np.ndarray:
        return general_ode(t, *self.params.growth_terms())

    def growth_impact(self, t: np.ndarray) -> np.ndarray:
        return general_ode(t, *self.params.growth_impact_terms())

    def eb_impact(self, t: np.ndarray) -> np.ndarray:
        return general_ode(t, *self.params.eb_terms())

    def delta(self, t: np.ndarray) -> np.ndarray:
        """Physical activity coefficient, declining sigmoidally with age."""
        p = self.params
        return DELTA_MIN + (p.deltamax - DELTA_MIN) * (1.0 / (1.0 + (t / DELTA_P) ** DELTA_H))

    # Reference child

    def ffm_reference(self, t: np.ndarray) -> np.ndarray:
        return self.reference.ffm(t)

    def fm_reference(self, t: np.ndarray) -> np.ndarray:
        return self.reference.fm(t)

    def intake(self, t: np.ndarray) -> np.ndarray:
        """Energy intake [kcal/day] at age ``t``."""
        return self.intake_model(t)

    def intake_reference(self, t: np.ndarray) -> np.ndarray:
        """Intake that keeps a reference child on its reference trajectory."""
        t = np.asarray(t, dtype=float)
        eb = self.eb_impact(t)
        ffm_ref = self.ffm_reference(t)
        fm_ref = self.fm_reference(t)
        delta = self.delta(t)
        growth = self.growth_dynamic(t)
        p = partition(ffm_ref, fm_ref)
        rho = rho_ffm(ffm_ref)
        return (eb + self.params.K
                + (FFM_MAINTENANCE + delta) * ffm_ref + (FM_MAINTENANCE + delta) * fm_ref
                + FFM_SYNTHESIS / rho * (p * eb + growth)
                + FM_SYNTHESIS / RHO_FM_KCAL_KG * ((1.0 - p) * eb - growth))

    def expenditure(self, t: np.ndarray, ffm: np.ndarray, fm: np.ndarray,
                    intake: Optional[np.ndarray] = None) -> np.ndarray:
        """Total energy expenditure [kcal/day].

        Args:
            t: Age [years]
            ffm: Fat-free mass [kg]
            fm: Fat mass [kg]
            intake: Intake at ``t`` if already evaluated
        """
        t = np.asarray(t, dtype=float)
        if intake is None:
            intake = self.intake(t)
        delta = self.delta(t)
        delta_intake = intake - self.intake_reference(t)
        p = partition(ffm, fm)
        rho = rho_ffm(ffm)
        growth = self.growth_dynamic(t)
        synthesis = FFM_SYNTHESIS / rho * p + FM_SYNTHESIS / RHO_FM_KCAL_KG * (1.0 - p)
        expend = (self.params.K
                  + (FFM_MAINTENANCE + delta) * ffm + (FM_MAINTENANCE + delta) * fm
                  + THERMIC_FACTOR * delta_intake
                  + synthesis * intake
                  + growth * (FFM_SYNTHESIS / rho - FM_SYNTHESIS / RHO_FM_KCAL_KG))
        return expend / (1.0 + synthesis)

    def derivatives(self, t: np.ndarray, ffm: np.ndarray,
                    fm: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        t = np.asarray(t, dtype=float)
        ffm = np.asarray(ffm, dtype=float)
        fm = np.asarray(fm, dtype=float)
        intake = self.intake(t)
        imbalance = intake - self.expenditure(t, ffm, fm, intake=intake)
        p = partition(ffm, fm)
        growth = self.growth_dynamic(t)
        dffm = (p * imbalance + growth) / rho_ffm(ffm)
        dfm = ((1.0 - p) * imbalance - growth) / RHO_FM_KCAL_KG
        return dffm, dfm

    def simulate(self, days: float) -> SimulationTrajectory:
        """Run the RK4 integration for ``days`` days.

        Raises:
            SolverError: If days is negative
            IntakeIndexOutOfRange: If the intake table is too short for the run
            NonPhysicalState: If a mass becomes negative or non-finite
        """
        nsims = self.solver.n_steps(days)
        self.intake_model.check_horizon(nsims)

        log = logger.bind(model=self.name, nind=self.nind)
        log.info("Simulation started", days=days, dt=self.dt, nsims=nsims,
                 intake=type(self.intake_spec).__name__)
        trajectory = self.solver.solve(
            self.derivatives,
            self.population.age,
            self.population.ffm,
            self.population.fm,
            days,
            correct_values=self.correct_values,
            model_type=self.model_type,
        )
        log.info("Simulation completed", runtime_s=self.solver.convergence_info.get("runtime_s"))
        return trajectory
