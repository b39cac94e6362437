"""Tests for the child weight model simulation."""

import numpy as np
import pytest

from cbw_pkg.contracts.errors import (
    IntakeIndexOutOfRange,
    NonPhysicalState,
    OutOfRangeInput,
    SolverError,
)
from cbw_pkg.contracts.types import TableIntake
from cbw_pkg.models.child import ChildWeightModel


class TestModelProperties:
    def test_identity(self, single_boy_model):
        assert single_boy_model.name == "hall_children"
        assert single_boy_model.model_type == "Children"
        assert single_boy_model.nind == 1
        assert single_boy_model.dt == 1.0
        assert single_boy_model.correct_values is True

    def test_state_names(self, single_boy_model):
        assert single_boy_model.get_state_names() == ["fat_free_mass", "fat_mass"]


class TestLogisticScenario:
    def test_one_year(self, single_boy_model):
        trajectory = single_boy_model.simulate(365)

        assert trajectory.n_points == 366
        assert trajectory.time[-1] == pytest.approx(365.0)
        assert trajectory.age[0, 0] == 10.0
        assert trajectory.age[0, -1] == pytest.approx(11.0)
        assert np.isfinite(trajectory.ffm).all()
        assert np.isfinite(trajectory.fm).all()
        assert (trajectory.ffm >= 0).all()
        assert (trajectory.fm >= 0).all()
        assert trajectory.correct_values is True
        assert trajectory.model_type == "Children"

    def test_low_intake_loses_weight(self, single_boy_model):
        # About 1290 kcal/day against an expenditure near 1800 kcal/day.
        trajectory = single_boy_model.simulate(90)
        assert trajectory.body_weight[0, -1] < trajectory.body_weight[0, 0]

    def test_body_weight_is_sum(self, single_boy_model):
        trajectory = single_boy_model.simulate(30)
        np.testing.assert_allclose(trajectory.body_weight, trajectory.ffm + trajectory.fm)

    def test_zero_days(self, single_boy_model):
        trajectory = single_boy_model.simulate(0)

        assert trajectory.nsims == 0
        assert trajectory.ffm[0, 0] == 25.0
        assert trajectory.fm[0, 0] == 8.0

    def test_negative_days(self, single_boy_model):
        with pytest.raises(SolverError):
            single_boy_model.simulate(-1)

    def test_smaller_step_changes_little(self):
        kwargs = dict(age=[10.0], sex=[0.0], bmi_category=[2], ffm=[25.0], fm=[8.0],
                      K=2000.0, Q=1.0, A=500.0, B=0.01, nu=1.0, C=1.0)
        coarse = ChildWeightModel.from_logistic(dt=1.0, **kwargs).simulate(100)
        fine = ChildWeightModel.from_logistic(dt=0.5, **kwargs).simulate(100)

        assert coarse.ffm[0, -1] == pytest.approx(fine.ffm[0, -1], rel=1e-3)
        assert coarse.fm[0, -1] == pytest.approx(fine.fm[0, -1], rel=1e-3)


class TestBatchEquivalence:
    def test_batch_matches_individual_runs(self, population, logistic_spec):
        batch = ChildWeightModel(population, logistic_spec).simulate(60)

        for i in range(population.nind):
            single = ChildWeightModel.from_logistic(
                age=[population.age[i]], sex=[population.sex[i]],
                bmi_category=[population.bmi_category[i]],
                ffm=[population.ffm[i]], fm=[population.fm[i]],
                K=2000.0, Q=1.0, A=500.0, B=0.01, nu=1.0, C=1.0,
            ).simulate(60)
            np.testing.assert_allclose(batch.ffm[i], single.ffm[0], rtol=1e-12)
            np.testing.assert_allclose(batch.fm[i], single.fm[0], rtol=1e-12)


class TestTableIntake:
    def test_reference_intake_grows_child(self, constant_table):
        probe = ChildWeightModel.from_intake_table(
            age=[8.0], sex=[1.0], bmi_category=[2], ffm=[18.51], fm=[4.41],
            intake_table=constant_table(2, [1.0]),
        )
        iref = probe.intake_reference(np.array([8.0]))

        model = ChildWeightModel.from_intake_table(
            age=[8.0], sex=[1.0], bmi_category=[2], ffm=[18.51], fm=[4.41],
            intake_table=constant_table(91, iref),
        )
        trajectory = model.simulate(90)

        assert trajectory.body_weight[0, -1] > trajectory.body_weight[0, 0]

    def test_short_table_rejected_before_stepping(self, constant_table):
        model = ChildWeightModel.from_intake_table(
            age=[10.0], sex=[0.0], bmi_category=[2], ffm=[25.0], fm=[8.0],
            intake_table=constant_table(365, [1800.0]),
        )

        with pytest.raises(IntakeIndexOutOfRange) as exc_info:
            model.simulate(365)

        assert exc_info.value.details["n_rows"] == 365
        assert model.solver.last_result is None

    def test_stage_rows_follow_steps(self, constant_table):
        model = ChildWeightModel.from_intake_table(
            age=[10.0], sex=[0.0], bmi_category=[2], ffm=[25.0], fm=[8.0],
            intake_table=constant_table(366, [1800.0]),
        )
        table_model = model.intake_model
        original = table_model.day_index
        rows = []

        def recording(t):
            index = original(t)
            rows.append(index)
            return index

        table_model.day_index = recording
        model.simulate(365)

        assert len(rows) == 4 * 365
        for i in range(1, 366):
            assert rows[4 * (i - 1):4 * i] == [i - 1, i - 1, i - 1, i]

    def test_exact_table_length(self, constant_table):
        model = ChildWeightModel.from_intake_table(
            age=[10.0, 10.0], sex=[0.0, 1.0], bmi_category=[2, 2], ffm=[25.0, 24.0], fm=[8.0, 9.0],
            intake_table=constant_table(11, [1800.0, 1700.0]),
        )
        trajectory = model.simulate(10)

        assert trajectory.ffm.shape == (2, 11)

    def test_starvation_is_non_physical(self, constant_table):
        model = ChildWeightModel.from_intake_table(
            age=[10.0], sex=[0.0], bmi_category=[2], ffm=[25.0], fm=[0.5],
            intake_table=constant_table(201, [0.0]),
        )

        with pytest.raises(NonPhysicalState):
            model.simulate(200)


class TestValidateFlag:
    def test_out_of_range_age(self, logistic_spec):
        with pytest.raises(OutOfRangeInput):
            ChildWeightModel.from_logistic(
                age=[25.0], sex=[0.0], bmi_category=[2], ffm=[50.0], fm=[12.0],
                K=2000.0, Q=1.0, A=500.0, B=0.01, nu=1.0, C=1.0, validate=True,
            )

    def test_out_of_range_without_validation(self):
        model = ChildWeightModel.from_logistic(
            age=[25.0], sex=[0.0], bmi_category=[2], ffm=[50.0], fm=[12.0],
            K=2000.0, Q=1.0, A=500.0, B=0.01, nu=1.0, C=1.0,
        )
        assert model.nind == 1

    def test_negative_table_intake(self, constant_table):
        with pytest.raises(OutOfRangeInput):
            ChildWeightModel.from_intake_table(
                age=[10.0], sex=[0.0], bmi_category=[2], ffm=[25.0], fm=[8.0],
                intake_table=constant_table(5, [-10.0]), validate=True,
            )

    def test_coefficient_override(self, population):
        model = ChildWeightModel(population, TableIntake(np.ones((2, 3))),
                                 coefficients={"K": [900.0, 600.0]})
        np.testing.assert_allclose(model.params.K, [900.0, 600.0, 750.0])
