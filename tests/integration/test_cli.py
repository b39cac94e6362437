"""Integration tests for the Typer CLI."""

from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest
from typer.testing import CliRunner

from cbw_pkg.cli.main import app
from cbw_pkg.contracts.errors import NonPhysicalState


@pytest.fixture
def runner():
    return CliRunner()


class TestCLIBasics:
    def test_cli_help(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Child Body Weight" in result.stdout

    def test_info_command(self, runner):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "CBW Package" in result.stdout
        assert "obese" in result.stdout


class TestConfigValidation:
    def test_validate_valid_config(self, runner, sample_toml_config):
        result = runner.invoke(app, ["validate", str(sample_toml_config)])
        assert result.exit_code == 0
        assert "valid" in result.stdout

    def test_validate_nonexistent_config(self, runner):
        result = runner.invoke(app, ["validate", "nonexistent.toml"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_validate_inconsistent_config(self, runner, temp_dir: Path):
        config_file = temp_dir / "bad.toml"
        config_file.write_text("[population]\nage = [8.0, 9.0]\n")

        result = runner.invoke(app, ["validate", str(config_file)])

        assert result.exit_code == 1
        assert "inconsistent" in result.stdout


class TestSimulateCommand:
    def test_simulate_default(self, runner):
        result = runner.invoke(app, ["simulate", "--days", "30"])
        assert result.exit_code == 0
        assert "Using default configuration" in result.stdout
        assert "Simulated 30 steps for 1 individuals" in result.stdout
        assert "Body Weight Summary" in result.stdout

    def test_simulate_with_config_and_output(self, runner, sample_toml_config, temp_dir: Path):
        output = temp_dir / "trajectory.csv"
        result = runner.invoke(app, [
            "simulate", "--config", str(sample_toml_config), "--output", str(output),
        ])

        assert result.exit_code == 0
        assert "Trajectory saved" in result.stdout
        frame = pd.read_csv(output)
        assert len(frame) == 2 * 31
        assert set(frame["individual"]) == {0, 1}

    def test_simulate_out_of_range_with_validation(self, runner, temp_dir: Path):
        config_file = temp_dir / "old.toml"
        config_file.write_text("[population]\nage = [30.0]\nffm = [55.0]\nfm = [15.0]\n")

        result = runner.invoke(app, [
            "simulate", "--config", str(config_file), "--validate", "--days", "5",
        ])

        assert result.exit_code == 1
        assert "outside" in result.stdout

    def test_simulate_reports_model_errors(self, runner):
        error = NonPhysicalState("Non-physical body composition at step 3", {"step": 3})
        with patch("cbw_pkg.cli.main.app_api.run_simulation", side_effect=error):
            result = runner.invoke(app, ["simulate"])

        assert result.exit_code == 1
        assert "Non-physical body composition" in result.stdout
