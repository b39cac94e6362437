"""Main CLI application."""

from pathlib import Path
from typing import Optional
import sys

import structlog
import typer
from rich.console import Console
from rich.table import Table

from .. import app_api
from ..config.constants import (
    BMI_CATEGORY_NAMES,
    REFERENCE_MAX_AGE,
    REFERENCE_MIN_AGE,
)
from ..contracts.errors import CBWError
from ..domain.parameters import SEX_COEFFICIENTS

app = typer.Typer(
    name="cbw",
    help="Child Body Weight - dynamic body composition simulation for children",
    no_args_is_help=True
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(10 if verbose else 30),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@app.command()
def simulate(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    days: Optional[float] = typer.Option(
        None, "--days", help="Simulated horizon in days (overrides config)"
    ),
    dt: Optional[float] = typer.Option(
        None, "--dt", help="Step size in days (overrides config)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="CSV file for the long-format trajectory"
    ),
    validate_inputs: bool = typer.Option(
        False, "--validate/--no-validate", help="Check physiological ranges of the inputs"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Simulate body composition for the configured population."""

    _configure_logging(verbose)
    failed = False

    try:
        if config:
            cfg = app_api.load_config_from_file(config)
            console.print(f"✓ Loaded configuration from {config}")
        else:
            cfg = app_api.get_default_config()
            console.print("✓ Using default configuration")

        if dt is not None:
            cfg.solver.dt = dt
        if validate_inputs:
            cfg.run.validate_inputs = True
        app_api.validate_configuration(cfg)

        with console.status("Running simulation..."):
            trajectory = app_api.run_simulation(
                cfg, days=days, base_dir=config.parent if config else None
            )

        console.print(
            f"✅ Simulated {trajectory.nsims} steps for {trajectory.nind} individuals",
            style="green",
        )

        summary = app_api.summarize_trajectory(trajectory)
        table = Table(title="Body Weight Summary")
        for column in ("Individual", "Age", "BW start [kg]", "BW end [kg]", "Change [kg]"):
            table.add_column(column)
        for row in summary.itertuples(index=False):
            table.add_row(
                str(row.individual),
                f"{row.age_start:.2f} → {row.age_end:.2f}",
                f"{row.bw_start:.2f}",
                f"{row.bw_end:.2f}",
                f"{row.bw_change:+.2f}",
            )
        console.print(table)

        target = output or (Path(cfg.run.output) if cfg.run.output else None)
        if target is not None:
            app_api.save_trajectory(trajectory, target)
            console.print(f"✓ Trajectory saved to {target}")

    except CBWError as e:
        console.print(f"❌ {e.message}", style="red")
        if e.details:
            console.print(f"Details: {e.details}")
        failed = True
    except Exception as e:
        console.print(f"❌ Unexpected error: {e}", style="red")
        failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def validate(
    config: Path = typer.Argument(..., help="Configuration file to validate")
):
    """Validate a configuration file."""

    try:
        app_api.load_config_from_file(config)
    except CBWError as e:
        console.print(f"❌ {e.message}", style="red")
        raise typer.Exit(1)

    console.print(f"✅ Configuration {config} is valid", style="green")


@app.command()
def info():
    """Display package information and model coverage."""

    from .. import __version__

    console.print(f"CBW Package v{__version__}")
    console.print(f"Reference ages: {REFERENCE_MIN_AGE}-{REFERENCE_MAX_AGE} years")
    console.print(f"Sex-specific coefficients: {len(SEX_COEFFICIENTS)}")

    table = Table(title="BMI Categories")
    table.add_column("Code")
    table.add_column("Category")
    for code, name in enumerate(BMI_CATEGORY_NAMES, start=1):
        table.add_row(str(code), name)
    console.print(table)


if __name__ == "__main__":
    app()
