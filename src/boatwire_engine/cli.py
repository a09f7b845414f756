"""Command-line interface for the Boatwire engine."""

import json
import logging
from pathlib import Path

import typer

from boatwire_engine import __version__

app = typer.Typer(
    help="Boatwire DC Wiring Calculation Engine",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logging"),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show Boatwire version."""
    typer.echo(f"Boatwire Engine v{__version__}")


@app.command()
def validate(bundle_path: str):
    """Validate a project bundle.

    Args:
        bundle_path: Path to bundle directory
    """
    from boatwire_engine.io.bundle import load_bundle

    try:
        project, _ = load_bundle(bundle_path)
        typer.secho(
            f"✓ Bundle at {bundle_path} is valid "
            f"({len(project.nodes)} nodes, {len(project.connections)} connections)",
            fg=typer.colors.GREEN,
        )
    except (FileNotFoundError, ValueError) as e:
        typer.secho(f"✗ Bundle validation failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def analyze(bundle_path: str):
    """Analyze the circuit of a bundle and write results into it.

    Args:
        bundle_path: Path to bundle directory
    """
    from boatwire_engine.core.validate import validation_summary
    from boatwire_engine.runners.analyze import run_analysis

    try:
        analysis, _ = run_analysis(bundle_path)
    except (FileNotFoundError, ValueError) as e:
        typer.secho(f"\n✗ Analysis failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    color = typer.colors.GREEN if analysis.validation.is_valid else typer.colors.YELLOW
    typer.secho(f"✓ Analysis completed: {validation_summary(analysis.validation)}", fg=color)


@app.command()
def init_bundle(
    bundle_path: str,
    template: str = typer.Option("sailboat_12v", help="Template name"),
):
    """Initialize a new project bundle from a template.

    Args:
        bundle_path: Path to new bundle directory
        template: Template name
    """
    from boatwire_engine.io.bundle import PROJECT_FILE, init_bundle as write_bundle
    from boatwire_engine.io.templates import get_template

    try:
        project, settings = get_template(template)
    except ValueError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if (Path(bundle_path) / PROJECT_FILE).exists():
        typer.secho(f"✗ {bundle_path} already contains a {PROJECT_FILE}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    write_bundle(bundle_path, project, settings)
    typer.secho(f"✓ Created bundle {bundle_path} from template {template}", fg=typer.colors.GREEN)


@app.command()
def report(bundle_path: str):
    """Print metrics and validation findings of an analyzed bundle.

    Args:
        bundle_path: Path to bundle directory
    """
    from boatwire_engine.io.bundle import METRICS_FILE, VALIDATION_FILE

    bundle_path_obj = Path(bundle_path)

    # Check if results exist
    metrics_file = bundle_path_obj / METRICS_FILE
    validation_file = bundle_path_obj / VALIDATION_FILE
    if not metrics_file.exists() or not validation_file.exists():
        typer.secho(
            "✗ No results found in bundle. Run analyze first.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(1)

    with open(metrics_file) as f:
        metrics = json.load(f)
    with open(validation_file) as f:
        validation = json.load(f)

    typer.echo("\n" + "=" * 60)
    typer.echo("CIRCUIT REPORT")
    typer.echo("=" * 60)

    typer.echo("\nEnergy Balance:")
    typer.echo(f"  Consumption:      {metrics['daily_consumption_ah']:.1f} Ah/day ({metrics['daily_consumption_wh']:.0f} Wh)")
    typer.echo(f"  Production:       {metrics['daily_production_ah']:.1f} Ah/day")
    typer.echo(f"  Balance:          {metrics['daily_balance_ah']:+.1f} Ah/day")
    typer.echo(f"  Instant power:    {metrics['instant_power_w']:.0f} W")

    typer.echo("\nBattery:")
    typer.echo(f"  Installed:        {metrics['battery_capacity_ah']:.0f} Ah")
    typer.echo(f"  Usable:           {metrics['usable_capacity_ah']:.0f} Ah")
    typer.echo(f"  Required:         {metrics['required_capacity_ah']:.0f} Ah")
    typer.echo(f"  Autonomy:         {metrics['autonomy_days']:.1f} days ({metrics['battery_status']})")
    typer.echo(f"  Coverage:         {metrics['battery_coverage_pct']:.0f}%")

    typer.echo("\nCables:")
    typer.echo(f"  Count:            {metrics['num_cables']}")
    typer.echo(f"  Overloaded:       {metrics['num_cables_overloaded']}")
    typer.echo(f"  High drop:        {metrics['num_cables_high_drop']}")
    typer.echo(f"  Losses:           {metrics['cable_loss_w']:.1f} W")

    typer.echo("\nFindings:")
    for error in validation.get("errors", []):
        typer.secho(f"  ✗ [{error['type']}] {error['message']}", fg=typer.colors.RED)
    for warning in validation.get("warnings", []):
        typer.secho(f"  ! [{warning['type']}] {warning['message']}", fg=typer.colors.YELLOW)
    if not validation.get("errors") and not validation.get("warnings"):
        typer.echo("  none")

    typer.echo("\n" + "=" * 60 + "\n")

    typer.secho("✓ Report generated", fg=typer.colors.GREEN)


@app.command()
def fuses(bundle_path: str):
    """Print fuse advice for every cable of a bundle.

    Args:
        bundle_path: Path to bundle directory
    """
    from boatwire_engine.core.cables import analyze_all_cables, fuse_recommendations
    from boatwire_engine.io.bundle import load_bundle

    try:
        project, settings = load_bundle(bundle_path)
    except (FileNotFoundError, ValueError) as e:
        typer.secho(f"✗ Could not load bundle: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    analyses = analyze_all_cables(project.connections, project.nodes, settings)
    recommendations = fuse_recommendations(project.connections, analyses)

    typer.echo(f"{'Cable':<20} {'mm²':>6} {'Max A':>7} {'I (A)':>7} {'Fuse A':>7}  Status")
    for rec in recommendations:
        color = {"warning": typer.colors.YELLOW, "oversized": typer.colors.BLUE}.get(rec.status)
        typer.secho(
            f"{rec.connection_id:<20} {rec.section_mm2:>6g} {rec.max_cable_current_a:>7g} "
            f"{rec.current_a:>7.1f} {rec.recommended_fuse_a:>7g}  {rec.status}",
            fg=color,
        )


if __name__ == "__main__":
    app()
