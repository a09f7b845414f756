"""Smoke tests for the command-line interface."""

import pytest
from typer.testing import CliRunner

from boatwire_engine import __version__
from boatwire_engine.cli import app
from boatwire_engine.io.bundle import CABLES_FILE, METRICS_FILE, PROJECT_FILE


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def bundle(runner, tmp_path):
    """Sailboat bundle created through the CLI."""
    bundle_path = tmp_path / "sailboat"
    result = runner.invoke(app, ["init-bundle", str(bundle_path), "--template", "sailboat_12v"])
    assert result.exit_code == 0, result.output
    return bundle_path


def test_version(runner):
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_bundle(bundle):
    assert (bundle / PROJECT_FILE).exists()


def test_init_bundle_refuses_to_overwrite(runner, bundle):
    result = runner.invoke(app, ["init-bundle", str(bundle)])

    assert result.exit_code == 1


def test_init_bundle_unknown_template(runner, tmp_path):
    result = runner.invoke(app, ["init-bundle", str(tmp_path / "x"), "--template", "submarine_400v"])

    assert result.exit_code == 1
    assert not (tmp_path / "x").exists()


def test_validate(runner, bundle):
    result = runner.invoke(app, ["validate", str(bundle)])

    assert result.exit_code == 0
    assert "is valid" in result.output


def test_validate_missing_bundle(runner, tmp_path):
    result = runner.invoke(app, ["validate", str(tmp_path / "nope")])

    assert result.exit_code == 1


def test_analyze_then_report(runner, bundle):
    result = runner.invoke(app, ["--verbose", "analyze", str(bundle)])
    assert result.exit_code == 0, result.output
    assert (bundle / CABLES_FILE).exists()
    assert (bundle / METRICS_FILE).exists()

    result = runner.invoke(app, ["report", str(bundle)])
    assert result.exit_code == 0, result.output
    assert "CIRCUIT REPORT" in result.output
    assert "Autonomy" in result.output


def test_report_without_results(runner, bundle):
    result = runner.invoke(app, ["report", str(bundle)])

    assert result.exit_code == 1


def test_fuses(runner, bundle):
    result = runner.invoke(app, ["fuses", str(bundle)])

    assert result.exit_code == 0, result.output
    assert "c-bat-sw" in result.output
    assert "c-fridge" in result.output
