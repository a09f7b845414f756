"""Golden bundle tests - example projects produce expected results."""

import json

import pytest

from boatwire_engine.io.bundle import (
    CABLES_FILE,
    FUSES_FILE,
    METADATA_FILE,
    METRICS_FILE,
    VALIDATION_FILE,
    BundleError,
    init_bundle,
    load_bundle,
)
from boatwire_engine.io.formats import read_cables_table
from boatwire_engine.io.templates import TEMPLATES, get_template
from boatwire_engine.runners.analyze import run_analysis


@pytest.fixture
def make_bundle(tmp_path):
    """Write a template as a bundle and return its path."""

    def _make(name):
        project, settings = get_template(name)
        bundle_path = tmp_path / name
        init_bundle(bundle_path, project, settings)
        return bundle_path

    return _make


@pytest.mark.parametrize("name", sorted(TEMPLATES))
def test_bundle_round_trip(make_bundle, name):
    """Loading a written bundle gives back the same project."""
    project, settings = get_template(name)

    loaded_project, loaded_settings = load_bundle(make_bundle(name))

    assert loaded_project == project
    assert loaded_settings == settings


@pytest.mark.parametrize("name", sorted(TEMPLATES))
def test_bundle_outputs(make_bundle, name):
    bundle_path = make_bundle(name)

    analysis, metrics = run_analysis(str(bundle_path))

    for filename in [CABLES_FILE, FUSES_FILE, VALIDATION_FILE, METRICS_FILE, METADATA_FILE]:
        assert (bundle_path / filename).exists(), f"{filename} should be written"

    cables = read_cables_table(str(bundle_path / CABLES_FILE))
    assert len(cables) == len(analysis.cables), "One row per connection"
    assert metrics["num_cables"] == len(analysis.cables)

    with open(bundle_path / METADATA_FILE) as f:
        metadata = json.load(f)
    assert metadata["project_id"] == name


def test_sailboat_bundle(make_bundle):
    """Well-wired 12 V sailboat."""
    analysis, metrics = run_analysis(str(make_bundle("sailboat_12v")))

    assert metrics["is_valid"], "Sailboat circuit should have no errors"
    assert metrics["num_cables_overloaded"] == 0
    assert metrics["daily_consumption_ah"] > 0
    assert metrics["daily_production_ah"] > 0
    assert analysis.unpowered_consumer_ids == []
    assert analysis.energy_balance.dominant_chemistry == "agm"

    print(f"✓ Sailboat: balance = {metrics['daily_balance_ah']:.1f} Ah/day")


def test_catamaran_bundle(make_bundle):
    """24 V lithium catamaran with shore charger hours configured."""
    analysis, metrics = run_analysis(str(make_bundle("catamaran_24v")))

    assert metrics["is_valid"], "Catamaran circuit should have no errors"
    assert analysis.energy_balance.charger_daily_production_ah == pytest.approx(720 / 24 * 2)
    assert analysis.energy_balance.effective_dod == pytest.approx(0.8)
    assert analysis.energy_balance.total_battery_capacity_ah == pytest.approx(400.0)

    print(f"✓ Catamaran: autonomy = {metrics['autonomy_days']:.1f} days")


def test_voltage_mismatch_bundle(make_bundle):
    """Faulty wiring is reported, not raised."""
    bundle_path = make_bundle("voltage_mismatch")
    analysis, metrics = run_analysis(str(bundle_path))

    assert not metrics["is_valid"]
    mismatches = [e for e in analysis.validation.errors if e.type == "voltage_mismatch"]
    assert len(mismatches) == 1
    assert mismatches[0].connection_id == "c-bat-heater"

    assert set(analysis.unpowered_consumer_ids) == {"deck-light", "usb"}
    warning_types = {w.type for w in analysis.validation.warnings}
    assert {"unpowered", "disconnected"} <= warning_types

    with open(bundle_path / VALIDATION_FILE) as f:
        validation = json.load(f)
    assert validation["is_valid"] is False


def test_unknown_template():
    with pytest.raises(ValueError, match="Unknown template"):
        get_template("submarine_400v")


def test_missing_bundle(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_bundle(tmp_path / "nope")


def test_bundle_without_project(tmp_path):
    with pytest.raises(BundleError, match="project.yaml"):
        load_bundle(tmp_path)


def test_bundle_with_invalid_project(tmp_path):
    (tmp_path / "project.yaml").write_text("- just\n- a list\n")

    with pytest.raises(BundleError):
        load_bundle(tmp_path)


def test_bundle_with_bad_node(tmp_path):
    (tmp_path / "project.yaml").write_text(
        "project_id: bad\n"
        "nodes:\n"
        "  - id: c1\n"
        "    type: consumer\n"
        "    voltage: 13\n"
        "    powerW: 10\n"
    )

    with pytest.raises(BundleError, match="Invalid project.yaml"):
        load_bundle(tmp_path)


def test_bundle_without_settings_uses_defaults(tmp_path):
    (tmp_path / "project.yaml").write_text("project_id: empty\n")

    project, settings = load_bundle(tmp_path)

    assert project.nodes == []
    assert settings.sun_hours_per_day == 5
    assert settings.days_autonomy == 2
