"""Project bundle I/O operations.

A project bundle is a folder containing:
- project.yaml: Nodes and connections of the circuit
- settings.yaml: Project settings (optional, defaults apply)
- (outputs):
  - cables.parquet: Per-cable analysis
  - fuses.parquet: Per-cable fuse advice
  - validation.json: Circuit validation findings
  - metrics.json: Computed metrics
  - bundle_metadata.json: Reproducibility metadata
"""

import json
import logging
from pathlib import Path

import pydantic
import yaml

from boatwire_engine import __version__
from boatwire_engine.core.schemas import (
    BundleMetadata,
    ProjectAnalysis,
    ProjectConfig,
    ProjectSettings,
)
from boatwire_engine.io.formats import cables_to_frame, fuses_to_frame, write_parquet_table

logger = logging.getLogger(__name__)

PROJECT_FILE = "project.yaml"
SETTINGS_FILE = "settings.yaml"
CABLES_FILE = "cables.parquet"
FUSES_FILE = "fuses.parquet"
VALIDATION_FILE = "validation.json"
METRICS_FILE = "metrics.json"
METADATA_FILE = "bundle_metadata.json"


class BundleError(ValueError):
    """Raised when a bundle is missing files or holds invalid data."""

    pass


def _read_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BundleError(f"Invalid YAML in {path.name}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BundleError(f"{path.name} must contain a mapping, got {type(data).__name__}")
    return data


def load_bundle(bundle_path: str | Path) -> tuple[ProjectConfig, ProjectSettings]:
    """Load a project bundle.

    Args:
        bundle_path: Path to bundle directory

    Returns:
        Tuple of (project, settings)
    """
    bundle_path = Path(bundle_path)

    if not bundle_path.exists():
        raise FileNotFoundError(f"Bundle not found: {bundle_path}")

    validate_bundle(bundle_path)

    try:
        project = ProjectConfig.model_validate(_read_yaml(bundle_path / PROJECT_FILE))
    except pydantic.ValidationError as e:
        raise BundleError(f"Invalid {PROJECT_FILE}: {e}") from e

    settings_path = bundle_path / SETTINGS_FILE
    if settings_path.exists():
        try:
            settings = ProjectSettings.model_validate(_read_yaml(settings_path))
        except pydantic.ValidationError as e:
            raise BundleError(f"Invalid {SETTINGS_FILE}: {e}") from e
    else:
        logger.info("No %s in %s, using default settings", SETTINGS_FILE, bundle_path)
        settings = ProjectSettings()

    logger.debug(
        "Loaded project %s: %d nodes, %d connections",
        project.project_id,
        len(project.nodes),
        len(project.connections),
    )
    return project, settings


def write_results(
    bundle_path: str | Path,
    analysis: ProjectAnalysis,
    metrics: dict | None = None,
    project_id: str | None = None,
) -> None:
    """Write results to bundle.

    Args:
        bundle_path: Path to bundle directory
        analysis: Full project analysis
        metrics: Optional metrics dictionary
        project_id: Project identifier recorded in the metadata
    """
    bundle_path = Path(bundle_path)
    bundle_path.mkdir(exist_ok=True)

    # Write cable tables
    write_parquet_table(cables_to_frame(analysis.cables), str(bundle_path / CABLES_FILE))
    write_parquet_table(fuses_to_frame(analysis.fuses), str(bundle_path / FUSES_FILE))

    # Write validation findings
    with open(bundle_path / VALIDATION_FILE, "w") as f:
        json.dump(analysis.validation.model_dump(exclude_none=True), f, indent=2, default=str)

    # Write metrics if provided
    if metrics is not None:
        with open(bundle_path / METRICS_FILE, "w") as f:
            json.dump(metrics, f, indent=2, default=str)

    # Write metadata
    metadata = BundleMetadata(boatwire_version=__version__, project_id=project_id)
    with open(bundle_path / METADATA_FILE, "w") as f:
        json.dump(metadata.model_dump(), f, indent=2, default=str)


def init_bundle(
    bundle_path: str | Path,
    project: ProjectConfig,
    settings: ProjectSettings | None = None,
) -> None:
    """Initialize a new project bundle.

    Args:
        bundle_path: Path to bundle directory
        project: Circuit to store
        settings: Project settings; defaults are written if omitted
    """
    bundle_path = Path(bundle_path)
    bundle_path.mkdir(parents=True, exist_ok=True)

    settings = settings if settings is not None else ProjectSettings()

    with open(bundle_path / PROJECT_FILE, "w") as f:
        yaml.dump(project.model_dump(exclude_none=True), f, default_flow_style=False, sort_keys=False)

    with open(bundle_path / SETTINGS_FILE, "w") as f:
        yaml.dump(settings.model_dump(), f, default_flow_style=False, sort_keys=False)


def validate_bundle(bundle_path: str | Path) -> bool:
    """Validate that a bundle has all required files.

    Args:
        bundle_path: Path to bundle directory

    Returns:
        True if valid

    Raises:
        BundleError: If bundle is invalid
    """
    bundle_path = Path(bundle_path)

    required_files = [PROJECT_FILE]

    for filename in required_files:
        if not (bundle_path / filename).exists():
            raise BundleError(f"Missing required file: {filename}")

    return True
