"""Analysis runner for project bundles.

Recomputes every derived figure of a circuit from scratch: cable analyses,
fuse advice, energy balance, battery sizing, and validation findings.
"""

import logging
from collections.abc import Sequence

from boatwire_engine.core.battery import battery_recommendation
from boatwire_engine.core.cables import analyze_all_cables, fuse_recommendations, total_power_loss
from boatwire_engine.core.metrics import compute_energy_balance, compute_metrics
from boatwire_engine.core.schemas import (
    Connection,
    ElectricalNode,
    ProjectAnalysis,
    ProjectSettings,
)
from boatwire_engine.core.topology import find_unpowered_consumers
from boatwire_engine.core.validate import validate_circuit, validation_summary
from boatwire_engine.io.bundle import load_bundle, write_results

logger = logging.getLogger(__name__)


def analyze_project(
    nodes: Sequence[ElectricalNode],
    connections: Sequence[Connection],
    settings: ProjectSettings | None = None,
) -> ProjectAnalysis:
    """Analyze a circuit snapshot. Inputs are never modified.

    Args:
        nodes: All nodes of the circuit
        connections: All connections of the circuit
        settings: Project settings; defaults apply if omitted

    Returns:
        ProjectAnalysis with one cable and fuse row per connection
    """
    settings = settings if settings is not None else ProjectSettings()

    cables = analyze_all_cables(connections, nodes, settings)

    return ProjectAnalysis(
        energy_balance=compute_energy_balance(nodes, settings),
        cables=cables,
        fuses=fuse_recommendations(connections, cables),
        battery=battery_recommendation(nodes, settings),
        validation=validate_circuit(nodes, connections, settings, cable_analyses=cables),
        unpowered_consumer_ids=[n.id for n in find_unpowered_consumers(nodes, connections)],
        total_power_loss_w=total_power_loss(cables),
    )


def run_analysis(bundle_path: str) -> tuple[ProjectAnalysis, dict]:
    """Run the full analysis on a bundle and write results back into it.

    Args:
        bundle_path: Path to project bundle

    Returns:
        Tuple of (analysis, metrics)
    """
    logger.info("Loading bundle from %s", bundle_path)
    project, settings = load_bundle(bundle_path)

    logger.info("Project: %s (%s)", project.project_id, project.name or "unnamed")
    logger.info("Circuit: %d nodes, %d connections", len(project.nodes), len(project.connections))

    analysis = analyze_project(project.nodes, project.connections, settings)
    metrics = compute_metrics(analysis)

    balance = analysis.energy_balance
    logger.info(
        "Daily balance: %.1f Ah (consumption %.1f Ah, production %.1f Ah)",
        balance.daily_balance_ah,
        balance.total_daily_consumption_ah,
        balance.total_daily_production_ah,
    )
    logger.info("Autonomy: %.1f days (%s)", balance.estimated_autonomy_days, balance.battery_status)
    logger.info("Validation: %s", validation_summary(analysis.validation))

    logger.info("Writing results to %s", bundle_path)
    write_results(bundle_path, analysis, metrics, project_id=project.project_id)

    return analysis, metrics
