"""Whole-circuit consistency and safety checks.

Findings are returned as values, never raised. Every check runs
independently; one failing check does not hide another.
"""

import logging
from collections.abc import Sequence

from boatwire_engine.core.battery import battery_status
from boatwire_engine.core.cables import analyze_all_cables
from boatwire_engine.core.constants import MIN_PRODUCTION_RATIO, STANDALONE_NODE_TYPES
from boatwire_engine.core.power import total_daily_consumption_ah, total_daily_production_ah
from boatwire_engine.core.schemas import (
    BatteryNode,
    CableAnalysis,
    CircuitValidation,
    Connection,
    ElectricalNode,
    ProjectSettings,
    ValidationError,
    ValidationWarning,
)
from boatwire_engine.core.topology import (
    connected_node_ids,
    dangling_connections,
    endpoints,
    find_unpowered_consumers,
    node_map,
)

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = ProjectSettings()


def check_no_source(nodes: Sequence[ElectricalNode]) -> list[ValidationError]:
    if any(isinstance(n, BatteryNode) for n in nodes):
        return []
    return [ValidationError(type="no_source", message="No battery in the circuit")]


def check_voltage_mismatch(
    nodes: Sequence[ElectricalNode], connections: Sequence[Connection]
) -> list[ValidationError]:
    """One error per cable joining nodes of different nominal voltage."""
    nodes_by_id = node_map(nodes)
    errors = []
    for connection in connections:
        ends = endpoints(connection, nodes_by_id)
        if ends is None:
            continue
        from_node, to_node = ends
        if from_node.voltage != to_node.voltage:
            errors.append(
                ValidationError(
                    type="voltage_mismatch",
                    node_ids=[from_node.id, to_node.id],
                    connection_id=connection.id,
                    message=f"Voltage mismatch: {from_node.voltage}V <-> {to_node.voltage}V",
                )
            )
    return errors


def check_cables(
    connections: Sequence[Connection],
    analyses: Sequence[CableAnalysis],
    skip_ids: set[str] | None = None,
) -> tuple[list[ValidationError], list[ValidationWarning]]:
    """Overcurrent errors, drop warnings, and undersized-section warnings.

    Analyses whose connection id is in ``skip_ids`` are not checked.
    """
    skip_ids = skip_ids or set()
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []
    sections = {c.id: c.section_mm2 for c in connections}

    for analysis in analyses:
        if analysis.connection_id in skip_ids:
            continue
        if analysis.status == "overload":
            errors.append(
                ValidationError(
                    type="overcurrent",
                    connection_id=analysis.connection_id,
                    message=f"Cable overloaded ({analysis.current_a}A)",
                )
            )
        elif analysis.status == "warning":
            warnings.append(
                ValidationWarning(
                    type="voltage_drop",
                    connection_id=analysis.connection_id,
                    message=f"High voltage drop ({analysis.voltage_drop_percent:.1f}%)",
                )
            )

        installed = sections.get(analysis.connection_id)
        if installed is not None and installed < analysis.recommended_section_mm2:
            warnings.append(
                ValidationWarning(
                    type="undersized_cable",
                    connection_id=analysis.connection_id,
                    message=(
                        f"Recommended section: {analysis.recommended_section_mm2:g} mm² "
                        f"(installed: {installed:g} mm²)"
                    ),
                )
            )

    return errors, warnings


def check_disconnected(
    nodes: Sequence[ElectricalNode], connections: Sequence[Connection]
) -> list[ValidationWarning]:
    """Nodes wired to nothing. Buses, switches, and fuses may stand alone."""
    wired = connected_node_ids(connections)
    return [
        ValidationWarning(
            type="disconnected",
            node_ids=[n.id],
            message=f'"{n.label}" is not connected',
        )
        for n in nodes
        if n.type not in STANDALONE_NODE_TYPES and n.id not in wired
    ]


def check_unpowered(
    nodes: Sequence[ElectricalNode], connections: Sequence[Connection]
) -> list[ValidationWarning]:
    """Wired consumers that cannot reach any source.

    Consumers with no cable at all are already reported as disconnected.
    """
    wired = connected_node_ids(connections)
    return [
        ValidationWarning(
            type="unpowered",
            node_ids=[n.id],
            message=f'"{n.label}" has no path to a power source',
        )
        for n in find_unpowered_consumers(nodes, connections)
        if n.id in wired
    ]


def check_battery(
    nodes: Sequence[ElectricalNode], settings: ProjectSettings
) -> list[ValidationWarning]:
    status = battery_status(nodes, settings)
    days = f"{settings.days_autonomy:g}"
    if status == "critical":
        return [
            ValidationWarning(
                type="low_battery",
                message=f"Battery capacity insufficient for {days} days of autonomy",
            )
        ]
    if status == "warning":
        return [
            ValidationWarning(
                type="low_battery",
                message=f"Battery capacity limited (less than {days} days of autonomy)",
            )
        ]
    return []


def check_energy_balance(
    nodes: Sequence[ElectricalNode], settings: ProjectSettings
) -> list[ValidationWarning]:
    consumption = total_daily_consumption_ah(nodes)
    production = total_daily_production_ah(nodes, settings)
    if production <= 0 or consumption <= 0:
        return []
    ratio = production / consumption
    if ratio >= MIN_PRODUCTION_RATIO:
        return []
    return [
        ValidationWarning(
            type="unbalanced",
            message=f"Insufficient production ({round(ratio * 100)}% of consumption)",
        )
    ]


def validate_circuit(
    nodes: Sequence[ElectricalNode],
    connections: Sequence[Connection],
    settings: ProjectSettings = _DEFAULT_SETTINGS,
    cable_analyses: Sequence[CableAnalysis] | None = None,
) -> CircuitValidation:
    """Validate a full circuit snapshot.

    Args:
        nodes: All nodes of the circuit
        connections: All connections of the circuit
        settings: Project settings
        cable_analyses: Precomputed cable analyses, recomputed if omitted

    Returns:
        CircuitValidation; ``is_valid`` is False when any error was found
    """
    dangling = dangling_connections(nodes, connections)
    for connection_id in dangling:
        logger.warning("Connection %r references a missing node; not validated", connection_id)

    if cable_analyses is None:
        cable_analyses = analyze_all_cables(connections, nodes, settings)

    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    errors.extend(check_no_source(nodes))
    errors.extend(check_voltage_mismatch(nodes, connections))
    warnings.extend(check_disconnected(nodes, connections))
    warnings.extend(check_unpowered(nodes, connections))

    cable_errors, cable_warnings = check_cables(connections, cable_analyses, skip_ids=set(dangling))
    errors.extend(cable_errors)
    warnings.extend(cable_warnings)

    warnings.extend(check_battery(nodes, settings))
    warnings.extend(check_energy_balance(nodes, settings))

    return CircuitValidation(is_valid=not errors, errors=errors, warnings=warnings)


def validation_summary(validation: CircuitValidation) -> str:
    """One-line human summary of a validation result."""
    if validation.is_valid and not validation.warnings:
        return "Circuit valid, no issues found"

    parts = []
    if validation.errors:
        parts.append(f"{len(validation.errors)} error(s)")
    if validation.warnings:
        parts.append(f"{len(validation.warnings)} warning(s)")
    return ", ".join(parts)
