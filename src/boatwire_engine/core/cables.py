"""Cable physics, sizing, and fuse selection.

Voltage drop and loss use the round-trip conductor length:
    R    = 2 * rho * length_m / section_mm2
    dV   = R * current_a
    Loss = current_a² * R
"""

import logging
import math
from collections.abc import Sequence

from boatwire_engine.core.constants import (
    BATTERY_C_RATE_HOURS,
    CABLE_OVERSIZE_LOAD_FRAC,
    CABLE_STANDARDS,
    CABLE_WARNING_LOAD_FRAC,
    DEFAULT_COPPER_RESISTIVITY,
    DEFAULT_MAX_VOLTAGE_DROP_PERCENT,
    FUSE_SAFETY_FACTOR,
    LARGEST_SECTION_MM2,
    OVERSIZE_MIN_SECTION_MM2,
    ROUND_CURRENT,
    ROUND_POWER_LOSS,
    ROUND_VOLTAGE_DROP,
    ROUND_VOLTAGE_DROP_PERCENT,
    SMALLEST_SECTION_MM2,
    STANDARD_FUSE_RATINGS_A,
    CableSpec,
)
from boatwire_engine.core.power import node_current
from boatwire_engine.core.schemas import (
    BatteryNode,
    CableAnalysis,
    CableStatus,
    Connection,
    ConsumerNode,
    ElectricalNode,
    FuseRecommendation,
    FuseStatus,
    ProjectSettings,
)
from boatwire_engine.core.topology import endpoints, node_map

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = ProjectSettings()


# ---------------------------------------------------------------------------
# Reference lookups
# ---------------------------------------------------------------------------


def cable_spec_for_section(section_mm2: float) -> CableSpec | None:
    """Reference row with exactly this section, if it is a standard size."""
    for spec in CABLE_STANDARDS:
        if spec.section_mm2 == section_mm2:
            return spec
    return None


def rated_current_a(section_mm2: float) -> float:
    """Ampacity of a standard section; non-standard sections are rated 0 A."""
    spec = cable_spec_for_section(section_mm2)
    return spec.max_current_a if spec is not None else 0.0


def next_standard_section(min_section_mm2: float) -> float:
    """Smallest standard section >= the given one, else the largest available."""
    for spec in CABLE_STANDARDS:
        if spec.section_mm2 >= min_section_mm2:
            return spec.section_mm2
    return LARGEST_SECTION_MM2


def min_section_for_current(current_a: float) -> float:
    """Smallest standard section rated for the current plus the 25 % margin."""
    required = current_a * FUSE_SAFETY_FACTOR
    for spec in CABLE_STANDARDS:
        if spec.max_current_a >= required:
            return spec.section_mm2
    return LARGEST_SECTION_MM2


def recommended_fuse_a(current_a: float) -> float:
    """Smallest standard fuse rating >= 1.25 × current, else the largest rating.

    Non-decreasing in ``current_a``.
    """
    target = current_a * FUSE_SAFETY_FACTOR
    for rating in STANDARD_FUSE_RATINGS_A:
        if rating >= target:
            return rating
    return STANDARD_FUSE_RATINGS_A[-1]


# ---------------------------------------------------------------------------
# Physics
# ---------------------------------------------------------------------------


def cable_resistance_ohm(
    length_m: float, section_mm2: float, resistivity: float = DEFAULT_COPPER_RESISTIVITY
) -> float:
    """Round-trip resistance of a two-conductor run."""
    return 2 * resistivity * length_m / section_mm2


def voltage_drop_volts(
    current_a: float,
    length_m: float,
    section_mm2: float,
    resistivity: float = DEFAULT_COPPER_RESISTIVITY,
) -> float:
    return cable_resistance_ohm(length_m, section_mm2, resistivity) * current_a


def voltage_drop_percent(
    current_a: float,
    length_m: float,
    section_mm2: float,
    voltage: float,
    resistivity: float = DEFAULT_COPPER_RESISTIVITY,
) -> float:
    return voltage_drop_volts(current_a, length_m, section_mm2, resistivity) / voltage * 100


def power_loss_w(
    current_a: float,
    length_m: float,
    section_mm2: float,
    resistivity: float = DEFAULT_COPPER_RESISTIVITY,
) -> float:
    return current_a * current_a * cable_resistance_ohm(length_m, section_mm2, resistivity)


def min_section_for_drop(
    current_a: float,
    length_m: float,
    voltage: float,
    max_drop_percent: float = DEFAULT_MAX_VOLTAGE_DROP_PERCENT,
    resistivity: float = DEFAULT_COPPER_RESISTIVITY,
) -> float:
    """Section (not rounded to a standard size) at which dV% equals the limit.

    S = 2 * rho * L * I / (V * dV% / 100)
    """
    max_drop_volts = voltage * max_drop_percent / 100
    if max_drop_volts <= 0:
        return math.inf
    return 2 * resistivity * length_m * current_a / max_drop_volts


def recommended_section_mm2(
    current_a: float,
    length_m: float,
    voltage: float,
    max_drop_percent: float = DEFAULT_MAX_VOLTAGE_DROP_PERCENT,
    resistivity: float = DEFAULT_COPPER_RESISTIVITY,
) -> float:
    """Standard section satisfying both the drop limit and the ampacity margin."""
    min_section = max(
        min_section_for_drop(current_a, length_m, voltage, max_drop_percent, resistivity),
        min_section_for_current(current_a),
    )
    return next_standard_section(min_section)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def cable_status(
    current_a: float,
    section_mm2: float,
    drop_percent: float,
    max_drop_percent: float = DEFAULT_MAX_VOLTAGE_DROP_PERCENT,
) -> CableStatus:
    """Overload beats excessive drop; both beat ok."""
    if current_a > rated_current_a(section_mm2):
        return "overload"
    if drop_percent > max_drop_percent:
        return "warning"
    return "ok"


def is_cable_oversized(current_a: float, section_mm2: float) -> bool:
    """Lightly loaded cable larger than the smallest useful section."""
    return (
        current_a < rated_current_a(section_mm2) * CABLE_OVERSIZE_LOAD_FRAC
        and section_mm2 > OVERSIZE_MIN_SECTION_MM2
    )


def infer_cable_current(from_node: ElectricalNode, to_node: ElectricalNode) -> float:
    """Estimate the current carried by a cable from its endpoints.

    A consumer endpoint fixes the current. Otherwise a battery endpoint gives
    a C/5 charge/discharge estimate. Anything else carries no known current.
    """
    for node in (from_node, to_node):
        if isinstance(node, ConsumerNode):
            return node_current(node)
    for node in (from_node, to_node):
        if isinstance(node, BatteryNode):
            return node.capacity_ah / BATTERY_C_RATE_HOURS
    return 0.0


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def _empty_analysis(connection: Connection) -> CableAnalysis:
    return CableAnalysis(
        connection_id=connection.id,
        current_a=0.0,
        voltage_drop=0.0,
        voltage_drop_percent=0.0,
        power_loss_w=0.0,
        recommended_section_mm2=SMALLEST_SECTION_MM2,
        recommended_fuse_a=recommended_fuse_a(0.0),
        status="ok",
    )


def analyze_cable(
    connection: Connection,
    from_node: ElectricalNode,
    to_node: ElectricalNode,
    settings: ProjectSettings = _DEFAULT_SETTINGS,
) -> CableAnalysis:
    """Full electrical analysis of one connection.

    The circuit voltage is taken from the ``from`` node. Status is decided
    on unrounded values; reported figures are rounded for display.
    """
    rho = settings.copper_resistivity
    current = infer_cable_current(from_node, to_node)
    voltage = from_node.voltage

    drop = voltage_drop_volts(current, connection.length_m, connection.section_mm2, rho)
    drop_percent = drop / voltage * 100
    loss = power_loss_w(current, connection.length_m, connection.section_mm2, rho)

    return CableAnalysis(
        connection_id=connection.id,
        current_a=round(current, ROUND_CURRENT),
        voltage_drop=round(drop, ROUND_VOLTAGE_DROP),
        voltage_drop_percent=round(drop_percent, ROUND_VOLTAGE_DROP_PERCENT),
        power_loss_w=round(loss, ROUND_POWER_LOSS),
        recommended_section_mm2=recommended_section_mm2(
            current, connection.length_m, voltage, settings.max_voltage_drop_percent, rho
        ),
        recommended_fuse_a=recommended_fuse_a(current),
        status=cable_status(current, connection.section_mm2, drop_percent, settings.max_voltage_drop_percent),
    )


def analyze_all_cables(
    connections: Sequence[Connection],
    nodes: Sequence[ElectricalNode],
    settings: ProjectSettings = _DEFAULT_SETTINGS,
) -> list[CableAnalysis]:
    """One analysis per connection, in input order.

    Connections referencing an unknown node get a zero-valued row.
    """
    nodes_by_id = node_map(nodes)
    analyses = []
    for connection in connections:
        ends = endpoints(connection, nodes_by_id)
        if ends is None:
            logger.warning(
                "Connection %r references a missing node (%r -> %r); skipped",
                connection.id,
                connection.from_node_id,
                connection.to_node_id,
            )
            analyses.append(_empty_analysis(connection))
            continue
        analyses.append(analyze_cable(connection, ends[0], ends[1], settings))
    return analyses


def fuse_status(current_a: float, section_mm2: float) -> FuseStatus:
    max_current = rated_current_a(section_mm2)
    if current_a > max_current * CABLE_WARNING_LOAD_FRAC:
        return "warning"
    if is_cable_oversized(current_a, section_mm2):
        return "oversized"
    return "ok"


def fuse_recommendations(
    connections: Sequence[Connection], analyses: Sequence[CableAnalysis]
) -> list[FuseRecommendation]:
    """Fuse advice per connection, using the analysed current."""
    by_id = {a.connection_id: a for a in analyses}
    recommendations = []
    for connection in connections:
        analysis = by_id.get(connection.id)
        current = analysis.current_a if analysis is not None else 0.0
        recommendations.append(
            FuseRecommendation(
                connection_id=connection.id,
                section_mm2=connection.section_mm2,
                max_cable_current_a=rated_current_a(connection.section_mm2),
                current_a=current,
                recommended_fuse_a=recommended_fuse_a(current),
                status=fuse_status(current, connection.section_mm2),
            )
        )
    return recommendations


def overloaded_cables(analyses: Sequence[CableAnalysis]) -> list[CableAnalysis]:
    return [a for a in analyses if a.status == "overload"]


def high_voltage_drop_cables(
    analyses: Sequence[CableAnalysis],
    max_drop_percent: float = DEFAULT_MAX_VOLTAGE_DROP_PERCENT,
) -> list[CableAnalysis]:
    """Cables flagged for drop, including overloaded ones that also exceed it."""
    return [a for a in analyses if a.status == "warning" or a.voltage_drop_percent > max_drop_percent]


def total_power_loss(analyses: Sequence[CableAnalysis]) -> float:
    return sum(a.power_loss_w for a in analyses)


def annotate_connections(
    connections: Sequence[Connection], analyses: Sequence[CableAnalysis]
) -> list[Connection]:
    """Copies of the connections with derived drop and fuse fields filled in."""
    by_id = {a.connection_id: a for a in analyses}
    annotated = []
    for connection in connections:
        analysis = by_id.get(connection.id)
        if analysis is None:
            annotated.append(connection)
            continue
        annotated.append(
            connection.model_copy(
                update={
                    "voltage_drop": analysis.voltage_drop_percent,
                    "fuse_rating": analysis.recommended_fuse_a,
                }
            )
        )
    return annotated
