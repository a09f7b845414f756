"""Current, power, and daily energy for consumers and producers.

All functions are pure. Aggregates are plain sums, so node order never
changes a total.
"""

from collections.abc import Iterable

from boatwire_engine.core.schemas import (
    AlternatorNode,
    ChargerNode,
    ConsumerNode,
    ElectricalNode,
    ProjectSettings,
    SolarNode,
)

_DEFAULT_SETTINGS = ProjectSettings()


# ---------------------------------------------------------------------------
# Consumers
# ---------------------------------------------------------------------------


def node_current(node: ElectricalNode) -> float:
    """Current drawn by a consumer in A.

    ``power_w`` is authoritative when both power and current are given, so
    ``node_power(n) / n.voltage == node_current(n)`` always holds.
    Checking power first means a stale ``current_a`` left beside an edited
    ``power_w`` is ignored. Non-consumers draw no current.
    """
    if not isinstance(node, ConsumerNode):
        return 0.0
    if node.power_w is not None:
        return node.power_w / node.voltage
    if node.current_a is not None:
        return node.current_a
    return 0.0


def node_power(node: ElectricalNode) -> float:
    """Power drawn by a consumer in W."""
    if not isinstance(node, ConsumerNode):
        return 0.0
    if node.power_w is not None:
        return node.power_w
    if node.current_a is not None:
        return node.current_a * node.voltage
    return 0.0


def node_daily_ah(node: ElectricalNode) -> float:
    """Daily consumption of a consumer in Ah: current × hours × duty cycle."""
    if not isinstance(node, ConsumerNode):
        return 0.0
    return node_current(node) * node.daily_hours * node.duty_cycle


def node_daily_wh(node: ElectricalNode) -> float:
    """Daily consumption of a consumer in Wh."""
    return node_daily_ah(node) * node.voltage


def consumers(nodes: Iterable[ElectricalNode]) -> list[ConsumerNode]:
    return [n for n in nodes if isinstance(n, ConsumerNode)]


def total_daily_consumption_ah(nodes: Iterable[ElectricalNode]) -> float:
    return sum(node_daily_ah(n) for n in consumers(nodes))


def total_daily_consumption_wh(nodes: Iterable[ElectricalNode]) -> float:
    return sum(node_daily_wh(n) for n in consumers(nodes))


def total_instant_power_w(nodes: Iterable[ElectricalNode]) -> float:
    """Power drawn if every consumer ran at once."""
    return sum(node_power(n) for n in consumers(nodes))


def max_instant_current_a(nodes: Iterable[ElectricalNode]) -> float:
    """Current drawn if every consumer ran at once, each at its own voltage."""
    return sum(node_current(n) for n in consumers(nodes))


# ---------------------------------------------------------------------------
# Producers
# ---------------------------------------------------------------------------


def solar_daily_ah(node: ElectricalNode, settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    """Daily yield of a solar array in Ah.

    Ah = max_power_w × quantity × sun_hours × efficiency / voltage
    """
    if not isinstance(node, SolarNode):
        return 0.0
    efficiency = node.efficiency if node.efficiency is not None else settings.default_solar_efficiency
    return node.max_power_w * node.quantity * settings.sun_hours_per_day * efficiency / node.voltage


def alternator_daily_ah(node: ElectricalNode, settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    """Daily yield of an alternator in Ah.

    Ah = (max_power_w × efficiency / voltage) × engine_hours_per_day
    """
    if not isinstance(node, AlternatorNode):
        return 0.0
    efficiency = node.efficiency if node.efficiency is not None else settings.default_alternator_efficiency
    charge_current = node.max_power_w * efficiency / node.voltage
    return charge_current * node.engine_hours_per_day


def charger_daily_ah(node: ElectricalNode, settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    """Daily yield of a shore charger in Ah, for the configured hours plugged in."""
    if not isinstance(node, ChargerNode):
        return 0.0
    return node.max_power_w / node.voltage * settings.charger_hours_per_day


def total_solar_daily_ah(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    return sum(solar_daily_ah(n, settings) for n in nodes)


def total_alternator_daily_ah(
    nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS
) -> float:
    return sum(alternator_daily_ah(n, settings) for n in nodes)


def total_charger_daily_ah(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    return sum(charger_daily_ah(n, settings) for n in nodes)


def total_daily_production_ah(
    nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS
) -> float:
    """Combined daily yield of solar, alternator, and charger nodes in Ah."""
    nodes = list(nodes)
    return (
        total_solar_daily_ah(nodes, settings)
        + total_alternator_daily_ah(nodes, settings)
        + total_charger_daily_ah(nodes, settings)
    )


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------


def daily_balance_ah(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    """Production minus consumption per day in Ah."""
    nodes = list(nodes)
    return total_daily_production_ah(nodes, settings) - total_daily_consumption_ah(nodes)


def is_energy_balance_positive(
    nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS
) -> bool:
    return daily_balance_ah(nodes, settings) >= 0
