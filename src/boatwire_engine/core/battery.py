"""Battery bank sizing and autonomy.

Series strings raise voltage, not capacity: a series bank contributes its
per-unit ``capacity_ah`` once, while a parallel bank contributes
``capacity_ah × quantity``.
"""

import math
from collections.abc import Iterable

from boatwire_engine.core.constants import BATTERY_WARNING_AUTONOMY_FRAC, FALLBACK_CHEMISTRY
from boatwire_engine.core.power import total_daily_consumption_ah
from boatwire_engine.core.schemas import (
    BatteryNode,
    BatteryRecommendation,
    BatteryStatus,
    ElectricalNode,
    ProjectSettings,
)

_DEFAULT_SETTINGS = ProjectSettings()


def batteries(nodes: Iterable[ElectricalNode]) -> list[BatteryNode]:
    return [n for n in nodes if isinstance(n, BatteryNode)]


def battery_capacity_ah(battery: BatteryNode) -> float:
    """Installed capacity of one battery node in Ah."""
    if battery.configuration == "parallel":
        return battery.capacity_ah * battery.quantity
    return battery.capacity_ah


def total_capacity_ah(nodes: Iterable[ElectricalNode]) -> float:
    return sum(battery_capacity_ah(b) for b in batteries(nodes))


def dominant_chemistry(nodes: Iterable[ElectricalNode]) -> str:
    """Chemistry with the largest quantity-weighted capacity.

    Ties go to the chemistry encountered first. Without batteries the
    conservative lead-acid chemistry is assumed.
    """
    capacity_by_chemistry: dict[str, float] = {}
    for battery in batteries(nodes):
        capacity_by_chemistry[battery.chemistry] = (
            capacity_by_chemistry.get(battery.chemistry, 0.0) + battery.capacity_ah * battery.quantity
        )

    dominant = FALLBACK_CHEMISTRY
    max_capacity = 0.0
    for chemistry, capacity in capacity_by_chemistry.items():
        if capacity > max_capacity:
            max_capacity = capacity
            dominant = chemistry
    return dominant


def effective_dod(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    return settings.depth_of_discharge[dominant_chemistry(nodes)]


def usable_capacity_ah(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    nodes = list(nodes)
    return total_capacity_ah(nodes) * effective_dod(nodes, settings)


def required_capacity_ah(daily_consumption_ah: float, days_autonomy: float, dod: float) -> float:
    """Capacity needed to cover ``days_autonomy`` days within the usable DoD.

    A non-positive DoD can never be satisfied and yields infinity.
    """
    if dod <= 0:
        return math.inf
    return daily_consumption_ah * days_autonomy / dod


def estimated_autonomy_days(usable_ah: float, daily_consumption_ah: float) -> float:
    """Days the usable capacity lasts. No consumption means unlimited autonomy."""
    if daily_consumption_ah <= 0:
        return math.inf
    return usable_ah / daily_consumption_ah


def classify_autonomy(autonomy_days: float, target_days: float) -> BatteryStatus:
    if autonomy_days >= target_days:
        return "ok"
    if autonomy_days >= target_days * BATTERY_WARNING_AUTONOMY_FRAC:
        return "warning"
    return "critical"


def required_capacity_ah_for_nodes(
    nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS
) -> float:
    nodes = list(nodes)
    return required_capacity_ah(
        total_daily_consumption_ah(nodes), settings.days_autonomy, effective_dod(nodes, settings)
    )


def autonomy_days_for_nodes(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    nodes = list(nodes)
    return estimated_autonomy_days(usable_capacity_ah(nodes, settings), total_daily_consumption_ah(nodes))


def battery_status(
    nodes: Iterable[ElectricalNode],
    settings: ProjectSettings = _DEFAULT_SETTINGS,
    target_days: float | None = None,
) -> BatteryStatus:
    """Classify autonomy against the target (project ``days_autonomy`` by default)."""
    target = settings.days_autonomy if target_days is None else target_days
    return classify_autonomy(autonomy_days_for_nodes(nodes, settings), target)


def battery_coverage_percent(nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS) -> float:
    """Installed capacity as a percentage of the required capacity, capped at 100."""
    nodes = list(nodes)
    installed = total_capacity_ah(nodes)
    required = required_capacity_ah_for_nodes(nodes, settings)
    if required <= 0:
        return 100.0
    return min(100.0, installed / required * 100)


def battery_recommendation(
    nodes: Iterable[ElectricalNode], settings: ProjectSettings = _DEFAULT_SETTINGS
) -> BatteryRecommendation:
    """Compare installed capacity with what the target autonomy needs."""
    nodes = list(nodes)
    current = total_capacity_ah(nodes)
    required = required_capacity_ah_for_nodes(nodes, settings)
    deficit = max(0.0, required - current)
    days = f"{settings.days_autonomy:g}"

    if deficit == 0:
        message = f"Capacity sufficient for {days} days of autonomy"
    elif math.isinf(deficit):
        message = f"No battery configuration can provide {days} days of autonomy"
    else:
        message = f"Missing {round(deficit)} Ah for {days} days of autonomy"

    return BatteryRecommendation(
        current_capacity_ah=round(current),
        required_capacity_ah=required if math.isinf(required) else round(required),
        deficit_ah=deficit if math.isinf(deficit) else round(deficit),
        coverage_percent=battery_coverage_percent(nodes, settings),
        message=message,
    )
