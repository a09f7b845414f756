"""Energy balance and summary metrics for a circuit."""

from collections.abc import Sequence

from boatwire_engine.core import battery, power
from boatwire_engine.core.schemas import (
    ElectricalNode,
    EnergyBalance,
    ProjectAnalysis,
    ProjectSettings,
)

_DEFAULT_SETTINGS = ProjectSettings()


def compute_energy_balance(
    nodes: Sequence[ElectricalNode],
    settings: ProjectSettings = _DEFAULT_SETTINGS,
) -> EnergyBalance:
    """Compute daily consumption, production, and battery figures.

    Args:
        nodes: All nodes of the circuit
        settings: Project settings (sun hours, autonomy target, DoD table)

    Returns:
        EnergyBalance for the circuit
    """
    nodes = list(nodes)

    consumption_ah = power.total_daily_consumption_ah(nodes)
    instant_power_w = power.total_instant_power_w(nodes)

    solar_ah = power.total_solar_daily_ah(nodes, settings)
    alternator_ah = power.total_alternator_daily_ah(nodes, settings)
    charger_ah = power.total_charger_daily_ah(nodes, settings)
    production_ah = solar_ah + alternator_ah + charger_ah

    total_capacity = battery.total_capacity_ah(nodes)
    dod = battery.effective_dod(nodes, settings)
    usable_capacity = total_capacity * dod
    autonomy_days = battery.estimated_autonomy_days(usable_capacity, consumption_ah)

    return EnergyBalance(
        total_daily_consumption_ah=consumption_ah,
        total_daily_consumption_wh=power.total_daily_consumption_wh(nodes),
        total_instant_power_w=instant_power_w,
        max_current_a=power.max_instant_current_a(nodes),
        solar_daily_production_ah=solar_ah,
        alternator_daily_production_ah=alternator_ah,
        charger_daily_production_ah=charger_ah,
        total_daily_production_ah=production_ah,
        total_battery_capacity_ah=total_capacity,
        usable_battery_capacity_ah=usable_capacity,
        required_battery_capacity_ah=battery.required_capacity_ah(consumption_ah, settings.days_autonomy, dod),
        dominant_chemistry=battery.dominant_chemistry(nodes),
        effective_dod=dod,
        daily_balance_ah=production_ah - consumption_ah,
        estimated_autonomy_days=autonomy_days,
        battery_status=battery.classify_autonomy(autonomy_days, settings.days_autonomy),
    )


def compute_metrics(analysis: ProjectAnalysis) -> dict:
    """Flatten an analysis into the metrics reported by the CLI.

    Args:
        analysis: Full project analysis

    Returns:
        Dictionary of metrics
    """
    balance = analysis.energy_balance
    statuses = [c.status for c in analysis.cables]

    return {
        "daily_consumption_ah": balance.total_daily_consumption_ah,
        "daily_consumption_wh": balance.total_daily_consumption_wh,
        "daily_production_ah": balance.total_daily_production_ah,
        "daily_balance_ah": balance.daily_balance_ah,
        "instant_power_w": balance.total_instant_power_w,
        "battery_capacity_ah": balance.total_battery_capacity_ah,
        "usable_capacity_ah": balance.usable_battery_capacity_ah,
        "required_capacity_ah": balance.required_battery_capacity_ah,
        "autonomy_days": balance.estimated_autonomy_days,
        "battery_status": balance.battery_status,
        "battery_coverage_pct": analysis.battery.coverage_percent,
        "num_cables": len(analysis.cables),
        "num_cables_overloaded": statuses.count("overload"),
        "num_cables_high_drop": statuses.count("warning"),
        "cable_loss_w": analysis.total_power_loss_w,
        "num_errors": len(analysis.validation.errors),
        "num_warnings": len(analysis.validation.warnings),
        "is_valid": analysis.validation.is_valid,
    }
