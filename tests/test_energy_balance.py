"""Test consumer energy, producer yield, and the energy balance aggregate."""

import numpy as np
import pytest

from boatwire_engine.core.metrics import compute_energy_balance
from boatwire_engine.core.power import (
    alternator_daily_ah,
    charger_daily_ah,
    is_energy_balance_positive,
    max_instant_current_a,
    node_current,
    node_daily_ah,
    node_daily_wh,
    node_power,
    solar_daily_ah,
    total_daily_consumption_ah,
    total_daily_production_ah,
    total_instant_power_w,
)
from boatwire_engine.core.schemas import (
    AlternatorNode,
    BatteryNode,
    BusNode,
    ChargerNode,
    ConsumerNode,
    ProjectSettings,
    SolarNode,
    parse_node,
    parse_nodes,
)


@pytest.fixture
def mixed_nodes():
    """Consumers, producers, and topology-only nodes on a 12 V network."""
    return [
        ConsumerNode(id="fridge", voltage=12, power_w=45, daily_hours=24, duty_cycle=0.3),
        ConsumerNode(id="lights", voltage=12, power_w=15, daily_hours=10),
        ConsumerNode(id="pump", voltage=12, current_a=3.5, daily_hours=0.5),
        BatteryNode(id="bat", voltage=12, capacity_ah=200, chemistry="agm"),
        SolarNode(id="pv", voltage=12, max_power_w=100, quantity=2),
        AlternatorNode(id="alt", voltage=12, max_power_w=960, engine_hours_per_day=2),
        BusNode(id="bus", voltage=12, max_current_a=100),
    ]


def test_consumer_current_and_daily_energy():
    """120 W at 12 V for 4 h at 50 % duty cycle."""
    consumer = ConsumerNode(id="c", voltage=12, power_w=120, daily_hours=4, duty_cycle=0.5)

    assert node_current(consumer) == pytest.approx(10.0)
    assert node_daily_ah(consumer) == pytest.approx(20.0)
    assert node_daily_wh(consumer) == pytest.approx(240.0)


def test_power_is_authoritative_over_current():
    """When both are given, power wins and power / voltage == current."""
    consumer = ConsumerNode(id="c", voltage=12, power_w=120, current_a=5)

    assert node_current(consumer) == pytest.approx(10.0)
    assert node_power(consumer) == pytest.approx(120.0)
    assert node_power(consumer) / consumer.voltage == pytest.approx(node_current(consumer))


def test_current_only_consumer():
    consumer = ConsumerNode(id="c", voltage=24, current_a=5)

    assert node_current(consumer) == pytest.approx(5.0)
    assert node_power(consumer) == pytest.approx(120.0)


def test_consumer_without_rating_draws_nothing():
    consumer = ConsumerNode(id="c", voltage=12, daily_hours=5)

    assert node_current(consumer) == 0.0
    assert node_power(consumer) == 0.0
    assert node_daily_ah(consumer) == 0.0


def test_non_consumers_draw_no_current(mixed_nodes):
    for node in mixed_nodes:
        if node.type != "consumer":
            assert node_current(node) == 0.0, f"{node.type} should draw no current"
            assert node_daily_ah(node) == 0.0, f"{node.type} should consume nothing"


def test_camel_case_input_is_accepted():
    """Editor payloads use camelCase keys and carry unknown UI fields."""
    node = parse_node(
        {
            "id": "ap",
            "type": "consumer",
            "voltage": 12,
            "powerW": 60,
            "dailyHours": 8,
            "dutyCycle": 0.6,
            "position": {"x": 10, "y": 20},
        }
    )

    assert isinstance(node, ConsumerNode)
    assert node_daily_ah(node) == pytest.approx(24.0)


def test_solar_yield():
    """100 Wp × 2 panels × 5 sun hours × 0.7 efficiency / 12 V."""
    solar = SolarNode(id="pv", voltage=12, max_power_w=100, quantity=2)

    assert solar_daily_ah(solar) == pytest.approx(100 * 2 * 5 * 0.7 / 12)

    # Node efficiency overrides the project default
    efficient = SolarNode(id="pv2", voltage=12, max_power_w=100, efficiency=0.9)
    assert solar_daily_ah(efficient) == pytest.approx(100 * 5 * 0.9 / 12)

    # More sun, more yield
    sunny = ProjectSettings(sun_hours_per_day=8)
    assert solar_daily_ah(solar, sunny) == pytest.approx(100 * 2 * 8 * 0.7 / 12)


def test_alternator_yield():
    """960 W × 0.85 / 12 V = 68 A for 2 engine hours."""
    alternator = AlternatorNode(id="alt", voltage=12, max_power_w=960, engine_hours_per_day=2)

    assert alternator_daily_ah(alternator) == pytest.approx(136.0)


def test_charger_yield_depends_on_shore_hours():
    charger = ChargerNode(id="ch", voltage=24, max_power_w=720)

    assert charger_daily_ah(charger) == 0.0, "No shore hours configured by default"
    assert charger_daily_ah(charger, ProjectSettings(charger_hours_per_day=2)) == pytest.approx(60.0)


def test_aggregates_are_order_independent(mixed_nodes):
    """Totals are plain sums and must not depend on node order."""
    rng = np.random.default_rng(42)

    expected_consumption = total_daily_consumption_ah(mixed_nodes)
    expected_production = total_daily_production_ah(mixed_nodes)
    expected_power = total_instant_power_w(mixed_nodes)

    for _ in range(20):
        shuffled = [mixed_nodes[i] for i in rng.permutation(len(mixed_nodes))]
        assert total_daily_consumption_ah(shuffled) == pytest.approx(expected_consumption)
        assert total_daily_production_ah(shuffled) == pytest.approx(expected_production)
        assert total_instant_power_w(shuffled) == pytest.approx(expected_power)


def test_max_instant_current(mixed_nodes):
    """45 W + 15 W + 3.5 A × 12 V all running at once on 12 V."""
    assert total_instant_power_w(mixed_nodes) == pytest.approx(102.0)
    assert max_instant_current_a(mixed_nodes) == pytest.approx(8.5)


def test_max_current_uses_each_consumer_voltage():
    """A 240 W load on 24 V draws 10 A whatever the default voltage setting."""
    nodes = [
        BatteryNode(id="bat", voltage=24, capacity_ah=200, chemistry="lifepo4"),
        ConsumerNode(id="heater", voltage=24, power_w=240, daily_hours=1),
        ConsumerNode(id="light", voltage=12, power_w=12, daily_hours=1),
    ]

    assert max_instant_current_a(nodes) == pytest.approx(11.0)
    assert compute_energy_balance(nodes).max_current_a == pytest.approx(11.0)
    assert compute_energy_balance(nodes[:2]).max_current_a == pytest.approx(10.0)


def test_energy_balance(mixed_nodes):
    """Full aggregate for the mixed network."""
    balance = compute_energy_balance(mixed_nodes)

    consumption = 45 * 24 * 0.3 / 12 + 15 * 10 / 12 + 3.5 * 0.5
    solar = 100 * 2 * 5 * 0.7 / 12
    alternator = 136.0

    assert balance.total_daily_consumption_ah == pytest.approx(consumption)
    assert balance.total_daily_consumption_wh == pytest.approx(consumption * 12)
    assert balance.solar_daily_production_ah == pytest.approx(solar)
    assert balance.alternator_daily_production_ah == pytest.approx(alternator)
    assert balance.charger_daily_production_ah == 0.0
    assert balance.total_daily_production_ah == pytest.approx(solar + alternator)
    assert balance.daily_balance_ah == pytest.approx(solar + alternator - consumption)

    assert balance.total_battery_capacity_ah == pytest.approx(200.0)
    assert balance.dominant_chemistry == "agm"
    assert balance.effective_dod == pytest.approx(0.5)
    assert balance.usable_battery_capacity_ah == pytest.approx(100.0)
    assert balance.estimated_autonomy_days == pytest.approx(100.0 / consumption)
    assert balance.required_battery_capacity_ah == pytest.approx(consumption * 2 / 0.5)
    assert balance.battery_status == "ok"


def test_energy_balance_without_consumers():
    """No consumption means unlimited autonomy, never a division error."""
    nodes = [BatteryNode(id="bat", voltage=12, capacity_ah=100, chemistry="lead")]

    balance = compute_energy_balance(nodes)

    assert balance.total_daily_consumption_ah == 0.0
    assert balance.estimated_autonomy_days == float("inf")
    assert balance.required_battery_capacity_ah == 0.0
    assert balance.battery_status == "ok"


def test_parse_mixed_node_list():
    nodes = parse_nodes(
        [
            {"id": "b", "type": "battery", "voltage": 12, "capacityAh": 100, "chemistry": "gel"},
            {"id": "p", "type": "solar", "voltage": 12, "maxPowerW": 50},
            {"id": "l", "type": "consumer", "voltage": 12, "currentA": 1, "dailyHours": 2},
        ]
    )

    assert [type(n) for n in nodes] == [BatteryNode, SolarNode, ConsumerNode]


def test_positive_balance(mixed_nodes):
    assert is_energy_balance_positive(mixed_nodes)
    assert not is_energy_balance_positive(
        [ConsumerNode(id="c", voltage=12, power_w=120, daily_hours=1)]
    )
