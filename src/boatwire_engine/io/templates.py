"""Ready-made example projects for bundles, demos, and tests."""

from collections.abc import Callable

from boatwire_engine.core.schemas import (
    AlternatorNode,
    BatteryNode,
    BusNode,
    ChargerNode,
    Connection,
    ConsumerNode,
    FuseNode,
    InverterNode,
    ProjectConfig,
    ProjectSettings,
    SolarNode,
    SwitchNode,
)


def _cable(cable_id: str, from_id: str, to_id: str, section_mm2: float, length_m: float, **kwargs) -> Connection:
    return Connection(
        id=cable_id,
        from_node_id=from_id,
        to_node_id=to_id,
        section_mm2=section_mm2,
        length_m=length_m,
        **kwargs,
    )


def sailboat_12v() -> tuple[ProjectConfig, ProjectSettings]:
    """Coastal cruising sailboat: 12 V AGM bank, solar, and alternator."""
    nodes = [
        BatteryNode(id="bat-house", name="House AGM 100Ah", voltage=12, capacity_ah=100, chemistry="agm", quantity=2),
        SwitchNode(id="sw-main", name="Battery isolator", voltage=12, max_current_a=300, switch_type="battery"),
        FuseNode(id="fuse-main", name="Main ANL fuse", voltage=12, rating_a=150, fuse_type="anl"),
        BusNode(id="bus-main", name="Main bus", voltage=12, max_current_a=150, port_count=12),
        SolarNode(id="pv-deck", name="Deck panels 150Wp", voltage=12, max_power_w=150, quantity=2),
        AlternatorNode(id="alt", name="Alternator 80A", voltage=12, max_power_w=960, engine_hours_per_day=1),
        ConsumerNode(id="nav-lights", name="Navigation lights", voltage=12, power_w=15, daily_hours=10),
        ConsumerNode(id="fridge", name="Fridge", voltage=12, power_w=45, daily_hours=24, duty_cycle=0.3),
        ConsumerNode(id="autopilot", name="Autopilot", voltage=12, power_w=60, daily_hours=8, duty_cycle=0.6),
        ConsumerNode(id="vhf", name="VHF", voltage=12, power_w=25, daily_hours=12, duty_cycle=0.1),
        ConsumerNode(id="cabin-led", name="Cabin LED lighting", voltage=12, power_w=8, daily_hours=4),
        ConsumerNode(id="bilge", name="Bilge pump", voltage=12, current_a=2.5, daily_hours=0.2),
    ]
    connections = [
        _cable("c-bat-sw", "bat-house", "sw-main", 35, 0.5, cable_type="battery"),
        _cable("c-sw-fuse", "sw-main", "fuse-main", 35, 0.5, cable_type="battery"),
        _cable("c-fuse-bus", "fuse-main", "bus-main", 35, 1.0, cable_type="battery"),
        _cable("c-pv-bus", "pv-deck", "bus-main", 6, 4.0, cable_type="twin"),
        _cable("c-alt-bat", "alt", "bat-house", 25, 2.0),
        _cable("c-nav", "bus-main", "nav-lights", 2.5, 8.0, cable_type="twin"),
        _cable("c-fridge", "bus-main", "fridge", 4, 3.0, cable_type="twin"),
        _cable("c-autopilot", "bus-main", "autopilot", 6, 5.0, cable_type="twin"),
        _cable("c-vhf", "bus-main", "vhf", 2.5, 4.0, cable_type="twin"),
        _cable("c-led", "bus-main", "cabin-led", 1.5, 3.0, cable_type="twin"),
        _cable("c-bilge", "bus-main", "bilge", 2.5, 2.0, cable_type="twin"),
    ]
    project = ProjectConfig(
        project_id="sailboat_12v",
        name="Coastal sailboat 12V",
        boat_template_id="sailboat",
        nodes=nodes,
        connections=connections,
    )
    return project, ProjectSettings()


def catamaran_24v() -> tuple[ProjectConfig, ProjectSettings]:
    """Blue-water catamaran: 24 V lithium bank, large solar array, shore charger."""
    nodes = [
        BatteryNode(id="bat-lfp", name="LiFePO4 24V 200Ah", voltage=24, capacity_ah=200, chemistry="lifepo4", quantity=2),
        FuseNode(id="fuse-main", name="Class T fuse", voltage=24, rating_a=250, fuse_type="mega"),
        BusNode(id="bus-main", name="Main bus", voltage=24, max_current_a=250),
        SolarNode(id="pv-roof", name="Roof panels 300Wp", voltage=24, max_power_w=300, quantity=4, efficiency=0.75),
        ChargerNode(id="charger", name="Charger 24V 30A", voltage=24, max_power_w=720),
        InverterNode(id="inverter", name="Inverter 2000W", voltage=24, max_power_w=2000, efficiency=0.9),
        ConsumerNode(id="fridge", name="Fridge", voltage=24, power_w=45, daily_hours=24, duty_cycle=0.3),
        ConsumerNode(id="freezer", name="Freezer", voltage=24, power_w=60, daily_hours=24, duty_cycle=0.35),
        ConsumerNode(id="watermaker", name="Watermaker", voltage=24, power_w=300, daily_hours=2),
        ConsumerNode(id="windlass", name="Windlass", voltage=24, power_w=1200, daily_hours=0.1),
        ConsumerNode(id="plotter", name="Chart plotter", voltage=24, power_w=15, daily_hours=12),
    ]
    connections = [
        _cable("c-bat-fuse", "bat-lfp", "fuse-main", 50, 0.5, cable_type="battery"),
        _cable("c-fuse-bus", "fuse-main", "bus-main", 50, 1.0, cable_type="battery"),
        _cable("c-pv-bus", "pv-roof", "bus-main", 10, 6.0, cable_type="twin"),
        _cable("c-charger-bus", "charger", "bus-main", 10, 2.0),
        _cable("c-inverter-bat", "bat-lfp", "inverter", 50, 1.5, cable_type="battery"),
        _cable("c-fridge", "bus-main", "fridge", 2.5, 4.0, cable_type="twin"),
        _cable("c-freezer", "bus-main", "freezer", 2.5, 5.0, cable_type="twin"),
        _cable("c-watermaker", "bus-main", "watermaker", 6, 6.0, cable_type="twin"),
        _cable("c-windlass", "bus-main", "windlass", 25, 12.0),
        _cable("c-plotter", "bus-main", "plotter", 1.5, 5.0, cable_type="twin"),
    ]
    project = ProjectConfig(
        project_id="catamaran_24v",
        name="Blue-water catamaran 24V",
        boat_template_id="catamaran",
        nodes=nodes,
        connections=connections,
    )
    settings = ProjectSettings(sun_hours_per_day=6, days_autonomy=3, charger_hours_per_day=2)
    return project, settings


def voltage_mismatch() -> tuple[ProjectConfig, ProjectSettings]:
    """Faulty wiring: a 24 V load on a 12 V battery and an isolated branch."""
    nodes = [
        BatteryNode(id="bat", name="Lead 100Ah", voltage=12, capacity_ah=100, chemistry="lead"),
        ConsumerNode(id="heater", name="Water heater 24V", voltage=24, power_w=200, daily_hours=1),
        BusNode(id="bus-aft", name="Aft bus", voltage=12, max_current_a=60),
        ConsumerNode(id="deck-light", name="Deck light", voltage=12, power_w=10, daily_hours=2, duty_cycle=0.5),
        ConsumerNode(id="usb", name="USB sockets", voltage=12, power_w=10, daily_hours=4),
    ]
    connections = [
        _cable("c-bat-heater", "bat", "heater", 4, 2.0),
        _cable("c-bus-light", "bus-aft", "deck-light", 1.5, 3.0, cable_type="twin"),
    ]
    project = ProjectConfig(
        project_id="voltage_mismatch",
        name="Wiring faults demo",
        nodes=nodes,
        connections=connections,
    )
    return project, ProjectSettings()


TEMPLATES: dict[str, Callable[[], tuple[ProjectConfig, ProjectSettings]]] = {
    "sailboat_12v": sailboat_12v,
    "catamaran_24v": catamaran_24v,
    "voltage_mismatch": voltage_mismatch,
}


def get_template(name: str) -> tuple[ProjectConfig, ProjectSettings]:
    """Build the named example project.

    Raises:
        ValueError: If no template has that name
    """
    try:
        builder = TEMPLATES[name]
    except KeyError:
        raise ValueError(f"Unknown template {name!r}. Available: {', '.join(sorted(TEMPLATES))}")
    return builder()
