"""Pydantic schemas for circuit inputs, settings, and analysis results."""

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from boatwire_engine.core.constants import (
    DEFAULT_ALTERNATOR_EFFICIENCY,
    DEFAULT_CHARGER_HOURS_PER_DAY,
    DEFAULT_COPPER_RESISTIVITY,
    DEFAULT_DAYS_AUTONOMY,
    DEFAULT_MAX_VOLTAGE_DROP_PERCENT,
    DEFAULT_SOLAR_EFFICIENCY,
    DEFAULT_SUN_HOURS_PER_DAY,
    DOD_BY_CHEMISTRY,
)

Voltage = Literal[12, 24, 48]
BatteryChemistry = Literal["lead", "agm", "gel", "lifepo4", "lithium"]
BatteryConfiguration = Literal["series", "parallel"]
CableType = Literal["single", "twin", "shielded", "battery"]
MainsVoltage = Literal[110, 220]

CableStatus = Literal["ok", "warning", "overload"]
FuseStatus = Literal["ok", "warning", "oversized"]
BatteryStatus = Literal["ok", "warning", "critical"]

ValidationErrorType = Literal["no_source", "voltage_mismatch", "overcurrent"]
ValidationWarningType = Literal[
    "voltage_drop",
    "undersized_cable",
    "disconnected",
    "unpowered",
    "low_battery",
    "unbalanced",
]


class EngineModel(BaseModel):
    """Immutable model accepting either camelCase (editor) or snake_case keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class NodeBase(EngineModel):
    """Fields shared by every electrical component."""

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    name: str = Field(default="", description="Display name")
    voltage: Voltage = Field(..., description="Nominal DC voltage, fixed at creation")

    @property
    def label(self) -> str:
        return self.name or self.id


class ConsumerNode(NodeBase):
    """Load drawing current from the DC network."""

    type: Literal["consumer"] = "consumer"
    # If both are given, power_w is authoritative
    power_w: Optional[float] = Field(default=None, ge=0, description="Power draw in W")
    current_a: Optional[float] = Field(default=None, ge=0, description="Current draw in A")
    daily_hours: float = Field(default=0.0, ge=0, le=24, description="Hours of use per day")
    duty_cycle: float = Field(default=1.0, ge=0, le=1, description="Fraction of on-time while in use")
    category: Optional[str] = None


class BatteryNode(NodeBase):
    """Battery bank (one or more identical units)."""

    type: Literal["battery"] = "battery"
    capacity_ah: float = Field(..., gt=0, description="Nominal capacity per unit in Ah")
    chemistry: BatteryChemistry
    quantity: int = Field(default=1, ge=1)
    configuration: BatteryConfiguration = "parallel"


class SolarNode(NodeBase):
    """Solar panel array."""

    type: Literal["solar"] = "solar"
    max_power_w: float = Field(..., ge=0, description="Peak power per panel in Wp")
    efficiency: Optional[float] = Field(default=None, ge=0, le=1, description="Defaults to project setting")
    quantity: int = Field(default=1, ge=1)


class AlternatorNode(NodeBase):
    """Engine-driven alternator."""

    type: Literal["alternator"] = "alternator"
    max_power_w: float = Field(..., ge=0)
    efficiency: Optional[float] = Field(default=None, ge=0, le=1, description="Defaults to project setting")
    engine_hours_per_day: float = Field(default=0.0, ge=0, le=24)
    charge_current_a: Optional[float] = Field(default=None, ge=0)


class ChargerNode(NodeBase):
    """Shore-power battery charger."""

    type: Literal["charger"] = "charger"
    max_power_w: float = Field(..., ge=0)
    input_voltage: MainsVoltage = 220


class InverterNode(NodeBase):
    """DC to AC inverter. Topology only."""

    type: Literal["inverter"] = "inverter"
    max_power_w: float = Field(..., ge=0)
    efficiency: Optional[float] = Field(default=None, ge=0, le=1)
    output_voltage: MainsVoltage = 220


class BusNode(NodeBase):
    """Distribution bus bar. Topology only."""

    type: Literal["bus"] = "bus"
    max_current_a: float = Field(..., gt=0)
    port_count: Optional[int] = Field(default=None, ge=1)


class FuseNode(NodeBase):
    """Fuse or breaker. Topology only."""

    type: Literal["fuse"] = "fuse"
    rating_a: float = Field(..., gt=0)
    fuse_type: Optional[Literal["blade", "anl", "mega", "breaker"]] = None


class SwitchNode(NodeBase):
    """Switch or battery isolator. Topology only."""

    type: Literal["switch"] = "switch"
    max_current_a: float = Field(..., gt=0)
    is_on: bool = True
    switch_type: Optional[Literal["toggle", "rocker", "battery"]] = None


ElectricalNode = Annotated[
    Union[
        ConsumerNode,
        BatteryNode,
        SolarNode,
        AlternatorNode,
        ChargerNode,
        InverterNode,
        BusNode,
        FuseNode,
        SwitchNode,
    ],
    Field(discriminator="type"),
]

_NODE_ADAPTER = TypeAdapter(ElectricalNode)
_NODE_LIST_ADAPTER = TypeAdapter(list[ElectricalNode])


def parse_node(data: dict) -> ElectricalNode:
    """Build the node variant selected by ``data["type"]``."""
    return _NODE_ADAPTER.validate_python(data)


def parse_nodes(data: list[dict]) -> list[ElectricalNode]:
    """Build a list of node variants from plain dicts."""
    return _NODE_LIST_ADAPTER.validate_python(data)


# ---------------------------------------------------------------------------
# Connections and settings
# ---------------------------------------------------------------------------


class Connection(EngineModel):
    """Cable between two nodes. Electrically undirected."""

    id: str = Field(..., min_length=1)
    from_node_id: str
    to_node_id: str
    section_mm2: float = Field(..., gt=0, description="Copper cross-section in mm²")
    length_m: float = Field(..., ge=0, description="One-way length in m")
    cable_type: CableType = "single"
    label: Optional[str] = None

    # Derived, written by cable analysis
    voltage_drop: Optional[float] = Field(default=None, description="Voltage drop in %")
    fuse_rating: Optional[float] = Field(default=None, description="Recommended fuse in A")


class ProjectSettings(EngineModel):
    """Calculation parameters for a project."""

    sun_hours_per_day: float = Field(default=DEFAULT_SUN_HOURS_PER_DAY, ge=0, le=24)
    days_autonomy: float = Field(default=DEFAULT_DAYS_AUTONOMY, gt=0)
    max_voltage_drop_percent: float = Field(default=DEFAULT_MAX_VOLTAGE_DROP_PERCENT, gt=0, le=100)
    copper_resistivity: float = Field(default=DEFAULT_COPPER_RESISTIVITY, gt=0)
    default_solar_efficiency: float = Field(default=DEFAULT_SOLAR_EFFICIENCY, ge=0, le=1)
    default_alternator_efficiency: float = Field(default=DEFAULT_ALTERNATOR_EFFICIENCY, ge=0, le=1)
    charger_hours_per_day: float = Field(default=DEFAULT_CHARGER_HOURS_PER_DAY, ge=0, le=24)
    depth_of_discharge: dict[BatteryChemistry, float] = Field(
        default_factory=lambda: dict(DOD_BY_CHEMISTRY)
    )

    @field_validator("depth_of_discharge")
    @classmethod
    def validate_depth_of_discharge(cls, v: dict) -> dict:
        """Fill missing chemistries from the reference table and check bounds."""
        merged = {**DOD_BY_CHEMISTRY, **v}
        for chemistry, dod in merged.items():
            if not 0 <= dod <= 1:
                raise ValueError(f"Depth of discharge for {chemistry} must be in [0, 1], got {dod}")
        return merged


# ---------------------------------------------------------------------------
# Analysis results
# ---------------------------------------------------------------------------


class CableAnalysis(EngineModel):
    """Electrical analysis of one connection."""

    connection_id: str
    current_a: float
    voltage_drop: float = Field(..., description="Voltage drop in V")
    voltage_drop_percent: float
    power_loss_w: float
    recommended_section_mm2: float
    recommended_fuse_a: float
    status: CableStatus


class FuseRecommendation(EngineModel):
    """Fuse advice for one connection."""

    connection_id: str
    section_mm2: float
    max_cable_current_a: float
    current_a: float
    recommended_fuse_a: float
    status: FuseStatus


class BatteryRecommendation(EngineModel):
    """Installed versus required battery capacity."""

    current_capacity_ah: float
    required_capacity_ah: float
    deficit_ah: float
    coverage_percent: float
    message: str


class EnergyBalance(EngineModel):
    """Daily consumption, production, and storage figures."""

    total_daily_consumption_ah: float
    total_daily_consumption_wh: float
    total_instant_power_w: float
    max_current_a: float

    solar_daily_production_ah: float
    alternator_daily_production_ah: float
    charger_daily_production_ah: float
    total_daily_production_ah: float

    total_battery_capacity_ah: float
    usable_battery_capacity_ah: float
    required_battery_capacity_ah: float
    dominant_chemistry: BatteryChemistry
    effective_dod: float

    daily_balance_ah: float
    estimated_autonomy_days: float
    battery_status: BatteryStatus


class ValidationError(EngineModel):
    """Blocking circuit finding."""

    type: ValidationErrorType
    node_ids: Optional[list[str]] = None
    connection_id: Optional[str] = None
    message: str


class ValidationWarning(EngineModel):
    """Advisory circuit finding."""

    type: ValidationWarningType
    node_ids: Optional[list[str]] = None
    connection_id: Optional[str] = None
    message: str


class CircuitValidation(EngineModel):
    """Result of validating a whole circuit."""

    is_valid: bool
    errors: list[ValidationError] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)


class ProjectAnalysis(EngineModel):
    """Everything the editor displays for one circuit snapshot."""

    energy_balance: EnergyBalance
    cables: list[CableAnalysis]
    fuses: list[FuseRecommendation]
    battery: BatteryRecommendation
    validation: CircuitValidation
    unpowered_consumer_ids: list[str] = Field(default_factory=list)
    total_power_loss_w: float = 0.0


# ---------------------------------------------------------------------------
# Bundle files
# ---------------------------------------------------------------------------


class ProjectConfig(EngineModel):
    """Circuit of one boat project."""

    project_id: str = Field(..., description="Unique project identifier")
    name: str = ""
    boat_template_id: Optional[str] = None
    nodes: list[ElectricalNode] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)


class BundleMetadata(BaseModel):
    """Metadata for reproducibility tracking."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    boatwire_version: str
    project_id: Optional[str] = None
