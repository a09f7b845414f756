"""Reference data, units, and default settings for boat DC networks.

UNITS:
- Voltage: V (nominal DC bus voltage, one of 12, 24, 48)
- Current: A
- Power: W
- Energy: Ah (at the node's nominal voltage) and Wh
- Cable section: mm² (copper)
- Cable length: m, one-way; the return conductor is accounted for internally
- Resistivity: Ω·mm²/m

VOLTAGE DROP:
dV = 2 * rho * length_m * current_a / section_mm2
dV% = dV / voltage * 100
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CableSpec:
    """Reference row of the marine copper cable table."""

    section_mm2: float
    max_current_a: float  # free air, 30 °C ambient
    recommended_fuse_a: float
    resistance_per_km: float  # Ω/km, copper
    awg: str
    usage_hint: str


# Ordered ascending by section; lookups rely on this ordering.
CABLE_STANDARDS: tuple[CableSpec, ...] = (
    CableSpec(0.5, 3, 3, 36.7, "20", "Signals, sensors, single LEDs"),
    CableSpec(0.75, 6, 5, 24.8, "18", "LED lighting, instruments"),
    CableSpec(1.0, 10, 7.5, 18.2, "17", "Small consumers"),
    CableSpec(1.5, 15, 10, 12.2, "16", "Pumps, navigation lights"),
    CableSpec(2.5, 20, 15, 7.41, "14", "12V sockets, VHF, GPS"),
    CableSpec(4, 30, 25, 4.61, "12", "Fridge, pressure pumps"),
    CableSpec(6, 40, 30, 3.08, "10", "Small windlass, watermaker"),
    CableSpec(10, 60, 50, 1.83, "8", "Charger, small thruster"),
    CableSpec(16, 80, 60, 1.15, "6", "Medium windlass, large bilge pump"),
    CableSpec(25, 110, 80, 0.727, "4", "Thruster, small inverter"),
    CableSpec(35, 140, 100, 0.524, "2", "Alternator, medium inverter"),
    CableSpec(50, 175, 150, 0.387, "1", "Short battery cables"),
    CableSpec(70, 215, 175, 0.268, "2/0", "Battery cables, starter"),
    CableSpec(95, 265, 200, 0.193, "3/0", "Main battery link"),
    CableSpec(120, 310, 250, 0.153, "4/0", "Large inverter, electric propulsion"),
)

SMALLEST_SECTION_MM2 = CABLE_STANDARDS[0].section_mm2
LARGEST_SECTION_MM2 = CABLE_STANDARDS[-1].section_mm2

# Sections at or below this are never reported as oversized
OVERSIZE_MIN_SECTION_MM2 = 1.5

STANDARD_FUSE_RATINGS_A: tuple[float, ...] = (
    1, 2, 3, 5, 7.5, 10, 15, 20, 25, 30, 35, 40, 50, 60, 70, 80,
    100, 125, 150, 175, 200, 250, 300,
)

# Depth of discharge by battery chemistry (fraction of nominal capacity)
DOD_BY_CHEMISTRY: dict[str, float] = {
    "lead": 0.5,
    "agm": 0.5,
    "gel": 0.5,
    "lifepo4": 0.8,
    "lithium": 0.8,
}
FALLBACK_CHEMISTRY = "lead"

# Node type groupings
SOURCE_NODE_TYPES = frozenset({"battery", "solar", "alternator", "charger"})
STANDALONE_NODE_TYPES = frozenset({"bus", "switch", "fuse"})  # may legitimately have no cable

# Default project settings
DEFAULT_SUN_HOURS_PER_DAY = 5.0
DEFAULT_DAYS_AUTONOMY = 2.0
DEFAULT_MAX_VOLTAGE_DROP_PERCENT = 3.0
DEFAULT_COPPER_RESISTIVITY = 0.0175
DEFAULT_SOLAR_EFFICIENCY = 0.7
DEFAULT_ALTERNATOR_EFFICIENCY = 0.85
DEFAULT_CHARGER_HOURS_PER_DAY = 0.0

# Sizing rules
FUSE_SAFETY_FACTOR = 1.25  # fuse and cable ampacity margin over load current
BATTERY_C_RATE_HOURS = 5.0  # C/5 estimate for battery-side cables
CABLE_WARNING_LOAD_FRAC = 0.8
CABLE_OVERSIZE_LOAD_FRAC = 0.3
BATTERY_WARNING_AUTONOMY_FRAC = 0.5
MIN_PRODUCTION_RATIO = 0.8

# Output rounding (decimal places)
ROUND_CURRENT = 1
ROUND_VOLTAGE_DROP = 3
ROUND_VOLTAGE_DROP_PERCENT = 2
ROUND_POWER_LOSS = 1
