"""
BBS engine configuration — single source of truth for the bar catalog,
per-code hook/development/lap multipliers, unit factors and compliance
thresholds.

Import from here in all engines rather than hardcoding values.
"""
from __future__ import annotations

# ── Bar catalog ────────────────────────────────────────────────────────────────
# Nominal diameters (mm) offered by the schedule. Anything else is rejected.
BAR_DIAMETERS_MM: tuple[int, ...] = (6, 8, 10, 12, 16, 20, 25, 32)

# Unit weight of steel bar: d² / 162 kg/m, d in mm (ρ = 7850 kg/m³)
UNIT_WEIGHT_DIVISOR: float = 162.0


# ── Unit conversion ───────────────────────────────────────────────────────────
FT_TO_M: float = 0.3048
IN_TO_MM: float = 25.4

UNIT_SYSTEMS: tuple[str, ...] = ("metric", "imperial")


# ── Stock bars ────────────────────────────────────────────────────────────────
DEFAULT_STOCK_LENGTH_M: float = 12.0


# ── Design codes ──────────────────────────────────────────────────────────────
# hook: allowance per hook in bar diameters, keyed by hook angle
# development / lap: multiples of d used when the item gives no value
# cover_mm / wastage_pct: defaults when neither item nor options supply one
CODE_DEFAULTS: dict[str, dict] = {
    "NBC": {
        "hook": {"90": 9.0, "135": 12.0, "180": 16.0},
        "development": 40.0,
        "lap": 40.0,
        "cover_mm": 25.0,
        "wastage_pct": 3.0,
    },
    "IS": {
        "hook": {"90": 9.0, "135": 12.0, "180": 16.0},
        "development": 40.0,
        "lap": 40.0,
        "cover_mm": 25.0,
        "wastage_pct": 3.0,
    },
    "ACI": {
        # ACI 318 standard hook extensions (12db / 6db seismic / 4db)
        "hook": {"90": 12.0, "135": 6.0, "180": 4.0},
        "development": 48.0,
        # Splice lap stays 40d under every code
        "lap": 40.0,
        "cover_mm": 40.0,
        "wastage_pct": 5.0,
    },
}

DEFAULT_CODE: str = "NBC"


# ── Bend geometry ─────────────────────────────────────────────────────────────
# Bend deduction in bar diameters (IS practice: 1d per 45°)
BEND_DEDUCTIONS: dict[float, float] = {
    0.0: 0.0,
    45.0: 1.0,
    90.0: 2.0,
    135.0: 3.0,
    180.0: 4.0,
}

# Crank: extra inclined length for a 45° bend, in bar diameters
CRANK_45_EXTRA: float = 0.42

# Corners of a closed rectangular link that are not hooks
STIRRUP_CORNER_BENDS: int = 3

MAX_BEND_ANGLE_DEG: float = 180.0


# ── Element / bar vocabularies ────────────────────────────────────────────────
ELEMENT_TYPES: tuple[str, ...] = (
    "beam", "column", "slab", "footing", "wall", "stair", "custom",
)
BAR_TYPES: tuple[str, ...] = (
    "Main", "Secondary", "Stirrups/Ties", "Distribution", "Extra",
)
HOOK_TYPES: tuple[str, ...] = ("90", "135", "180", "custom")
SHAPE_CODES: tuple[str, ...] = (
    "straight", "L", "U", "crank", "stirrup", "spiral", "custom",
)

# Bar-mark prefixes per element type (B01, C01, ...)
BAR_MARK_PREFIXES: dict[str, str] = {
    "beam": "B",
    "column": "C",
    "slab": "S",
    "footing": "F",
    "wall": "W",
    "stair": "ST",
    "custom": "X",
}


# ── Compliance thresholds ─────────────────────────────────────────────────────
# A stirrup shorter than this many diameters is probably under-specified
STIRRUP_MIN_LENGTH_DIAMETERS: float = 50.0
# Recommended minimum clear spacing: max(25 mm, 1.5d)
MIN_SPACING_MM: float = 25.0
MIN_SPACING_DIAMETERS: float = 1.5


# ── CSV schema ────────────────────────────────────────────────────────────────
CSV_HEADERS: list[str] = [
    "element_type",
    "member_id",
    "bar_type",
    "bar_diameter_mm",
    "num_bars",
    "spacing_mm",
    "clear_length_m",
    "hook_type",
    "hook_length_mm",
    "bend_angles",
    "development_length_m",
    "cover_mm",
    "wastage_percent",
    "lap_length_m",
    "stock_length_m",
    "steel_rate_per_kg",
]
BEND_ANGLE_SEPARATOR: str = ";"
