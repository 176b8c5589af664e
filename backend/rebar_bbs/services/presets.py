"""Quick-start bar groups for common members (typical starting schedules, edit before use)."""
from typing import List

from rebar_bbs.models.bbs_schema import BarGroupInput


def beam_preset(member_id: str = "Beam B1") -> List[BarGroupInput]:
    """2 top + 2 bottom Ø16 main bars with 135° hooks, Ø8 stirrups @ 150."""
    main = dict(
        element_type="beam", member_id=member_id, bar_type="Main",
        bar_diameter_mm=16, num_bars=2, clear_length_m=4.5, hook_type="135",
    )
    return [
        BarGroupInput(**main),
        BarGroupInput(**main),
        BarGroupInput(
            element_type="beam", member_id=member_id, bar_type="Stirrups/Ties",
            bar_diameter_mm=8, num_bars=40, spacing_mm=150, clear_length_m=0.6, hook_type="135",
        ),
    ]


def column_preset(member_id: str = "C1") -> List[BarGroupInput]:
    """8 Ø16 longitudinal bars and Ø8 ties @ 150."""
    return [
        BarGroupInput(
            element_type="column", member_id=member_id, bar_type="Main",
            bar_diameter_mm=16, num_bars=8, clear_length_m=3.0, hook_type="135",
        ),
        BarGroupInput(
            element_type="column", member_id=member_id, bar_type="Stirrups/Ties",
            bar_diameter_mm=8, num_bars=50, spacing_mm=150, clear_length_m=0.75, hook_type="135",
        ),
    ]


def slab_preset(member_id: str = "S1") -> List[BarGroupInput]:
    """Ø12 main and Ø10 distribution mesh @ 150."""
    return [
        BarGroupInput(
            element_type="slab", member_id=f"{member_id} Main", bar_type="Main",
            bar_diameter_mm=12, num_bars=40, spacing_mm=150, clear_length_m=4.2,
        ),
        BarGroupInput(
            element_type="slab", member_id=f"{member_id} Dist", bar_type="Distribution",
            bar_diameter_mm=10, num_bars=40, spacing_mm=150, clear_length_m=3.6,
        ),
    ]


def footing_preset(member_id: str = "F1") -> List[BarGroupInput]:
    """Ø12 bottom mesh @ 150 both ways."""
    return [
        BarGroupInput(
            element_type="footing", member_id=f"{member_id} X", bar_type="Main",
            bar_diameter_mm=12, num_bars=12, spacing_mm=150, clear_length_m=2.0,
        ),
        BarGroupInput(
            element_type="footing", member_id=f"{member_id} Y", bar_type="Distribution",
            bar_diameter_mm=12, num_bars=12, spacing_mm=150, clear_length_m=2.0,
        ),
    ]


PRESETS = {
    "beam": beam_preset,
    "column": column_preset,
    "slab": slab_preset,
    "footing": footing_preset,
}
