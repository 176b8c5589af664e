"""
Input schemas for the BBS engine.

BarGroupInput is one schedule row: N identical bars in one member, with every
per-item override as an explicit optional field. BBSOptions carries the
project-wide defaults. Both are frozen so a calculate() call can never mutate
what the caller handed in.

Only types and vocabularies are enforced here. Numeric ranges (finite,
non-negative, non-zero, catalog diameters) are checked by the units and
validation engines so they surface as InvalidUnitError / ValidationError.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ElementType = Literal["beam", "column", "slab", "footing", "wall", "stair", "custom"]
BarType = Literal["Main", "Secondary", "Stirrups/Ties", "Distribution", "Extra"]
HookType = Literal["90", "135", "180", "custom"]
ShapeCode = Literal["straight", "L", "U", "crank", "stirrup", "spiral", "custom"]
UnitSystem = Literal["metric", "imperial"]


class BarGroupInput(BaseModel):
    """A group of identical, identically-shaped bars in one member."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    element_type: ElementType = Field(..., description="Structural member family")
    member_id: Optional[str] = Field(
        None, description="Free-text member label, e.g. 'Beam B1' (not unique)"
    )
    bar_type: BarType = Field(..., description="Role of the bar in the member")
    bar_diameter_mm: float = Field(..., description="Nominal diameter, one of the catalog sizes")
    num_bars: int = Field(..., description="Quantity of identical bars in this group")
    clear_length_m: float = Field(
        ..., description="Clear span/height the bar covers; developed leg length for links"
    )
    spacing_mm: Optional[float] = Field(
        None, description="Centre-to-centre spacing; informational only"
    )
    hook_type: Optional[HookType] = Field(None, description="Hook angle at each end")
    hook_length_mm: Optional[float] = Field(
        None, description="Explicit hook allowance per end, overrides the code table"
    )
    bend_angles: Optional[List[float]] = Field(
        None, description="Ordered bend angles in degrees (cranks, L/U legs)"
    )
    development_length_m: Optional[float] = None
    cover_mm: Optional[float] = None
    wastage_percent: Optional[float] = None
    lap_length_m: Optional[float] = None
    stock_length_m: Optional[float] = None
    steel_rate_per_kg: Optional[float] = None
    shape_preference: Optional[ShapeCode] = Field(
        None, description="Explicit shape, bypasses inference"
    )
    member_breadth_mm: Optional[float] = Field(
        None, description="Member breadth for closed-link perimeter derivation"
    )
    member_depth_mm: Optional[float] = Field(
        None, description="Member depth for closed-link perimeter derivation"
    )
    requires_full_development: bool = Field(
        False, description="Bar needs full Ld at an unsupported end (flagged, never added)"
    )

    @field_validator("hook_type", mode="before")
    @classmethod
    def _hook_type_as_text(cls, v):
        # 135, 135.0 and "135" all mean the same hook
        if v is None or v == "":
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            if float(v).is_integer():
                return str(int(v))
            return str(v)
        return str(v).strip()

    @field_validator("bend_angles", mode="before")
    @classmethod
    def _bend_angles_from_text(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            parts = v.replace(",", ";").split(";")
            return [float(p) for p in (s.strip() for s in parts) if p]
        return v

    @field_validator("shape_preference", mode="before")
    @classmethod
    def _blank_shape_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BBSOptions(BaseModel):
    """Project-wide defaults applied when an item carries no override."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str = Field("NBC", description="Design code: NBC, IS or ACI")
    units: UnitSystem = Field(
        "metric", description="Unit system of item lengths (imperial: ft / in)"
    )
    stock_length_m: float = Field(12.0, description="Manufactured bar length, metres")
    default_cover_mm: Optional[float] = Field(None, description="Falls back to the code default")
    wastage_percent_default: Optional[float] = Field(
        None, description="Falls back to the code default"
    )
    steel_rate_per_kg: Optional[float] = Field(
        None, description="Rate for items without their own; None leaves rows unpriced"
    )
    currency: Optional[str] = None
    project_name: Optional[str] = None
    location: Optional[str] = None
    designer: Optional[str] = None

    def project_meta(self) -> dict:
        """Pass-through project metadata (no computational effect)."""
        return {
            "project_name": self.project_name,
            "location": self.location,
            "designer": self.designer,
            "currency": self.currency,
        }
