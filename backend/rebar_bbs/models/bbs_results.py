"""Result records produced by one calculate() call. Frozen: read-only snapshots."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class BBSResultRow:
    bar_mark: str
    member_id: str
    element_type: str
    bar_type: str
    shape_code: str
    bar_diameter_mm: float
    num_bars: int
    cutting_length_m: float            # geometric length of one bar (fabrication)
    consumed_length_per_bar_m: float   # cutting length + laps (procurement)
    total_length_m: float              # consumed_length_per_bar_m × num_bars
    unit_weight_kg_per_m: float
    total_weight_kg: float
    wastage_percent: float
    ordered_weight_kg: float           # total_weight_kg grossed up by wastage
    hook_details: str
    splice_count: int = 0
    lap_length_m: Optional[float] = None
    remarks: str = ""
    total_cost: Optional[float] = None


@dataclass(frozen=True)
class DiameterSummary:
    bar_diameter_mm: float
    count: int
    total_length_m: float
    total_weight_kg: float


@dataclass(frozen=True)
class BBSSummary:
    total_bars: int
    grand_total_length_m: float
    total_steel_weight_kg: float
    total_ordered_weight_kg: float
    by_diameter: tuple = field(default_factory=tuple)
    total_cost: Optional[float] = None


@dataclass(frozen=True)
class BBSResult:
    results: tuple
    summary: BBSSummary
    project_meta: Mapping
    code_used: str
    compliance_notes: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "project_meta", MappingProxyType(dict(self.project_meta or {})))

    @property
    def human_summary(self) -> str:
        tonnes = round(self.summary.total_steel_weight_kg / 1000.0, 2)
        return f"Total steel required is {tonnes:g} tonnes across {self.summary.total_bars} bars."

    def to_dict(self) -> dict:
        """Plain-dict view for JSON hosts; unpriced costs stay None."""
        return {
            "results": [asdict(row) for row in self.results],
            "summary": asdict(self.summary),
            "project_meta": dict(self.project_meta),
            "code_used": self.code_used,
            "compliance_notes": list(self.compliance_notes),
            "human_summary": self.human_summary,
        }
