"""
test_bbs_engine.py — End-to-end tests for calculate().

Tests cover:
  - Reference scenarios: beam main bars, column ties, spliced slab bar, zero diameter
  - Properties: exact straight lengths, unit-weight identity, idempotence,
    splice arithmetic, summary = Σ rows
  - Error taxonomy and fail-whole-call policy
  - Costing: per-item rate, default rate, unpriced rows
  - Compliance notes: custom fallback, splice, defaulted cover, short stirrup, short hook
  - Bar marks, project metadata, imperial input, wastage
"""

import math
import pytest

from rebar_bbs.errors import (
    BBSError,
    InvalidGeometryError,
    InvalidUnitError,
    UnknownMixOrCodeError,
    ValidationError,
)
from rebar_bbs.models.bbs_schema import BarGroupInput, BBSOptions
from rebar_bbs.services.bbs_engine import calculate


def _rel_close(a, b, tol=1e-9):
    return abs(a - b) <= tol * max(abs(a), abs(b), 1.0)


# ===========================================================================
# Class 1: Reference scenarios
# ===========================================================================

class TestScenarios:

    def test_scenario_a_beam_main(self, beam_main_item):
        """
        Ø16 × 4, 5.0 m, 135° hooks: hook 12 × 16 = 192 mm per end.
        cutting = 5.0 + 2 × 0.192 = 5.384 m; unit weight 16²/162 = 1.580 kg/m;
        total weight = 5.384 × 4 × 1.5802 ≈ 34.03 kg.
        """
        result = calculate([beam_main_item])
        row = result.results[0]
        assert row.shape_code == "straight"
        assert abs(row.cutting_length_m - 5.384) < 1e-9
        assert abs(row.unit_weight_kg_per_m - 1.580) < 0.001
        assert abs(row.total_weight_kg - 34.03) < 0.01
        assert row.splice_count == 0 and row.lap_length_m is None

    def test_scenario_b_column_ties(self, column_tie_item):
        """Ø8 ties, 0.8 m leg + 2 × 0.096 m hooks = 0.992 m."""
        row = calculate([column_tie_item]).results[0]
        assert row.shape_code == "stirrup"
        assert abs(row.cutting_length_m - 0.992) < 1e-9
        assert abs(row.total_length_m - 0.992 * 20) < 1e-9

    def test_scenario_c_splice(self, long_slab_item):
        """14 m bar on 12 m stock: one splice, lap 40 × 12 mm = 0.48 m."""
        row = calculate([long_slab_item]).results[0]
        assert row.cutting_length_m == 14.0
        assert row.splice_count == 1
        assert row.lap_length_m is not None and abs(row.lap_length_m - 0.48) < 1e-12
        assert abs(row.consumed_length_per_bar_m - 14.48) < 1e-9

    def test_scenario_d_zero_diameter(self, beam_main_item, column_tie_item):
        bad = dict(beam_main_item, bar_diameter_mm=0)
        with pytest.raises(ValidationError) as exc:
            calculate([column_tie_item, bad])
        assert exc.value.item_index == 1
        assert exc.value.field == "bar_diameter_mm"


# ===========================================================================
# Class 2: Properties
# ===========================================================================

class TestProperties:

    @pytest.mark.parametrize("clear", [0.35, 1.0, 3.3, 7.777, 11.999])
    def test_straight_no_hook_equals_clear_length(self, clear):
        item = {"element_type": "beam", "bar_type": "Main", "bar_diameter_mm": 12,
                "num_bars": 3, "clear_length_m": clear}
        assert calculate([item]).results[0].cutting_length_m == clear

    def test_weight_identity(self, mixed_schedule):
        for row in calculate(mixed_schedule).results:
            expected = row.total_length_m * row.bar_diameter_mm ** 2 / 162
            assert _rel_close(row.total_weight_kg, expected)

    def test_idempotent(self, mixed_schedule, priced_options):
        first = calculate(mixed_schedule, priced_options)
        second = calculate(mixed_schedule, priced_options)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_splice_arithmetic(self):
        item = {"element_type": "beam", "bar_type": "Main", "bar_diameter_mm": 20,
                "num_bars": 6, "clear_length_m": 27.5, "lap_length_m": 1.0}
        row = calculate([item]).results[0]
        splices = math.ceil(row.cutting_length_m / 12.0) - 1
        assert row.splice_count == splices == 2
        naive = row.cutting_length_m * row.num_bars
        assert abs(row.total_length_m - naive - splices * 1.0 * row.num_bars) < 1e-9

    def test_summary_weight_is_sum_of_rows(self, mixed_schedule):
        result = calculate(mixed_schedule)
        assert result.summary.total_steel_weight_kg == sum(r.total_weight_kg for r in result.results)
        assert result.summary.total_bars == 4 + 20 + 10

    def test_by_diameter_order(self, mixed_schedule):
        dias = [d.bar_diameter_mm for d in calculate(mixed_schedule).summary.by_diameter]
        assert dias == [8, 12, 16]

    def test_inputs_not_mutated(self, beam_main_item):
        before = dict(beam_main_item)
        calculate([beam_main_item])
        assert beam_main_item == before


# ===========================================================================
# Class 3: Errors
# ===========================================================================

class TestErrors:

    def test_unknown_code(self, beam_main_item):
        with pytest.raises(UnknownMixOrCodeError):
            calculate([beam_main_item], {"code": "BS8110"})

    def test_negative_length_is_unit_error(self, beam_main_item):
        with pytest.raises(InvalidUnitError):
            calculate([dict(beam_main_item, clear_length_m=-5.0)])

    def test_nan_is_unit_error(self, beam_main_item):
        with pytest.raises(InvalidUnitError):
            calculate([dict(beam_main_item, hook_length_mm=float("nan"))])

    def test_non_catalog_diameter(self, beam_main_item):
        with pytest.raises(ValidationError):
            calculate([dict(beam_main_item, bar_diameter_mm=14)])

    def test_zero_count(self, beam_main_item):
        with pytest.raises(ValidationError) as exc:
            calculate([dict(beam_main_item, num_bars=0)])
        assert exc.value.field == "num_bars"

    def test_unknown_element_type(self, beam_main_item):
        with pytest.raises(ValidationError) as exc:
            calculate([dict(beam_main_item, element_type="bridge")])
        assert exc.value.field == "element_type"

    def test_missing_clear_length(self, beam_main_item):
        item = dict(beam_main_item)
        del item["clear_length_m"]
        with pytest.raises(ValidationError):
            calculate([item])

    def test_custom_hook_needs_length(self, beam_main_item):
        with pytest.raises(ValidationError):
            calculate([dict(beam_main_item, hook_type="custom")])

    def test_bend_angle_out_of_range(self, beam_main_item):
        with pytest.raises(ValidationError):
            calculate([dict(beam_main_item, bend_angles=[200])])

    def test_geometry_error(self):
        item = {"element_type": "beam", "bar_type": "Main", "bar_diameter_mm": 32,
                "num_bars": 1, "clear_length_m": 0.1, "shape_preference": "U"}
        with pytest.raises(InvalidGeometryError):
            calculate([item])

    def test_all_errors_are_bbs_errors(self, beam_main_item):
        with pytest.raises(BBSError):
            calculate([dict(beam_main_item, num_bars=0)])

    def test_invalid_options(self, beam_main_item):
        with pytest.raises(ValidationError):
            calculate([beam_main_item], {"stock_length_m": 0})
        with pytest.raises(ValidationError):
            calculate([beam_main_item], {"units": "furlongs"})


# ===========================================================================
# Class 4: Costing
# ===========================================================================

class TestCosting:

    def test_unpriced_when_no_rate(self, mixed_schedule):
        result = calculate(mixed_schedule)
        assert all(r.total_cost is None for r in result.results)
        assert result.summary.total_cost is None

    def test_default_rate(self, mixed_schedule, priced_options):
        result = calculate(mixed_schedule, priced_options)
        for r in result.results:
            assert r.total_cost == r.total_weight_kg * 100.0
        assert result.summary.total_cost == sum(r.total_cost for r in result.results)

    def test_item_rate_wins(self, beam_main_item, priced_options):
        row = calculate([dict(beam_main_item, steel_rate_per_kg=120.0)], priced_options).results[0]
        assert row.total_cost == row.total_weight_kg * 120.0

    def test_partial_pricing_note(self, beam_main_item, column_tie_item):
        result = calculate([dict(beam_main_item, steel_rate_per_kg=90.0), column_tie_item])
        assert result.summary.total_cost == result.results[0].total_cost
        assert any("No steel rate for C01" in n for n in result.compliance_notes)

    def test_wastage_does_not_touch_weight_or_cost(self, beam_main_item, priced_options):
        row = calculate([dict(beam_main_item, wastage_percent=5)], priced_options).results[0]
        assert abs(row.ordered_weight_kg - row.total_weight_kg * 1.05) < 1e-9
        assert row.total_cost == row.total_weight_kg * 100.0


# ===========================================================================
# Class 5: Compliance notes
# ===========================================================================

class TestComplianceNotes:

    def test_splice_note(self, long_slab_item):
        notes = calculate([long_slab_item]).compliance_notes
        assert any("exceeds stock length 12 m" in n for n in notes)

    def test_custom_fallback_note(self):
        item = {"element_type": "custom", "bar_type": "Extra", "bar_diameter_mm": 10,
                "num_bars": 2, "clear_length_m": 1.5}
        result = calculate([item])
        assert result.results[0].shape_code == "custom"
        assert any("treated as custom" in n for n in result.compliance_notes)

    def test_cover_note_consolidated(self, beam_main_item, long_slab_item):
        notes = calculate([beam_main_item, long_slab_item]).compliance_notes
        cover_notes = [n for n in notes if n.startswith("Cover not supplied")]
        assert cover_notes == ["Cover not supplied for B01, S01; 25 mm assumed"]

    def test_no_cover_note_when_supplied(self, beam_main_item):
        notes = calculate([dict(beam_main_item, cover_mm=30)]).compliance_notes
        assert not any(n.startswith("Cover") for n in notes)

    def test_short_stirrup_note(self):
        """Ø10 link, 0.3 m leg, no hooks: 0.3 m < 50d = 0.5 m."""
        item = {"element_type": "beam", "bar_type": "Stirrups/Ties", "bar_diameter_mm": 10,
                "num_bars": 10, "clear_length_m": 0.3, "cover_mm": 25}
        notes = calculate([item]).compliance_notes
        assert any("below 50d" in n for n in notes)

    def test_short_explicit_hook_note(self, beam_main_item):
        notes = calculate([dict(beam_main_item, hook_length_mm=100, cover_mm=25)]).compliance_notes
        assert any("shorter than the NBC 135° allowance of 192 mm" in n for n in notes)

    def test_tight_spacing_note(self, beam_main_item):
        """Ø20 minimum spacing = max(25, 1.5 × 20) = 30 mm; 10 mm is flagged."""
        item = dict(beam_main_item, bar_diameter_mm=20, spacing_mm=10, cover_mm=25)
        notes = calculate([item]).compliance_notes
        assert any("spacing 10 mm is below the recommended minimum of 30 mm" in n for n in notes)

    def test_spacing_floor_is_25mm(self, beam_main_item):
        """Ø12: 1.5d = 18 mm, so the 25 mm floor governs; 20 mm is flagged, 25 mm is not."""
        tight = dict(beam_main_item, bar_diameter_mm=12, spacing_mm=20, cover_mm=25)
        ok = dict(beam_main_item, bar_diameter_mm=12, spacing_mm=25, cover_mm=25)
        assert any("minimum of 25 mm" in n for n in calculate([tight]).compliance_notes)
        assert calculate([ok]).compliance_notes == ()

    def test_low_cover_note_against_options_default(self, beam_main_item):
        item = dict(beam_main_item, bar_diameter_mm=20, spacing_mm=10, cover_mm=10)
        notes = calculate([item], {"default_cover_mm": 25}).compliance_notes
        assert any("cover 10 mm is less than the default 25 mm" in n for n in notes)
        assert any("spacing 10 mm" in n for n in notes)

    def test_low_cover_note_against_code_default(self, beam_main_item):
        """ACI default cover is 40 mm; 30 mm supplied is flagged."""
        notes = calculate([dict(beam_main_item, cover_mm=30)], {"code": "ACI"}).compliance_notes
        assert any("cover 30 mm is less than the default 40 mm" in n for n in notes)

    def test_clean_schedule_has_no_notes(self, beam_main_item):
        assert calculate([dict(beam_main_item, cover_mm=25)]).compliance_notes == ()


# ===========================================================================
# Class 6: Marks, metadata, units, inputs
# ===========================================================================

class TestMarksAndMetadata:

    def test_bar_marks_per_element(self, mixed_schedule, beam_main_item):
        marks = [r.bar_mark for r in calculate(mixed_schedule + [beam_main_item]).results]
        assert marks == ["B01", "C01", "S01", "B02"]

    def test_project_meta_passthrough(self, beam_main_item, priced_options):
        result = calculate([beam_main_item], priced_options)
        assert result.project_meta["project_name"] == "Ward Office"
        assert result.project_meta["currency"] == "NPR"
        assert result.code_used == "NBC"

    def test_project_meta_is_read_only(self, beam_main_item, priced_options):
        result = calculate([beam_main_item], priced_options)
        with pytest.raises(TypeError):
            result.project_meta["project_name"] = "Other"
        assert result.to_dict()["project_meta"]["project_name"] == "Ward Office"

    def test_human_summary(self, beam_main_item):
        """34.03 kg → 0.03 tonnes across 4 bars."""
        result = calculate([beam_main_item])
        assert result.human_summary == "Total steel required is 0.03 tonnes across 4 bars."
        assert result.to_dict()["human_summary"] == result.human_summary

    def test_code_used_canonical(self, beam_main_item):
        assert calculate([beam_main_item], {"code": "aci"}).code_used == "ACI"

    def test_model_inputs_accepted(self, beam_main_item):
        result = calculate([BarGroupInput(**beam_main_item)], BBSOptions())
        assert abs(result.results[0].cutting_length_m - 5.384) < 1e-9

    def test_imperial_clear_length(self):
        """10 ft straight bar = 3.048 m."""
        item = {"element_type": "beam", "bar_type": "Main", "bar_diameter_mm": 12,
                "num_bars": 1, "clear_length_m": 10.0}
        row = calculate([item], {"units": "imperial"}).results[0]
        assert abs(row.cutting_length_m - 3.048) < 1e-12

    def test_empty_schedule(self):
        result = calculate([])
        assert result.results == ()
        assert result.summary.total_bars == 0

    def test_hook_details_and_remarks_text(self, beam_main_item):
        row = calculate([dict(beam_main_item, spacing_mm=150)]).results[0]
        assert row.hook_details == "2 × 135° hook @ 192 mm (12d)"
        assert "@ 150 mm c/c" in row.remarks
