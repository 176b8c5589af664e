"""
conftest.py — Shared pytest fixtures for the BBS engine test suite.

No database or external service fixtures are defined here. All tests are pure
unit tests that exercise the computation modules in isolation.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``rebar_bbs.*`` imports resolve regardless of where pytest is invoked.
"""

import sys
import os
import pytest

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def nbc_options():
    """Default options: NBC, metric, 12 m stock, no steel rate."""
    from rebar_bbs.models.bbs_schema import BBSOptions
    return BBSOptions()


@pytest.fixture(scope="session")
def priced_options():
    """NBC options with a default rate of 100 per kg and project metadata."""
    from rebar_bbs.models.bbs_schema import BBSOptions
    return BBSOptions(
        steel_rate_per_kg=100.0,
        currency="NPR",
        project_name="Ward Office",
        location="Lalitpur",
        designer="R. Shrestha",
    )


@pytest.fixture(scope="session")
def engine():
    from rebar_bbs.services.bbs_engine import BBSEngine
    return BBSEngine()


# ---------------------------------------------------------------------------
# Sample bar groups
# ---------------------------------------------------------------------------

@pytest.fixture
def beam_main_item():
    """Scenario A: beam main bars, 4 × Ø16, 5.0 m clear, 135° hooks."""
    return {
        "element_type": "beam",
        "member_id": "B1",
        "bar_type": "Main",
        "bar_diameter_mm": 16,
        "num_bars": 4,
        "clear_length_m": 5.0,
        "hook_type": "135",
    }


@pytest.fixture
def column_tie_item():
    """Scenario B: column ties, 20 × Ø8, 0.8 m developed leg, 135° hooks."""
    return {
        "element_type": "column",
        "member_id": "C1",
        "bar_type": "Stirrups/Ties",
        "bar_diameter_mm": 8,
        "num_bars": 20,
        "clear_length_m": 0.8,
        "hook_type": "135",
    }


@pytest.fixture
def long_slab_item():
    """Scenario C: 14 m straight slab bar, longer than the 12 m stock."""
    return {
        "element_type": "slab",
        "member_id": "S1",
        "bar_type": "Main",
        "bar_diameter_mm": 12,
        "num_bars": 10,
        "clear_length_m": 14.0,
    }


@pytest.fixture
def mixed_schedule(beam_main_item, column_tie_item, long_slab_item):
    """Three-row schedule spanning three diameters."""
    return [beam_main_item, column_tie_item, long_slab_item]
