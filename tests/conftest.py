"""
Pytest configuration and shared fixtures for skin report tests.

This module provides:
- Sample raw analysis results (advanced and legacy shapes)
- FastAPI TestClient without the startup DB initialisation
"""

import pytest
from fastapi.testclient import TestClient


# =============================================================================
# RAW ANALYSIS FIXTURES
# =============================================================================

@pytest.fixture
def face_rectangle():
    return {"top": 0, "left": 0, "width": 100, "height": 100}


@pytest.fixture
def neutral_raw():
    """Nothing detected except a neutral skin type."""
    return {"skin_type": {"skin_type": 2}}


@pytest.fixture
def concerns_raw():
    """Blackheads, two acne boxes, two pore zones, dark circles and a mild nasolabial fold."""
    return {
        "skin_type": {"skin_type": 2},
        "blackhead": {"value": 2, "confidence": 0.7},
        "acne": {"rectangle": [
            {"left": 10, "top": 10, "width": 10, "height": 10},
            {"left": 40, "top": 40, "width": 10, "height": 10},
        ]},
        "pores_forehead": {"value": 1, "confidence": 0.9},
        "pores_jaw": {"value": 1, "confidence": 0.6},
        "pores_left_cheek": {"value": 0, "confidence": 0.9},
        "dark_circle": {"value": 1, "confidence": 0.8},
        "nasolabial_fold": {"value": 1, "confidence": 0.7},
        "nasolabial_fold_severity": {"value": 1, "confidence": 0.7},
    }


@pytest.fixture
def legacy_raw():
    """Compact result: concerns reported as {value, confidence} items."""
    return {
        "skin_type": {"skin_type": 0},
        "acne": {"value": 1, "confidence": 0.9},
        "dark_circle": {"value": 1, "confidence": 0.6},
        "mole": {"value": 0, "confidence": 0.2},
        "forehead_wrinkle": {"value": 1, "confidence": 0.5},
        "pores_forehead": {"value": 1, "confidence": 0.5},
    }


# =============================================================================
# API FIXTURES
# =============================================================================

@pytest.fixture
def client():
    """TestClient without entering the lifespan, so init_db never runs."""
    from main import app
    return TestClient(app)
