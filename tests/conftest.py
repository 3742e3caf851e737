"""Shared fixtures for horn profile tests."""

import pytest

from horn.parameters import HornProfileParameters


@pytest.fixture
def circular_params():
    """Minimal valid circular horn: 25 → 300 mm radius over 500 mm."""
    return HornProfileParameters(throat_radius=25, mouth_radius=300,
                                 length=500)


@pytest.fixture
def rect_params():
    """Non-circular horn morphing from an ellipse to a rectangle."""
    return HornProfileParameters(
        throat_width=50, throat_height=50,
        mouth_width=400, mouth_height=300,
        length=500, resolution=10,
        throat_shape='ellipse', mouth_shape='rectangular',
        transition_length=300, morphing_function='linear',
    )
