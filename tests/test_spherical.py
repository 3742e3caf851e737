"""Tests for the spherical (hyperbolic-wave) horn generator."""

import numpy as np
import pytest

from horn.parameters import HornProfileParameters
from horn.profiles import SphericalProfile


def _generate(**overrides):
    base = dict(throat_radius=25, mouth_radius=300, length=500)
    base.update(overrides)
    return SphericalProfile().generate(HornProfileParameters(**base))


class TestSphericalGeometry:

    def test_point_count_and_ends(self):
        result = _generate()
        assert len(result.points) == 101
        assert result.points[0].x == 0.0
        assert result.points[0].y == pytest.approx(25.0)
        assert result.points[-1].x == pytest.approx(500.0)

    @pytest.mark.parametrize("fc", [30, 100, 400, 2000])
    def test_monotonic_and_bounded(self, fc):
        y = _generate(cutoff_frequency=fc).points.y
        assert np.all(np.diff(y) >= 0)
        assert np.all(y <= 300.0)
        assert np.all(y >= 25.0)

    @pytest.mark.parametrize("fc", [30, 100, 400, 2000])
    def test_reaches_mouth(self, fc):
        assert _generate(cutoff_frequency=fc).points.y[-1] == \
            pytest.approx(300.0, abs=0.01)

    def test_hyperbolic_law_before_window(self):
        """Outside the smoothing window the radius follows r0·(cosh + sinh)."""
        result = _generate()
        k = 4 * np.pi * 100 / 343200
        x = result.points.x[:90]
        expected = 25 * (np.cosh(k * x / 2) + np.sinh(k * x / 2))
        np.testing.assert_allclose(result.points.y[:90], expected, rtol=1e-10)

    def test_high_cutoff_clamps_without_smoothing(self):
        result = _generate(cutoff_frequency=1000)
        y = result.points.y
        assert y[-1] == 300.0
        assert np.sum(y == 300.0) > 1
        assert result.metadata.calculated_values['smoothedPoints'] == 0

    def test_very_high_cutoff_no_overflow(self):
        y = _generate(cutoff_frequency=1e6).points.y
        assert np.all(np.isfinite(y))
        assert y[-1] == 300.0


class TestSphericalWidthHeight:

    @pytest.mark.parametrize("fc", [30, 100, 2000])
    def test_mixed_input_bounded(self, fc):
        params = HornProfileParameters(throat_radius=25, mouth_width=600,
                                       mouth_height=400, length=500,
                                       cutoff_frequency=fc)
        result = SphericalProfile().generate(params)
        y = result.points.y
        assert result.metadata.parameters.mouth_radius == 200.0
        assert np.all(np.diff(y) >= 0)
        assert y.min() >= 25.0
        assert y.max() <= 200.0
        assert y[-1] == pytest.approx(200.0, abs=0.01)

    def test_dimension_input_bounded(self):
        params = HornProfileParameters(throat_width=80, throat_height=60,
                                       mouth_width=600, mouth_height=400,
                                       length=500)
        y = SphericalProfile().generate(params).points.y
        assert y[0] == pytest.approx(30.0)
        assert y.max() <= 200.0
        assert y[-1] == pytest.approx(200.0, abs=0.01)

    def test_contracting_radius_is_straight(self):
        """One axis expands while the derived radius shrinks (30 -> 20)."""
        params = HornProfileParameters(throat_width=80, throat_height=60,
                                       mouth_width=300, mouth_height=40,
                                       length=200, resolution=4)
        result = SphericalProfile().generate(params)
        np.testing.assert_allclose(result.points.y, np.linspace(30, 20, 5))
        assert result.points.y.max() <= 30.0
        assert result.points.y[-1] == pytest.approx(20.0)
        assert result.metadata.calculated_values['smoothedPoints'] == 0


class TestSphericalSmoothing:

    def test_window_is_tenth_of_resolution(self):
        result = _generate(resolution=100)
        assert result.metadata.calculated_values['smoothedPoints'] == 10

    def test_window_at_least_one(self):
        result = _generate(resolution=5)
        values = result.metadata.calculated_values
        assert values['smoothedPoints'] == 1
        assert result.points.y[-1] == 300.0

    def test_window_is_linear(self):
        y = _generate(resolution=100).points.y
        steps = np.diff(y[90:])
        np.testing.assert_allclose(steps, steps[0], rtol=1e-9)

    def test_no_smoothing_within_tolerance(self):
        """A curve already within 0.01 mm of the mouth is left alone."""
        k = 4 * np.pi * 100 / 343200
        mouth = 25 * np.exp(k * 500 / 2) + 0.005
        result = _generate(mouth_radius=mouth)
        assert result.metadata.calculated_values['smoothedPoints'] == 0
        assert result.points.y[-1] == pytest.approx(mouth, abs=0.01)


class TestSphericalMetadata:

    def test_values(self):
        values = _generate().metadata.calculated_values
        assert values['flareConstant'] == pytest.approx(4 * np.pi * 100 / 343200)
        assert values['waveRadius'] == pytest.approx(343200 / (2 * np.pi * 100))
        assert values['tFactor'] == 1.0
        assert values['theoreticalCutoffFrequency'] == 100
        assert values['areaExpansion'] == pytest.approx(144.0)

    def test_flare_constant_increases_with_cutoff(self):
        flares = [_generate(cutoff_frequency=fc).metadata
                  .calculated_values['flareConstant']
                  for fc in (20, 50, 100, 200, 500)]
        assert all(a < b for a, b in zip(flares, flares[1:]))

    def test_no_width_profiles(self):
        result = _generate()
        assert result.width_profile is None
        assert result.shape_profile is None
        assert result.metadata.transition_metadata is None
