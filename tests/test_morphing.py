"""Tests for cross-section shape morphing."""

import numpy as np
import pytest

from horn.morphing import (
    MORPHED, ShapePoint, cubic, generate_shape_profile,
    generate_transition_metadata, linear, morphing_factor, sigmoid,
)
from horn.parameters import HornProfileParameters, normalize_parameters
from horn.profiles import ConicalProfile, ExponentialProfile


def _normalized(**overrides):
    base = dict(throat_width=50, throat_height=50, mouth_width=400,
                mouth_height=300, length=500, resolution=10,
                throat_shape='ellipse', mouth_shape='rectangular')
    base.update(overrides)
    return normalize_parameters(HornProfileParameters(**base))


def _box(x, params):
    return 100.0, 80.0


class TestMorphingFunctions:

    @pytest.mark.parametrize("fn", [linear, cubic])
    def test_endpoints(self, fn):
        assert fn(0.0) == 0.0
        assert fn(1.0) == 1.0

    def test_cubic_is_smoothstep(self):
        t = np.linspace(0, 1, 11)
        np.testing.assert_allclose(cubic(t), t**2 * (3 - 2 * t))
        assert cubic(0.5) == pytest.approx(0.5)

    def test_sigmoid(self):
        assert sigmoid(0.5) == pytest.approx(0.5)
        assert sigmoid(0.0) == pytest.approx(1 / (1 + np.exp(3)))
        t = np.linspace(0.01, 0.99, 20)
        assert np.all(np.diff(sigmoid(t)) > 0)


class TestMorphingFactor:

    def test_same_shape_is_zero(self):
        p = _normalized(mouth_shape='ellipse')
        assert all(morphing_factor(x, p) == 0.0 for x in (0, 100, 500))

    def test_circle_and_ellipse_do_not_morph(self):
        p = _normalized(throat_shape='circle', mouth_shape='ellipse')
        assert morphing_factor(250, p) == 0.0

    def test_bounds(self):
        p = _normalized(transition_length=300)
        assert morphing_factor(0, p) == 0.0
        assert morphing_factor(300, p) == 1.0
        assert morphing_factor(450, p) == 1.0

    @pytest.mark.parametrize("fn", ['linear', 'cubic', 'sigmoid'])
    def test_interior_in_open_interval(self, fn):
        p = _normalized(transition_length=300, morphing_function=fn)
        for x in np.linspace(1, 299, 25):
            assert 0.0 < morphing_factor(x, p) < 1.0

    def test_linear_midpoint(self):
        p = _normalized(transition_length=200)
        assert morphing_factor(50, p) == pytest.approx(0.25)


class TestShapeProfile:

    def test_length_and_positions(self):
        p = _normalized()
        profile = generate_shape_profile(p, _box)
        assert len(profile) == 11
        assert profile[0].x == 0.0
        assert profile[-1].x == 500.0
        assert all(isinstance(sp, ShapePoint) for sp in profile)

    def test_labels(self):
        p = _normalized(transition_length=300)
        profile = generate_shape_profile(p, _box)
        for sp in profile:
            if sp.morphing_factor == 0.0:
                assert sp.shape == 'ellipse'
            elif sp.morphing_factor == 1.0:
                assert sp.shape == 'rectangular'
            else:
                assert sp.shape == MORPHED
        assert profile[0].shape == 'ellipse'
        assert profile[-1].shape == 'rectangular'
        assert profile[3].shape == MORPHED   # x = 150

    def test_same_shape_profile(self):
        p = _normalized(throat_shape='superellipse', mouth_shape='superellipse')
        profile = generate_shape_profile(p, _box)
        assert all(sp.morphing_factor == 0.0 for sp in profile)
        assert all(sp.shape == 'superellipse' for sp in profile)

    def test_dimensions_from_hook(self):
        profile = generate_shape_profile(_normalized(), _box)
        assert all((sp.width, sp.height) == (100.0, 80.0) for sp in profile)

    def test_partial_transition(self):
        p = _normalized(throat_shape='rectangular', mouth_shape='ellipse',
                        length=600, resolution=12, transition_length=200)
        profile = generate_shape_profile(p, _box)
        after = [sp for sp in profile if sp.x >= 200]
        inside = [sp for sp in profile if 0 < sp.x < 200]
        assert all(sp.morphing_factor == 1.0 for sp in after)
        assert all(sp.shape == 'ellipse' for sp in after)
        assert len(inside) == 3
        assert all(0 < sp.morphing_factor < 1 for sp in inside)


class TestTransitionMetadata:

    def test_values(self):
        meta = generate_transition_metadata(
            _normalized(transition_length=200, morphing_function='cubic'))
        assert meta.has_transition
        assert meta.transition_start == 0.0
        assert meta.transition_end == 200.0
        assert meta.morphing_function == 'cubic'

    def test_default_end_is_length(self):
        meta = generate_transition_metadata(_normalized())
        assert meta.transition_end == 500.0

    def test_no_transition(self):
        meta = generate_transition_metadata(_normalized(mouth_shape='ellipse'))
        assert not meta.has_transition


class TestGeneratorIntegration:

    @pytest.mark.parametrize("gen", [ConicalProfile, ExponentialProfile])
    def test_shape_profile_present_when_shapes_differ(self, gen, rect_params):
        result = gen().generate(rect_params)
        assert len(result.shape_profile) == 11
        assert result.shape_profile[0].morphing_factor == 0
        assert result.shape_profile[-1].morphing_factor == 1
        assert result.metadata.transition_metadata.has_transition
        assert result.metadata.transition_metadata.transition_end == 300

    @pytest.mark.parametrize("gen", [ConicalProfile, ExponentialProfile])
    def test_no_shape_profile_for_same_shape(self, gen, circular_params):
        result = gen().generate(circular_params)
        assert result.shape_profile is None
        assert not result.metadata.transition_metadata.has_transition

    def test_envelope_independent_of_morph(self, rect_params):
        """Widths follow the generator law whatever the morphing function."""
        widths = []
        for fn in ('linear', 'sigmoid'):
            rect_params.morphing_function = fn
            result = ConicalProfile().generate(rect_params)
            widths.append([sp.width for sp in result.shape_profile])
        np.testing.assert_allclose(widths[0], widths[1])
        np.testing.assert_allclose(widths[0], 2 * result.width_profile.y)

    def test_exponential_envelope(self, rect_params):
        result = ExponentialProfile().generate(rect_params)
        heights = np.array([sp.height for sp in result.shape_profile])
        np.testing.assert_allclose(heights, 2 * result.height_profile.y)
