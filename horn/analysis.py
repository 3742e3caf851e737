"""Post-processing of generated horn profiles.

Interpolation, mount trimming, cross-section areas and enclosed volume.
Areas account for the cross-section kind: ellipse π·a·b, rectangle 4·a·b,
superellipse 4·a·b·Γ(1 + 1/n)²/Γ(1 + 2/n) with a, b the half-dimensions
(Weisstein, *Superellipse*, MathWorld).
"""

import numpy as np
from scipy.integrate import simpson
from scipy.special import gamma as gamma_fn

from horn.mathutils import lerp
from horn.profiles import Curve

# Exponent used for superelliptic cross-sections
SUPERELLIPSE_EXPONENT = 2.5


def area_coefficient(shape, n=SUPERELLIPSE_EXPONENT):
    """Area / (half_width · half_height) for a cross-section kind."""
    if shape == 'ellipse':
        return np.pi
    if shape == 'rectangular':
        return 4.0
    if shape == 'superellipse':
        return 4.0 * gamma_fn(1 + 1 / n) ** 2 / gamma_fn(1 + 2 / n)
    raise ValueError(f"Unsupported cross-section kind: {shape}")


def interpolate_profile_at(curve, x):
    """Linear interpolation of curve.y at x, held constant beyond the ends."""
    if len(curve) == 0:
        raise ValueError("Cannot interpolate empty profile")
    return float(np.interp(x, curve.x, curve.y))


def trim_profile_at_start(curve, distance):
    """Drop the first `distance` mm of a profile (driver mount plate).

    A point interpolated at the new start is inserted so the trimmed curve
    begins exactly at x[0] + distance.
    """
    if len(curve) == 0 or distance <= 0:
        return curve
    new_start = curve.x[0] + distance
    keep = curve.x > new_start
    x = curve.x[keep]
    y = curve.y[keep]
    if new_start < curve.x[-1]:
        x = np.concatenate([[new_start], x])
        y = np.concatenate([[interpolate_profile_at(curve, new_start)], y])
    return Curve(x, y)


def trim_profile_at_end(curve, distance):
    """Drop the last `distance` mm of a profile (mouth mount flange)."""
    if len(curve) == 0 or distance <= 0:
        return curve
    new_end = curve.x[-1] - distance
    keep = curve.x < new_end
    x = curve.x[keep]
    y = curve.y[keep]
    if new_end > curve.x[0]:
        x = np.concatenate([x, [new_end]])
        y = np.concatenate([y, [interpolate_profile_at(curve, new_end)]])
    return Curve(x, y)


def cross_section_areas(result):
    """Cross-section area [mm²] at each sample of result.points.

    Uses the width/height profiles when present, blending the area
    coefficient of the throat and mouth kinds by the morphing factor.
    Circular sections otherwise.
    """
    if result.width_profile is None or result.height_profile is None:
        return np.pi * result.points.y ** 2

    params = result.metadata.parameters
    half_w = result.width_profile.y
    half_h = result.height_profile.y
    if result.shape_profile is None:
        coeff = np.full(len(half_w), area_coefficient(params.throat_shape))
    else:
        factor = np.array([sp.morphing_factor for sp in result.shape_profile])
        coeff = lerp(area_coefficient(params.throat_shape),
                     area_coefficient(params.mouth_shape), factor)
    return coeff * half_w * half_h


def horn_volume(result):
    """Enclosed air volume [mm³], Simpson's rule over the area profile."""
    return float(simpson(cross_section_areas(result), x=result.points.x))


def profile_summary(result):
    """Flat dict describing a generated profile, for tables and JSON."""
    params = result.metadata.parameters
    areas = cross_section_areas(result)
    summary = {
        'type': result.metadata.profile_type,
        'length_mm': float(result.points.x[-1]),
        'n_points': len(result.points),
        'throat_radius_mm': float(result.points.y[0]),
        'mouth_radius_mm': float(result.points.y[-1]),
        'throat_area_mm2': float(areas[0]),
        'mouth_area_mm2': float(areas[-1]),
        'volume_l': horn_volume(result) * 1e-6,
        'cutoff_frequency_hz': params.cutoff_frequency,
    }
    transition = result.metadata.transition_metadata
    if transition is not None:
        summary['throat_shape'] = params.throat_shape
        summary['mouth_shape'] = params.mouth_shape
        summary['has_transition'] = transition.has_transition
    summary.update(result.metadata.calculated_values)
    return summary
