"""Math helpers shared by the profile generators.

Plain functions over scalars or numpy arrays. The acoustic relations follow:
- Beranek, *Acoustics*, 1954, Ch. 9 (horns)
- Olson, *Acoustical Engineering*, 1957, Sec. 5.9
- Kolbrek & Dunker, *High Quality Horn Loudspeaker Systems*, 2019
"""

import sys

import numpy as np

from horn.errors import MathDomainError


# ---------------------------------------------------------------------------
# Guarded elementary functions
# ---------------------------------------------------------------------------

def safe_log(value):
    """ln(value), raising MathDomainError for value <= 0."""
    if np.any(np.asarray(value) <= 0):
        raise MathDomainError(
            f"Cannot take logarithm of non-positive value: {value}"
        )
    return np.log(value)


def safe_log_with_epsilon(value, epsilon=1e-10):
    """ln(max(value, epsilon)); never raises."""
    return np.log(np.maximum(value, epsilon))


def safe_sqrt(value):
    """sqrt(value) with negative inputs mapped to 0."""
    return np.sqrt(np.maximum(value, 0.0))


def safe_divide(numerator, denominator):
    """numerator / denominator, raising when |denominator| < machine epsilon."""
    if np.any(np.abs(np.asarray(denominator)) < sys.float_info.epsilon):
        raise MathDomainError("Division by zero")
    return numerator / denominator


def sinh(x):
    """(e^x - e^-x) / 2."""
    return (np.exp(x) - np.exp(-x)) / 2


def cosh(x):
    """(e^x + e^-x) / 2."""
    return (np.exp(x) + np.exp(-x)) / 2


# ---------------------------------------------------------------------------
# Conversions and interpolation
# ---------------------------------------------------------------------------

def degrees_to_radians(degrees):
    return degrees * (np.pi / 180)


def radians_to_degrees(radians):
    return radians * (180 / np.pi)


def clamp(value, lower, upper):
    """Limit value to [lower, upper]."""
    return np.maximum(lower, np.minimum(upper, value))


def lerp(start, end, t):
    """start + (end - start)·t."""
    return start + (end - start) * t


def circular_area_to_radius(area):
    """r = sqrt(S/π)."""
    return np.sqrt(area / np.pi)


def radius_to_circular_area(radius):
    """S = π·r²."""
    return np.pi * radius * radius


# ---------------------------------------------------------------------------
# Acoustic relations
# ---------------------------------------------------------------------------

def calculate_flare_constant(cutoff_frequency, speed_of_sound):
    """Flare constant m = 4π·fc/c (Olson Eq. 5.52).

    Units follow speed_of_sound: m/s gives 1/m, mm/s gives 1/mm.
    """
    return (4 * np.pi * cutoff_frequency) / speed_of_sound


def calculate_cutoff_frequency(mouth_radius, speed_of_sound):
    """fc = c / (2π·r), the frequency whose wavelength matches the mouth
    circumference (Beranek Sec. 9.3)."""
    return speed_of_sound / (2 * np.pi * mouth_radius)


def calculate_wavelength(frequency, speed_of_sound):
    """λ = c / f."""
    return speed_of_sound / frequency
