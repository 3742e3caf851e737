"""Horn profile generators.

Every generator returns a ``ProfileGeneratorResult`` whose ``points`` curve
runs from the throat (x=0) to the mouth (x=length) in millimeters, with y the
wall radius (or mean half-dimension for non-circular horns).

References:
- Olson, *Acoustical Engineering*, 1957, Sec. 5.9 (conical, exponential)
- Salmon, "Generalized Plane Wave Horn Theory", JASA 17(3), 1946
  (hyperbolic/Webster family)
- Voigt, German patent 1927; Kolbrek & Dunker 2019, Ch. 4 (tractrix)
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

import numpy as np

from horn.mathutils import (
    calculate_flare_constant, circular_area_to_radius, clamp, cosh, lerp,
    radians_to_degrees, radius_to_circular_area, safe_log, safe_sqrt, sinh,
)
from horn.morphing import (
    generate_shape_profile, generate_transition_metadata, has_transition,
)
from horn.parameters import (
    default_parameters, normalize_parameters, validate_parameters,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class Point2D(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True, eq=False)
class Curve:
    """Sampled curve stored as read-only x, y arrays.

    Indexing and iteration yield Point2D, so a Curve can be used wherever a
    sequence of points is expected.
    """
    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        x = np.array(self.x, dtype=float)
        y = np.array(self.y, dtype=float)
        if x.shape != y.shape:
            raise ValueError(
                f"x and y must have the same shape, got {x.shape} and {y.shape}"
            )
        x.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)

    def __len__(self):
        return len(self.x)

    def __getitem__(self, i):
        return Point2D(float(self.x[i]), float(self.y[i]))

    def __iter__(self):
        for xi, yi in zip(self.x, self.y):
            yield Point2D(float(xi), float(yi))

    def as_array(self):
        """(N, 2) array of [x, y] rows."""
        return np.column_stack([self.x, self.y])


@dataclass(frozen=True)
class ProfileMetadata:
    profile_type: str
    parameters: object
    calculated_values: dict
    transition_metadata: Optional[object] = None


@dataclass(frozen=True)
class ProfileGeneratorResult:
    """Output of one generator call.

    Attributes
    ----------
    points : Curve
        Primary wall curve.
    metadata : ProfileMetadata
    width_profile, height_profile : Curve or None
        Half-width and half-height along the horn (width/height-aware
        generators only).
    shape_profile : list of ShapePoint or None
        Present only when throat and mouth kinds differ.
    """
    points: Curve
    metadata: ProfileMetadata
    width_profile: Optional[Curve] = None
    height_profile: Optional[Curve] = None
    shape_profile: Optional[list] = field(default=None)


# ---------------------------------------------------------------------------
# Base generator
# ---------------------------------------------------------------------------

class HornProfile:
    """Shared outer contract: validate, normalize, then build the curve.

    Subclasses set ``profile_type`` and implement ``_generate``; those that
    track width and height separately also implement ``dimensions_at``.
    """

    profile_type = None

    def get_defaults(self):
        return default_parameters()

    def validate_parameters(self, params):
        validate_parameters(params)

    def normalize_parameters(self, params):
        return normalize_parameters(params)

    def generate(self, params):
        """Validate, normalize and generate.

        Parameters
        ----------
        params : HornProfileParameters or dict

        Returns
        -------
        ProfileGeneratorResult

        Raises
        ------
        ParameterError
            Before any generation work if the parameters are invalid.
        """
        self.validate_parameters(params)
        normalized = self.normalize_parameters(params)
        logger.debug("Generating %s profile: %s",
                     self.profile_type, normalized)
        return self._generate(normalized)

    def _generate(self, params):
        raise NotImplementedError

    def dimensions_at(self, x, params):
        """Full (width, height) of the envelope at axial position x."""
        raise NotImplementedError(
            f"{type(self).__name__} does not track width and height"
        )

    @staticmethod
    def _axial_positions(params):
        return np.linspace(0.0, params.length, params.resolution + 1)

    def _metadata(self, params, calculated_values, transition=None):
        return ProfileMetadata(
            profile_type=self.profile_type,
            parameters=params,
            calculated_values={k: float(v)
                               for k, v in calculated_values.items()},
            transition_metadata=transition,
        )

    def _shape_outputs(self, params):
        """(shape_profile, transition_metadata) for width/height generators."""
        transition = generate_transition_metadata(params)
        if not has_transition(params):
            return None, transition
        return generate_shape_profile(params, self.dimensions_at), transition


# ---------------------------------------------------------------------------
# Conical
# ---------------------------------------------------------------------------

class ConicalProfile(HornProfile):
    """Straight-walled horn: each half-dimension grows linearly with x.

    Flare angle θ = atan((r_mouth - r_throat) / L), Olson Sec. 5.9.
    """

    profile_type = 'conical'

    def dimensions_at(self, x, params):
        t = x / params.length
        return (lerp(params.throat_width, params.mouth_width, t),
                lerp(params.throat_height, params.mouth_height, t))

    def _generate(self, p):
        x = self._axial_positions(p)
        t = x / p.length
        half_w = lerp(p.throat_width / 2, p.mouth_width / 2, t)
        half_h = lerp(p.throat_height / 2, p.mouth_height / 2, t)
        # Mean half-dimension; equals the radius for circular horns
        y = (half_w + half_h) / 2

        width_angle = np.arctan((p.mouth_width / 2 - p.throat_width / 2)
                                / p.length)
        height_angle = np.arctan((p.mouth_height / 2 - p.throat_height / 2)
                                 / p.length)
        throat_area = p.throat_width * p.throat_height / 4
        mouth_area = p.mouth_width * p.mouth_height / 4

        shape_profile, transition = self._shape_outputs(p)
        calculated = {
            'flareAngle': radians_to_degrees(width_angle),
            'widthFlareAngle': radians_to_degrees(width_angle),
            'heightFlareAngle': radians_to_degrees(height_angle),
            'expansionRate': np.tan(width_angle),
            'widthExpansionRate': np.tan(width_angle),
            'heightExpansionRate': np.tan(height_angle),
            'throatArea': throat_area,
            'mouthArea': mouth_area,
            'areaExpansion': mouth_area / throat_area,
            'volumeExpansion': (p.mouth_radius / p.throat_radius) ** 2,
        }
        return ProfileGeneratorResult(
            points=Curve(x, y),
            width_profile=Curve(x, half_w),
            height_profile=Curve(x, half_h),
            shape_profile=shape_profile,
            metadata=self._metadata(p, calculated, transition),
        )


# ---------------------------------------------------------------------------
# Exponential
# ---------------------------------------------------------------------------

def exponential_flare(start, end, length):
    """k such that start·exp(k·L/2) = end: k = 2·ln(end/start)/L."""
    return 2 * safe_log(end / start) / length


class ExponentialProfile(HornProfile):
    """Exponential horn, r(x) = r0·exp(k·x/2) (Olson Eq. 5.50).

    k is fitted so the curve lands exactly on the mouth; the acoustic
    flare constant 4π·fc/c is reported alongside for comparison only.
    """

    profile_type = 'exponential'

    def _axis_flares(self, p):
        return (exponential_flare(p.throat_width, p.mouth_width, p.length),
                exponential_flare(p.throat_height, p.mouth_height, p.length))

    def dimensions_at(self, x, params):
        k_w, k_h = self._axis_flares(params)
        return (params.throat_width * np.exp(k_w * x / 2),
                params.throat_height * np.exp(k_h * x / 2))

    def _generate(self, p):
        x = self._axial_positions(p)
        k_r = exponential_flare(p.throat_radius, p.mouth_radius, p.length)
        k_w, k_h = self._axis_flares(p)

        y = p.throat_radius * np.exp(k_r * x / 2)
        half_w = p.throat_width / 2 * np.exp(k_w * x / 2)
        half_h = p.throat_height / 2 * np.exp(k_h * x / 2)

        flare_constant = k_r if p.is_circular else (k_w + k_h) / 2
        c_mm = p.speed_of_sound_mm

        shape_profile, transition = self._shape_outputs(p)
        calculated = {
            'flareConstant': flare_constant,
            'widthFlareConstant': k_w,
            'heightFlareConstant': k_h,
            'theoreticalFlareConstant': calculate_flare_constant(
                p.cutoff_frequency, c_mm),
            'actualCutoffFrequency': flare_constant * c_mm / (4 * np.pi),
            'expansionFactor': np.exp(flare_constant),
            'volumeExpansion': (p.mouth_radius / p.throat_radius) ** 2,
            'areaExpansion': (p.mouth_width * p.mouth_height)
                             / (p.throat_width * p.throat_height),
        }
        return ProfileGeneratorResult(
            points=Curve(x, y),
            width_profile=Curve(x, half_w),
            height_profile=Curve(x, half_h),
            shape_profile=shape_profile,
            metadata=self._metadata(p, calculated, transition),
        )


# ---------------------------------------------------------------------------
# Spherical (hyperbolic-wave)
# ---------------------------------------------------------------------------

# Salmon's T parameter; T = 1 is the hyperbolic (Webster) member
T_FACTOR = 1.0
# Tolerance [mm] before the mouth end is re-interpolated
MOUTH_TOLERANCE = 0.01
SMOOTHING_FRACTION = 0.1


class SphericalProfile(HornProfile):
    """Hyperbolic-wave horn of circular section.

    S(x) = S0·(cosh(k·x/2) + T·sinh(k·x/2))², k = 4π·fc/c (Salmon 1946).
    The radius is clamped to [r_throat, r_mouth]; if the curve then falls
    short of the mouth, the last tenth of the samples is re-interpolated
    up to the mouth radius. A horn whose derived radius does not grow
    (possible for width/height input) gets the straight profile instead.
    """

    profile_type = 'spherical'

    @staticmethod
    def _hyperbolic_radius(x, k, p):
        s0 = radius_to_circular_area(p.throat_radius)
        with np.errstate(over='ignore'):
            area = s0 * (cosh(k * x / 2) + T_FACTOR * sinh(k * x / 2)) ** 2
        return clamp(circular_area_to_radius(area),
                     p.throat_radius, p.mouth_radius)

    def _generate(self, p):
        x = self._axial_positions(p)
        k = calculate_flare_constant(p.cutoff_frequency, p.speed_of_sound_mm)

        smoothed = 0
        if p.mouth_radius <= p.throat_radius:
            # Derived radii of a dimension-only horn may not expand
            logger.debug("Spherical profile without radial expansion; "
                         "using a straight profile")
            y = lerp(p.throat_radius, p.mouth_radius, x / p.length)
        else:
            y = self._hyperbolic_radius(x, k, p)

        if (abs(y[-1] - p.mouth_radius) > MOUTH_TOLERANCE
                and y[-1] < p.mouth_radius):
            # TODO: blend with a C1 ramp instead of a straight line; the
            # kink at the window start is visible on long horns.
            window = max(1, int(np.floor(p.resolution * SMOOTHING_FRACTION)))
            start = max(0, len(y) - window - 1)
            t = np.linspace(0.0, 1.0, len(y) - start)
            y[start:] = lerp(y[start], p.mouth_radius, t)
            y[-1] = p.mouth_radius
            smoothed = len(y) - start - 1
            logger.debug("Spherical profile re-interpolated last %d samples",
                         smoothed)

        calculated = {
            'flareConstant': k,
            'waveRadius': p.speed_of_sound_mm / (2 * np.pi
                                                 * p.cutoff_frequency),
            'tFactor': T_FACTOR,
            'theoreticalCutoffFrequency': p.cutoff_frequency,
            'areaExpansion': (p.mouth_radius / p.throat_radius) ** 2,
            'volumeExpansion': (p.mouth_radius / p.throat_radius) ** 2,
            'smoothedPoints': smoothed,
        }
        return ProfileGeneratorResult(
            points=Curve(x, y),
            metadata=self._metadata(p, calculated),
        )


# ---------------------------------------------------------------------------
# Tractrix
# ---------------------------------------------------------------------------

def tractrix_x(a, y):
    """Distance from the mouth along the axis of a tractrix with parameter a.

        x(y) = a·ln((a + √(a² - y²)) / y) - √(a² - y²)

    Zero at and above the asymptote y >= a.
    """
    y = np.asarray(y, dtype=float)
    root = safe_sqrt(a * a - y * y)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        x = a * np.log((a + root) / y) - root
    return np.where(y >= a, 0.0, x)


class TractrixProfile(HornProfile):
    """Tractrix horn whose wall stands at 90° to the axis at the mouth (a = r_mouth).

    The tractrix is sampled in y, mapped so the throat sits at x=0, then
    stretched to the requested length.
    """

    profile_type = 'tractrix'

    def _linear(self, p, reason):
        logger.debug("Tractrix falling back to a straight profile: %s", reason)
        x = self._axial_positions(p)
        y = lerp(p.throat_radius, p.mouth_radius, x / p.length)
        return x, y

    def _generate(self, p):
        a = p.mouth_radius
        natural_length = 0.0
        linear = True

        if p.mouth_radius <= p.throat_radius or p.resolution <= 1:
            x, y = self._linear(p, "no expansion or too few samples")
        else:
            y = np.linspace(p.throat_radius, p.mouth_radius,
                            p.resolution + 1)
            x_raw = tractrix_x(a, y)
            x_throat = float(x_raw[0])
            if not np.isfinite(x_throat) or x_throat <= 0:
                warnings.warn(
                    f"Tractrix inversion failed for throat radius "
                    f"{p.throat_radius} mm (x_throat={x_throat}); "
                    f"using a straight profile."
                )
                x, y = self._linear(p, "inversion failed")
            else:
                # Throat at x=0, mouth at the natural tractrix length,
                # then stretched to the requested length
                x = (x_throat - x_raw) * (p.length / x_throat)
                y = np.maximum.accumulate(y)
                natural_length = x_throat
                linear = False

        calculated = {
            'tractrixParameter': a,
            'expansionRatio': p.mouth_radius / p.throat_radius,
            'actualMouthRadius': y[-1],
            'throatRadius': p.throat_radius,
            'hornLength': p.length,
            'pointCount': len(y),
            'naturalLength': natural_length,
            'scaleFactor': p.length / natural_length if natural_length else 1.0,
            'linearApproximation': 1 if linear else 0,
        }
        return ProfileGeneratorResult(
            points=Curve(x, y),
            metadata=self._metadata(p, calculated),
        )
