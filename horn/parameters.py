"""Horn parameter records, validation and normalization.

Two stages: a sparse ``HornProfileParameters`` as supplied by the caller
(only ``length`` is required) and a frozen ``NormalizedParameters`` with every
field populated. ``validate_parameters`` runs first and reports every
violation at once; ``normalize_parameters`` assumes it passed.

All lengths are millimeters. Speed of sound is in m/s.
"""

import math
import numbers
from dataclasses import dataclass, fields, asdict
from typing import Optional

from horn.errors import ParameterError, UnsupportedShapeError


DEFAULT_RESOLUTION = 100
DEFAULT_CUTOFF_FREQUENCY = 100.0   # Hz
DEFAULT_SPEED_OF_SOUND = 343.2     # m/s at 20 °C
DEFAULT_THROAT_SHAPE = 'circle'
DEFAULT_MOUTH_SHAPE = 'ellipse'
DEFAULT_MORPHING_FUNCTION = 'linear'

# 'circle' is the circular special case of 'ellipse'
SHAPE_ALIASES = {'circle': 'ellipse'}
SUPPORTED_SHAPES = ('ellipse', 'superellipse', 'rectangular')
MORPHING_FUNCTIONS = ('linear', 'cubic', 'sigmoid')

# camelCase field names, also accepted by from_dict
_CAMEL_KEYS = {
    'throatRadius': 'throat_radius',
    'mouthRadius': 'mouth_radius',
    'throatWidth': 'throat_width',
    'throatHeight': 'throat_height',
    'mouthWidth': 'mouth_width',
    'mouthHeight': 'mouth_height',
    'cutoffFrequency': 'cutoff_frequency',
    'speedOfSound': 'speed_of_sound',
    'throatShape': 'throat_shape',
    'mouthShape': 'mouth_shape',
    'transitionLength': 'transition_length',
    'morphingFunction': 'morphing_function',
}


@dataclass
class HornProfileParameters:
    """Physical description of one horn, as supplied by the caller.

    Throat and mouth are each given either as a radius (circular horns) or
    as a width/height pair; anything left as None is filled in by
    ``normalize_parameters``.
    """
    length: Optional[float] = None
    throat_radius: Optional[float] = None
    mouth_radius: Optional[float] = None
    throat_width: Optional[float] = None
    throat_height: Optional[float] = None
    mouth_width: Optional[float] = None
    mouth_height: Optional[float] = None
    resolution: Optional[int] = None
    cutoff_frequency: Optional[float] = None
    speed_of_sound: Optional[float] = None
    throat_shape: Optional[str] = None
    mouth_shape: Optional[str] = None
    transition_length: Optional[float] = None
    morphing_function: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        """Build from a mapping with snake_case or camelCase keys.

        Raises
        ------
        ParameterError
            If the mapping contains keys that are not horn parameters.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        unknown = []
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                unknown.append(f"Unknown parameter: {key}")
        if unknown:
            raise ParameterError(unknown)
        return cls(**kwargs)


@dataclass(frozen=True)
class NormalizedParameters:
    """HornProfileParameters with every field resolved."""
    throat_radius: float
    mouth_radius: float
    throat_width: float
    throat_height: float
    mouth_width: float
    mouth_height: float
    length: float
    resolution: int
    cutoff_frequency: float
    speed_of_sound: float
    throat_shape: str
    mouth_shape: str
    transition_length: float
    morphing_function: str

    @property
    def speed_of_sound_mm(self):
        """Speed of sound in mm/s, for formulas mixing c with mm geometry."""
        return self.speed_of_sound * 1000.0

    @property
    def is_circular(self):
        """True when width and height are exactly twice the radius at both ends."""
        return (self.throat_width == 2 * self.throat_radius
                and self.throat_height == 2 * self.throat_radius
                and self.mouth_width == 2 * self.mouth_radius
                and self.mouth_height == 2 * self.mouth_radius)

    def to_dict(self):
        return asdict(self)


def as_parameters(params):
    """Accept a HornProfileParameters or a plain mapping."""
    if isinstance(params, HornProfileParameters):
        return params
    return HornProfileParameters.from_dict(params)


def default_parameters():
    """Conventional default horn: 25 → 300 mm radius over 500 mm."""
    return HornProfileParameters(
        throat_radius=25.0,
        mouth_radius=300.0,
        throat_width=50.0,
        throat_height=50.0,
        mouth_width=600.0,
        mouth_height=600.0,
        length=500.0,
        resolution=DEFAULT_RESOLUTION,
        cutoff_frequency=DEFAULT_CUTOFF_FREQUENCY,
        speed_of_sound=DEFAULT_SPEED_OF_SOUND,
        throat_shape=DEFAULT_THROAT_SHAPE,
        mouth_shape=DEFAULT_MOUTH_SHAPE,
        morphing_function=DEFAULT_MORPHING_FUNCTION,
    )


def canonical_shape(shape):
    """Map shape aliases onto the supported kind names."""
    key = str(shape).strip().lower()
    return SHAPE_ALIASES.get(key, key)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _is_number(value):
    return (isinstance(value, numbers.Real)
            and not isinstance(value, bool))


def _check_positive(value, label, errors):
    """Append a violation unless value is a finite positive number.

    Returns True when the value is usable.
    """
    if not _is_number(value):
        errors.append(f"{label} must be a number, got {value!r}")
        return False
    if not math.isfinite(value):
        errors.append(f"{label} must be a finite number, got {value}")
        return False
    if value <= 0:
        errors.append(f"{label} must be positive")
        return False
    return True


def _is_integral(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return (isinstance(value, float) and math.isfinite(value)
            and value.is_integer())


def _validate_end(p, end, errors):
    """Validate one end of the horn; return its radius if resolvable.

    The radius is the given one, else half the lesser dimension.
    """
    radius = getattr(p, f'{end}_radius')
    width = getattr(p, f'{end}_width')
    height = getattr(p, f'{end}_height')
    label = end.capitalize()

    radius_ok = None
    if radius is not None:
        radius_ok = _check_positive(radius, f"{label} radius", errors)
    width_ok = (_check_positive(width, f"{label} width", errors)
                if width is not None else None)
    height_ok = (_check_positive(height, f"{label} height", errors)
                 if height is not None else None)

    if radius is None and (width is None or height is None):
        errors.append(
            f"{label} must be given as a radius or as both width and height"
        )
        return None
    if radius is not None:
        return radius if radius_ok else None
    if width_ok and height_ok:
        return min(width, height) / 2
    return None


def validate_parameters(params):
    """Check physical legality of horn parameters.

    Every rule is evaluated and all violations are collected before raising,
    so the caller sees the complete list.

    Parameters
    ----------
    params : HornProfileParameters or dict

    Raises
    ------
    UnsupportedShapeError
        If a shape kind is unsupported or the transition is longer than the
        horn (other violations, if any, are included in the message).
    ParameterError
        For any other violation.
    """
    p = as_parameters(params)
    errors = []
    shape_errors = []

    throat_r = _validate_end(p, 'throat', errors)
    mouth_r = _validate_end(p, 'mouth', errors)

    # Derived radii count once either end names a radius explicitly;
    # dimension-only horns are checked per axis below.
    if ((p.throat_radius is not None or p.mouth_radius is not None)
            and throat_r is not None and mouth_r is not None
            and throat_r >= mouth_r):
        errors.append(
            f"Throat radius must be smaller than mouth radius "
            f"(got {throat_r} and {mouth_r})"
        )

    dims = (p.throat_width, p.throat_height, p.mouth_width, p.mouth_height)
    if (p.throat_radius is None and p.mouth_radius is None
            and all(_is_number(d) and d > 0 for d in dims)):
        tw, th, mw, mh = dims
        if tw >= mw and th >= mh:
            errors.append(
                "Throat dimensions must be smaller than mouth dimensions"
            )

    length_ok = False
    if p.length is None:
        errors.append("Length is required")
    else:
        length_ok = _check_positive(p.length, "Length", errors)

    if p.resolution is not None:
        if not _is_integral(p.resolution):
            errors.append("Resolution must be an integer")
        elif p.resolution <= 0:
            errors.append("Resolution must be positive")

    if p.cutoff_frequency is not None:
        _check_positive(p.cutoff_frequency, "Cutoff frequency", errors)
    if p.speed_of_sound is not None:
        _check_positive(p.speed_of_sound, "Speed of sound", errors)

    if p.transition_length is not None:
        if _check_positive(p.transition_length, "Transition length", errors):
            if length_ok and p.transition_length > p.length:
                shape_errors.append(
                    f"Transition length ({p.transition_length}) cannot "
                    f"exceed horn length ({p.length})"
                )

    throat_shape = (p.throat_shape if p.throat_shape is not None
                    else DEFAULT_THROAT_SHAPE)
    mouth_shape = (p.mouth_shape if p.mouth_shape is not None
                   else DEFAULT_MOUTH_SHAPE)
    if (canonical_shape(throat_shape) not in SUPPORTED_SHAPES
            or canonical_shape(mouth_shape) not in SUPPORTED_SHAPES):
        shape_errors.append(
            f"Unsupported shape transition: {throat_shape} -> "
            f"{mouth_shape} (supported: circle, "
            f"{', '.join(SUPPORTED_SHAPES)})"
        )

    if p.morphing_function is not None and \
            str(p.morphing_function).lower() not in MORPHING_FUNCTIONS:
        errors.append(
            f"Morphing function must be one of "
            f"{', '.join(MORPHING_FUNCTIONS)}, got {p.morphing_function!r}"
        )

    if shape_errors:
        raise UnsupportedShapeError(errors + shape_errors)
    if errors:
        raise ParameterError(errors)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _resolve_end(radius, width, height):
    """Reconcile radius and width/height for one end of the horn."""
    if radius is None:
        radius = min(width, height) / 2
    if width is None:
        width = 2 * radius
    if height is None:
        height = 2 * radius
    return float(radius), float(width), float(height)


def normalize_parameters(params):
    """Fill every optional field with its default.

    Assumes ``validate_parameters`` already passed. The caller's record is
    left untouched.

    Returns
    -------
    NormalizedParameters
    """
    p = as_parameters(params)

    throat_r, throat_w, throat_h = _resolve_end(
        p.throat_radius, p.throat_width, p.throat_height)
    mouth_r, mouth_w, mouth_h = _resolve_end(
        p.mouth_radius, p.mouth_width, p.mouth_height)

    length = float(p.length)

    def pick(value, default):
        return default if value is None else value

    return NormalizedParameters(
        throat_radius=throat_r,
        mouth_radius=mouth_r,
        throat_width=throat_w,
        throat_height=throat_h,
        mouth_width=mouth_w,
        mouth_height=mouth_h,
        length=length,
        resolution=int(pick(p.resolution, DEFAULT_RESOLUTION)),
        cutoff_frequency=float(pick(p.cutoff_frequency,
                                    DEFAULT_CUTOFF_FREQUENCY)),
        speed_of_sound=float(pick(p.speed_of_sound, DEFAULT_SPEED_OF_SOUND)),
        throat_shape=canonical_shape(pick(p.throat_shape,
                                          DEFAULT_THROAT_SHAPE)),
        mouth_shape=canonical_shape(pick(p.mouth_shape,
                                         DEFAULT_MOUTH_SHAPE)),
        transition_length=float(pick(p.transition_length, length)),
        morphing_function=str(pick(p.morphing_function,
                                   DEFAULT_MORPHING_FUNCTION)).lower(),
    )
