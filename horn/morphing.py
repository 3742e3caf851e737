"""Cross-section morphing between throat and mouth shape kinds.

Along the transition region [0, transition_length] the cross-section blends
from the throat kind to the mouth kind. The blend factor is reported per
sample together with the envelope width/height, which the owning generator
supplies through its ``dimensions_at`` hook. Morphing never changes the
envelope itself.
"""

from dataclasses import dataclass

import numpy as np

MORPHED = 'morphed'


def linear(t):
    return t


def cubic(t):
    """Smoothstep t²·(3 - 2t): zero slope at both ends."""
    return t * t * (3 - 2 * t)


def sigmoid(t):
    """Logistic 1/(1 + e^(-6(t - 0.5))), centered on the transition midpoint."""
    return 1.0 / (1.0 + np.exp(-6.0 * (t - 0.5)))


MORPHING_FUNCTIONS = {
    'linear': linear,
    'cubic': cubic,
    'sigmoid': sigmoid,
}


@dataclass(frozen=True)
class ShapePoint:
    """Cross-section description at one axial sample.

    Attributes
    ----------
    x : float
        Axial position [mm] from the throat.
    shape : str
        Throat kind at factor 0, mouth kind at factor 1, 'morphed' between.
    morphing_factor : float
        Blend weight in [0, 1].
    width, height : float
        Full envelope dimensions [mm] at x.
    """
    x: float
    shape: str
    morphing_factor: float
    width: float
    height: float


@dataclass(frozen=True)
class TransitionMetadata:
    has_transition: bool
    transition_start: float
    transition_end: float
    morphing_function: str


def has_transition(params):
    return params.throat_shape != params.mouth_shape


def transition_bounds(params):
    """(start, end) of the blend region; it always starts at the throat."""
    return 0.0, params.transition_length


def morphing_factor(x, params):
    """Blend factor at axial position x.

    Parameters
    ----------
    x : float
        Axial position [mm].
    params : NormalizedParameters

    Returns
    -------
    float in [0, 1]
    """
    if not has_transition(params):
        return 0.0
    start, end = transition_bounds(params)
    if x <= start:
        return 0.0
    if x >= end:
        return 1.0
    t = (x - start) / (end - start)
    return float(MORPHING_FUNCTIONS[params.morphing_function](t))


def shape_at(factor, params):
    if factor <= 0.0:
        return params.throat_shape
    if factor >= 1.0:
        return params.mouth_shape
    return MORPHED


def generate_shape_profile(params, dimensions_at):
    """Per-sample cross-section kinds over [0, length].

    Parameters
    ----------
    params : NormalizedParameters
    dimensions_at : callable
        ``dimensions_at(x, params) -> (width, height)``, the owning
        generator's envelope law.

    Returns
    -------
    list of ShapePoint, resolution + 1 entries
    """
    xs = np.linspace(0.0, params.length, params.resolution + 1)
    profile = []
    for x in xs:
        factor = morphing_factor(x, params)
        width, height = dimensions_at(x, params)
        profile.append(ShapePoint(
            x=float(x),
            shape=shape_at(factor, params),
            morphing_factor=factor,
            width=float(width),
            height=float(height),
        ))
    return profile


def generate_transition_metadata(params):
    start, end = transition_bounds(params)
    return TransitionMetadata(
        has_transition=has_transition(params),
        transition_start=start,
        transition_end=end,
        morphing_function=params.morphing_function,
    )
