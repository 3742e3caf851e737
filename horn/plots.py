"""Visualization for horn profiles.

All plot functions return (fig, ax) tuples for composability.
"""

import numpy as np
import matplotlib.pyplot as plt


def plot_profile(result, label=None, ax=None, title="Horn Profile",
                 show_axis=True, mirror=True):
    """Plot a horn wall curve (upper wall ± mirrored lower wall).

    Width and height envelopes are drawn dashed when the generator
    produced them and they differ from the primary curve.

    Parameters
    ----------
    result : ProfileGeneratorResult
    label : str or None
        Legend label.
    ax : matplotlib Axes or None
        Existing axes to plot on.
    title : str
    show_axis : bool
        Draw centerline at y=0.
    mirror : bool
        Mirror the curves below the axis.

    Returns
    -------
    fig, ax
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    else:
        fig = ax.figure

    x, y = result.points.x, result.points.y
    ax.plot(x, y, 'b-', linewidth=2, label=label)
    if mirror:
        ax.plot(x, -y, 'b-', linewidth=2)

    for curve, color, name in ((result.width_profile, 'tab:orange', 'half-width'),
                               (result.height_profile, 'tab:green', 'half-height')):
        if curve is None or np.allclose(curve.y, y):
            continue
        ax.plot(curve.x, curve.y, '--', color=color, linewidth=1, label=name)
        if mirror:
            ax.plot(curve.x, -curve.y, '--', color=color, linewidth=1)

    if show_axis:
        ax.axhline(0, color='k', linewidth=0.5, linestyle='--')

    ax.set_xlabel("x [mm]")
    ax.set_ylabel("r [mm]")
    ax.set_title(title)
    ax.set_aspect('equal')
    if ax.get_legend_handles_labels()[0]:
        ax.legend()
    fig.tight_layout()
    return fig, ax


def plot_profile_comparison(results, title="Horn Profile Comparison"):
    """Plot multiple profiles overlaid.

    Parameters
    ----------
    results : list of (ProfileGeneratorResult, label) tuples
    title : str

    Returns
    -------
    fig, ax
    """
    fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    colors = plt.cm.tab10.colors

    for i, (result, label) in enumerate(results):
        color = colors[i % len(colors)]
        x, y = result.points.x, result.points.y
        ax.plot(x, y, '-', color=color, linewidth=2, label=label)
        ax.plot(x, -y, '-', color=color, linewidth=2)

    ax.axhline(0, color='k', linewidth=0.5, linestyle='--')
    ax.set_xlabel("x [mm]")
    ax.set_ylabel("r [mm]")
    ax.set_title(title)
    ax.set_aspect('equal')
    ax.legend()
    fig.tight_layout()
    return fig, ax


def plot_shape_transition(result, title="Cross-Section Transition"):
    """Morphing factor and envelope dimensions along the horn.

    Two stacked panels: width/height [mm] on top, morphing factor below.

    Raises
    ------
    ValueError
        If the result has no shape profile.
    """
    if result.shape_profile is None:
        raise ValueError("Result has no shape profile (throat and mouth "
                         "shapes are identical)")

    x = np.array([sp.x for sp in result.shape_profile])
    width = np.array([sp.width for sp in result.shape_profile])
    height = np.array([sp.height for sp in result.shape_profile])
    factor = np.array([sp.morphing_factor for sp in result.shape_profile])

    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
    axes[0].plot(x, width, '-', label='width')
    axes[0].plot(x, height, '-', label='height')
    axes[0].set_ylabel("[mm]")
    axes[0].legend()
    axes[0].set_title(title)

    params = result.metadata.parameters
    axes[1].plot(x, factor, 'k-', linewidth=2)
    axes[1].axvline(params.transition_length, color='r', linewidth=0.5,
                    linestyle='--')
    axes[1].set_ylim(-0.05, 1.05)
    axes[1].set_xlabel("x [mm]")
    axes[1].set_ylabel(f"morph ({params.throat_shape} → {params.mouth_shape})")
    fig.tight_layout()
    return fig, axes
