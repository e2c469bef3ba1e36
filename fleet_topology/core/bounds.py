"""Canvas bounds enforcement."""

import math
from typing import Optional, Tuple

import numpy as np

from .errors import LayoutConfigError

DEFAULT_MARGIN = 50.0


def check_canvas(canvas_width: float, canvas_height: float, margin: float = DEFAULT_MARGIN) -> None:
    """Raise LayoutConfigError unless the canvas leaves a drawable box inside the margin."""
    values = (canvas_width, canvas_height, margin)
    if not all(math.isfinite(v) for v in values):
        raise LayoutConfigError(f"Canvas dimensions must be finite, got {values}")
    if margin < 0:
        raise LayoutConfigError(f"Margin must be non-negative, got {margin}")
    if canvas_width < 2 * margin or canvas_height < 2 * margin:
        raise LayoutConfigError(
            f"Canvas {canvas_width}x{canvas_height} is smaller than twice the margin {margin}"
        )


def clamp_position(
    position: Tuple[float, float],
    canvas_width: float,
    canvas_height: float,
    margin: float = DEFAULT_MARGIN,
) -> Tuple[float, float]:
    """Clamp a single ``(x, y)`` into ``[margin, size - margin]`` on both axes."""
    check_canvas(canvas_width, canvas_height, margin)
    x, y = position
    x = min(max(x, margin), canvas_width - margin)
    y = min(max(y, margin), canvas_height - margin)
    return x, y


def clamp_positions(
    positions: np.ndarray,
    canvas_width: float,
    canvas_height: float,
    margin: float = DEFAULT_MARGIN,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Clamp an ``(n, 2)`` array of positions into the drawable box.

    Runs once per simulation iteration, so the canvas is not re-validated
    here; callers check it once with ``check_canvas``.

    Args:
        positions: Array of [x, y] coordinates
        canvas_width: Canvas width
        canvas_height: Canvas height
        margin: Inset kept clear on every side
        out: Optional output array (may be ``positions`` itself)

    Returns:
        Clamped positions
    """
    lower = np.array([margin, margin], dtype=np.float64)
    upper = np.array([canvas_width - margin, canvas_height - margin], dtype=np.float64)
    return np.clip(positions, lower, upper, out=out)
