"""Conversion from linear radiance to displayable 8-bit values.

Radiance leaves the integrator unclamped and linear. For display it is
gamma corrected with gamma 2 (square root), clamped to [0, 0.999] and
scaled to [0, 255].
"""

import numpy as np
import numpy.typing as npt

# Upper clamp keeps int(256 * x) at or below 255
INTENSITY_MAX = 0.999


def linear_to_gamma(linear: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Apply gamma-2 correction. Non-positive components map to 0."""
    values = np.asarray(linear, dtype=np.float64)
    return np.sqrt(np.maximum(values, 0.0))


def color_to_bytes(color: npt.ArrayLike) -> tuple[int, int, int]:
    """Convert one linear RGB color to an (r, g, b) triplet in [0, 255].

    NaN components are treated as 0.
    """
    gamma = np.nan_to_num(linear_to_gamma(color), nan=0.0)
    clamped = np.clip(gamma, 0.0, INTENSITY_MAX)
    r, g, b = (int(256 * c) for c in clamped)
    return r, g, b


def image_to_uint8(image: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert a linear image of shape (H, W, 3) to 8-bit sRGB-ish values."""
    gamma = np.nan_to_num(linear_to_gamma(image), nan=0.0)
    clamped = np.clip(gamma, 0.0, INTENSITY_MAX)
    return (256 * clamped).astype(np.uint8)
