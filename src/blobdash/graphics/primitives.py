"""Basic drawing primitives for numpy frame buffers."""

import colorsys
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int) -> Buffer:
    """Allocate a black (height, width, 3) RGB buffer."""
    return np.zeros((height, width, 3), dtype=np.uint8)


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Line thickness for outline (when filled=False)
    """
    h, w = buffer.shape[:2]

    # Clamp to buffer bounds
    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))

    if x2 <= x1 or y2 <= y1:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
        return

    for t in range(thickness):
        buffer[min(y1 + t, y2 - 1), x1:x2] = color
        buffer[max(y2 - 1 - t, y1), x1:x2] = color
        buffer[y1:y2, min(x1 + t, x2 - 1)] = color
        buffer[y1:y2, max(x2 - 1 - t, x1)] = color


def draw_ellipse(
    buffer: Buffer,
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    color: Color,
) -> None:
    """Draw a filled axis-aligned ellipse (distance-based mask)."""
    if rx <= 0 or ry <= 0:
        return

    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    mask = ((x_indices - cx) / rx) ** 2 + ((y_indices - cy) / ry) ** 2 <= 1.0
    buffer[mask] = color


def draw_hline(buffer: Buffer, y: int, color: Color, thickness: int = 1) -> None:
    """Draw a full-width horizontal line."""
    h = buffer.shape[0]
    y1 = max(0, y)
    y2 = min(h, y + thickness)
    if y2 > y1:
        buffer[y1:y2, :] = color


def dim(buffer: Buffer, factor: float) -> None:
    """Darken the whole buffer in place."""
    buffer[:, :, :] = (buffer[:, :, :] * factor).astype(np.uint8)


def hsl(hue: float, saturation: float, lightness: float) -> Color:
    """HSL (hue in degrees, s/l in 0..1) to an RGB tuple."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness, saturation)
    return int(r * 255), int(g * 255), int(b * 255)
