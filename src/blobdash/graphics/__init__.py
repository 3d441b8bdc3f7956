"""Graphics rendering for BLOBDASH."""

from .renderer import GameRenderer
from .primitives import draw_rect, draw_ellipse, draw_hline, dim, hsl

__all__ = ["GameRenderer", "draw_rect", "draw_ellipse", "draw_hline", "dim", "hsl"]
