"""
Low-confidence DPI guesses used when the file carries no resolution metadata.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .guards import finite_pos, round_half_up

logger = logging.getLogger(__name__)

BASE_DPI = 72

# (bytes-per-pixel strictly above, estimated dpi)
DENSITY_TIERS = ((3.0, 300), (1.5, 150), (0.5, 96))


class RenderingSurface(Protocol):
    device_pixel_ratio: float
    backing_store_ratio: float


def estimate_from_surface(surface: Optional[RenderingSurface]):
    """``72 * device_pixel_ratio / backing_store_ratio`` of a drawing surface.

    Only a platform guess about the screen, not about the file; callers try it
    after the native extractors and before the density estimate.
    """
    if surface is None:
        return None
    dpr = finite_pos(getattr(surface, "device_pixel_ratio", None), 1.0)
    bsr = finite_pos(getattr(surface, "backing_store_ratio", None), 1.0)
    dpi = round_half_up(BASE_DPI * dpr / bsr)
    return dpi if dpi > 0 else None


def estimate_from_density(width, height, file_size):
    """Tiered guess from encoded bytes per pixel. Always returns a value."""
    total = width * height
    if total <= 0:
        return BASE_DPI
    bpp = file_size / total
    for above, dpi in DENSITY_TIERS:
        if bpp > above:
            return dpi
    return BASE_DPI
