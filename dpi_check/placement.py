"""Effective DPI of an image stretched over a print area of known size."""

from typing import NamedTuple, Optional

from .guards import finite_pos, round_half_up

MIN_DPI = 150
RECOMMENDED_DPI = 300
FAIR_BELOW = 200


class PlacementCheck(NamedTuple):
    dpi: Optional[int]
    tone: str  # good / fair / poor / neutral
    label: Optional[str]
    meets_minimum: bool
    meets_recommended: bool


def placement_dpi(width_px, height_px, print_width_in, print_height_in):
    """Limiting DPI across both axes, or None when anything is missing."""
    w = finite_pos(width_px)
    h = finite_pos(height_px)
    pw = finite_pos(print_width_in)
    ph = finite_pos(print_height_in)
    if None in (w, h, pw, ph):
        return None
    return round_half_up(min(w / pw, h / ph))


def check_placement(width_px, height_px, print_width_in, print_height_in,
                    min_dpi=MIN_DPI, recommended_dpi=RECOMMENDED_DPI):
    dpi = placement_dpi(width_px, height_px, print_width_in, print_height_in)
    if dpi is None:
        return PlacementCheck(None, "neutral", None, False, False)
    if dpi < MIN_DPI:
        tone, label = "poor", "Poor"
    elif dpi < FAIR_BELOW:
        tone, label = "fair", "Fair"
    else:
        tone, label = "good", "Good"
    return PlacementCheck(dpi, tone, label, dpi >= min_dpi, dpi >= recommended_dpi)
