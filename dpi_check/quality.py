"""
dpi_check.quality — print-suitability scoring.

:func:`score` sums independent weighted factors into a 0-100 score:

* DPI tier (300 / 150 / 96 dpi)
* resolution tier (16 / 8 / 2 / 1 megapixels)
* density tier (encoded bytes per pixel, a compression proxy)
* format bonus or penalty
* standard print aspect ratio bonus

and derives the high-quality / print-ready verdicts and a suggested use from
it. Deterministic, no I/O. The format warning and the recommendations are
appended to the metadata passed in.
"""

from typing import NamedTuple

from .models import SuggestedUse

VECTOR_SCORE = 95

DPI_TIERS = ((300, 40), (150, 30), (96, 20))
DPI_FLOOR = 10

PIXEL_TIERS = ((16_000_000, 30), (8_000_000, 25), (2_000_000, 20), (1_000_000, 15))
PIXEL_FLOOR = 5

DENSITY_TIERS = ((3.0, 20), (1.5, 15), (0.5, 10))
DENSITY_FLOOR = 5

STANDARD_RATIOS = (1.0, 4 / 3, 3 / 2, 16 / 9, 5 / 4)
RATIO_TOLERANCE = 0.1
RATIO_BONUS = 10

PRINT_READY_DPI = 300
HIGH_QUALITY_PIXELS = 16_000_000
HIGH_QUALITY_SCORE = 70
PRINT_READY_SCORE = 60

# (min score, min dpi, tier), first match wins
USE_TIERS = (
    (90, 300, SuggestedUse.COMMERCIAL_PRINT),
    (75, 200, SuggestedUse.LARGE_PRINT),
    (60, 150, SuggestedUse.MEDIUM_PRINT),
    (40, 96, SuggestedUse.SMALL_PRINT),
)

FORMAT_WARNING = "Format may not be optimal for print production"
REC_DPI = "For best print quality, use images with 150+ DPI"
REC_RESOLUTION = "Higher resolution images will produce sharper prints"
REC_COMPRESSION = "Image appears heavily compressed - quality may be reduced"


class QualityVerdict(NamedTuple):
    score: int
    is_high_quality: bool
    is_print_ready: bool
    suggested_use: SuggestedUse


def _tier(value, tiers, floor):
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return floor


def _format_points(fmt):
    """(points, sets print-ready, warn) for a declared format."""
    fmt = (fmt or "").lower()
    if "pdf" in fmt:
        return 15, True, False
    if "png" in fmt:
        return 10, False, False
    if "jpeg" in fmt or "jpg" in fmt:
        return 5, False, False
    if "webp" in fmt or "gif" in fmt:
        return -10, False, True
    return 0, False, False


def is_standard_ratio(width, height):
    if not width or not height:
        return False
    ratio = width / height
    return any(abs(ratio - r) < RATIO_TOLERANCE for r in STANDARD_RATIOS)


def suggest_use(score, dpi):
    for min_score, min_dpi, use in USE_TIERS:
        if score >= min_score and dpi >= min_dpi:
            return use
    return SuggestedUse.WEB_ONLY


def score(metadata):
    if metadata.is_vector:
        return QualityVerdict(VECTOR_SCORE, True, True, SuggestedUse.COMMERCIAL_PRINT)

    dpi = metadata.dpi or 72
    total = metadata.total_pixels
    bpp = metadata.file_size_bytes / total if total > 0 else 0.0

    points = _tier(dpi, DPI_TIERS, DPI_FLOOR)
    print_ready = dpi >= PRINT_READY_DPI

    points += _tier(total, PIXEL_TIERS, PIXEL_FLOOR)
    high_quality = total >= HIGH_QUALITY_PIXELS

    points += _tier(bpp, DENSITY_TIERS, DENSITY_FLOOR)

    fmt_points, fmt_print_ready, fmt_warn = _format_points(metadata.declared_format)
    points += fmt_points
    print_ready = print_ready or fmt_print_ready
    if fmt_warn:
        metadata.warnings.append(FORMAT_WARNING)

    if is_standard_ratio(metadata.width, metadata.height):
        points += RATIO_BONUS

    points = max(0, min(100, points))

    if dpi < 150:
        metadata.recommendations.append(REC_DPI)
    if total < 2_000_000:
        metadata.recommendations.append(REC_RESOLUTION)
    if bpp < 0.5:
        metadata.recommendations.append(REC_COMPRESSION)

    return QualityVerdict(
        score=int(points),
        is_high_quality=high_quality or points >= HIGH_QUALITY_SCORE,
        is_print_ready=print_ready and points >= PRINT_READY_SCORE,
        suggested_use=suggest_use(points, dpi),
    )
