"""
dpi_check.analyzer — print-readiness analysis of one uploaded image.

:func:`analyze_image` runs the fallback chain

1. native metadata extractors matching the declared format (EXIF, pHYs)
2. pixel dimensions from the injected decoder
3. rendering-surface estimate (only when a surface is supplied)
4. file-size density estimate (always succeeds)

then scores the result. It never raises: an undecodable upload or an
unexpected failure produces the degraded web-only verdict with a warning.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from . import quality
from .decoders import DecodeError, PillowDecoder, acquire_dimensions
from .extractors import extractors_for, run_extractors
from .guards import num
from .heuristics import BASE_DPI, RenderingSurface, estimate_from_density, estimate_from_surface
from .models import DPIExtractionResult, ImageMetadata, SuggestedUse

logger = logging.getLogger(__name__)

DEGRADED_SCORE = 30

WARN_ESTIMATED = "DPI estimated from file characteristics - actual resolution may vary"
WARN_SURFACE = "DPI estimated from the display surface - actual resolution may vary"
WARN_UNREADABLE = "Could not read image dimensions - using default 72 DPI"
WARN_FAILED = "Could not extract DPI - using default 72 DPI"

_default_decoder = PillowDecoder()


def analyze_image(data, file_size=None, declared_format="", *, decoder=None,
                  surface: Optional[RenderingSurface] = None, timeout=None, extractors=None):
    """Measure and classify the print readiness of ``data``.

    Args:
        data: raw bytes of the upload.
        file_size: declared size in bytes; defaults to ``len(data)``.
        declared_format: MIME-like string, e.g. ``"image/png"``.
        decoder: object with ``decode(bytes) -> (width, height)``;
            defaults to Pillow.
        surface: optional rendering surface exposing ``device_pixel_ratio``
            and ``backing_store_ratio``.
        timeout: seconds to wait for the decoder; ``None`` waits forever.
        extractors: ordered extractor functions overriding the ones picked
            from ``declared_format``.

    Returns:
        DPIExtractionResult, always.
    """
    fmt = str(declared_format or "")
    meta = None
    try:
        data = bytes(data or b"")
        meta = ImageMetadata(file_size_bytes=_declared_size(file_size, data), declared_format=fmt)
        return _analyze(data, meta, decoder or _default_decoder, surface, timeout, extractors)
    except Exception:
        logger.exception("dpi analysis failed for %s upload", fmt or "unknown")
        if meta is None:
            meta = ImageMetadata(file_size_bytes=0, declared_format=fmt)
        return _degraded(meta, WARN_FAILED)


def _declared_size(file_size, data):
    size = num(file_size, None)
    if size is None or size < 0:
        return len(data)
    return int(size)


def _analyze(data, meta, decoder, surface, timeout, extractors):
    if meta.is_vector:
        verdict = quality.score(meta)
        return _result(meta, verdict)

    if extractors is None:
        extractors = extractors_for(meta.declared_format)
    found = run_extractors(data, extractors)
    if found:
        meta.set_dpi(*found)

    try:
        width, height = acquire_dimensions(decoder, data, timeout)
    except DecodeError as e:
        logger.warning("dimension acquisition failed: %s", e)
        return _degraded(meta, WARN_UNREADABLE)
    meta.set_dimensions(width, height)

    if meta.dpi is None:
        dpi = estimate_from_surface(surface)
        if dpi:
            meta.set_dpi(float(dpi), "surface")
            meta.warnings.append(WARN_SURFACE)

    if meta.dpi is None:
        dpi = estimate_from_density(width, height, meta.file_size_bytes)
        logger.debug("density estimate dpi=%s", dpi)
        meta.set_dpi(float(dpi), "density")
        meta.warnings.append(WARN_ESTIMATED)

    return _result(meta, quality.score(meta))


def _result(meta, verdict):
    return DPIExtractionResult(
        metadata=meta,
        is_high_quality=verdict.is_high_quality,
        is_print_ready=verdict.is_print_ready,
        quality_score=verdict.score,
        suggested_use=verdict.suggested_use,
    )


def _degraded(meta, warning):
    meta.set_dpi(float(BASE_DPI), "default")
    meta.warnings.append(warning)
    return DPIExtractionResult(
        metadata=meta,
        is_high_quality=False,
        is_print_ready=False,
        quality_score=DEGRADED_SCORE,
        suggested_use=SuggestedUse.WEB_ONLY,
    )


def analyze_many(items, max_workers=4, **kwargs):
    """Analyze ``(data, file_size, declared_format)`` triples concurrently.

    Results come back in input order.
    """
    items = list(items)
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items)))) as pool:
        futures = [pool.submit(analyze_image, data, size, fmt, **kwargs)
                   for data, size, fmt in items]
        return [f.result() for f in futures]
