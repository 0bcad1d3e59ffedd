"""
dpi_check.extractors — native resolution metadata read straight from the
container bytes.

Each extractor is a pure function ``bytes -> (dpi_x, dpi_y) | None``.
``None`` means "not found": wrong format, no resolution metadata, or a
truncated/malformed structure. Extractors never raise.

Resolution is treated as isotropic: the JPEG extractor returns the first
resolution tag for both axes and the PNG extractor averages its two axes.
The scorer only ever consumes a single scalar.
"""

import logging
import struct

from .byte_reader import ByteReader
from .guards import round_half_up

logger = logging.getLogger(__name__)

JPEG_SOI = b"\xff\xd8"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

# JPEG markers without a length field
_STANDALONE = {0x01, 0xD8} | set(range(0xD0, 0xD8))
_SOS, _EOI, _APP1 = 0xDA, 0xD9, 0xE1

TAG_X_RESOLUTION = 282
TAG_Y_RESOLUTION = 283
TYPE_RATIONAL = 5

PNG_UNIT_METER = 1
INCHES_PER_METER = 0.0254

_PARSE_ERRORS = (ValueError, struct.error, ZeroDivisionError, OverflowError)


# ======================================================
# ------------------- JPEG / EXIF ----------------------
# ======================================================

def extract_jpeg_dpi(data):
    try:
        return _jpeg_dpi(ByteReader(data))
    except _PARSE_ERRORS as e:
        logger.debug("jpeg exif parse failed: %s", e)
        return None


def _jpeg_dpi(r):
    if not r.matches(0, JPEG_SOI):
        return None

    off = 2
    while True:
        if r.u8(off) != 0xFF:
            return None
        marker = r.u8(off + 1)
        if marker is None:
            return None
        if marker == 0xFF:  # fill byte
            off += 1
            continue
        off += 2
        if marker in _STANDALONE:
            continue
        if marker in (_SOS, _EOI):
            # image data starts; EXIF can no longer follow
            return None

        seg_len = r.u16(off)
        if seg_len is None or seg_len < 2:
            return None
        if marker == _APP1:
            return _exif_dpi(r, off + 2)
        off += seg_len


def _exif_dpi(r, start):
    """Resolution from the APP1 payload starting at ``start``."""
    if not r.matches(start, b"Exif"):
        return None

    tiff = start + 6  # "Exif" + 2 pad bytes
    order = r.raw(tiff, 2)
    if order == b"II":
        little = True
    elif order == b"MM":
        little = False
    else:
        return None

    # offsets inside the TIFF block are relative to its header
    ifd_off = r.u32(tiff + 4, little)
    if ifd_off is None:
        return None
    ifd = tiff + ifd_off

    count = r.u16(ifd, little)
    if count is None:
        return None

    for i in range(count):
        entry = ifd + 2 + 12 * i
        tag = r.u16(entry, little)
        typ = r.u16(entry + 2, little)
        value = r.u32(entry + 8, little)
        if tag is None or typ is None or value is None:
            return None
        if tag not in (TAG_X_RESOLUTION, TAG_Y_RESOLUTION) or typ != TYPE_RATIONAL:
            continue

        numerator = r.u32(tiff + value, little)
        denominator = r.u32(tiff + value + 4, little)
        if numerator is None or denominator is None or denominator == 0:
            return None
        dpi = numerator / denominator
        if dpi <= 0:
            return None
        return (dpi, dpi)

    return None


# ======================================================
# --------------------- PNG pHYs -----------------------
# ======================================================

def extract_png_dpi(data):
    try:
        return _png_dpi(ByteReader(data))
    except _PARSE_ERRORS as e:
        logger.debug("png pHYs parse failed: %s", e)
        return None


def _png_dpi(r):
    if not r.matches(0, PNG_MAGIC):
        return None

    off = 8
    # chunk: [length][type][data][crc]
    while r.in_bounds(off, 8):
        length = r.u32(off)
        ctype = r.tag(off + 4)

        if ctype == "pHYs":
            if length < 9:
                return None
            ppu_x = r.u32(off + 8)
            ppu_y = r.u32(off + 12)
            unit = r.u8(off + 16)
            if ppu_x is None or ppu_y is None or unit is None:
                return None
            if unit != PNG_UNIT_METER:
                # aspect ratio only, no physical calibration
                return None
            dpi_x = round_half_up(ppu_x * INCHES_PER_METER)
            dpi_y = round_half_up(ppu_y * INCHES_PER_METER)
            avg = round_half_up((dpi_x + dpi_y) / 2)
            if avg <= 0:
                return None
            return (float(avg), float(avg))

        if ctype == "IEND":
            return None
        off += 8 + length + 4

    return None


# ======================================================
# --------------------- REGISTRY -----------------------
# ======================================================

# ordered by confidence; keyword matched against the declared format
EXTRACTORS = (
    (("jpeg", "jpg"), extract_jpeg_dpi),
    (("png",), extract_png_dpi),
)


def extractors_for(declared_format, registry=EXTRACTORS):
    fmt = (declared_format or "").lower()
    return [fn for keywords, fn in registry if any(k in fmt for k in keywords)]


def run_extractors(data, extractors):
    """First ``(dpi, extractor_name)`` that succeeds, or ``None``."""
    for fn in extractors:
        try:
            found = fn(data)
        except Exception:
            logger.exception("extractor %s failed", fn.__name__)
            continue
        if found:
            logger.debug("%s found dpi=%s", fn.__name__, found[0])
            return found[0], fn.__name__
        logger.debug("%s: not found", fn.__name__)
    return None
