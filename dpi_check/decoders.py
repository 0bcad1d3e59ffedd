"""
Pixel dimension acquisition.

The engine never decodes pixels itself; it asks an injected decoder for the
natural ``(width, height)`` of the upload. ``PillowDecoder`` is the default and
only reads the image header through ``Image.open``.
"""

from __future__ import annotations

import io
import logging
import threading
from typing import Optional, Protocol, Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Bytes are not a decodable raster image (or decoding timed out)."""


class ImageDecoder(Protocol):
    def decode(self, data: bytes) -> Tuple[int, int]: ...


# guards the temporary MAX_IMAGE_PIXELS lift below
_limit_lock = threading.Lock()


class PillowDecoder:
    def decode(self, data: bytes) -> Tuple[int, int]:
        try:
            return self._header_size(data)
        except Image.DecompressionBombError:
            # the pixel limit protects decoding, which never happens here;
            # large print files must still report their size
            with _limit_lock:
                limit = Image.MAX_IMAGE_PIXELS
                Image.MAX_IMAGE_PIXELS = None
                try:
                    return self._header_size(data)
                finally:
                    Image.MAX_IMAGE_PIXELS = limit

    @staticmethod
    def _header_size(data: bytes) -> Tuple[int, int]:
        try:
            with Image.open(io.BytesIO(data)) as img:
                return img.size
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise DecodeError(f"not a decodable image: {exc}") from exc


def _decode_in_thread(decoder: ImageDecoder, data: bytes, timeout: float) -> Tuple[int, int]:
    box = {}

    def run():
        try:
            box["size"] = decoder.decode(data)
        except Exception as exc:
            box["error"] = exc

    # daemon: a hung decoder is abandoned and never blocks interpreter exit
    worker = threading.Thread(target=run, name="dpi-check-decode", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise DecodeError(f"decoder timed out after {timeout}s")
    if "error" in box:
        raise box["error"]
    return box["size"]


def acquire_dimensions(
    decoder: ImageDecoder, data: bytes, timeout: Optional[float] = None
) -> Tuple[int, int]:
    """Ask ``decoder`` for pixel dimensions, bounded by ``timeout`` seconds.

    Raises:
        DecodeError: on any decoder failure, on timeout, or when the decoder
            reports non-positive dimensions.
    """
    try:
        if timeout:
            size = _decode_in_thread(decoder, data, timeout)
        else:
            size = decoder.decode(data)
    except DecodeError:
        raise
    except Exception as exc:
        raise DecodeError(f"decoder failed: {exc}") from exc

    try:
        width, height = int(size[0]), int(size[1])
    except (TypeError, ValueError, IndexError) as exc:
        raise DecodeError(f"decoder returned {size!r}") from exc
    if width <= 0 or height <= 0:
        raise DecodeError(f"non-positive dimensions {width}x{height}")
    return width, height
