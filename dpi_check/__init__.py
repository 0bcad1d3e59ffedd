"""Print-readiness analysis of uploaded raster images."""

from .analyzer import analyze_image, analyze_many
from .decoders import DecodeError, ImageDecoder, PillowDecoder
from .extractors import extract_jpeg_dpi, extract_png_dpi
from .models import DPIExtractionResult, ImageMetadata, SuggestedUse
from .placement import PlacementCheck, check_placement
from .quality import QualityVerdict, score

__all__ = [
    "analyze_image",
    "analyze_many",
    "check_placement",
    "DecodeError",
    "DPIExtractionResult",
    "extract_jpeg_dpi",
    "extract_png_dpi",
    "ImageDecoder",
    "ImageMetadata",
    "PillowDecoder",
    "PlacementCheck",
    "QualityVerdict",
    "score",
    "SuggestedUse",
]
