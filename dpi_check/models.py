"""Result types for one analysis call."""

from __future__ import annotations

import enum
import functools
from dataclasses import asdict, dataclass, field
from typing import List, Optional


@functools.total_ordering
class SuggestedUse(enum.Enum):
    """Print tiers, ordered from least to most demanding."""

    WEB_ONLY = "web-only"
    SMALL_PRINT = "small-print"
    MEDIUM_PRINT = "medium-print"
    LARGE_PRINT = "large-print"
    COMMERCIAL_PRINT = "commercial-print"

    @property
    def rank(self) -> int:
        return list(SuggestedUse).index(self)

    def __lt__(self, other):
        if not isinstance(other, SuggestedUse):
            return NotImplemented
        return self.rank < other.rank


@dataclass
class ImageMetadata:
    """Accumulator filled in by the analyzer; owned by a single call.

    ``dpi`` and ``ppi`` are always equal and the physical size is always
    recomputed from both dimensions at once.
    """

    file_size_bytes: int
    declared_format: str
    width: int = 0
    height: int = 0
    dpi: Optional[float] = None
    ppi: Optional[float] = None
    dpi_source: Optional[str] = None
    physical_width_in: Optional[float] = None
    physical_height_in: Optional[float] = None
    aspect_ratio: Optional[float] = None
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def is_vector(self) -> bool:
        return "svg" in (self.declared_format or "").lower()

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    def set_dimensions(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.aspect_ratio = width / height if height else None
        self._update_physical()

    def set_dpi(self, value: float, source: str) -> None:
        self.dpi = value
        self.ppi = value
        self.dpi_source = source
        self._update_physical()

    def _update_physical(self) -> None:
        if self.dpi and self.width and self.height:
            self.physical_width_in = self.width / self.dpi
            self.physical_height_in = self.height / self.dpi
        else:
            self.physical_width_in = None
            self.physical_height_in = None


@dataclass(frozen=True)
class DPIExtractionResult:
    metadata: ImageMetadata
    is_high_quality: bool
    is_print_ready: bool
    quality_score: int
    suggested_use: SuggestedUse

    def to_dict(self) -> dict:
        return {
            "metadata": asdict(self.metadata),
            "is_vector": self.metadata.is_vector,
            "is_high_quality": self.is_high_quality,
            "is_print_ready": self.is_print_ready,
            "quality_score": self.quality_score,
            "suggested_use": self.suggested_use.value,
        }
