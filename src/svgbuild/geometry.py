"""Sizes, rectangles, and the aspect-preserving placement math."""

import dataclasses
import math

# Used when a document has no usable intrinsic size.
FALLBACK_SIZE = 256


@dataclasses.dataclass(frozen=True)
class TargetSize:
    """Pixel dimensions of a raster image. Both must be positive."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Target size must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def square(cls, size: int) -> "TargetSize":
        return cls(size, size)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclasses.dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in user units."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclasses.dataclass(frozen=True)
class Placement:
    """Uniform scale and centering offsets mapping a box into a target."""

    scale: float
    offset_x: float
    offset_y: float
    scaled_width: float
    scaled_height: float


def compute_placement(bounds: Rect, target: TargetSize) -> Placement:
    """Fit ``bounds`` into ``target`` without distortion, centered.

    Each dimension of the box is clamped to at least one unit, so degenerate
    boxes keep the scale finite.
    """
    bounded_width = max(bounds.width, 1.0)
    bounded_height = max(bounds.height, 1.0)
    scale = min(target.width / bounded_width, target.height / bounded_height)
    scaled_width = bounded_width * scale
    scaled_height = bounded_height * scale
    return Placement(
        scale=scale,
        offset_x=(target.width - scaled_width) / 2.0,
        offset_y=(target.height - scaled_height) / 2.0,
        scaled_width=scaled_width,
        scaled_height=scaled_height,
    )


def natural_size(bounds: Rect) -> TargetSize:
    """Derive the output size from the document's own bounding box."""
    width = math.ceil(bounds.width)
    height = math.ceil(bounds.height)
    if width <= 0 or height <= 0:
        return TargetSize.square(FALLBACK_SIZE)
    return TargetSize(max(width, 1), max(height, 1))
