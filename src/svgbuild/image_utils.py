import dataclasses
import io
import logging
from types import TracebackType
from typing import Optional, Type

import numpy as np
from PIL import Image

from svgbuild.errors import EncodeError
from svgbuild.geometry import TargetSize

logger = logging.getLogger(__name__)

CHANNELS = 4
BITS_PER_CHANNEL = 8
# Highest zlib effort; PNG is lossless at every level.
PNG_COMPRESS_LEVEL = 9


class RasterImage:
    """Premultiplied BGRA pixel buffer of a fixed size.

    The buffer is a ``(height, width, 4)`` ``uint8`` array in the byte order
    Skia uses for N32 surfaces on little-endian hosts. Images are released
    explicitly with :py:meth:`release` or by leaving a ``with`` block, after
    which the pixel data is no longer accessible.
    """

    def __init__(self, pixels: np.ndarray) -> None:
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValueError(f"Expected (H, W, {CHANNELS}) array, got {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
        self._pixels: Optional[np.ndarray] = pixels
        self._size = TargetSize(int(pixels.shape[1]), int(pixels.shape[0]))

    @classmethod
    def transparent(cls, size: TargetSize) -> "RasterImage":
        return cls(np.zeros((size.height, size.width, CHANNELS), dtype=np.uint8))

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Create from a straight-alpha PIL image."""
        return cls(premultiply(np.asarray(image.convert("RGBA"))))

    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            raise ValueError("Raster image has been released")
        return self._pixels

    @property
    def size(self) -> TargetSize:
        return self._size

    @property
    def width(self) -> int:
        return self._size.width

    @property
    def height(self) -> int:
        return self._size.height

    @property
    def bits_per_pixel(self) -> int:
        return CHANNELS * BITS_PER_CHANNEL

    @property
    def released(self) -> bool:
        return self._pixels is None

    def to_pil(self) -> Image.Image:
        """Convert to a straight-alpha RGBA PIL image."""
        return Image.fromarray(unpremultiply(self.pixels))

    def release(self) -> None:
        self._pixels = None

    def __enter__(self) -> "RasterImage":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"RasterImage({self._size}, {state})"


@dataclasses.dataclass(frozen=True)
class EncodedFrame:
    """Compressed frame with the size and depth of its source image."""

    data: bytes
    size: TargetSize
    bit_count: int


def unpremultiply(bgra: np.ndarray) -> np.ndarray:
    """Convert premultiplied BGRA pixels to straight-alpha RGBA.

    Rounds half up, so that :py:func:`premultiply` restores the input exactly.
    """
    alpha = bgra[..., 3].astype(np.uint32)
    color = bgra[..., 2::-1].astype(np.uint32)
    divisor = np.maximum(alpha, 1)[..., np.newaxis]
    straight = (color * 255 + divisor // 2) // divisor
    straight = np.where(alpha[..., np.newaxis] > 0, np.minimum(straight, 255), 0)
    rgba = np.empty(bgra.shape, dtype=np.uint8)
    rgba[..., :3] = straight
    rgba[..., 3] = alpha
    return rgba


def premultiply(rgba: np.ndarray) -> np.ndarray:
    """Convert straight-alpha RGBA pixels to premultiplied BGRA."""
    alpha = rgba[..., 3].astype(np.uint32)
    color = rgba[..., 2::-1].astype(np.uint32)
    bgra = np.empty(rgba.shape, dtype=np.uint8)
    bgra[..., :3] = (color * alpha[..., np.newaxis] + 127) // 255
    bgra[..., 3] = alpha
    return bgra


def encode_image(image: Image.Image, format: str = "PNG") -> bytes:
    """Encode a PIL image to bytes in the specified format."""
    with io.BytesIO() as output:
        if format.upper() == "PNG":
            image.save(output, format="PNG", compress_level=PNG_COMPRESS_LEVEL)
        else:
            image.save(output, format=format.upper())
        return output.getvalue()


def decode_image(data: bytes, mode: str | None = None) -> Image.Image:
    """Decode image data from bytes to a PIL image."""
    with io.BytesIO(data) as input:
        image = Image.open(input)
        image.load()
    if mode is not None:
        return image.convert(mode)
    return image


def encode_frame(image: RasterImage) -> EncodedFrame:
    """Losslessly compress a raster image as PNG.

    Raises:
        EncodeError: If the codec fails.
    """
    try:
        data = encode_image(image.to_pil(), "PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode {image.size} frame: {e}") from e
    logger.debug("Encoded %s frame into %d bytes", image.size, len(data))
    return EncodedFrame(data=data, size=image.size, bit_count=image.bits_per_pixel)


def decode_frame(frame: EncodedFrame | bytes) -> RasterImage:
    """Decode a PNG frame back into a premultiplied raster image."""
    data = frame.data if isinstance(frame, EncodedFrame) else frame
    return RasterImage.from_pil(decode_image(data, mode="RGBA"))
