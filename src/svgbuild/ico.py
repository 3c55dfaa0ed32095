"""ICO container encoder.

Layout, little-endian throughout::

    ICONDIR         reserved (u16) = 0, type (u16) = 1, count (u16)
    ICONDIRENTRY*   width (u8), height (u8), color count (u8) = 0,
                    reserved (u8) = 0, planes (u16) = 1, bit count (u16),
                    data size (u32), data offset (u32)
    data            frame payloads, back-to-back, in directory order

Dimensions of 256 pixels or more are stored as 0.
"""

import dataclasses
import logging
import struct
from typing import Sequence

from svgbuild.errors import ConfigurationError, EncodeError
from svgbuild.geometry import TargetSize
from svgbuild.image_utils import EncodedFrame
from svgbuild.storage import FileSystemStorage

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<HHH")
ENTRY = struct.Struct("<BBBBHHII")
HEADER_SIZE = HEADER.size  # 6
ENTRY_SIZE = ENTRY.size  # 16
ICON_TYPE = 1

# Sizes rendered for icon output, in directory order.
ICON_SIZES: tuple[TargetSize, ...] = tuple(
    TargetSize.square(size) for size in (16, 24, 32, 48, 64, 128, 256)
)


@dataclasses.dataclass(frozen=True)
class IconEntry:
    """Directory record of one frame."""

    width: int
    height: int
    bit_count: int
    data_size: int
    data_offset: int
    color_count: int = 0
    planes: int = 1

    @property
    def size(self) -> TargetSize:
        """Pixel size, reading the 0 sentinel as 256."""
        return TargetSize(self.width or 256, self.height or 256)


def encode_dimension(value: int) -> int:
    """Encode a frame dimension into the one-byte directory field."""
    return 0 if value >= 256 else value


def build_directory(frames: Sequence[EncodedFrame]) -> list[IconEntry]:
    """Compute directory entries with offsets for the given frames."""
    offset = HEADER_SIZE + ENTRY_SIZE * len(frames)
    entries = []
    for frame in frames:
        entries.append(
            IconEntry(
                width=encode_dimension(frame.size.width),
                height=encode_dimension(frame.size.height),
                bit_count=frame.bit_count,
                data_size=len(frame.data),
                data_offset=offset,
            )
        )
        offset += len(frame.data)
    return entries


def encode_ico(frames: Sequence[EncodedFrame]) -> bytes:
    """Assemble frames into an ICO byte stream.

    Raises:
        ConfigurationError: If ``frames`` is empty.
        EncodeError: If a frame cannot be described by the directory fields.
    """
    if not frames:
        raise ConfigurationError("No icon images were generated.")

    entries = build_directory(frames)
    chunks = [HEADER.pack(0, ICON_TYPE, len(frames))]
    try:
        for entry in entries:
            chunks.append(
                ENTRY.pack(
                    entry.width,
                    entry.height,
                    entry.color_count,
                    0,
                    entry.planes,
                    entry.bit_count,
                    entry.data_size,
                    entry.data_offset,
                )
            )
    except struct.error as e:
        raise EncodeError(f"Frame cannot be stored in an ICO directory: {e}") from e
    chunks.extend(frame.data for frame in frames)
    return b"".join(chunks)


def write_ico(
    frames: Sequence[EncodedFrame],
    output_path: str,
    storage: FileSystemStorage | None = None,
) -> None:
    """Encode frames and write the ICO file in a single pass.

    The frame list is checked before the destination is touched.
    """
    data = encode_ico(frames)
    storage = storage or FileSystemStorage()
    storage.put(output_path, data)
    logger.debug("Wrote %d frames (%d bytes) to '%s'", len(frames), len(data), output_path)


def read_directory(data: bytes) -> list[IconEntry]:
    """Parse the header and directory of an ICO byte stream.

    Raises:
        ValueError: If the data is truncated or not an icon.
    """
    if len(data) < HEADER_SIZE:
        raise ValueError("Data is too short for an ICO header")
    reserved, icon_type, count = HEADER.unpack_from(data, 0)
    if reserved != 0 or icon_type != ICON_TYPE:
        raise ValueError(f"Not an ICO header: reserved={reserved}, type={icon_type}")
    if len(data) < HEADER_SIZE + ENTRY_SIZE * count:
        raise ValueError(f"Data is too short for {count} directory entries")

    entries = []
    for index in range(count):
        (
            width,
            height,
            color_count,
            _,
            planes,
            bit_count,
            data_size,
            data_offset,
        ) = ENTRY.unpack_from(data, HEADER_SIZE + ENTRY_SIZE * index)
        entries.append(
            IconEntry(
                width=width,
                height=height,
                bit_count=bit_count,
                data_size=data_size,
                data_offset=data_offset,
                color_count=color_count,
                planes=planes,
            )
        )
    return entries
