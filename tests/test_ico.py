"""Tests for the ICO container encoder."""

import io
import struct
from pathlib import Path

import pytest
from PIL import Image

from svgbuild.errors import ConfigurationError, EncodeError
from svgbuild.geometry import Rect, TargetSize
from svgbuild.ico import (
    ICON_SIZES,
    build_directory,
    encode_dimension,
    encode_ico,
    read_directory,
    write_ico,
)
from svgbuild.image_utils import EncodedFrame, encode_frame
from svgbuild.rasterizer import render_all

from .conftest import RectPicture


def make_frames(sizes: list[int]) -> list[EncodedFrame]:
    """Fake frames whose payload length depends on the size."""
    return [
        EncodedFrame(
            data=bytes([size % 256]) * (size + 3),
            size=TargetSize.square(size),
            bit_count=32,
        )
        for size in sizes
    ]


def test_icon_sizes() -> None:
    assert [size.width for size in ICON_SIZES] == [16, 24, 32, 48, 64, 128, 256]
    assert all(size.width == size.height for size in ICON_SIZES)


@pytest.mark.parametrize(
    "value, expected", [(1, 1), (16, 16), (128, 128), (255, 255), (256, 0), (512, 0)]
)
def test_encode_dimension(value: int, expected: int) -> None:
    assert encode_dimension(value) == expected


def test_header_and_directory_layout() -> None:
    frames = make_frames([16, 24, 32, 48, 64, 128, 256])
    data = encode_ico(frames)

    assert data[:6] == b"\x00\x00\x01\x00\x07\x00"
    first = struct.unpack_from("<BBBBHHII", data, 6)
    assert first == (16, 16, 0, 0, 1, 32, 19, 6 + 16 * 7)
    assert first[-1] == 118

    last = struct.unpack_from("<BBBBHHII", data, 6 + 16 * 6)
    assert last[0] == 0  # 256 wide
    assert last[1] == 0  # 256 high
    assert last[-1] + last[-2] == len(data)


def test_offsets_and_payload_order() -> None:
    frames = make_frames([16, 24, 32, 48, 64, 128, 256])
    data = encode_ico(frames)
    entries = read_directory(data)

    assert len(entries) == 7
    offsets = [entry.data_offset for entry in entries]
    assert offsets == sorted(offsets)
    assert len(set(offsets)) == len(offsets)

    expected_offset = 6 + 16 * len(frames)
    for entry, frame in zip(entries, frames):
        assert entry.data_offset == expected_offset
        assert entry.data_size == len(frame.data)
        assert data[entry.data_offset : entry.data_offset + entry.data_size] == frame.data
        assert entry.size == frame.size
        assert entry.planes == 1
        assert entry.color_count == 0
        expected_offset += len(frame.data)
    assert expected_offset == len(data)


def test_dimension_sentinel_for_large_frames() -> None:
    frames = [
        EncodedFrame(b"a", TargetSize(256, 128), 32),
        EncodedFrame(b"b", TargetSize(128, 300), 32),
    ]
    entries = build_directory(frames)
    assert (entries[0].width, entries[0].height) == (0, 128)
    assert (entries[1].width, entries[1].height) == (128, 0)


def test_bit_count_is_copied_from_frame() -> None:
    frames = [EncodedFrame(b"abc", TargetSize(16, 16), 24)]
    assert read_directory(encode_ico(frames))[0].bit_count == 24


def test_empty_frame_list_is_rejected(tmp_path: Path) -> None:
    output_path = tmp_path / "empty.ico"
    with pytest.raises(ConfigurationError, match="No icon images"):
        write_ico([], str(output_path))
    assert not output_path.exists()


def test_unrepresentable_frame_size() -> None:
    frame = EncodedFrame(b"x", TargetSize(16, 16), 70000)
    with pytest.raises(EncodeError):
        encode_ico([frame])


def test_write_ico_creates_directories(tmp_path: Path) -> None:
    output_path = tmp_path / "nested" / "dir" / "icon.ico"
    frames = make_frames([16, 32])
    write_ico(frames, str(output_path))
    assert output_path.read_bytes() == encode_ico(frames)


def test_rendered_icon_opens_with_pillow() -> None:
    picture = RectPicture(Rect(0, 0, 100, 50))
    images = render_all(picture, ICON_SIZES)
    try:
        frames = [encode_frame(image) for image in images]
    finally:
        for image in images:
            image.release()

    data = encode_ico(frames)
    with Image.open(io.BytesIO(data)) as icon:
        assert icon.format == "ICO"
        assert set(icon.info["sizes"]) == {
            (size.width, size.height) for size in ICON_SIZES
        }
        icon.size = (48, 48)
        icon.load()
        assert icon.convert("RGBA").getpixel((24, 24)) == (255, 0, 0, 255)
        assert icon.convert("RGBA").getpixel((24, 2)) == (0, 0, 0, 0)


@pytest.mark.parametrize(
    "data, message",
    [
        (b"\x00\x00", "too short"),
        (b"\x00\x00\x02\x00\x01\x00" + b"\x00" * 16, "Not an ICO"),
        (b"\x00\x00\x01\x00\x02\x00" + b"\x00" * 16, "too short for 2"),
    ],
)
def test_read_directory_rejects_invalid_data(data: bytes, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        read_directory(data)
