"""Color plate decompression and pixel normalisation.

The stored plate is width * height little-endian u32 pixels laid out as
0xAARRGGBB, i.e. B, G, R, A in memory. After decoding, each pixel is a
native u32 with red and blue exchanged (0xAABBGGRR), so serialising it
little-endian gives R, G, B, A bytes ready for an RGBA scanline.
"""

import zlib

import numpy as np

from colorplate.common.binary import read_u32_be
from colorplate.errors import (
    DecompressionError,
    OutOfMemoryError,
    SizeMismatchError,
)

BYTES_PER_PIXEL = 4

ALPHA_GREEN_MASK = 0xFF00FF00
CHANNEL_MASK = 0xFF


def swap_red_blue(pixels):
    """Exchange bits 16-23 and 0-7 of every u32 pixel in place."""
    blue = pixels & CHANNEL_MASK
    red = (pixels >> 16) & CHANNEL_MASK
    pixels &= ALPHA_GREEN_MASK
    pixels |= red
    pixels |= blue << 16
    return pixels


def normalize_pixels(raw, out=None):
    """Turn stored little-endian BGRA pixel bytes into normalised pixels.

    Converts to native u32 first and then swaps the red and blue channels.
    If ``out`` is given the result is written into it.
    """
    stored = np.frombuffer(raw, dtype='<u4')
    if out is None:
        out = stored.astype(np.uint32)
    else:
        out[:] = stored
    return swap_red_blue(out)


def inflate(payload, expected_size):
    """One-shot zlib inflate that must produce exactly ``expected_size`` bytes.

    Returns the decompressed bytes, or None if the stream is damaged, ends
    short, would produce more output, or is followed by trailing input.
    """
    d = zlib.decompressobj()
    try:
        # max_length=0 means unlimited, so ask for one byte on empty plates
        out = d.decompress(payload, max(expected_size, 1))
    except zlib.error:
        return None
    if not d.eof or d.unconsumed_tail or d.unused_data:
        return None
    if len(out) != expected_size:
        return None
    return out


def decode(data, block, path=None):
    """Decompress the color plate described by ``block``.

    ``block`` must come from a validated TagHeader. Returns a numpy u32
    array of width * height normalised pixels.
    """
    label = path if path is not None else '<buffer>'
    declared = read_u32_be(data, block.offset)
    expected = block.pixel_count * BYTES_PER_PIXEL

    if declared != expected:
        raise SizeMismatchError(
            f"{label} has invalid color plate data "
            f"({block.width} x {block.height} x {BYTES_PER_PIXEL} != {declared})", path)

    try:
        pixels = np.empty(block.pixel_count, dtype=np.uint32)
    except MemoryError:
        raise OutOfMemoryError(
            f"{label} could not be decompressed due to not enough memory", path)

    payload = memoryview(data)[block.data_offset:block.data_offset + block.data_length]
    try:
        raw = inflate(payload, expected)
    except MemoryError:
        raise OutOfMemoryError(
            f"{label} could not be decompressed due to not enough memory", path)
    if raw is None:
        raise DecompressionError(
            f"{label} could not be decompressed due to invalid compressed data", path)

    return normalize_pixels(raw, out=pixels)


def scanlines(pixels, width, height):
    """Yield each row of normalised pixels as RGBA bytes, top to bottom."""
    rgba = pixels.astype('<u4', copy=False).view(np.uint8)
    stride = width * BYTES_PER_PIXEL
    for y in range(height):
        yield rgba[y * stride:(y + 1) * stride].tobytes()
