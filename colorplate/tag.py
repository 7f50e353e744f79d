"""Bitmap tag header parsing.

Only the handful of header fields needed to find the color plate are read.
All values are little-endian:

  Offset 0x24: u32  tag class ('bitm')
  Offset 0x38: u16  tag version (7)
  Offset 0x4C: u32  color plate block offset, relative to 0x50
  Offset 0x68: u16  color plate width
  Offset 0x6A: u16  color plate height
  Offset 0x6C: u32  color plate block length

The block itself is a u32 big-endian decompressed length followed by a
zlib stream of width * height 32-bit BGRA pixels.
"""

from collections import namedtuple

from colorplate.common.binary import fourcc, read_u16_le, read_u32_le
from colorplate.errors import (
    BadMagicError,
    BadVersionError,
    NoColorPlateError,
    OutOfBoundsError,
    TooSmallError,
)

MIN_HEADER_SIZE = 0x100

TAG_CLASS_OFFSET = 0x24
TAG_VERSION_OFFSET = 0x38
PLATE_OFFSET_OFFSET = 0x4C
PLATE_WIDTH_OFFSET = 0x68
PLATE_HEIGHT_OFFSET = 0x6A
PLATE_LENGTH_OFFSET = 0x6C

BITMAP_TAG_CLASS = fourcc('bitm')
BITMAP_TAG_VERSION = 7
PLATE_BASE_OFFSET = 0x50

LENGTH_PREFIX_SIZE = 4


class ColorPlateBlock(namedtuple('ColorPlateBlock', 'offset length width height')):
    """Location of the compressed color plate inside a tag buffer.

    ``offset`` points at the big-endian length prefix; the zlib stream
    follows it and runs to ``offset + length``.
    """

    @property
    def data_offset(self):
        return self.offset + LENGTH_PREFIX_SIZE

    @property
    def data_length(self):
        return self.length - LENGTH_PREFIX_SIZE

    @property
    def pixel_count(self):
        return self.width * self.height


class TagHeader(namedtuple('TagHeader', [
        'tag_class', 'version', 'width', 'height',
        'compressed_length', 'relative_offset'])):

    @property
    def absolute_offset(self):
        return self.relative_offset + PLATE_BASE_OFFSET

    @property
    def color_plate(self):
        return ColorPlateBlock(self.absolute_offset, self.compressed_length,
                               self.width, self.height)


def parse_header(data, path=None):
    """Validate a raw tag buffer and return its TagHeader.

    Nothing is read until the size check has passed, and the color plate
    fields are only trusted once class and version match. A header that
    comes back from here has a block that lies entirely inside ``data``.
    """
    label = path if path is not None else '<buffer>'

    if len(data) < MIN_HEADER_SIZE:
        raise TooSmallError(
            f"{label} is not a valid bitmap tag "
            f"({len(data)} bytes < 0x{MIN_HEADER_SIZE:X})", path)

    tag_class = read_u32_le(data, TAG_CLASS_OFFSET)
    if tag_class != BITMAP_TAG_CLASS:
        raise BadMagicError(
            f"{label} is not a valid bitmap tag (class 0x{tag_class:08X})", path)

    version = read_u16_le(data, TAG_VERSION_OFFSET)
    if version != BITMAP_TAG_VERSION:
        raise BadVersionError(
            f"{label} is not a valid bitmap tag (version {version})", path)

    header = TagHeader(
        tag_class=tag_class,
        version=version,
        width=read_u16_le(data, PLATE_WIDTH_OFFSET),
        height=read_u16_le(data, PLATE_HEIGHT_OFFSET),
        compressed_length=read_u32_le(data, PLATE_LENGTH_OFFSET),
        relative_offset=read_u32_le(data, PLATE_OFFSET_OFFSET),
    )

    length = header.compressed_length
    if length == 0:
        raise NoColorPlateError(f"{label} has no color plate data", path)

    # Python ints do not wrap, so offsets near 2**32 cannot fold back in range
    offset = header.absolute_offset
    if offset + length > len(data) or length < LENGTH_PREFIX_SIZE:
        raise OutOfBoundsError(
            f"{label} is corrupt ({length} + {offset} > {len(data)} || "
            f"{length} < {LENGTH_PREFIX_SIZE})", path)

    return header
