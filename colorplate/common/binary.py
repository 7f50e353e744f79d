"""Bounds-checked field readers for raw tag buffers."""

import struct

from colorplate.errors import OutOfBoundsError


def _read(fmt, data, offset):
    size = struct.calcsize(fmt)
    if offset < 0 or offset + size > len(data):
        raise OutOfBoundsError(
            f"read of {size} bytes at 0x{offset:X} is outside a {len(data)} byte buffer")
    return struct.unpack_from(fmt, data, offset)[0]


def read_u16_le(data, offset=0):
    return _read('<H', data, offset)


def read_u32_le(data, offset=0):
    return _read('<I', data, offset)


def read_u32_be(data, offset=0):
    return _read('>I', data, offset)


def fourcc(text):
    """Pack a 4 character tag class like ``'bitm'`` the way it is stored.

    Tag class identifiers are written as a big-endian 32-bit constant, so
    the first character is the most significant byte of the value read
    back with :func:`read_u32_le`.
    """
    return struct.unpack('>I', text.encode('ascii'))[0]
