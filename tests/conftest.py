import struct
import zlib

import pytest

BITM = 0x6269746D  # 'bitm'
HEADER_SIZE = 0x100
BLOCK_RELATIVE_OFFSET = HEADER_SIZE - 0x50

SAMPLE_PIXELS = [0xAABBCCDD, 0x11223344, 0x55667788, 0x99AABBCC]


def build_tag(pixels=SAMPLE_PIXELS, width=2, height=2, tag_class=BITM, version=7,
              declared=None, stream=None, length=None, relative_offset=BLOCK_RELATIVE_OFFSET,
              size=None):
    """Build a bitmap tag whose color plate sits right after the header."""
    raw = struct.pack('<%dI' % len(pixels), *pixels)
    if stream is None:
        stream = zlib.compress(raw)
    if declared is None:
        declared = len(raw)
    block = struct.pack('>I', declared) + stream
    if length is None:
        length = len(block)

    buf = bytearray(HEADER_SIZE)
    struct.pack_into('<I', buf, 0x24, tag_class)
    struct.pack_into('<H', buf, 0x38, version)
    struct.pack_into('<I', buf, 0x4C, relative_offset)
    struct.pack_into('<H', buf, 0x68, width)
    struct.pack_into('<H', buf, 0x6A, height)
    struct.pack_into('<I', buf, 0x6C, length)
    buf += block
    if size is not None:
        del buf[size:]
    return bytes(buf)


@pytest.fixture
def make_tag():
    return build_tag


@pytest.fixture
def write_tag(tmp_path):
    """Write a tag under tmp_path/tags and return its relative path."""
    def _write(rel_path, data=None, **kwargs):
        if data is None:
            data = build_tag(**kwargs)
        path = tmp_path / 'tags' / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return rel_path
    (tmp_path / 'tags').mkdir(exist_ok=True)
    (tmp_path / 'data').mkdir(exist_ok=True)
    return _write
