"""Uncompressed RGBA TIFF output via Pillow.

Pillow writes RGBA images as 4 x 8-bit samples with one unassociated
alpha extra sample, RGB photometric and contiguous planar configuration.
Orientation, unsigned sample format and one row per strip are passed in
``tiffinfo``; Pillow only honours a caller's ROWSPERSTRIP from 11.0 on.
"""

from PIL import Image

from colorplate.errors import OutOfMemoryError, WriteError

# TIFF tag numbers
ORIENTATION = 274
ROWSPERSTRIP = 278
SAMPLEFORMAT = 339

ORIENTATION_TOPLEFT = 1
ROWS_PER_STRIP = 1
SAMPLEFORMAT_UINT = 1


def write_rgba_tiff(path, width, height, rows):
    """Write ``height`` RGBA scanlines of ``width`` pixels to ``path``.

    ``rows`` is an iterable of bytes objects, top row first.
    """
    if width == 0 or height == 0:
        raise WriteError(f"{path} could not be opened for writing (empty image)", path)

    stride = width * 4
    tiffinfo = {
        ORIENTATION: ORIENTATION_TOPLEFT,
        ROWSPERSTRIP: ROWS_PER_STRIP,
        SAMPLEFORMAT: (SAMPLEFORMAT_UINT,) * 4,
    }
    try:
        buf = bytearray()
        for y, row in enumerate(rows):
            if len(row) != stride:
                raise WriteError(
                    f"{path} could not be written (row {y} is {len(row)} bytes, expected {stride})", path)
            buf.extend(row)
        if len(buf) != stride * height:
            raise WriteError(
                f"{path} could not be written ({len(buf) // stride} of {height} rows)", path)

        img = Image.frombytes('RGBA', (width, height), bytes(buf))
        del buf
        img.save(path, format='TIFF', compression='raw', tiffinfo=tiffinfo)
    except MemoryError:
        raise OutOfMemoryError(f"{path} could not be written due to not enough memory", path)
    except OSError:
        raise WriteError(f"{path} could not be opened for writing", path)
