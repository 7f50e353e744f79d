"""Single tag extraction: tag file in, RGBA TIFF out."""

import os
from collections import namedtuple

from colorplate.common.tiff import write_rgba_tiff
from colorplate.decode import decode, scanlines
from colorplate.errors import (
    AlreadyExistsError,
    ColorPlateError,
    DirectoryCreateError,
    OutOfMemoryError,
    ReadError,
    SetupError,
)
from colorplate.tag import parse_header

TAG_EXTENSION = '.bitmap'
IMAGE_EXTENSION = '.tif'

ExtractionOutcome = namedtuple('ExtractionOutcome', 'tag_path success message')


def read_tag(path):
    """Load a whole tag file into memory."""
    try:
        with open(path, 'rb') as f:
            return f.read()
    except MemoryError:
        raise OutOfMemoryError(f"{path} could not be read due to not enough memory", path)
    except OSError as e:
        raise ReadError(f"{path} could not be read ({e.strerror or e})", path)


def extract(tag_path, destination_path, context, overwrite=False):
    """Extract the color plate of ``tag_path`` to ``destination_path``.

    Raises a ColorPlateError subclass on any failure. Bumps the context's
    extracted counter once the image has been completely written.
    """
    if not overwrite and os.path.exists(destination_path):
        raise AlreadyExistsError(f"{destination_path} already exists", destination_path)

    data = read_tag(tag_path)
    header = parse_header(data, tag_path)
    pixels = decode(data, header.color_plate, tag_path)
    del data

    parent = os.path.dirname(destination_path)
    if parent:
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError:
            raise DirectoryCreateError(f"Directory {parent} could not be made", parent)

    write_rgba_tiff(destination_path, header.width, header.height,
                    scanlines(pixels, header.width, header.height))

    context.extracted.increment()


def normalize_tag_path(tag_path):
    """Accept tag paths written with either separator."""
    return tag_path.replace('\\', os.sep)


def destination_for(data_root, tag_path):
    base, _ = os.path.splitext(os.path.join(data_root, tag_path))
    return base + IMAGE_EXTENSION


def dump_tag(tags_root, data_root, tag_path, context, overwrite=False):
    """Extract one tag given its path relative to ``tags_root``.

    Failures are reported through the context console and returned as an
    unsuccessful ExtractionOutcome rather than raised.
    """
    console = context.console
    try:
        rel_path = normalize_tag_path(tag_path)
        if os.path.splitext(rel_path)[1] != TAG_EXTENSION:
            raise SetupError(f"{rel_path} does not end with {TAG_EXTENSION}", rel_path)

        tag_file = os.path.join(tags_root, rel_path)
        if not os.path.exists(tag_file):
            raise SetupError(f"{tag_file} does not exist", tag_file)

        extract(tag_file, destination_for(data_root, rel_path), context, overwrite)
    except ColorPlateError as e:
        console.error(str(e))
        return ExtractionOutcome(tag_path, False, str(e))

    message = f"Extracted {tag_path}"
    console.info(message)
    return ExtractionOutcome(tag_path, True, message)
