"""Color plate extractor for bitmap tag files.

Recovers the compressed source artwork ("color plate") embedded in
``.bitmap`` tags and writes it out as uncompressed RGBA TIFF images.
"""

__version__ = '1.0.0'
