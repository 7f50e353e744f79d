"""Exceptions raised while extracting color plates.

Every error carries a one-line message that already names the offending
path, so callers can print ``str(e)`` as-is.
"""


class ColorPlateError(Exception):
    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class SetupError(ColorPlateError):
    """The requested tag path is unusable (wrong extension or missing file)."""


class AlreadyExistsError(ColorPlateError):
    """Destination image exists and overwriting was not requested."""


# -- Validation errors (bad tag contents) --

class TagValidationError(ColorPlateError):
    pass


class TooSmallError(TagValidationError):
    pass


class BadMagicError(TagValidationError):
    pass


class BadVersionError(TagValidationError):
    pass


class NoColorPlateError(TagValidationError):
    """The tag is valid but carries no embedded artwork."""


class OutOfBoundsError(TagValidationError):
    pass


class SizeMismatchError(TagValidationError):
    pass


class DecompressionError(TagValidationError):
    pass


# -- Resource errors (filesystem / memory) --

class ResourceError(ColorPlateError):
    pass


class OutOfMemoryError(ResourceError):
    pass


class ReadError(ResourceError):
    pass


class DirectoryCreateError(ResourceError):
    pass


class WriteError(ResourceError):
    pass
