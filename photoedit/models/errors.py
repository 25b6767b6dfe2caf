class PhotoEditError(Exception):
    """Base class for every failure raised by the photoedit core."""


class InvalidParameter(PhotoEditError, ValueError):
    """A numeric parameter is outside its documented domain."""


class DimensionMismatch(PhotoEditError, ValueError):
    """Buffer or mask size is inconsistent with its declared width/height."""


class OutOfBounds(PhotoEditError, IndexError):
    """A seed or coordinate lies outside the image."""


class InsufficientImages(PhotoEditError, ValueError):
    """Panorama stitching was asked to work on fewer than two images."""


def require_range(name: str, value: float, low: float, high: float) -> float:
    """Raise InvalidParameter unless low <= value <= high."""
    if not low <= value <= high:
        raise InvalidParameter(f"{name} must be in [{low}, {high}], got {value}")
    return value
