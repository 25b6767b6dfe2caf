from .errors import (
    PhotoEditError,
    InvalidParameter,
    DimensionMismatch,
    OutOfBounds,
    InsufficientImages,
)
from .pixel_buffer import PixelBuffer
from .mask import Mask
from .kernel import Kernel
from .feature_point import FeaturePoint
from .edit_settings import EditSettings, FilterSettings, AdjustmentSettings

__all__ = [
    "PhotoEditError",
    "InvalidParameter",
    "DimensionMismatch",
    "OutOfBounds",
    "InsufficientImages",
    "PixelBuffer",
    "Mask",
    "Kernel",
    "FeaturePoint",
    "EditSettings",
    "FilterSettings",
    "AdjustmentSettings",
]
