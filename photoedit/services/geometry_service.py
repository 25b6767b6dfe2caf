import cv2
import numpy as np

from ..models.pixel_buffer import PixelBuffer
from ..models.errors import InvalidParameter


class GeometryService:
    """Rotate / flip / resize. Pixel values are moved, never re-sampled."""

    _ROTATIONS = {
        "cw": cv2.ROTATE_90_CLOCKWISE,
        "ccw": cv2.ROTATE_90_COUNTERCLOCKWISE,
    }
    _FLIPS = {
        "horizontal": 1,
        "vertical": 0,
    }

    def rotate(self, buf: PixelBuffer, direction: str = "cw") -> PixelBuffer:
        if direction not in self._ROTATIONS:
            raise InvalidParameter(f"direction must be 'cw' or 'ccw', got {direction!r}")
        return PixelBuffer.from_array(cv2.rotate(buf.pixels, self._ROTATIONS[direction]))

    def flip(self, buf: PixelBuffer, axis: str = "horizontal") -> PixelBuffer:
        if axis not in self._FLIPS:
            raise InvalidParameter(f"axis must be 'horizontal' or 'vertical', got {axis!r}")
        return PixelBuffer.from_array(cv2.flip(buf.pixels, self._FLIPS[axis]))

    def resize(self, buf: PixelBuffer, width: int, height: int) -> PixelBuffer:
        """Nearest neighbour: destination (x, y) samples floor(x*sx), floor(y*sy)."""
        if width <= 0 or height <= 0:
            raise InvalidParameter(f"Target size must be positive, got {width}x{height}")
        src_x = np.floor(np.arange(width) * (buf.width / width)).astype(np.intp)
        src_y = np.floor(np.arange(height) * (buf.height / height)).astype(np.intp)
        return PixelBuffer.from_array(buf.pixels[src_y[:, np.newaxis], src_x[np.newaxis, :]])
