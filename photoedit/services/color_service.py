import numpy as np

from ..models.pixel_buffer import PixelBuffer
from ..models.errors import InvalidParameter, require_range


_SEPIA = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])

# ITU-R BT.601
_LUMA = np.array([0.2989, 0.5870, 0.1140])


class ColorService:
    """
    Per-pixel, position-independent color transforms.
    *   Works only with PixelBuffer objects; no I/O.
    *   Alpha and dimensions are always preserved.
    """

    @staticmethod
    def _rgb(buf: PixelBuffer) -> np.ndarray:
        return buf.rgb.astype(np.float64)

    def grayscale(self, buf: PixelBuffer) -> PixelBuffer:
        rgb = self._rgb(buf)
        avg = rgb.sum(axis=2, keepdims=True) / 3
        return buf.with_rgb(np.repeat(avg, 3, axis=2))

    def sepia(self, buf: PixelBuffer) -> PixelBuffer:
        return buf.with_rgb(self._rgb(buf) @ _SEPIA.T)

    def saturation(self, buf: PixelBuffer, value: float) -> PixelBuffer:
        """
        Args:
            value: 0 (fully desaturated) … 100 (identity) … 200 (doubled).
        """
        require_range("saturation", value, 0, 200)
        factor = value / 100
        rgb = self._rgb(buf)
        luma = (rgb @ _LUMA)[:, :, np.newaxis]
        return buf.with_rgb(luma + factor * (rgb - luma))

    def contrast(self, buf: PixelBuffer, value: float) -> PixelBuffer:
        """
        Classic 259/255 contrast curve driven by a 0-200 slider.
        The slider is centred on 100, so ``value=100`` is the identity.
        """
        require_range("contrast", value, 0, 200)
        level = value - 100
        denominator = 255 * (259 - level)
        if denominator == 0:
            raise InvalidParameter(f"contrast level {level} makes the contrast factor undefined")
        factor = 259 * (level + 255) / denominator
        return buf.with_rgb(factor * (self._rgb(buf) - 128) + 128)

    def temperature(self, buf: PixelBuffer, value: float) -> PixelBuffer:
        """Warm (> 100) pushes red up and blue down; cool (< 100) does the opposite."""
        require_range("temperature", value, 0, 200)
        shift = (value - 100) / 100 * 30
        rgb = self._rgb(buf)
        rgb[:, :, 0] += shift
        rgb[:, :, 2] -= shift
        return buf.with_rgb(rgb)

    def invert(self, buf: PixelBuffer) -> PixelBuffer:
        out = buf.pixels.copy()
        out[:, :, :3] = 255 - out[:, :, :3]
        return PixelBuffer(buf.width, buf.height, out)

    def luma(self, buf: PixelBuffer) -> np.ndarray:
        """Float (r+g+b)/3 plane, shared by the edge and stitching code."""
        return self._rgb(buf).sum(axis=2) / 3
