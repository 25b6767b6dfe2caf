from __future__ import annotations
import logging

import cv2
import numpy as np

from ..models.pixel_buffer import PixelBuffer
from ..models.kernel import Kernel
from .color_service import ColorService

logger = logging.getLogger(__name__)


class ConvolutionService:
    """
    Neighbourhood filters on PixelBuffer objects.

    Out-of-bounds neighbours are *skipped*, never padded or wrapped:
      • box blur divides by the number of in-bounds samples
      • gaussian blur does NOT renormalise, so borders darken slightly
    """

    def __init__(self, color_service: ColorService | None = None):
        self.color_service = color_service or ColorService()

    # ── helpers ──────────────────────────────────────────────────────
    @staticmethod
    def _window_sum(plane: np.ndarray, kernel: Kernel) -> np.ndarray:
        """Weighted sum over the kernel window; outside pixels contribute 0."""
        return cv2.filter2D(plane, cv2.CV_64F, kernel.weights,
                            borderType=cv2.BORDER_CONSTANT)

    @staticmethod
    def _window_count(height: int, width: int, size: int) -> np.ndarray:
        ones = np.ones((height, width), dtype=np.float64)
        return cv2.boxFilter(ones, cv2.CV_64F, (size, size), normalize=False,
                             borderType=cv2.BORDER_CONSTANT)

    def local_average(self, buf: PixelBuffer, size: int) -> np.ndarray:
        """
        Float RGB mean over a size×size window clipped to the image.
        Shared by box blur and the portrait-mode blend.
        """
        rgb = buf.rgb.astype(np.float64)
        if size == 1:
            return rgb
        sums = cv2.boxFilter(rgb, cv2.CV_64F, (size, size), normalize=False,
                             borderType=cv2.BORDER_CONSTANT)
        counts = self._window_count(buf.height, buf.width, size)
        return sums / counts[:, :, np.newaxis]

    # ── Public API ───────────────────────────────────────────────────
    def box_blur(self, buf: PixelBuffer, strength: float) -> PixelBuffer:
        """
        Averaging filter.

        Args:
            buf (PixelBuffer): source image
            strength (float): 0-100; kernel side is 2*floor(strength/10)+1

        Returns:
            PixelBuffer: blurred copy (alpha untouched)
        """
        size = Kernel.size_for(strength)
        if size == 1:
            return buf.copy()
        logger.debug(f"box blur {buf.width}x{buf.height} with {size}x{size} window")
        return buf.with_rgb(self.local_average(buf, size))

    def gaussian_blur(self, buf: PixelBuffer, strength: float) -> PixelBuffer:
        """Gaussian filter, sigma = strength/10, same kernel-size rule as box blur."""
        kernel = Kernel.gaussian(strength)
        if kernel.size == 1:
            return buf.copy()
        logger.debug(f"gaussian blur {buf.width}x{buf.height} with {kernel.size}x{kernel.size} kernel")
        rgb = buf.rgb.astype(np.float64)
        blurred = np.dstack([self._window_sum(np.ascontiguousarray(rgb[:, :, c]), kernel)
                             for c in range(3)])
        return buf.with_rgb(blurred)

    def edge_magnitude(self, buf: PixelBuffer) -> np.ndarray:
        """Sobel gradient magnitude of the (r+g+b)/3 plane, float, full size."""
        gray = self.color_service.luma(buf)
        gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
        gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)
        return np.sqrt(gx * gx + gy * gy)

    def sobel_edges(self, buf: PixelBuffer) -> PixelBuffer:
        """
        Edge map written to r,g,b with alpha 255.
        The one-pixel border is left exactly as in the input.
        """
        out = buf.pixels.copy()
        if buf.width < 3 or buf.height < 3:
            return PixelBuffer(buf.width, buf.height, out)

        magnitude = np.clip(np.rint(self.edge_magnitude(buf)), 0, 255).astype(np.uint8)
        inner = out[1:-1, 1:-1]
        inner[:, :, :3] = magnitude[1:-1, 1:-1, np.newaxis]
        inner[:, :, 3] = 255
        return PixelBuffer(buf.width, buf.height, out)
