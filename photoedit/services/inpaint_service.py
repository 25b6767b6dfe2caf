from __future__ import annotations
import os
import logging

import cv2
import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.mask import Mask
from ..models.errors import InvalidParameter

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class InpaintService:
    """
    Object removal by neighbourhood averaging.

    Every masked pixel becomes the mean colour of the *unmasked* pixels in a
    square window around it. Single pass: holes much wider than the window
    stay partially unfilled or smeared.
    """

    def __init__(self, min_radius: int | None = None):
        self.min_radius = (min_radius if min_radius is not None
                           else int(os.getenv("INPAINT_MIN_RADIUS", "20")))
        logger.debug(f"InpaintService initialized with min radius {self.min_radius}")

    def fill(self, buf: PixelBuffer, mask: Mask, radius: int = 20) -> PixelBuffer:
        """
        Args:
            buf (PixelBuffer): image with the object to remove
            mask (Mask): 1 where pixels must be replaced
            radius (int): >= 1; the window half-width is max(radius, min_radius)

        Returns:
            PixelBuffer: filled copy. Masked pixels with no unmasked
            neighbour in range are passed through unchanged.
        """
        if radius < 1:
            raise InvalidParameter(f"radius must be >= 1, got {radius}")
        mask.check_matches(buf.width, buf.height)

        half = max(int(radius), self.min_radius)
        size = 2 * half + 1
        masked = mask.as_bool()
        known = (~masked).astype(np.float64)

        rgb = buf.rgb.astype(np.float64)
        sums = cv2.boxFilter(rgb * known[:, :, np.newaxis], cv2.CV_64F, (size, size),
                             normalize=False, borderType=cv2.BORDER_CONSTANT)
        counts = cv2.boxFilter(known, cv2.CV_64F, (size, size),
                               normalize=False, borderType=cv2.BORDER_CONSTANT)

        # boxFilter sums in floating point; counts are integral
        counts = np.rint(counts)
        fillable = masked & (counts > 0)
        logger.debug(f"inpaint: {int(masked.sum())} masked, {int(fillable.sum())} fillable, window {size}x{size}")

        out_rgb = rgb.copy()
        out_rgb[fillable] = sums[fillable] / counts[fillable][:, np.newaxis]
        return buf.with_rgb(out_rgb)
