from __future__ import annotations
from typing import Tuple
import math
import os
import logging

import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.kernel import Kernel
from ..models.errors import OutOfBounds, require_range
from .convolution_service import ConvolutionService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class DepthOfFieldService:
    """
    Portrait mode: keep a disc around the focal point sharp and blend in a
    box-blurred copy that grows with distance (normalised distance ** 5).
    """

    def __init__(self,
                 convolution_service: ConvolutionService | None = None,
                 sharp_radius: float | None = None):
        self.convolution_service = convolution_service or ConvolutionService()
        # fraction of the image diagonal that stays untouched
        self.sharp_radius = (sharp_radius if sharp_radius is not None
                             else float(os.getenv("PORTRAIT_SHARP_RADIUS", "0.1")))
        logger.debug(f"DepthOfFieldService initialized with sharp radius {self.sharp_radius}")

    def blur_amount(self, buf: PixelBuffer, strength: float,
                    focal: Tuple[float, float]) -> np.ndarray:
        """
        Per-pixel blend weight, shape (H, W). Zero inside the sharp disc.
        Deliberately unclamped: far corners at high strength go above 1.
        """
        max_distance = math.sqrt(buf.width ** 2 + buf.height ** 2)
        ys, xs = np.mgrid[0:buf.height, 0:buf.width]
        distance = np.sqrt((xs - focal[0]) ** 2 + (ys - focal[1]) ** 2)
        amount = (distance / max_distance) ** 5 * strength
        amount[distance < self.sharp_radius * max_distance] = 0.0
        return amount

    def apply(self, buf: PixelBuffer, strength: float,
              focal: Tuple[float, float] | None = None) -> PixelBuffer:
        """
        Args:
            buf (PixelBuffer): source image
            strength (float): 0-100; also the strength of the blurred layer
            focal (x, y): in-focus point, defaults to the image centre

        Returns:
            PixelBuffer: blended copy, alpha untouched
        """
        size = Kernel.size_for(strength)
        if focal is None:
            focal = (buf.width / 2, buf.height / 2)
        if not (0 <= focal[0] <= buf.width and 0 <= focal[1] <= buf.height):
            raise OutOfBounds(f"Focal point {focal} outside {buf.width}x{buf.height} image")
        if strength == 0:
            return buf.copy()

        amount = self.blur_amount(buf, strength, focal)[:, :, np.newaxis]
        sharp = buf.rgb.astype(np.float64)
        blurred = self.convolution_service.local_average(buf, size)
        logger.debug(f"portrait mode strength={strength} focal={focal} max blend={float(amount.max()):.3f}")
        return buf.with_rgb(sharp * (1 - amount) + blurred * amount)
