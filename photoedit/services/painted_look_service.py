from __future__ import annotations
import math
import os
import logging

import cv2
import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.errors import InvalidParameter, require_range
from .convolution_service import ConvolutionService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class PaintedLookService:
    """
    "Painted" stylisation in three steps:
        1) Sobel edge map of the source
        2) per-channel colour quantisation
        3) round brush dabs on a regular grid, skipping strong edges
    """

    def __init__(self,
                 convolution_service: ConvolutionService | None = None,
                 levels: int | None = None,
                 edge_cutoff: float | None = None):
        self.convolution_service = convolution_service or ConvolutionService()
        self.levels = (levels if levels is not None
                       else int(os.getenv("PAINTED_LOOK_LEVELS", "8")))
        self.edge_cutoff = (edge_cutoff if edge_cutoff is not None
                            else float(os.getenv("PAINTED_LOOK_EDGE_CUTOFF", "50")))
        if self.levels < 2:
            raise InvalidParameter(f"PAINTED_LOOK_LEVELS must be >= 2, got {self.levels}")

    def quantize(self, buf: PixelBuffer, levels: int | None = None) -> PixelBuffer:
        levels = self.levels if levels is None else levels
        if levels < 2:
            raise InvalidParameter(f"levels must be >= 2, got {levels}")
        steps = levels - 1
        rgb = buf.rgb.astype(np.float64)
        return buf.with_rgb(np.rint(rgb / 255 * steps) / steps * 255)

    def _edge_plane(self, buf: PixelBuffer) -> np.ndarray:
        magnitude = np.clip(np.rint(self.convolution_service.edge_magnitude(buf)), 0, 255)
        # the one-pixel frame never counts as an edge
        magnitude[0, :] = magnitude[-1, :] = 0
        magnitude[:, 0] = magnitude[:, -1] = 0
        return magnitude

    def apply(self, buf: PixelBuffer, value: float) -> PixelBuffer:
        """
        Args:
            buf (PixelBuffer): source image
            value (float): 0-100, brush size is max(1, floor(value / 10))

        Returns:
            PixelBuffer: stylised copy
        """
        require_range("painted_look", value, 0, 100)
        brush = max(1, math.floor(value / 10))
        radius = brush // 2

        edges = self._edge_plane(buf)
        quantized = self.quantize(buf)
        if radius == 0:
            # a zero-radius dab repaints a pixel with its own colour
            return quantized

        palette = quantized.pixels
        canvas = palette.copy()
        for y in range(0, buf.height, brush):
            for x in range(0, buf.width, brush):
                if edges[y, x] > self.edge_cutoff:
                    continue
                r, g, b = (int(c) for c in palette[y, x, :3])
                cv2.circle(canvas, (x, y), radius, (r, g, b, 255), thickness=-1)

        logger.debug(f"painted look value={value} brush={brush}")
        return PixelBuffer(buf.width, buf.height, canvas)
