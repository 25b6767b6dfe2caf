from __future__ import annotations
from typing import Tuple

import numpy as np

from ..models.pixel_buffer import PixelBuffer
from ..models.errors import require_range


class LocalEditService:
    """Radial brush that brightens (intensity > 0) or darkens (< 0) around a point."""

    def local_adjust(self, buf: PixelBuffer, center: Tuple[float, float],
                     brush_size: float = 20, intensity: float = 0) -> PixelBuffer:
        require_range("brush_size", brush_size, 1, 100)
        require_range("intensity", intensity, -255, 255)

        ys, xs = np.mgrid[0:buf.height, 0:buf.width]
        distance = np.sqrt((xs - center[0]) ** 2 + (ys - center[1]) ** 2)
        falloff = np.where(distance < brush_size, 1 - distance / brush_size, 0.0)

        rgb = buf.rgb.astype(np.float64) + (intensity * falloff)[:, :, np.newaxis]
        return buf.with_rgb(rgb)
