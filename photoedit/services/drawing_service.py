from __future__ import annotations
from typing import Sequence, Tuple, Union
import re

import cv2
import numpy as np
from PIL import Image as PILImage, ImageDraw, ImageFont

from ..models.pixel_buffer import PixelBuffer
from ..models.mask import Mask
from ..models.errors import InvalidParameter

Color = Union[str, Tuple[int, int, int]]
Point = Tuple[float, float]

_HEX = re.compile(r"^#?([0-9a-fA-F]{6})$")


def parse_color(color: Color) -> Tuple[int, int, int]:
    """'#rrggbb' or an (r, g, b) tuple → (r, g, b) ints."""
    if isinstance(color, str):
        m = _HEX.match(color.strip())
        if not m:
            raise InvalidParameter(f"Color must look like '#rrggbb', got {color!r}")
        value = m.group(1)
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    if len(color) != 3 or any(not 0 <= int(c) <= 255 for c in color):
        raise InvalidParameter(f"Color must be three values in [0, 255], got {color!r}")
    return tuple(int(c) for c in color)


class DrawingService:
    """Freehand strokes, brush masks and text, rendered into new buffers."""

    @staticmethod
    def _polyline(target: np.ndarray, points: Sequence[Point], value, brush_size: int) -> None:
        if brush_size < 1:
            raise InvalidParameter(f"brush_size must be >= 1, got {brush_size}")
        pts = [(int(round(x)), int(round(y))) for x, y in points]
        if not pts:
            return
        radius = max(brush_size // 2, 0)
        # round caps/joins: a disc at every vertex plus thick segments between them
        for p in pts:
            cv2.circle(target, p, radius, value, thickness=-1)
        for a, b in zip(pts, pts[1:]):
            cv2.line(target, a, b, value, thickness=brush_size)

    def draw_stroke(self, buf: PixelBuffer, points: Sequence[Point],
                    color: Color = "#000000", brush_size: int = 5) -> PixelBuffer:
        r, g, b = parse_color(color)
        canvas = buf.pixels.copy()
        self._polyline(canvas, points, (r, g, b, 255), brush_size)
        return PixelBuffer(buf.width, buf.height, canvas)

    def stroke_mask(self, width: int, height: int, points: Sequence[Point],
                    brush_size: int = 20) -> Mask:
        """Mask covered by a brush dragged through *points* (object-removal brush)."""
        data = np.zeros((height, width), dtype=np.uint8)
        self._polyline(data, points, 1, brush_size)
        return Mask(width, height, data)

    def add_text(self, buf: PixelBuffer, text: str, position: Point = (0, 0),
                 font_size: int = 20, color: Color = "#000000") -> PixelBuffer:
        """
        Render *text* with its baseline starting at *position*.
        Uses Pillow's bundled scalable default font.
        """
        if font_size <= 0:
            raise InvalidParameter(f"font_size must be > 0, got {font_size}")
        r, g, b = parse_color(color)
        pil_obj = PILImage.fromarray(buf.pixels)
        draw = ImageDraw.Draw(pil_obj)
        font = ImageFont.load_default(size=font_size)
        draw.text(position, text, fill=(r, g, b, 255), font=font, anchor="ls")
        return PixelBuffer.from_array(np.asarray(pil_obj))
