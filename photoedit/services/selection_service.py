from __future__ import annotations
from typing import Tuple
import os
import logging

import cv2
import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.mask import Mask
from ..models.errors import InvalidParameter, OutOfBounds, require_range

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

METRICS = ("channel", "euclidean")


class SelectionService:
    """
    Magic-wand selection.

    •  Edges are found once per call (gray → blur → Canny → dilate) and act
       as hard walls for the fill.
    •  The fill itself is an explicit-stack, 4-connected flood fill so large
       images never hit Python's recursion limit.
    """

    def __init__(self, blur_ksize: int | None = None):
        self.blur_ksize = (blur_ksize if blur_ksize is not None
                           else int(os.getenv("MAGIC_WAND_BLUR_KSIZE", "5")))
        if self.blur_ksize < 1 or self.blur_ksize % 2 == 0:
            raise InvalidParameter(f"MAGIC_WAND_BLUR_KSIZE must be odd and positive, got {self.blur_ksize}")
        logger.debug(f"SelectionService initialized with blur ksize {self.blur_ksize}")

    def edge_map(self, buf: PixelBuffer, edge_threshold: float) -> np.ndarray:
        """
        Returns bool (H, W): True where the fill must stop.
        Hysteresis thresholds are (edge_threshold, 2 * edge_threshold).
        """
        if not edge_threshold > 0:
            raise InvalidParameter(f"edge_threshold must be > 0, got {edge_threshold}")
        gray = cv2.cvtColor(buf.pixels, cv2.COLOR_RGBA2GRAY)
        gray = cv2.GaussianBlur(gray, (self.blur_ksize, self.blur_ksize), 0)
        edges = cv2.Canny(gray, edge_threshold, edge_threshold * 2)
        edges = cv2.dilate(edges, np.ones((3, 3), np.uint8))
        return edges > 0

    @staticmethod
    def color_matches(rgb: np.ndarray, seed_rgb: np.ndarray, tolerance: float, metric: str) -> np.ndarray:
        """bool (H, W): pixels whose colour is within *tolerance* of the seed colour."""
        diff = rgb - seed_rgb
        if metric == "channel":
            return np.all(np.abs(diff) <= tolerance, axis=2)
        if metric == "euclidean":
            return np.sum(diff * diff, axis=2) <= tolerance * tolerance
        raise InvalidParameter(f"metric must be one of {METRICS}, got {metric!r}")

    def select(
        self,
        buf: PixelBuffer,
        seed: Tuple[int, int],
        color_tolerance: float = 32,
        edge_threshold: float = 30,
        metric: str = "channel",
    ) -> Mask:
        """
        Flood fill from *seed* and return the selected region.

        Args:
            buf (PixelBuffer): image to select from
            seed (x, y): start pixel
            color_tolerance (float): 0-255 allowed distance from the seed color
            edge_threshold (float): > 0, lower Canny threshold
            metric (str): "channel" (max per-channel abs diff) or "euclidean"

        Returns:
            Mask: 1 for every visited pixel that matched
        """
        x0, y0 = int(seed[0]), int(seed[1])
        if not (0 <= x0 < buf.width and 0 <= y0 < buf.height):
            raise OutOfBounds(f"Seed {seed} outside {buf.width}x{buf.height} image")
        require_range("color_tolerance", color_tolerance, 0, 255)
        if metric not in METRICS:
            raise InvalidParameter(f"metric must be one of {METRICS}, got {metric!r}")

        edges = self.edge_map(buf, edge_threshold)
        rgb = buf.rgb.astype(np.int32)
        candidates = ~edges & self.color_matches(rgb, rgb[y0, x0], color_tolerance, metric)

        width, height = buf.width, buf.height
        selected = np.zeros((height, width), dtype=np.uint8)
        visited = np.zeros((height, width), dtype=bool)
        stack = [(x0, y0)]

        while stack:
            x, y = stack.pop()
            if visited[y, x]:
                continue
            visited[y, x] = True

            if not candidates[y, x]:
                continue
            selected[y, x] = 1

            if x > 0:
                stack.append((x - 1, y))
            if x < width - 1:
                stack.append((x + 1, y))
            if y > 0:
                stack.append((x, y - 1))
            if y < height - 1:
                stack.append((x, y + 1))

        logger.debug(f"magic wand from {seed} selected {int(selected.sum())} pixels")
        return Mask(width, height, selected)
