from __future__ import annotations
from typing import List, Sequence, Tuple
import math
import os
import logging

import numpy as np
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.feature_point import FeaturePoint
from ..models.errors import InsufficientImages
from .color_service import ColorService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

Match = Tuple[FeaturePoint, FeaturePoint]  # (canvas feature, image feature)


class PanoramaService:
    """
    Naive panorama stitcher.

    For each new image: detect high-gradient "features" in the canvas and the
    image, pair every image feature with its nearest canvas feature, take the
    mean displacement as the placement offset, grow the canvas and paste the
    image on top (later image wins, no blending). No homography: misaligned
    results are expected on real photos.
    """

    def __init__(self,
                 color_service: ColorService | None = None,
                 feature_threshold: float | None = None,
                 max_match_distance: float | None = None):
        self.color_service = color_service or ColorService()
        self.feature_threshold = (feature_threshold if feature_threshold is not None
                                  else float(os.getenv("PANORAMA_FEATURE_THRESHOLD", "10")))
        self.max_match_distance = (max_match_distance if max_match_distance is not None
                                   else float(os.getenv("PANORAMA_MAX_MATCH_DISTANCE", "10")))
        logger.debug(
            f"PanoramaService initialized: feature threshold {self.feature_threshold}, "
            f"max match distance {self.max_match_distance}"
        )

    # ─── Feature detection / matching ─────────────────────────────
    def detect_features(self, gray: np.ndarray) -> List[FeaturePoint]:
        """
        Interior pixels whose horizontal AND vertical central differences
        both exceed the threshold. Row-major order.
        """
        if gray.shape[0] < 3 or gray.shape[1] < 3:
            return []
        dx = np.abs(gray[1:-1, :-2] - gray[1:-1, 2:])
        dy = np.abs(gray[:-2, 1:-1] - gray[2:, 1:-1])
        ys, xs = np.nonzero((dx > self.feature_threshold) & (dy > self.feature_threshold))
        return [FeaturePoint(int(x) + 1, int(y) + 1) for y, x in zip(ys, xs)]

    def match_features(self,
                       canvas_features: Sequence[FeaturePoint],
                       image_features: Sequence[FeaturePoint]) -> List[Match]:
        """
        Nearest canvas feature for every image feature, kept when closer than
        max_match_distance. A canvas feature may be claimed more than once;
        on a distance tie the earlier canvas feature wins.

        Canvas features are rasterised into an index grid so each image
        feature only looks at the window within max_match_distance.
        """
        limit = self.max_match_distance
        if not canvas_features or not image_features or not limit > 0:
            return []

        canvas = np.asarray(canvas_features, dtype=np.int64)
        points = np.asarray(image_features, dtype=np.int64)
        min_x, min_y = canvas.min(axis=0)
        grid_w, grid_h = canvas.max(axis=0) - (min_x, min_y) + 1

        # -1 = no feature; reversed so the first of any duplicates is kept
        grid = np.full((grid_h, grid_w), -1, dtype=np.int64)
        order = np.arange(len(canvas))[::-1]
        grid[canvas[order, 1] - min_y, canvas[order, 0] - min_x] = order

        best_d2 = np.full(len(points), np.inf)
        best_idx = np.full(len(points), -1, dtype=np.int64)
        reach = math.ceil(limit)
        for dy in range(-reach, reach + 1):
            for dx in range(-reach, reach + 1):
                d2 = dx * dx + dy * dy
                if d2 >= limit * limit:
                    continue
                gx = points[:, 0] + dx - min_x
                gy = points[:, 1] + dy - min_y
                inside = (gx >= 0) & (gx < grid_w) & (gy >= 0) & (gy < grid_h)
                candidate = np.full(len(points), -1, dtype=np.int64)
                candidate[inside] = grid[gy[inside], gx[inside]]
                better = (candidate >= 0) & (
                    (d2 < best_d2) | ((d2 == best_d2) & (candidate < best_idx))
                )
                best_d2[better] = d2
                best_idx[better] = candidate[better]

        return [(canvas_features[c], image_features[q])
                for q, c in enumerate(best_idx.tolist()) if c >= 0]

    @staticmethod
    def compute_offset(matches: Sequence[Match]) -> Tuple[int, int]:
        """Mean (canvas - image) displacement, rounded half-up; (0, 0) without matches."""
        if not matches:
            return 0, 0
        sum_x = sum(c.x - i.x for c, i in matches)
        sum_y = sum(c.y - i.y for c, i in matches)
        return math.floor(sum_x / len(matches) + 0.5), math.floor(sum_y / len(matches) + 0.5)

    # ─── Composition ──────────────────────────────────────────────
    @staticmethod
    def place(canvas: np.ndarray, image: np.ndarray, offset: Tuple[int, int]) -> np.ndarray:
        """
        Paste *image* at *offset* relative to the canvas origin, growing the
        canvas in any direction so the image fits. Returns a new array.
        """
        off_x, off_y = offset
        ch, cw = canvas.shape[:2]
        ih, iw = image.shape[:2]

        left, top = min(0, off_x), min(0, off_y)
        right, bottom = max(cw, off_x + iw), max(ch, off_y + ih)

        out = np.zeros((bottom - top, right - left, 4), dtype=np.uint8)
        cx, cy = -left, -top
        out[cy:cy + ch, cx:cx + cw] = canvas
        ix, iy = off_x - left, off_y - top
        out[iy:iy + ih, ix:ix + iw] = image
        return out

    def stitch(self, images: Sequence[PixelBuffer]) -> PixelBuffer:
        """
        Args:
            images: ordered PixelBuffers, at least two

        Returns:
            PixelBuffer: composited panorama
        """
        if len(images) < 2:
            raise InsufficientImages(
                f"At least two images are required for panorama stitching, got {len(images)}"
            )

        canvas = images[0].copy()
        for index, image in enumerate(images[1:], start=1):
            canvas_features = self.detect_features(self.color_service.luma(canvas))
            image_features = self.detect_features(self.color_service.luma(image))
            matches = self.match_features(canvas_features, image_features)
            offset = self.compute_offset(matches)
            logger.info(
                f"image {index}: {len(image_features)} features, "
                f"{len(matches)} matches → offset {offset}"
            )
            canvas = PixelBuffer.from_array(self.place(canvas.pixels, image.pixels, offset))

        logger.info(f"panorama complete: {canvas.width}x{canvas.height} from {len(images)} images")
        return canvas
