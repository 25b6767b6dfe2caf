import numpy as np

from ..models.pixel_buffer import PixelBuffer


class HistogramService:

    @staticmethod
    def histogram(buf: PixelBuffer) -> np.ndarray:
        """
        Returns:
            np.ndarray: 256 counts of round((r+g+b)/3), dtype int64.
        """
        totals = buf.rgb.astype(np.int64).sum(axis=2)
        # (r+g+b)/3 never lands on .5, so integer half-up rounding is exact
        avg = (2 * totals + 3) // 6
        return np.bincount(avg.ravel(), minlength=256)
