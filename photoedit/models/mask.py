from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np

from .errors import DimensionMismatch


@dataclass
class Mask:
    """
    Per-pixel selection: 1 = selected, 0 = not selected.
    Shape (H, W), dtype uint8.
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        data = np.asarray(self.data)
        if data.ndim == 1:
            if data.size != self.width * self.height:
                raise DimensionMismatch(
                    f"Expected {self.width * self.height} mask entries, got {data.size}"
                )
            data = data.reshape(self.height, self.width)
        if data.shape != (self.height, self.width):
            raise DimensionMismatch(
                f"Mask shape {data.shape} does not match {self.width}x{self.height}"
            )
        self.data = (data != 0).astype(np.uint8)

    @classmethod
    def empty(cls, width: int, height: int) -> Mask:
        return cls(width, height, np.zeros((height, width), dtype=np.uint8))

    @classmethod
    def full(cls, width: int, height: int) -> Mask:
        return cls(width, height, np.ones((height, width), dtype=np.uint8))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes | Sequence[int]) -> Mask:
        return cls(width, height, np.array(bytearray(data), dtype=np.uint8))

    @classmethod
    def from_alpha(cls, rgba: np.ndarray) -> Mask:
        """Brush overlays mark selected pixels with any non-zero alpha."""
        rgba = np.asarray(rgba)
        return cls(rgba.shape[1], rgba.shape[0], rgba[:, :, 3] > 0)

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def as_bool(self) -> np.ndarray:
        return self.data.astype(bool)

    def count(self) -> int:
        return int(self.data.sum())

    def check_matches(self, width: int, height: int) -> None:
        if (self.width, self.height) != (width, height):
            raise DimensionMismatch(
                f"Mask is {self.width}x{self.height} but image is {width}x{height}"
            )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mask):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and np.array_equal(self.data, other.data))
