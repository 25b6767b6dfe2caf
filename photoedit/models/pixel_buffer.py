from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np

from .errors import DimensionMismatch


@dataclass
class PixelBuffer:
    """
    Simple data object: row-major RGBA8 pixels.
    Every core operation returns a *new* PixelBuffer; inputs are never mutated.
    """
    width: int
    height: int
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise DimensionMismatch(f"Invalid buffer size {self.width}x{self.height}")
        pixels = np.asarray(self.pixels)
        if pixels.ndim == 1:
            if pixels.size != self.width * self.height * 4:
                raise DimensionMismatch(
                    f"Expected {self.width * self.height * 4} bytes for "
                    f"{self.width}x{self.height} RGBA, got {pixels.size}"
                )
            pixels = pixels.reshape(self.height, self.width, 4)
        if pixels.shape != (self.height, self.width, 4):
            raise DimensionMismatch(
                f"Pixel array shape {pixels.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )
        self.pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    # ── Constructors ─────────────────────────────────────────────────
    @classmethod
    def from_array(cls, pixels: np.ndarray) -> PixelBuffer:
        """Wrap an (H, W, 4) uint8 array. The array is copied."""
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise DimensionMismatch(f"Expected an (H, W, 4) array, got {pixels.shape}")
        return cls(width=pixels.shape[1], height=pixels.shape[0], pixels=pixels.copy())

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes | Sequence[int]) -> PixelBuffer:
        return cls(width=width, height=height,
                   pixels=np.array(bytearray(data), dtype=np.uint8))

    @classmethod
    def filled(cls, width: int, height: int, rgba: Sequence[int]) -> PixelBuffer:
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = rgba
        return cls(width=width, height=height, pixels=pixels)

    # ── Views ────────────────────────────────────────────────────────
    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def with_rgb(self, rgb: np.ndarray) -> PixelBuffer:
        """
        Return a new buffer carrying *rgb* (float or int, any range) and this
        buffer's alpha. Values are rounded half-to-even and clamped to [0, 255].
        """
        out = self.pixels.copy()
        out[:, :, :3] = to_uint8(rgb)
        return PixelBuffer(self.width, self.height, out)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and np.array_equal(self.pixels, other.pixels))

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round then clamp channel math back into uint8."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)
