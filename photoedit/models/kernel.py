from __future__ import annotations
from dataclasses import dataclass
import math
import numpy as np

from .errors import require_range


@dataclass(frozen=True)
class Kernel:
    """
    Immutable square weight matrix with an odd side length.
    Built fresh from a 0-100 "strength" slider value on every call.
    """
    weights: np.ndarray

    def __post_init__(self):
        w = np.array(self.weights, dtype=np.float64)
        if w.ndim != 2 or w.shape[0] != w.shape[1] or w.shape[0] % 2 == 0:
            raise ValueError(f"Kernel must be square with odd side, got {w.shape}")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def half(self) -> int:
        return self.size // 2

    # ── Factories ────────────────────────────────────────────────────
    @staticmethod
    def size_for(strength: float) -> int:
        require_range("strength", strength, 0, 100)
        return 2 * math.floor(strength / 10) + 1

    @classmethod
    def gaussian(cls, strength: float) -> Kernel:
        size = cls.size_for(strength)
        if size == 1:
            return cls(np.ones((1, 1), dtype=np.float64))
        sigma = strength / 10
        half = size // 2
        y, x = np.mgrid[-half:half + 1, -half:half + 1]
        weights = np.exp(-(x * x + y * y) / (2 * sigma * sigma)) / (2 * math.pi * sigma * sigma)
        return cls(weights / weights.sum())
