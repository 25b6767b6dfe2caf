from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import InvalidParameter


@dataclass
class FilterSettings:
    grayscale: bool = False
    sepia: bool = False
    averaging_filter: float = 0          # box blur strength   [0, 100]
    gaussian_filter: float = 0           # gaussian strength   [0, 100]
    portrait_mode: Optional[float] = None  # depth-of-field     [0, 100]

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> FilterSettings:
        data = data or {}
        portrait = data.get("portraitMode")
        return cls(
            grayscale=bool(data.get("grayscale", False)),
            sepia=bool(data.get("sepia", False)),
            averaging_filter=float(data.get("averagingFilter", 0)),
            gaussian_filter=float(data.get("gaussianFilter", 0)),
            portrait_mode=None if portrait is None else float(portrait),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "grayscale": self.grayscale,
            "sepia": self.sepia,
            "averagingFilter": self.averaging_filter,
            "gaussianFilter": self.gaussian_filter,
        }
        if self.portrait_mode is not None:
            payload["portraitMode"] = self.portrait_mode
        return payload


@dataclass
class AdjustmentSettings:
    # 100 is the neutral slider position for all three
    saturation: float = 100
    contrast: float = 100
    temperature: float = 100

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> AdjustmentSettings:
        data = data or {}
        return cls(
            saturation=float(data.get("saturation", 100)),
            contrast=float(data.get("contrast", 100)),
            temperature=float(data.get("temperature", 100)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "saturation": self.saturation,
            "contrast": self.contrast,
            "temperature": self.temperature,
        }


@dataclass
class EditSettings:
    """
    Flat record persisted by the editor's save/load feature:
    ``{filters, adjustments, paintedLook}``.
    """
    filters: FilterSettings = field(default_factory=FilterSettings)
    adjustments: AdjustmentSettings = field(default_factory=AdjustmentSettings)
    painted_look: float = 0

    @classmethod
    def from_dict(cls, data: Any) -> EditSettings:
        if isinstance(data, EditSettings):
            return data
        if not isinstance(data, dict):
            raise InvalidParameter("Settings must be a dict with filters/adjustments/paintedLook.")
        return cls(
            filters=FilterSettings.from_dict(data.get("filters")),
            adjustments=AdjustmentSettings.from_dict(data.get("adjustments")),
            painted_look=float(data.get("paintedLook", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filters": self.filters.to_dict(),
            "adjustments": self.adjustments.to_dict(),
            "paintedLook": self.painted_look,
        }
