from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, Iterator, Tuple
import os
import logging

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..models.mask import Mask

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


class ImageRepository:
    """
    Handles file I/O for PixelBuffer entities.
    The processing services never touch the filesystem; everything goes through here.
    """
    def __init__(self):
        raw = os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg,.gif,.bmp,.webp")
        self.VALID_EXTS = {ext.strip().lower() for ext in raw.split(",") if ext.strip()}

    @staticmethod
    def to_buffer(arr: np.ndarray) -> PixelBuffer:
        """Any cv2-decoded array (gray, BGR, BGRA) → RGBA PixelBuffer."""
        if arr.dtype != np.uint8:
            # 16-bit PNG/TIFF
            arr = (arr / 257).astype(np.uint8) if arr.dtype == np.uint16 else arr.astype(np.uint8)
        channels = 1 if arr.ndim == 2 else arr.shape[2]
        if channels not in _TO_RGBA:
            raise ValueError(f"Unsupported channel count: {channels}")
        return PixelBuffer.from_array(cv2.cvtColor(arr, _TO_RGBA[channels]))

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            # cv2 cannot decode GIFs; fall back to PIL for anything it rejects
            try:
                with PILImage.open(path) as pil_obj:
                    return PixelBuffer.from_array(np.asarray(pil_obj.convert("RGBA")))
            except (FileNotFoundError, OSError) as err:
                raise FileNotFoundError(f"Image not found or unreadable: {path}") from err
        return self.to_buffer(arr)

    @staticmethod
    def save(buffer: PixelBuffer, path: Union[str, Path]) -> Path:
        """
        Encode through PIL; format follows the suffix. JPEG drops alpha.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        pil_obj = PILImage.fromarray(buffer.pixels)
        if path.suffix.lower() in {".jpg", ".jpeg"}:
            pil_obj = pil_obj.convert("RGB")
        pil_obj.save(path)
        return path

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Tuple[Path, PixelBuffer]]:
        """
        Yield (path, PixelBuffer) one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed or not p.is_file():
                logger.debug(f"Skipping {p}")
                continue
            try:
                yield p, self.load(p)
            except (FileNotFoundError, ValueError) as err:
                logger.warning(f"Skipping {p.name}: {err}")

    # ─── Masks ────────────────────────────────────────────────────────
    @staticmethod
    def save_mask(mask: Mask, path: Union[str, Path]) -> Path:
        """Masks are stored as 8-bit grayscale PNGs: 255 selected, 0 not."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(mask.data * 255).save(path)
        return path

    @staticmethod
    def load_mask(path: Union[str, Path]) -> Mask:
        """
        Grayscale files: any non-zero value is selected.
        Files with alpha are treated as brush overlays: alpha > 0 is selected.
        """
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise FileNotFoundError(f"Mask not found or unreadable: {path}")
        if arr.ndim == 3 and arr.shape[2] == 4:
            return Mask.from_alpha(arr)
        if arr.ndim == 3:
            arr = arr.max(axis=2)
        return Mask(arr.shape[1], arr.shape[0], arr > 0)
