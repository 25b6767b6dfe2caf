# pipeline/object_remover.py
from typing import Sequence, Tuple
import logging

from ..models.pixel_buffer import PixelBuffer
from ..models.mask import Mask
from ..services.drawing_service import DrawingService
from ..services.inpaint_service import InpaintService

logger = logging.getLogger(__name__)


def remove_object(
    buffer: PixelBuffer,
    strokes: Sequence[Sequence[Tuple[float, float]]],
    brush_size: int = 20,
    *,
    drawing_service: DrawingService = DrawingService(),
    inpaint_service: InpaintService = InpaintService(),
) -> PixelBuffer:
    """
    Paint the brush strokes into a mask, then fill the masked area from its
    surroundings (window half-width = max(brush_size, service minimum)).
    """
    mask_data = None
    for stroke in strokes:
        stroke_mask = drawing_service.stroke_mask(buffer.width, buffer.height, stroke, brush_size)
        mask_data = stroke_mask.data if mask_data is None else (mask_data | stroke_mask.data)

    if mask_data is None or not mask_data.any():
        logger.info("No strokes to remove; returning a copy")
        return buffer.copy()

    mask = Mask(buffer.width, buffer.height, mask_data)
    logger.info(f"Removing object covering {int(mask_data.sum())} pixels")
    return inpaint_service.fill(buffer, mask, radius=brush_size)
