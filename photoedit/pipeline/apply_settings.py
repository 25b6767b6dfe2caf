# pipeline/apply_settings.py
from typing import Any, Dict, Union
import logging

from ..models.pixel_buffer import PixelBuffer
from ..models.edit_settings import EditSettings
from ..services.color_service import ColorService
from ..services.convolution_service import ConvolutionService
from ..services.depth_of_field_service import DepthOfFieldService
from ..services.painted_look_service import PaintedLookService

logger = logging.getLogger(__name__)


def apply_settings(
    buffer: PixelBuffer,
    settings: Union[EditSettings, Dict[str, Any]],
    *,
    color_service: ColorService = ColorService(),
    convolution_service: ConvolutionService = ConvolutionService(),
    depth_of_field_service: DepthOfFieldService = DepthOfFieldService(),
    painted_look_service: PaintedLookService = PaintedLookService(),
) -> PixelBuffer:
    """
    Re-apply a saved settings record to an image, in editor order:
        • grayscale / sepia
        • averaging filter, gaussian filter, portrait mode
        • saturation, contrast, temperature
        • painted look
    Steps at their neutral value are skipped. *buffer* is never modified.
    """
    settings = EditSettings.from_dict(settings)
    filters, adjustments = settings.filters, settings.adjustments
    out = buffer

    if filters.grayscale:
        out = color_service.grayscale(out)
    if filters.sepia:
        out = color_service.sepia(out)
    if filters.averaging_filter:
        out = convolution_service.box_blur(out, filters.averaging_filter)
    if filters.gaussian_filter:
        out = convolution_service.gaussian_blur(out, filters.gaussian_filter)
    if filters.portrait_mode:
        out = depth_of_field_service.apply(out, filters.portrait_mode)

    if adjustments.saturation != 100:
        out = color_service.saturation(out, adjustments.saturation)
    if adjustments.contrast != 100:
        out = color_service.contrast(out, adjustments.contrast)
    if adjustments.temperature != 100:
        out = color_service.temperature(out, adjustments.temperature)

    if settings.painted_look:
        out = painted_look_service.apply(out, settings.painted_look)

    logger.info(f"Applied settings to {buffer.width}x{buffer.height} image")
    return out if out is not buffer else buffer.copy()
