# pipeline/panorama_builder.py
from pathlib import Path
from typing import List, Sequence, Union
import logging

from ..models.pixel_buffer import PixelBuffer
from ..repositories.image_repository import ImageRepository
from ..services.panorama_service import PanoramaService

logger = logging.getLogger(__name__)

ImageInput = Union[PixelBuffer, str, Path]


def build_panorama(
    images: Sequence[ImageInput],
    *,
    panorama_service: PanoramaService = PanoramaService(),
    image_repository: ImageRepository = ImageRepository(),
) -> PixelBuffer:
    """
    Stitch *images* left to right. Paths are loaded first; buffers are used as-is.
    """
    buffers: List[PixelBuffer] = []
    for item in images:
        if isinstance(item, PixelBuffer):
            buffers.append(item)
        else:
            logger.info(f"Loading panorama input {item}")
            buffers.append(image_repository.load(item))
    return panorama_service.stitch(buffers)
