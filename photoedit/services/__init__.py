from .color_service import ColorService
from .convolution_service import ConvolutionService
from .selection_service import SelectionService
from .inpaint_service import InpaintService
from .depth_of_field_service import DepthOfFieldService
from .panorama_service import PanoramaService
from .geometry_service import GeometryService
from .histogram_service import HistogramService
from .local_edit_service import LocalEditService
from .painted_look_service import PaintedLookService
from .drawing_service import DrawingService

__all__ = [
    "ColorService",
    "ConvolutionService",
    "SelectionService",
    "InpaintService",
    "DepthOfFieldService",
    "PanoramaService",
    "GeometryService",
    "HistogramService",
    "LocalEditService",
    "PaintedLookService",
    "DrawingService",
]
