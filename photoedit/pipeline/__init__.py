from .apply_settings import apply_settings
from .panorama_builder import build_panorama
from .object_remover import remove_object

__all__ = ["apply_settings", "build_panorama", "remove_object"]
