from .image_repository import ImageRepository
from .settings_repository import SettingsRepository

__all__ = ["ImageRepository", "SettingsRepository"]
