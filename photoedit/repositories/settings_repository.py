from pathlib import Path
from typing import Union
import json
import logging

from ..models.edit_settings import EditSettings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_NAME = "photo_editor_settings.json"


class SettingsRepository:
    """
    JSON persistence for EditSettings, in the editor's
    ``{filters, adjustments, paintedLook}`` shape.
    """

    @staticmethod
    def load(path: Union[str, Path]) -> EditSettings:
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        logger.debug(f"Loaded settings from {path}")
        return EditSettings.from_dict(data)

    @staticmethod
    def save(settings: EditSettings, path: Union[str, Path]) -> Path:
        path = Path(path)
        if path.is_dir():
            path = path / DEFAULT_SETTINGS_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(settings.to_dict(), fh, indent=2)
        logger.debug(f"Saved settings to {path}")
        return path
