import json

import numpy as np
import pytest

from photoedit.models import PixelBuffer, Mask, EditSettings
from photoedit.repositories import ImageRepository, SettingsRepository
from photoedit.repositories.settings_repository import DEFAULT_SETTINGS_NAME


@pytest.fixture
def repo():
    return ImageRepository()


def test_png_round_trip_keeps_alpha(repo, random_buffer, tmp_path):
    path = repo.save(random_buffer, tmp_path / "nested" / "img.png")
    assert path.exists()
    assert repo.load(path) == random_buffer


def test_jpeg_loads_opaque(repo, uniform_buffer, tmp_path):
    path = repo.save(uniform_buffer, tmp_path / "img.jpg")
    loaded = repo.load(path)
    assert (loaded.width, loaded.height) == (4, 4)
    assert np.all(loaded.alpha == 255)


def test_to_buffer_converts_bgr_and_gray():
    bgr = np.zeros((2, 3, 3), dtype=np.uint8)
    bgr[:, :, 0] = 255  # blue in cv2 order
    assert tuple(ImageRepository.to_buffer(bgr).pixels[0, 0]) == (0, 0, 255, 255)

    gray = np.full((2, 2), 7, dtype=np.uint8)
    assert tuple(ImageRepository.to_buffer(gray).pixels[1, 1]) == (7, 7, 7, 255)

    deep = np.full((1, 1), 65535, dtype=np.uint16)
    assert tuple(ImageRepository.to_buffer(deep).pixels[0, 0]) == (255, 255, 255, 255)


def test_load_missing_file(repo, tmp_path):
    with pytest.raises(FileNotFoundError):
        repo.load(tmp_path / "nope.png")


def test_iter_dir_is_sorted_and_skips_bad_files(repo, uniform_buffer, tmp_path):
    repo.save(uniform_buffer, tmp_path / "b.png")
    repo.save(uniform_buffer, tmp_path / "a.png")
    (tmp_path / "broken.png").write_bytes(b"not an image")
    (tmp_path / "notes.txt").write_text("ignore me")

    names = [p.name for p, _ in repo.iter_dir(tmp_path)]
    assert names == ["a.png", "b.png"]


def test_iter_dir_requires_directory(repo, tmp_path):
    with pytest.raises(NotADirectoryError):
        list(repo.iter_dir(tmp_path / "missing"))


def test_mask_round_trip(tmp_path):
    data = np.zeros((5, 6), dtype=np.uint8)
    data[1:3, 2:5] = 1
    mask = Mask(6, 5, data)

    path = ImageRepository.save_mask(mask, tmp_path / "mask.png")
    assert ImageRepository.load_mask(path) == mask


def test_load_mask_uses_alpha_of_overlays(tmp_path):
    overlay = PixelBuffer.filled(4, 3, (255, 255, 255, 0))
    overlay.pixels[0, 1, 3] = 10
    path = ImageRepository.save(overlay, tmp_path / "overlay.png")

    mask = ImageRepository.load_mask(path)
    assert mask.count() == 1
    assert mask.data[0, 1] == 1


def test_settings_round_trip(tmp_path):
    settings = EditSettings.from_dict({
        "filters": {"grayscale": True, "portraitMode": 40},
        "adjustments": {"contrast": 130},
        "paintedLook": 20,
    })
    path = SettingsRepository.save(settings, tmp_path)

    assert path.name == DEFAULT_SETTINGS_NAME
    assert json.loads(path.read_text())["filters"]["portraitMode"] == 40
    assert SettingsRepository.load(path) == settings
