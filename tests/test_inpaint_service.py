import numpy as np
import pytest

from photoedit.models import PixelBuffer, Mask, InvalidParameter, DimensionMismatch
from photoedit.services import InpaintService


@pytest.fixture
def inpaint():
    return InpaintService(min_radius=1)


def test_full_mask_returns_input_unchanged(random_buffer):
    out = InpaintService().fill(random_buffer, Mask.full(16, 12), radius=5)
    assert out == random_buffer
    assert out is not random_buffer


def test_empty_mask_returns_input_unchanged(inpaint, random_buffer):
    assert inpaint.fill(random_buffer, Mask.empty(16, 12), radius=3) == random_buffer


def test_masked_pixel_takes_mean_of_unmasked_neighbours(inpaint):
    # 3x3: centre is the "object", ring values 10..80
    ring = [10, 20, 30, 40, 50, 60, 70, 80]
    values = ring[:4] + [255] + ring[4:]
    data = []
    for v in values:
        data += [v, v, v, 255]
    buf = PixelBuffer.from_bytes(3, 3, data)
    mask_data = np.zeros((3, 3), dtype=np.uint8)
    mask_data[1, 1] = 1

    out = inpaint.fill(buf, Mask(3, 3, mask_data), radius=1)

    assert tuple(out.pixels[1, 1]) == (45, 45, 45, 255)
    # unmasked pixels never change
    keep = mask_data == 0
    assert np.array_equal(out.pixels[keep], buf.pixels[keep])


def test_masked_neighbours_are_ignored(inpaint):
    buf = PixelBuffer.from_bytes(3, 1, [0, 0, 0, 255, 200, 200, 200, 255, 90, 60, 30, 255])
    mask = Mask.from_bytes(3, 1, [1, 1, 0])

    out = inpaint.fill(buf, mask, radius=1)

    # pixel 0 only reaches pixel 1 (masked) → unchanged; pixel 1 sees pixel 2
    assert tuple(out.pixels[0, 0]) == (0, 0, 0, 255)
    assert tuple(out.pixels[0, 1]) == (90, 60, 30, 255)


def test_min_radius_floor_widens_window(monkeypatch):
    monkeypatch.setenv("INPAINT_MIN_RADIUS", "3")
    service = InpaintService()
    buf = PixelBuffer.from_bytes(5, 1, [0, 0, 0, 255] * 4 + [100, 100, 100, 255])
    mask = Mask.from_bytes(5, 1, [1, 1, 1, 1, 0])

    out = service.fill(buf, mask, radius=1)

    assert service.min_radius == 3
    assert tuple(out.pixels[0, 1, :3]) == (100, 100, 100)
    # pixel 0 is four away from the only known pixel
    assert tuple(out.pixels[0, 0, :3]) == (0, 0, 0)


def test_fill_does_not_mutate_input(inpaint, random_buffer):
    before = random_buffer.pixels.copy()
    inpaint.fill(random_buffer, Mask.full(16, 12), radius=2)
    inpaint.fill(random_buffer, Mask.from_alpha(random_buffer.pixels), radius=2)
    assert np.array_equal(random_buffer.pixels, before)


def test_invalid_radius_and_mask_size(inpaint, random_buffer):
    with pytest.raises(InvalidParameter):
        inpaint.fill(random_buffer, Mask.empty(16, 12), radius=0)
    with pytest.raises(DimensionMismatch):
        inpaint.fill(random_buffer, Mask.empty(12, 16), radius=2)


def test_explicit_zero_min_radius_is_kept(monkeypatch):
    monkeypatch.setenv("INPAINT_MIN_RADIUS", "7")
    assert InpaintService(min_radius=0).min_radius == 0
    assert InpaintService().min_radius == 7
