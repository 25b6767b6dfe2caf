import numpy as np
import pytest

from photoedit.models import PixelBuffer, Mask, OutOfBounds, InvalidParameter
from photoedit.services import SelectionService


@pytest.fixture
def wand():
    return SelectionService()


def _two_tone(left, right, width=20, height=10):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    pixels[:, : width // 2, :3] = left
    pixels[:, width // 2:, :3] = right
    return PixelBuffer.from_array(pixels)


def test_uniform_image_selects_everything(wand, uniform_buffer):
    mask = wand.select(uniform_buffer, (1, 2), color_tolerance=0, edge_threshold=30)
    assert mask == Mask.full(4, 4)


def test_edges_stop_the_fill(wand, split_buffer):
    mask = wand.select(split_buffer, (2, 5), color_tolerance=255, edge_threshold=30)

    assert mask.data[5, 2] == 1
    # everything right of the seam is unreachable, and the seam itself is an edge
    assert not mask.data[:, 10:].any()
    assert not mask.data[:, 9].any()
    assert mask.data[:, :7].all()


def test_channel_tolerance_without_edges(wand):
    buf = _two_tone((100, 100, 100), (108, 100, 100))

    # thresholds far above any gradient in this image: no edge pixels
    strict = wand.select(buf, (0, 0), color_tolerance=5, edge_threshold=1000)
    loose = wand.select(buf, (0, 0), color_tolerance=8, edge_threshold=1000)

    assert strict.count() == 100
    assert strict.data[:, :10].all()
    assert loose.count() == 200


def test_euclidean_metric_is_stricter_than_channel(wand):
    buf = _two_tone((100, 100, 100), (106, 106, 106))

    channel = wand.select(buf, (0, 0), color_tolerance=6, edge_threshold=1000)
    euclid = wand.select(buf, (0, 0), color_tolerance=6, edge_threshold=1000, metric="euclidean")

    assert channel.count() == 200
    assert euclid.count() == 100


def test_selection_is_connected_only(wand):
    pixels = np.full((5, 9, 4), 255, dtype=np.uint8)
    pixels[:, 4, :3] = 0  # black column splits two white regions
    buf = PixelBuffer.from_array(pixels)

    mask = wand.select(buf, (0, 0), color_tolerance=10, edge_threshold=1000)
    assert mask.data[:, :4].all()
    assert not mask.data[:, 4:].any()


def test_seed_out_of_bounds(wand, uniform_buffer):
    with pytest.raises(OutOfBounds):
        wand.select(uniform_buffer, (4, 0))
    with pytest.raises(OutOfBounds):
        wand.select(uniform_buffer, (0, -1))


@pytest.mark.parametrize("kwargs", [
    {"color_tolerance": 256},
    {"color_tolerance": -1},
    {"edge_threshold": 0},
    {"metric": "manhattan"},
])
def test_invalid_parameters(wand, uniform_buffer, kwargs):
    with pytest.raises(InvalidParameter):
        wand.select(uniform_buffer, (0, 0), **kwargs)


def test_large_fill_does_not_recurse(wand):
    buf = PixelBuffer.filled(300, 200, (10, 20, 30, 255))
    assert wand.select(buf, (150, 100)).count() == 300 * 200


def test_blur_size_from_environment(monkeypatch):
    monkeypatch.setenv("MAGIC_WAND_BLUR_KSIZE", "4")
    with pytest.raises(InvalidParameter):
        SelectionService()


def test_explicit_blur_ksize_is_not_replaced_by_default(monkeypatch):
    monkeypatch.setenv("MAGIC_WAND_BLUR_KSIZE", "5")
    with pytest.raises(InvalidParameter):
        SelectionService(blur_ksize=0)
