import numpy as np
import pytest

from photoedit.models import PixelBuffer, InvalidParameter
from photoedit.services import (
    GeometryService,
    HistogramService,
    LocalEditService,
    PaintedLookService,
)


# ─── Geometry ─────────────────────────────────────────────────────────
def _numbered(width, height):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.arange(width * height).reshape(height, width)
    pixels[:, :, 3] = 255
    return PixelBuffer.from_array(pixels)


def test_rotate_and_flip():
    geometry = GeometryService()
    buf = _numbered(3, 2)  # [[0 1 2], [3 4 5]]

    cw = geometry.rotate(buf, "cw")
    ccw = geometry.rotate(buf, "ccw")
    assert (cw.width, cw.height) == (2, 3)
    assert cw.pixels[:, :, 0].tolist() == [[3, 0], [4, 1], [5, 2]]
    assert ccw.pixels[:, :, 0].tolist() == [[2, 5], [1, 4], [0, 3]]
    assert geometry.flip(buf, "horizontal").pixels[:, :, 0].tolist() == [[2, 1, 0], [5, 4, 3]]
    assert geometry.flip(buf, "vertical").pixels[:, :, 0].tolist() == [[3, 4, 5], [0, 1, 2]]


def test_resize_nearest_neighbour():
    geometry = GeometryService()
    buf = _numbered(4, 2)  # [[0 1 2 3], [4 5 6 7]]

    assert geometry.resize(buf, 2, 1).pixels[:, :, 0].tolist() == [[0, 2]]
    assert geometry.resize(buf, 8, 2).pixels[:, :, 0].tolist()[0] == [0, 0, 1, 1, 2, 2, 3, 3]


def test_geometry_rejects_bad_arguments():
    geometry = GeometryService()
    buf = _numbered(2, 2)
    with pytest.raises(InvalidParameter):
        geometry.rotate(buf, "left")
    with pytest.raises(InvalidParameter):
        geometry.flip(buf, "diagonal")
    with pytest.raises(InvalidParameter):
        geometry.resize(buf, 0, 3)


# ─── Histogram ────────────────────────────────────────────────────────
def test_histogram_bins_rounded_average():
    buf = PixelBuffer.from_bytes(3, 1, [0, 0, 1, 255, 0, 1, 1, 255, 255, 255, 255, 0])
    hist = HistogramService.histogram(buf)

    assert hist.shape == (256,)
    assert hist.sum() == 3
    assert hist[0] == 1      # 1/3 → 0
    assert hist[1] == 1      # 2/3 → 1
    assert hist[255] == 1


# ─── Local edit ───────────────────────────────────────────────────────
def test_local_adjust_falls_off_with_distance():
    buf = PixelBuffer.filled(11, 1, (100, 100, 100, 255))
    out = LocalEditService().local_adjust(buf, center=(5, 0), brush_size=4, intensity=40)

    assert list(out.pixels[0, :, 0]) == [100, 100, 110, 120, 130, 140, 130, 120, 110, 100, 100]
    assert np.all(out.alpha == 255)


def test_local_adjust_validates_ranges():
    buf = PixelBuffer.filled(2, 2, (0, 0, 0, 255))
    with pytest.raises(InvalidParameter):
        LocalEditService().local_adjust(buf, (0, 0), brush_size=0)
    with pytest.raises(InvalidParameter):
        LocalEditService().local_adjust(buf, (0, 0), intensity=300)


# ─── Painted look ─────────────────────────────────────────────────────
def test_quantize_snaps_to_levels():
    service = PaintedLookService(levels=2)
    buf = PixelBuffer.from_bytes(2, 1, [100, 130, 250, 255, 10, 0, 127, 9])
    out = service.quantize(buf)
    assert out.pixels.tolist() == [[[0, 255, 255, 255], [0, 0, 0, 9]]]


def test_painted_look_low_value_is_plain_quantisation(random_buffer):
    service = PaintedLookService()
    assert service.apply(random_buffer, 5) == service.quantize(random_buffer)


def test_painted_look_paints_dabs_on_flat_areas():
    service = PaintedLookService(levels=8, edge_cutoff=50)
    pixels = np.zeros((30, 30, 4), dtype=np.uint8)
    pixels[:, :, :3] = 128
    pixels[:, :, 3] = 100
    buf = PixelBuffer.from_array(pixels)

    out = service.apply(buf, 40)

    # 128 → level 4/7 → 146; dabs are opaque
    assert tuple(out.pixels[0, 0]) == (146, 146, 146, 255)
    assert out.pixels[:, :, :3].max() == 146
    assert (out.alpha == 255).any()


def test_painted_look_rejects_out_of_domain(random_buffer):
    with pytest.raises(InvalidParameter):
        PaintedLookService().apply(random_buffer, 120)


def test_explicit_levels_override_environment(monkeypatch, random_buffer):
    monkeypatch.setenv("PAINTED_LOOK_LEVELS", "8")
    with pytest.raises(InvalidParameter):
        PaintedLookService(levels=0)
    with pytest.raises(InvalidParameter):
        PaintedLookService().quantize(random_buffer, levels=1)
