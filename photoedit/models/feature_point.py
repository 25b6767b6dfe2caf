from typing import NamedTuple


class FeaturePoint(NamedTuple):
    """A local-gradient maximum found while stitching; lives for one stitch call."""
    x: int
    y: int
