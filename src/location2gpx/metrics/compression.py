from typing import List

from location2gpx.core.segment import Segment


def segments_compression_ratio(original: List[Segment], compressed: List[Segment]) -> float:
    """
    Ratio of point counts before and after simplification, over whole tracks.

    Args:
        original: Segments as split.
        compressed: The same segments after simplification.

    Returns:
        Original count / compressed count (e.g. 3.0 for 3:1). Returns 1.0 if
        compressed holds no points.
    """
    kept = sum(len(s) for s in compressed)
    if not kept:
        return 1.0
    return sum(len(s) for s in original) / kept
