"""
Percentile estimation and binary thresholding of single channels
"""

import numpy as np

from common.constants import PERCENTILE_SAMPLE_COUNT


def percentile_threshold(channel: np.ndarray, p: float) -> int:
    """
    Approximate percentile of a channel from a sparse deterministic sample.

    Every ``max(1, N // 5000)``-th value is taken, so the cost is bounded
    on large images. The result is only approximately the exact percentile.

    Args:
        channel: Single channel image
        p: Percentile (0-100)

    Returns:
        Sample value at the requested percentile
    """
    data = np.asarray(channel).ravel()
    if data.size == 0:
        raise ValueError("Cannot compute percentile of an empty channel")

    step = max(1, data.size // PERCENTILE_SAMPLE_COUNT)
    sample = np.sort(data[::step])
    idx = min(len(sample) - 1, int(np.floor(p / 100.0 * len(sample))))
    return int(sample[idx])


def threshold_greater_equal(channel: np.ndarray, threshold: float) -> np.ndarray:
    """Binary mask: 255 where channel >= threshold, else 0."""
    return np.where(np.asarray(channel) >= threshold, 255, 0).astype(np.uint8)


def threshold_less_equal(channel: np.ndarray, threshold: float) -> np.ndarray:
    """Binary mask: 255 where channel <= threshold, else 0."""
    return np.where(np.asarray(channel) <= threshold, 255, 0).astype(np.uint8)
