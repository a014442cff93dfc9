"""
Scoring of candidate page quads
"""

import math
from typing import Optional

import cv2
import numpy as np

from common.constants import (
    TARGET_RATIO,
    GEOMETRY_WEIGHT,
    TEXTURE_WEIGHT,
    AREA_WEIGHT,
    AREA_COVER_FRACTION,
    TEXTURE_VARIANCE_NORM,
    TEXTURE_SAMPLE_WIDTH,
    TEXTURE_SAMPLE_HEIGHT,
    TEXTURE_FALLBACK_SCORE,
    CLAHE_CLIP_LIMIT,
    CLAHE_TILE_GRID,
)
from common.geometry import polygon_area, quad_size
from common.imaging import to_gray, warp_to_canvas


def geometry_score(ratio: float, target_ratio: float = TARGET_RATIO) -> float:
    """Peaks at 1.0 for the ISO-216 aspect ratio and decays exponentially away from it."""
    return math.exp(-abs(ratio - target_ratio))


def area_score(quad_area: float, image_area: float) -> float:
    """Fraction of 80% of the frame covered by the quad, capped at 1."""
    return min(1.0, quad_area / (image_area * AREA_COVER_FRACTION))


def texture_score(sample: np.ndarray) -> float:
    """
    Print-likeness of a rectified candidate.

    Horizontal lines of print make the per-row mean intensity vary
    strongly, blank or uniform surfaces do not.

    Args:
        sample: Rectified candidate region

    Returns:
        Score 0-1, 0.2 if OpenCV cannot process the sample
    """
    try:
        gray = to_gray(sample)
        clahe = cv2.createCLAHE(clipLimit=CLAHE_CLIP_LIMIT, tileGridSize=CLAHE_TILE_GRID)
        eq = clahe.apply(gray)
    except cv2.error:
        return TEXTURE_FALLBACK_SCORE

    row_means = eq.mean(axis=1)
    variance = float(np.var(row_means))
    return min(1.0, variance / TEXTURE_VARIANCE_NORM)


def score_candidate(quad: Optional[np.ndarray], image: np.ndarray) -> float:
    """
    Score a candidate quad against the image it was found in.

    score = 0.6 * geometry + 0.4 * texture + 0.2 * area

    The weights intentionally do not sum to 1.

    Args:
        quad: Ordered quad (TL, TR, BR, BL) or None
        image: Original image

    Returns:
        Score, higher is better. None or degenerate quads score -1.
    """
    if quad is None:
        return -1.0

    width, height = quad_size(quad)
    if min(width, height) <= 0:
        return -1.0

    ratio = max(width, height) / min(width, height)
    geometry = geometry_score(ratio)

    image_area = image.shape[0] * image.shape[1]
    area = area_score(polygon_area(quad), image_area)

    sample = warp_to_canvas(image, quad, TEXTURE_SAMPLE_WIDTH, TEXTURE_SAMPLE_HEIGHT)
    texture = texture_score(sample)

    return GEOMETRY_WEIGHT * geometry + TEXTURE_WEIGHT * texture + AREA_WEIGHT * area
