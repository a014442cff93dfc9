"""
Right-angle orientation correction of rectified pages.

Two steps:
1. Four-way rotation scoring. Lines of print produce strong banding of the
   horizontal gradient only while they run horizontally, so this resolves
   90/270 degrees. Upright and upside-down pages score the same; such ties
   go to the candidate the top/bottom check would keep as it is.
2. Top/bottom flip. Compares the mean intensity of the top and bottom bands
   and turns the page over when the bottom is clearly brighter.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import cv2
import numpy as np

from common.constants import (
    ROTATION_ANGLES,
    UPRIGHT_VARIANCE_NORM,
    UPRIGHT_FALLBACK_SCORE,
    BAND_FRACTION,
    FLIP_MARGIN,
)
from common.imaging import to_gray, rotate_image


@dataclass
class OrientationResult:
    image: np.ndarray
    angle: int
    score: float
    flipped: bool

    @property
    def total_angle(self) -> int:
        """Counter-clockwise rotation applied to the input, both steps included."""
        return (self.angle + (180 if self.flipped else 0)) % 360


def upright_score(image: np.ndarray) -> float:
    """
    Score how much the image looks like horizontal lines of text.

    Args:
        image: Page image

    Returns:
        Score 0-1 (variance of per-row mean horizontal gradient / 1200, capped),
        0.3 if OpenCV cannot process the image
    """
    try:
        gray = to_gray(image)

        sobel_x = cv2.Sobel(gray, cv2.CV_16S, 1, 0, ksize=3)
        abs_x = cv2.convertScaleAbs(sobel_x)
    except cv2.error:
        return UPRIGHT_FALLBACK_SCORE

    row_means = abs_x.mean(axis=1)
    variance = float(np.var(row_means))

    # Rounded so mirror-image rotations compare equal
    return round(min(1.0, variance / UPRIGHT_VARIANCE_NORM), 6)


def correct_rotation(
    image: np.ndarray,
    on_status: Optional[Callable[[str], None]] = None
) -> Tuple[np.ndarray, int, float]:
    """
    Rotate the image by the best of 0, 90, 180 and 270 degrees.

    Among equally scored candidates the first one that needs no top/bottom
    flip wins, so a page turned by 90 degrees comes back with 270 and the
    other way round. If every tied candidate would be flipped, the earliest
    angle wins.

    Args:
        image: Enhanced page
        on_status: Optional progress callback

    Returns:
        (rotated image, angle, score)
    """
    candidates = []
    for angle in ROTATION_ANGLES:
        rotated = rotate_image(image, angle)
        candidates.append((angle, rotated, upright_score(rotated)))

    best_score = max(score for _, _, score in candidates)
    tied = [c for c in candidates if c[2] == best_score]

    best_angle, best, best_score = next(
        (c for c in tied if not needs_flip(c[1])),
        tied[0]
    )

    if on_status:
        on_status(f"Auto-upright angle: {best_angle}° (score={best_score:.3f})")

    return best, best_angle, best_score


def band_means(image: np.ndarray, band_fraction: float = BAND_FRACTION) -> Tuple[float, float]:
    """Mean intensity of the top and bottom bands (each band_fraction of the height)."""
    gray = to_gray(image)
    h = gray.shape[0]

    band = int(h * band_fraction)
    bottom_start = int(h * (1.0 - band_fraction))

    top = gray[:band]
    bottom = gray[bottom_start:bottom_start + band]
    return float(top.mean()), float(bottom.mean())


def needs_flip(image: np.ndarray) -> bool:
    """True if the bottom band is brighter than the top band by more than the flip margin."""
    top_mean, bottom_mean = band_means(image)
    return bottom_mean - top_mean > FLIP_MARGIN


def fix_top_bottom(
    image: np.ndarray,
    on_status: Optional[Callable[[str], None]] = None
) -> Tuple[np.ndarray, bool]:
    """
    Turn the page over if the bottom band is brighter than the top band
    by more than the flip margin (8 on a 0-255 scale).

    This is a heuristic, not a guarantee.

    Args:
        image: Page after rotation scoring
        on_status: Optional progress callback

    Returns:
        (image, flipped)
    """
    top_mean, bottom_mean = band_means(image)

    if bottom_mean - top_mean > FLIP_MARGIN:
        if on_status:
            on_status(f"180° fix applied (top={top_mean:.1f}, bottom={bottom_mean:.1f})")
        return rotate_image(image, 180), True

    return image, False


def correct_orientation(
    image: np.ndarray,
    on_status: Optional[Callable[[str], None]] = None
) -> OrientationResult:
    """Rotation scoring followed by the top/bottom flip."""
    rotated, angle, score = correct_rotation(image, on_status)
    fixed, flipped = fix_top_bottom(rotated, on_status)
    return OrientationResult(image=fixed, angle=angle, score=score, flipped=flipped)
