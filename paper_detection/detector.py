"""
Paper detector for document photos using OpenCV
"""

from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from common.constants import (
    LIGHTNESS_PERCENTILE,
    SATURATION_PERCENTILE,
    APPROX_EPSILON,
    MEDIAN_KSIZE,
    CLOSE_KERNEL_SIZE,
    BLUR_KSIZE,
    CANNY_LOW,
    CANNY_HIGH,
)
from common.geometry import order_quad, polygon_area
from common.imaging import to_bgr, to_gray
from .scoring import score_candidate
from .thresholds import percentile_threshold, threshold_greater_equal, threshold_less_equal


REGION = "region"
EDGES = "edges"


@dataclass
class DetectionResult:
    """
    Outcome of one detection strategy.

    Either ``quad`` is set (ordered TL, TR, BR, BL) or ``error`` says why
    nothing was found. A failed detection is a value, not an exception.
    """
    method: str
    quad: Optional[np.ndarray] = None
    score: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.quad is not None


class PaperDetector:
    """
    Class for paper detection in images.

    The primary strategy segments bright, low-saturation regions and scores
    every resulting quad. Edge based contour search is used only as a
    fallback when no region candidate exists.
    """

    def __init__(
        self,
        lightness_percentile: float = LIGHTNESS_PERCENTILE,
        saturation_percentile: float = SATURATION_PERCENTILE,
        approx_epsilon: float = APPROX_EPSILON,
        canny_low: int = CANNY_LOW,
        canny_high: int = CANNY_HIGH,
        debug: bool = False
    ):
        """
        Initialize the detector.

        Args:
            lightness_percentile: Percentile of Lab lightness used as "paper is brighter" threshold
            saturation_percentile: Percentile of HSV saturation used as "paper is less saturated" threshold
            approx_epsilon: Epsilon for polygon approximation (as ratio of perimeter)
            canny_low: Lower Canny threshold of the edge fallback
            canny_high: Upper Canny threshold of the edge fallback
            debug: Print debug information
        """
        self.lightness_percentile = lightness_percentile
        self.saturation_percentile = saturation_percentile
        self.approx_epsilon = approx_epsilon
        self.canny_low = canny_low
        self.canny_high = canny_high
        self.debug = debug

    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        Detect paper in the image.

        Args:
            image: Input image (grayscale, BGR or BGRA)

        Returns:
            Result of the region detector, or of the edge fallback if the
            region detector found nothing
        """
        result = self.detect_paper_region(image)
        if result.ok:
            return result

        if self.debug:
            print(f"      ⚠️  Region detection failed ({result.error}), trying edges...")

        return self.fallback_by_edges(image)

    def detect_paper_region(self, image: np.ndarray) -> DetectionResult:
        """
        Detect paper as a bright, low-saturation region.

        Any error inside this stage is reported as a failed result so the
        caller can fall back to edge detection.

        Args:
            image: Input image

        Returns:
            Best scoring candidate or a failed result
        """
        try:
            return self._detect_paper_region(image)
        except Exception as e:
            if self.debug:
                print(f"      ❌ Region detection error: {e}")
            return DetectionResult(REGION, error=f"{type(e).__name__}: {e}")

    def _detect_paper_region(self, image: np.ndarray) -> DetectionResult:
        if image is None or image.size == 0:
            return DetectionResult(REGION, error="empty image")

        bgr = to_bgr(image)
        lightness = cv2.cvtColor(bgr, cv2.COLOR_BGR2LAB)[:, :, 0]
        saturation = cv2.cvtColor(bgr, cv2.COLOR_BGR2HSV)[:, :, 1]

        # Paper is assumed brighter and less saturated than its background
        l_thresh = percentile_threshold(lightness, self.lightness_percentile)
        s_thresh = percentile_threshold(saturation, self.saturation_percentile)
        mask = cv2.bitwise_and(
            threshold_greater_equal(lightness, l_thresh),
            threshold_less_equal(saturation, s_thresh)
        )

        mask = cv2.medianBlur(mask, MEDIAN_KSIZE)
        kernel = np.ones((CLOSE_KERNEL_SIZE, CLOSE_KERNEL_SIZE), np.uint8)
        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)

        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        if self.debug:
            print(f"      🔍 Region thresholds L>={l_thresh}, S<={s_thresh}: {len(contours)} contours")

        best_quad = None
        best_score = -1.0
        for contour in contours:
            quad = self._quad_from_contour(contour)
            score = score_candidate(quad, image)
            if score > best_score:
                best_score = score
                best_quad = quad

        if best_quad is None:
            return DetectionResult(REGION, error="no candidate region")

        if self.debug:
            print(f"      ✅ Best region candidate score={best_score:.3f}")

        return DetectionResult(REGION, quad=best_quad, score=best_score)

    def fallback_by_edges(self, image: np.ndarray) -> DetectionResult:
        """
        Detect paper as the largest contour of the edge map.

        No scoring is applied, the candidate with the largest area wins.

        Args:
            image: Input image

        Returns:
            Largest quad or a failed result
        """
        if image is None or image.size == 0:
            return DetectionResult(EDGES, error="empty image")

        gray = to_gray(image)
        blurred = cv2.GaussianBlur(gray, (BLUR_KSIZE, BLUR_KSIZE), 0)
        edges = cv2.Canny(blurred, self.canny_low, self.canny_high)

        contours, _ = cv2.findContours(edges, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        best_quad = None
        best_area = 0.0
        for contour in contours:
            approx = self._approximate(contour)
            if len(approx) < 4:
                continue

            quad = self._quad_from_contour(contour, approx)
            area = polygon_area(quad)
            if area > best_area:
                best_area = area
                best_quad = quad

        if best_quad is None:
            return DetectionResult(EDGES, error="no contour with 4 or more vertices")

        if self.debug:
            print(f"      ✅ Edge fallback: largest quad area={best_area:.0f}")

        return DetectionResult(EDGES, quad=best_quad)

    def _approximate(self, contour: np.ndarray) -> np.ndarray:
        peri = cv2.arcLength(contour, True)
        return cv2.approxPolyDP(contour, self.approx_epsilon * peri, True)

    def _quad_from_contour(self, contour: np.ndarray, approx: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Quad of a contour: its 4-vertex approximation if there is one,
        otherwise the corners of its minimum area rectangle.

        Args:
            contour: Contour from cv2.findContours
            approx: Precomputed polygon approximation

        Returns:
            Ordered quad (TL, TR, BR, BL)
        """
        if approx is None:
            approx = self._approximate(contour)

        if len(approx) == 4:
            points = approx.reshape(4, 2)
        else:
            rect = cv2.minAreaRect(contour)
            points = cv2.boxPoints(rect)

        return order_quad(points)

