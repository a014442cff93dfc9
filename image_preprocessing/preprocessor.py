from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from common.constants import CANONICAL_WIDTH, CANONICAL_HEIGHT
from common.errors import NoQuadFound, ProcessingFault, ScanError
from common.imaging import warp_to_canvas, fit_to_canvas, to_bgr
from paper_detection import PaperDetector, DetectionResult
from .enhancement import enhance
from .orientation import correct_orientation
from .scan_list import ScanList


@dataclass
class PageScan:
    """Finished page together with what the pipeline decided on the way."""
    image: np.ndarray
    detection: DetectionResult
    angle: int
    angle_score: float
    flipped: bool


@dataclass
class ScanResult:
    """Outcome of one image of a batch."""
    name: str
    ok: bool
    image: Optional[np.ndarray] = None
    reason: str = "ok"
    meta: Dict[str, Any] = field(default_factory=dict)


class PagePreprocessor:
    """
    Turns a photo of a document into a flat, enhanced, upright page.

    Pipeline per image:
    1. Paper detection (region detector, edge fallback)
    2. Perspective rectification to the canonical page size
    3. Enhancement (CLAHE + bilateral denoise)
    4. Four-way rotation scoring
    5. Top/bottom flip
    6. Fit to the canonical BGR canvas
    """

    def __init__(
        self,
        width: int = CANONICAL_WIDTH,
        height: int = CANONICAL_HEIGHT,
        detector: Optional[PaperDetector] = None,
        on_status: Optional[Callable[[str], None]] = None,
        debug: bool = False
    ):
        """
        Initialize the preprocessor.

        Args:
            width: Canonical page width
            height: Canonical page height
            detector: Paper detector (default: PaperDetector with calibrated parameters)
            on_status: Optional callback receiving human readable progress messages
            debug: Print debug information
        """
        self.width = width
        self.height = height
        self.detector = detector or PaperDetector(debug=debug)
        self.on_status = on_status
        self.debug = debug

    def _status(self, message: str):
        if self.on_status:
            self.on_status(message)
        if self.debug:
            print(f"  📝 {message}")

    def _stage(self, name: str, func: Callable, *args):
        try:
            return func(*args)
        except ScanError:
            raise
        except Exception as e:
            raise ProcessingFault(name, str(e)) from e

    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        Find the page quad.

        Raises:
            NoQuadFound: if both the region detector and the edge fallback fail
        """
        result = self.detector.detect(image)
        if not result.ok:
            raise NoQuadFound(result.error)

        self._status(f"Page detected by {result.method} detector")
        return result

    def process(self, image: np.ndarray) -> PageScan:
        """
        Run the whole pipeline on one image.

        Args:
            image: Photo (grayscale, BGR or BGRA) of any size

        Returns:
            PageScan with a BGR image of exactly width x height

        Raises:
            NoQuadFound: no page boundary was found
            ProcessingFault: a later stage failed
        """
        if not isinstance(image, np.ndarray):
            raise ProcessingFault("input", f"expected an image array, got {type(image).__name__}")
        if image.size == 0:
            raise ProcessingFault("input", "empty image")

        detection = self._stage("detect", self.detect, image)

        warped = self._stage("rectify", warp_to_canvas, image, detection.quad, self.width, self.height)
        enhanced = self._stage("enhance", enhance, warped)

        orientation = self._stage("orient", correct_orientation, enhanced, self._status)

        final = self._stage("fit", self._fit, orientation.image)

        return PageScan(
            image=final,
            detection=detection,
            angle=orientation.angle,
            angle_score=orientation.score,
            flipped=orientation.flipped
        )

    def process_one(self, image: np.ndarray) -> np.ndarray:
        """Run the pipeline and return the final page image only."""
        return self.process(image).image

    def process_many(
        self,
        named_images: Iterable[Tuple[str, np.ndarray]],
        scans: Optional[ScanList] = None,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> List[ScanResult]:
        """
        Process images one after another.

        A failing image yields a failed ScanResult and does not stop the batch.

        Args:
            named_images: (name, image) pairs
            scans: Optional scan list receiving every finished page
            should_cancel: Checked before each image, True stops the batch

        Returns:
            One ScanResult per processed image
        """
        results = []

        for name, image in named_images:
            if should_cancel and should_cancel():
                self._status("Cancelled")
                break

            self._status(f"Processing {name}...")
            try:
                scan = self.process(image)
            except ScanError as e:
                self._status(f"Failed {name}: {e}")
                results.append(ScanResult(name=name, ok=False, reason=str(e),
                                          meta={"error": type(e).__name__}))
                continue

            meta = {
                "detector": scan.detection.method,
                "detection_score": scan.detection.score,
                "angle": scan.angle,
                "angle_score": scan.angle_score,
                "flipped": scan.flipped,
            }
            if scans is not None:
                meta["index"] = scans.append(name, scan.image)

            results.append(ScanResult(name=name, ok=True, image=scan.image, meta=meta))

        return results

    def _fit(self, image: np.ndarray) -> np.ndarray:
        return fit_to_canvas(to_bgr(image), self.width, self.height)
