import cv2
import numpy as np

from .constants import WHITE


def to_gray(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to a single intensity channel.

    Args:
        image: Grayscale, BGR or BGRA image

    Returns:
        Grayscale image (a copy if the input already was grayscale)
    """
    if image.ndim == 2:
        return image.copy()

    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0].copy()
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def to_bgr(image: np.ndarray) -> np.ndarray:
    """Convert grayscale or BGRA input to 3-channel BGR."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGR)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image.copy()


def restore_layout(gray: np.ndarray, like: np.ndarray) -> np.ndarray:
    """
    Convert a grayscale image back to the channel layout of ``like``.

    Args:
        gray: Single channel image
        like: Image whose layout (gray, BGR or BGRA) should be reproduced

    Returns:
        Image with the same number of channels as ``like``
    """
    if like.ndim == 2:
        return gray
    if like.shape[2] == 4:
        return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGRA)
    if like.shape[2] == 1:
        return gray[:, :, np.newaxis]
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


def warp_to_canvas(image: np.ndarray, quad: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Perspective transform of a quad to a fixed size canvas.

    The ordered corners (TL, TR, BR, BL) are mapped to (0,0), (W,0), (W,H), (0,H).
    Pixels that fall outside the source image are filled with white.
    Degenerate (zero area) quads are not handled, the result is undefined.

    Args:
        image: Source image
        quad: 4 ordered corners, shape (4, 2)
        width: Output width
        height: Output height

    Returns:
        Warped image of exactly width x height pixels
    """
    src = np.asarray(quad, dtype=np.float32).reshape(4, 2)
    dst = np.array([
        [0, 0],
        [width, 0],
        [width, height],
        [0, height]
    ], dtype=np.float32)

    M = cv2.getPerspectiveTransform(src, dst)
    return cv2.warpPerspective(image, M, (int(width), int(height)),
                               flags=cv2.INTER_LINEAR,
                               borderMode=cv2.BORDER_CONSTANT,
                               borderValue=WHITE)


def rotate_image(image: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotate an image about its center, keeping the canvas size.

    Args:
        image: Input image
        angle: Angle in degrees (positive = counter-clockwise)

    Returns:
        Rotated image, corners revealed by the rotation are white
    """
    if angle % 360 == 0:
        return image.copy()

    (h, w) = image.shape[:2]
    # Pixel grid center, so 180 degrees mirrors the grid exactly
    center = ((w - 1) / 2.0, (h - 1) / 2.0)

    M = cv2.getRotationMatrix2D(center, angle, 1.0)

    return cv2.warpAffine(image, M, (w, h),
                          flags=cv2.INTER_LINEAR,
                          borderMode=cv2.BORDER_CONSTANT,
                          borderValue=WHITE)


def fit_to_canvas(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize to width x height (area interpolation) unless it already fits."""
    h, w = image.shape[:2]
    if (w, h) == (width, height):
        return image
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)
