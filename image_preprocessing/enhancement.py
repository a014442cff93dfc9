import cv2
import numpy as np

from common.constants import (
    CLAHE_CLIP_LIMIT,
    CLAHE_TILE_GRID,
    BILATERAL_DIAMETER,
    BILATERAL_SIGMA_COLOR,
    BILATERAL_SIGMA_SPACE,
)
from common.imaging import to_gray, restore_layout


def enhance(image: np.ndarray) -> np.ndarray:
    """
    Contrast and noise cleanup of a rectified page:
    1. Grayscale
    2. CLAHE (tiled histogram equalization) against uneven lighting
    3. Bilateral filter (denoise, keeps text edges sharp)
    4. Back to the channel layout of the input

    Args:
        image: Rectified page

    Returns:
        Enhanced page of the same size and channel layout
    """
    gray = to_gray(image)

    clahe = cv2.createCLAHE(clipLimit=CLAHE_CLIP_LIMIT, tileGridSize=CLAHE_TILE_GRID)
    equalized = clahe.apply(gray)

    denoised = cv2.bilateralFilter(equalized, BILATERAL_DIAMETER,
                                   BILATERAL_SIGMA_COLOR, BILATERAL_SIGMA_SPACE)

    return restore_layout(denoised, image)
