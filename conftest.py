"""
Synthetic test images shared by all test packages.
"""

import numpy as np
import pytest


def draw_text_lines(image, left, top, right, bottom,
                    line_height=10, line_gap=10, dash=4, dash_gap=4, color=0):
    """Fill a block with dashed horizontal lines that look like print."""
    for y in range(top, bottom - line_height + 1, line_height + line_gap):
        for x in range(left, right - dash + 1, dash + dash_gap):
            image[y:y + line_height, x:x + dash] = color
    return image


@pytest.fixture
def document_photo():
    """
    1000x1400 photo: white page covering 80% of the frame on a dark,
    unsaturated background, with symmetric dashed text lines.
    Page corners: (53, 74), (946, 74), (946, 1325), (53, 1325).
    """
    photo = np.full((1400, 1000, 3), 40, dtype=np.uint8)
    photo[74:1326, 53:947] = 255
    draw_text_lines(photo, 133, 174, 867, 1226)
    return photo


@pytest.fixture
def text_page():
    """
    400x400 grayscale page, upright by the flip convention: blank top band,
    text running into the bottom band.
    """
    page = np.full((400, 400), 255, dtype=np.uint8)
    draw_text_lines(page, 40, 160, 360, 380, line_height=8, line_gap=8)
    return page
