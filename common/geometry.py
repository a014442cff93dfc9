import math
from typing import Sequence, Tuple

import numpy as np


def distance(a, b) -> float:
    """Euclidean distance between two points (x, y)."""
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def polygon_area(points) -> float:
    """
    Calculate the area of a simple polygon (shoelace formula).

    Parameters:
    - points: Sequence of (x, y) vertices, clockwise or counter-clockwise.

    Returns:
    - float: The absolute area of the polygon.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return 0.0

    x = pts[:, 0]
    y = pts[:, 1]
    return abs(float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))) / 2.0


def order_quad(points) -> np.ndarray:
    """
    Order 4 points as top-left, top-right, bottom-right, bottom-left.

    The order depends only on the point set, never on the input sequence:
    top-left has the smallest x+y, bottom-right the largest x+y,
    top-right the largest x-y and bottom-left the smallest x-y.

    Args:
        points: 4 points of shape (4, 2) (or anything reshapeable to it)

    Returns:
        float32 array of shape (4, 2)
    """
    pts = np.asarray(points, dtype=np.float32).reshape(4, 2)

    s = pts[:, 0] + pts[:, 1]
    d = pts[:, 0] - pts[:, 1]

    return np.array([
        pts[np.argmin(s)],
        pts[np.argmax(d)],
        pts[np.argmax(s)],
        pts[np.argmin(d)],
    ], dtype=np.float32)


def quad_size(quad: Sequence) -> Tuple[float, float]:
    """
    Average width and height of an ordered quad.

    Width is the mean of the top and bottom edges, height the mean
    of the left and right edges.
    """
    tl, tr, br, bl = quad
    width = (distance(tl, tr) + distance(bl, br)) / 2.0
    height = (distance(tl, bl) + distance(tr, br)) / 2.0
    return width, height
