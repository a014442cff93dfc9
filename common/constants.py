"""
Calibrated constants of the scanning pipeline.

These values encode tuned heuristics. Changing any of them changes which
region gets detected and how the page gets oriented.
"""

# Canonical output page (ISO-216 "A" ratio at ~150 DPI)
CANONICAL_WIDTH = 1240
CANONICAL_HEIGHT = 1754
TARGET_RATIO = 1.414

# Region detection
LIGHTNESS_PERCENTILE = 70
SATURATION_PERCENTILE = 35
PERCENTILE_SAMPLE_COUNT = 5000
MEDIAN_KSIZE = 5
CLOSE_KERNEL_SIZE = 5
APPROX_EPSILON = 0.02

# Candidate scoring
GEOMETRY_WEIGHT = 0.6
TEXTURE_WEIGHT = 0.4
AREA_WEIGHT = 0.2
AREA_COVER_FRACTION = 0.8
TEXTURE_VARIANCE_NORM = 800.0
TEXTURE_SAMPLE_WIDTH = 480
TEXTURE_SAMPLE_HEIGHT = 680
TEXTURE_FALLBACK_SCORE = 0.2

# Edge fallback
BLUR_KSIZE = 5
CANNY_LOW = 50
CANNY_HIGH = 150

# Enhancement
CLAHE_CLIP_LIMIT = 2.0
CLAHE_TILE_GRID = (8, 8)
BILATERAL_DIAMETER = 7
BILATERAL_SIGMA_COLOR = 50
BILATERAL_SIGMA_SPACE = 50

# Orientation
ROTATION_ANGLES = (0, 90, 180, 270)
UPRIGHT_VARIANCE_NORM = 1200.0
UPRIGHT_FALLBACK_SCORE = 0.3
BAND_FRACTION = 0.2
FLIP_MARGIN = 8

# Scan list
THUMBNAIL_SIZE = (160, 200)

WHITE = (255, 255, 255, 255)
