import cv2
import numpy as np
import pytest

from common.imaging import rotate_image
from image_preprocessing.enhancement import enhance
from image_preprocessing.orientation import (
    OrientationResult,
    upright_score,
    correct_rotation,
    band_means,
    needs_flip,
    fix_top_bottom,
    correct_orientation,
)
from image_preprocessing.scan_list import ScanList


def mean_abs_diff(a, b):
    return float(np.abs(a.astype(np.int16) - b.astype(np.int16)).mean())


def symmetric_page():
    """Dashed lines with equal ink in the top and bottom bands."""
    page = np.full((400, 400), 255, dtype=np.uint8)
    for y in range(48, 352, 16):
        for x in range(40, 360, 8):
            page[y:y + 8, x:x + 4] = 0
    return page


class TestEnhancement:
    @pytest.mark.parametrize("shape", [(120, 90), (120, 90, 3), (120, 90, 4)])
    def test_keeps_size_and_layout(self, shape):
        rng = np.random.default_rng(0)
        image = rng.integers(0, 256, size=shape, dtype=np.uint8)

        out = enhance(image)

        assert out.shape == shape
        assert out.dtype == np.uint8

    def test_color_output_is_gray_in_every_channel(self, document_photo):
        out = enhance(document_photo[:300, :300].copy())
        assert np.array_equal(out[:, :, 0], out[:, :, 1])
        assert np.array_equal(out[:, :, 1], out[:, :, 2])

    def test_text_stays_dark_on_white(self, text_page):
        out = enhance(text_page)
        assert out[:100].mean() > 200
        # first dashed line starts at (40, 160)
        assert out[163, 41] < 100


class TestUprightScore:
    def test_blank_page_scores_zero(self):
        assert upright_score(np.full((200, 200), 255, dtype=np.uint8)) == 0.0

    def test_horizontal_text_beats_vertical_text(self, text_page):
        upright = upright_score(text_page)
        sideways = upright_score(rotate_image(text_page, 90))

        assert 0.0 <= sideways < upright <= 1.0

    def test_mirror_rotations_tie(self, text_page):
        assert upright_score(text_page) == upright_score(rotate_image(text_page, 180))

    def test_opencv_failure_scores_fallback(self, text_page, monkeypatch):
        def broken(*args, **kwargs):
            raise cv2.error("Sobel failed")

        monkeypatch.setattr("image_preprocessing.orientation.cv2.Sobel", broken)

        assert upright_score(text_page) == 0.3


class TestCorrectRotation:
    def test_upright_keeps_zero(self, text_page):
        _, angle, score = correct_rotation(text_page)
        assert angle == 0
        assert score == upright_score(text_page)

    def test_upside_down_is_turned_back(self, text_page):
        rotated, angle, _ = correct_rotation(rotate_image(text_page, 180))

        assert angle == 180
        assert mean_abs_diff(rotated, text_page) < 2

    @pytest.mark.parametrize("turn,expected", [(90, 270), (270, 90)])
    def test_sideways_is_turned_back(self, text_page, turn, expected):
        rotated, angle, _ = correct_rotation(rotate_image(text_page, turn))

        assert angle == expected
        assert mean_abs_diff(rotated, text_page) < 2

    @pytest.mark.parametrize("turn", [0, 180])
    def test_symmetric_page_keeps_earlier_angle(self, turn):
        _, angle, _ = correct_rotation(rotate_image(symmetric_page(), turn))
        assert angle == 0

    def test_reports_status(self, text_page):
        messages = []
        correct_rotation(text_page, messages.append)
        assert len(messages) == 1
        assert messages[0].startswith("Auto-upright angle: 0°")


class TestTopBottomFix:
    @staticmethod
    def banded(top, bottom):
        image = np.full((100, 60), 100, dtype=np.uint8)
        image[:20] = top
        image[80:] = bottom
        return image

    def test_band_means(self):
        assert band_means(self.banded(10, 200)) == (10.0, 200.0)

    def test_needs_flip_boundary(self):
        assert needs_flip(self.banded(100, 109))
        assert not needs_flip(self.banded(100, 108))
        assert not needs_flip(self.banded(100, 107))

    def test_brighter_bottom_flips(self):
        image = self.banded(100, 109)
        fixed, flipped = fix_top_bottom(image)

        assert flipped
        assert fixed[:20].mean() == pytest.approx(109, abs=1)

    @pytest.mark.parametrize("bottom", [107, 108, 60])
    def test_within_margin_keeps_page(self, bottom):
        image = self.banded(100, bottom)
        fixed, flipped = fix_top_bottom(image)

        assert not flipped
        assert fixed is image

    def test_reports_status_only_when_flipping(self):
        messages = []
        fix_top_bottom(self.banded(100, 100), messages.append)
        assert messages == []

        fix_top_bottom(self.banded(100, 200), messages.append)
        assert len(messages) == 1
        assert messages[0].startswith("180° fix applied")


class TestCorrectOrientation:
    def test_upright_page(self, text_page):
        result = correct_orientation(text_page)

        assert result.angle == 0
        assert not result.flipped
        assert result.total_angle == 0
        assert np.array_equal(result.image, text_page)

    def test_upside_down_page(self, text_page):
        result = correct_orientation(rotate_image(text_page, 180))

        assert result.angle == 180
        assert not result.flipped
        assert result.total_angle == 180
        assert mean_abs_diff(result.image, text_page) < 2

    @pytest.mark.parametrize("turn,expected", [(90, 270), (270, 90)])
    def test_sideways_page_comes_back(self, text_page, turn, expected):
        result = correct_orientation(rotate_image(text_page, turn))

        assert result.angle == expected
        assert not result.flipped
        assert result.total_angle == expected
        assert mean_abs_diff(result.image, text_page) < 2

    def test_total_angle(self):
        image = np.zeros((2, 2), dtype=np.uint8)
        assert OrientationResult(image, 90, 1.0, True).total_angle == 270
        assert OrientationResult(image, 270, 1.0, True).total_angle == 90
        assert OrientationResult(image, 90, 1.0, False).total_angle == 90


class TestScanList:
    def test_append_returns_index(self):
        scans = ScanList()
        page = np.zeros((50, 40, 3), dtype=np.uint8)

        assert scans.append("a", page) == 0
        assert scans.append("b", page) == 1
        assert len(scans) == 2
        assert [entry.name for entry in scans] == ["a", "b"]
        assert scans[1].name == "b"

    def test_thumbnail(self):
        scans = ScanList()
        scans.append("page", np.full((1754, 1240, 3), 255, dtype=np.uint8))

        thumb = scans.thumbnail(0)

        assert thumb.shape == (200, 160, 3)
        assert scans.thumbnail(0, (80, 100)).shape == (100, 80, 3)
