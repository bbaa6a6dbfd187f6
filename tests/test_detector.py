import numpy as np
import pytest

from whiteboard.config import DetectorConfig
from whiteboard.vision.color_profiles import lookup
from whiteboard.vision.detector import ColorDetector

from tests.helpers import (
    BLUE_BGR, RED_BGR, blank_frame, frame_with_circle, frame_with_square,
)


@pytest.fixture
def detector():
    return ColorDetector()


def assert_near(point, expected, tol=2):
    assert point is not None
    assert abs(point[0] - expected[0]) <= tol
    assert abs(point[1] - expected[1]) <= tol


def test_red_square_centroid(detector):
    frame = frame_with_square(100, 100, 30)
    point = detector.detect(frame, lookup("red"))
    assert_near(point, (115, 115))
    assert isinstance(point[0], int) and isinstance(point[1], int)


def test_green_circle_centroid(detector):
    frame = frame_with_circle((160, 120), 20)
    assert_near(detector.detect(frame, lookup("green")), (160, 120))


def test_blob_below_min_area_is_rejected(detector):
    frame = frame_with_square(100, 100, 20)
    assert detector.detect(frame, lookup("red")) is None


def test_no_pixels_in_range(detector):
    frame = frame_with_square(100, 100, 40, color=BLUE_BGR)
    assert detector.detect(frame, lookup("red")) is None
    assert not detector.last_mask.any()


def test_blue_object_found_with_blue_profile(detector):
    frame = frame_with_square(100, 100, 40, color=BLUE_BGR)
    assert_near(detector.detect(frame, lookup("blue")), (120, 120))


@pytest.mark.parametrize("frame", [None, np.zeros((0, 0, 3), dtype=np.uint8)])
def test_missing_or_empty_frame(detector, frame):
    assert detector.detect(frame, lookup("red")) is None


def test_speckle_noise_is_removed(detector):
    frame = blank_frame()
    for x in range(20, 300, 15):
        frame[200:203, x:x + 3] = RED_BGR
    assert detector.detect(frame, lookup("red")) is None


def test_noise_does_not_move_centroid(detector):
    frame = frame_with_square(100, 100, 30)
    frame[10:13, 10:13] = RED_BGR
    frame[220:223, 300:303] = RED_BGR
    assert_near(detector.detect(frame, lookup("red")), (115, 115))


def test_largest_blob_wins(detector):
    frame = frame_with_square(20, 20, 30)
    frame[120:180, 200:260] = RED_BGR
    assert_near(detector.detect(frame, lookup("red")), (230, 150))


def test_equal_areas_prefer_topmost(detector):
    frame = frame_with_square(200, 20, 30)
    frame[150:180, 20:50] = RED_BGR
    assert_near(detector.detect(frame, lookup("red")), (215, 35))


def test_equal_areas_same_row_prefer_leftmost(detector):
    frame = frame_with_square(200, 100, 30)
    frame[100:130, 20:50] = RED_BGR
    assert_near(detector.detect(frame, lookup("red")), (35, 115))


def test_rgb_channel_order():
    detector = ColorDetector(DetectorConfig(color_order="rgb"))
    frame = frame_with_square(100, 100, 30, color=(255, 0, 0))
    assert_near(detector.detect(frame, lookup("red")), (115, 115))


def test_unsupported_channel_order():
    with pytest.raises(ValueError):
        ColorDetector(DetectorConfig(color_order="hsv"))


def test_min_area_is_configurable():
    detector = ColorDetector(DetectorConfig(min_area=100))
    frame = frame_with_square(100, 100, 20)
    assert_near(detector.detect(frame, lookup("red")), (110, 110))


def test_area_threshold_is_strict():
    # Без морфологии площадь контура прямоугольника w x h равна (w - 1) * (h - 1)
    detector = ColorDetector(DetectorConfig(erode_iterations=0, dilate_iterations=0))
    red = lookup("red")

    exact = blank_frame()
    exact[100:126, 100:121] = RED_BGR  # 20 * 25 == 500
    assert detector.detect(exact, red) is None

    above = blank_frame()
    above[100:127, 100:121] = RED_BGR  # 20 * 26 == 520
    assert_near(detector.detect(above, red), (110, 113))


def test_zero_moment_contour_gives_no_point():
    detector = ColorDetector(DetectorConfig(min_area=-1, erode_iterations=0, dilate_iterations=0))
    frame = blank_frame()
    frame[100, 100] = RED_BGR
    assert detector.detect(frame, lookup("red")) is None


def test_buffers_follow_frame_size(detector):
    small = frame_with_square(50, 50, 30, width=160, height=120)
    large = frame_with_square(300, 200, 30, width=640, height=480)

    assert_near(detector.detect(small, lookup("red")), (65, 65))
    assert detector.last_mask.shape == (120, 160)
    assert_near(detector.detect(large, lookup("red")), (315, 215))
    assert detector.last_mask.shape == (480, 640)


def test_detection_is_independent_per_frame(detector):
    red = lookup("red")
    assert detector.detect(frame_with_square(100, 100, 30), red) is not None
    assert detector.detect(blank_frame(), red) is None
    assert_near(detector.detect(frame_with_square(200, 50, 30), red), (215, 65))
