import numpy as np

from whiteboard.ui.ui import frame_to_qimage


def test_frame_to_qimage_swaps_channels():
    frame = np.zeros((20, 30, 3), dtype=np.uint8)
    frame[5, 7] = (255, 0, 0)  # BGR синий

    image = frame_to_qimage(frame)

    assert (image.width(), image.height()) == (30, 20)
    c = image.pixelColor(7, 5)
    assert (c.red(), c.green(), c.blue()) == (0, 0, 255)


def test_frame_to_qimage_owns_its_data():
    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    image = frame_to_qimage(frame)
    frame[:] = 255
    assert image.pixelColor(0, 0).red() == 0
