import cv2
import numpy as np
from PySide6.QtGui import QImage

RED_BGR = (0, 0, 255)
GREEN_BGR = (0, 255, 0)
BLUE_BGR = (255, 0, 0)


def blank_frame(width=320, height=240):
    return np.zeros((height, width, 3), dtype=np.uint8)


def frame_with_square(x, y, size, color=RED_BGR, width=320, height=240):
    frame = blank_frame(width, height)
    frame[y:y + size, x:x + size] = color
    return frame


def frame_with_circle(center, radius, color=GREEN_BGR, width=320, height=240):
    frame = blank_frame(width, height)
    cv2.circle(frame, center, radius, color, -1)
    return frame


def blank_image_like(image: QImage, color) -> QImage:
    blank = QImage(image.width(), image.height(), image.format())
    blank.fill(color)
    return blank


def is_ink(image: QImage, x: int, y: int, rgb) -> bool:
    """Пиксель окрашен цветом rgb (с допуском на сглаживание)."""
    c = image.pixelColor(x, y)
    return all(abs(a - b) <= 60 for a, b in zip((c.red(), c.green(), c.blue()), rgb))
