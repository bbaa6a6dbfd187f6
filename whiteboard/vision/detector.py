# whiteboard/vision/detector.py
from typing import Optional, Tuple

import cv2
import numpy as np

from ..config import DetectorConfig
from .color_profiles import ColorProfile

Point = Tuple[int, int]

_CONVERSIONS = {
    "bgr": cv2.COLOR_BGR2HSV,
    "rgb": cv2.COLOR_RGB2HSV,
}


class ColorDetector:
    """
    Поиск цветного объекта на кадре.
    Возвращает центр масс самого крупного пятна нужного цвета или None.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()
        if self.config.color_order not in _CONVERSIONS:
            raise ValueError(f"Unsupported color order: {self.config.color_order}")
        self._conversion = _CONVERSIONS[self.config.color_order]

        k = max(1, int(self.config.kernel_size))
        self.kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (k, k))

        # Рабочие буферы переиспользуются, пока размер кадра не меняется
        self._hsv: Optional[np.ndarray] = None
        self._mask: Optional[np.ndarray] = None

    @property
    def last_mask(self) -> Optional[np.ndarray]:
        """Маска последнего обработанного кадра (после морфологии)."""
        return self._mask

    def detect(self, frame: Optional[np.ndarray], profile: ColorProfile) -> Optional[Point]:
        if frame is None or frame.size == 0:
            return None

        self._ensure_buffers(frame.shape[:2])

        # 1. Перевод в HSV
        self._hsv = cv2.cvtColor(frame, self._conversion, dst=self._hsv)

        # 2. Бинарная маска (границы включительно)
        lower = np.array(profile.lower, dtype=np.uint8)
        upper = np.array(profile.upper, dtype=np.uint8)
        self._mask = cv2.inRange(self._hsv, lower, upper, dst=self._mask)

        # 3. Открытие: сначала эрозия убирает шум, затем дилатация возвращает размер
        self._mask = cv2.erode(self._mask, self.kernel, dst=self._mask, iterations=self.config.erode_iterations)
        self._mask = cv2.dilate(self._mask, self.kernel, dst=self._mask, iterations=self.config.dilate_iterations)

        # 4. Только внешние контуры
        contours, _ = cv2.findContours(self._mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        # 5. Самый большой контур выше порога
        largest = self._select_largest(contours)
        if largest is None:
            return None

        # 6. Центр масс по моментам
        m = cv2.moments(largest)
        if m["m00"] == 0:
            return None
        return int(m["m10"] / m["m00"]), int(m["m01"] / m["m00"])

    def _select_largest(self, contours) -> Optional[np.ndarray]:
        """
        Контур с максимальной площадью, строго больше min_area.
        При равной площади побеждает контур, чья рамка выше, затем левее.
        """
        best = None
        best_area = 0.0
        best_origin = None
        for contour in contours:
            area = cv2.contourArea(contour)
            if area <= self.config.min_area:
                continue
            x, y, _, _ = cv2.boundingRect(contour)
            origin = (y, x)
            if best is None or area > best_area or (area == best_area and origin < best_origin):
                best = contour
                best_area = area
                best_origin = origin
        return best

    def _ensure_buffers(self, size: Tuple[int, int]):
        h, w = size
        if self._hsv is None or self._hsv.shape[:2] != (h, w):
            self._hsv = np.empty((h, w, 3), dtype=np.uint8)
            self._mask = np.empty((h, w), dtype=np.uint8)
