# whiteboard/vision/camera_service.py
import time
from typing import Optional

import cv2
import numpy as np
from loguru import logger

from ..config import CameraConfig
from .frame_data import FrameData
from .metrics import MetricsCollector


class CameraError(RuntimeError):
    pass


class CameraService:
    # Порядок каналов кадров, которые отдает read_frame
    COLOR_ORDER = "bgr"

    def __init__(self, config: Optional[CameraConfig] = None, capture=None):
        self.config = config or CameraConfig()
        self.cap = capture if capture is not None else cv2.VideoCapture(self.config.index)
        if not self.cap.isOpened():
            raise CameraError(f"Не удалось открыть камеру {self.config.index}")

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.fps)

        self.metrics = MetricsCollector()
        self.mirror = self.config.mirror
        self.last_frame_time = time.perf_counter()
        logger.info(
            f"Camera {self.config.index} opened ({self.config.width}x{self.config.height} @ {self.config.fps} fps)"
        )

    @property
    def frame_size(self):
        """Фактический размер кадра (ширина, высота), который отдает устройство."""
        w = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)) or self.config.width
        h = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)) or self.config.height
        return w, h

    def read_frame(self) -> Optional[np.ndarray]:
        """
        Получить один кадр с камеры.
        :return: кадр (BGR), или None, если кадр не получен
        """
        if self.cap is None or not self.cap.isOpened():
            return None
        ret, frame = self.cap.read()
        if not ret or frame is None or frame.size == 0:
            return None
        if self.mirror:
            frame = cv2.flip(frame, 1)
        return frame

    def get_frame_data(self) -> FrameData:
        """
        Главный метод: возвращает данные текущего кадра.
        Поиск объекта на кадре выполняет DrawingSession.
        """
        frame_data = FrameData()

        # Измеряем задержку
        current_time = time.perf_counter()
        frame_data.latency_ms = (current_time - self.last_frame_time) * 1000
        self.last_frame_time = current_time

        frame_data.raw_frame = self.read_frame()
        if frame_data.raw_frame is None:
            return frame_data

        frame_data.fps = self.metrics.update()
        return frame_data

    def release(self):
        if self.cap is not None and self.cap.isOpened():
            self.cap.release()
            logger.info(f"Camera {self.config.index} released")

    def __del__(self):
        # cap может отсутствовать, если конструктор упал до его создания
        if getattr(self, "cap", None) is not None:
            self.release()
