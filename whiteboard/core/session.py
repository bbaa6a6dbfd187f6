from typing import Optional

from loguru import logger

from ..canvas.canvas import StrokeRenderer
from ..vision.color_profiles import ColorProfile, ColorProfileRegistry, DEFAULT_PROFILES
from ..vision.detector import ColorDetector, Point
from ..vision.frame_data import FrameData


class DrawingSession:
    """
    Один такт конвейера: кадр -> детектор -> рендерер.
    Вызывается строго последовательно из одного потока.
    """

    def __init__(
        self,
        detector: ColorDetector,
        renderer: StrokeRenderer,
        profiles: ColorProfileRegistry = DEFAULT_PROFILES,
        profile_name: str = "red",
    ):
        self.detector = detector
        self.renderer = renderer
        self.profiles = profiles
        self._profile: ColorProfile = profiles.lookup(profile_name)

    @property
    def profile(self) -> ColorProfile:
        return self._profile

    def set_profile(self, name: str) -> ColorProfile:
        # lookup до очистки: неизвестное имя не должно стирать рисунок
        profile = self.profiles.lookup(name)
        self.renderer.clear()
        self._profile = profile
        logger.info(f"Color profile switched to {profile.name}, canvas cleared")
        return profile

    def clear(self):
        self.renderer.clear()
        logger.info("Canvas cleared by user")

    def process_frame(self, frame) -> Optional[Point]:
        if frame is None or frame.size == 0:
            logger.debug("Empty frame, tick skipped")
            return None

        point = self.detector.detect(frame, self._profile)
        self.renderer.feed(point, self._profile.draw_color)
        return point

    def process(self, frame_data: FrameData) -> FrameData:
        """Заполняет point/is_tracking в frame_data. Пустой кадр пропускается."""
        if frame_data.raw_frame is None:
            frame_data.point = None
            frame_data.is_tracking = False
            return frame_data

        frame_data.point = self.process_frame(frame_data.raw_frame)
        frame_data.is_tracking = frame_data.point is not None
        return frame_data
