import sys
import argparse
from typing import Optional, List

from loguru import logger
from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication, QMessageBox

from whiteboard.canvas.canvas import RenderEngine, StrokeRenderer
from whiteboard.config import AppConfig
from whiteboard.core.session import DrawingSession
from whiteboard.ui.ui import MainWindow, frame_to_qimage
from whiteboard.vision.camera_service import CameraError, CameraService
from whiteboard.vision.color_profiles import DEFAULT_PROFILES, profile_from_config
from whiteboard.vision.detector import ColorDetector


def check_camera_config(config: AppConfig):
    """
    Проверка настроек, которые зависят от источника кадров.
    CameraService отдает кадры в BGR, frame_to_qimage тоже ждет BGR.
    """
    if config.detector.color_order != CameraService.COLOR_ORDER:
        raise ValueError(
            f"detector.color_order '{config.detector.color_order}' does not match camera frames "
            f"({CameraService.COLOR_ORDER}); 'rgb' is only for frames from other sources"
        )


class AppCore:
    def __init__(self, sys_argv, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        check_camera_config(self.config)

        self.app = QApplication(sys_argv)
        self.app.setStyle("Fusion")

        self.camera: Optional[CameraService] = None
        self.camera_error: Optional[str] = None
        try:
            self.camera = CameraService(self.config.camera)
        except CameraError as e:
            logger.error(f"Camera error: {e}")
            self.camera_error = str(e)
            return

        # Холст строго по размеру кадра камеры
        self.cam_width, self.cam_height = self.camera.frame_size

        profiles = DEFAULT_PROFILES.extended(
            *(profile_from_config(name, cfg) for name, cfg in self.config.profiles.items())
        )

        self.renderer = StrokeRenderer(self.cam_width, self.cam_height, self.config.renderer)
        self.engine = RenderEngine(self.renderer, overlay_opacity=self.config.overlay_opacity)
        self.session = DrawingSession(
            ColorDetector(self.config.detector),
            self.renderer,
            profiles=profiles,
            profile_name=self.config.default_profile,
        )

        self.window = MainWindow(self.session, self.engine)
        ui_padding_w = 80
        ui_padding_h = 260
        self.window.resize(min(1600, self.cam_width + ui_padding_w), min(1000, self.cam_height + ui_padding_h))

        self.timer = QTimer()
        self.timer.timeout.connect(self._game_loop)
        self.app.aboutToQuit.connect(self.shutdown)

    def run(self) -> int:
        if self.camera is None:
            # Без камеры конвейер не запускается
            QMessageBox.critical(
                None,
                "Ошибка камеры",
                f"{self.camera_error}\nПроверьте, что камера подключена и не занята другой программой.",
            )
            return 1

        self.window.show()
        self.timer.start(self.config.tick_interval_ms)
        logger.info(f"Pipeline started with profile {self.session.profile.name}")
        return self.app.exec()

    def shutdown(self):
        if self.timer.isActive():
            self.timer.stop()
        if self.camera is not None:
            self.camera.release()

    def _game_loop(self):
        data = self.camera.get_frame_data()
        # Нет кадра: пропускаем такт, состояние пера не трогаем
        if data.raw_frame is None:
            logger.debug("No frame from camera, tick skipped")
            return

        self.session.process(data)

        self.engine.set_camera_frame(frame_to_qimage(data.raw_frame))
        self.engine.update_cursor(data.point, self.session.profile.draw_color)

        self.window.update_tracking(data.point, data.fps)
        self.window.canvas_widget.update()


def parse_args(argv: List[str]):
    parser = argparse.ArgumentParser(description="Virtual whiteboard: draw in the air with a colored object")
    parser.add_argument("--config", default=None, help="Path to a YAML config")
    parser.add_argument("--log-level", default="INFO", help="Loguru level (DEBUG, INFO, ...)")
    # Остальные аргументы передаются в QApplication
    return parser.parse_known_args(argv[1:])


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    args, qt_args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    config = AppConfig.from_yaml(args.config) if args.config else AppConfig()
    core = AppCore([argv[0]] + qt_args, config)
    return core.run()
