from typing import Optional, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QBrush

from ..config import RendererConfig

Point = Tuple[int, int]
RGB = Tuple[int, int, int]


class StrokeRenderer:
    """
    Холст со штрихами и состояние пера.
    Перо поднято, пока last_point is None.
    """

    def __init__(self, width: int, height: int, config: Optional[RendererConfig] = None):
        self.width = width
        self.height = height
        self.config = config or RendererConfig()
        self.background_color = QColor(self.config.background)
        if not self.background_color.isValid():
            raise ValueError(f"Invalid background color: {self.config.background}")

        self.last_point: Optional[Point] = None

        self._image = QImage(width, height, QImage.Format_ARGB32)
        self._image.fill(self.background_color)

    @property
    def is_pen_down(self) -> bool:
        return self.last_point is not None

    def feed(self, point: Optional[Point], color: RGB):
        if point is None:
            self.lift_pen()
            return

        point = (int(point[0]), int(point[1]))
        qcolor = QColor(*color)
        if self.last_point is None:
            # Одиночная точка без предшественника тоже оставляет след
            self._draw_dot(point, qcolor)
        else:
            self._draw_segment(self.last_point, point, qcolor)
        self.last_point = point

    def lift_pen(self):
        self.last_point = None

    def clear(self):
        self._image.fill(self.background_color)
        self.last_point = None

    def _draw_dot(self, point: Point, color: QColor):
        painter = QPainter(self._image)
        self._configure_painter(painter)
        painter.setPen(Qt.NoPen)
        painter.setBrush(color)
        r = self.config.dot_radius
        painter.drawEllipse(QPointF(*point), r, r)
        painter.end()

    def _draw_segment(self, p1: Point, p2: Point, color: QColor):
        painter = QPainter(self._image)
        self._configure_painter(painter)
        pen = QPen(color)
        pen.setWidthF(self.config.line_width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)
        painter.drawLine(QPointF(*p1), QPointF(*p2))
        painter.end()

    def _configure_painter(self, painter: QPainter):
        painter.setRenderHint(QPainter.Antialiasing, self.config.antialiasing)

    @property
    def image(self) -> QImage:
        return self._image


class RenderEngine:
    """Сводит кадр камеры, холст и курсор в одно изображение для виджета."""

    def __init__(self, renderer: StrokeRenderer, overlay_opacity: float = 0.6):
        self.renderer = renderer
        self.camera_frame: Optional[QImage] = None
        self.overlay_opacity = overlay_opacity

        self.cursor_pos: Optional[Point] = None
        self.cursor_color = QColor(255, 255, 255)

    def set_camera_frame(self, image: QImage):
        self.camera_frame = image

    def set_overlay_opacity(self, opacity: float):
        self.overlay_opacity = max(0.0, min(1.0, opacity))

    def update_cursor(self, point: Optional[Point], color: RGB):
        self.cursor_pos = point
        self.cursor_color = QColor(*color)

    def fit_rect(self, target_rect: QRectF) -> QRectF:
        """Прямоугольник внутри target_rect с пропорциями холста, по центру."""
        w, h = self.renderer.width, self.renderer.height
        scale = min(target_rect.width() / w, target_rect.height() / h)
        out_w, out_h = w * scale, h * scale
        x = target_rect.x() + (target_rect.width() - out_w) / 2
        y = target_rect.y() + (target_rect.height() - out_h) / 2
        return QRectF(x, y, out_w, out_h)

    def render_to_painter(self, painter: QPainter, target_rect: QRectF):
        painter.save()
        painter.fillRect(target_rect, QColor("#2C3E50"))

        rect = self.fit_rect(QRectF(target_rect))
        scale = rect.width() / self.renderer.width
        painter.translate(rect.topLeft())
        painter.scale(scale, scale)

        full = QRectF(0, 0, self.renderer.width, self.renderer.height)
        if self.camera_frame is not None:
            painter.drawImage(full, self.camera_frame)

        if self.overlay_opacity > 0.01:
            painter.save()
            painter.setOpacity(self.overlay_opacity)
            painter.drawImage(full, self.renderer.image)
            painter.restore()

        if self.cursor_pos is not None:
            self._draw_cursor(painter)

        painter.restore()

    def _draw_cursor(self, painter: QPainter):
        x, y = self.cursor_pos
        center = QPointF(x, y)
        radius = max(8.0, self.renderer.config.line_width)

        painter.setPen(QPen(Qt.black, 4))
        painter.setBrush(Qt.NoBrush)
        painter.drawEllipse(center, radius, radius)

        color_with_alpha = QColor(self.cursor_color)
        color_with_alpha.setAlpha(150)
        painter.setPen(QPen(Qt.white, 2))
        painter.setBrush(QBrush(color_with_alpha))
        painter.drawEllipse(center, radius, radius)

        painter.setPen(Qt.NoPen)
        painter.setBrush(Qt.white)
        painter.drawEllipse(center, 2, 2)
