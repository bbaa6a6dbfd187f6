from typing import Optional, Dict, Tuple

import cv2
import numpy as np
from PySide6.QtCore import Qt
from PySide6.QtGui import QPainter, QImage, QPaintEvent
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QFrame, QSizePolicy, QStatusBar, QSlider
)

from whiteboard.canvas.canvas import RenderEngine
from whiteboard.core.session import DrawingSession


def frame_to_qimage(frame: np.ndarray) -> QImage:
    """BGR кадр -> независимая копия QImage (RGB888)."""
    rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    h, w, ch = rgb_frame.shape
    qt_image = QImage(rgb_frame.data, w, h, ch * w, QImage.Format_RGB888)
    return qt_image.copy()


# --- ВИДЖЕТ ХОЛСТА ---
class CanvasWidget(QWidget):
    def __init__(self, engine: RenderEngine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(320, 240)

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        self._engine.render_to_painter(painter, self.rect())
        painter.end()


# --- КОМПОНЕНТЫ UI ---
class ToolButton(QPushButton):
    def __init__(self, tooltip: str, icon_text: str, parent=None, size: int = 56):
        super().__init__(parent)
        self.setText(icon_text)
        self.setToolTip(tooltip)
        self.setFixedSize(size, size)
        self._size = size
        self._init_style()

    def _init_style(self):
        self.setStyleSheet(f"""
            QPushButton {{
                background-color: #FFFFFF; color: #333333; border: 2px solid #E0E0E0;
                border-radius: {self._size // 2}px; font-size: 22px; font-weight: bold;
            }}
            QPushButton:hover {{ background-color: #F5F6FA; border: 2px solid #BDC3C7; }}
        """)


class ProfileSwatchButton(ToolButton):
    def __init__(self, name: str, color_hex: str, size: int = 48, parent=None):
        self._name = name
        self._color_hex = color_hex
        self._is_selected = False
        super().__init__(tooltip=name, icon_text="", parent=parent, size=size)

    @property
    def profile_name(self) -> str:
        return self._name

    def set_selected(self, selected: bool):
        self._is_selected = selected
        self._init_style()

    def _init_style(self):
        border = "4px solid #5A7FFF" if self._is_selected else "2px solid #FFFFFF"
        self.setStyleSheet(f"""
            QPushButton {{
                background-color: {self._color_hex};
                border: {border};
                border-radius: {self._size // 2}px;
            }}
            QPushButton:hover {{ border: 3px solid #BDC3C7; }}
        """)


class TrackingHintWidget(QLabel):
    def __init__(self):
        super().__init__("Ожидание объекта...")
        self.setAlignment(Qt.AlignCenter)
        self.setFixedHeight(40)
        self._tracking = False
        self.setStyleSheet("background: #2C3E50; color: #ECF0F1; padding: 10px 20px; border-radius: 10px;")

    def update_hint(self, point: Optional[Tuple[int, int]], profile_name: str):
        if point is not None:
            self.setText(f"✏️ Рисование: ({point[0]}, {point[1]})")
        else:
            self.setText(f"👀 Поднесите объект цвета {profile_name} к камере")

        # Перекрашиваем только при смене состояния
        tracking = point is not None
        if tracking == self._tracking:
            return
        self._tracking = tracking
        if tracking:
            self.setStyleSheet("background: #27AE60; color: white; padding: 10px 20px; border-radius: 10px; font-weight: bold;")
        else:
            self.setStyleSheet("background: #2C3E50; color: #ECF0F1; padding: 10px 20px; border-radius: 10px;")


# --- MAIN WINDOW ---
class MainWindow(QMainWindow):
    def __init__(self, session: DrawingSession, engine: RenderEngine):
        super().__init__()
        self._session = session
        self._engine = engine

        self._swatches: Dict[str, ProfileSwatchButton] = {}

        self._init_ui()
        self._mark_active_profile()

    def _init_ui(self):
        self.setWindowTitle("Virtual Whiteboard")
        self.setStyleSheet("QMainWindow { background-color: #E9EEF3; }")

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(16, 16, 16, 16)
        main_layout.setSpacing(12)

        self._create_top_palette_bar(main_layout)

        self.canvas_widget = CanvasWidget(self._engine)
        main_layout.addWidget(self.canvas_widget, stretch=1)

        self._create_bottom_bar(main_layout)

    def _create_top_palette_bar(self, layout):
        frame = QFrame()
        frame.setFixedHeight(84)
        frame.setStyleSheet("QFrame { background: #2C3E50; border-radius: 16px; }")
        l = QHBoxLayout(frame)
        l.setContentsMargins(24, 12, 24, 12)

        self._active_profile_label = QLabel()
        self._active_profile_label.setStyleSheet("color: #ECF0F1; font-weight: 700; font-size: 20px; margin-right: 20px;")
        l.addWidget(self._active_profile_label)

        # Одна кнопка на каждый зарегистрированный профиль
        for profile in self._session.profiles:
            btn = ProfileSwatchButton(profile.name, profile.hex_color)
            btn.clicked.connect(lambda ch=False, name=profile.name: self.select_profile(name))
            l.addWidget(btn)
            self._swatches[profile.key] = btn

        l.addStretch()

        clear_btn = ToolButton("Очистить", "🗑")
        clear_btn.clicked.connect(self.clear_canvas)
        l.addWidget(clear_btn)

        exit_btn = ToolButton("Выход", "⏻")
        exit_btn.clicked.connect(self.close)
        l.addWidget(exit_btn)

        layout.addWidget(frame)

    def _create_bottom_bar(self, layout):
        frame = QFrame()
        frame.setFixedHeight(90)
        frame.setStyleSheet("background: #FFFFFF; border: 1px solid #BDC3C7; border-radius: 16px;")
        l = QHBoxLayout(frame)
        l.setSpacing(30)
        l.setContentsMargins(30, 5, 30, 5)

        self.tracking_hint = TrackingHintWidget()
        self.tracking_hint.setFixedWidth(340)
        l.addWidget(self.tracking_hint)

        l.addStretch()
        l.addLayout(self._create_opacity_slider())
        layout.addWidget(frame)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self._fps_label = QLabel("FPS: 0.0")
        self.status_bar.addPermanentWidget(self._fps_label)

    def _create_opacity_slider(self):
        container = QVBoxLayout()
        container.setSpacing(2)
        container.setAlignment(Qt.AlignCenter)

        label = QLabel("ПРОЗРАЧНОСТЬ ХОЛСТА")
        label.setAlignment(Qt.AlignCenter)
        label.setStyleSheet("border: none; font-size: 11px; font-weight: bold; color: #7f8c8d; letter-spacing: 1px;")

        init_val = int(round(self._engine.overlay_opacity * 100))
        value_label = QLabel(f"{init_val}%")
        value_label.setAlignment(Qt.AlignCenter)
        value_label.setStyleSheet("border: none; font-size: 16px; font-weight: 800; color: #2C3E50;")

        slider = QSlider(Qt.Horizontal)
        slider.setRange(0, 100)
        slider.setValue(init_val)
        slider.setFixedWidth(180)
        slider.valueChanged.connect(lambda v: (value_label.setText(f"{v}%"), self._on_opacity_change(v)))

        container.addWidget(label)
        container.addWidget(value_label)
        container.addWidget(slider)
        return container

    def _on_opacity_change(self, val):
        self._engine.set_overlay_opacity(val / 100.0)
        self.canvas_widget.update()

    def select_profile(self, name: str):
        profile = self._session.set_profile(name)
        self._mark_active_profile()
        self.status_bar.showMessage(f"Цвет: {profile.name}, холст очищен", 5000)
        self.canvas_widget.update()

    def clear_canvas(self):
        self._session.clear()
        self.status_bar.showMessage("Холст очищен", 5000)
        self.canvas_widget.update()

    def _mark_active_profile(self):
        active = self._session.profile
        self._active_profile_label.setText(f"🖌 {active.name}")
        for key, btn in self._swatches.items():
            btn.set_selected(key == active.key)

    def update_tracking(self, point: Optional[Tuple[int, int]], fps: float):
        self.tracking_hint.update_hint(point, self._session.profile.name)
        self._fps_label.setText(f"FPS: {fps:.1f}")
