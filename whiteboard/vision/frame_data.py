from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

@dataclass
class FrameData:
    # Входной кадр (BGR, numpy array), уже отзеркаленный
    raw_frame: Optional[np.ndarray] = None

    # Центр найденного объекта в пикселях кадра, None, если объект не найден
    point: Optional[Tuple[int, int]] = None

    # Метрики качества
    fps: float = 0.0
    latency_ms: float = 0.0

    # Служебные флаги
    is_tracking: bool = False      # Найден ли объект на этом кадре
