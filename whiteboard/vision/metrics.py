import time
from collections import deque

class MetricsCollector:
    def __init__(self, window: int = 30):
        self.frame_times = deque(maxlen=window)

    def update(self, now: float = None) -> float:
        """Вызывается каждый кадр. Возвращает текущий FPS."""
        current_time = time.perf_counter() if now is None else now
        self.frame_times.append(current_time)

        if len(self.frame_times) < 2:
            return 0.0

        # FPS = (число кадров - 1) / (время между первым и последним)
        elapsed = self.frame_times[-1] - self.frame_times[0]
        if elapsed <= 0:
            return 0.0
        return (len(self.frame_times) - 1) / elapsed

    def reset(self):
        self.frame_times.clear()
