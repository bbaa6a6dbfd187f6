from .camera_service import CameraService, CameraError
from .color_profiles import ColorProfile, ColorProfileRegistry, DEFAULT_PROFILES, UnknownProfileError
from .detector import ColorDetector
from .frame_data import FrameData
