from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from omegaconf import OmegaConf
from loguru import logger


@dataclass
class CameraConfig:
    index: int = 0
    width: int = 800
    height: int = 600
    fps: int = 30
    mirror: bool = True


@dataclass
class DetectorConfig:
    """Параметры цветовой сегментации."""

    min_area: float = 500.0
    kernel_size: int = 5
    erode_iterations: int = 2
    dilate_iterations: int = 2
    # Порядок каналов входного кадра: "bgr" | "rgb". Приложение с камерой принимает только "bgr"
    color_order: str = "bgr"


@dataclass
class RendererConfig:
    line_width: float = 5.0
    dot_radius: float = 2.0
    background: str = "#FFFFFF"
    antialiasing: bool = True


@dataclass
class ProfileConfig:
    lower: List[int]
    upper: List[int]
    draw_color: List[int]


@dataclass
class AppConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    renderer: RendererConfig = field(default_factory=RendererConfig)
    default_profile: str = "red"
    tick_interval_ms: int = 16
    overlay_opacity: float = 0.6
    # Дополнительные профили поверх встроенных (Red, Green, Blue, Yellow)
    profiles: Dict[str, ProfileConfig] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, cfg_path: str) -> "AppConfig":
        cfg = OmegaConf.load(cfg_path)

        camera_cfg = cfg.get("camera", None) or {}
        detector_cfg = cfg.get("detector", None) or {}
        renderer_cfg = cfg.get("renderer", None) or {}

        camera = CameraConfig(
            index=int(camera_cfg.get("index", 0)),
            width=int(camera_cfg.get("width", 800)),
            height=int(camera_cfg.get("height", 600)),
            fps=int(camera_cfg.get("fps", 30)),
            mirror=bool(camera_cfg.get("mirror", True)),
        )

        color_order = str(detector_cfg.get("color_order", "bgr")).lower()
        if color_order not in ("bgr", "rgb"):
            raise ValueError(f"AppConfig: unsupported detector.color_order '{color_order}' in {cfg_path}")

        kernel_size = int(detector_cfg.get("kernel_size", 5))
        if kernel_size < 1:
            raise ValueError(f"AppConfig: detector.kernel_size must be >= 1 in {cfg_path}")

        detector = DetectorConfig(
            min_area=float(detector_cfg.get("min_area", 500.0)),
            kernel_size=kernel_size,
            erode_iterations=int(detector_cfg.get("erode_iterations", 2)),
            dilate_iterations=int(detector_cfg.get("dilate_iterations", 2)),
            color_order=color_order,
        )

        renderer = RendererConfig(
            line_width=float(renderer_cfg.get("line_width", 5.0)),
            dot_radius=float(renderer_cfg.get("dot_radius", 2.0)),
            background=str(renderer_cfg.get("background", "#FFFFFF")),
            antialiasing=bool(renderer_cfg.get("antialiasing", True)),
        )

        profiles: Dict[str, ProfileConfig] = {}
        profiles_val = cfg.get("profiles", None) or {}
        for name, entry in profiles_val.items():
            try:
                profiles[str(name)] = ProfileConfig(
                    lower=[int(x) for x in entry["lower"]],
                    upper=[int(x) for x in entry["upper"]],
                    draw_color=[int(x) for x in entry["draw_color"]],
                )
            except KeyError as exc:
                raise ValueError(f"AppConfig: profile '{name}' is missing {exc} in {cfg_path}") from exc

        # Профили проверяются здесь, до открытия камеры
        from .vision.color_profiles import DEFAULT_PROFILES, profile_from_config

        try:
            registry = DEFAULT_PROFILES.extended(
                *(profile_from_config(name, entry) for name, entry in profiles.items())
            )
        except ValueError as exc:
            raise ValueError(f"AppConfig: invalid profile in {cfg_path}: {exc}") from exc

        default_profile = str(cfg.get("default_profile", "red"))
        if default_profile not in registry:
            raise ValueError(
                f"AppConfig: default_profile '{default_profile}' is not one of {registry.names()} in {cfg_path}"
            )

        overlay_opacity = float(cfg.get("overlay_opacity", 0.6))
        if not 0.0 <= overlay_opacity <= 1.0:
            raise ValueError(f"AppConfig: overlay_opacity must be within [0, 1] in {cfg_path}")

        logger.info(f"Loaded config from {cfg_path} ({len(profiles)} extra profiles)")

        return cls(
            camera=camera,
            detector=detector,
            renderer=renderer,
            default_profile=default_profile,
            tick_interval_ms=int(cfg.get("tick_interval_ms", 16)),
            overlay_opacity=overlay_opacity,
            profiles=profiles,
        )
