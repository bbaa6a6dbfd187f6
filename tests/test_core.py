import pytest

from whiteboard.config import AppConfig, DetectorConfig
from whiteboard.core.core import AppCore, check_camera_config, parse_args


def test_default_config_fits_camera():
    check_camera_config(AppConfig())


def test_rgb_order_rejected_for_camera():
    config = AppConfig(detector=DetectorConfig(color_order="rgb"))
    with pytest.raises(ValueError):
        check_camera_config(config)


def test_app_refuses_rgb_before_opening_camera():
    config = AppConfig(detector=DetectorConfig(color_order="rgb"))
    with pytest.raises(ValueError):
        AppCore(["whiteboard"], config)


def test_parse_args_passes_qt_arguments_through():
    args, qt_args = parse_args(["prog", "--config", "cfg.yaml", "-style", "Fusion"])
    assert args.config == "cfg.yaml"
    assert args.log_level == "INFO"
    assert qt_args == ["-style", "Fusion"]
