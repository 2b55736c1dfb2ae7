"""botflow.config - Layout configuration (layout.yaml + environment overrides)."""

from .layout_config import LayoutConfig, get_layout_config, reset_config

__all__ = ["LayoutConfig", "get_layout_config", "reset_config"]
