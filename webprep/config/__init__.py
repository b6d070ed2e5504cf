"""Configuration module for webprep."""

from webprep.config.settings import (
    ConcurrencyConfig,
    LayoutConfig,
    RenderConfig,
    ResponsiveConfig,
    WebprepSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ConcurrencyConfig",
    "LayoutConfig",
    "RenderConfig",
    "ResponsiveConfig",
    "WebprepSettings",
    "get_settings",
    "reload_settings",
]
