"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from webprep.config.constants import (
    DEFAULT_ANIMATION_DELAY,
    DEFAULT_ANIMATION_LOOP,
    DEFAULT_ANIMATION_PREFIX,
    DEFAULT_ANIMATION_WIDTH,
    DEFAULT_BASE_SIZE,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONVERT_COMMAND,
    DEFAULT_FILE_WORKERS,
    DEFAULT_IDENTIFY_COMMAND,
    DEFAULT_LOG_DIR,
    DEFAULT_MANIFEST_FILENAME,
    DEFAULT_MAX_IMAGE_HEIGHT,
    DEFAULT_MAX_IMAGE_WIDTH,
    DEFAULT_OUTPUT_SUFFIX,
    DEFAULT_PAGE_DENSITY,
    DEFAULT_RASTER_EXTENSION,
    DEFAULT_THUMBNAIL_COMMAND,
    DEFAULT_VECTOR_FORMATS,
)
from webprep.exceptions import ConfigurationError


class ResponsiveConfig(BaseModel):
    """Responsive size set configuration."""

    max_width: int = Field(default=DEFAULT_MAX_IMAGE_WIDTH, ge=1)
    max_height: int = Field(default=DEFAULT_MAX_IMAGE_HEIGHT, ge=1)
    base_size: int = Field(default=DEFAULT_BASE_SIZE, ge=1)
    # Formats whose reported geometry is not an upper bound (vector art)
    vector_formats: list[str] = Field(default_factory=lambda: list(DEFAULT_VECTOR_FORMATS))


class RenderConfig(BaseModel):
    """Rendering engine command configuration."""

    identify_command: list[str] = Field(default_factory=lambda: list(DEFAULT_IDENTIFY_COMMAND))
    convert_command: list[str] = Field(default_factory=lambda: list(DEFAULT_CONVERT_COMMAND))
    thumbnail_command: list[str] = Field(default_factory=lambda: list(DEFAULT_THUMBNAIL_COMMAND))
    page_density: int = Field(default=DEFAULT_PAGE_DENSITY, ge=1)
    animation_delay: int = Field(default=DEFAULT_ANIMATION_DELAY, ge=0)
    animation_loop: int = Field(default=DEFAULT_ANIMATION_LOOP, ge=0)
    animation_width: int = Field(default=DEFAULT_ANIMATION_WIDTH, ge=1)


class LayoutConfig(BaseModel):
    """Output tree layout configuration."""

    animation_prefix: str = DEFAULT_ANIMATION_PREFIX
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME
    raster_extension: str = DEFAULT_RASTER_EXTENSION


class ConcurrencyConfig(BaseModel):
    """Concurrency configuration."""

    file_workers: int = Field(default=DEFAULT_FILE_WORKERS, ge=1)


class WebprepSettings(BaseSettings):
    """Main configuration class for webprep."""

    model_config = SettingsConfigDict(
        env_prefix="WEBPREP_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    responsive: ResponsiveConfig = Field(default_factory=ResponsiveConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_dir: str = DEFAULT_LOG_DIR


@lru_cache
def get_settings() -> WebprepSettings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If the environment or webprep.yaml holds invalid values
    """
    try:
        return WebprepSettings()
    except (ValidationError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def reload_settings() -> WebprepSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
