"""Configuration management for thermalabel."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from thermalabel.models.label import LabelDimensions
from thermalabel.models.printer import PrinterConfig

logger = logging.getLogger(__name__)


def _default_presets() -> dict[str, LabelDimensions]:
    return {
        "40x30": LabelDimensions(width_mm=40, height_mm=30),
        "30x15": LabelDimensions(width_mm=30, height_mm=15),
        "40x20": LabelDimensions(width_mm=40, height_mm=20),
    }


class AppConfig(BaseModel):
    """Application configuration loaded from config.yaml."""

    printer: PrinterConfig | None = None
    dither: bool = True
    label_presets: dict[str, LabelDimensions] = Field(default_factory=_default_presets)
    default_label: str = "40x30"
    font_paths: list[Path] = Field(default_factory=list)

    def get_label(self, name: str | None = None) -> LabelDimensions:
        """Look up a label preset by name, or the default preset.

        Raises:
            ConfigError: If the preset does not exist.
        """
        key = name or self.default_label
        if key not in self.label_presets:
            available = ", ".join(sorted(self.label_presets)) or "none"
            raise ConfigError(f"Unknown label preset '{key}' (available: {available})")
        return self.label_presets[key]


class Settings(BaseSettings):
    """Environment-based settings."""

    model_config = SettingsConfigDict(
        env_prefix="THERMALABEL_",
        env_file=".env",
        extra="ignore",
    )

    config_file: Path = Path("config.yaml")
    debug: bool = False


def load_config(config_path: Path) -> AppConfig:
    """Load application configuration from YAML file.

    A missing file yields the default configuration.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
    """
    if not config_path.exists():
        logger.debug(f"Config file {config_path} not found, using defaults")
        return AppConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    # YAML returns None for empty keys
    if data.get("label_presets") is None:
        data.pop("label_presets", None)
    if data.get("font_paths") is None:
        data["font_paths"] = []

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


class ConfigError(Exception):
    """Exception raised for invalid configuration."""

    pass


# Global settings instance
settings = Settings()
