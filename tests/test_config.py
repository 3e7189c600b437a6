"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest
import yaml

from thermalabel.config import AppConfig, ConfigError, Settings, load_config
from thermalabel.models.label import LabelDimensions
from thermalabel.models.printer import BluetoothConnection, SerialConnection, TCPConnection


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_uses_defaults(self):
        """A missing config file is not an error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_config(Path(tmpdir) / "config.yaml")

            assert config == AppConfig()

    def test_empty_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("")

            config = load_config(path)

            assert config.printer is None
            assert config.default_label == "40x30"

    def test_bluetooth_printer(self):
        """Load a Bluetooth printer with pacing overrides."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_yaml = {
                "printer": {
                    "name": "desk",
                    "connection": {"type": "bluetooth", "address": "AA:BB:CC:DD:EE:FF"},
                    "chunk_size": 120,
                    "chunk_delay": 0.05,
                },
                "dither": False,
            }
            path = Path(tmpdir) / "config.yaml"
            with open(path, "w") as f:
                yaml.dump(config_yaml, f)

            config = load_config(path)

            assert isinstance(config.printer.connection, BluetoothConnection)
            assert config.printer.connection.write_characteristic.startswith("0000ff02")
            assert config.printer.chunk_size == 120
            assert config.printer.chunk_delay == 0.05
            assert config.printer.copy_delay == 0.5
            assert config.dither is False

    def test_serial_printer(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("printer:\n  connection:\n    type: serial\n    device: /dev/rfcomm0\n")

            config = load_config(path)

            assert isinstance(config.printer.connection, SerialConnection)
            assert config.printer.connection.baudrate == 115200

    def test_tcp_printer(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("printer:\n  connection:\n    type: tcp\n    host: bridge.local\n")

            config = load_config(path)

            assert isinstance(config.printer.connection, TCPConnection)
            assert config.printer.connection.port == 9100

    def test_custom_presets_replace_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_yaml = {
                "label_presets": {"small": {"width_mm": 25, "height_mm": 10}},
                "default_label": "small",
            }
            path = Path(tmpdir) / "config.yaml"
            with open(path, "w") as f:
                yaml.dump(config_yaml, f)

            config = load_config(path)

            assert config.get_label() == LabelDimensions(width_mm=25, height_mm=10)
            assert "40x30" not in config.label_presets

    def test_empty_keys_use_defaults(self):
        """Keys present with no value fall back to defaults."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("label_presets:\nfont_paths:\n")

            config = load_config(path)

            assert "40x30" in config.label_presets
            assert config.font_paths == []

    def test_invalid_yaml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("invalid: yaml: content: {{")

            with pytest.raises(ConfigError, match="Invalid YAML"):
                load_config(path)

    def test_non_mapping(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("- one\n- two\n")

            with pytest.raises(ConfigError, match="mapping"):
                load_config(path)

    def test_unknown_connection_type(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("printer:\n  connection:\n    type: usb\n    device: /dev/usb/lp0\n")

            with pytest.raises(ConfigError, match="Invalid configuration"):
                load_config(path)

    def test_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("printer:\n  connection:\n    type: tcp\n    host: x\n  chunk_size: 0\n")

            with pytest.raises(ConfigError, match="Invalid configuration"):
                load_config(path)


class TestAppConfig:
    """Tests for AppConfig model."""

    def test_default_values(self):
        config = AppConfig()

        assert config.printer is None
        assert config.dither is True
        assert set(config.label_presets) == {"40x30", "30x15", "40x20"}
        assert config.font_paths == []

    def test_get_default_label(self):
        assert AppConfig().get_label() == LabelDimensions(width_mm=40, height_mm=30)

    def test_get_named_label(self):
        assert AppConfig().get_label("30x15") == LabelDimensions(width_mm=30, height_mm=15)

    def test_unknown_label(self):
        with pytest.raises(ConfigError, match="Unknown label preset 'huge'"):
            AppConfig().get_label("huge")


class TestSettings:
    """Tests for environment settings."""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("THERMALABEL_CONFIG_FILE", "/etc/thermalabel.yaml")
        monkeypatch.setenv("THERMALABEL_DEBUG", "true")

        settings = Settings()

        assert settings.config_file == Path("/etc/thermalabel.yaml")
        assert settings.debug is True
