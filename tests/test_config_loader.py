from __future__ import annotations

from pathlib import Path

import pytest

from lightsense.core.config_loader import load_config
from lightsense.core.errors import ConfigLoadError, ConfigValidationError


@pytest.fixture(autouse=True)
def isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    return tmp_path / "cfg"


def _write_config(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_load_packaged_defaults() -> None:
    loaded = load_config()
    config = loaded.config
    assert config.adapter is None
    assert config.light.name_contains == ("LED", "Light")
    assert config.light.scan_window_s == 2.0
    assert config.sensor.service_uuid == "66831b50-1daf-180a-729c-4ecebfbd146b"
    assert config.sensor.name_contains == ()
    assert config.sensor.timeout_s == 60.0
    assert config.sensor.interval_s == 900.0
    assert len(loaded.sources) == 1
    assert loaded.warnings == ()


def test_user_config_overrides_per_key(isolated_xdg: Path) -> None:
    _write_config(
        isolated_xdg / "lightsense" / "bridge.yaml",
        """
adapter: hci1
light:
  name_contains: ["NW-"]
sensor:
  service_uuid: "0000181A-0000-1000-8000-00805F9B34FB"
  name_contains: ["ATC"]
""",
    )

    loaded = load_config()
    config = loaded.config
    assert config.adapter == "hci1"
    assert config.light.name_contains == ("NW-",)
    assert config.light.scan_window_s == 2.0
    assert config.sensor.service_uuid == "0000181a-0000-1000-8000-00805f9b34fb"
    assert config.sensor.name_contains == ("ATC",)
    assert config.sensor.timeout_s == 60.0
    assert len(loaded.sources) == 2


def test_explicit_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError):
        load_config(tmp_path / "missing.yaml")


def test_explicit_path_takes_precedence(isolated_xdg: Path, tmp_path: Path) -> None:
    _write_config(isolated_xdg / "lightsense" / "bridge.yaml", "light:\n  name_contains: [\"User\"]\n")
    explicit = _write_config(tmp_path / "explicit.yaml", "light:\n  name_contains: [\"Explicit\"]\n")

    loaded = load_config(explicit)
    assert loaded.config.light.name_contains == ("Explicit",)


def test_unknown_key_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "bad.yaml", "light:\n  name_contains: [\"LED\"]\n  colour: red\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_invalid_uuid_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "bad.yaml", "sensor:\n  service_uuid: \"not-a-uuid\"\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "dup.yaml",
        """
light:
  name_contains: ["A"]
  name_contains: ["B"]
""",
    )
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_shared_keywords_produce_warning(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "shared.yaml",
        """
light:
  name_contains: ["Home"]
sensor:
  name_contains: ["Home"]
""",
    )
    loaded = load_config(path)
    assert any("identical" in warning for warning in loaded.warnings)


def test_empty_file_keeps_defaults(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "empty.yaml", "")
    loaded = load_config(path)
    assert loaded.config.light.name_contains == ("LED", "Light")
