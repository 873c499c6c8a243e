import pytest

from core.config import ConfigLoader
from core.gtypes.errors import ConfigurationError


def _settings(tmp_path, text):
    path = tmp_path / "settings.ini"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_apply_without_a_settings_file(tmp_path) -> None:
    cfg = ConfigLoader(tmp_path / "missing.ini")
    assert cfg.get("GENERATOR", "DIAGNOSTICS") == "warn"
    assert cfg.getfloat("GENERATOR", "HTTP_TIMEOUT", 5.0) == 30.0
    assert cfg.path("DESCRIPTOR_DIR") == cfg.project_root / "generator" / "config"


def test_url_source_is_kept_verbatim(tmp_path) -> None:
    cfg = ConfigLoader(_settings(tmp_path, "[PATHS]\nDATA_SOURCE = https://game.test/data.js\n"))
    assert cfg.source() == "https://game.test/data.js"


def test_malformed_number_is_a_configuration_error(tmp_path) -> None:
    path = _settings(tmp_path, "[GENERATOR]\nHTTP_TIMEOUT = soon\n")
    with pytest.raises(ConfigurationError, match="HTTP_TIMEOUT") as exc:
        ConfigLoader(path).getfloat("GENERATOR", "HTTP_TIMEOUT", 30.0)
    assert exc.value.path == str(path)
