import configparser
import os
from pathlib import Path
from typing import Optional

from core.gtypes.errors import ConfigurationError

DEFAULTS = {
    "PATHS": {
        "DESCRIPTOR_DIR": "generator/config",
        "OUT_DIR": "src/types/GTypes",
        "TMP_DIR": "tmp",
        "DATA_SOURCE": "data/raw/G.json",
        "SUMMARY": "data/reports/gtypes_summary.md",
    },
    "GENERATOR": {
        "DIAGNOSTICS": "warn",
        "FORMATTER": "builtin",
        "HTTP_TIMEOUT": "30",
    },
}


class ConfigLoader:
    def __init__(self, config_path: Optional[Path] = None):
        # 项目根目录 (core/config/*)
        self.project_root = Path(__file__).resolve().parents[2]
        self.config_path = Path(config_path) if config_path else self.project_root / "conf" / "settings.ini"

        self.config = configparser.ConfigParser()
        self.config.optionxform = str
        self.config.read_dict(DEFAULTS)
        if self.config_path.exists():
            self.config.read(self.config_path, encoding="utf-8")

    def get(self, section, key):
        """获取配置值并自动展开用户路径 (~)"""
        val = self.config.get(section, key, fallback=None)
        if val and "~" in val:
            return os.path.expanduser(val)
        return val

    def path(self, key) -> Optional[Path]:
        """[PATHS] value resolved against the project root."""
        val = self.get("PATHS", key)
        if not val:
            return None
        p = Path(val)
        return p if p.is_absolute() else (self.project_root / p)

    def source(self) -> Optional[str]:
        """DATA_SOURCE is either a URL (kept verbatim) or a path."""
        val = self.get("PATHS", "DATA_SOURCE")
        if not val:
            return None
        if val.startswith(("http://", "https://")):
            return val
        return str(self.path("DATA_SOURCE"))

    def getfloat(self, section, key, default: float) -> float:
        try:
            return self.config.getfloat(section, key, fallback=default)
        except ValueError as exc:
            raise ConfigurationError(f"[{section}] {key} must be a number ({exc})", self.config_path) from exc
