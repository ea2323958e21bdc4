import json
import logging
import os
from pathlib import Path
import sys

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "docinliner.json"
CONFIG_ENV_VAR = "DOCINLINER_CONFIG"

DEFAULTS = {
    "parser": "html.parser",
    "svg_parser": "xml",
    "encoding": "utf-8",
    "max_import_depth": 32,
    "guard_import_cycles": True,
}


class Settings:
    _instance = None

    def __init__(self, config_path=None, **overrides):
        self.parser = DEFAULTS["parser"]
        self.svg_parser = DEFAULTS["svg_parser"]
        self.encoding = DEFAULTS["encoding"]
        self.max_import_depth = DEFAULTS["max_import_depth"]
        self.guard_import_cycles = DEFAULTS["guard_import_cycles"]

        self.config_path = Path(config_path) if config_path else None
        if self.config_path is not None:
            self._load(self.config_path)
        self.update(overrides)

    @staticmethod
    def default_config_path():
        """Config location: env override, else next to executable or in cwd."""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)
        if getattr(sys, 'frozen', False):
            return Path(sys.executable).parent / CONFIG_FILE_NAME
        return Path(CONFIG_FILE_NAME).resolve()

    @staticmethod
    def get_instance():
        if Settings._instance is None:
            path = Settings.default_config_path()
            Settings._instance = Settings(path if path.exists() else None)
            logger.debug(f"Settings: Created instance from {path if path.exists() else 'defaults'}")
        return Settings._instance

    @staticmethod
    def reset_instance():
        Settings._instance = None

    def _load(self, path):
        """Overlay values from a JSON file. A missing or broken file leaves defaults."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}. Using defaults.")
            return
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read config {path}: {e}")
            return
        if not isinstance(data, dict):
            logger.error(f"Config {path} must contain a JSON object, got {type(data).__name__}")
            return
        self.update(data)

    def update(self, values):
        for key, value in values.items():
            if value is None:
                continue
            if key not in DEFAULTS:
                logger.warning(f"Ignoring unknown setting '{key}'")
                continue
            # bool is an int subclass, so compare exact types
            expected = type(DEFAULTS[key])
            if type(value) is not expected:
                logger.warning(f"Ignoring setting '{key}': expected {expected.__name__}, got {value!r}")
                continue
            setattr(self, key, value)

    def as_dict(self):
        return {key: getattr(self, key) for key in DEFAULTS}

    def __repr__(self):
        return f"Settings({self.as_dict()!r})"
