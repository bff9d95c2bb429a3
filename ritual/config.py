import sys
from pathlib import Path

import yaml

RITUAL_DIR = Path.home() / ".ritual"
DB_PATH = RITUAL_DIR / "ritual.db"
CONFIG_PATH = RITUAL_DIR / "config.yaml"
LOG_FILE = RITUAL_DIR / "ritual.log"

NOTIFIERS = ("launchd", "memory", "none")


class Config:
    """Single-instance config manager. Load once, cache in memory."""

    _instance: "Config | None" = None
    _data: dict[str, object]

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = {}
            cls._instance._load()
        return cls._instance

    def _load(self) -> None:
        if not CONFIG_PATH.exists():
            self._data = {}
            return
        try:
            with CONFIG_PATH.open() as f:
                data = yaml.safe_load(f)
            self._data = data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError):
            self._data = {}

    def _save(self) -> None:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with CONFIG_PATH.open("w") as f:
            yaml.dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def reload(self) -> None:
        self._load()

    def get(self, key: str, default: object = None) -> object:
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        """Set config value and persist."""
        self._data[key] = value
        self._save()


_config = Config()


def get_notifier() -> str:
    """Notifier backend name. Defaults to launchd on macOS, none elsewhere."""
    val = _config.get("notifier")
    if isinstance(val, str) and val.strip().lower() in NOTIFIERS:
        return val.strip().lower()
    return "launchd" if sys.platform == "darwin" else "none"


def set_notifier(name: str) -> None:
    if name not in NOTIFIERS:
        raise ValueError(f"unknown notifier '{name}' (choose: {', '.join(NOTIFIERS)})")
    _config.set("notifier", name)
