from pathlib import Path

import yaml

DUO_DIR = Path.home() / ".duo"
DB_PATH = DUO_DIR / "duo.db"
CONFIG_PATH = DUO_DIR / "config.yaml"
BACKUP_DIR = DUO_DIR / "backups"

DEFAULT_TIMEZONE = "America/Santiago"

_DEFAULTS: dict[str, str | None] = {
    "timezone": DEFAULT_TIMEZONE,
    "admin_pin": None,
    "default_viewer": "ambos",
    "log_level": "WARNING",
}


class Config:
    """Process-wide view of ~/.duo/config.yaml, read on first use."""

    _instance: "Config | None" = None
    _data: dict[str, object]

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = cls._read()
        return cls._instance

    @staticmethod
    def _read() -> dict[str, object]:
        # missing or unreadable file: run on defaults
        try:
            with CONFIG_PATH.open() as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            return {}
        return loaded if isinstance(loaded, dict) else {}

    def _write(self) -> None:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with CONFIG_PATH.open("w") as f:
            yaml.safe_dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def text(self, key: str) -> str | None:
        """Trimmed string value for `key`, or its default when blank/unset."""
        val = self._data.get(key)
        if val is None or not str(val).strip():
            return _DEFAULTS.get(key)
        return str(val).strip()

    def set(self, key: str, value: object) -> None:
        self._data[key] = value
        self._write()


_config = Config()


def get_timezone() -> str:
    """IANA name of the single timezone every calendar computation uses."""
    return _config.text("timezone") or DEFAULT_TIMEZONE


def get_admin_pin() -> str | None:
    """PIN gating fixed-block edits. None = admin disabled."""
    return _config.text("admin_pin")


def set_admin_pin(pin: str) -> None:
    _config.set("admin_pin", str(pin))


def get_default_viewer() -> str:
    return _config.text("default_viewer") or "ambos"


def get_log_level() -> str:
    return (_config.text("log_level") or "WARNING").upper()
