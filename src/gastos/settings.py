import dataclasses
import json
from pathlib import Path

from gastos.models import StatementLayout

CONFIG_DIR = Path.home() / ".config" / "gastos"
SETTINGS_PATH = CONFIG_DIR / "settings.json"

DEFAULT_DATA_DIR = Path.home() / "Documents" / "gastos"

STORE_FILENAME = "transactions.json"
MOVEMENTS_DIRNAME = "movements"

DEFAULTS = {
    "data_dir": str(DEFAULT_DATA_DIR),
    "account": "checking",
    "layout": {},
}


def load_settings() -> dict:
    if SETTINGS_PATH.exists():
        with open(SETTINGS_PATH) as f:
            saved = json.loads(f.read())
        return {**DEFAULTS, **saved}
    return dict(DEFAULTS)


def save_settings(settings: dict) -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w") as f:
        f.write(json.dumps(settings, indent=2) + "\n")


def get_data_dir() -> Path:
    return Path(load_settings()["data_dir"])


def get_store_path() -> Path:
    return get_data_dir() / STORE_FILENAME


def get_movements_dir() -> Path:
    return get_data_dir() / MOVEMENTS_DIRNAME


def get_account() -> str:
    return load_settings()["account"]


def get_layout(settings: dict | None = None) -> StatementLayout:
    """Statement layout with any `layout` overrides from settings applied."""
    if settings is None:
        settings = load_settings()
    overrides = settings.get("layout") or {}
    known = {f.name for f in dataclasses.fields(StatementLayout)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown layout setting(s): {', '.join(sorted(unknown))}")
    return StatementLayout(**overrides)
