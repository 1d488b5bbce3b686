"""Settings loaded from environment variables (+ optional .env).

Every variable is prefixed with ``TIME_TICKER_``; see ``Settings.from_env``
for names and defaults.
"""
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TIME_TICKER"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path

    # ---- Timing ----
    tick_seconds: float
    lock_timeout: float

    # ---- UI ----
    demo_tasks: bool
    lang: str
    icon_path: Path

    @staticmethod
    def from_env() -> "Settings":
        lang = _env(_k("LANG"), "zh").strip().lower()
        return Settings(
            app_name=_env(_k("APP_NAME"), "TimeTicker"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            log_dir=_env_path(_k("LOG_DIR"), Path(".local/time_ticker")),
            tick_seconds=_env_float(_k("TICK_SECONDS"), 1.0),
            lock_timeout=_env_float(_k("LOCK_TIMEOUT"), 1.0),
            demo_tasks=_env_bool(_k("DEMO_TASKS"), True),
            lang=lang if lang in ("zh", "en") else "zh",
            icon_path=_env_path(_k("ICON_PATH"), Path("assets/logo.png")),
        )


_SETTINGS = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
