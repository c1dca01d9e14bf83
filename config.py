import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _get_env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return val.strip() in {"1", "true", "True", "yes", "YES", "y"}


def _get_env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc


def _get_env_optional_int(name: str) -> Optional[int]:
    val = os.getenv(name)
    if val is None or val == "":
        return None
    return _get_env_int(name, 0)


@dataclass
class Config:
    log_level: str
    log_dir: Path
    debug: bool
    timezone_name: Optional[str]
    alarm_sound_path: Path
    alarm_sound_generate: bool
    output_device_index: Optional[int]
    tick_interval_ms: int
    window_title: str


DEFAULT_SOUND_PATH = "data/alarm-tone.wav"
MIN_TICK_INTERVAL_MS = 200


def load_config(env_path: Optional[Path] = None) -> Config:
    if env_path is None:
        env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    debug = _get_env_bool("DEBUG", False)
    log_level = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    timezone_name = os.getenv("TIMEZONE") or None
    alarm_sound_path = Path(os.getenv("ALARM_SOUND_PATH", DEFAULT_SOUND_PATH))
    alarm_sound_generate = _get_env_bool("ALARM_SOUND_GENERATE", True)
    output_device_index = _get_env_optional_int("OUTPUT_DEVICE_INDEX")
    tick_interval_ms = max(MIN_TICK_INTERVAL_MS, _get_env_int("TICK_INTERVAL_MS", 1000))
    window_title = os.getenv("WINDOW_TITLE", "MyAlarmy")

    return Config(
        log_level=log_level,
        log_dir=log_dir,
        debug=debug,
        timezone_name=timezone_name,
        alarm_sound_path=alarm_sound_path,
        alarm_sound_generate=alarm_sound_generate,
        output_device_index=output_device_index,
        tick_interval_ms=tick_interval_ms,
        window_title=window_title,
    )


def setup_logging(log_level: str = "INFO", log_dir: Path = Path("logs")) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)

    log_path = log_dir / "wakeup.log"
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=[file_handler, console_handler],
        force=True,
    )
