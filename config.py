import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LABEL_STRATEGIES = ("offset", "strip")


def _get_env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip() in {"1", "true", "True", "yes", "YES", "y"}


def _get_env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        result = int(val)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc
    if minimum is not None and result < minimum:
        raise ValueError(f"Environment variable {name} must be >= {minimum}")
    return result


@dataclass
class Config:
    max_timers: int = 16
    id_seed: int = 1
    label_offset: int = 4
    label_max_length: int = 512
    label_strategy: str = "offset"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Path = Path("logs")


def load_config(env_path: Optional[Path] = None) -> Config:
    if env_path is None:
        env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    label_strategy = os.getenv("TIMER_LABEL_STRATEGY", "offset").strip().lower()
    if label_strategy not in LABEL_STRATEGIES:
        raise ValueError(
            f"TIMER_LABEL_STRATEGY must be one of {', '.join(LABEL_STRATEGIES)}, got {label_strategy!r}"
        )

    debug = _get_env_bool("DEBUG", False)
    log_level = os.getenv("LOG_LEVEL", "DEBUG" if debug else "INFO").upper()

    return Config(
        max_timers=_get_env_int("TIMER_MAX_TIMERS", 16, minimum=1),
        id_seed=_get_env_int("TIMER_ID_SEED", 1, minimum=1),
        label_offset=_get_env_int("TIMER_LABEL_OFFSET", 4, minimum=0),
        label_max_length=_get_env_int("TIMER_LABEL_MAX_LENGTH", 512, minimum=0),
        label_strategy=label_strategy,
        debug=debug,
        log_level=log_level,
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
    )


def setup_logging(log_level: str = "INFO", log_dir: Path = Path("logs")) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)

    log_path = log_dir / "timers.log"
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
    )
