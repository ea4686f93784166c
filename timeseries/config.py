"""
Viewer settings from environment variables, optionally backed by a .env file.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import dotenv_values

from timeseries.navigator import TIME_MODES

logger = logging.getLogger(__name__)

CHANNELS = ("H", "E", "Z", "F")
OBSERVATORIES = (
    "BOU", "BRW", "BSL", "CMO", "DED", "FRD", "FRN",
    "GUA", "HON", "NEW", "SHU", "SIT", "SJG", "TUC",
)


@dataclass(frozen=True)
class Settings:
    channel: str = "H"
    observatory: Optional[str] = None
    timemode: str = "pasthour"
    width: int = 960              # chart width in pixels
    height: int = 300             # chart height in pixels
    point_radius: float = 3.0     # hovered marker radius
    log_level: str = "INFO"
    channels: Tuple[str, ...] = CHANNELS
    observatories: Tuple[str, ...] = OBSERVATORIES


def load_settings(env_file: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from TIMESERIES_* variables.

    Values from env_file are overridden by the process environment. Invalid
    values are logged and replaced by their defaults.
    """
    values = {}
    if env_file is not None:
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update(os.environ if environ is None else environ)

    defaults = Settings()

    timemode = values.get("TIMESERIES_TIMEMODE", defaults.timemode)
    if timemode not in TIME_MODES:
        logger.warning(f"Unknown TIMESERIES_TIMEMODE '{timemode}', using '{defaults.timemode}'")
        timemode = defaults.timemode

    log_level = values.get("TIMESERIES_LOG_LEVEL", defaults.log_level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning(f"Unknown TIMESERIES_LOG_LEVEL '{log_level}', using '{defaults.log_level}'")
        log_level = defaults.log_level

    return Settings(
        channel=values.get("TIMESERIES_CHANNEL", defaults.channel),
        observatory=values.get("TIMESERIES_OBSERVATORY") or defaults.observatory,
        timemode=timemode,
        width=_number(values, "TIMESERIES_WIDTH", defaults.width, int),
        height=_number(values, "TIMESERIES_HEIGHT", defaults.height, int),
        point_radius=_number(values, "TIMESERIES_POINT_RADIUS", defaults.point_radius, float),
        log_level=log_level,
    )


def _number(values: Mapping[str, str], name: str, default, kind):
    raw = values.get(name)
    if raw is None or raw == "":
        return default
    try:
        number = kind(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using {default}")
        return default
    if number <= 0:
        logger.warning(f"{name} must be positive, using {default}")
        return default
    return number
