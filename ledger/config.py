"""Runtime settings read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from ledger.errors import InvalidSelectionError
from ledger.windows import RANGE_KEYS

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _should_load_dotenv() -> bool:
    ledger_env = os.getenv("LEDGER_ENV", "dev").strip().lower()
    return ledger_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


@dataclass(frozen=True)
class Settings:
    seed_path: str = "data/seed.json"
    default_range: str = "all"
    align_to_day: bool = False
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    default_range = (env.get("LEDGER_DEFAULT_RANGE") or "all").strip()
    if default_range not in RANGE_KEYS:
        raise InvalidSelectionError("range", default_range, RANGE_KEYS)

    align_raw = (env.get("LEDGER_ALIGN_TO_DAY") or "").strip().lower()
    log_level = (env.get("LEDGER_LOG_LEVEL") or "INFO").strip().upper()

    return Settings(
        seed_path=(env.get("LEDGER_SEED_PATH") or "data/seed.json").strip(),
        default_range=default_range,
        align_to_day=align_raw in _TRUE_VALUES,
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        logger.warning("unknown_log_level level=%s; falling back to INFO", level)
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=_LOG_FORMAT)
