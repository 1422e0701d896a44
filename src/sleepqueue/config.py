# src/sleepqueue/config.py

"""Queue settings: explicit mappings, or environment variables (+ optional .env).

Design goals:
- One QueueConfig object per queue; the queue itself only needs `interval_ms`.
- Mappings are validated strictly (callers wrote them), env vars leniently.
- Nothing is read at import time.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from .errors import InvalidConfigError

ENV_PREFIX = "SLEEPQUEUE"

logger = logging.getLogger(__name__)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


def validate_interval(value: Any) -> int:
    """Interval in milliseconds: a non-negative int (bool is rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigError(f"interval must be a non-negative integer, got {value!r}")
    if value < 0:
        raise InvalidConfigError(f"interval must be a non-negative integer, got {value!r}")
    return value


def validate_flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidConfigError(f"{name} must be True or False, got {value!r}")
    return value


_OPTION_KEYS = frozenset({"interval", "interval_ms", "fail_pending_on_stop"})


def _read_options(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Validated QueueConfig field values for the options present in raw."""
    unknown = sorted(set(raw) - _OPTION_KEYS)
    if unknown:
        logger.debug("Ignoring unknown queue options: %s", ", ".join(map(str, unknown)))

    if "interval" in raw and "interval_ms" in raw:
        raise InvalidConfigError("give either interval or interval_ms, not both")

    out: dict[str, Any] = {}
    for key in ("interval", "interval_ms"):
        if key in raw:
            out["interval_ms"] = validate_interval(raw[key])
    if "fail_pending_on_stop" in raw:
        out["fail_pending_on_stop"] = validate_flag("fail_pending_on_stop", raw["fail_pending_on_stop"])
    return out


@dataclass(frozen=True, slots=True)
class QueueConfig:
    interval_ms: int = 0
    fail_pending_on_stop: bool = False

    # ---- logging (used by hosts calling setup_logging) ----
    log_level: str = "INFO"
    log_dir: Path | None = None

    def __post_init__(self) -> None:
        validate_interval(self.interval_ms)
        validate_flag("fail_pending_on_stop", self.fail_pending_on_stop)

    def with_options(self, raw: Mapping[str, Any]) -> QueueConfig:
        """Copy with the options in raw applied; same keys and checks as from_mapping()."""
        return replace(self, **_read_options(raw))

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> QueueConfig:
        """
        Build from a plain options mapping, e.g. {"interval": 20}.

        Recognized keys: interval (alias interval_ms), fail_pending_on_stop.
        Anything else is ignored.
        """
        return QueueConfig(**_read_options(raw))

    @staticmethod
    def from_env() -> QueueConfig:
        # .env is looked up from the working directory; it never overrides variables
        # already set in the process.
        load_dotenv(find_dotenv(usecwd=True), override=False)

        interval_ms = _env_int(_k("INTERVAL_MS"), 0)
        if interval_ms < 0:
            logger.warning("%s=%s is negative; using 0", _k("INTERVAL_MS"), interval_ms)
            interval_ms = 0

        return QueueConfig(
            interval_ms=interval_ms,
            fail_pending_on_stop=_env_bool(_k("FAIL_PENDING_ON_STOP"), False),
            log_level=_env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO",
            log_dir=_env_path(_k("LOG_DIR")),
        )
