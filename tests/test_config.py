# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from sleepqueue.config import QueueConfig
from sleepqueue.errors import InvalidConfigError

ENV_VARS = (
    "SLEEPQUEUE_INTERVAL_MS",
    "SLEEPQUEUE_FAIL_PENDING_ON_STOP",
    "SLEEPQUEUE_LOG_LEVEL",
    "SLEEPQUEUE_LOG_DIR",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        # setenv first so the variable is restored (or removed) after the test,
        # even when from_env() sets it from a .env file.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_from_env_defaults(clean_env) -> None:
    cfg = QueueConfig.from_env()
    assert cfg.interval_ms == 0
    assert cfg.fail_pending_on_stop is False
    assert cfg.log_level == "INFO"
    assert cfg.log_dir is None


def test_from_env_reads_prefixed_vars(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("SLEEPQUEUE_INTERVAL_MS", "250")
    clean_env.setenv("SLEEPQUEUE_FAIL_PENDING_ON_STOP", "yes")
    clean_env.setenv("SLEEPQUEUE_LOG_LEVEL", "debug")
    clean_env.setenv("SLEEPQUEUE_LOG_DIR", str(tmp_path))

    cfg = QueueConfig.from_env()
    assert cfg.interval_ms == 250
    assert cfg.fail_pending_on_stop is True
    assert cfg.log_level == "DEBUG"
    assert cfg.log_dir == tmp_path


@pytest.mark.parametrize(("raw", "expected"), [("abc", 0), ("-5", 0), ("", 0)])
def test_from_env_is_lenient_with_bad_interval(clean_env, raw: str, expected: int) -> None:
    clean_env.setenv("SLEEPQUEUE_INTERVAL_MS", raw)
    assert QueueConfig.from_env().interval_ms == expected


def test_from_mapping_accepts_interval_alias() -> None:
    assert QueueConfig.from_mapping({"interval": 15}).interval_ms == 15
    assert QueueConfig.from_mapping({"interval_ms": 30}).interval_ms == 30
    assert QueueConfig.from_mapping({}).interval_ms == 0


def test_from_mapping_is_strict() -> None:
    with pytest.raises(InvalidConfigError):
        QueueConfig.from_mapping({"interval": -1})
    with pytest.raises(InvalidConfigError):
        QueueConfig(interval_ms=-3)


def test_from_mapping_rejects_non_bool_flag() -> None:
    with pytest.raises(InvalidConfigError):
        QueueConfig.from_mapping({"fail_pending_on_stop": "false"})
    with pytest.raises(InvalidConfigError):
        QueueConfig(fail_pending_on_stop=1)  # type: ignore[arg-type]
    assert QueueConfig.from_mapping({"fail_pending_on_stop": True}).fail_pending_on_stop is True


def test_from_mapping_rejects_both_interval_keys() -> None:
    with pytest.raises(InvalidConfigError):
        QueueConfig.from_mapping({"interval": 1, "interval_ms": 2})


def test_with_options_overrides_only_given_fields(tmp_path: Path) -> None:
    base = QueueConfig(interval_ms=10, log_dir=tmp_path)

    cfg = base.with_options({"fail_pending_on_stop": True})
    assert cfg.interval_ms == 10
    assert cfg.fail_pending_on_stop is True
    assert cfg.log_dir == tmp_path
    assert base.with_options({"interval": 3}).interval_ms == 3


def test_from_env_loads_dotenv_without_overriding_process_env(clean_env, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "SLEEPQUEUE_INTERVAL_MS=40\nSLEEPQUEUE_LOG_LEVEL=debug\n",
        encoding="utf-8",
    )
    clean_env.chdir(tmp_path)
    clean_env.setenv("SLEEPQUEUE_LOG_LEVEL", "warning")

    cfg = QueueConfig.from_env()
    assert cfg.interval_ms == 40
    assert cfg.log_level == "WARNING"
