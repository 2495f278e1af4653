from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

import pytest

from taxosync.config import (
    SINGLE_ATTEMPT,
    InvalidConfigurationValueError,
    configure_logging,
    env_flag,
    env_float,
    get_database_config,
    get_vvf_config,
)
from taxosync.config.vvf import DEFAULT_API_BASE_URL

ENV_VARS = (
    "TAXOSYNC_API_BASE_URL",
    "TAXOSYNC_HTTP_TIMEOUT",
    "TAXOSYNC_HTTP_VERIFY_TLS",
    "TAXOSYNC_HTTP_CACHE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_vvf_config_defaults() -> None:
    config = get_vvf_config()

    assert config.base_url == DEFAULT_API_BASE_URL
    assert config.locations_url == f"{DEFAULT_API_BASE_URL}/Dipartimento"
    assert config.directors_url == f"{DEFAULT_API_BASE_URL}/Personale?codiciTipiPersonale=1,8"
    assert config.location_details_url_template.format(external_id="42") == (
        f"{DEFAULT_API_BASE_URL}/Sedi/GetInfoSede?codSede=42"
    )
    assert config.resilience.verify_tls is True
    assert config.resilience.cache is None
    assert config.detail_resilience.retry == SINGLE_ATTEMPT
    assert config.detail_resilience.cache is None


def test_vvf_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TAXOSYNC_API_BASE_URL", "https://staging.example.org/api/")
    monkeypatch.setenv("TAXOSYNC_HTTP_TIMEOUT", "5")
    monkeypatch.setenv("TAXOSYNC_HTTP_VERIFY_TLS", "no")
    monkeypatch.setenv("TAXOSYNC_HTTP_CACHE", "memory")

    config = get_vvf_config()

    assert config.locations_url == "https://staging.example.org/api/Dipartimento"
    assert config.resilience.timeout_seconds == 5.0
    assert config.resilience.verify_tls is False
    assert config.resilience.cache is None
    assert config.detail_resilience.verify_tls is False
    assert config.detail_resilience.cache is not None
    assert config.detail_resilience.cache.backend == "memory"


def test_vvf_config_rejects_unknown_cache_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TAXOSYNC_HTTP_CACHE", "redis")

    with pytest.raises(InvalidConfigurationValueError, match="TAXOSYNC_HTTP_CACHE"):
        get_vvf_config()


def test_env_flag_and_float(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TAXOSYNC_TEST_FLAG", " TRUE ")
    monkeypatch.setenv("TAXOSYNC_TEST_NUMBER", "2.5")

    assert env_flag("TAXOSYNC_TEST_FLAG", default=False) is True
    assert env_flag("TAXOSYNC_TEST_MISSING", default=True) is True
    assert env_float("TAXOSYNC_TEST_NUMBER", 1.0) == 2.5

    monkeypatch.setenv("TAXOSYNC_TEST_FLAG", "maybe")
    with pytest.raises(InvalidConfigurationValueError):
        env_flag("TAXOSYNC_TEST_FLAG", default=False)


def test_database_config_prefers_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("TAXOSYNC_SQL_ECHO", "1")

    config = get_database_config()

    assert config.uri == "sqlite+pysqlite:///:memory:"
    assert config.echo is True


def test_database_config_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("TAXOSYNC_DATA_DIR", str(tmp_path))

    config = get_database_config()

    assert config.uri.startswith("sqlite+pysqlite:///")
    assert config.uri.endswith("taxosync.db")


def test_configure_logging_quietens_httpx() -> None:
    configure_logging(level="debug", force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
