"""Upstream personnel/offices API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final, Literal, cast

from .env import env_flag, env_float, env_str
from .errors import InvalidConfigurationValueError
from .http_resilience import SINGLE_ATTEMPT, CacheConfig, RateLimit, ResilienceConfig
from .storage import get_storage_config

DEFAULT_API_BASE_URL: Final[str] = "https://wauc.dipvvf.it/api"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0

LOCATIONS_PATH: Final[str] = "Dipartimento"
LOCATION_DETAILS_PATH: Final[str] = "Sedi/GetInfoSede?codSede={external_id}"
DIRECTORS_PATH: Final[str] = "Personale?codiciTipiPersonale=1,8"

LOCATIONS_VOCABULARY: Final[str] = "office_list"
DIRECTORS_VOCABULARY: Final[str] = "director_list"

CacheMode = Literal["off", "memory", "sqlite"]
_CACHE_MODES: Final[frozenset[str]] = frozenset({"off", "memory", "sqlite"})


@dataclass(frozen=True, slots=True)
class VvfConfig:
    """Endpoints and HTTP behaviour for the upstream API."""

    base_url: str
    resilience: ResilienceConfig
    detail_resilience: ResilienceConfig

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path}"

    @property
    def locations_url(self) -> str:
        return self.url(LOCATIONS_PATH)

    @property
    def location_details_url_template(self) -> str:
        return self.url(LOCATION_DETAILS_PATH)

    @property
    def directors_url(self) -> str:
        return self.url(DIRECTORS_PATH)


def _cache_config(mode: str) -> CacheConfig | None:
    if mode not in _CACHE_MODES:
        raise InvalidConfigurationValueError("TAXOSYNC_HTTP_CACHE", mode, "off, memory or sqlite")
    if mode == "off":
        return None
    backend = cast(Literal["memory", "sqlite"], mode)
    sqlite_path = str(get_storage_config().http_cache_path()) if backend == "sqlite" else None
    return CacheConfig(backend=backend, sqlite_path=sqlite_path, default_ttl_seconds=3600.0)


def get_vvf_config(*, resilience: ResilienceConfig | None = None) -> VvfConfig:
    base_url = env_str("TAXOSYNC_API_BASE_URL", DEFAULT_API_BASE_URL)
    timeout = env_float("TAXOSYNC_HTTP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
    verify_tls = env_flag("TAXOSYNC_HTTP_VERIFY_TLS", default=True)
    cache_mode = env_str("TAXOSYNC_HTTP_CACHE", "off").lower()

    effective = resilience or ResilienceConfig(
        name="vvf",
        timeout_seconds=timeout,
        verify_tls=verify_tls,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )
    # only detail lookups may be cached; listings always hit the API
    details = replace(
        effective,
        name=f"{effective.name}-details",
        retry=SINGLE_ATTEMPT,
        cache=_cache_config(cache_mode),
    )
    return VvfConfig(base_url=base_url, resilience=effective, detail_resilience=details)
