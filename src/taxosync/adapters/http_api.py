"""Blocking ``ApiClient`` implementation on top of ``ResilientClient``."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Literal, cast

import httpx

from taxosync.adapters.http_resilience import ResilientClient
from taxosync.domain.ports.fetching import FetchFailure, FetchSuccess

if TYPE_CHECKING:
    from collections.abc import Coroutine, Mapping
    from types import TracebackType

    from taxosync.config.http_resilience import ResilienceConfig
    from taxosync.domain.ports.fetching import ApiClient, FetchOutcome, HttpMethod

log = getLogger(__name__)

SUPPORTED_METHODS = frozenset({"GET", "POST"})


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpApiClient:
    """Issue one request per call and report transport problems as values.

    Calls block until the response is read. The underlying ``ResilientClient``
    and its event loop are opened on the first call and shared by later ones,
    so the rate limit and response cache span the whole client lifetime.
    Call ``close`` (or use the client as a context manager) when done.
    """

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _runner: asyncio.Runner | None = field(default=None, init=False, repr=False)
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    def fetch(
        self,
        url: str,
        method: HttpMethod = "GET",
        body: Mapping[str, object] | None = None,
    ) -> FetchOutcome:
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        return self._run(self._fetch_async(url, method, body))

    def close(self) -> None:
        runner = self._runner
        if runner is None:
            return
        client = self._client
        self._runner = None
        self._client = None
        try:
            if client is not None:
                runner.run(client.aclose())
        finally:
            runner.close()

    def __enter__(self) -> HttpApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    def _run[T](self, coroutine: Coroutine[object, object, T]) -> T:
        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(coroutine)

    async def _fetch_async(
        self,
        url: str,
        method: HttpMethod,
        body: Mapping[str, object] | None,
    ) -> FetchOutcome:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        client = self._client
        try:
            if method == "POST":
                response = await client.post(url, json=dict(body or {}))
            else:
                response = await client.get(url)
            text = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.error("%s %s failed: %s", method, url, exc)
            return FetchFailure(reason=f"{type(exc).__name__}: {exc}")

        if not response.is_success:
            log.error("%s %s answered %s", method, url, response.status_code)
            return FetchFailure(
                reason=f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            )
        return FetchSuccess(text=text, status_code=response.status_code)


if TYPE_CHECKING:
    _client_check: ApiClient = HttpApiClient(resilience=cast("ResilienceConfig", object()))
