from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator

import httpx

from httprest.core.domain.request_message import EXTENSION_KEY
from httprest.core.services.dispatcher_factory import IS_SECURED_OPTION

logger = logging.getLogger(__name__)

HttpClientAuthenticationHeaderValueProvider = Callable[[httpx.Request], str | None]
"""Returns the credentials for a request, or ``None`` to send no ``Authorization`` header."""

AsyncHttpClientAuthenticationHeaderValueProvider = Callable[
    [httpx.Request], Awaitable[str | None]
]


class AuthenticationHeaderValueAuth(httpx.Auth):
    """Completes the ``Authorization`` header of secured requests.

    The request builders leave the scheme (``Bearer`` by default) in the
    header; the provider supplies the value appended after it.
    """

    def __init__(
        self,
        provider: HttpClientAuthenticationHeaderValueProvider
        | AsyncHttpClientAuthenticationHeaderValueProvider,
    ) -> None:
        if provider is None:
            raise ValueError("provider must not be None")
        self._provider = provider

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        scheme = self._secured_scheme(request)
        if scheme is not None:
            value = self._provider(request)
            if inspect.isawaitable(value):
                if inspect.iscoroutine(value):
                    value.close()
                raise TypeError(
                    "An asynchronous authentication provider requires an AsyncClient"
                )
            self._apply(request, scheme, value)
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        scheme = self._secured_scheme(request)
        if scheme is not None:
            value = self._provider(request)
            if inspect.isawaitable(value):
                value = await value
            self._apply(request, scheme, value)
        yield request

    @staticmethod
    def _secured_scheme(request: httpx.Request) -> str | None:
        options = request.extensions.get(EXTENSION_KEY) or {}
        if not options.get(IS_SECURED_OPTION):
            return None
        scheme = request.headers.get("Authorization")
        return scheme.strip() if scheme else None

    @staticmethod
    def _apply(request: httpx.Request, scheme: str, value: str | None) -> None:
        if value is None:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("No credentials for %s; removing Authorization", request.url)
            del request.headers["Authorization"]
            return
        request.headers["Authorization"] = f"{scheme} {value}"
