from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import httpx

from httprest.core.common.exceptions import HttpRequestError, HttpRequestTimeoutError
from httprest.core.common.logging_utils import redact_headers, redact_text
from httprest.core.config.app_config import RestClientConfig
from httprest.core.domain.content import StringContent
from httprest.core.domain.request_message import HttpRequestMessage
from httprest.core.domain.responses import HttpClientResponse
from httprest.core.interfaces.dispatcher_interface import (
    IHttpClientDispatcher,
    IHttpClientDispatcherFactory,
)
from httprest.core.interfaces.interceptor_interface import (
    IHttpRequestInterceptor,
    IHttpResponseInterceptor,
)
from httprest.core.services.response_builders import is_stream_type

logger = logging.getLogger(__name__)


class HttpClientDispatcher(IHttpClientDispatcher):
    """Sends request objects through an ``httpx.AsyncClient``.

    Messages are built by the dispatcher factory, passed through the request
    interceptors, sent, turned into an :class:`HttpClientResponse` and passed
    through the response interceptors. Timeouts and transport failures are
    reported as 408 and 503 responses; errors raised while building the
    request or selecting a response builder propagate.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        factory: IHttpClientDispatcherFactory,
        config: RestClientConfig | None = None,
        *,
        auth: httpx.Auth | None = None,
        request_interceptors: Iterable[IHttpRequestInterceptor] = (),
        response_interceptors: Iterable[IHttpResponseInterceptor] = (),
    ) -> None:
        if client is None:
            raise ValueError("client must not be None")
        if factory is None:
            raise ValueError("factory must not be None")
        self._client = client
        self._factory = factory
        self._config = config or RestClientConfig()
        self._auth = auth
        self._request_interceptors = sorted(request_interceptors, key=lambda i: i.order)
        self._response_interceptors = sorted(
            response_interceptors, key=lambda i: i.order
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(
        self, request: Any, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        message = self._factory.build_request(request)

        for interceptor in self._request_interceptors:
            short_circuit = await interceptor.intercept(request, message)
            if short_circuit is not None:
                if self._config.enable_logging:
                    logger.info(
                        "Request %s %s short-circuited by %s",
                        message.method,
                        message.url,
                        type(interceptor).__name__,
                    )
                return await self._intercept_response(request, short_circuit)

        http_request = message.to_httpx_request(self._client)
        self._log_request(http_request, message)

        stream = is_stream_type(result_type)
        try:
            response = await asyncio.wait_for(
                self._client.send(
                    http_request,
                    stream=stream,
                    auth=self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT,
                ),
                timeout=self._config.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            if self._config.enable_logging:
                logger.warning(
                    "Request %s %s timed out after %ss",
                    http_request.method,
                    http_request.url,
                    self._config.timeout,
                )
            error = HttpRequestTimeoutError(
                f"The request timed out after {self._config.timeout} seconds.", exc
            )
            timeout_response: HttpClientResponse[Any] = HttpClientResponse(
                status_code=408, reason_phrase="Request Timeout", exception=error
            )
            return await self._intercept_response(request, timeout_response)
        except httpx.RequestError as exc:
            if self._config.enable_logging and logger.isEnabledFor(logging.ERROR):
                logger.error(
                    "Request %s %s failed: %s",
                    http_request.method,
                    http_request.url,
                    exc,
                    exc_info=True,
                )
            error = HttpRequestError(str(exc) or None, exc, status_code=503)
            failed_response: HttpClientResponse[Any] = HttpClientResponse(
                status_code=503, reason_phrase="Service Unavailable", exception=error
            )
            return await self._intercept_response(request, failed_response)

        self._log_response(response, stream)

        try:
            result = await self._factory.build_response(response, result_type)
        except BaseException:
            await response.aclose()
            raise

        return await self._intercept_response(request, result)

    async def _intercept_response(
        self, request: Any, response: HttpClientResponse[Any]
    ) -> HttpClientResponse[Any]:
        for interceptor in self._response_interceptors:
            response = await interceptor.intercept(request, response)
        return response

    def _log_request(self, http_request: httpx.Request, message: HttpRequestMessage) -> None:
        if not self._config.enable_logging or not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug(
            "Sending %s %s headers=%s",
            http_request.method,
            http_request.url,
            redact_headers(http_request.headers),
        )
        if self._config.log_request_body and isinstance(message.content, StringContent):
            logger.debug("Request body: %s", redact_text(message.content.text))

    def _log_response(self, response: httpx.Response, stream: bool) -> None:
        if not self._config.enable_logging:
            return
        if logger.isEnabledFor(logging.INFO):
            logger.info(
                "Received %s %s for %s %s",
                response.status_code,
                response.reason_phrase,
                response.request.method,
                response.request.url,
            )
        if (
            self._config.log_response_body
            and not stream
            and logger.isEnabledFor(logging.DEBUG)
        ):
            logger.debug(
                "Response headers=%s body=%s",
                redact_headers(response.headers),
                redact_text(response.text),
            )
