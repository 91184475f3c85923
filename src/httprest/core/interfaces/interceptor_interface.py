from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from httprest.core.domain.request_message import HttpRequestMessage
from httprest.core.domain.responses import HttpClientResponse


class IHttpRequestInterceptor(ABC):
    """Runs after the request message is built and before it is sent.

    Interceptors run in ascending ``order``. Returning a response
    short-circuits the dispatch and skips the transport entirely.
    """

    order: int = 0

    @abstractmethod
    async def intercept(
        self, request: Any, message: HttpRequestMessage
    ) -> HttpClientResponse[Any] | None:
        """Inspect or mutate ``message``.

        Args:
            request: The request object being dispatched
            message: The built request message

        Returns:
            A response to return instead of sending, or ``None`` to continue
        """


class IHttpResponseInterceptor(ABC):
    """Runs on every built response, in ascending ``order``."""

    order: int = 0

    @abstractmethod
    async def intercept(
        self, request: Any, response: HttpClientResponse[Any]
    ) -> HttpClientResponse[Any]:
        pass
