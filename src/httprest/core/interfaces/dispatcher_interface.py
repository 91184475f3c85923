from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from httprest.core.domain.request_message import HttpRequestMessage
from httprest.core.domain.responses import HttpClientResponse


class IHttpClientDispatcherFactory(ABC):
    """Builds request messages and responses from the configured builders."""

    @abstractmethod
    def build_request(self, request: Any) -> HttpRequestMessage:
        pass

    @abstractmethod
    async def build_response(
        self, response: httpx.Response, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        pass


class IHttpClientDispatcher(ABC):
    """Sends request objects and returns :class:`HttpClientResponse` values."""

    @abstractmethod
    async def send(
        self, request: Any, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        """Send ``request``.

        Args:
            request: A request object carrying an http client attribute
            result_type: Type the response body is decoded into; an
                async-iterable type such as ``AsyncIterator[Item]`` streams
                the items

        Returns:
            The response; transport failures are reported through its
            ``exception`` rather than raised
        """
