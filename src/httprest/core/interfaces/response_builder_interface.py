from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from httprest.core.domain.responses import HttpClientResponse, RestResponseContext


class IHttpClientResponseBuilder(ABC):
    """Turns a received response into an :class:`HttpClientResponse`."""

    @abstractmethod
    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        """Check whether this builder handles the status and requested result.

        Args:
            status_code: The HTTP status of the response
            result_type: The requested result type, ``None`` for no typed result

        Returns:
            True when this builder applies
        """

    @abstractmethod
    async def build(
        self, context: RestResponseContext, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        """Build the response.

        Args:
            context: The received message and serializer options
            result_type: The requested result type, ``None`` for no typed result

        Returns:
            The built response
        """
