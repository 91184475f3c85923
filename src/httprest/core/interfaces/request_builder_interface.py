from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from httprest.core.interfaces.request_definitions import IHttpRequestDefinition

if TYPE_CHECKING:
    from httprest.core.domain.attribute import HttpClientAttribute
    from httprest.core.domain.request_message import HttpRequestMessage

TRequest = TypeVar("TRequest", bound=IHttpRequestDefinition)


class IHttpClientRequestBuilder(ABC, Generic[TRequest]):
    """Turns one request capability into a mutation of the request message.

    Builders are registered in order on
    :class:`~httprest.core.config.options.HttpClientOptions`; for a given
    capability the first builder whose :meth:`can_build` accepts it is used.
    """

    @property
    @abstractmethod
    def type(self) -> type[TRequest]:
        """The capability interface this builder consumes."""

    def can_build(self, target_type: type) -> bool:
        """Check whether this builder applies to ``target_type``.

        Args:
            target_type: A capability interface or a concrete request type

        Returns:
            True when ``target_type`` implements this builder's capability
        """
        return isinstance(target_type, type) and issubclass(target_type, self.type)

    @abstractmethod
    def build(
        self,
        attribute: HttpClientAttribute,
        request: TRequest,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        """Apply the request's capability to ``message``.

        Args:
            attribute: The mapping metadata of the request
            request: The request object
            message: The message being assembled

        Returns:
            The updated message
        """
