"""Request-to-HTTP mapping metadata and the decorators that attach it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, TypeVar

from httprest.core.domain.parameters import (
    BodyFormat,
    ContentType,
    DataFormat,
    Location,
    Method,
)
from httprest.core.interfaces.di_interface import Resolver
from httprest.core.interfaces.model_bases import InternalDTO

ATTRIBUTE_NAME = "__http_client_attribute__"

TRequest = TypeVar("TRequest", bound=type)


@dataclass
class HttpClientAttribute(InternalDTO):
    """Describes how a request object is mapped onto an HTTP message.

    Attributes:
        path: Relative request path, may contain ``{name}`` placeholders
        location: Message parts the request contributes to
        method: HTTP method
        data_format: Format of the carried data
        body_format: How the body is encoded
        content_type: Media type of the body
        accept: Value of the ``Accept`` header
        is_nullable: When true no body is written even if ``BODY`` is set
        is_secured: Whether an ``Authorization`` header must be applied
        scheme: Authorization scheme used for secured requests
    """

    path: str | None = None
    location: Location = Location.BODY
    method: Method = Method.POST
    data_format: DataFormat = DataFormat.JSON
    body_format: BodyFormat = BodyFormat.STRING
    content_type: str = ContentType.JSON
    accept: str = ContentType.JSON
    is_nullable: bool = False
    is_secured: bool = False
    scheme: str = "Bearer"

    def copy(self, **changes: Any) -> HttpClientAttribute:
        return replace(self, **changes)


class IHttpClientAttributeProvider(ABC):
    """Implemented by requests that build their attribute at runtime."""

    @abstractmethod
    def build_attribute(self, resolver: Resolver | None) -> HttpClientAttribute:
        """Build the attribute for this request.

        Args:
            resolver: Service lookup by type, when one was configured

        Returns:
            The attribute describing the request
        """


def http_client(**fields: Any) -> Callable[[TRequest], TRequest]:
    """Class decorator attaching an :class:`HttpClientAttribute` to a request type."""
    attribute = HttpClientAttribute(**fields)

    def decorator(cls: TRequest) -> TRequest:
        setattr(cls, ATTRIBUTE_NAME, attribute)
        return cls

    return decorator


def map_get(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    fields.setdefault("location", Location.QUERY)
    return http_client(path=path, method=Method.GET, **fields)


def map_post(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    fields.setdefault("is_secured", True)
    return http_client(path=path, method=Method.POST, **fields)


def map_put(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    fields.setdefault("is_secured", True)
    return http_client(path=path, method=Method.PUT, **fields)


def map_delete(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    fields.setdefault("is_secured", True)
    return http_client(path=path, method=Method.DELETE, **fields)


def map_patch(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    fields.setdefault("is_secured", True)
    return http_client(path=path, method=Method.PATCH, **fields)


def map_head(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    return http_client(path=path, method=Method.HEAD, **fields)


def map_options(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    return http_client(path=path, method=Method.OPTIONS, **fields)


def map_trace(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    return http_client(path=path, method=Method.TRACE, **fields)


def map_connect(path: str, **fields: Any) -> Callable[[TRequest], TRequest]:
    return http_client(path=path, method=Method.CONNECT, **fields)


def find_attribute(request: Any) -> HttpClientAttribute | None:
    """Return the decorator-supplied attribute of a request, including inherited ones."""
    return getattr(type(request), ATTRIBUTE_NAME, None)
