"""Options driving request and response building."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from httprest.core.common.exceptions import (
    InvalidRequestError,
    RequestBuilderNotFoundError,
    ResponseBuilderNotFoundError,
)
from httprest.core.config.serializer_options import SerializerOptions
from httprest.core.domain.attribute import (
    HttpClientAttribute,
    IHttpClientAttributeProvider,
    find_attribute,
)
from httprest.core.interfaces.di_interface import IServiceProvider, Resolver
from httprest.core.interfaces.request_builder_interface import IHttpClientRequestBuilder
from httprest.core.interfaces.response_builder_interface import IHttpClientResponseBuilder

logger = logging.getLogger(__name__)


@dataclass
class HttpClientOptions:
    """Registered builders, serializer settings and the service resolver.

    Builders are matched in registration order: the first builder that
    accepts a capability (or a response status and result type) wins.
    """

    request_builders: list[IHttpClientRequestBuilder[Any]] = field(default_factory=list)
    response_builders: list[IHttpClientResponseBuilder] = field(default_factory=list)
    resolver: Resolver | None = None
    serializer_options: SerializerOptions = field(default_factory=SerializerOptions)
    accept_language: str | None = None

    def peek_request_builder(self, target_type: type) -> IHttpClientRequestBuilder[Any]:
        """Return the first request builder accepting ``target_type``.

        Raises:
            RequestBuilderNotFoundError: If no registered builder accepts it
        """
        for builder in self.request_builders:
            if builder.can_build(target_type):
                return builder
        raise RequestBuilderNotFoundError(
            f"No request builder found for '{target_type.__name__}'.",
            target_type=target_type,
        )

    def peek_request_builders(
        self, target_type: type
    ) -> list[IHttpClientRequestBuilder[Any]]:
        return [b for b in self.request_builders if b.can_build(target_type)]

    def peek_response_builder(
        self, status_code: int, result_type: Any | None = None
    ) -> IHttpClientResponseBuilder:
        """Return the first response builder accepting the status and result type.

        Raises:
            ResponseBuilderNotFoundError: If no registered builder accepts them
        """
        for builder in self.response_builders:
            if builder.can_build(status_code, result_type):
                return builder
        raise ResponseBuilderNotFoundError(
            f"No response builder found for status {status_code} "
            f"and result type '{result_type}'.",
            status_code=status_code,
        )

    def get_attribute(self, request: Any) -> HttpClientAttribute:
        """Resolve the mapping attribute of ``request``.

        An :class:`IHttpClientAttributeProvider` takes precedence over a
        decorator-supplied attribute.

        Raises:
            InvalidRequestError: If the request carries no attribute
        """
        if request is None:
            raise ValueError("request must not be None")

        if isinstance(request, IHttpClientAttributeProvider):
            return request.build_attribute(self.resolver)

        attribute = find_attribute(request)
        if attribute is None:
            raise InvalidRequestError(
                f"Request '{type(request).__name__}' must be decorated with an "
                "http client attribute or implement IHttpClientAttributeProvider.",
                details={"request_type": type(request).__name__},
            )
        return attribute

    @staticmethod
    def default(options: HttpClientOptions) -> HttpClientOptions:
        """Register the default request and response builders on ``options``."""
        if options is None:
            raise ValueError("options must not be None")

        from httprest.core.services import request_builders as rq
        from httprest.core.services import response_builders as rs

        options.request_builders.extend(
            [
                rq.StartRequestBuilder(),
                rq.PathStringRequestBuilder(),
                rq.QueryStringRequestBuilder(),
                rq.CookieRequestBuilder(),
                rq.HeaderRequestBuilder(),
                rq.BasicAuthRequestBuilder(),
                rq.ByteArrayRequestBuilder(),
                rq.FormUrlEncodedRequestBuilder(),
                rq.MultipartRequestBuilder(),
                rq.StreamRequestBuilder(),
                rq.PatchRequestBuilder(options=options),
                rq.StringRequestBuilder(options=options),
                rq.CompleteRequestBuilder(),
            ]
        )
        options.response_builders.extend(
            [
                rs.SuccessResponseBuilder(),
                rs.SuccessResultResponseBuilder(),
                rs.SuccessStreamResponseBuilder(),
                rs.FailureResponseBuilder(),
                rs.FailureResultResponseBuilder(),
                rs.FailureStreamResponseBuilder(),
            ]
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Registered %d request builders and %d response builders",
                len(options.request_builders),
                len(options.response_builders),
            )
        return options

    @classmethod
    def default_options(cls, **kwargs: Any) -> HttpClientOptions:
        """Create options with the default builders registered."""
        return cls.default(cls(**kwargs))


class RestOptionsConfiguration:
    """Installs the service provider as the resolver of :class:`HttpClientOptions`."""

    def __init__(self, service_provider: IServiceProvider) -> None:
        if service_provider is None:
            raise ValueError("service_provider must not be None")
        self._service_provider = service_provider

    def configure(self, options: HttpClientOptions) -> None:
        if options is None:
            raise ValueError("options must not be None")
        options.resolver = self._service_provider.get_service
