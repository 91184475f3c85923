"""Assembles request messages and responses from the registered builders."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from httprest.core.common.exceptions import InvalidRequestError
from httprest.core.config.options import HttpClientOptions
from httprest.core.domain.attribute import HttpClientAttribute
from httprest.core.domain.content import MultipartFormDataContent
from httprest.core.domain.parameters import BodyFormat, Location
from httprest.core.domain.request_message import HttpRequestMessage
from httprest.core.domain.responses import HttpClientResponse, RestResponseContext
from httprest.core.interfaces.dispatcher_interface import IHttpClientDispatcherFactory
from httprest.core.interfaces.request_definitions import (
    IHttpRequestBasicAuth,
    IHttpRequestByteArray,
    IHttpRequestCookie,
    IHttpRequestDefinition,
    IHttpRequestDefinitionComplete,
    IHttpRequestDefinitionStart,
    IHttpRequestFormUrlEncoded,
    IHttpRequestHeader,
    IHttpRequestMultipart,
    IHttpRequestPatch,
    IHttpRequestPathString,
    IHttpRequestQueryString,
    IHttpRequestStream,
    IHttpRequestString,
)

logger = logging.getLogger(__name__)

IS_SECURED_OPTION = "is_secured"

# Location flags are applied in this order.
_LOCATION_CAPABILITIES: tuple[tuple[Location, type[IHttpRequestDefinition]], ...] = (
    (Location.PATH, IHttpRequestPathString),
    (Location.QUERY, IHttpRequestQueryString),
    (Location.COOKIE, IHttpRequestCookie),
    (Location.HEADER, IHttpRequestHeader),
)

_BODY_CAPABILITIES: dict[BodyFormat, tuple[type[IHttpRequestDefinition], ...]] = {
    BodyFormat.BYTE_ARRAY: (IHttpRequestByteArray,),
    BodyFormat.FORM_URL_ENCODED: (IHttpRequestFormUrlEncoded,),
    BodyFormat.MULTIPART: (IHttpRequestMultipart, IHttpRequestStream, IHttpRequestString),
    BodyFormat.STREAM: (IHttpRequestStream,),
    BodyFormat.STRING: (IHttpRequestString,),
}


class HttpClientDispatcherFactory(IHttpClientDispatcherFactory):
    """Runs the request builder pipeline and selects response builders.

    The request pipeline is: start stage, location builders (path, query,
    cookie, header), basic auth, body builders, complete stage, and finally
    the ``Authorization`` scheme for secured requests.
    """

    def __init__(self, options: HttpClientOptions) -> None:
        if options is None:
            raise ValueError("options must not be None")
        self._options = options

    @property
    def options(self) -> HttpClientOptions:
        return self._options

    def build_request(self, request: Any) -> HttpRequestMessage:
        """Build the message for ``request``.

        Raises:
            InvalidRequestError: If the request lacks a capability its
                attribute asks for
            RequestBuilderNotFoundError: If no builder handles a capability
        """
        if request is None:
            raise ValueError("request must not be None")

        attribute = self._options.get_attribute(request).copy()
        message = HttpRequestMessage(method=attribute.method.value, url=attribute.path or "/")
        message.headers["Accept"] = attribute.accept
        if self._options.accept_language:
            message.headers["Accept-Language"] = self._options.accept_language

        if isinstance(request, IHttpRequestDefinitionStart):
            message = self._apply(IHttpRequestDefinitionStart, attribute, request, message)

        for flag, capability in _LOCATION_CAPABILITIES:
            if flag in attribute.location:
                message = self._apply_required(capability, attribute, request, message)

        if isinstance(request, IHttpRequestBasicAuth):
            message = self._apply(IHttpRequestBasicAuth, attribute, request, message)

        if Location.BODY in attribute.location and not attribute.is_nullable:
            message = self._build_body(attribute, request, message)

        if isinstance(request, IHttpRequestDefinitionComplete):
            message = self._apply(
                IHttpRequestDefinitionComplete, attribute, request, message
            )

        if attribute.is_secured:
            message.headers["Authorization"] = attribute.scheme
            message.options[IS_SECURED_OPTION] = True

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built %s %s for %s", message.method, message.url, type(request).__name__
            )
        return message

    async def build_response(
        self, response: httpx.Response, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        context = RestResponseContext(response, self._options.serializer_options)
        builder = self._options.peek_response_builder(response.status_code, result_type)
        return await builder.build(context, result_type)

    def _build_body(
        self,
        attribute: HttpClientAttribute,
        request: Any,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        capabilities = _BODY_CAPABILITIES[BodyFormat(attribute.body_format)]
        if attribute.body_format == BodyFormat.STRING and isinstance(
            request, IHttpRequestPatch
        ):
            capabilities = (IHttpRequestPatch,)

        for capability in capabilities:
            message = self._apply_required(capability, attribute, request, message)

        content = message.content
        if (
            content is not None
            and not isinstance(content, MultipartFormDataContent)
            and content.media_type is None
        ):
            content.media_type = attribute.content_type
        return message

    def _apply_required(
        self,
        capability: type[IHttpRequestDefinition],
        attribute: HttpClientAttribute,
        request: Any,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        if not isinstance(request, capability):
            raise InvalidRequestError(
                f"Request '{type(request).__name__}' must implement "
                f"'{capability.__name__}' to match its http client attribute.",
                details={
                    "request_type": type(request).__name__,
                    "capability": capability.__name__,
                },
            )
        return self._apply(capability, attribute, request, message)

    def _apply(
        self,
        capability: type[IHttpRequestDefinition],
        attribute: HttpClientAttribute,
        request: Any,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        builder = self._options.peek_request_builder(capability)
        return builder.build(attribute, request, message)
