"""Default request builders, one per request capability."""

from __future__ import annotations

import logging
import mimetypes
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import httpx

from httprest.core.config.serializer_options import SerializerOptions
from httprest.core.domain.attribute import HttpClientAttribute
from httprest.core.domain.content import (
    ByteArrayContent,
    FormUrlEncodedContent,
    MultipartFormDataContent,
    StreamContent,
    StringContent,
)
from httprest.core.domain.parameters import ContentType
from httprest.core.domain.request_message import HttpRequestMessage
from httprest.core.interfaces.request_builder_interface import IHttpClientRequestBuilder
from httprest.core.interfaces.request_definitions import (
    HeaderCollection,
    IHttpRequestBasicAuth,
    IHttpRequestByteArray,
    IHttpRequestCookie,
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

if TYPE_CHECKING:
    from httprest.core.config.options import HttpClientOptions

logger = logging.getLogger(__name__)


def add_path_string(path: str, path_string: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders in ``path``, ignoring case.

    Args:
        path: The path template
        path_string: Placeholder names mapped to their values

    Returns:
        The path with every known placeholder replaced
    """
    if path is None:
        raise ValueError("path must not be None")
    if path_string is None:
        raise ValueError("path_string must not be None")

    for key, value in path_string.items():
        pattern = re.compile(re.escape(f"{{{key}}}"), re.IGNORECASE)
        path = pattern.sub(lambda _match, value=str(value): value, path)
    return path


def add_query_string(path: str, query_string: Mapping[str, str | None] | None) -> str:
    """Append URL-encoded query parameters to ``path``, skipping ``None`` values."""
    if path is None:
        raise ValueError("path must not be None")
    if not query_string:
        return path

    pairs = [(key, value) for key, value in query_string.items() if value is not None]
    if not pairs:
        return path

    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{urlencode(pairs)}"


def normalize_headers(headers: HeaderCollection) -> list[tuple[str, list[str]]]:
    """Flatten a header collection into ``(name, values)`` pairs."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    normalized: list[tuple[str, list[str]]] = []
    for key, value in items:
        if value is None:
            values = [""]
        elif isinstance(value, str):
            values = [value]
        else:
            values = ["" if item is None else str(item) for item in value]
        normalized.append((key, values))
    return normalized


class StartRequestBuilder(IHttpClientRequestBuilder[IHttpRequestDefinitionStart]):
    """Start-stage hook; leaves the message untouched.

    Register a builder for :class:`IHttpRequestDefinitionStart` ahead of the
    defaults to run custom logic before any other builder.
    """

    @property
    def type(self) -> type[IHttpRequestDefinitionStart]:
        return IHttpRequestDefinitionStart

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestDefinitionStart,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Start stage for %s", type(request).__name__)
        return message


class CompleteRequestBuilder(IHttpClientRequestBuilder[IHttpRequestDefinitionComplete]):
    """Complete-stage hook; leaves the message untouched."""

    @property
    def type(self) -> type[IHttpRequestDefinitionComplete]:
        return IHttpRequestDefinitionComplete

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestDefinitionComplete,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Complete stage for %s", type(request).__name__)
        return message


class PathStringRequestBuilder(IHttpClientRequestBuilder[IHttpRequestPathString]):
    @property
    def type(self) -> type[IHttpRequestPathString]:
        return IHttpRequestPathString

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestPathString,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        path_string = request.get_path_string()
        if path_string:
            message.url = add_path_string(message.url, path_string)
        return message


class QueryStringRequestBuilder(IHttpClientRequestBuilder[IHttpRequestQueryString]):
    @property
    def type(self) -> type[IHttpRequestQueryString]:
        return IHttpRequestQueryString

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestQueryString,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        message.url = add_query_string(message.url, request.get_query_string())
        return message


class CookieRequestBuilder(IHttpClientRequestBuilder[IHttpRequestCookie]):
    @property
    def type(self) -> type[IHttpRequestCookie]:
        return IHttpRequestCookie

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestCookie,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        for name, value in request.get_cookies().items():
            if value is not None:
                message.cookies[name] = str(value)
        return message


class HeaderRequestBuilder(IHttpClientRequestBuilder[IHttpRequestHeader]):
    """Applies request headers.

    With a header-model name every pair is folded into one header:
    ``X-Model: key1,v1;v2,key2,v3``. Otherwise each header replaces any
    value already present on the message.
    """

    @property
    def type(self) -> type[IHttpRequestHeader]:
        return IHttpRequestHeader

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestHeader,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        headers = normalize_headers(request.get_headers())
        existing = message.headers.multi_items()

        model_name = request.get_header_model_name()
        if model_name is not None:
            value = ",".join(f"{key},{';'.join(values)}" for key, values in headers)
            message.headers = httpx.Headers([*existing, (model_name, value)])
            return message

        replaced = {key.lower() for key, _ in headers}
        items = [(key, value) for key, value in existing if key.lower() not in replaced]
        items.extend((key, value) for key, values in headers for value in values)
        message.headers = httpx.Headers(items)
        return message


class BasicAuthRequestBuilder(IHttpClientRequestBuilder[IHttpRequestBasicAuth]):
    @property
    def type(self) -> type[IHttpRequestBasicAuth]:
        return IHttpRequestBasicAuth

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestBasicAuth,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        message.headers["Authorization"] = f"Basic {request.get_basic_content()}"
        return message


class ByteArrayRequestBuilder(IHttpClientRequestBuilder[IHttpRequestByteArray]):
    @property
    def type(self) -> type[IHttpRequestByteArray]:
        return IHttpRequestByteArray

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestByteArray,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        data = request.get_byte_content()
        if data is not None:
            message.content = ByteArrayContent(data)
        return message


class FormUrlEncodedRequestBuilder(
    IHttpClientRequestBuilder[IHttpRequestFormUrlEncoded]
):
    @property
    def type(self) -> type[IHttpRequestFormUrlEncoded]:
        return IHttpRequestFormUrlEncoded

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestFormUrlEncoded,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        form = request.get_form_source()
        if form is not None:
            message.content = FormUrlEncodedContent(form)
        return message


class MultipartRequestBuilder(IHttpClientRequestBuilder[IHttpRequestMultipart]):
    """Installs an empty multipart body filled by the stream and string builders."""

    @property
    def type(self) -> type[IHttpRequestMultipart]:
        return IHttpRequestMultipart

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestMultipart,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        message.content = MultipartFormDataContent()
        return message


class StreamRequestBuilder(IHttpClientRequestBuilder[IHttpRequestStream]):
    @property
    def type(self) -> type[IHttpRequestStream]:
        return IHttpRequestStream

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestStream,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        source = request.get_stream_content()
        if source is None:
            return message

        media_type: str | None = None
        if isinstance(request, IHttpRequestMultipart):
            media_type, _ = mimetypes.guess_type(request.get_file_name())
        content = StreamContent(source, media_type)

        if isinstance(message.content, MultipartFormDataContent):
            if isinstance(request, IHttpRequestMultipart):
                message.content.add(content, request.get_name(), request.get_file_name())
            else:
                message.content.add(content, "file")
        else:
            message.content = content
        return message


class _SerializingRequestBuilder:
    """Resolves the serializer when a body is built.

    With ``options`` set, the serializer is read from
    :attr:`HttpClientOptions.serializer_options` on every build, so a
    replacement installed after registration is honoured.
    """

    def __init__(
        self,
        serializer_options: SerializerOptions | None = None,
        *,
        options: HttpClientOptions | None = None,
    ) -> None:
        self._serializer_options = serializer_options
        self._options = options

    @property
    def serializer_options(self) -> SerializerOptions:
        if self._serializer_options is not None:
            return self._serializer_options
        if self._options is not None:
            return self._options.serializer_options
        return SerializerOptions()


class StringRequestBuilder(
    _SerializingRequestBuilder, IHttpClientRequestBuilder[IHttpRequestString]
):
    """Serializes ``get_string_content()`` to JSON."""

    @property
    def type(self) -> type[IHttpRequestString]:
        return IHttpRequestString

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestString,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        value = request.get_string_content()

        if isinstance(message.content, MultipartFormDataContent):
            if value is not None:
                text = self.serializer_options.dumps(value)
                message.content.add(StringContent(text, ContentType.JSON), "data")
            return message

        text = self.serializer_options.dumps(value)
        message.content = StringContent(text, attribute.content_type)
        return message


class PatchRequestBuilder(
    _SerializingRequestBuilder, IHttpClientRequestBuilder[IHttpRequestPatch]
):
    """Serializes the JSON-Patch operations of the request."""

    @property
    def type(self) -> type[IHttpRequestPatch]:
        return IHttpRequestPatch

    def build(
        self,
        attribute: HttpClientAttribute,
        request: IHttpRequestPatch,
        message: HttpRequestMessage,
    ) -> HttpRequestMessage:
        operations = [operation.to_dict() for operation in request.get_patch_operations()]
        content = StringContent(
            self.serializer_options.dumps(operations), attribute.content_type
        )

        if isinstance(message.content, MultipartFormDataContent):
            message.content.add(content, "data")
        else:
            message.content = content
        return message
