"""Default response builders.

Each builder handles one combination of outcome (success or failure) and
requested result kind (none, a typed result, or an async stream of items).
"""

from __future__ import annotations

import collections.abc
import json
import logging
import re
from collections.abc import AsyncIterator
from typing import Any, get_args, get_origin
from urllib.parse import quote

import httpx

from httprest.core.common.exceptions import HttpRequestError
from httprest.core.config.serializer_options import SerializerOptions
from httprest.core.domain.responses import (
    HttpClientResponse,
    RestResponseContext,
    is_success_status_code,
)
from httprest.core.interfaces.response_builder_interface import IHttpClientResponseBuilder

logger = logging.getLogger(__name__)

_STREAM_ORIGINS = (
    collections.abc.AsyncIterator,
    collections.abc.AsyncIterable,
    collections.abc.AsyncGenerator,
)

_BINARY_MEDIA_TYPES = (
    "application/octet-stream",
    "image/",
    "audio/",
    "video/",
    "application/pdf",
    "application/zip",
    "application/x-7z-compressed",
    "application/x-msdownload",
    "application/vnd.ms-",
    "application/vnd.openxmlformats-",
)

_LINE_DELIMITED_MEDIA_TYPES = ("application/x-ndjson", "application/jsonl")

_FILENAME_PATTERN = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)

_ARRAY_SEPARATORS = ", \t\r\n"


def is_stream_type(result_type: Any | None) -> bool:
    """Check whether ``result_type`` asks for an async stream of items."""
    if result_type is None:
        return False
    origin = get_origin(result_type) or result_type
    return origin in _STREAM_ORIGINS


def stream_item_type(result_type: Any) -> Any:
    args = get_args(result_type)
    return args[0] if args else Any


def is_binary_media_type(content_type: str) -> bool:
    lowered = content_type.lower()
    return any(media in lowered for media in _BINARY_MEDIA_TYPES)


def failure_message(response: httpx.Response, body: str) -> str:
    return (
        f"Response status code does not indicate success: "
        f"{response.status_code} ({response.reason_phrase}). {body}"
    ).rstrip()


def attachment_location(response: httpx.Response) -> str | None:
    """URL of an ``attachment`` file, built from the request authority."""
    disposition = response.headers.get("content-disposition", "")
    if not disposition.lower().startswith("attachment"):
        return None
    match = _FILENAME_PATTERN.search(disposition)
    if match is None:
        return None
    try:
        url = response.request.url
    except RuntimeError:
        return None
    file_name = match.group(1).strip().strip('"')
    return f"{url.scheme}://{url.netloc.decode('ascii')}/{quote(file_name, safe='')}"


def _base_fields(response: httpx.Response) -> dict[str, Any]:
    return {
        "status_code": response.status_code,
        "headers": response.headers,
        "version": response.http_version,
        "reason_phrase": response.reason_phrase,
    }


def _decode_error(response: httpx.Response, exc: Exception) -> HttpRequestError:
    return HttpRequestError(
        f"Unable to decode the response content: {exc}",
        exc,
        status_code=response.status_code,
    )


async def iter_json_items(
    response: httpx.Response,
    serializer_options: SerializerOptions,
    item_type: Any,
) -> AsyncIterator[Any]:
    """Decode a streamed JSON array (or NDJSON body) item by item.

    The response is closed once the iterator is exhausted or abandoned.
    """
    content_type = response.headers.get("content-type", "").lower()
    try:
        if any(media in content_type for media in _LINE_DELIMITED_MEDIA_TYPES):
            async for line in response.aiter_lines():
                if line.strip():
                    yield serializer_options.loads(line, item_type)
            return

        decoder = json.JSONDecoder()
        buffer = ""
        started = False
        async for chunk in response.aiter_text():
            buffer += chunk
            while True:
                buffer = buffer.lstrip(_ARRAY_SEPARATORS if started else " \t\r\n")
                if not buffer:
                    break
                if not started:
                    if buffer[0] != "[":
                        raise HttpRequestError(
                            "Streamed response content is not a JSON array.",
                            status_code=response.status_code,
                        )
                    started = True
                    buffer = buffer[1:]
                    continue
                if buffer[0] == "]":
                    return
                try:
                    value, end = decoder.raw_decode(buffer)
                except json.JSONDecodeError:
                    break
                # A complete array element is always followed by "," or "]".
                if end == len(buffer):
                    break
                buffer = buffer[end:]
                yield serializer_options.validate(value, item_type)
    finally:
        await response.aclose()


class SuccessResponseBuilder(IHttpClientResponseBuilder):
    """Success without a typed result: text, bytes or nothing."""

    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        return is_success_status_code(status_code) and result_type is None

    async def build(
        self, context: RestResponseContext, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        response = context.message
        fields = _base_fields(response)

        location = attachment_location(response)
        if location is not None:
            headers = httpx.Headers(response.headers)
            headers["Location"] = location
            fields["headers"] = headers

        try:
            content = await response.aread()
        except httpx.HTTPError as exc:
            return HttpClientResponse(**fields, exception=_decode_error(response, exc))

        if not content:
            return HttpClientResponse(**fields)
        if is_binary_media_type(response.headers.get("content-type", "")):
            return HttpClientResponse(**fields, result=content)
        return HttpClientResponse(**fields, result=response.text)


class SuccessResultResponseBuilder(IHttpClientResponseBuilder):
    """Success with a typed result decoded from the JSON body."""

    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        return (
            is_success_status_code(status_code)
            and result_type is not None
            and not is_stream_type(result_type)
        )

    async def build(
        self, context: RestResponseContext, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        response = context.message
        fields = _base_fields(response)
        try:
            content = await response.aread()
            if not content.strip():
                return HttpClientResponse(**fields)
            result = context.serializer_options.loads(content, result_type)
        except (ValueError, httpx.HTTPError) as exc:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Failed to decode %s response: %s", result_type, exc)
            return HttpClientResponse(**fields, exception=_decode_error(response, exc))
        return HttpClientResponse(**fields, result=result)


class SuccessStreamResponseBuilder(IHttpClientResponseBuilder):
    """Success with an async iterator of items decoded while the body streams in."""

    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        return is_success_status_code(status_code) and is_stream_type(result_type)

    async def build(
        self, context: RestResponseContext, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        response = context.message
        items = iter_json_items(
            response, context.serializer_options, stream_item_type(result_type)
        )
        return HttpClientResponse(
            **_base_fields(response), result=items, closer=response.aclose
        )


class _FailureResponseBuilder(IHttpClientResponseBuilder):
    async def build(
        self, context: RestResponseContext, result_type: Any | None = None
    ) -> HttpClientResponse[Any]:
        response = context.message
        try:
            await response.aread()
            body = response.text
        except httpx.HTTPError as exc:
            body = ""
            cause: BaseException | None = exc
        else:
            cause = None
        finally:
            await response.aclose()

        error = HttpRequestError(
            failure_message(response, body), cause, status_code=response.status_code
        )
        return HttpClientResponse(**_base_fields(response), exception=error)


class FailureResponseBuilder(_FailureResponseBuilder):
    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        return not is_success_status_code(status_code) and result_type is None


class FailureResultResponseBuilder(_FailureResponseBuilder):
    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        return (
            not is_success_status_code(status_code)
            and result_type is not None
            and not is_stream_type(result_type)
        )


class FailureStreamResponseBuilder(_FailureResponseBuilder):
    def can_build(self, status_code: int, result_type: Any | None = None) -> bool:
        return not is_success_status_code(status_code) and is_stream_type(result_type)
