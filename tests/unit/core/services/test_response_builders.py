"""
Tests for the default response builders.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
import pytest
from httprest.core.common.exceptions import HttpRequestError
from httprest.core.config.serializer_options import SerializerOptions
from httprest.core.domain.responses import RestResponseContext
from httprest.core.services.response_builders import (
    FailureResponseBuilder,
    FailureResultResponseBuilder,
    FailureStreamResponseBuilder,
    SuccessResponseBuilder,
    SuccessResultResponseBuilder,
    SuccessStreamResponseBuilder,
    attachment_location,
    is_binary_media_type,
    is_stream_type,
    iter_json_items,
)

REQUEST = httpx.Request("GET", "https://api.example.com/files/1")


@dataclass
class Item:
    id: int
    name: str


def _context(response: httpx.Response) -> RestResponseContext:
    return RestResponseContext(response, SerializerOptions())


async def _chunks(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


class TestSelection:
    def test_stream_types(self) -> None:
        assert is_stream_type(AsyncIterator[Item])
        assert not is_stream_type(list[Item])
        assert not is_stream_type(None)

    @pytest.mark.parametrize(
        ("builder", "status", "result_type", "expected"),
        [
            (SuccessResponseBuilder(), 200, None, True),
            (SuccessResponseBuilder(), 200, Item, False),
            (SuccessResultResponseBuilder(), 201, Item, True),
            (SuccessResultResponseBuilder(), 201, AsyncIterator[Item], False),
            (SuccessStreamResponseBuilder(), 200, AsyncIterator[Item], True),
            (FailureResponseBuilder(), 404, None, True),
            (FailureResponseBuilder(), 200, None, False),
            (FailureResultResponseBuilder(), 500, Item, True),
            (FailureStreamResponseBuilder(), 503, AsyncIterator[Item], True),
        ],
    )
    def test_can_build(self, builder, status, result_type, expected) -> None:
        assert builder.can_build(status, result_type) is expected

    def test_binary_media_types(self) -> None:
        assert is_binary_media_type("image/png")
        assert is_binary_media_type("application/PDF")
        assert not is_binary_media_type("application/json; charset=utf-8")


class TestSuccessResponseBuilder:
    @pytest.mark.asyncio
    async def test_text_body(self) -> None:
        response = httpx.Response(200, text="hello", request=REQUEST)

        result = await SuccessResponseBuilder().build(_context(response))

        assert result.result == "hello"
        assert result.reason_phrase == "OK"
        assert result.version == "HTTP/1.1"

    @pytest.mark.asyncio
    async def test_binary_body(self) -> None:
        response = httpx.Response(
            200, content=b"\x89PNG", headers={"Content-Type": "image/png"}, request=REQUEST
        )

        result = await SuccessResponseBuilder().build(_context(response))

        assert result.result == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_empty_body(self) -> None:
        response = httpx.Response(204, request=REQUEST)

        result = await SuccessResponseBuilder().build(_context(response))

        assert result.result is None
        assert result.is_success_status_code

    @pytest.mark.asyncio
    async def test_attachment_adds_location(self) -> None:
        response = httpx.Response(
            200,
            content=b"data",
            headers={
                "Content-Type": "application/octet-stream",
                "Content-Disposition": 'attachment; filename="my report.pdf"',
            },
            request=REQUEST,
        )

        result = await SuccessResponseBuilder().build(_context(response))

        assert result.headers["Location"] == "https://api.example.com/my%20report.pdf"

    def test_attachment_location_ignores_inline(self) -> None:
        response = httpx.Response(
            200, headers={"Content-Disposition": "inline; filename=a.txt"}, request=REQUEST
        )

        assert attachment_location(response) is None


class TestSuccessResultResponseBuilder:
    @pytest.mark.asyncio
    async def test_decodes_json_into_type(self) -> None:
        response = httpx.Response(200, json={"id": 1, "name": "a"}, request=REQUEST)

        result = await SuccessResultResponseBuilder().build(_context(response), Item)

        assert result.result == Item(1, "a")
        assert result.exception is None

    @pytest.mark.asyncio
    async def test_empty_body_yields_none(self) -> None:
        response = httpx.Response(200, content=b"", request=REQUEST)

        result = await SuccessResultResponseBuilder().build(_context(response), Item)

        assert result.result is None
        assert result.exception is None

    @pytest.mark.asyncio
    async def test_decode_failure_is_captured(self) -> None:
        response = httpx.Response(200, json={"id": "x"}, request=REQUEST)

        result = await SuccessResultResponseBuilder().build(_context(response), Item)

        assert result.result is None
        assert isinstance(result.exception, HttpRequestError)
        assert isinstance(result.exception.__cause__, ValueError)
        assert result.status_code == 200


class TestFailureResponseBuilders:
    @pytest.mark.asyncio
    async def test_failure_carries_status_reason_and_body(self) -> None:
        response = httpx.Response(404, text="user not found", request=REQUEST)

        result = await FailureResponseBuilder().build(_context(response))

        assert result.status_code == 404
        assert result.result is None
        assert isinstance(result.exception, HttpRequestError)
        assert result.exception.status_code == 404
        assert result.exception.message == (
            "Response status code does not indicate success: 404 (Not Found). "
            "user not found"
        )
        assert not result.is_success_status_code

    @pytest.mark.asyncio
    async def test_failure_for_typed_result(self) -> None:
        response = httpx.Response(500, request=REQUEST)

        result = await FailureResultResponseBuilder().build(_context(response), Item)

        assert result.exception.message == (
            "Response status code does not indicate success: 500 (Internal Server Error)."
        )
        with pytest.raises(HttpRequestError):
            result.ensure_success_status_code()

    @pytest.mark.asyncio
    async def test_failure_for_stream_closes_response(self) -> None:
        response = httpx.Response(503, content=_chunks(b"busy"), request=REQUEST)

        result = await FailureStreamResponseBuilder().build(
            _context(response), AsyncIterator[Item]
        )

        assert result.exception.message.endswith("busy")
        assert response.is_closed


class TestStreaming:
    @pytest.mark.asyncio
    async def test_json_array_split_across_chunks(self) -> None:
        response = httpx.Response(
            200,
            headers={"Content-Type": "application/json"},
            content=_chunks(b'[{"id": 1, "na', b'me": "a"}, {"id": 2', b', "name": "b"}', b"]"),
            request=REQUEST,
        )

        result = await SuccessStreamResponseBuilder().build(
            _context(response), AsyncIterator[Item]
        )
        items = [item async for item in result.result]

        assert items == [Item(1, "a"), Item(2, "b")]
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_numbers_are_not_cut_at_chunk_boundaries(self) -> None:
        response = httpx.Response(
            200, content=_chunks(b"[12", b"3, 4", b"5]"), request=REQUEST
        )

        items = [
            item
            async for item in iter_json_items(response, SerializerOptions(), int)
        ]

        assert items == [123, 45]

    @pytest.mark.asyncio
    async def test_ndjson(self) -> None:
        response = httpx.Response(
            200,
            headers={"Content-Type": "application/x-ndjson"},
            content=_chunks(b'{"id": 1, "name": "a"}\n', b'\n{"id": 2, "name": "b"}\n'),
            request=REQUEST,
        )

        items = [
            item async for item in iter_json_items(response, SerializerOptions(), Item)
        ]

        assert items == [Item(1, "a"), Item(2, "b")]

    @pytest.mark.asyncio
    async def test_empty_array(self) -> None:
        response = httpx.Response(200, content=_chunks(b" [ ] "), request=REQUEST)

        items = [item async for item in iter_json_items(response, SerializerOptions(), int)]

        assert items == []

    @pytest.mark.asyncio
    async def test_non_array_raises(self) -> None:
        response = httpx.Response(200, content=_chunks(b'{"id": 1}'), request=REQUEST)

        with pytest.raises(HttpRequestError):
            async for _ in iter_json_items(response, SerializerOptions(), int):
                pass
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_unread_stream_is_closed_by_aclose(self) -> None:
        response = httpx.Response(200, content=_chunks(b"[1, 2]"), request=REQUEST)

        result = await SuccessStreamResponseBuilder().build(
            _context(response), AsyncIterator[int]
        )
        await result.aclose()

        assert response.is_closed

    @pytest.mark.asyncio
    async def test_partially_read_stream_is_closed_on_context_exit(self) -> None:
        response = httpx.Response(200, content=_chunks(b"[1, ", b"2, 3]"), request=REQUEST)

        async with await SuccessStreamResponseBuilder().build(
            _context(response), AsyncIterator[int]
        ) as result:
            first = await anext(result.result)

        assert first == 1
        assert response.is_closed
