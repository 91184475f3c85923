"""Request body representations and their rendering into ``httpx`` arguments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import IO, Any
from urllib.parse import urlencode

from httprest.core.common.exceptions import InvalidRequestError
from httprest.core.domain.parameters import ContentType
from httprest.core.interfaces.model_bases import InternalDTO

_CHUNK_SIZE = 64 * 1024


class HttpContent(ABC):
    """Body of an :class:`~httprest.core.domain.request_message.HttpRequestMessage`."""

    media_type: str | None

    @property
    def content_type(self) -> str | None:
        """Value for the ``Content-Type`` header, if any."""
        return self.media_type

    @abstractmethod
    def to_request_kwargs(self) -> dict[str, Any]:
        """Keyword arguments understood by ``httpx.Client.build_request``."""

    @abstractmethod
    def to_part(self) -> bytes | IO[bytes]:
        """Payload used when this content is nested inside a multipart body."""


@dataclass
class ByteArrayContent(HttpContent, InternalDTO):
    data: bytes
    media_type: str | None = None

    def to_request_kwargs(self) -> dict[str, Any]:
        return {"content": self.data}

    def to_part(self) -> bytes:
        return self.data


@dataclass
class StringContent(HttpContent, InternalDTO):
    text: str
    media_type: str | None = ContentType.JSON
    encoding: str = "utf-8"

    @property
    def content_type(self) -> str | None:
        if self.media_type is None:
            return None
        return f"{self.media_type}; charset={self.encoding}"

    def to_request_kwargs(self) -> dict[str, Any]:
        return {"content": self.to_part()}

    def to_part(self) -> bytes:
        return self.text.encode(self.encoding)


@dataclass
class FormUrlEncodedContent(HttpContent, InternalDTO):
    fields: Mapping[str, str | None]
    media_type: str | None = ContentType.URL_ENCODED

    def to_request_kwargs(self) -> dict[str, Any]:
        return {"content": self.to_part()}

    def to_part(self) -> bytes:
        pairs = [(key, "" if value is None else value) for key, value in self.fields.items()]
        return urlencode(pairs).encode("ascii")


@dataclass
class StreamContent(HttpContent, InternalDTO):
    """Streamed body; accepts bytes, a binary file object or (async) chunk iterables."""

    stream: bytes | IO[bytes] | Iterable[bytes] | AsyncIterable[bytes]
    media_type: str | None = None

    def to_request_kwargs(self) -> dict[str, Any]:
        source = self.stream
        if isinstance(source, bytes | AsyncIterable):
            return {"content": source}
        if hasattr(source, "read"):
            return {"content": _aiter_sync(_read_chunks(source))}  # type: ignore[arg-type]
        return {"content": _aiter_sync(iter(source))}

    def to_part(self) -> bytes | IO[bytes]:
        source = self.stream
        if isinstance(source, bytes) or hasattr(source, "read"):
            return source  # type: ignore[return-value]
        if isinstance(source, AsyncIterable):
            raise InvalidRequestError(
                "Asynchronous streams cannot be embedded in a multipart body"
            )
        return b"".join(source)


@dataclass
class MultipartPart(InternalDTO):
    content: HttpContent
    name: str
    file_name: str | None = None


@dataclass
class MultipartFormDataContent(HttpContent, InternalDTO):
    """``multipart/form-data`` body; ``httpx`` generates the boundary."""

    parts: list[MultipartPart] = field(default_factory=list)
    media_type: str | None = ContentType.MULTIPART

    @property
    def content_type(self) -> str | None:
        return None

    def add(
        self, content: HttpContent, name: str = "data", file_name: str | None = None
    ) -> None:
        self.parts.append(MultipartPart(content, name, file_name))

    def to_request_kwargs(self) -> dict[str, Any]:
        files = [
            (part.name, (part.file_name, part.content.to_part(), part.content.media_type))
            for part in self.parts
        ]
        return {"files": files} if files else {}

    def to_part(self) -> bytes:
        raise InvalidRequestError("Multipart bodies cannot be nested")


def _read_chunks(stream: IO[bytes]) -> Iterator[bytes]:
    while chunk := stream.read(_CHUNK_SIZE):
        yield chunk


async def _aiter_sync(chunks: Iterator[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk
