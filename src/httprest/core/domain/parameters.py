"""Enumerations and constants describing how a request maps onto HTTP."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag
from typing import Any

from httprest.core.interfaces.model_bases import InternalDTO


class Method(str, Enum):
    """HTTP methods a request can be mapped to."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class Location(Flag):
    """Parts of the HTTP message a request contributes to."""

    BODY = 1
    QUERY = 2
    PATH = 4
    HEADER = 8
    COOKIE = 16


class BodyFormat(str, Enum):
    """How the request body is encoded."""

    STRING = "string"
    BYTE_ARRAY = "byte_array"
    MULTIPART = "multipart"
    STREAM = "stream"
    FORM_URL_ENCODED = "form_url_encoded"


class DataFormat(str, Enum):
    """Format of the data carried by the request."""

    JSON = "json"
    XML = "xml"
    PDF = "pdf"
    JPEG = "jpeg"
    PNG = "png"
    TEXT = "text"
    MULTIPART = "multipart"
    NONE = "none"


class ContentType:
    """Well-known media types."""

    JSON = "application/json"
    JSON_PATCH = "application/json-patch+json"
    JSON_PROBLEM = "application/problem+json"
    XML = "application/xml"
    PDF = "application/pdf"
    JPEG = "image/jpeg"
    PNG = "image/png"
    MULTIPART = "multipart/form-data"
    URL_ENCODED = "application/x-www-form-urlencoded"
    TEXT = "text/plain"

    DATA_FORMATS: dict[DataFormat, str] = {
        DataFormat.XML: XML,
        DataFormat.JSON: JSON,
        DataFormat.JPEG: JPEG,
        DataFormat.MULTIPART: MULTIPART,
        DataFormat.PDF: PDF,
        DataFormat.PNG: PNG,
        DataFormat.TEXT: TEXT,
    }

    JSON_HEADERS = (
        "application/json",
        "text/json",
        "text/x-json",
        "text/javascript",
        "+json",
    )


class Operation:
    """JSON-Patch operation names."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


_UNSET: Any = object()


@dataclass(frozen=True)
class PatchOperation(InternalDTO):
    """A single JSON-Patch (RFC 6902) operation."""

    op: str
    path: str
    from_: str | None = None
    value: Any = _UNSET

    def to_dict(self) -> dict[str, Any]:
        """Render the operation, leaving out ``from`` and ``value`` when unset."""
        data: dict[str, Any] = {"op": self.op}
        if self.from_ is not None:
            data["from"] = self.from_
        data["path"] = self.path
        if self.value is not _UNSET:
            data["value"] = self.value
        return data

    @classmethod
    def add(cls, path: str, value: Any) -> PatchOperation:
        return cls(Operation.ADD, path, value=value)

    @classmethod
    def remove(cls, path: str) -> PatchOperation:
        return cls(Operation.REMOVE, path)

    @classmethod
    def replace(cls, path: str, value: Any) -> PatchOperation:
        return cls(Operation.REPLACE, path, value=value)

    @classmethod
    def move(cls, from_: str, path: str) -> PatchOperation:
        return cls(Operation.MOVE, path, from_=from_)

    @classmethod
    def copy(cls, from_: str, path: str) -> PatchOperation:
        return cls(Operation.COPY, path, from_=from_)

    @classmethod
    def test(cls, path: str, value: Any) -> PatchOperation:
        return cls(Operation.TEST, path, value=value)
