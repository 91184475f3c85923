"""Capability interfaces implemented by request objects.

A request object opts into each part of the HTTP message by implementing the
matching interface. The request builders registered on
:class:`~httprest.core.config.options.HttpClientOptions` consume these
interfaces to fill an :class:`~httprest.core.domain.request_message.HttpRequestMessage`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Iterable, Mapping, Sequence
from enum import Enum
from typing import IO, Any, ClassVar, Union

from httprest.core.domain.parameters import PatchOperation

HeaderValue = Union[str, Sequence[str], None]
HeaderCollection = Union[Mapping[str, HeaderValue], Iterable[tuple[str, HeaderValue]]]
StreamSource = Union[bytes, IO[bytes], Iterable[bytes], AsyncIterable[bytes]]


class RequestStage(Enum):
    """Stages of the request builder pipeline, in execution order."""

    START = 0
    DEFINITION = 1
    COMPLETE = 2


class IHttpRequestDefinition(ABC):  # noqa: B024
    """Marker for every request capability."""

    stage: ClassVar[RequestStage] = RequestStage.DEFINITION


class IHttpRequestDefinitionStart(IHttpRequestDefinition):  # noqa: B024
    """Marks a request whose start-stage builder runs before any other."""

    stage: ClassVar[RequestStage] = RequestStage.START


class IHttpRequestDefinitionComplete(IHttpRequestDefinition):  # noqa: B024
    """Marks a request whose complete-stage builder runs after all others."""

    stage: ClassVar[RequestStage] = RequestStage.COMPLETE


class IHttpRequestPathString(IHttpRequestDefinition):
    @abstractmethod
    def get_path_string(self) -> Mapping[str, str]:
        """Values substituted for the ``{name}`` placeholders of the path."""


class IHttpRequestQueryString(IHttpRequestDefinition):
    @abstractmethod
    def get_query_string(self) -> Mapping[str, str | None] | None:
        """Query string parameters; ``None`` values are skipped."""


class IHttpRequestCookie(IHttpRequestDefinition):
    @abstractmethod
    def get_cookies(self) -> Mapping[str, Any]:
        pass


class IHttpRequestHeader(IHttpRequestDefinition):
    """Supplies a header collection and an optional header-model name."""

    @abstractmethod
    def get_headers(self) -> HeaderCollection:
        """Header key/value pairs; a value may be a string, a list or ``None``."""

    def get_header_model_name(self) -> str | None:
        """Name of the header grouping all pairs into a single value.

        Returns:
            ``None`` to emit every pair as its own header
        """
        return None


class IHttpRequestBasicAuth(IHttpRequestDefinition):
    @abstractmethod
    def get_basic_content(self) -> str:
        """The encoded ``user:password`` credentials."""


class IHttpRequestByteArray(IHttpRequestDefinition):
    @abstractmethod
    def get_byte_content(self) -> bytes | None:
        pass


class IHttpRequestFormUrlEncoded(IHttpRequestDefinition):
    @abstractmethod
    def get_form_source(self) -> Mapping[str, str | None] | None:
        pass


class IHttpRequestStream(IHttpRequestDefinition):
    @abstractmethod
    def get_stream_content(self) -> StreamSource | None:
        pass


class IHttpRequestString(IHttpRequestDefinition):
    def get_string_content(self) -> Any:
        """The object serialized as the JSON body; the request itself by default."""
        return self


class IHttpRequestMultipart(IHttpRequestStream, IHttpRequestString):
    @abstractmethod
    def get_file_name(self) -> str:
        pass

    def get_name(self) -> str:
        return "file"

    def get_string_content(self) -> Any:
        """Optional JSON part sent next to the file; none by default."""
        return None


class IHttpRequestPatch(IHttpRequestDefinition):
    @abstractmethod
    def get_patch_operations(self) -> Sequence[PatchOperation]:
        pass
