from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx

from httprest.core.common.exceptions import HttpRequestError
from httprest.core.interfaces.model_bases import InternalDTO

if TYPE_CHECKING:
    from httprest.core.config.serializer_options import SerializerOptions

TResult = TypeVar("TResult")


def is_success_status_code(status_code: int) -> bool:
    return 200 <= status_code <= 299


@dataclass(frozen=True)
class HttpClientResponse(InternalDTO, Generic[TResult]):
    """Outcome of sending a request.

    Failures do not raise; they carry an :class:`HttpRequestError` in
    ``exception`` instead. Call :meth:`ensure_success_status_code` to raise.

    A streamed result keeps its connection open until the stream is
    exhausted. Call :meth:`aclose` (or use ``async with``) when the stream
    may be abandoned before that.
    """

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    result: TResult | None = None
    version: str = "HTTP/1.1"
    reason_phrase: str | None = None
    exception: HttpRequestError | None = None
    closer: Callable[[], Awaitable[None]] | None = field(
        default=None, repr=False, compare=False
    )

    @property
    def is_success_status_code(self) -> bool:
        return is_success_status_code(self.status_code)

    def ensure_success_status_code(self) -> HttpClientResponse[TResult]:
        """Return ``self`` for a success, otherwise raise the carried error."""
        if self.is_success_status_code and self.exception is None:
            return self
        if self.exception is not None:
            raise self.exception
        raise HttpRequestError(
            f"Response status code does not indicate success: "
            f"{self.status_code} ({self.reason_phrase}).",
            status_code=self.status_code,
        )

    def with_changes(self, **changes: Any) -> HttpClientResponse[TResult]:
        return replace(self, **changes)

    async def aclose(self) -> None:
        """Release the streamed result and the underlying response."""
        if isinstance(self.result, AsyncGenerator):
            await self.result.aclose()
        if self.closer is not None:
            await self.closer()

    async def __aenter__(self) -> HttpClientResponse[TResult]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


@dataclass(frozen=True)
class RestResponseContext(InternalDTO):
    """The received response paired with the serializer options that decode it."""

    message: httpx.Response
    serializer_options: SerializerOptions

    def __post_init__(self) -> None:
        if self.message is None:
            raise ValueError("message must not be None")
        if self.serializer_options is None:
            raise ValueError("serializer_options must not be None")
