from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from httprest.core.domain.content import HttpContent
from httprest.core.interfaces.model_bases import InternalDTO

EXTENSION_KEY = "httprest"
"""Key of the ``httpx.Request.extensions`` entry carrying the message options."""


@dataclass
class HttpRequestMessage(InternalDTO):
    """Transport-agnostic HTTP request assembled by the request builders.

    ``url`` is relative to the client base URL and may already carry a query
    string. ``options`` holds per-request flags (such as ``is_secured``) that
    travel to ``httpx`` as request extensions.
    """

    method: str = "GET"
    url: str = "/"
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    cookies: dict[str, str] = field(default_factory=dict)
    content: HttpContent | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def to_httpx_request(self, client: httpx.AsyncClient | httpx.Client) -> httpx.Request:
        """Build the ``httpx.Request`` sent by ``client``.

        Client-level base URL and default headers are merged by ``httpx``.
        """
        headers = httpx.Headers(self.headers)
        if self.cookies:
            headers["Cookie"] = "; ".join(
                f"{name}={value}" for name, value in self.cookies.items()
            )

        kwargs: dict[str, Any] = {}
        if self.content is not None:
            kwargs = self.content.to_request_kwargs()
            content_type = self.content.content_type
            if content_type and "content-type" not in headers:
                headers["Content-Type"] = content_type

        return client.build_request(
            self.method,
            self.url,
            headers=headers,
            extensions={EXTENSION_KEY: dict(self.options)},
            **kwargs,
        )
