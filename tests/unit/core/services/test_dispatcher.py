"""
Tests for HttpClientDispatcher against a mocked transport.
"""

import asyncio
import json
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httprest.core.common.exceptions import (
    HttpRequestError,
    HttpRequestTimeoutError,
    InvalidRequestError,
    ResponseBuilderNotFoundError,
)
from httprest.core.config.app_config import RestClientConfig
from httprest.core.config.options import HttpClientOptions
from httprest.core.domain.attribute import map_get, map_post
from httprest.core.domain.parameters import Location
from httprest.core.domain.request_message import HttpRequestMessage
from httprest.core.domain.responses import HttpClientResponse
from httprest.core.interfaces.interceptor_interface import (
    IHttpRequestInterceptor,
    IHttpResponseInterceptor,
)
from httprest.core.interfaces.request_definitions import (
    IHttpRequestPathString,
    IHttpRequestString,
)
from httprest.core.services.authentication import AuthenticationHeaderValueAuth
from httprest.core.services.dispatcher import HttpClientDispatcher
from httprest.core.services.dispatcher_factory import HttpClientDispatcherFactory
from pytest_httpx import HTTPXMock

BASE_URL = "https://api.example.com"


@dataclass
class User:
    id: int
    name: str


@map_get("/users/{id}", location=Location.PATH)
@dataclass
class GetUser(IHttpRequestPathString):
    id: int

    def get_path_string(self) -> Mapping[str, str]:
        return {"id": str(self.id)}


@map_post("/users")
@dataclass
class CreateUser(IHttpRequestString):
    name: str


@map_get("/users", location=Location.HEADER)
class BrokenRequest:
    pass


class HeaderInterceptor(IHttpRequestInterceptor):
    def __init__(self, order: int, calls: list[str]) -> None:
        self.order = order
        self._calls = calls

    async def intercept(
        self, request: Any, message: HttpRequestMessage
    ) -> HttpClientResponse[Any] | None:
        self._calls.append(f"request-{self.order}")
        message.headers["X-Trace"] = str(self.order)
        return None


class CacheInterceptor(IHttpRequestInterceptor):
    async def intercept(
        self, request: Any, message: HttpRequestMessage
    ) -> HttpClientResponse[Any] | None:
        return HttpClientResponse(status_code=200, result=User(1, "cached"))


class TaggingResponseInterceptor(IHttpResponseInterceptor):
    def __init__(self, order: int, calls: list[str]) -> None:
        self.order = order
        self._calls = calls

    async def intercept(
        self, request: Any, response: HttpClientResponse[Any]
    ) -> HttpClientResponse[Any]:
        self._calls.append(f"response-{self.order}")
        return response.with_changes(reason_phrase=f"tagged-{self.order}")


@pytest_asyncio.fixture(name="client")
async def client_fixture() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        yield client


@pytest.fixture
def factory() -> HttpClientDispatcherFactory:
    return HttpClientDispatcherFactory(HttpClientOptions.default_options())


@pytest.mark.asyncio
async def test_send_decodes_typed_result(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_response(
        url=f"{BASE_URL}/users/7", method="GET", json={"id": 7, "name": "ann"}
    )
    dispatcher = HttpClientDispatcher(client, factory)

    response = await dispatcher.send(GetUser(7), User)

    assert response.status_code == 200
    assert response.result == User(7, "ann")
    sent = httpx_mock.get_request()
    assert sent.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_send_failure_returns_response_with_exception(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_response(url=f"{BASE_URL}/users/404", status_code=404, text="missing")
    dispatcher = HttpClientDispatcher(client, factory)

    response = await dispatcher.send(GetUser(404), User)

    assert response.status_code == 404
    assert isinstance(response.exception, HttpRequestError)
    assert "404 (Not Found). missing" in response.exception.message


@pytest.mark.asyncio
async def test_secured_request_uses_authentication_provider(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_response(url=f"{BASE_URL}/users", method="POST", status_code=201)
    dispatcher = HttpClientDispatcher(
        client, factory, auth=AuthenticationHeaderValueAuth(lambda request: "token-1")
    )

    response = await dispatcher.send(CreateUser("ann"))

    assert response.status_code == 201
    sent = httpx_mock.get_request()
    assert sent.headers["Authorization"] == "Bearer token-1"
    assert json.loads(sent.content) == {"name": "ann"}
    assert sent.headers["Content-Type"] == "application/json; charset=utf-8"


@pytest.mark.asyncio
async def test_interceptors_run_in_order(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_response(url=f"{BASE_URL}/users/1", json={"id": 1, "name": "a"})
    calls: list[str] = []
    dispatcher = HttpClientDispatcher(
        client,
        factory,
        request_interceptors=[HeaderInterceptor(2, calls), HeaderInterceptor(1, calls)],
        response_interceptors=[
            TaggingResponseInterceptor(5, calls),
            TaggingResponseInterceptor(3, calls),
        ],
    )

    response = await dispatcher.send(GetUser(1), User)

    assert calls == ["request-1", "request-2", "response-3", "response-5"]
    assert httpx_mock.get_request().headers["X-Trace"] == "2"
    assert response.reason_phrase == "tagged-5"


@pytest.mark.asyncio
async def test_request_interceptor_can_short_circuit(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    dispatcher = HttpClientDispatcher(
        client, factory, request_interceptors=[CacheInterceptor()]
    )

    response = await dispatcher.send(GetUser(1), User)

    assert response.result == User(1, "cached")
    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_transport_timeout_yields_408(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_exception(httpx.ReadTimeout("too slow"))
    dispatcher = HttpClientDispatcher(client, factory)

    response = await dispatcher.send(GetUser(1), User)

    assert response.status_code == 408
    assert isinstance(response.exception, HttpRequestTimeoutError)
    assert isinstance(response.exception.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_transport_error_yields_503(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_exception(httpx.ConnectError("refused"))
    dispatcher = HttpClientDispatcher(client, factory)

    response = await dispatcher.send(GetUser(1), User)

    assert response.status_code == 503
    assert response.exception.status_code == 503
    assert isinstance(response.exception.__cause__, httpx.ConnectError)
    with pytest.raises(HttpRequestError):
        response.ensure_success_status_code()


@pytest.mark.asyncio
async def test_configured_timeout_yields_408(factory: HttpClientDispatcherFactory) -> None:
    async def slow_handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200)

    transport = httpx.MockTransport(slow_handler)
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        dispatcher = HttpClientDispatcher(
            client, factory, RestClientConfig(timeout=0.01)
        )

        response = await dispatcher.send(GetUser(1))

    assert response.status_code == 408
    assert isinstance(response.exception, HttpRequestTimeoutError)


@pytest.mark.asyncio
async def test_streamed_items(
    client: httpx.AsyncClient,
    factory: HttpClientDispatcherFactory,
    httpx_mock: HTTPXMock,
) -> None:
    httpx_mock.add_response(
        url=f"{BASE_URL}/users/0",
        json=[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}],
    )
    dispatcher = HttpClientDispatcher(client, factory)

    response = await dispatcher.send(GetUser(0), AsyncIterator[User])

    assert [user async for user in response.result] == [User(1, "a"), User(2, "b")]


@pytest.mark.asyncio
async def test_invalid_request_propagates(
    client: httpx.AsyncClient, factory: HttpClientDispatcherFactory
) -> None:
    dispatcher = HttpClientDispatcher(client, factory)

    with pytest.raises(InvalidRequestError):
        await dispatcher.send(BrokenRequest())


@pytest.mark.asyncio
async def test_missing_response_builder_propagates(
    client: httpx.AsyncClient, httpx_mock: HTTPXMock
) -> None:
    httpx_mock.add_response(url=f"{BASE_URL}/users/1")
    options = HttpClientOptions.default_options()
    options.response_builders.clear()
    dispatcher = HttpClientDispatcher(client, HttpClientDispatcherFactory(options))

    with pytest.raises(ResponseBuilderNotFoundError):
        await dispatcher.send(GetUser(1))


def test_constructor_rejects_missing_collaborators(
    factory: HttpClientDispatcherFactory,
) -> None:
    with pytest.raises(ValueError):
        HttpClientDispatcher(None, factory)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        HttpClientDispatcher(httpx.AsyncClient(), None)  # type: ignore[arg-type]
