"""
Service registration for the HTTP client.

Wires the options, the dispatcher factory, the ``httpx.AsyncClient`` and the
dispatcher into a :class:`ServiceCollection`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import httpx

from httprest.core.config.app_config import RestClientConfig
from httprest.core.config.options import HttpClientOptions, RestOptionsConfiguration
from httprest.core.di.container import ServiceCollection
from httprest.core.interfaces.di_interface import IServiceProvider
from httprest.core.interfaces.dispatcher_interface import (
    IHttpClientDispatcher,
    IHttpClientDispatcherFactory,
)
from httprest.core.interfaces.interceptor_interface import (
    IHttpRequestInterceptor,
    IHttpResponseInterceptor,
)
from httprest.core.services.authentication import (
    AuthenticationHeaderValueAuth,
    HttpClientAuthenticationHeaderValueProvider,
)
from httprest.core.services.dispatcher import HttpClientDispatcher
from httprest.core.services.dispatcher_factory import HttpClientDispatcherFactory

logger = logging.getLogger(__name__)


def create_http_client(config: RestClientConfig) -> httpx.AsyncClient:
    """Build the ``httpx.AsyncClient`` described by ``config``."""
    return httpx.AsyncClient(
        base_url=config.base_url or "",
        headers=config.default_headers,
        timeout=config.timeout,
    )


def register_http_rest_services(
    services: ServiceCollection,
    config: RestClientConfig | None = None,
    configure: Callable[[HttpClientOptions], None] | None = None,
    authentication_provider: HttpClientAuthenticationHeaderValueProvider | None = None,
    request_interceptors: Iterable[IHttpRequestInterceptor] = (),
    response_interceptors: Iterable[IHttpResponseInterceptor] = (),
) -> ServiceCollection:
    """Register the HTTP client services.

    Args:
        services: The collection to register into
        config: Client settings; read from the environment when omitted
        configure: Callback customizing the options after the defaults
        authentication_provider: Supplies credentials for secured requests
        request_interceptors: Interceptors run before sending
        response_interceptors: Interceptors run on every response

    Returns:
        The same collection, for chaining
    """
    if services is None:
        raise ValueError("services must not be None")

    client_config = config if config is not None else RestClientConfig.from_env()
    request_interceptors = list(request_interceptors)
    response_interceptors = list(response_interceptors)

    def _options_factory(provider: IServiceProvider) -> HttpClientOptions:
        options = HttpClientOptions.default_options(
            accept_language=client_config.accept_language
        )
        RestOptionsConfiguration(provider).configure(options)
        if configure is not None:
            configure(options)
        return options

    def _factory_factory(provider: IServiceProvider) -> HttpClientDispatcherFactory:
        return HttpClientDispatcherFactory(
            provider.get_required_service(HttpClientOptions)
        )

    def _dispatcher_factory(provider: IServiceProvider) -> HttpClientDispatcher:
        auth = (
            AuthenticationHeaderValueAuth(authentication_provider)
            if authentication_provider is not None
            else None
        )
        return HttpClientDispatcher(
            provider.get_required_service(httpx.AsyncClient),
            provider.get_required_service(IHttpClientDispatcherFactory),  # type: ignore[type-abstract]
            provider.get_required_service(RestClientConfig),
            auth=auth,
            request_interceptors=request_interceptors,
            response_interceptors=response_interceptors,
        )

    services.add_instance(RestClientConfig, client_config)
    services.add_singleton(HttpClientOptions, implementation_factory=_options_factory)
    services.add_singleton(
        IHttpClientDispatcherFactory, implementation_factory=_factory_factory
    )
    services.add_singleton(
        httpx.AsyncClient,
        implementation_factory=lambda _: create_http_client(client_config),
    )
    services.add_transient(
        IHttpClientDispatcher, implementation_factory=_dispatcher_factory
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Registered HTTP client services for %s", client_config.base_url)
    return services
