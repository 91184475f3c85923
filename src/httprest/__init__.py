"""Declarative HTTP client built on ``httpx``.

Request objects describe their HTTP mapping with an attribute and opt into
message parts by implementing capability interfaces; the dispatcher turns
them into requests and decodes the responses.
"""

from httprest.core.common.exceptions import (
    ConfigurationError,
    HttpRequestError,
    HttpRequestTimeoutError,
    HttpRestError,
    InvalidRequestError,
    RequestBuilderNotFoundError,
    ResponseBuilderNotFoundError,
    ServiceResolutionError,
)
from httprest.core.common.logging_utils import LogFormat, configure_logging, get_logger
from httprest.core.config import (
    HttpClientOptions,
    RestClientConfig,
    RestOptionsConfiguration,
    SerializerOptions,
    load_config,
)
from httprest.core.di.container import ServiceCollection
from httprest.core.di.services import register_http_rest_services
from httprest.core.domain import (
    BodyFormat,
    ContentType,
    DataFormat,
    HttpClientAttribute,
    HttpClientResponse,
    HttpRequestMessage,
    IHttpClientAttributeProvider,
    Location,
    Method,
    PatchOperation,
    RestResponseContext,
    http_client,
    map_delete,
    map_get,
    map_patch,
    map_post,
    map_put,
)
from httprest.core.interfaces.dispatcher_interface import IHttpClientDispatcher
from httprest.core.interfaces.interceptor_interface import (
    IHttpRequestInterceptor,
    IHttpResponseInterceptor,
)
from httprest.core.interfaces.request_builder_interface import IHttpClientRequestBuilder
from httprest.core.interfaces.request_definitions import (
    IHttpRequestBasicAuth,
    IHttpRequestByteArray,
    IHttpRequestCookie,
    IHttpRequestDefinition,
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
from httprest.core.interfaces.response_builder_interface import IHttpClientResponseBuilder
from httprest.core.services import (
    AuthenticationHeaderValueAuth,
    HttpClientAuthenticationHeaderValueProvider,
    HttpClientDispatcher,
    HttpClientDispatcherFactory,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticationHeaderValueAuth",
    "BodyFormat",
    "ConfigurationError",
    "ContentType",
    "DataFormat",
    "HttpClientAttribute",
    "HttpClientAuthenticationHeaderValueProvider",
    "HttpClientDispatcher",
    "HttpClientDispatcherFactory",
    "HttpClientOptions",
    "HttpClientResponse",
    "HttpRequestError",
    "HttpRequestMessage",
    "HttpRequestTimeoutError",
    "HttpRestError",
    "IHttpClientAttributeProvider",
    "IHttpClientDispatcher",
    "IHttpClientRequestBuilder",
    "IHttpClientResponseBuilder",
    "IHttpRequestBasicAuth",
    "IHttpRequestByteArray",
    "IHttpRequestCookie",
    "IHttpRequestDefinition",
    "IHttpRequestDefinitionComplete",
    "IHttpRequestDefinitionStart",
    "IHttpRequestFormUrlEncoded",
    "IHttpRequestHeader",
    "IHttpRequestInterceptor",
    "IHttpRequestMultipart",
    "IHttpRequestPatch",
    "IHttpRequestPathString",
    "IHttpRequestQueryString",
    "IHttpRequestStream",
    "IHttpRequestString",
    "IHttpResponseInterceptor",
    "InvalidRequestError",
    "Location",
    "LogFormat",
    "Method",
    "PatchOperation",
    "RequestBuilderNotFoundError",
    "ResponseBuilderNotFoundError",
    "RestClientConfig",
    "RestOptionsConfiguration",
    "RestResponseContext",
    "SerializerOptions",
    "ServiceCollection",
    "ServiceResolutionError",
    "configure_logging",
    "get_logger",
    "http_client",
    "load_config",
    "map_delete",
    "map_get",
    "map_patch",
    "map_post",
    "map_put",
    "register_http_rest_services",
]
