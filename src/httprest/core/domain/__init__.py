# Domain package

from .attribute import (
    HttpClientAttribute,
    IHttpClientAttributeProvider,
    http_client,
    map_connect,
    map_delete,
    map_get,
    map_head,
    map_options,
    map_patch,
    map_post,
    map_put,
    map_trace,
)
from .parameters import (
    BodyFormat,
    ContentType,
    DataFormat,
    Location,
    Method,
    PatchOperation,
)
from .request_message import HttpRequestMessage
from .responses import HttpClientResponse, RestResponseContext

__all__ = [
    "BodyFormat",
    "ContentType",
    "DataFormat",
    "HttpClientAttribute",
    "HttpClientResponse",
    "HttpRequestMessage",
    "IHttpClientAttributeProvider",
    "Location",
    "Method",
    "PatchOperation",
    "RestResponseContext",
    "http_client",
    "map_connect",
    "map_delete",
    "map_get",
    "map_head",
    "map_options",
    "map_patch",
    "map_post",
    "map_put",
    "map_trace",
]
