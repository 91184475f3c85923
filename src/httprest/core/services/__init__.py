# Services package

from .authentication import (
    AuthenticationHeaderValueAuth,
    HttpClientAuthenticationHeaderValueProvider,
)
from .dispatcher import HttpClientDispatcher
from .dispatcher_factory import HttpClientDispatcherFactory

__all__ = [
    "AuthenticationHeaderValueAuth",
    "HttpClientAuthenticationHeaderValueProvider",
    "HttpClientDispatcher",
    "HttpClientDispatcherFactory",
]
