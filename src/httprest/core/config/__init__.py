# Configuration package

from httprest.core.config.app_config import RestClientConfig, load_config
from httprest.core.config.options import HttpClientOptions, RestOptionsConfiguration
from httprest.core.config.serializer_options import SerializerOptions

__all__ = [
    "HttpClientOptions",
    "RestClientConfig",
    "RestOptionsConfiguration",
    "SerializerOptions",
    "load_config",
]
