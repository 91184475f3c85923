from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable
from typing import Any, TypeVar, Union, get_args, get_origin

from httprest.core.common.exceptions import ServiceResolutionError
from httprest.core.interfaces.di_interface import (
    IServiceCollection,
    IServiceProvider,
    IServiceScope,
    ServiceLifetime,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ServiceDescriptor:
    """Describes a service registration in the container."""

    def __init__(
        self,
        service_type: type,
        lifetime: ServiceLifetime,
        implementation_type: type | None = None,
        implementation_factory: Callable[[IServiceProvider], Any] | None = None,
        instance: Any | None = None,
    ):
        """Initialize a service descriptor.

        Args:
            service_type: The type of service being registered
            lifetime: The lifetime of the service
            implementation_type: The implementation type (if different from service_type)
            implementation_factory: Factory function to create the service
            instance: An existing instance (for singleton services)
        """
        self.service_type = service_type
        self.lifetime = lifetime
        self.implementation_type = implementation_type or service_type
        self.implementation_factory = implementation_factory
        self.instance = instance

        if not implementation_type and not implementation_factory and instance is None:
            raise ValueError(
                "Either implementation_type, implementation_factory, or instance must be provided"
            )


class ServiceScope(IServiceScope):
    """Implementation of a service scope."""

    def __init__(
        self, provider: ServiceProvider, parent_scope: ServiceScope | None = None
    ):
        self._provider = ScopedServiceProvider(provider, self)
        self._parent_scope = parent_scope
        self._instances: dict[type, Any] = {}
        self._disposed = False

    @property
    def service_provider(self) -> IServiceProvider:
        """Get the service provider for this scope."""
        if self._disposed:
            raise RuntimeError("This scope has been disposed")
        return self._provider

    async def dispose(self) -> None:
        """Dispose of this scope and any scoped services."""
        if self._disposed:
            return

        self._disposed = True

        for instance in self._instances.values():
            if hasattr(instance, "aclose") and callable(instance.aclose):
                await instance.aclose()
            elif hasattr(instance, "__aenter__") and hasattr(instance, "__aexit__"):
                await instance.__aexit__(None, None, None)
            elif hasattr(instance, "dispose") and callable(instance.dispose):
                instance.dispose()

        self._instances.clear()


def _required(service: T | None, service_type: type[T]) -> T:
    if service is None:
        type_name = getattr(service_type, "__name__", str(service_type))
        raise ServiceResolutionError(
            f"No service registered for {type_name}", service_name=type_name
        )
    return service


class ScopedServiceProvider(IServiceProvider):
    """A service provider for a specific scope."""

    def __init__(self, root_provider: ServiceProvider, scope: ServiceScope) -> None:
        self._root = root_provider
        self._scope = scope

    def get_service(self, service_type: type[T]) -> T | None:
        """Get a service of the given type if registered."""
        return self._root._get_service(service_type, self._scope)

    def get_required_service(self, service_type: type[T]) -> T:
        """Get a service of the given type, throwing if not found."""
        return _required(self.get_service(service_type), service_type)

    def create_scope(self) -> IServiceScope:
        """Create a new nested service scope."""
        return ServiceScope(self._root, self._scope)


class ServiceProvider(IServiceProvider):
    """Implementation of a service provider."""

    def __init__(self, descriptors: dict[type, ServiceDescriptor]) -> None:
        self._descriptors = descriptors
        self._singleton_instances: dict[type, Any] = {}

    def get_service(self, service_type: type[T]) -> T | None:
        """Get a service of the given type if registered."""
        return self._get_service(service_type, None)

    def get_required_service(self, service_type: type[T]) -> T:
        """Get a service of the given type, throwing if not found."""
        return _required(self.get_service(service_type), service_type)

    def create_scope(self) -> IServiceScope:
        """Create a new service scope."""
        return ServiceScope(self)

    def _get_service(
        self, service_type: type[T], scope: ServiceScope | None
    ) -> T | None:
        descriptor = self._descriptors.get(service_type)
        if descriptor is None:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "DI: no descriptor for %s; registered=%d",
                    getattr(service_type, "__name__", str(service_type)),
                    len(self._descriptors),
                )
            return None

        if descriptor.instance is not None:
            return descriptor.instance  # type: ignore[no-any-return]

        if descriptor.lifetime == ServiceLifetime.SINGLETON:
            if service_type in self._singleton_instances:
                return self._singleton_instances[service_type]  # type: ignore[no-any-return]

            instance = self._create_instance(descriptor, scope)
            self._singleton_instances[service_type] = instance
            return instance  # type: ignore[no-any-return]

        elif descriptor.lifetime == ServiceLifetime.SCOPED:
            if scope is None:
                type_name = getattr(service_type, "__name__", str(service_type))
                raise ServiceResolutionError(
                    f"Cannot resolve scoped service {type_name} from root provider",
                    service_name=type_name,
                )

            if service_type in scope._instances:
                return scope._instances[service_type]  # type: ignore[no-any-return]

            instance = self._create_instance(descriptor, scope)
            scope._instances[service_type] = instance
            return instance  # type: ignore[no-any-return]

        else:  # TRANSIENT
            return self._create_instance(descriptor, scope)  # type: ignore[no-any-return]

    def _create_instance(
        self, descriptor: ServiceDescriptor, scope: ServiceScope | None
    ) -> Any:
        if descriptor.implementation_factory:
            provider = scope.service_provider if scope else self
            return descriptor.implementation_factory(provider)

        impl_type = descriptor.implementation_type
        if impl_type is None:
            raise RuntimeError("Implementation type is None and no factory provided")

        try:
            signature = inspect.signature(impl_type)
            has_provider_param = any(
                param.name == "service_provider"
                and _annotation_accepts_service_provider(param.annotation)
                for param in signature.parameters.values()
            )
        except (ValueError, TypeError):
            has_provider_param = False

        if has_provider_param:
            provider = scope.service_provider if scope else self
            return impl_type(service_provider=provider)
        return impl_type()


def _annotation_accepts_service_provider(annotation: Any) -> bool:
    if annotation is inspect.Parameter.empty:
        return False

    if annotation == IServiceProvider:
        return True

    # Postponed annotations arrive as strings.
    if isinstance(annotation, str):
        return "IServiceProvider" in annotation.replace(" ", "")

    origin = get_origin(annotation)
    if origin in (types.UnionType, Union) or origin is not None:
        return any(_annotation_accepts_service_provider(arg) for arg in get_args(annotation))

    return False


class ServiceCollection(IServiceCollection):
    """Implementation of a service collection."""

    def __init__(self) -> None:
        self._descriptors: dict[type, ServiceDescriptor] = {}

    def _add(
        self,
        lifetime: ServiceLifetime,
        service_type: type[Any],
        implementation_type: type | None,
        implementation_factory: Callable[[IServiceProvider], Any] | None,
    ) -> IServiceCollection:
        # If only service_type is provided, use it as the implementation type
        if implementation_type is None and implementation_factory is None:
            implementation_type = service_type

        self._descriptors[service_type] = ServiceDescriptor(
            service_type=service_type,
            lifetime=lifetime,
            implementation_type=implementation_type,
            implementation_factory=implementation_factory,
        )
        return self

    def add_singleton(
        self,
        service_type: type[Any],
        implementation_type: type | None = None,
        implementation_factory: Callable[[IServiceProvider], Any] | None = None,
    ) -> IServiceCollection:
        """Register a singleton service."""
        return self._add(
            ServiceLifetime.SINGLETON,
            service_type,
            implementation_type,
            implementation_factory,
        )

    def add_transient(
        self,
        service_type: type[Any],
        implementation_type: type | None = None,
        implementation_factory: Callable[[IServiceProvider], Any] | None = None,
    ) -> IServiceCollection:
        """Register a transient service."""
        return self._add(
            ServiceLifetime.TRANSIENT,
            service_type,
            implementation_type,
            implementation_factory,
        )

    def add_scoped(
        self,
        service_type: type[Any],
        implementation_type: type | None = None,
        implementation_factory: Callable[[IServiceProvider], Any] | None = None,
    ) -> IServiceCollection:
        """Register a scoped service."""
        return self._add(
            ServiceLifetime.SCOPED,
            service_type,
            implementation_type,
            implementation_factory,
        )

    def add_instance(
        self, service_type: type[Any], instance: Any
    ) -> IServiceCollection:
        """Register an existing instance as a singleton."""
        self._descriptors[service_type] = ServiceDescriptor(
            service_type=service_type,
            lifetime=ServiceLifetime.SINGLETON,
            instance=instance,
        )
        return self

    def is_registered(self, service_type: type[Any]) -> bool:
        return service_type in self._descriptors

    def build_service_provider(self) -> IServiceProvider:
        """Build a service provider with the registered services."""
        return ServiceProvider(self._descriptors.copy())
