"""
Service providers: units of registration and boot logic.

A provider writes into the container in register() and wires behaviour that
depends on other providers in boot(). Both return True on success; a falsy
return marks the provider failed without raising.
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, List, Optional

from .container import Container


ProviderCallback = Callable[[Container], bool]


class ServiceProvider(ABC):
    """
    Base class for providers.

    Set ``deferred_boot = True`` on a subclass to have boot() postponed
    until every phase has finished, when all other providers have both
    registered and booted.
    """

    deferred_boot: bool = False

    def __init__(self, provider_id: Optional[str] = None):
        self._id = provider_id

    @property
    def id(self) -> str:
        if self._id:
            return self._id
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    @abstractmethod
    def register(self, container: Container) -> bool:
        ...

    @abstractmethod
    def boot(self, container: Container) -> bool:
        ...

    def is_bootable(self) -> bool:
        """Whether boot() runs in the normal phase pass."""
        return not self.deferred_boot

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"


class RegisteredOnly(ServiceProvider):
    """Provider that only writes into the container."""

    def boot(self, container: Container) -> bool:
        return True


class BootedOnly(ServiceProvider):
    """Provider that only consumes what others registered."""

    def register(self, container: Container) -> bool:
        return True


class DeferredBoot(ServiceProvider):
    """Provider whose boot() waits for the end of the last phase."""

    deferred_boot = True


def _succeed(container: Container) -> bool:
    return True


class ConfigurableProvider(ServiceProvider):
    """
    Provider built from callables.

    Example:
        ConfigurableProvider(
            "cache",
            register=lambda c: c.set("cache", {}) or True,
            deferred_boot=True,
        )
    """

    def __init__(
        self,
        provider_id: str,
        register: Optional[ProviderCallback] = None,
        boot: Optional[ProviderCallback] = None,
        *,
        deferred_boot: bool = False,
    ):
        super().__init__(provider_id)
        self._register = register or _succeed
        self._boot = boot or _succeed
        self.deferred_boot = deferred_boot

    def register(self, container: Container) -> bool:
        return self._register(container)

    def boot(self, container: Container) -> bool:
        return self._boot(container)


class ServiceProviders:
    """Ordered collection of providers, as returned by Package.providers()."""

    def __init__(self, providers: Optional[Iterable[ServiceProvider]] = None):
        self._providers: List[ServiceProvider] = list(providers or [])

    @classmethod
    def new(cls, *providers: ServiceProvider) -> "ServiceProviders":
        return cls(providers)

    def add(self, provider: ServiceProvider) -> "ServiceProviders":
        self._providers.append(provider)
        return self

    def __iter__(self) -> Iterator[ServiceProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


class Package(ABC):
    """A named group of providers, added to the app as a unit."""

    name: str = ""

    @abstractmethod
    def providers(self) -> Iterable[ServiceProvider]:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name or type(self).__qualname__!r}>"
