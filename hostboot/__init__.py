"""
hostboot - boot lifecycle engine for plugin hosts

Takes service providers through fixed host phases (early, plugins, themes),
registering then booting each one exactly once, and exposes the resulting
services once the app is booted.

- App: lifecycle state machine, reentrant provider registration
- Providers: register/boot units, packages of providers
- Container: key/value store shared by providers
- Hooks: host signals and lifecycle notifications
"""

__version__ = "0.1.0"

from .app import (
    App,
    create_app,
    get_app,
    reset_app,
    make,
)

from .status import (
    AppStatus,
    ProviderState,
)

from .providers import (
    ServiceProvider,
    RegisteredOnly,
    BootedOnly,
    DeferredBoot,
    ConfigurableProvider,
    Package,
    ServiceProviders,
)

from .registry import (
    ProviderEntry,
    ProviderRegistry,
)

from .container import Container
from .config import EnvConfig

from .hooks import (
    Hook,
    Hooks,
    HostAdapter,
    hooks,
)

from .errors import (
    HostbootError,
    AppLogicError,
    AppNotCreatedError,
    AppAlreadyCreatedError,
    AppNotBootedError,
    AlreadyBootingError,
    InvalidStatusError,
    DuplicateProviderError,
    ProviderFailedError,
    ContainerError,
    ServiceNotFoundError,
)

__all__ = [
    # App
    "App",
    "create_app",
    "get_app",
    "reset_app",
    "make",

    # Status
    "AppStatus",
    "ProviderState",

    # Providers
    "ServiceProvider",
    "RegisteredOnly",
    "BootedOnly",
    "DeferredBoot",
    "ConfigurableProvider",
    "Package",
    "ServiceProviders",

    # Registry
    "ProviderEntry",
    "ProviderRegistry",

    # Container & config
    "Container",
    "EnvConfig",

    # Hooks
    "Hook",
    "Hooks",
    "HostAdapter",
    "hooks",

    # Errors
    "HostbootError",
    "AppLogicError",
    "AppNotCreatedError",
    "AppAlreadyCreatedError",
    "AppNotBootedError",
    "AlreadyBootingError",
    "InvalidStatusError",
    "DuplicateProviderError",
    "ProviderFailedError",
    "ContainerError",
    "ServiceNotFoundError",
]
