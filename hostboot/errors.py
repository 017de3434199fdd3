"""
Error types raised by the boot engine.

Two families matter to callers:

- AppLogicError: contract violations (programmer misuse). Fatal to the
  offending call, never retried.
- ProviderFailedError: a provider reported failure from register/boot.
  Routed through the app's error action, where a listener decides whether
  boot continues.

ServiceNotFoundError is raised by the container and is deliberately not an
AppLogicError, so "not created", "not booted" and "missing key" can be told
apart with isinstance checks.
"""

from typing import Any, List, Optional


class HostbootError(Exception):
    """Base exception for hostboot errors."""
    pass


class AppLogicError(HostbootError):
    """The app was used in a way its lifecycle contract forbids."""
    pass


class AppNotCreatedError(AppLogicError):
    """No valid app instance exists yet."""

    def __init__(self, operation: str = "make"):
        self.operation = operation
        super().__init__(
            f"No valid app found for '{operation}'. "
            f"Call create_app() before resolving services."
        )


class AppAlreadyCreatedError(AppLogicError):
    """An app instance already exists for this process."""

    def __init__(self):
        super().__init__(
            "An app was already created in this process. "
            "Use get_app() to reach it, or reset_app() in test teardown."
        )


class AppNotBootedError(AppLogicError):
    """Services were requested before the app reached BOOTED."""

    def __init__(self, status: Any, key: Optional[str] = None):
        self.status = status
        self.key = key
        msg = f"App is uninitialised: status is '{status}', services are available once booted"
        if key is not None:
            msg += f" (requested key={key!r})"
        super().__init__(msg)


class AlreadyBootingError(AppLogicError):
    """boot() was called while the app is already booting."""

    def __init__(self, status: Any):
        self.status = status
        super().__init__(
            f"It is not possible to call boot() when already booting "
            f"(status='{status}')."
        )


class InvalidStatusError(AppLogicError):
    """Operation is not allowed in the current status."""

    def __init__(self, status: Any, reason: str):
        self.status = status
        self.reason = reason
        super().__init__(f"Invalid operation in status '{status}': {reason}")


class DuplicateProviderError(AppLogicError):
    """A provider with the same id was already added."""

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(
            f"Provider '{provider_id}' was already added. "
            f"Provider ids must be unique per app."
        )


class ProviderFailedError(HostbootError):
    """A provider returned failure from register() or boot()."""

    def __init__(self, provider_id: str, operation: str):
        self.provider_id = provider_id
        self.operation = operation
        super().__init__(f"Provider '{provider_id}' failed to {operation}.")


class ContainerError(HostbootError):
    """Base exception for container errors."""
    pass


class ServiceNotFoundError(ContainerError, LookupError):
    """No entry in the container for the requested key."""

    def __init__(self, key: str, candidates: Optional[List[str]] = None):
        self.key = key
        self.candidates = candidates or []

        msg = f"No service found for key={key!r}"
        if self.candidates:
            msg += "\n\nCandidates found:"
            for candidate in self.candidates:
                msg += f"\n  - {candidate}"
        super().__init__(msg)
