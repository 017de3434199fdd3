"""
App - the boot lifecycle state machine.

Providers are taken through register then boot, phase by phase:

    IDLE --boot()--> BOOTING_EARLY --(plugins signal)--> BOOTING_PLUGINS
         --(last boot signal)--> BOOTING_THEMES --> BOOTED

Any uncaught failure once boot has started moves the app to FAILED, which
is terminal.

Providers can be added at any time (except once FAILED), including from
inside listeners of the app's own actions:

- while a phase pass is running, the new provider is appended and the same
  pass processes it;
- after boot started but with no pass running (waiting for a host signal,
  or already booted) the provider is registered and booted on the spot.

One app exists per process; see create_app(), get_app(), reset_app() and
make() at the bottom of this module.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
import logging
import threading

from .config import EnvConfig
from .container import Container
from .errors import (
    AlreadyBootingError,
    AppAlreadyCreatedError,
    AppNotBootedError,
    AppNotCreatedError,
    InvalidStatusError,
    ProviderFailedError,
)
from .hooks import HostAdapter, hooks as global_hooks
from .providers import Package, ServiceProvider
from .registry import ProviderEntry, ProviderRegistry
from .status import AppStatus, ProviderState


logger = logging.getLogger("hostboot.app")


class App:
    """
    Boot engine for a plugin host.

    Usage:
        app = create_app()
        app.add_provider(MyProvider()).add_package(MyPackage())
        app.boot()

        # host side, later
        hooks.do_action("plugins_loaded")
        hooks.do_action("init")

        make("my.service")
    """

    ACTION_ADD_PROVIDERS = "hostboot.add-providers"
    ACTION_ADDED_PROVIDER = "hostboot.provider-added"
    ACTION_REGISTERED_PROVIDER = "hostboot.provider-registered"
    ACTION_BOOTED_PROVIDER = "hostboot.provider-booted"
    ACTION_REGISTERED = "hostboot.registered"
    ACTION_BOOTED = "hostboot.booted"
    ACTION_ERROR = "hostboot.error"

    def __init__(
        self,
        container: Optional[Container] = None,
        hooks: Optional[HostAdapter] = None,
        config: Optional[EnvConfig] = None,
    ):
        if container is None:
            container = Container(config if config is not None else EnvConfig.load())
        self.container = container
        self.hooks = hooks if hooks is not None else global_hooks
        self.status = AppStatus.IDLE
        self.providers = ProviderRegistry()

        config = container.config
        self._debug = config.is_debug
        self._plugins_signal = config.plugins_signal
        self._last_boot_at = config.last_boot_at

        self._booting = False
        self._in_pass = False
        self._detached = False
        self._waiting: Optional[Tuple[str, Callable]] = None
        self._depth = 0
        self._escalated: Optional[BaseException] = None

    @classmethod
    def new(
        cls,
        container: Optional[Container] = None,
        hooks: Optional[HostAdapter] = None,
        config: Optional[EnvConfig] = None,
    ) -> "App":
        """Create the process-wide app. Alias of create_app()."""
        return create_app(container, hooks, config)

    @classmethod
    def make(cls, key: str) -> Any:
        """Resolve a service from the process-wide app. Alias of make()."""
        return make(key)

    @property
    def is_booting(self) -> bool:
        return self._booting

    @property
    def is_debug(self) -> bool:
        return self._debug

    @property
    def last_boot_at(self) -> str:
        return self._last_boot_at

    def enable_debug(self) -> "App":
        self._debug = True
        return self

    def disable_debug(self) -> "App":
        self._debug = False
        return self

    def run_last_boot_at(self, signal: str) -> "App":
        """
        Choose the host signal that gates the last phase.

        Ignored once boot has started.
        """
        if not self.status.is_idle:
            logger.warning(
                f"run_last_boot_at({signal!r}) ignored: app is already '{self.status}'"
            )
            return self
        self._last_boot_at = signal
        return self

    def detach(self) -> "App":
        """
        Stop listening to host signals.

        A detached app never advances to another phase, whatever the host
        fires afterwards.
        """
        self._detached = True
        if self._waiting is not None:
            signal, listener = self._waiting
            self._waiting = None
            self.hooks.remove_action(signal, listener)
            logger.debug(f"Detached from '{signal}'")
        return self

    @property
    def is_detached(self) -> bool:
        return self._detached

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def add_provider(self, provider: ServiceProvider) -> "App":
        """
        Add a provider.

        Raises:
            InvalidStatusError: If the app has failed
            DuplicateProviderError: If a provider with the same id was added
        """
        if self.status.is_failed:
            raise InvalidStatusError(
                self.status, f"cannot add provider {provider.id!r} to a failed app"
            )

        entry = self.providers.add(provider, added_in=self.status)
        logger.debug(f"  ↳ Added {entry.id} ({self.status})")

        with self._guard(), self._entered():
            try:
                self.hooks.do_action(self.ACTION_ADDED_PROVIDER, entry.id, self)
                started = self.status.is_booting or self.status.is_booted
                if started and not self._in_pass:
                    self._process(entry)
            except Exception as exc:
                self._fail(exc)

        return self

    def add_package(self, package: Package) -> "App":
        for provider in package.providers():
            self.add_provider(provider)
        return self

    # ------------------------------------------------------------------
    # Boot
    # ------------------------------------------------------------------

    def boot(self) -> "App":
        """
        Start booting.

        Runs the early phase right away, then waits for the host signals
        before running the following phases. Signals that already fired are
        caught up immediately.

        Raises:
            AlreadyBootingError: If called while booting, including from
                inside provider or listener callbacks
            InvalidStatusError: If boot already started, finished or failed
        """
        if self._booting:
            raise AlreadyBootingError(self.status)
        if not self.status.is_idle:
            raise InvalidStatusError(self.status, "boot() can only start from idle")

        self._booting = True
        logger.info("Booting app...")
        self._step(AppStatus.BOOTING_EARLY)
        return self

    def _step(self, status: AppStatus) -> None:
        with self._entered():
            try:
                self._run_phase(status)
                if not self.status.is_failed:
                    self._schedule_next()
            except Exception as exc:
                self._fail(exc)

    def _run_phase(self, status: AppStatus) -> None:
        self._advance(status)
        logger.info(f"Entering {status} ({len(self.providers)} providers known)")

        previous, self._in_pass = self._in_pass, True
        try:
            self.hooks.do_action(self.ACTION_ADD_PROVIDERS, self, status)
            self._sweep()
        finally:
            self._in_pass = previous

    def _schedule_next(self) -> None:
        if self.status.is_themes_step:
            self._finish()
            return

        if self._detached:
            return

        next_status = self.status.next()
        signal = self._plugins_signal if self.status.is_early else self._last_boot_at

        if self.hooks.did_action(signal):
            logger.debug(f"'{signal}' already fired, entering {next_status} now")
            self._step(next_status)
            return

        logger.debug(f"Waiting for '{signal}' to enter {next_status}")
        listener = self.hooks.once(signal, lambda: self._on_signal(next_status))
        self._waiting = (signal, listener)

    def _on_signal(self, status: AppStatus) -> None:
        self._waiting = None
        # Host signals are expected at most once per boot
        if self._detached or self.status.is_failed:
            return
        if self.status.ordinal >= status.ordinal:
            return
        self._step(status)

    def _finish(self) -> None:
        self.hooks.do_action(self.ACTION_REGISTERED)
        self._boot_deferred()
        if self.status.is_failed:
            return

        self._advance(AppStatus.BOOTED)
        logger.info(f"✅ App booted ({len(self.providers)} providers)")
        self.hooks.do_action(self.ACTION_BOOTED, self.container)
        self._booting = False

    def _advance(self, status: AppStatus) -> None:
        if status is not self.status.next():
            raise InvalidStatusError(self.status, f"cannot move to '{status}'")
        self.status = status

    # ------------------------------------------------------------------
    # Provider processing
    # ------------------------------------------------------------------

    def _sweep(self) -> None:
        """
        Register then boot everything known, until nothing is left.

        Providers added while sweeping are appended to the registry and
        picked up by the live iteration, or by the next round.
        """
        progressed = True
        while progressed and not self.status.is_failed:
            progressed = False
            for entry in self.providers:
                if self.status.is_failed:
                    return
                if entry.state is ProviderState.PENDING and not entry.in_progress:
                    self._register(entry)
                    progressed = True

            for entry in self.providers:
                if self.status.is_failed:
                    return
                if (
                    entry.state is ProviderState.REGISTERED
                    and entry.provider.is_bootable()
                    and not entry.in_progress
                ):
                    self._boot(entry)
                    progressed = True

    def _boot_deferred(self) -> None:
        previous, self._in_pass = self._in_pass, True
        try:
            for entry in self.providers:
                if self.status.is_failed:
                    return
                if entry.in_progress:
                    continue
                # late additions still go through register first
                if entry.state is ProviderState.PENDING and not self._register(entry):
                    continue
                if entry.state is ProviderState.REGISTERED:
                    logger.debug(f"  ↳ Deferred boot of {entry.id}")
                    self._boot(entry)
        finally:
            self._in_pass = previous

    def _process(self, entry: ProviderEntry) -> None:
        """Register and boot a provider added outside of a phase pass."""
        if not self._register(entry):
            return
        if entry.provider.is_bootable() or self.status.is_booted:
            self._boot(entry)

    def _register(self, entry: ProviderEntry) -> bool:
        entry.in_progress = True
        try:
            ok = entry.provider.register(self.container)
        finally:
            entry.in_progress = False

        if not ok:
            self.providers.mark(entry.id, ProviderState.FAILED)
            self._report(ProviderFailedError(entry.id, "register"))
            return False

        self.providers.mark(entry.id, ProviderState.REGISTERED)
        logger.debug(f"  ↳ Registered {entry.id}")
        self.hooks.do_action(self.ACTION_REGISTERED_PROVIDER, entry.id, self)
        return True

    def _boot(self, entry: ProviderEntry) -> bool:
        entry.in_progress = True
        try:
            ok = entry.provider.boot(self.container)
        finally:
            entry.in_progress = False

        if not ok:
            self.providers.mark(entry.id, ProviderState.FAILED)
            self._report(ProviderFailedError(entry.id, "boot"))
            return False

        self.providers.mark(entry.id, ProviderState.BOOTED)
        logger.debug(f"  ↳ Booted {entry.id}")
        self.hooks.do_action(self.ACTION_BOOTED_PROVIDER, entry.id, self)
        return True

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    @contextmanager
    def _guard(self) -> Iterator[None]:
        previous = self._booting
        self._booting = True
        try:
            yield
        finally:
            if not self.status.is_failed:
                self._booting = previous

    @contextmanager
    def _entered(self) -> Iterator[None]:
        # An escalated error is only remembered while it unwinds the engine
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._escalated = None

    def _fail(self, exc: Exception) -> None:
        """Handle an uncaught failure: FAILED once boot started, then report."""
        if not self.status.is_idle and not self.status.is_failed:
            logger.error(f"❌ Boot failed during {self.status}: {exc}")
            self.status = AppStatus.FAILED
        self._booting = False

        if exc is self._escalated:
            raise exc
        self._report(exc)

    def _report(self, error: Exception) -> None:
        """
        Publish an error on the error action.

        Listeners decide: returning lets processing continue, raising
        escalates. With no listener, the error is raised.
        """
        logger.error(f"✗ {error}")

        if not self.hooks.has_action(self.ACTION_ERROR):
            self._escalated = error
            raise error

        try:
            self.hooks.do_action(self.ACTION_ERROR, error)
        except Exception as exc:
            self._escalated = exc
            raise

        if isinstance(error, ProviderFailedError):
            logger.warning(f"Continuing after failure of provider {error.provider_id!r}")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def debug_info(self) -> Optional[Dict[str, Any]]:
        """
        Snapshot of status and providers.

        Returns None unless debug is enabled.
        """
        if not self._debug:
            return None

        phases: Dict[str, List[str]] = {}
        for status in AppStatus:
            ids = self.providers.added_during(status)
            if ids:
                phases[str(status)] = ids

        return {
            "status": str(self.status),
            "providers": self.providers.snapshot(),
            "phases": phases,
        }

    def __repr__(self) -> str:
        return f"<App status={self.status.value!r} providers={len(self.providers)}>"


# ============================================================================
# Process-wide app
# ============================================================================

_app: Optional[App] = None
_app_lock = threading.Lock()


def create_app(
    container: Optional[Container] = None,
    hooks: Optional[HostAdapter] = None,
    config: Optional[EnvConfig] = None,
) -> App:
    """
    Create the process-wide app.

    Raises:
        AppAlreadyCreatedError: If an app already exists
    """
    global _app
    with _app_lock:
        if _app is not None:
            raise AppAlreadyCreatedError()
        _app = App(container, hooks, config)
        return _app


def get_app() -> App:
    """
    Return the process-wide app.

    Raises:
        AppNotCreatedError: If create_app() was not called
    """
    if _app is None:
        raise AppNotCreatedError("get_app")
    return _app


def reset_app() -> Optional[App]:
    """
    Forget the process-wide app (test teardown). Returns the dropped app.

    The dropped app is detached, so later host signals no longer boot it.
    When it was bound to the module-level hooks, those are reset as well:
    receivers and fired counters go, and the next app starts from a host
    that has fired nothing. An injected host adapter is left untouched.
    """
    global _app
    with _app_lock:
        app, _app = _app, None

    if app is not None:
        app.detach()
        if app.hooks is global_hooks:
            global_hooks.reset()
    return app


def make(key: str) -> Any:
    """
    Resolve a service from the booted process-wide app.

    Raises:
        AppNotCreatedError: If no app exists
        AppNotBootedError: If the app has not reached BOOTED
        ServiceNotFoundError: If the container has no such key
    """
    app = _app
    if app is None:
        raise AppNotCreatedError("make")
    if not app.status.is_booted:
        raise AppNotBootedError(app.status, key)
    return app.container.get(key)
