"""
Testing utilities for apps and providers.
"""

from typing import Any, Callable, List, Optional, Tuple

from .container import Container
from .hooks import HostAdapter
from .providers import ServiceProvider


class RecordingProvider(ServiceProvider):
    """
    Provider for tests.

    Appends ("register", id) / ("boot", id) to a journal (shared between
    providers when the same list is passed), optionally sets container
    values, and returns configurable results.
    """

    def __init__(
        self,
        provider_id: str,
        journal: Optional[List[Tuple[str, str]]] = None,
        *,
        values: Optional[dict] = None,
        register_result: bool = True,
        boot_result: bool = True,
        deferred_boot: bool = False,
        on_register: Optional[Callable[[Container], Any]] = None,
        on_boot: Optional[Callable[[Container], Any]] = None,
    ):
        super().__init__(provider_id)
        self.journal = journal if journal is not None else []
        self.values = values or {}
        self.register_result = register_result
        self.boot_result = boot_result
        self.deferred_boot = deferred_boot
        self.on_register = on_register
        self.on_boot = on_boot
        self.register_calls = 0
        self.boot_calls = 0

    def register(self, container: Container) -> bool:
        self.register_calls += 1
        self.journal.append(("register", self.id))
        for key, value in self.values.items():
            container[key] = value
        if self.on_register is not None:
            self.on_register(container)
        return self.register_result

    def boot(self, container: Container) -> bool:
        self.boot_calls += 1
        self.journal.append(("boot", self.id))
        if self.on_boot is not None:
            self.on_boot(container)
        return self.boot_result

    def reset(self) -> None:
        """Reset tracking."""
        self.register_calls = 0
        self.boot_calls = 0
        self.journal.clear()


class ActionRecorder:
    """
    Records every firing of the given actions.

    Usage:
        recorder = ActionRecorder(hooks, App.ACTION_BOOTED, App.ACTION_ERROR)
        ...
        assert recorder.count(App.ACTION_BOOTED) == 1
    """

    def __init__(self, hooks: HostAdapter, *names: str):
        self.calls: List[Tuple[str, tuple]] = []
        for name in names:
            hooks.add_action(name, self._recorder(name))

    def _recorder(self, name: str) -> Callable[..., None]:
        def record(*args: Any) -> None:
            self.calls.append((name, args))
        return record

    def count(self, name: str) -> int:
        return sum(1 for called, _ in self.calls if called == name)

    def args(self, name: str) -> List[tuple]:
        return [args for called, args in self.calls if called == name]

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]
