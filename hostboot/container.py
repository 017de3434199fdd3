"""
Container - key/value store shared by every provider.

The engine never interprets keys; providers write during register() and
read during boot(). A container can wrap read-only delegates (any object
with __contains__ and __getitem__), consulted after local entries.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional
import difflib
import logging

from .config import EnvConfig
from .errors import ServiceNotFoundError


logger = logging.getLogger("hostboot.container")

_MISSING = object()


class Container:
    """
    Service store with set/get/has semantics.

    Example:
        container.set("db.url", "postgres://localhost/db")
        container.factory("db", lambda c: connect(c.get("db.url")))
        container["cache"] = {}

        container.get("db")  # factory runs once, result is shared
    """

    __slots__ = ("_values", "_factories", "_delegates", "_config")

    def __init__(
        self,
        config: Optional[EnvConfig] = None,
        delegates: Optional[Iterable[Any]] = None,
    ):
        self._values: Dict[str, Any] = {}
        self._factories: Dict[str, Callable[["Container"], Any]] = {}
        self._delegates: List[Any] = list(delegates or [])
        self._config = config if config is not None else EnvConfig()

    @property
    def config(self) -> EnvConfig:
        return self._config

    def set(self, key: str, value: Any) -> None:
        self._factories.pop(key, None)
        self._values[key] = value

    def factory(self, key: str, factory: Callable[["Container"], Any]) -> None:
        """
        Bind a lazy factory.

        The factory receives the container, runs on first get() and its
        result replaces the binding.
        """
        self._values.pop(key, None)
        self._factories[key] = factory

    def add_delegate(self, delegate: Any) -> None:
        self._delegates.append(delegate)

    def has(self, key: str) -> bool:
        if key in self._values or key in self._factories:
            return True
        return any(key in delegate for delegate in self._delegates)

    def get(self, key: str) -> Any:
        """
        Fetch a service.

        Raises:
            ServiceNotFoundError: If neither local entries nor delegates know the key
        """
        value = self._values.get(key, _MISSING)
        if value is not _MISSING:
            return value

        factory = self._factories.get(key)
        if factory is not None:
            logger.debug(f"Building {key!r} from factory")
            value = factory(self)
            del self._factories[key]
            self._values[key] = value
            return value

        for delegate in self._delegates:
            if key in delegate:
                return delegate[key]

        raise ServiceNotFoundError(key, self._candidates(key))

    def keys(self) -> List[str]:
        return [*self._values, *self._factories]

    def _candidates(self, key: str) -> List[str]:
        return difflib.get_close_matches(key, self.keys(), n=3, cutoff=0.6)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"<Container keys={len(self._values) + len(self._factories)} delegates={len(self._delegates)}>"
