"""
Hooks - named actions shared by the host and the boot engine.

The host fires actions to announce lifecycle points ("plugins_loaded",
"init", ...). The engine listens to those to advance its phases, and fires
its own actions to notify observers about providers and boot progress.

Usage:
    from hostboot.hooks import hooks

    def on_ready():
        print("plugins are ready")

    hooks.add_action("plugins_loaded", on_ready)
    hooks.do_action("plugins_loaded")

    # One-shot listener, removed before it runs
    hooks.once("init", lambda: print("init happened"))
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Protocol, Tuple, runtime_checkable

logger = logging.getLogger("hostboot.hooks")

__all__ = [
    "Hook",
    "Hooks",
    "HostAdapter",
    "hooks",
]

DEFAULT_PRIORITY = 100


@runtime_checkable
class HostAdapter(Protocol):
    """
    What the engine needs from a host.

    Any object with these methods can be injected into App in place of the
    in-process Hooks registry.
    """

    def add_action(self, name: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        ...

    def once(self, name: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> Callable:
        ...

    def remove_action(self, name: str, callback: Callable) -> bool:
        ...

    def do_action(self, name: str, *args: Any) -> None:
        ...

    def did_action(self, name: str) -> int:
        ...

    def has_action(self, name: str) -> bool:
        ...


class Hook:
    """
    A single named action and its receivers.

    Receivers run in priority order (lower first); receivers with the same
    priority keep insertion order. A receiver is connected at most once.
    """

    def __init__(self, name: str):
        self.name = name
        # Each entry: (receiver, priority)
        self._receivers: List[Tuple[Callable, int]] = []
        self.fired = 0
        self.firing = 0

    def connect(self, receiver: Callable, priority: int = DEFAULT_PRIORITY) -> Callable:
        for existing, _ in self._receivers:
            if existing is receiver:
                return receiver

        self._receivers.append((receiver, priority))
        # Stable sort preserves insertion order for ties
        self._receivers.sort(key=lambda entry: entry[1])
        return receiver

    def disconnect(self, receiver: Callable) -> bool:
        """
        Disconnect a receiver.

        Returns True if the receiver was found and removed.
        """
        for i, (existing, _) in enumerate(self._receivers):
            if existing is receiver:
                self._receivers.pop(i)
                return True
        return False

    def send(self, *args: Any) -> None:
        """
        Fire the action, calling every receiver with positional args.

        Receivers connected or disconnected while the action fires do not
        affect the current dispatch. Exceptions propagate to the caller.
        """
        self.fired += 1
        self.firing += 1
        try:
            for receiver, _ in list(self._receivers):
                receiver(*args)
        finally:
            self.firing -= 1

    @property
    def receivers(self) -> List[Callable]:
        return [receiver for receiver, _ in self._receivers]

    def clear(self) -> None:
        self._receivers.clear()

    def __repr__(self) -> str:
        return f"<Hook '{self.name}' receivers={len(self._receivers)} fired={self.fired}>"


class Hooks:
    """
    Registry of named hooks.

    Implements HostAdapter, and additionally tracks whether an action is
    firing right now, so late listeners can tell "already happened" from
    "happening".
    """

    def __init__(self):
        self._hooks: Dict[str, Hook] = {}

    def _hook(self, name: str) -> Hook:
        hook = self._hooks.get(name)
        if hook is None:
            hook = self._hooks[name] = Hook(name)
        return hook

    def add_action(self, name: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> None:
        self._hook(name).connect(callback, priority)

    def once(self, name: str, callback: Callable, priority: int = DEFAULT_PRIORITY) -> Callable:
        """
        Connect a receiver that is removed right before its first call.

        Returns the connected wrapper, which remove_action() accepts.
        """
        hook = self._hook(name)

        def _once(*args: Any) -> None:
            hook.disconnect(_once)
            callback(*args)

        _once.__name__ = getattr(callback, "__name__", "once")
        hook.connect(_once, priority)
        return _once

    def remove_action(self, name: str, callback: Callable) -> bool:
        hook = self._hooks.get(name)
        return hook.disconnect(callback) if hook is not None else False

    def remove_all_actions(self, name: str | None = None) -> None:
        """Drop receivers for one action, or for all of them (useful for testing)."""
        if name is None:
            for hook in self._hooks.values():
                hook.clear()
            return
        hook = self._hooks.get(name)
        if hook is not None:
            hook.clear()

    def do_action(self, name: str, *args: Any) -> None:
        logger.debug(f"do_action({name!r})")
        self._hook(name).send(*args)

    def did_action(self, name: str) -> int:
        """How many times the action was fired, including a dispatch in progress."""
        hook = self._hooks.get(name)
        return hook.fired if hook is not None else 0

    def doing_action(self, name: str) -> bool:
        hook = self._hooks.get(name)
        return bool(hook and hook.firing)

    def has_action(self, name: str) -> bool:
        hook = self._hooks.get(name)
        return bool(hook and hook.receivers)

    def reset(self) -> None:
        """Forget every receiver and every fired counter."""
        self._hooks.clear()

    def __repr__(self) -> str:
        return f"<Hooks actions={len(self._hooks)}>"


# Process-wide default, used by App when no host adapter is injected
hooks = Hooks()
