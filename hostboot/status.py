"""
Lifecycle status values for the app and for individual providers.
"""

from enum import Enum

from .errors import InvalidStatusError


class AppStatus(str, Enum):
    """
    Host lifecycle phases.

    The booting phases are ordered; FAILED sits outside the order and can
    only be reached as a terminal escape from a non-idle phase.
    """
    IDLE = "idle"
    BOOTING_EARLY = "booting-early"
    BOOTING_PLUGINS = "booting-plugins"
    BOOTING_THEMES = "booting-themes"
    BOOTED = "booted"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value

    @property
    def ordinal(self) -> int:
        return _APP_ORDER.get(self, -1)

    @property
    def is_idle(self) -> bool:
        return self is AppStatus.IDLE

    @property
    def is_early(self) -> bool:
        return self is AppStatus.BOOTING_EARLY

    @property
    def is_plugins_step(self) -> bool:
        return self is AppStatus.BOOTING_PLUGINS

    @property
    def is_themes_step(self) -> bool:
        return self is AppStatus.BOOTING_THEMES

    @property
    def is_booting(self) -> bool:
        return self in (
            AppStatus.BOOTING_EARLY,
            AppStatus.BOOTING_PLUGINS,
            AppStatus.BOOTING_THEMES,
        )

    @property
    def is_booted(self) -> bool:
        return self is AppStatus.BOOTED

    @property
    def is_failed(self) -> bool:
        return self is AppStatus.FAILED

    def next(self) -> "AppStatus":
        """
        Following phase in the boot sequence.

        Raises:
            InvalidStatusError: For BOOTED and FAILED, which have no successor
        """
        if self.is_booted or self.is_failed:
            raise InvalidStatusError(self, f"no phase follows '{self.value}'")
        return _APP_SEQUENCE[self.ordinal + 1]


_APP_SEQUENCE = (
    AppStatus.IDLE,
    AppStatus.BOOTING_EARLY,
    AppStatus.BOOTING_PLUGINS,
    AppStatus.BOOTING_THEMES,
    AppStatus.BOOTED,
)

_APP_ORDER = {status: index for index, status in enumerate(_APP_SEQUENCE)}


class ProviderState(str, Enum):
    """Per-provider progress. Transitions only move forward."""
    PENDING = "pending"
    REGISTERED = "registered"
    BOOTED = "booted"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value

    @property
    def ordinal(self) -> int:
        return _PROVIDER_ORDER[self]

    def can_move_to(self, other: "ProviderState") -> bool:
        # one step at a time; failed is terminal and reachable from pending or registered
        if self is ProviderState.FAILED or self is ProviderState.BOOTED:
            return False
        return other is ProviderState.FAILED or other.ordinal == self.ordinal + 1


_PROVIDER_ORDER = {
    ProviderState.PENDING: 0,
    ProviderState.REGISTERED: 1,
    ProviderState.BOOTED: 2,
    ProviderState.FAILED: 3,
}
