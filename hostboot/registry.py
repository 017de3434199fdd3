"""
Provider registry - ordered providers with per-provider state.

The registry may grow while it is being iterated: listeners add providers
from inside the engine's own pass, and those must be visited by that same
pass. Iteration is therefore index-based over the live list rather than a
snapshot.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List
import logging

from .errors import DuplicateProviderError, InvalidStatusError
from .providers import ServiceProvider
from .status import AppStatus, ProviderState


logger = logging.getLogger("hostboot.registry")


@dataclass
class ProviderEntry:
    """A provider plus its progress through register/boot."""
    provider: ServiceProvider
    state: ProviderState = ProviderState.PENDING
    added_in: AppStatus = AppStatus.IDLE
    # set while register/boot of this provider is on the stack
    in_progress: bool = False

    @property
    def id(self) -> str:
        return self.provider.id


class ProviderRegistry:
    """
    Insertion-ordered provider store.

    Ids are unique: adding a second provider with a known id is a logic
    error. Entries are never removed.
    """

    def __init__(self):
        self._entries: List[ProviderEntry] = []
        self._by_id: Dict[str, ProviderEntry] = {}

    def add(self, provider: ServiceProvider, added_in: AppStatus = AppStatus.IDLE) -> ProviderEntry:
        """
        Append a provider.

        Raises:
            DuplicateProviderError: If the provider id is already present
        """
        provider_id = provider.id
        if provider_id in self._by_id:
            raise DuplicateProviderError(provider_id)

        entry = ProviderEntry(provider=provider, added_in=added_in)
        self._entries.append(entry)
        self._by_id[provider_id] = entry
        logger.debug(f"Added provider {provider_id!r} during {added_in}")
        return entry

    def state_of(self, provider_id: str) -> ProviderState:
        return self._by_id[provider_id].state

    def mark(self, provider_id: str, state: ProviderState) -> None:
        """
        Move a provider to its next state, or to FAILED.

        Raises:
            InvalidStatusError: If the transition would skip a step, go
                backwards or leave a terminal state
        """
        entry = self._by_id[provider_id]
        if not entry.state.can_move_to(state):
            raise InvalidStatusError(
                entry.state,
                f"provider {provider_id!r} cannot move from '{entry.state}' to '{state}'",
            )
        entry.state = state

    def __iter__(self) -> Iterator[ProviderEntry]:
        # Entries appended during iteration are visited too
        index = 0
        while index < len(self._entries):
            yield self._entries[index]
            index += 1

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._by_id

    def added_during(self, status: AppStatus) -> List[str]:
        return [entry.id for entry in self._entries if entry.added_in is status]

    def snapshot(self) -> Dict[str, str]:
        return {entry.id: entry.state.value for entry in self._entries}
