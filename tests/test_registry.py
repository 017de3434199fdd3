"""
ProviderRegistry: ordering, uniqueness, live iteration.
"""

import pytest

from hostboot import (
    AppStatus,
    ConfigurableProvider,
    DuplicateProviderError,
    InvalidStatusError,
    ProviderRegistry,
    ProviderState,
)


def stub(provider_id):
    return ConfigurableProvider(provider_id)


class TestProviderRegistry:

    def test_preserves_insertion_order(self):
        registry = ProviderRegistry()
        for pid in ("c", "a", "b"):
            registry.add(stub(pid))

        assert [entry.id for entry in registry] == ["c", "a", "b"]
        assert len(registry) == 3
        assert "a" in registry
        assert "z" not in registry

    def test_new_entries_are_pending(self):
        registry = ProviderRegistry()
        entry = registry.add(stub("p"), added_in=AppStatus.BOOTING_PLUGINS)

        assert entry.state is ProviderState.PENDING
        assert entry.added_in is AppStatus.BOOTING_PLUGINS
        assert registry.state_of("p") is ProviderState.PENDING

    def test_duplicate_id_rejected(self):
        registry = ProviderRegistry()
        registry.add(stub("p"))

        with pytest.raises(DuplicateProviderError, match="'p'"):
            registry.add(stub("p"))
        assert len(registry) == 1

    def test_append_during_iteration_is_visited(self):
        registry = ProviderRegistry()
        registry.add(stub("first"))
        visited = []

        for entry in registry:
            visited.append(entry.id)
            if entry.id == "first":
                registry.add(stub("second"))
            elif entry.id == "second":
                registry.add(stub("third"))

        assert visited == ["first", "second", "third"]

    def test_mark_moves_forward(self):
        registry = ProviderRegistry()
        registry.add(stub("p"))

        registry.mark("p", ProviderState.REGISTERED)
        registry.mark("p", ProviderState.BOOTED)
        assert registry.state_of("p") is ProviderState.BOOTED

    def test_mark_rejects_boot_before_register(self):
        registry = ProviderRegistry()
        registry.add(stub("p"))

        with pytest.raises(InvalidStatusError, match="pending"):
            registry.mark("p", ProviderState.BOOTED)
        assert registry.state_of("p") is ProviderState.PENDING

    def test_mark_rejects_regression(self):
        registry = ProviderRegistry()
        registry.add(stub("p"))
        registry.mark("p", ProviderState.FAILED)

        with pytest.raises(InvalidStatusError):
            registry.mark("p", ProviderState.REGISTERED)
        assert registry.state_of("p") is ProviderState.FAILED

    def test_snapshot(self):
        registry = ProviderRegistry()
        registry.add(stub("a"))
        registry.add(stub("b"))
        registry.mark("a", ProviderState.REGISTERED)

        assert registry.snapshot() == {"a": "registered", "b": "pending"}

    def test_added_during(self):
        registry = ProviderRegistry()
        registry.add(stub("a"))
        registry.add(stub("b"), added_in=AppStatus.BOOTING_EARLY)
        registry.add(stub("c"), added_in=AppStatus.BOOTING_EARLY)

        assert registry.added_during(AppStatus.IDLE) == ["a"]
        assert registry.added_during(AppStatus.BOOTING_EARLY) == ["b", "c"]
        assert registry.added_during(AppStatus.BOOTED) == []
