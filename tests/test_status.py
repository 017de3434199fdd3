"""
AppStatus and ProviderState.
"""

import pytest

from hostboot import AppStatus, InvalidStatusError, ProviderState


class TestAppStatus:

    def test_values(self):
        assert AppStatus.IDLE.value == "idle"
        assert AppStatus.BOOTING_EARLY.value == "booting-early"
        assert AppStatus.BOOTING_PLUGINS.value == "booting-plugins"
        assert AppStatus.BOOTING_THEMES.value == "booting-themes"
        assert AppStatus.BOOTED.value == "booted"
        assert AppStatus.FAILED.value == "failed"

    def test_ordinals(self):
        ordered = [
            AppStatus.IDLE,
            AppStatus.BOOTING_EARLY,
            AppStatus.BOOTING_PLUGINS,
            AppStatus.BOOTING_THEMES,
            AppStatus.BOOTED,
        ]
        assert [s.ordinal for s in ordered] == [0, 1, 2, 3, 4]
        assert AppStatus.FAILED.ordinal == -1

    def test_next(self):
        assert AppStatus.IDLE.next() is AppStatus.BOOTING_EARLY
        assert AppStatus.BOOTING_EARLY.next() is AppStatus.BOOTING_PLUGINS
        assert AppStatus.BOOTING_PLUGINS.next() is AppStatus.BOOTING_THEMES
        assert AppStatus.BOOTING_THEMES.next() is AppStatus.BOOTED

    @pytest.mark.parametrize("status", [AppStatus.BOOTED, AppStatus.FAILED])
    def test_next_from_terminal_fails(self, status):
        with pytest.raises(InvalidStatusError):
            status.next()

    def test_helpers(self):
        assert AppStatus.IDLE.is_idle
        assert AppStatus.BOOTING_EARLY.is_early
        assert AppStatus.BOOTING_PLUGINS.is_plugins_step
        assert AppStatus.BOOTING_THEMES.is_themes_step
        assert AppStatus.BOOTED.is_booted
        assert AppStatus.FAILED.is_failed
        assert not AppStatus.BOOTED.is_early

    def test_is_booting(self):
        booting = {s for s in AppStatus if s.is_booting}
        assert booting == {
            AppStatus.BOOTING_EARLY,
            AppStatus.BOOTING_PLUGINS,
            AppStatus.BOOTING_THEMES,
        }

    def test_str(self):
        assert str(AppStatus.BOOTING_PLUGINS) == "booting-plugins"


class TestProviderState:

    def test_forward_transitions(self):
        assert ProviderState.PENDING.can_move_to(ProviderState.REGISTERED)
        assert ProviderState.PENDING.can_move_to(ProviderState.FAILED)
        assert ProviderState.REGISTERED.can_move_to(ProviderState.BOOTED)
        assert ProviderState.REGISTERED.can_move_to(ProviderState.FAILED)

    def test_no_backward_or_terminal_transitions(self):
        assert not ProviderState.REGISTERED.can_move_to(ProviderState.PENDING)
        assert not ProviderState.REGISTERED.can_move_to(ProviderState.REGISTERED)
        assert not ProviderState.BOOTED.can_move_to(ProviderState.FAILED)
        assert not ProviderState.FAILED.can_move_to(ProviderState.BOOTED)

    def test_boot_requires_register_first(self):
        assert not ProviderState.PENDING.can_move_to(ProviderState.BOOTED)
