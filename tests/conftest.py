"""
Shared fixtures for the hostboot test suite.
"""

import pytest

from hostboot import App, Container, EnvConfig, Hooks, reset_app


@pytest.fixture(autouse=True)
def _reset_app():
    """Every test starts and ends without a process-wide app."""
    reset_app()
    yield
    reset_app()


@pytest.fixture
def hooks():
    """Fresh host adapter, isolated from the module-level default."""
    return Hooks()


@pytest.fixture
def container():
    # Empty config: defaults only, nothing read from os.environ
    return Container(EnvConfig())


@pytest.fixture
def app(container, hooks):
    return App(container, hooks)


@pytest.fixture
def raise_errors(hooks):
    """Error listener that escalates everything it receives."""
    def _raise(error):
        raise error

    hooks.add_action(App.ACTION_ERROR, _raise)
    return _raise


@pytest.fixture
def collected_errors(hooks):
    """Error listener that records errors and lets boot continue."""
    errors = []
    hooks.add_action(App.ACTION_ERROR, errors.append)
    return errors
