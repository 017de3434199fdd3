"""
Container: values, factories, delegates.
"""

import pytest

from hostboot import Container, ContainerError, EnvConfig, ServiceNotFoundError


class TestContainer:

    def test_set_get_has(self):
        container = Container()
        container.set("db.url", "postgres://localhost/db")

        assert container.has("db.url")
        assert container.get("db.url") == "postgres://localhost/db"
        assert not container.has("db.user")

    def test_mapping_sugar(self):
        container = Container()
        container["a"] = "A-"

        assert "a" in container
        assert container["a"] == "A-"

    def test_missing_key(self):
        container = Container()

        with pytest.raises(ServiceNotFoundError) as exc_info:
            container.get("missing")

        assert isinstance(exc_info.value, ContainerError)
        assert isinstance(exc_info.value, LookupError)
        assert exc_info.value.key == "missing"

    def test_missing_key_suggests_candidates(self):
        container = Container()
        container["database"] = object()

        with pytest.raises(ServiceNotFoundError, match="Candidates found") as exc_info:
            container["databse"]
        assert exc_info.value.candidates == ["database"]

    def test_factory_runs_once(self):
        calls = []
        container = Container()

        def build(c):
            calls.append(c)
            return {"built": True}

        container.factory("service", build)
        assert container.has("service")
        assert calls == []

        first = container.get("service")
        second = container.get("service")

        assert first is second
        assert calls == [container]

    def test_failing_factory_keeps_binding(self):
        attempts = []
        container = Container()

        def build(c):
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("not yet")
            return "ok"

        container.factory("flaky", build)
        with pytest.raises(RuntimeError):
            container.get("flaky")
        assert container.get("flaky") == "ok"

    def test_set_replaces_factory(self):
        container = Container()
        container.factory("x", lambda c: "from factory")
        container.set("x", "value")

        assert container.get("x") == "value"
        assert container.keys() == ["x"]

    def test_delegates_consulted_after_local(self):
        container = Container(delegates=[{"foo": "delegate", "bar": "bar"}])
        container["foo"] = "local"

        assert container["foo"] == "local"
        assert container["bar"] == "bar"
        assert "bar" in container

    def test_add_delegate(self):
        container = Container()
        container.add_delegate({"late": 1})

        assert container.get("late") == 1

    def test_config(self):
        config = EnvConfig({"env": "staging"})
        assert Container(config).config is config
        assert isinstance(Container().config, EnvConfig)
