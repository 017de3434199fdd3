"""
Provider contract and variants.
"""

import pytest

from hostboot import (
    BootedOnly,
    ConfigurableProvider,
    Container,
    DeferredBoot,
    EnvConfig,
    RegisteredOnly,
    ServiceProvider,
    ServiceProviders,
)


class CacheProvider(RegisteredOnly):

    def register(self, container):
        container["cache"] = {}
        return True


class WarmupProvider(BootedOnly):

    def boot(self, container):
        container["cache"]["warm"] = True
        return True


class ReportProvider(DeferredBoot):

    def register(self, container):
        return True

    def boot(self, container):
        return "cache" in container


@pytest.fixture
def container():
    return Container(EnvConfig())


class TestServiceProvider:

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            ServiceProvider()

    def test_default_id_is_qualified_class_name(self):
        assert CacheProvider().id == f"{__name__}.CacheProvider"

    def test_explicit_id(self):
        assert CacheProvider("cache").id == "cache"

    def test_registered_only(self, container):
        provider = CacheProvider()
        assert provider.register(container) is True
        assert provider.boot(container) is True
        assert container["cache"] == {}
        assert provider.is_bootable()

    def test_booted_only(self, container):
        container["cache"] = {}
        provider = WarmupProvider()
        assert provider.register(container) is True
        assert provider.boot(container) is True
        assert container["cache"] == {"warm": True}

    def test_deferred_boot(self, container):
        provider = ReportProvider()
        assert provider.deferred_boot is True
        assert provider.is_bootable() is False
        assert provider.boot(container) is False


class TestConfigurableProvider:

    def test_defaults_succeed(self, container):
        provider = ConfigurableProvider("p")
        assert provider.id == "p"
        assert provider.register(container) is True
        assert provider.boot(container) is True
        assert provider.is_bootable()

    def test_callables(self, container):
        def register(c):
            c["x"] = 1
            return True

        provider = ConfigurableProvider("p", register, lambda c: False, deferred_boot=True)

        assert provider.register(container) is True
        assert container["x"] == 1
        assert provider.boot(container) is False
        assert provider.is_bootable() is False

    def test_repr(self):
        assert repr(ConfigurableProvider("p")) == "<ConfigurableProvider id='p'>"


class TestServiceProviders:

    def test_fluent_add(self):
        a, b = ConfigurableProvider("a"), ConfigurableProvider("b")

        providers = ServiceProviders.new().add(a).add(b)

        assert list(providers) == [a, b]
        assert len(providers) == 2

    def test_new_with_providers(self):
        a = ConfigurableProvider("a")
        assert list(ServiceProviders.new(a)) == [a]
