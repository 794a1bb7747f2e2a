import pytest

from hypergres.config import Config, ConnectionOptions, ProviderConfig
from hypergres.core import Core
from hypergres.errors import CoreError, DiscoveryError, ErrorCode
from hypergres.models import Relationship, Source


class FakeProvider:
    def __init__(self, config, sources):
        self.config = config
        self.sources = sources
        self.fail = False

    def with_context(self, callback):
        return callback("context")

    def discover(self, context):
        assert context == "context"
        if self.fail:
            raise DiscoveryError("boom")
        return list(self.sources)


class FakeFactory:
    def __init__(self, sources):
        self.sources = sources
        self.created = []

    def create_provider(self, config):
        provider = FakeProvider(config, self.sources.get(config.id, []))
        self.created.append(provider)
        return provider


def make_config(*ids):
    return Config(providers=tuple(
        ProviderConfig(id=provider_id, driver="postgresql", options=ConnectionOptions(host="localhost"))
        for provider_id in ids
    ))


def test_configure(users, tasks):
    factory = FakeFactory({"main": [users], "other": [tasks]})
    core = Core(factory=factory)

    sources = core.configure(make_config("main", "other"))

    assert sources == (users, tasks)
    assert core.source("tasks") == tasks
    assert core.source("missing") is None
    assert core.provider("main") is factory.created[0]
    assert core.graph.joins_for("tasks", ["owner"])[0].source == "users"


def test_discover_before_configure():
    with pytest.raises(CoreError) as excinfo:
        Core(factory=FakeFactory({})).discover()

    assert excinfo.value.code == ErrorCode.CORE_NOT_CONFIGURED


def test_configure_without_providers():
    with pytest.raises(CoreError) as excinfo:
        Core(factory=FakeFactory({})).configure(Config(providers=()))

    assert excinfo.value.code == ErrorCode.CORE_NO_PROVIDERS


def test_failed_discovery_keeps_previous_catalog(users, tasks):
    factory = FakeFactory({"main": [users], "other": [tasks]})
    core = Core(factory=factory)
    core.configure(make_config("main", "other"))
    graph = core.graph

    factory.created[1].fail = True
    with pytest.raises(DiscoveryError):
        core.discover()

    assert core.sources == (users, tasks)
    assert core.graph is graph


def test_unknown_provider(users):
    core = Core(factory=FakeFactory({"main": [users]}))
    core.configure(make_config("main"))

    with pytest.raises(CoreError):
        core.provider("other")


def test_rediscovery_replaces_catalog():
    renamed = Source(name="people", belongs_to=(Relationship("people", "manager", "id"),))
    factory = FakeFactory({"main": [Source(name="users")]})
    core = Core(factory=factory)
    core.configure(make_config("main"))

    factory.created[0].sources = [renamed]
    core.discover()

    assert core.sources == (renamed,)
    assert core.source("users") is None
