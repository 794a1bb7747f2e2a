import json
import logging

from hypergres.cli import main_cli
from hypergres.errors import ConfigError, ErrorCode, handle_error
from hypergres.models import Source


def test_discover_prints_catalog(monkeypatch, capsys):
    captured = {}

    class FakeCore:
        def configure(self, config):
            captured["config"] = config
            return (Source(name="users", identifying_properties=("id",), schema={"title": "users"}),)

    monkeypatch.setattr("hypergres.config.load_dotenv", lambda: False)
    monkeypatch.setenv("POSTGRES_HOST", "localhost")
    monkeypatch.setattr(main_cli, "Core", FakeCore)

    code = main_cli.main(["discover", "--schema", "public", "--schema", "audit", "--strict-numbers"])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output[0]["name"] == "users"
    assert output[0]["identifyingProperties"] == ["id"]
    discovery = captured["config"].providers[0].discovery[0]
    assert discovery.schemas.names == ("public", "audit")
    assert discovery.options.strict_numbers is True


def test_discover_reports_errors(monkeypatch):
    monkeypatch.setattr("hypergres.config.load_dotenv", lambda: False)
    monkeypatch.delenv("POSTGRES_HOST", raising=False)

    assert main_cli.main(["discover"]) == ErrorCode.CONFIG_VALIDATION_FAILED


def test_handle_error_codes():
    log = logging.getLogger("hypergres.tests")

    assert handle_error(ConfigError("bad", code=ErrorCode.CONFIG_VERSION_MISSING), log) == 1
    assert handle_error(ValueError("unexpected"), log) == 1
    assert handle_error(ConfigError("bad", err=KeyError("x")), log) == ErrorCode.CONFIG_VALIDATION_FAILED
