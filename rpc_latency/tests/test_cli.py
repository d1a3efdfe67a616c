"""Tests for the command line interface."""

import json
import signal

import pytest

from .. import cli
from ..config import ClientKind, DEFAULT_RPC_URLS, URLS_ENV
from ..models import LatencyReport, TestRun
from .conftest import make_failure, make_success


class FakeTester:
    """Stands in for LatencyTester; records the config it was built with."""

    instances: list["FakeTester"] = []
    error: Exception | None = None

    def __init__(self, config):
        self.config = config
        self.cancelled = False
        ok = make_success(config.endpoints[0], 10.0)
        bad = make_failure("https://down.test", "Connection timed out")
        self.last_run = TestRun(results=(ok, bad))
        self.report = LatencyReport(ranked=(ok,), failed=(bad,))
        FakeTester.instances.append(self)

    async def run(self):
        if FakeTester.error is not None:
            raise FakeTester.error
        return self.report

    def cancel(self):
        self.cancelled = True


@pytest.fixture(autouse=True)
def fake_runtime(monkeypatch):
    handlers = {}
    FakeTester.instances = []
    FakeTester.error = None
    monkeypatch.setattr(cli, "LatencyTester", FakeTester)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(cli.signal, "signal", lambda signum, handler: handlers.__setitem__(signum, handler))
    monkeypatch.delenv(URLS_ENV, raising=False)
    return handlers


class TestRunCommand:

    def test_prints_text_report(self, capsys):
        code = cli.main(["run", "--url", "https://a.test", "--duration", "100"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "======= FINAL RESULTS =======" in out
        assert "https://down.test - Error: Connection timed out" in out

    def test_prints_json_report(self, capsys):
        code = cli.main(["run", "-u", "https://a.test", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == cli.EXIT_OK
        assert data["ranked"][0]["endpoint"] == "https://a.test"
        assert len(data["results"]) == 2

    def test_options_reach_config(self):
        cli.main([
            "run",
            "-u", "https://a.test",
            "-u", "https://b.test",
            "--duration", "2500",
            "--timeout", "750",
            "--interval", "50",
            "--client", "requests",
        ])

        config = FakeTester.instances[0].config
        assert config.endpoints == ("https://a.test", "https://b.test")
        assert config.duration_ms == 2500
        assert config.connection_timeout_ms == 750
        assert config.probe_interval_ms == 50
        assert config.client == ClientKind.REQUESTS

    def test_no_command_runs_default_endpoints(self):
        code = cli.main([])

        assert code == cli.EXIT_OK
        assert FakeTester.instances[0].config.endpoints == DEFAULT_RPC_URLS

    def test_env_endpoints(self, monkeypatch):
        monkeypatch.setenv(URLS_ENV, "https://env-a.test,https://env-b.test")

        cli.main(["run"])

        assert FakeTester.instances[0].config.endpoints == ("https://env-a.test", "https://env-b.test")

    def test_url_flag_overrides_env(self, monkeypatch):
        monkeypatch.setenv(URLS_ENV, "https://env-a.test")

        cli.main(["run", "-u", "https://flag.test"])

        assert FakeTester.instances[0].config.endpoints == ("https://flag.test",)

    def test_invalid_config_is_usage_error(self):
        code = cli.main(["run", "--duration", "-1"])

        assert code == cli.EXIT_USAGE
        assert FakeTester.instances == []

    def test_unexpected_error_is_fatal(self):
        FakeTester.error = RuntimeError("event loop exploded")

        assert cli.main(["run", "-u", "https://a.test"]) == cli.EXIT_FATAL

    def test_signal_cancels_tester(self, fake_runtime):
        cli.main(["run", "-u", "https://a.test"])

        tester = FakeTester.instances[0]
        fake_runtime[signal.SIGINT](signal.SIGINT, None)
        assert tester.cancelled


class TestEndpointsCommand:

    def test_lists_defaults(self, capsys):
        assert cli.main(["endpoints"]) == cli.EXIT_OK
        assert capsys.readouterr().out.split() == list(DEFAULT_RPC_URLS)

    def test_lists_env_endpoints(self, capsys, monkeypatch):
        monkeypatch.setenv(URLS_ENV, "https://env.test")

        cli.main(["endpoints"])

        assert capsys.readouterr().out.split() == ["https://env.test"]


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])

    assert exc_info.value.code == 0
    assert "rpc-latency" in capsys.readouterr().out
