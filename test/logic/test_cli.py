import click.testing
import pytest

import rfplane.system.sysconfig as sysconfig
import rfplane.system.system as system_module
from rfplane.cli import cli, parse_value
from rfplane.rpc import MockRPCClient


@pytest.fixture
def cli_runner():
    return click.testing.CliRunner()


@pytest.fixture
def mock_service(tmp_path, monkeypatch):
    """Route the CLI's RPC client to a MockRPCClient, ignore user configs."""
    rpcc = MockRPCClient()
    monkeypatch.setattr(system_module, "RPCClient", lambda *args, **kwargs: rpcc)
    monkeypatch.setattr(
        sysconfig, "user_radios_file", lambda: tmp_path / "radios.ini"
    )
    return rpcc


class TestTreeCommands:
    def test_ls(self, cli_runner, mock_service):
        result = cli_runner.invoke(cli, ["ls", "/dboards/A/rx_frontends/0/freq"])
        assert result.exit_code == 0, result.output
        assert result.output.split() == [
            "/dboards/A/rx_frontends/0/freq/range",
            "/dboards/A/rx_frontends/0/freq/value",
        ]
        assert mock_service.calls == []

    def test_ls_missing_path(self, cli_runner, mock_service):
        result = cli_runner.invoke(cli, ["ls", "/dboards/Z"])
        assert result.exit_code != 0
        assert "No properties below" in result.output

    def test_get(self, cli_runner, mock_service):
        mock_service.set_response("db_0_get_gain", 7.5)
        result = cli_runner.invoke(
            cli, ["get", "/dboards/A/tx_frontends/1/gains/null/value", "-n", "mock"]
        )
        assert result.exit_code == 0, result.output
        assert "= 7.5" in result.output
        assert mock_service.calls == [("request", "db_0_get_gain", ("TX2",))]
        assert mock_service.closed

    def test_set(self, cli_runner, mock_service):
        mock_service.set_response("db_0_set_freq", 2.4000001e9)
        result = cli_runner.invoke(
            cli, ["set", "/dboards/A/rx_frontends/0/freq/value", "2.4e9"]
        )
        assert result.exit_code == 0, result.output
        assert "= 2400000100.0" in result.output
        assert mock_service.calls == [
            ("request", "db_0_set_freq", ("RX1", 2.4e9, False))
        ]

    @pytest.mark.parametrize("leaf", ["gains/null/value", "freq/value"])
    def test_set_non_numeric(self, cli_runner, mock_service, leaf):
        result = cli_runner.invoke(
            cli, ["set", f"/dboards/A/rx_frontends/0/{leaf}", "high"]
        )
        assert result.exit_code != 0
        assert isinstance(result.exception, SystemExit)
        assert "InvalidArgumentError" in result.output
        assert mock_service.calls == []

    def test_remote_failure(self, cli_runner, mock_service):
        mock_service.fail("db_0_get_freq", "transceiver offline")
        result = cli_runner.invoke(cli, ["get", "/dboards/A/rx_frontends/0/freq/value"])
        assert result.exit_code != 0
        assert "ControlPlaneError" in result.output

    def test_unknown_path(self, cli_runner, mock_service):
        result = cli_runner.invoke(cli, ["get", "/dboards/A/nothing"])
        assert result.exit_code != 0
        assert "not found" in result.output

    def test_unknown_radio(self, cli_runner, mock_service):
        result = cli_runner.invoke(cli, ["ls", "-n", "nonexistent"])
        assert result.exit_code != 0
        assert "not found" in result.output

    def test_init(self, cli_runner, mock_service):
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert "Initialized slot A" in result.output
        assert mock_service.methods_called().count("db_0_set_gain") == 4


class TestMiscCommands:
    def test_tree(self, cli_runner):
        result = cli_runner.invoke(cli, ["--tree"])
        assert result.exit_code == 0
        for name in ("get", "init", "ls", "radios", "set"):
            assert f"└── {name}" in result.output

    def test_radios(self, cli_runner, mock_service):
        result = cli_runner.invoke(cli, ["radios"])
        assert result.exit_code == 0
        assert "mock (package)" in result.output


@pytest.mark.parametrize(
    "text, expected",
    [("3", 3), ("2.4e9", 2.4e9), ("-1.5", -1.5), ("TX/RX", "TX/RX")],
)
def test_parse_value(text, expected):
    assert parse_value(text) == expected
