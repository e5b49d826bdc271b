"""Tests for the fetch CLI command."""

from __future__ import annotations

import json

import httpx
import pytest
from click.testing import CliRunner

from factctl.cli import cli

BEES = "Bees can recognize human faces."


@pytest.mark.usefixtures("_isolated_cwd")
class TestFetchCommand:
    def test_prints_fact(self, cli_runner: CliRunner, fake_cli_endpoint) -> None:
        endpoint = fake_cli_endpoint({"text": BEES})
        result = cli_runner.invoke(cli, ["fetch"])
        assert result.exit_code == 0
        assert result.stdout == f"{BEES}\n"
        assert len(endpoint.requests) == 1

    def test_json_output(self, cli_runner: CliRunner, fake_cli_endpoint) -> None:
        fake_cli_endpoint({"text": BEES})
        result = cli_runner.invoke(cli, ["--json", "fetch"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "print_random_fact"
        assert data["data"]["text"] == BEES

    def test_url_override(self, cli_runner: CliRunner, fake_cli_endpoint) -> None:
        endpoint = fake_cli_endpoint({"text": BEES})
        result = cli_runner.invoke(cli, ["fetch", "--url", "https://example.org/today"])
        assert result.exit_code == 0
        assert str(endpoint.requests[0].url) == "https://example.org/today"

    def test_url_from_config(self, cli_runner: CliRunner, fake_cli_endpoint, tmp_path) -> None:
        (tmp_path / "factctl.toml").write_text('[fetch]\nurl = "https://example.org/cfg"\n')
        endpoint = fake_cli_endpoint({"text": BEES})
        result = cli_runner.invoke(cli, ["fetch"])
        assert result.exit_code == 0
        assert str(endpoint.requests[0].url) == "https://example.org/cfg"

    def test_failure_exits_one(self, cli_runner: CliRunner, fake_cli_endpoint) -> None:
        fake_cli_endpoint(httpx.Response(500))
        result = cli_runner.invoke(cli, ["fetch"])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "ERROR" in result.stderr
        assert "status 500" in result.stderr

    def test_malformed_url_reported(self, cli_runner: CliRunner, fake_cli_endpoint) -> None:
        fake_cli_endpoint({"text": BEES})
        result = cli_runner.invoke(cli, ["--json", "fetch", "--url", "http://[::1"])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert '"FETCH_FAILED"' in result.stderr
        assert not isinstance(result.exception, httpx.InvalidURL)

    def test_invalid_payload(self, cli_runner: CliRunner, fake_cli_endpoint) -> None:
        fake_cli_endpoint({"id": "no-text"})
        result = cli_runner.invoke(cli, ["--json", "fetch"])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert '"INVALID_PAYLOAD"' in result.stderr

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["fetch", "--examples"])
        assert result.exit_code == 0
        assert "factctl fetch" in result.output
