import json

import pytest

from redis_flush import cli
from redis_flush.backends import RedisBackend
from redis_flush.config import Settings
from tests.helpers import make_client, make_info


@pytest.fixture
def client():
    client = make_client()
    client.info.side_effect = [make_info(500.0), make_info(500.0), make_info(12.5)]
    return client


@pytest.fixture
def cli_pool(monkeypatch, client):
    pool = {"default": RedisBackend(Settings(_env_file=None), client=client)}
    monkeypatch.setattr(cli, "create_default_pool", lambda settings: pool)
    return pool


def test_stats_as_json(cli_pool, capsys):
    assert cli.main(["--json", "stats"]) == cli.EXIT_OK

    data = json.loads(capsys.readouterr().out)
    assert data["redis_version"] == "7.2.4"
    assert data["total_keys"] == 1244
    assert data["uptime_formatted"] == "1 day, 1 hour"


def test_stats_rendered(cli_pool, capsys):
    assert cli.main(["--no-color", "stats"]) == cli.EXIT_OK

    out = capsys.readouterr().out
    assert "REDIS STATISTICS" in out
    assert "Version: 7.2.4" in out
    assert "db0:" in out
    assert "Total Keys: 1,244" in out


def test_stats_unavailable(monkeypatch, capsys):
    client = make_client()
    client.info.side_effect = ConnectionError("refused")
    pool = {"default": RedisBackend(Settings(_env_file=None), client=client)}
    monkeypatch.setattr(cli, "create_default_pool", lambda settings: pool)

    assert cli.main(["stats"]) == cli.EXIT_FAILURE
    assert "unavailable" in capsys.readouterr().out


def test_flush_with_yes_skips_confirmation(cli_pool, client, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", pytest.fail)

    assert cli.main(["--json", "flush", "--yes"]) == cli.EXIT_OK

    data = json.loads(capsys.readouterr().out)
    assert data["success"] is True
    assert data["targets_flushed"] == ["default"]
    client.flushall.assert_called_once_with()


def test_flush_confirmed(cli_pool, client, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda: "yes")
    client.info.side_effect = [make_info(500.0)] * 2 + [make_info(12.5)]

    assert cli.main(["flush"]) == cli.EXIT_OK

    assert "Memory Freed" in capsys.readouterr().out
    client.flushall.assert_called_once_with()


def test_json_flush_keeps_prompt_off_stdout(cli_pool, client, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda: "y")

    assert cli.main(["--json", "flush"]) == cli.EXIT_OK

    captured = capsys.readouterr()
    assert json.loads(captured.out)["success"] is True
    assert "Type 'yes' to proceed" in captured.err
    assert "Version: 7.2.4" in captured.err


def test_flush_cancelled(cli_pool, client, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda: "no")

    assert cli.main(["flush"]) == cli.EXIT_FAILURE
    client.flushall.assert_not_called()


def test_failed_flush_exit_code(cli_pool, client, capsys):
    client.flushall.return_value = False

    assert cli.main(["flush", "--no-confirm"]) == cli.EXIT_FAILURE
    assert "failed to execute flush on any connection" in capsys.readouterr().out


def test_backends_are_closed(cli_pool, client):
    cli.main(["--json", "stats"])

    client.close.assert_called_once_with()


def test_invalid_port(cli_pool):
    assert cli.main(["--port", "70000", "stats"]) == cli.EXIT_USAGE


def test_negative_db(cli_pool):
    assert cli.main(["--db", "-1", "stats"]) == cli.EXIT_USAGE


def test_missing_command_exits_with_usage():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 2


def test_settings_from_arguments_overrides_only_given_options():
    base = Settings(_env_file=None, redis_host="from-env", redis_port=6390)
    args = cli.create_argument_parser().parse_args(["--host", "cli-host", "stats"])

    settings = cli.settings_from_arguments(args, base)

    assert settings.redis_host == "cli-host"
    assert settings.redis_port == 6390
    assert base.redis_host == "from-env"
