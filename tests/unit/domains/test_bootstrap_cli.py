# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the olkalou-bootstrap command."""

import pytest

from olkalou.domains.bootstrap import __main__ as cli
from olkalou.domains.bootstrap.service import USER_DATA_RESET_NOTE


@pytest.fixture(autouse=True)
def bootstrap_env(monkeypatch, state_file) -> None:
    """Point the command at a temporary state file and disable pauses."""
    monkeypatch.setenv("BOOTSTRAP_STATE_FILE", str(state_file))
    monkeypatch.setenv("BOOTSTRAP_RETRY_DELAY_SECONDS", "0")
    monkeypatch.setenv("BOOTSTRAP_INSERT_DELAY_SECONDS", "0")
    monkeypatch.setenv("BOOTSTRAP_USER_INSERT_DELAY_SECONDS", "0")
    monkeypatch.setenv("REDIS_ENABLED", "false")


@pytest.fixture
def fake_gateway(monkeypatch, gateway):
    monkeypatch.setattr(cli, "RemoteStoreGateway", lambda *args, **kwargs: gateway)
    return gateway


class TestArguments:
    """Tests for argument parsing."""

    def test_include_user_data_requires_reset(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--include-user-data"])

        assert exc_info.value.code == 2

    def test_status_and_reset_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            cli.main(["--status", "--reset"])


class TestCommands:
    """Tests for the command actions."""

    def test_status_prints_checklist(self, fake_gateway, capsys) -> None:
        assert cli.main(["--status"]) == 0

        out = capsys.readouterr().out
        assert "Database Initialization Status:" in out
        assert "- Completion: 0%" in out
        assert fake_gateway.initialize_calls == 0

    def test_run_reports_progress(self, fake_gateway, capsys) -> None:
        assert cli.main([]) == 0

        out = capsys.readouterr().out
        assert "[ 10%] Verifying Connection" in out
        assert "Bootstrap completed" in out
        assert fake_gateway.total_inserts > 0

    def test_failed_run_exits_non_zero(self, fake_gateway, capsys) -> None:
        fake_gateway.healthy = False
        fake_gateway.health_message = "connection refused"

        assert cli.main([]) == 1

        err = capsys.readouterr().err
        assert "Remote store connection unhealthy: connection refused" in err

    def test_reset_with_user_data(self, fake_gateway, capsys) -> None:
        assert cli.main(["--reset", "--include-user-data"]) == 0

        assert USER_DATA_RESET_NOTE in capsys.readouterr().out
