# tests/commands/test_nginx.py
"""Tests for nginx process commands."""

import pytest

from nginx_controller.errors import (
    ReloadError,
    StartError,
    SubprocessError,
    ValidationError,
)


def _failure(command):
    return SubprocessError(command, stderr="emerg", returncode=1)


class TestStartCommand:
    def test_start(self, mocker, capsys):
        from nginx_controller.commands.nginx import start

        mock_build = mocker.patch("nginx_controller.commands.nginx.build_controller")

        start()

        mock_build.return_value.start.assert_called_once()
        assert "[ok] nginx started" in capsys.readouterr().out

    def test_start_failure_exits(self, mocker):
        from nginx_controller.commands.nginx import start

        mock_build = mocker.patch("nginx_controller.commands.nginx.build_controller")
        mock_build.return_value.start.side_effect = StartError(_failure("nginx"))

        with pytest.raises(SystemExit) as exc_info:
            start()

        assert "Failed to start nginx" in str(exc_info.value)


class TestCheckCommand:
    def test_check_validates_only(self, mocker, capsys):
        from nginx_controller.commands import nginx as nginx_cmd

        mock_build = mocker.patch("nginx_controller.commands.nginx.build_controller")

        nginx_cmd.check()

        mock_build.return_value.nginx.validate.assert_called_once()
        mock_build.return_value.reload.assert_not_called()
        assert "valid" in capsys.readouterr().out


class TestReloadCommand:
    def test_reload(self, mocker, capsys):
        from nginx_controller.commands.nginx import reload

        mock_build = mocker.patch("nginx_controller.commands.nginx.build_controller")

        reload()

        mock_build.return_value.reload.assert_called_once()
        assert "[ok] nginx reloaded" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "error",
        [ValidationError(_failure("nginx -t")), ReloadError(_failure("nginx -s reload"))],
    )
    def test_reload_errors_exit(self, mocker, error):
        from nginx_controller.commands.nginx import reload

        mock_build = mocker.patch("nginx_controller.commands.nginx.build_controller")
        mock_build.return_value.reload.side_effect = error

        with pytest.raises(SystemExit) as exc_info:
            reload()

        assert "[error]" in str(exc_info.value)

    def test_reload_dry_run(self, mocker, capsys):
        from nginx_controller.commands.nginx import reload

        mock_run = mocker.patch("subprocess.run")

        reload(dry_run=True)

        mock_run.assert_not_called()
        assert "[ok] nginx reloaded" in capsys.readouterr().out
