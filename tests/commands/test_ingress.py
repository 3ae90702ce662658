# tests/commands/test_ingress.py
"""Tests for ingress commands."""

import pytest

SITE = (
    "upstreams:\n"
    "  - name: svc-a\n"
    "    servers: ['10.0.0.5:8080']\n"
    "servers:\n"
    "  - name: example.com\n"
    "    locations:\n"
    "      - path: /\n"
    "        upstream: svc-a\n"
)


@pytest.fixture
def site_file(tmp_path):
    path = tmp_path / "site1.yaml"
    path.write_text(SITE)
    return path


class TestRenderCommand:
    """Test ingress render."""

    def test_render_prints_config(self, site_file, capsys):
        from nginx_controller.commands.ingress import render

        render(file=site_file)

        out = capsys.readouterr().out
        assert "upstream svc-a {" in out
        assert "proxy_pass http://svc-a;" in out

    def test_render_invalid_file_exits(self, tmp_path):
        from nginx_controller.commands.ingress import render

        path = tmp_path / "bad.yaml"
        path.write_text("servers:\n  - name: a\n    locations:\n      - path: /\n        upstream: nope\n")

        with pytest.raises(SystemExit) as exc_info:
            render(file=path)

        assert "[error]" in str(exc_info.value)
        assert "nope" in str(exc_info.value)

    def test_render_missing_file_exits(self, tmp_path):
        from nginx_controller.commands.ingress import render

        with pytest.raises(SystemExit) as exc_info:
            render(file=tmp_path / "missing.yaml")

        assert "[error] Cannot read" in str(exc_info.value)

    def test_render_uses_template_dir_from_env(self, site_file, tmp_path, monkeypatch, capsys):
        """Preview renders with the same templates apply would use."""
        from nginx_controller.commands.ingress import render

        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "ingress.conf.j2").write_text(
            "# custom\n{% for upstream in upstreams %}{{ upstream.name }}\n{% endfor %}"
        )
        (templates / "nginx.conf.j2").write_text("include {{ conf_d_dir }}/*.conf;\n")
        monkeypatch.setenv("NGINX_TEMPLATE_DIR", str(templates))

        render(file=site_file)

        assert capsys.readouterr().out == "# custom\nsvc-a\n"

    def test_apply_missing_file_exits(self, tmp_path, mocker):
        from nginx_controller.commands.ingress import apply

        mocker.patch("nginx_controller.commands.ingress.build_controller")

        with pytest.raises(SystemExit) as exc_info:
            apply(name="default-site1", file=tmp_path / "missing.yaml")

        assert "[error]" in str(exc_info.value)


class TestApplyCommand:
    """Test ingress apply."""

    def test_apply_reloads(self, site_file, mocker, capsys):
        from nginx_controller.commands.ingress import apply
        from nginx_controller.models import load_ingress_config

        mock_build = mocker.patch("nginx_controller.commands.ingress.build_controller")
        controller = mock_build.return_value

        apply(name="default-site1", file=site_file)

        mock_build.assert_called_once_with(False, False)
        controller.apply.assert_called_once_with(
            "default-site1", load_ingress_config(site_file)
        )
        controller.add_or_update.assert_not_called()
        assert "[ok]" in capsys.readouterr().out

    def test_apply_without_reload(self, site_file, mocker):
        from nginx_controller.commands.ingress import apply

        mock_build = mocker.patch("nginx_controller.commands.ingress.build_controller")
        controller = mock_build.return_value

        apply(name="default-site1", file=site_file, reload=False)

        controller.add_or_update.assert_called_once()
        controller.apply.assert_not_called()

    def test_apply_validation_error_exits(self, site_file, mocker):
        from nginx_controller.commands.ingress import apply
        from nginx_controller.errors import SubprocessError, ValidationError

        mock_build = mocker.patch("nginx_controller.commands.ingress.build_controller")
        mock_build.return_value.apply.side_effect = ValidationError(
            SubprocessError("nginx -t", stderr="emerg", returncode=1)
        )

        with pytest.raises(SystemExit) as exc_info:
            apply(name="default-site1", file=site_file)

        assert "[error]" in str(exc_info.value)
        assert "not reloading" in str(exc_info.value)

    def test_apply_dry_run(self, site_file, capsys, mocker):
        """Dry-run prints the rendered file and runs nothing."""
        from nginx_controller.commands.ingress import apply

        mock_run = mocker.patch("subprocess.run")

        apply(name="default-site1", file=site_file, dry_run=True)

        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert "conf.d/default-site1.conf" in out
        assert "upstream svc-a {" in out
        assert "[ok]" in out


class TestDeleteCommand:
    """Test ingress delete."""

    def test_delete_reloads(self, mocker, capsys):
        from nginx_controller.commands.ingress import delete

        mock_build = mocker.patch("nginx_controller.commands.ingress.build_controller")
        controller = mock_build.return_value

        delete(name="default-site1")

        controller.delete.assert_called_once_with("default-site1")
        controller.reload.assert_called_once()
        assert "[ok]" in capsys.readouterr().out

    def test_delete_without_reload(self, mocker):
        from nginx_controller.commands.ingress import delete

        mock_build = mocker.patch("nginx_controller.commands.ingress.build_controller")

        delete(name="default-site1", reload=False)

        mock_build.return_value.reload.assert_not_called()
