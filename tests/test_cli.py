"""Tests for the Typer CLI commands that do not start a server."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from live_page import cli
from live_page.context import build_context as real_build_context
from live_page.core.errors import ProviderError

runner = CliRunner()


def test_init_creates_seed_once(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "page.html"

    first = runner.invoke(cli.app, ["init", "--brand", "Acme Labs", "--content-path", str(target)])
    second = runner.invoke(cli.app, ["init", "--brand", "Acme Labs", "--content-path", str(target)])

    assert first.exit_code == 0
    assert "Seed document created" in first.stdout
    assert second.exit_code == 0
    assert "already exists" in second.stdout
    assert target.read_text(encoding="utf-8").count("Welcome to Acme Labs") == 1


def _patch_provider(monkeypatch, provider):
    def fake_build_context(cfg, provider_arg=None, logger=None):
        return real_build_context(cfg, provider=provider, logger=logger)

    monkeypatch.setattr(cli, "build_context", fake_build_context)


def test_refresh_appends_one_update(tmp_path: Path, monkeypatch, scripted_provider):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "page.html"

    _patch_provider(monkeypatch, scripted_provider("<p>cli update</p>"))
    result = runner.invoke(cli.app, ["refresh", "--brand", "Acme Labs", "--content-path", str(target)])

    assert result.exit_code == 0, result.stdout
    body = target.read_text(encoding="utf-8")
    assert body.index("Welcome to Acme Labs") < body.index("<p>cli update</p>")


def test_refresh_failure_exits_non_zero_and_keeps_document(tmp_path: Path, monkeypatch, scripted_provider):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "page.html"
    runner.invoke(cli.app, ["init", "--brand", "Acme Labs", "--content-path", str(target)])
    before = target.read_bytes()

    _patch_provider(monkeypatch, scripted_provider(ProviderError("quota exceeded")))
    result = runner.invoke(cli.app, ["refresh", "--brand", "Acme Labs", "--content-path", str(target)])

    assert result.exit_code == 1
    assert "Refresh failed" in result.stdout
    assert target.read_bytes() == before
