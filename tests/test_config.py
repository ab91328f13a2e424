from __future__ import annotations

from infra import config


def test_explicit_url_wins(monkeypatch):
    monkeypatch.setenv(config.DB_URL_ENV, "sqlite:///from-env.db")

    assert config.resolve_db_url("sqlite:///explicit.db") == "sqlite:///explicit.db"


def test_env_url_used_when_no_explicit(monkeypatch):
    monkeypatch.setenv(config.DB_URL_ENV, "  sqlite:///from-env.db ")

    assert config.resolve_db_url() == "sqlite:///from-env.db"


def test_defaults_to_per_user_database(monkeypatch, tmp_path):
    monkeypatch.delenv(config.DB_URL_ENV, raising=False)
    monkeypatch.setattr(config, "default_db_path", lambda: tmp_path / "cashflow.db")

    assert config.resolve_db_url() == config.sqlite_url(tmp_path / "cashflow.db")
    assert config.resolve_db_url().startswith("sqlite:///")
