from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

import db.config as config


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ("DATABASE_URLS", "DBSNAP_CONFIG", "DBSNAP_BACKUP_DIR", "DBSNAP_PG_DUMP", "DBSNAP_PSQL"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    config.get_backup_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
    config.get_backup_settings.cache_clear()


def test_urls_from_environment_keep_order(monkeypatch):
    monkeypatch.setenv(
        "DATABASE_URLS",
        "postgres://u:p@h/zeta, postgres://u:p@h/alpha\npostgres://u:p@h/mid,,",
    )

    assert config.get_settings().urls == [
        "postgres://u:p@h/zeta",
        "postgres://u:p@h/alpha",
        "postgres://u:p@h/mid",
    ]


def test_urls_from_yaml_file(tmp_path: Path, monkeypatch):
    config_file = tmp_path / "dbs.yaml"
    config_file.write_text(
        "databases:\n"
        "  - postgres://u:p@h/alpha\n"
        "  - postgres://u:p@h/beta?sslmode=require\n"
    )
    monkeypatch.setenv("DBSNAP_CONFIG", str(config_file))

    assert config.get_settings().urls == [
        "postgres://u:p@h/alpha",
        "postgres://u:p@h/beta?sslmode=require",
    ]


def test_environment_wins_over_file(tmp_path: Path, monkeypatch):
    config_file = tmp_path / "dbs.yaml"
    config_file.write_text("databases:\n  - postgres://u:p@h/from_file\n")
    monkeypatch.setenv("DBSNAP_CONFIG", str(config_file))
    monkeypatch.setenv("DATABASE_URLS", "postgres://u:p@h/from_env")

    assert config.get_settings().urls == ["postgres://u:p@h/from_env"]


def test_load_database_urls_json(tmp_path: Path):
    config_file = tmp_path / "dbs.json"
    config_file.write_text(json.dumps({"databases": ["postgres://h/one", "postgres://h/two"]}))

    assert config.load_database_urls(config_file) == ["postgres://h/one", "postgres://h/two"]


def test_load_database_urls_empty_yaml(tmp_path: Path):
    config_file = tmp_path / "dbs.yaml"
    config_file.write_text("")

    assert config.load_database_urls(config_file) == []


def test_load_database_urls_rejects_bad_shape(tmp_path: Path):
    config_file = tmp_path / "dbs.yaml"
    config_file.write_text("databases: 42\n")

    with pytest.raises(ValidationError):
        config.load_database_urls(config_file)


def test_missing_config_means_no_databases(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("DBSNAP_CONFIG", str(tmp_path / "missing.yaml"))

    assert config.get_settings().urls == []


def test_backup_settings_defaults():
    settings = config.get_backup_settings()

    assert settings.directory == Path("db_backups")
    assert settings.pg_dump == "pg_dump"
    assert settings.psql == "psql"


def test_backup_settings_from_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("DBSNAP_BACKUP_DIR", str(tmp_path / "dumps"))
    monkeypatch.setenv("DBSNAP_PG_DUMP", "/usr/lib/postgresql/16/bin/pg_dump")
    monkeypatch.setenv("DBSNAP_PSQL", "/usr/lib/postgresql/16/bin/psql")

    settings = config.get_backup_settings()

    assert settings.directory == tmp_path / "dumps"
    assert settings.pg_dump.endswith("pg_dump")
    assert settings.psql.endswith("psql")
