"""Database and backup configuration via Pydantic settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


DEFAULT_CONFIG_FILE = Path("dbs.yaml")


class DatabaseSettings(BaseModel):
    """Ordered list of PostgreSQL connection strings to back up."""

    urls: list[str] = Field(default_factory=list)

    @field_validator("urls")
    @classmethod
    def _strip_blank(cls, value: list[str]) -> list[str]:
        return [url.strip() for url in value if url and url.strip()]


class BackupSettings(BaseModel):
    directory: Path = Path("db_backups")
    pg_dump: str = "pg_dump"
    psql: str = "psql"


class DatabaseList(BaseModel):
    """Shape of the ``dbs.yaml`` / ``dbs.json`` configuration file."""

    databases: list[str] = Field(default_factory=list)


def load_database_urls(path: Path) -> list[str]:
    """Load connection strings from a JSON or YAML file."""

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        data = {}
    return DatabaseList.model_validate(data).databases


def _split_env_urls(raw: str) -> list[str]:
    return [part.strip() for part in raw.replace("\n", ",").split(",") if part.strip()]


@lru_cache
def get_settings() -> DatabaseSettings:
    env_urls = os.getenv("DATABASE_URLS")
    if env_urls:
        return DatabaseSettings(urls=_split_env_urls(env_urls))

    config_env = os.getenv("DBSNAP_CONFIG")
    config_path = Path(config_env) if config_env else DEFAULT_CONFIG_FILE
    if config_path.is_file():
        return DatabaseSettings(urls=load_database_urls(config_path))
    return DatabaseSettings()


@lru_cache
def get_backup_settings() -> BackupSettings:
    defaults = BackupSettings()
    directory_env = os.getenv("DBSNAP_BACKUP_DIR")
    return BackupSettings(
        directory=Path(directory_env) if directory_env else defaults.directory,
        pg_dump=os.getenv("DBSNAP_PG_DUMP", defaults.pg_dump),
        psql=os.getenv("DBSNAP_PSQL", defaults.psql),
    )
