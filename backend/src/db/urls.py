"""Helpers for PostgreSQL connection strings."""

from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


UNKNOWN_DATABASE = "unknown_db"
POSTGRES_SCHEME = "postgres://"


def database_name(url: str) -> str:
    """Return the final path segment of ``url`` without its query string."""

    name = url.split("/")[-1].split("?")[0]
    return name or UNKNOWN_DATABASE


def is_postgres_url(value: str) -> bool:
    return value.startswith(POSTGRES_SCHEME)


def mask_url(url: str) -> str:
    """Render ``url`` for logs with the password hidden."""

    try:
        return make_url(url).render_as_string(hide_password=True)
    except (ArgumentError, ValueError):
        return "<unparseable url>"
