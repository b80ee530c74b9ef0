"""PostgreSQL connection, configured from Settings (PG* environment variables)."""

from __future__ import annotations

import psycopg2
import psycopg2.extensions

from pulso.config import Settings


def get_connection(settings: Settings | None = None) -> psycopg2.extensions.connection:
    settings = settings or Settings.from_env()
    return psycopg2.connect(
        host     = settings.pg_host,
        port     = settings.pg_port,
        dbname   = settings.pg_database,
        user     = settings.pg_user,
        password = settings.pg_password,
    )
