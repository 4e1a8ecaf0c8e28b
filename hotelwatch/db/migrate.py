"""Apply the users / favorites schema."""

from __future__ import annotations

import logging
import pathlib
import sys
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from hotelwatch.config import MonitorSettings
from hotelwatch.db.session import create_engine_from_env
from hotelwatch.errors import ConfigurationError
from hotelwatch.utils.log import configure_logging

logger = logging.getLogger(__name__)

SCHEMA_PATH = pathlib.Path(__file__).with_name("schema.sql")


def run_migrations(engine: Engine, schema: str | None = None) -> int:
    """Execute every statement of ``schema`` (default: schema.sql) in one transaction."""
    statements = list(split_statements(schema if schema is not None else SCHEMA_PATH.read_text()))
    with engine.begin() as conn:
        for stmt in statements:
            conn.exec_driver_sql(stmt)
    logger.info("Applied %s schema statements", len(statements))
    return len(statements)


def split_statements(sql: str) -> Iterator[str]:
    buffer: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        buffer.append(line)
        if stripped.endswith(";"):
            yield "\n".join(buffer).rstrip(";")
            buffer.clear()
    if buffer:
        yield "\n".join(buffer)


def main() -> None:
    try:
        settings = MonitorSettings.from_env()
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)
    configure_logging(settings.log_level)
    try:
        run_migrations(create_engine_from_env(settings.database_url))
    except SQLAlchemyError as exc:
        print(f"Migration failed: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
