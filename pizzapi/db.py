# -*- coding: utf-8 -*-
"""
    db.py: database access through bind-parameterized sql

    The DAOs never use the ORM, they send plain sql text with ":name" bind parameters
    to a connection acquired from the Flask-SQLAlchemy engine.
"""
# pylint: disable=logging-format-interpolation,line-too-long
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
import pizzapi
from .bind_params import convert_out_binds_to_raw_resource
from typing import Any, Dict, Iterator, List, Optional, Union

DB = SQLAlchemy()

# driver messages for foreign key violations: sqlite, postgres and oracle
FOREIGN_KEY_VIOLATION_MARKERS = ("FOREIGN KEY", "ORA-02291")


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_connection, connection_record):
    """
    sqlite doesn't enforce foreign keys unless asked to
    """
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@dataclass
class DBResult:
    """
    Result of an executed statement

    :param rows: the returned rows as dicts, keyed by the column (alias) names
    :param out_binds: output bind variables of a `RETURNING ... INTO` statement, eg. {"idOut": [1]}
    :param rows_affected: number of rows inserted/updated/deleted
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    out_binds: Optional[Dict[str, List[Any]]] = None
    rows_affected: int = 0

    def returned_resource(self) -> Optional[Dict[str, Any]]:
        """
        :return: the resource returned by an INSERT/UPDATE in the same format as a SELECT row
        """
        if self.out_binds:
            return convert_out_binds_to_raw_resource(self.out_binds)
        if self.rows:
            return self.rows[0]
        return None


class Executor:
    """
    Execute sql on a single connection
    """

    def __init__(self, connection):
        self.connection = connection

    def execute(self, sql: str, bind_params: Union[Dict[str, Any], List[Dict[str, Any]], None] = None) -> DBResult:
        """
        :param sql: sql text with ":name" bind parameters
        :param bind_params: a dict, or a list of dicts to execute the statement for every dict
        :return: DBResult
        """
        pizzapi.log.debug(f"Executing {sql} with {bind_params}")
        if isinstance(bind_params, list):
            result = self.connection.execute(text(sql), bind_params)
            return DBResult(rows_affected=result.rowcount)

        result = self.connection.execute(text(sql), bind_params or {})
        if not result.returns_rows:
            return DBResult(rows_affected=result.rowcount)
        rows = [dict(row) for row in result.mappings()]
        return DBResult(rows=rows, rows_affected=len(rows))

    def transaction(self):
        """
        Start a transaction, it is committed when the with block exits normally and rolled back otherwise:

            with executor.transaction():
                executor.execute(...)

        This has to be called before the first statement is executed on the connection.
        """
        return self.connection.begin()


@contextmanager
def with_connection(engine: Optional[Engine] = None) -> Iterator[Executor]:
    """
    Acquire a connection from the pool, it is released when the with block exits, also on errors

    :param engine: defaults to the engine of the current app
    """
    if engine is None:
        engine = DB.engine
    connection = engine.connect()
    try:
        yield Executor(connection)
    finally:
        connection.close()


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """
    :param exc: IntegrityError raised by the driver
    :return: whether `exc` is caused by a foreign key constraint
    """
    message = str(getattr(exc, "orig", exc)).upper()
    return any(marker in message for marker in FOREIGN_KEY_VIOLATION_MARKERS)
