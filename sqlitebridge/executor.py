import logging
import sqlite3

from . import codec
from .errors import EngineError, TypeMismatch

logger = logging.getLogger(__name__)


def _iter_statements(sql):
    # Split on ';' but only where SQLite agrees a statement is complete, so
    # semicolons inside literals and trigger bodies stay put.
    buf = ""
    parts = sql.split(";")
    last = len(parts) - 1
    for i, part in enumerate(parts):
        buf += part
        if i == last:
            break
        buf += ";"
        if sqlite3.complete_statement(buf):
            if buf.strip(" \t\r\n;"):
                yield buf
            buf = ""
    if buf.strip():
        yield buf


def _as_params(values):
    if values is None:
        return []
    if isinstance(values, (list, tuple)):
        return values
    # Position 0 refers to the parameter set as a whole.
    raise TypeMismatch(0, values)


def execute(session, sql):
    """Run ``sql`` with no parameters; several ``;``-separated statements are allowed."""
    try:
        statements = list(_iter_statements(sql))
    except UnicodeEncodeError as e:
        raise EngineError.from_sqlite(e, sql=sql) from e

    cur = session.connection.cursor()
    try:
        for stmt in statements:
            logger.debug("execute %s: %s", session.path, stmt)
            try:
                cur.execute(stmt)
                # Step to completion like sqlite3_exec does.
                cur.fetchall()
            except (sqlite3.Error, UnicodeEncodeError) as e:
                raise EngineError.from_sqlite(e, sql=stmt) from e
            session._stats["statements"] += 1
            if cur.rowcount > 0:
                session._stats["rows_written"] += cur.rowcount
    finally:
        cur.close()
    return True


def execute2(session, sql, values):
    """Prepare ``sql`` once and run it for one flat row or for every row of a batch.

    Rows of a batch run in order on the same statement with no transaction
    around them; a failure leaves earlier rows committed.
    """
    values = _as_params(values)
    strict = session.config.strict_types
    if codec.is_batch(values):
        rows = values
    else:
        rows = [values]

    cur = session.connection.cursor()
    try:
        for index, row in enumerate(rows):
            if not isinstance(row, (list, tuple)):
                raise TypeMismatch(index + 1, row)
            params = codec.encode_row(row, strict)
            try:
                # sqlite3 keeps the prepared statement in its cache and
                # resets it before binding the next row.
                cur.execute(sql, params)
            except (sqlite3.Error, UnicodeEncodeError) as e:
                raise EngineError.from_sqlite(e, sql=sql, params=row) from e
            session._stats["statements"] += 1
            if cur.rowcount > 0:
                session._stats["rows_written"] += cur.rowcount
        logger.debug("execute2 %s: %s (%d rows)", session.path, sql, len(rows))
    finally:
        cur.close()
    return True


def select(session, sql, values):
    """Run a query with flat ``values`` and return every row as a dict."""
    values = _as_params(values)
    params = codec.encode_row(values, session.config.strict_types)

    cur = session.connection.cursor()
    try:
        try:
            cur.execute(sql, params)
            names = [d[0] for d in cur.description] if cur.description else []
            rows = [codec.decode_row(names, cells) for cells in cur]
        except (sqlite3.Error, UnicodeEncodeError) as e:
            raise EngineError.from_sqlite(e, sql=sql, params=values) from e
    finally:
        cur.close()

    session._stats["statements"] += 1
    session._stats["rows_read"] += len(rows)
    logger.debug("select %s: %s (%d rows)", session.path, sql, len(rows))
    return rows
