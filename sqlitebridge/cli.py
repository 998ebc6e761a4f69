from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .commands import Commands
from .config import BridgeConfig
from .errors import Error


def _parse_values(raw: str | None) -> list[Any] | None:
    if raw is None:
        return None
    values = json.loads(raw)
    if not isinstance(values, list):
        raise ValueError("--values must be a JSON array")
    return values


def _render_rows(console, rows: list[dict[str, Any]]) -> None:
    from rich.markup import escape
    from rich.table import Table

    columns: list[str] = []
    for row in rows:
        for name in row:
            if name not in columns:
                columns.append(name)

    table = Table(show_lines=False)
    for name in columns:
        table.add_column(escape(name), style="cyan")
    for row in rows:
        table.add_row(*["NULL" if row.get(c) is None else escape(str(row.get(c))) for c in columns])
    console.print(table)
    console.print(f"[green]{len(rows)} row(s)[/green]")


def main(argv: Sequence[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Run SQL against a SQLite database through sqlitebridge")
    p.add_argument("path", help="Path to the database file (or :memory:)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log statements to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    ex = sub.add_parser("exec", help="Execute a statement (batch when --values is a JSON array of arrays)")
    ex.add_argument("sql")
    ex.add_argument("--values", default=None, help="JSON array of bind values")

    sel = sub.add_parser("select", help="Run a query and print the rows")
    sel.add_argument("sql")
    sel.add_argument("--values", default=None, help="JSON array of bind values")
    sel.add_argument("--json", action="store_true", help="Print rows as JSON lines instead of a table")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from rich.console import Console
    from rich.markup import escape

    console = Console()
    err_console = Console(stderr=True)

    try:
        values = _parse_values(args.values)
    except ValueError as e:
        p.error(str(e))

    commands = Commands(config=BridgeConfig.from_env())
    try:
        commands.open(args.path)
        if args.command == "exec":
            if values is None:
                commands.execute(args.path, args.sql)
            else:
                commands.execute2(args.path, args.sql, values)
            console.print("[green]OK[/green]")
        else:
            rows = commands.select(args.path, args.sql, values or [])
            if args.json:
                for row in rows:
                    sys.stdout.write(json.dumps(row, ensure_ascii=False) + "\n")
            else:
                _render_rows(console, rows)
    except Error as e:
        err_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        return 1
    finally:
        commands.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
