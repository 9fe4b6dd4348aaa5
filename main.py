#!/usr/bin/env python3
# ============================================================
# DBPane - Terminal Database Browser
# main.py — Application Entry Point
# ============================================================
#
# Usage:
#   python main.py                      → Launch the multi-pane browser
#   python main.py databases            → Print database names
#   python main.py tables <db>          → Print tables of a database
#   python main.py query <db> "<sql>"   → Run one query and print it
#   python main.py version              → Show version info
#
# Keys inside the browser:
#   ctrl+d / ctrl+t / ctrl+r / ctrl+e   → focus databases / tables / results / query
#   j k (or ↓ ↑)                        → move the selection
#   enter (in query pane)               → run the query
#   q (outside query pane), ctrl+c      → quit
#
# Connection settings come from POSTGRES_* / MYSQL_* in .env
# ============================================================

import sys
import os
import click
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.markup import escape
from rich.text import Text
from rich import box

# Add project root to path
sys.path.insert(0, os.path.dirname(__file__))

from utils.logger import setup_logger
from config import app_config, database_config, postgres_config, mysql_config
from core.gateway import GatewayError, create_gateway

console = Console()

BACKENDS = ["postgres", "mysql"]


@click.group(invoke_without_command=True)
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default=None,
    help="Database server type (default: DB_BACKEND or postgres).",
)
@click.pass_context
def cli(ctx, backend):
    """DBPane — terminal browser for databases, tables and ad-hoc queries."""
    ctx.ensure_object(dict)
    ctx.obj["backend"] = backend
    if ctx.invoked_subcommand is None:
        launch_tui(backend)


@cli.command()
@click.pass_context
def tui(ctx):
    """Launch the multi-pane browser (default)."""
    launch_tui(ctx.obj["backend"])


@cli.command()
@click.pass_context
def databases(ctx):
    """Print the databases on the server."""
    setup_logger(app_config.log_file, "WARNING")
    gateway = _gateway_or_exit(ctx.obj["backend"])
    for name in _call_or_exit(gateway.list_databases):
        click.echo(name)


@cli.command()
@click.argument("database")
@click.pass_context
def tables(ctx, database: str):
    """Print the tables of DATABASE."""
    setup_logger(app_config.log_file, "WARNING")
    gateway = _gateway_or_exit(ctx.obj["backend"])
    for name in _call_or_exit(gateway.list_tables, database):
        click.echo(name)


@cli.command()
@click.argument("database")
@click.argument("sql")
@click.pass_context
def query(ctx, database: str, sql: str):
    """Run SQL against DATABASE and print the rows."""
    setup_logger(app_config.log_file, "WARNING")
    gateway = _gateway_or_exit(ctx.obj["backend"])
    result = _call_or_exit(gateway.execute_query, database, sql)

    if result.is_empty():
        console.print(Text("Empty set", style="dim"))
        return

    table = Table(box=box.SIMPLE_HEAVY, show_header=False, border_style="dim white")
    for _ in range(result.column_count):
        table.add_column(style="white", no_wrap=False)
    for row in result.rows:
        table.add_row(*[Text(cell) for cell in row])
    console.print(table)

    row_word = "row" if len(result.rows) == 1 else "rows"
    console.print(Text(f"{len(result.rows)} {row_word} in set", style="dim"))


@cli.command()
def version():
    """Display DBPane version information."""
    show_version()


# ── Launch Functions ──────────────────────────────────────────

def launch_tui(backend=None):
    """Load the database list, then hand the terminal to the browser."""
    setup_logger()
    logger.info(f"Starting {app_config.name} v{app_config.version} (TUI mode)")

    from core.controller import SessionController
    from ui.app import BrowserApp

    gateway = _gateway_or_exit(backend)

    # Fails before the terminal leaves cooked mode
    controller = _call_or_exit(SessionController.start, gateway)

    BrowserApp(controller).run()


def show_version():
    """Display version and configuration info."""
    print(f"{app_config.name} v{app_config.version}")
    print(f"  Backend    : {database_config.backend}")
    print(f"  PostgreSQL : {postgres_config.user}@{postgres_config.host}:{postgres_config.port}")
    print(f"  MySQL      : {mysql_config.user}@{mysql_config.host}:{mysql_config.port}")
    print(f"  Log file   : {app_config.log_file}")


# ── Helpers ───────────────────────────────────────────────────

def _gateway_or_exit(backend):
    try:
        return create_gateway(backend)
    except ValueError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)


def _call_or_exit(fn, *args):
    """Run a gateway call outside the browser; any failure is fatal."""
    try:
        return fn(*args)
    except GatewayError as e:
        logger.error(f"{fn.__name__} failed: {e}")
        console.print(f"[red]❌ {type(e).__name__}: {escape(str(e))}[/red]")
        console.print("   Check your POSTGRES_* / MYSQL_* settings in .env")
        sys.exit(1)


# ── Entry Point ───────────────────────────────────────────────

if __name__ == "__main__":
    cli()
