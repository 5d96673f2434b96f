import logging
import sys
from typing import Optional

import typer

from circulation.commands import PrintAccounts, PrintCatalog
from circulation.config import settings
from circulation.errors import LibraryError
from circulation.invocation import execute_command
from circulation.journal import import_log, load_log, save_log
from circulation.library import Library
from circulation.ui_helpers import print_narration, set_output_mode

app = typer.Typer(help="Library catalog and checkout management driven by JSON command files.")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | rich (default: plain)",
    )
):
    """Global CLI options (output mode)."""
    logging.basicConfig(level=logging.DEBUG if settings.debug else settings.log_level.upper())
    if output:
        set_output_mode(output)


def _load(db_path: str) -> Library:
    lib = Library()
    try:
        load_log(lib, db_path)
    except LibraryError as e:
        print(f"failed to load library DB from {db_path}, {e}")
        raise typer.Exit(code=1)
    return lib


@app.command("run")
def cli_run(
    commands_path: str = typer.Argument(..., metavar="COMMANDS", help="Commands file, or '-' for stdin"),
    db: Optional[str] = typer.Option(None, "--db", help="Path to the state log (default: LIBRARY_DB_FILE or state.db)"),
):
    """Execute a commands file against the library and save the new state.

    Commands run in file order. If any command fails nothing is saved and the
    exit code is 1.
    """
    db_path = db or settings.db_file
    lib = _load(db_path)

    try:
        if commands_path == "-":
            import_log(lib, sys.stdin, log_output=True)
        else:
            with open(commands_path, "r", encoding="utf-8") as f:
                import_log(lib, f, log_output=True)
    except OSError as e:
        print(f"failed to open commands file, {e}")
        raise typer.Exit(code=1)
    except LibraryError as e:
        print(f"failed to execute commands from {commands_path}, {e}")
        raise typer.Exit(code=1)

    try:
        save_log(lib, db_path)
    except LibraryError as e:
        print(f"failed to save library state to DB, {e}")
        raise typer.Exit(code=1)


@app.command("catalog")
def cli_catalog(db: Optional[str] = typer.Option(None, "--db", help="Path to the state log (default: LIBRARY_DB_FILE or state.db)")):
    """Print the catalog stored in the state log."""
    lib = _load(db or settings.db_file)
    print_narration(execute_command(PrintCatalog(), lib))


@app.command("accounts")
def cli_accounts(db: Optional[str] = typer.Option(None, "--db", help="Path to the state log (default: LIBRARY_DB_FILE or state.db)")):
    """Print the accounts stored in the state log and their checked out books."""
    lib = _load(db or settings.db_file)
    print_narration(execute_command(PrintAccounts(), lib))


if __name__ == "__main__":
    app()
