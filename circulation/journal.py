"""Replay and export of the newline-delimited command log.

The export format is the same as the import format, so a library can be saved
with export_log and rebuilt later by replaying the file with import_log.
"""

import logging
import os
import tempfile
from typing import Callable, IO, Iterable, Optional

from circulation.commands import AddBook, CheckoutBook, CreateAccount, decode_command, dumps_command
from circulation.errors import JournalError, LibraryError, MalformedPayloadError
from circulation.invocation import Invocation
from circulation.library import Library
from circulation.ui_helpers import print_narration

logger = logging.getLogger(__name__)


def export_log(library: Library, writer: IO[str]) -> None:
    """Write the library state as ADD_BOOK, CREATE_ACCOUNT and CHECKOUT_BOOK lines."""
    books, accounts, checkouts = library.snapshot()

    commands = (
        [AddBook(id=b.id, name=b.name, count=b.count) for b in books]
        + [CreateAccount(id=a.id, name=a.name) for a in accounts]
        + [CheckoutBook(accountId=c.account_id, bookId=c.book_id) for c in checkouts]
    )
    try:
        for command in commands:
            writer.write(dumps_command(command) + "\n")
    except OSError as e:
        raise JournalError(f"failed to write library state, {e}") from e

    logger.debug(f"Exported {len(books)} books, {len(accounts)} accounts, {len(checkouts)} checkouts")


def import_log(
    library: Library,
    stream: Iterable[str],
    log_output: bool = False,
    echo: Optional[Callable[[str], None]] = None,
) -> int:
    """Replay an encoded command stream against the library.

    Commands run in order. When log_output is set, the narration of every
    executed command, including a failing one, is passed to echo. The first
    command that cannot be decoded or executed stops the replay and its error
    is raised; commands applied before it stay applied.

    Returns the number of commands executed.
    """
    echo = echo or print_narration
    applied = 0
    line_no = 0

    try:
        for line_no, line in enumerate(stream, 1):
            if not line.strip():
                continue

            invocation = None
            try:
                invocation = Invocation(decode_command(line))
                invocation.execute(library)
            except LibraryError as e:
                logger.warning(f"Replay stopped at line {line_no}: {e}")
                raise
            finally:
                # Undecodable lines have no narration to show
                if log_output and invocation is not None:
                    echo(invocation.output)

            applied += 1
    except UnicodeDecodeError as e:
        # The stream decodes ahead in chunks, so only a lower bound is known
        logger.warning(f"Replay stopped after line {line_no}: not valid UTF-8")
        raise MalformedPayloadError(f"command log is not valid UTF-8 after line {line_no}, {e}") from e
    except OSError as e:
        raise JournalError(f"failed to read library state, {e}") from e

    logger.debug(f"Replayed {applied} commands")
    return applied


def load_log(library: Library, path: str) -> int:
    """Replay the state log at path. A missing file means an empty library."""
    if not os.path.exists(path):
        logger.info(f"State log {path} not found, starting with an empty library")
        return 0

    try:
        with open(path, "r", encoding="utf-8") as f:
            applied = import_log(library, f)
    except OSError as e:
        raise JournalError(f"failed to open library state {path}, {e}") from e

    logger.info(f"Loaded {applied} commands from {path}")
    return applied


def save_log(library: Library, path: str) -> None:
    """Export the library to path through a temporary file and an atomic rename.

    The existing file is left untouched when creating or writing the temporary
    file fails.
    """
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".state-", suffix=".db", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            export_log(library, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        raise JournalError(f"failed to replace library state {path}, {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)

    logger.info(f"Saved library state to {path}")
