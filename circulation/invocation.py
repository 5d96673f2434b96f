"""Execution of commands against the Library and narration of the outcome.

Keeping this apart from the Library lets the store focus on catalog and
account rules while this module deals with what the user gets to read.
Most of the code here picks the most useful wording for failures: entities
are named as "Name (id)" when they exist and by bare id when they do not.
"""

import logging
from typing import Callable, Dict, List

from circulation.commands import (
    AddBook,
    AddCopies,
    CheckoutBook,
    Command,
    CreateAccount,
    PrintAccounts,
    PrintCatalog,
    RemoveCopies,
    ReturnBook,
)
from circulation.errors import (
    AccountNotExistError,
    BookNotExistError,
    CheckoutNotExistError,
    LibraryError,
)
from circulation.library import Library
from circulation.models import Account, Book

logger = logging.getLogger(__name__)


class Invocation:
    """A command paired with the narration produced by executing it."""

    def __init__(self, command: Command) -> None:
        self.command = command
        self.output: str = ""

    def execute(self, library: Library) -> None:
        """Run the command and set output.

        When the library rejects the command, output is set to describe the
        failure before the library's exception is re-raised unchanged.
        """
        handler = _HANDLERS[self.command.NAME]
        try:
            handler(self, self.command, library)
        except LibraryError as e:
            logger.debug(f"{self.command.NAME} failed: {e}")
            raise


def execute_command(command: Command, library: Library) -> str:
    """Execute a command and return its narration."""
    invocation = Invocation(command)
    invocation.execute(library)
    return invocation.output


def _add_book(inv: Invocation, cmd: AddBook, library: Library) -> None:
    try:
        library.add_book(cmd.id, cmd.name, cmd.count)
    except LibraryError as e:
        inv.output = f"{cmd.name} ({cmd.id}) could not be added to the catalog, {e}"
        raise

    inv.output = f"{cmd.name} ({cmd.id}) with {cmd.count} copies added to the catalog"


def _add_copies(inv: Invocation, cmd: AddCopies, library: Library) -> None:
    try:
        library.add_copies(cmd.id, cmd.count)
    except BookNotExistError:
        inv.output = f"could not add {cmd.count} copies, book ({cmd.id}) does not exist"
        raise
    except LibraryError as e:
        inv.output = f"{library.lookup_book(cmd.id)} could not add {cmd.count} copies, {e}"
        raise

    inv.output = f"{library.lookup_book(cmd.id)} added {cmd.count} copies"


def _remove_copies(inv: Invocation, cmd: RemoveCopies, library: Library) -> None:
    try:
        library.remove_copies(cmd.id, cmd.count)
    except BookNotExistError:
        inv.output = f"could not remove {cmd.count} copies, book ({cmd.id}) does not exist"
        raise
    except LibraryError as e:
        inv.output = f"{library.lookup_book(cmd.id)} could not remove {cmd.count} copies, {e}"
        raise

    inv.output = f"{library.lookup_book(cmd.id)} removed {cmd.count} copies"


def _create_account(inv: Invocation, cmd: CreateAccount, library: Library) -> None:
    try:
        library.create_account(cmd.id, cmd.name)
    except LibraryError as e:
        inv.output = f"{cmd.name} ({cmd.id}) could not create account, {e}"
        raise

    inv.output = f"{cmd.name} ({cmd.id}) created account"


def _checkout_book(inv: Invocation, cmd: CheckoutBook, library: Library) -> None:
    try:
        library.checkout_book(cmd.account_id, cmd.book_id)
    except AccountNotExistError:
        inv.output = f"could not checkout book, account ({cmd.account_id}) does not exist"
        raise
    except BookNotExistError:
        account = library.lookup_account(cmd.account_id)
        inv.output = f"{account} could not checkout book, book ({cmd.book_id}) does not exist"
        raise
    except LibraryError as e:
        account = library.lookup_account(cmd.account_id)
        book = library.lookup_book(cmd.book_id)
        inv.output = f"{account} could not checkout {book}, {e}"
        raise

    account = library.lookup_account(cmd.account_id)
    book = library.lookup_book(cmd.book_id)
    inv.output = f"{account} checked out {book}"


def _return_book(inv: Invocation, cmd: ReturnBook, library: Library) -> None:
    try:
        library.return_book(cmd.account_id, cmd.book_id)
    except AccountNotExistError:
        inv.output = f"could not return book, account ({cmd.account_id}) does not exist"
        raise
    except BookNotExistError:
        account = library.lookup_account(cmd.account_id)
        inv.output = f"{account} could not return book, book ({cmd.book_id}) does not exist"
        raise
    except CheckoutNotExistError:
        account = library.lookup_account(cmd.account_id)
        book = library.lookup_book(cmd.book_id)
        inv.output = f"{account} could not return {book}, no checkout exists"
        raise

    account = library.lookup_account(cmd.account_id)
    book = library.lookup_book(cmd.book_id)
    inv.output = f"{account} returned {book}"


def _print_catalog(inv: Invocation, cmd: PrintCatalog, library: Library) -> None:
    lines: List[str] = ["# Library Catalog\n"]

    def visit(book: Book) -> None:
        lines.append(f"## {book}\n")
        lines.append(f"Copies: {book.count}\n")
        lines.append(f"Checked Out: {len(library.checkouts_for_book(book.id))}\n")
        lines.append("\n")

    library.for_each_book(visit)
    inv.output = "".join(lines)


def _print_accounts(inv: Invocation, cmd: PrintAccounts, library: Library) -> None:
    lines: List[str] = ["# Accounts\n\n"]

    def visit(account: Account) -> None:
        lines.append(f"## {account}\n")
        lines.append("Checked Out Books:\n")
        for checkout in library.checkouts_for_account(account.id):
            lines.append(f"- {library.lookup_book(checkout.book_id)}\n")
        lines.append("\n")

    library.for_each_account(visit)
    inv.output = "".join(lines)


_HANDLERS: Dict[str, Callable[[Invocation, Command, Library], None]] = {
    AddBook.NAME: _add_book,
    AddCopies.NAME: _add_copies,
    RemoveCopies.NAME: _remove_copies,
    CreateAccount.NAME: _create_account,
    CheckoutBook.NAME: _checkout_book,
    ReturnBook.NAME: _return_book,
    PrintCatalog.NAME: _print_catalog,
    PrintAccounts.NAME: _print_accounts,
}
