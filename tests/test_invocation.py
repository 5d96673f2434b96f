import pytest

from circulation.commands import (
    AddBook,
    AddCopies,
    CheckoutBook,
    CreateAccount,
    PrintAccounts,
    PrintCatalog,
    RemoveCopies,
    ReturnBook,
)
from circulation.errors import (
    AccountNotExistError,
    BookAlreadyExistsError,
    BookNotExistError,
    CheckoutLimitExceededError,
    CheckoutNotExistError,
    DuplicateCheckoutError,
    InsufficientAvailableCopiesError,
    InvalidArgumentError,
)
from circulation.invocation import Invocation, execute_command


def _fail(lib, command, error_type):
    inv = Invocation(command)
    with pytest.raises(error_type) as exc:
        inv.execute(lib)
    return inv.output, exc.value


def test_add_book_narration(lib):
    assert execute_command(AddBook(id=1, name="Dune", count=3), lib) == \
        "Dune (1) with 3 copies added to the catalog"

    output, _ = _fail(lib, AddBook(id=1, name="Emma", count=1), BookAlreadyExistsError)
    assert output == "Emma (1) could not be added to the catalog, book already exists"

def test_add_copies_narration(stocked_lib):
    assert execute_command(AddCopies(id=1, count=2), stocked_lib) == "Dune (1) added 2 copies"

    output, _ = _fail(stocked_lib, AddCopies(id=99, count=2), BookNotExistError)
    assert output == "could not add 2 copies, book (99) does not exist"

    output, _ = _fail(stocked_lib, AddCopies(id=1, count=-1), InvalidArgumentError)
    assert output == "Dune (1) could not add -1 copies, cannot add negative copies"

def test_remove_copies_narration(stocked_lib):
    assert execute_command(RemoveCopies(id=1, count=1), stocked_lib) == "Dune (1) removed 1 copies"

    output, _ = _fail(stocked_lib, RemoveCopies(id=99, count=1), BookNotExistError)
    assert output == "could not remove 1 copies, book (99) does not exist"

    output, _ = _fail(stocked_lib, RemoveCopies(id=1, count=5), InvalidArgumentError)
    assert output == "Dune (1) could not remove 5 copies, cannot remove more copies than exist"

    stocked_lib.checkout_book(10, 1)
    output, _ = _fail(stocked_lib, RemoveCopies(id=1, count=1), InsufficientAvailableCopiesError)
    assert output == (
        "Dune (1) could not remove 1 copies, "
        "cannot remove more copies of Dune (1) than are available to check out (0)"
    )

def test_create_account_narration(lib):
    assert execute_command(CreateAccount(id=10, name="Ada"), lib) == "Ada (10) created account"

    output, _ = _fail(lib, CreateAccount(id=10, name="Grace"), Exception)
    assert output == "Grace (10) could not create account, account already exists"

def test_checkout_narration(stocked_lib):
    assert execute_command(CheckoutBook(accountId=10, bookId=1), stocked_lib) == \
        "Ada (10) checked out Dune (1)"

    output, _ = _fail(stocked_lib, CheckoutBook(accountId=99, bookId=1), AccountNotExistError)
    assert output == "could not checkout book, account (99) does not exist"

    output, _ = _fail(stocked_lib, CheckoutBook(accountId=10, bookId=99), BookNotExistError)
    assert output == "Ada (10) could not checkout book, book (99) does not exist"

    output, _ = _fail(stocked_lib, CheckoutBook(accountId=10, bookId=1), DuplicateCheckoutError)
    assert output == "Ada (10) could not checkout Dune (1), Ada (10) cannot checkout more than one copy of Dune (1)"

def test_checkout_limit_narration(lib):
    lib.create_account(10, "Ada")
    for book_id in range(1, 6):
        lib.add_book(book_id, f"Book {book_id}", 1)
    for book_id in range(1, 5):
        execute_command(CheckoutBook(accountId=10, bookId=book_id), lib)

    output, _ = _fail(lib, CheckoutBook(accountId=10, bookId=5), CheckoutLimitExceededError)
    assert output == "Ada (10) could not checkout Book 5 (5), Ada (10) cannot checkout more than 4 books at a time"

def test_return_narration(stocked_lib):
    stocked_lib.checkout_book(10, 1)
    assert execute_command(ReturnBook(accountId=10, bookId=1), stocked_lib) == \
        "Ada (10) returned Dune (1)"

    output, _ = _fail(stocked_lib, ReturnBook(accountId=99, bookId=1), AccountNotExistError)
    assert output == "could not return book, account (99) does not exist"

    output, _ = _fail(stocked_lib, ReturnBook(accountId=10, bookId=99), BookNotExistError)
    assert output == "Ada (10) could not return book, book (99) does not exist"

    output, _ = _fail(stocked_lib, ReturnBook(accountId=10, bookId=1), CheckoutNotExistError)
    assert output == "Ada (10) could not return Dune (1), no checkout exists"

def test_store_error_is_propagated_unchanged(stocked_lib, monkeypatch):
    sentinel = InvalidArgumentError("boom")

    def fail(*args):
        raise sentinel

    monkeypatch.setattr(stocked_lib, "add_copies", fail)
    inv = Invocation(AddCopies(id=1, count=1))
    with pytest.raises(InvalidArgumentError) as exc:
        inv.execute(stocked_lib)
    assert exc.value is sentinel
    assert inv.output == "Dune (1) could not add 1 copies, boom"

def test_print_catalog(stocked_lib):
    stocked_lib.checkout_book(10, 1)

    output = execute_command(PrintCatalog(), stocked_lib)

    assert output.startswith("# Library Catalog\n")
    assert "## Dune (1)\nCopies: 2\nChecked Out: 1\n\n" in output
    assert "## Emma (2)\nCopies: 1\nChecked Out: 0\n\n" in output

def test_print_catalog_empty(lib):
    assert execute_command(PrintCatalog(), lib) == "# Library Catalog\n"

def test_print_accounts(stocked_lib):
    stocked_lib.checkout_book(10, 1)
    stocked_lib.checkout_book(10, 2)

    output = execute_command(PrintAccounts(), stocked_lib)

    assert output.startswith("# Accounts\n\n")
    assert "## Ada (10)\nChecked Out Books:\n- Dune (1)\n- Emma (2)\n\n" in output
    assert "## Grace (11)\nChecked Out Books:\n\n" in output
