import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from circulation.errors import (
    AccountAlreadyExistsError,
    AccountNotExistError,
    BookAlreadyExistsError,
    BookNotExistError,
    CheckoutLimitExceededError,
    CheckoutNotExistError,
    DuplicateCheckoutError,
    InsufficientAvailableCopiesError,
    InvalidArgumentError,
)
from circulation.models import Account, Book, Checkout
from circulation.rwlock import RWLock

logger = logging.getLogger(__name__)

MAX_CHECKOUTS_PER_ACCOUNT = 4


class Library:
    """Owns the catalog, the accounts and the checkout indices.

    Every public method takes the store-wide lock: mutators exclusively,
    readers shared. Records and lists handed back to callers are snapshots.
    """

    def __init__(self) -> None:
        self._lock = RWLock()
        self._books: Dict[int, Book] = {}
        self._accounts: Dict[int, Account] = {}
        # Both indices hold the same Checkout objects. An account holds at
        # most MAX_CHECKOUTS_PER_ACCOUNT of them, so linear scans are fine.
        self._checkouts_by_account: Dict[int, List[Checkout]] = {}
        self._checkouts_by_book: Dict[int, List[Checkout]] = {}

    # ------------------------- Catalog ------------------------- #
    def add_book(self, id: int, name: str, count: int) -> None:
        """Add a book to the catalog. The count must be non-negative."""
        with self._lock.write():
            if id in self._books:
                raise BookAlreadyExistsError()
            if count < 0:
                raise InvalidArgumentError("cannot add negative copies")
            self._books[id] = Book(id=id, name=name, count=count)
        logger.debug(f"Book added: id={id}, count={count}")

    def add_copies(self, id: int, count: int) -> None:
        with self._lock.write():
            book = self._books.get(id)
            if book is None:
                raise BookNotExistError()
            if count < 0:
                raise InvalidArgumentError("cannot add negative copies")
            self._books[id] = replace(book, count=book.count + count)

    def remove_copies(self, id: int, count: int) -> None:
        """Remove copies of a book.

        The count must be non-negative and cannot exceed the copies that are
        not currently checked out.
        """
        with self._lock.write():
            book = self._books.get(id)
            if book is None:
                raise BookNotExistError()
            if count < 0:
                raise InvalidArgumentError("cannot remove negative copies")
            if book.count < count:
                raise InvalidArgumentError("cannot remove more copies than exist")

            available = book.count - len(self._checkouts_by_book.get(id, []))
            if available < count:
                raise InsufficientAvailableCopiesError(
                    f"cannot remove more copies of {book.name} ({book.id}) "
                    f"than are available to check out ({available})"
                )
            self._books[id] = replace(book, count=book.count - count)

    # ------------------------- Accounts ------------------------- #
    def create_account(self, id: int, name: str) -> None:
        with self._lock.write():
            if id in self._accounts:
                raise AccountAlreadyExistsError()
            self._accounts[id] = Account(id=id, name=name)
        logger.debug(f"Account created: id={id}")

    # ------------------------- Checkouts ------------------------- #
    def checkout_book(self, account_id: int, book_id: int) -> None:
        """Check a book out to an account.

        Fails when the account already holds MAX_CHECKOUTS_PER_ACCOUNT books or
        already holds a copy of this book. The number of copies on the shelf is
        not consulted here.
        """
        with self._lock.write():
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountNotExistError()
            book = self._books.get(book_id)
            if book is None:
                raise BookNotExistError()

            held = self._checkouts_by_account.get(account_id, [])
            if len(held) >= MAX_CHECKOUTS_PER_ACCOUNT:
                raise CheckoutLimitExceededError(
                    f"{account.name} ({account.id}) cannot checkout more than "
                    f"{MAX_CHECKOUTS_PER_ACCOUNT} books at a time"
                )
            if any(c.book_id == book_id for c in held):
                raise DuplicateCheckoutError(
                    f"{account.name} ({account.id}) cannot checkout more than one copy "
                    f"of {book.name} ({book.id})"
                )

            checkout = Checkout(account_id=account_id, book_id=book_id)
            self._checkouts_by_account.setdefault(account_id, []).append(checkout)
            self._checkouts_by_book.setdefault(book_id, []).append(checkout)

    def return_book(self, account_id: int, book_id: int) -> None:
        with self._lock.write():
            if account_id not in self._accounts:
                raise AccountNotExistError()
            if book_id not in self._books:
                raise BookNotExistError()

            target = Checkout(account_id=account_id, book_id=book_id)
            held = self._checkouts_by_account.get(account_id, [])
            if target not in held:
                raise CheckoutNotExistError()

            self._checkouts_by_account[account_id] = [c for c in held if c != target]
            self._checkouts_by_book[book_id] = [
                c for c in self._checkouts_by_book.get(book_id, []) if c != target
            ]

    # ------------------------- Read accessors ------------------------- #
    def lookup_book(self, id: int) -> Optional[Book]:
        with self._lock.read():
            return self._books.get(id)

    def lookup_account(self, id: int) -> Optional[Account]:
        with self._lock.read():
            return self._accounts.get(id)

    def for_each_book(self, visitor: Callable[[Book], None]) -> None:
        """Call visitor for every book. The visitor must not mutate the library."""
        with self._lock.read():
            for book in list(self._books.values()):
                visitor(book)

    def for_each_account(self, visitor: Callable[[Account], None]) -> None:
        """Call visitor for every account. The visitor must not mutate the library."""
        with self._lock.read():
            for account in list(self._accounts.values()):
                visitor(account)

    def checkouts_for_account(self, id: int) -> List[Checkout]:
        with self._lock.read():
            return list(self._checkouts_by_account.get(id, []))

    def checkouts_for_book(self, id: int) -> List[Checkout]:
        with self._lock.read():
            return list(self._checkouts_by_book.get(id, []))

    def available_copies(self, id: int) -> int:
        """Copies of a book that are on the shelf right now."""
        with self._lock.read():
            book = self._books.get(id)
            if book is None:
                raise BookNotExistError()
            return book.count - len(self._checkouts_by_book.get(id, []))

    def snapshot(self) -> Tuple[List[Book], List[Account], List[Checkout]]:
        """Books, accounts and live checkouts taken under one read lock."""
        with self._lock.read():
            books = list(self._books.values())
            accounts = list(self._accounts.values())
            checkouts = [c for held in self._checkouts_by_account.values() for c in held]
        return books, accounts, checkouts
