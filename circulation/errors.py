"""Exceptions raised by the state store and the command layer."""


class LibraryError(Exception):
    """Base exception for library system errors."""


class NotFoundError(LibraryError, LookupError):
    """A referenced record does not exist."""


class BookNotExistError(NotFoundError):
    def __init__(self, message: str = "book does not exist") -> None:
        super().__init__(message)


class AccountNotExistError(NotFoundError):
    def __init__(self, message: str = "account does not exist") -> None:
        super().__init__(message)


class CheckoutNotExistError(NotFoundError):
    def __init__(self, message: str = "checkout does not exist") -> None:
        super().__init__(message)


class AlreadyExistsError(LibraryError):
    """A record with the same id is already present."""


class BookAlreadyExistsError(AlreadyExistsError):
    def __init__(self, message: str = "book already exists") -> None:
        super().__init__(message)


class AccountAlreadyExistsError(AlreadyExistsError):
    def __init__(self, message: str = "account already exists") -> None:
        super().__init__(message)


class InvalidArgumentError(LibraryError, ValueError):
    """Negative counts or removing more copies than exist."""


class LimitExceededError(LibraryError):
    """An operation would push a record past one of its limits."""


class CheckoutLimitExceededError(LimitExceededError):
    pass


class InsufficientAvailableCopiesError(LimitExceededError):
    pass


class DuplicateCheckoutError(LibraryError):
    """The account already holds a copy of the book."""


class CommandError(LibraryError, ValueError):
    """A command record could not be decoded."""


class UnknownCommandError(CommandError):
    pass


class MalformedPayloadError(CommandError):
    pass


class JournalError(LibraryError):
    """Reading or writing a command log failed."""
