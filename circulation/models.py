from dataclasses import dataclass


@dataclass(frozen=True)
class Book:
    """A title in the catalog and the number of physical copies the library owns."""

    id: int
    name: str
    count: int

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass(frozen=True)
class Account:
    """A library member. The name is not required to be unique."""

    id: int
    name: str

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass(frozen=True)
class Checkout:
    account_id: int
    book_id: int
