"""Command variants and their wire encoding.

Each command is encoded as a JSON object holding the command name and its
arguments, for example:

    {"name": "ADD_BOOK", "arguments": {"id": 1, "name": "Dune", "count": 3}}

Decoding is done in two steps: the name picks the variant, then the arguments
are validated against that variant's fields.
"""

import json
from typing import Any, ClassVar, Dict, Mapping, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from circulation.errors import MalformedPayloadError, UnknownCommandError


class _CommandArguments(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    NAME: ClassVar[str]


class AddBook(_CommandArguments):
    NAME: ClassVar[str] = "ADD_BOOK"

    id: int
    name: str
    count: int


class AddCopies(_CommandArguments):
    NAME: ClassVar[str] = "ADD_COPIES"

    id: int
    count: int


class RemoveCopies(_CommandArguments):
    NAME: ClassVar[str] = "REMOVE_COPIES"

    id: int
    count: int


class CreateAccount(_CommandArguments):
    NAME: ClassVar[str] = "CREATE_ACCOUNT"

    id: int
    name: str


class CheckoutBook(_CommandArguments):
    NAME: ClassVar[str] = "CHECKOUT_BOOK"

    account_id: int = Field(alias="accountId")
    book_id: int = Field(alias="bookId")


class ReturnBook(_CommandArguments):
    NAME: ClassVar[str] = "RETURN_BOOK"

    account_id: int = Field(alias="accountId")
    book_id: int = Field(alias="bookId")


class PrintCatalog(_CommandArguments):
    """Takes no arguments."""

    NAME: ClassVar[str] = "PRINT_CATALOG"


class PrintAccounts(_CommandArguments):
    """Takes no arguments."""

    NAME: ClassVar[str] = "PRINT_ACCOUNTS"


Command = Union[
    AddBook,
    AddCopies,
    RemoveCopies,
    CreateAccount,
    CheckoutBook,
    ReturnBook,
    PrintCatalog,
    PrintAccounts,
]

COMMAND_TYPES: Dict[str, Type[_CommandArguments]] = {
    cls.NAME: cls
    for cls in (
        AddBook,
        AddCopies,
        RemoveCopies,
        CreateAccount,
        CheckoutBook,
        ReturnBook,
        PrintCatalog,
        PrintAccounts,
    )
}


def encode_command(command: Command) -> Dict[str, Any]:
    """Return the {"name", "arguments"} document for a command."""
    return {"name": command.NAME, "arguments": command.model_dump(by_alias=True)}


def dumps_command(command: Command) -> str:
    """Encode a command as a single compact JSON line (without the newline)."""
    return json.dumps(encode_command(command), separators=(",", ":"), ensure_ascii=False)


def decode_command(doc: Union[str, bytes, Mapping[str, Any]]) -> Command:
    """Decode a JSON line or an already parsed document into a command.

    Raises UnknownCommandError for an unrecognised name and
    MalformedPayloadError for anything that does not have the expected shape.
    """
    if isinstance(doc, (str, bytes, bytearray)):
        try:
            doc = json.loads(doc)
        except ValueError as e:
            raise MalformedPayloadError(f"invalid command record, {e}") from e

    if not isinstance(doc, Mapping):
        raise MalformedPayloadError("command record must be a JSON object")

    name = doc.get("name")
    if not isinstance(name, str):
        raise MalformedPayloadError("command record is missing a name")

    command_type = COMMAND_TYPES.get(name)
    if command_type is None:
        raise UnknownCommandError(f"unknown command type, {name}")

    # Print commands carry no arguments, whatever the record holds.
    if not command_type.model_fields:
        return command_type()

    arguments = doc.get("arguments")
    if not isinstance(arguments, Mapping):
        raise MalformedPayloadError(f"{name} arguments must be a JSON object")

    try:
        return command_type.model_validate(dict(arguments))
    except ValidationError as e:
        raise MalformedPayloadError(f"invalid arguments for {name}, {e}") from e
