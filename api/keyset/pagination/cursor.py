"""Cursor encoding for keyset pagination.

A cursor wraps a single sort-key value. The value is stored together with a
type tag so that integers, timestamps, UUIDs and decimals come back as the
same Python type they were encoded from.
"""

import base64
import binascii
import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Literal
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError

from .exceptions import InvalidArgumentError, InvalidCursorError


CursorType = Literal["str", "int", "float", "bool", "decimal", "datetime", "date", "uuid"]


class CursorData(BaseModel):
    """Data structure carried inside a cursor token."""

    type: CursorType = Field(description="Type tag of the sort-key value")
    value: str = Field(description="String form of the sort-key value")

    model_config = {"extra": "forbid"}


def _parse_bool(raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValueError(f"invalid boolean literal {raw!r}")


_PARSERS: Dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": _parse_bool,
    "decimal": Decimal,
    "datetime": datetime.fromisoformat,
    "date": date.fromisoformat,
    "uuid": UUID,
}


def _to_cursor_data(value: Any) -> CursorData:
    # bool before int and datetime before date: both are subclasses
    if isinstance(value, bool):
        return CursorData(type="bool", value="true" if value else "false")
    if isinstance(value, int):
        return CursorData(type="int", value=str(value))
    if isinstance(value, float):
        return CursorData(type="float", value=repr(value))
    if isinstance(value, Decimal):
        return CursorData(type="decimal", value=str(value))
    if isinstance(value, datetime):
        return CursorData(type="datetime", value=value.isoformat())
    if isinstance(value, date):
        return CursorData(type="date", value=value.isoformat())
    if isinstance(value, UUID):
        return CursorData(type="uuid", value=str(value))
    if isinstance(value, str):
        return CursorData(type="str", value=value)
    raise InvalidArgumentError(
        f"Cannot encode cursor value of type {type(value).__name__}"
    )


def encode_cursor(value: Any) -> str:
    """Encode a sort-key value as an opaque cursor token.

    Args:
        value: The sort-key value of a record

    Returns:
        URL-safe base64 cursor string without padding

    Raises:
        InvalidArgumentError: If the value is None or of an unsupported type
    """
    if value is None:
        raise InvalidArgumentError("Cannot encode a null sort-key value as a cursor")

    cursor_json = _to_cursor_data(value).model_dump_json()
    encoded = base64.urlsafe_b64encode(cursor_json.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def decode_cursor(cursor: str) -> Any:
    """Decode a cursor token back into its sort-key value.

    Args:
        cursor: Cursor string produced by encode_cursor

    Returns:
        The sort-key value, of the type it was encoded from

    Raises:
        InvalidCursorError: If the cursor is empty or malformed
    """
    if not cursor:
        raise InvalidCursorError("Empty cursor provided")

    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        cursor_bytes = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        cursor_dict = json.loads(cursor_bytes.decode("utf-8"))
        cursor_data = CursorData.model_validate(cursor_dict)
        return _PARSERS[cursor_data.type](cursor_data.value)
    except (ValueError, TypeError, binascii.Error, ValidationError, InvalidOperation) as e:
        raise InvalidCursorError(f"Invalid cursor format: {e}", original_error=e) from e
