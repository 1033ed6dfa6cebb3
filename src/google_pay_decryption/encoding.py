"""Base64 helpers and token attribute normalization."""

import base64
import binascii
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from .types import ValidationError


def decode_base64(data: Any, field: str = "value") -> bytes:
    """
    Strictly decode standard base64.

    Args:
        data: Base64 text (str or bytes)
        field: Name used in the error message

    Returns:
        Decoded bytes

    Raises:
        ValidationError: If data is not a string or not valid base64
    """
    if isinstance(data, str):
        try:
            data = data.encode("ascii")
        except UnicodeEncodeError as e:
            raise ValidationError(f"Invalid base64 encoding for {field}: {e}") from e

    if not isinstance(data, (bytes, bytearray)):
        raise ValidationError(
            f"Invalid base64 encoding for {field}: expected string, got {type(data).__name__}"
        )

    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 encoding for {field}: {e}") from e


def encode_base64(data: bytes) -> str:
    """Encode bytes as standard base64 without line breaks."""
    return base64.b64encode(data).decode("ascii")


def canonical_key(key: Any) -> Any:
    """Map a symbolic key (Enum member) to its plain string name."""
    if isinstance(key, Enum) and isinstance(key.value, str):
        return key.value
    return key


def normalize_attributes(token_attrs: Any) -> Mapping:
    """
    Produce a read-only attribute mapping keyed by plain field names.

    Keys may be strings or ``TokenField`` members; lookups are
    case-sensitive. Unrecognized keys are kept as-is.

    Args:
        token_attrs: Mapping received from the wallet client

    Returns:
        Immutable mapping of field name to value

    Raises:
        ValidationError: If token_attrs is not a mapping
    """
    if not isinstance(token_attrs, Mapping):
        raise ValidationError(
            f"Token attributes must be a mapping, got {type(token_attrs).__name__}"
        )

    return MappingProxyType(
        {canonical_key(key): value for key, value in token_attrs.items()}
    )
