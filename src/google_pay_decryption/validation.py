"""Eager checks run when a token decoder is constructed."""

from collections.abc import Mapping, Sized
from typing import Any, Iterable

from .types import (
    ANDROID_PAY_REQUIRED_FIELDS,
    GOOGLE_PAY_REQUIRED_FIELDS,
    SUPPORTED_PROTOCOLS,
    TokenField,
    ConfigurationError,
    UnsupportedProtocolError,
    ValidationError,
)


def require_fields(attrs: Mapping, fields: Iterable[TokenField]) -> None:
    """Raise ValidationError naming the first field that is absent or None."""
    for field in fields:
        if attrs.get(field.value) is None:
            raise ValidationError(f"Missing required field: {field.value}")


def validate_protocol_version(protocol_version: Any) -> None:
    if protocol_version not in SUPPORTED_PROTOCOLS:
        raise UnsupportedProtocolError(
            f"Unsupported protocol version: {protocol_version}. "
            f"Supported versions: {', '.join(SUPPORTED_PROTOCOLS)}"
        )


def validate_android_pay_attributes(attrs: Mapping) -> None:
    """
    Validate flat Android Pay attributes.

    Raises:
        ValidationError: If encryptedMessage, ephemeralPublicKey or tag is missing
    """
    require_fields(attrs, ANDROID_PAY_REQUIRED_FIELDS)


def validate_google_pay_attributes(attrs: Mapping) -> None:
    """
    Validate Google Pay attributes.

    Raises:
        ValidationError: If signature, protocolVersion or signedMessage is missing
        UnsupportedProtocolError: If protocolVersion is not ECv1 or ECv2
    """
    require_fields(attrs, GOOGLE_PAY_REQUIRED_FIELDS)
    validate_protocol_version(attrs[TokenField.PROTOCOL_VERSION.value])


def validate_decryption_config(recipient_id: Any, verification_keys: Any) -> None:
    """
    Check the recipient id and verification keys supplied for Google Pay.

    Raises:
        ConfigurationError: If either is missing or empty
    """
    if not isinstance(recipient_id, str) or not recipient_id:
        raise ConfigurationError("recipient_id is required for Google Pay tokens")

    if verification_keys is None or (
        isinstance(verification_keys, Sized) and len(verification_keys) == 0
    ):
        raise ConfigurationError("verification_keys are required for Google Pay tokens")
