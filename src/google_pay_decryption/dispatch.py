"""Token family classification and one-shot decrypt helpers."""

from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union, runtime_checkable

from .android_pay import AndroidPayToken
from .encoding import normalize_attributes
from .google_pay import GooglePayToken
from .models import DecryptResult
from .types import GooglePayDecryptionError, TokenField, TokenFamily


@runtime_checkable
class DecryptableToken(Protocol):
    """A payment token validated at construction that decrypts to bytes."""

    family: TokenFamily

    @property
    def attributes(self) -> Mapping: ...

    def decrypt(self, private_key_pem: Union[str, bytes]) -> bytes: ...


def classify_token(token_attrs: Mapping) -> TokenFamily:
    """
    Decide the token family.

    Tokens carrying a protocolVersion field are Google Pay; everything else
    is treated as Android Pay.
    """
    attrs = normalize_attributes(token_attrs)
    if TokenField.PROTOCOL_VERSION.value in attrs:
        return TokenFamily.GOOGLE_PAY
    return TokenFamily.ANDROID_PAY


def build_token(
    token_attrs: Mapping,
    recipient_id: Optional[str] = None,
    verification_keys: Any = None,
    verify_mac: bool = False,
) -> DecryptableToken:
    """
    Build a validated token from wallet attributes.

    Args:
        token_attrs: Token attributes, keyed by strings or TokenField members
        recipient_id: Merchant or gateway id (required for Google Pay)
        verification_keys: Issuer verification keys (required for Google Pay)
        verify_mac: Also check the inner HMAC tag of Google Pay tokens

    Returns:
        GooglePayToken or AndroidPayToken

    Raises:
        ValidationError: If a required field is missing
        UnsupportedProtocolError: If the protocol version is not supported
        ConfigurationError: If Google Pay options are missing
    """
    attrs = normalize_attributes(token_attrs)

    if classify_token(attrs) is TokenFamily.GOOGLE_PAY:
        return GooglePayToken(
            attrs,
            recipient_id=recipient_id,
            verification_keys=verification_keys,
            verify_mac=verify_mac,
        )
    return AndroidPayToken(attrs)


def decrypt(
    token_attrs: Mapping,
    private_key_pem: Union[str, bytes],
    **options: Any,
) -> bytes:
    """
    Build a token and decrypt it.

    Args:
        token_attrs: Token attributes
        private_key_pem: Recipient's EC private key in PEM form
        **options: recipient_id, verification_keys, verify_mac

    Returns:
        Decrypted payment payload (JSON bytes)
    """
    token = build_token(token_attrs, **options)
    return token.decrypt(private_key_pem)


def try_decrypt(
    token_attrs: Mapping,
    private_key_pem: Union[str, bytes],
    **options: Any,
) -> DecryptResult:
    """Like ``decrypt``, but returns a DecryptResult instead of raising."""
    try:
        return DecryptResult(plaintext=decrypt(token_attrs, private_key_pem, **options))
    except GooglePayDecryptionError as e:
        return DecryptResult(error=e)
