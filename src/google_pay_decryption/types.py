"""Type definitions for Google Pay / Android Pay token decryption."""

from enum import Enum
from typing import Optional


class TokenField(str, Enum):
    """Recognized token attribute names.

    Members compare and hash equal to their string values, so a mapping may
    be keyed by either ``TokenField.TAG`` or ``"tag"``.
    """
    SIGNATURE = "signature"
    PROTOCOL_VERSION = "protocolVersion"
    SIGNED_MESSAGE = "signedMessage"
    ENCRYPTED_MESSAGE = "encryptedMessage"
    EPHEMERAL_PUBLIC_KEY = "ephemeralPublicKey"
    TAG = "tag"


class TokenFamily(Enum):
    """Token format, decided by the presence of protocolVersion."""
    GOOGLE_PAY = "google_pay"
    ANDROID_PAY = "android_pay"


class DecodeStage(Enum):
    """Pipeline stages of a single decrypt call, in order."""
    CONSTRUCTED = "constructed"
    SIGNATURE_VERIFIED = "signature_verified"
    KEY_AGREEMENT_DONE = "key_agreement_done"
    KEYS_DERIVED = "keys_derived"
    DECRYPTED = "decrypted"


# Protocol constants
SENDER_ID = "Google"
SUPPORTED_PROTOCOLS = ("ECv1", "ECv2")
ANDROID_PAY_INFO = b"Android"

GOOGLE_PAY_REQUIRED_FIELDS = (
    TokenField.SIGNATURE,
    TokenField.PROTOCOL_VERSION,
    TokenField.SIGNED_MESSAGE,
)
ANDROID_PAY_REQUIRED_FIELDS = (
    TokenField.ENCRYPTED_MESSAGE,
    TokenField.EPHEMERAL_PUBLIC_KEY,
    TokenField.TAG,
)
SIGNED_MESSAGE_FIELDS = ANDROID_PAY_REQUIRED_FIELDS

# Key and cipher sizes
SYMMETRIC_KEY_SIZE = 32
GOOGLE_PAY_DERIVED_SIZE = 64  # 32-byte encryption key + 32-byte MAC key
HKDF_SALT = bytes(32)
CTR_IV = bytes(16)
GCM_NONCE = bytes(12)


# Exception types
class GooglePayDecryptionError(Exception):
    """Base exception for token decryption errors."""

    stage: Optional[DecodeStage] = None
    """Last pipeline stage completed before the failure, when raised from decrypt."""


class ValidationError(GooglePayDecryptionError):
    """Missing or malformed token field."""
    pass


class SignatureError(GooglePayDecryptionError):
    """No matching verification key, or signature verification failed."""
    pass


class UnsupportedProtocolError(GooglePayDecryptionError):
    """Protocol version is not supported."""
    pass


class ConfigurationError(GooglePayDecryptionError):
    """Recipient id or verification keys missing."""
    pass


class DecryptionError(GooglePayDecryptionError):
    """Private key, cipher, or other downstream cryptographic failure."""
    pass
