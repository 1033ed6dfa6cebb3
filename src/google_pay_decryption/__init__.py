"""
Google Pay Decryption - payment token verification and decryption

Python implementation of Google Pay (ECv1/ECv2) and Android Pay token
decryption using ECDSA P-256, ECDH, HKDF-SHA256 and AES-256.
"""

from .dispatch import (
    DecryptableToken,
    classify_token,
    build_token,
    decrypt,
    try_decrypt,
)
from .google_pay import GooglePayToken, parse_signed_message
from .android_pay import AndroidPayToken
from .models import (
    VerificationKey,
    DecryptionConfig,
    DerivedKeys,
    DecryptResult,
    load_verification_keys,
)
from .security import hkdf_derive, secure_compare
from .signature import (
    build_signed_data,
    verify_signature,
    sign_signed_data,
)
from .types import (
    TokenField,
    TokenFamily,
    DecodeStage,
    SUPPORTED_PROTOCOLS,
    GooglePayDecryptionError,
    ValidationError,
    SignatureError,
    UnsupportedProtocolError,
    ConfigurationError,
    DecryptionError,
)

__version__ = "0.1.0"

__all__ = [
    # Dispatch
    "DecryptableToken",
    "classify_token",
    "build_token",
    "decrypt",
    "try_decrypt",
    # Tokens
    "GooglePayToken",
    "AndroidPayToken",
    "parse_signed_message",
    # Models
    "VerificationKey",
    "DecryptionConfig",
    "DerivedKeys",
    "DecryptResult",
    "load_verification_keys",
    # Security
    "hkdf_derive",
    "secure_compare",
    # Signature
    "build_signed_data",
    "verify_signature",
    "sign_signed_data",
    # Types
    "TokenField",
    "TokenFamily",
    "DecodeStage",
    "SUPPORTED_PROTOCOLS",
    # Errors
    "GooglePayDecryptionError",
    "ValidationError",
    "SignatureError",
    "UnsupportedProtocolError",
    "ConfigurationError",
    "DecryptionError",
]
