"""Models for verification keys, decryption configuration and results."""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .encoding import canonical_key
from .types import ConfigurationError, DecodeStage, GooglePayDecryptionError
from .validation import validate_decryption_config


@dataclass(frozen=True)
class VerificationKey:
    """A signing public key published by the token issuer."""
    protocol_version: str
    key_value: str  # base64 DER SubjectPublicKeyInfo

    @classmethod
    def from_mapping(cls, entry: Mapping) -> "VerificationKey":
        """Creates a key from a ``{protocolVersion, keyValue}`` mapping."""
        normalized = {canonical_key(k): v for k, v in entry.items()}
        protocol_version = normalized.get("protocolVersion")
        key_value = normalized.get("keyValue")

        if not isinstance(protocol_version, str) or not isinstance(key_value, str):
            raise ConfigurationError(
                "Verification key entries require string protocolVersion and keyValue"
            )

        return cls(protocol_version=protocol_version, key_value=key_value)


def load_verification_keys(value: Any) -> Tuple[VerificationKey, ...]:
    """
    Normalize a verification key set.

    Accepts a single VerificationKey or mapping entry, a list of them, a
    ``{"keys": [...]}`` document as published by the issuer, or the JSON
    text of any of these. Order is preserved.

    Args:
        value: Verification keys in any supported shape

    Returns:
        Tuple of VerificationKey

    Raises:
        ConfigurationError: If the value cannot be interpreted
    """
    if value is None:
        return ()

    if isinstance(value, VerificationKey):
        return (value,)

    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Invalid verification keys JSON: {e}") from e
        return load_verification_keys(value)

    if isinstance(value, Mapping):
        normalized = {canonical_key(k): v for k, v in value.items()}
        if "keys" in normalized:
            return load_verification_keys(normalized["keys"])
        return (VerificationKey.from_mapping(value),)

    if isinstance(value, (list, tuple)):
        keys = []
        for entry in value:
            if isinstance(entry, VerificationKey):
                keys.append(entry)
            elif isinstance(entry, Mapping):
                keys.append(VerificationKey.from_mapping(entry))
            else:
                raise ConfigurationError(
                    f"Unsupported verification key entry: {type(entry).__name__}"
                )
        return tuple(keys)

    raise ConfigurationError(f"Unsupported verification keys: {type(value).__name__}")


@dataclass(frozen=True)
class DecryptionConfig:
    """Trust configuration for Google Pay tokens."""

    recipient_id: str
    """Merchant or gateway id the token was addressed to, e.g. ``merchant:12345``."""

    verification_keys: Tuple[VerificationKey, ...]
    """Issuer signing keys, matched by protocol version."""

    verify_mac: bool = False
    """Also check the inner HMAC tag. Off by default; the envelope signature is the trust root."""

    @classmethod
    def create(
        cls,
        recipient_id: Any,
        verification_keys: Any,
        verify_mac: bool = False,
    ) -> "DecryptionConfig":
        """
        Validate and build a configuration.

        Raises:
            ConfigurationError: If recipient_id or verification_keys are missing
        """
        validate_decryption_config(recipient_id, verification_keys)
        keys = load_verification_keys(verification_keys)
        validate_decryption_config(recipient_id, keys)
        return cls(recipient_id=recipient_id, verification_keys=keys, verify_mac=verify_mac)


@dataclass(frozen=True)
class DerivedKeys:
    """Google Pay key material split from a 64-byte HKDF output."""
    encryption_key: bytes  # 32 bytes
    mac_key: bytes  # 32 bytes


@dataclass(frozen=True)
class DecryptResult:
    """Outcome of a decrypt attempt: plaintext or one typed error."""
    plaintext: Optional[bytes] = None
    error: Optional[GooglePayDecryptionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stage(self) -> Optional[DecodeStage]:
        """DECRYPTED on success, otherwise the last stage completed before the failure."""
        if self.error is None:
            return DecodeStage.DECRYPTED
        return self.error.stage

    def unwrap(self) -> bytes:
        """Returns the plaintext, or raises the carried error."""
        if self.error is not None:
            raise self.error
        return self.plaintext
