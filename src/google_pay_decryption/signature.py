"""
Signature verification for Google Pay tokens.

The issuer signs a length-prefixed envelope binding the sender id, the
recipient id and the protocol version to the signed message. A token is
only trusted after that signature verifies against the issuer key
published for the token's protocol version.
"""

import logging
import struct
from typing import Iterable, Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.serialization import load_der_public_key

from .encoding import decode_base64
from .models import VerificationKey
from .types import SENDER_ID, SignatureError, ValidationError

logger = logging.getLogger(__name__)


def _length_prefixed(value: bytes) -> bytes:
    # value || u32le(len(value))
    return value + struct.pack("<I", len(value))


def build_signed_data(recipient_id: str, protocol_version: str, signed_message: str) -> bytes:
    """
    Build the byte string the issuer signed.

    Format:
        "Google" || u32le(6)
        || recipient_id || u32le(len(recipient_id))
        || protocol_version || u32le(len(protocol_version))
        || signed_message

    Args:
        recipient_id: Merchant or gateway id
        protocol_version: Token protocol version
        signed_message: The signedMessage text exactly as received

    Returns:
        Signed data bytes
    """
    return (
        _length_prefixed(SENDER_ID.encode("utf-8"))
        + _length_prefixed(recipient_id.encode("utf-8"))
        + _length_prefixed(protocol_version.encode("utf-8"))
        + signed_message.encode("utf-8")
    )


def find_verification_key(
    verification_keys: Iterable[VerificationKey],
    protocol_version: str,
) -> Optional[VerificationKey]:
    """Returns the first key whose protocol version matches, or None."""
    for key in verification_keys:
        if key.protocol_version == protocol_version:
            return key
    return None


def load_verification_key(verification_key: VerificationKey) -> ec.EllipticCurvePublicKey:
    """
    Parse a base64 DER verification key.

    Raises:
        SignatureError: If the key is not a valid P-256 public key
    """
    try:
        key_bytes = decode_base64(verification_key.key_value, "keyValue")
        public_key = load_der_public_key(key_bytes)
    except (ValidationError, ValueError, UnsupportedAlgorithm) as e:
        raise SignatureError(f"Invalid verification key: {e}") from e

    if not isinstance(public_key, ec.EllipticCurvePublicKey) or not isinstance(
        public_key.curve, ec.SECP256R1
    ):
        raise SignatureError("Invalid verification key: expected a P-256 public key")

    return public_key


def verify_signature(
    signature: str,
    signed_message: str,
    protocol_version: str,
    recipient_id: str,
    verification_keys: Iterable[VerificationKey],
) -> None:
    """
    Verify a Google Pay token signature.

    Args:
        signature: Base64 DER ECDSA signature from the token
        signed_message: The token's signedMessage text
        protocol_version: The token's protocol version
        recipient_id: Our recipient id
        verification_keys: Issuer verification keys

    Raises:
        SignatureError: If no key matches or the signature does not verify
    """
    verification_key = find_verification_key(verification_keys, protocol_version)
    if verification_key is None:
        raise SignatureError(
            f"No verification key found for protocol version: {protocol_version}"
        )

    public_key = load_verification_key(verification_key)

    try:
        signature_bytes = decode_base64(signature, "signature")
        signed_data = build_signed_data(recipient_id, protocol_version, signed_message)
        public_key.verify(signature_bytes, signed_data, ec.ECDSA(SHA256()))
    except InvalidSignature as e:
        logger.warning("Signature verification failed for protocol %s", protocol_version)
        raise SignatureError("Signature verification failed") from e
    except (ValidationError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Malformed signature input for protocol %s", protocol_version)
        raise SignatureError(f"Signature verification error: {e}") from e


def sign_signed_data(
    private_key: ec.EllipticCurvePrivateKey,
    recipient_id: str,
    protocol_version: str,
    signed_message: str,
) -> bytes:
    """
    Sign a message the way the issuer does.

    Args:
        private_key: P-256 signing key
        recipient_id: Recipient the token is addressed to
        protocol_version: Token protocol version
        signed_message: signedMessage text

    Returns:
        DER-encoded ECDSA signature
    """
    signed_data = build_signed_data(recipient_id, protocol_version, signed_message)
    return private_key.sign(signed_data, ec.ECDSA(SHA256()))
