"""Key parsing, ECDH key agreement and key derivation."""

import base64
import binascii
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .encoding import encode_base64
from .models import DerivedKeys
from .security import hkdf_derive
from .types import (
    ANDROID_PAY_INFO,
    GOOGLE_PAY_DERIVED_SIZE,
    SYMMETRIC_KEY_SIZE,
    DecryptionError,
    ValidationError,
)

CURVE = ec.SECP256R1()
UNCOMPRESSED_POINT_SIZE = 65
UNCOMPRESSED_POINT_PREFIX = 0x04


def load_private_key(private_key_pem: Union[str, bytes]) -> ec.EllipticCurvePrivateKey:
    """
    Load the recipient's EC private key.

    PEM text is parsed directly. Text without a PEM header is treated as
    base64-encoded PKCS#8 DER.

    Args:
        private_key_pem: Private key in PEM (or bare base64 DER) form

    Returns:
        The EC private key

    Raises:
        DecryptionError: If the key cannot be parsed or is not an EC key
    """
    try:
        if isinstance(private_key_pem, str):
            data = private_key_pem.encode("utf-8")
        elif isinstance(private_key_pem, (bytes, bytearray)):
            data = bytes(private_key_pem)
        else:
            raise TypeError(f"expected str or bytes, got {type(private_key_pem).__name__}")

        if b"-----BEGIN" in data:
            key = serialization.load_pem_private_key(data, password=None)
        else:
            der = base64.b64decode(b"".join(data.split()), validate=True)
            key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm, binascii.Error) as e:
        raise DecryptionError(f"Invalid private key: {e}") from e

    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise DecryptionError("Invalid private key: not an elliptic-curve key")

    return key


def load_ephemeral_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Parse an uncompressed P-256 point (0x04 || X || Y).

    Raises:
        ValidationError: If the encoding is wrong or the point is not on the curve
    """
    if len(data) != UNCOMPRESSED_POINT_SIZE or data[0] != UNCOMPRESSED_POINT_PREFIX:
        raise ValidationError(
            f"Invalid ephemeral public key: expected {UNCOMPRESSED_POINT_SIZE}-byte "
            f"uncompressed point, got {len(data)} bytes"
        )

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, data)
    except ValueError as e:
        raise ValidationError(f"Invalid ephemeral public key: {e}") from e


def compute_shared_secret(
    private_key: ec.EllipticCurvePrivateKey,
    public_key: ec.EllipticCurvePublicKey,
) -> bytes:
    """
    Perform ECDH key agreement.

    Raises:
        ValidationError: If the keys are on different curves
    """
    try:
        return private_key.exchange(ec.ECDH(), public_key)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ValidationError(f"Incompatible ephemeral public key: {e}") from e


def public_key_to_bytes(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Convert an EC public key to its uncompressed point encoding."""
    return public_key.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)


def derive_google_pay_keys(shared_secret: bytes, ephemeral_public_key: bytes) -> DerivedKeys:
    """
    Derive the Google Pay encryption and MAC keys.

    The HKDF info is the base64 text of the ephemeral public key, not the
    raw point bytes.
    """
    info = encode_base64(ephemeral_public_key).encode("ascii")
    derived = hkdf_derive(shared_secret, info, GOOGLE_PAY_DERIVED_SIZE)

    return DerivedKeys(
        encryption_key=derived[:SYMMETRIC_KEY_SIZE],
        mac_key=derived[SYMMETRIC_KEY_SIZE:],
    )


def derive_android_pay_key(shared_secret: bytes) -> bytes:
    """Derive the Android Pay AES-GCM key."""
    return hkdf_derive(shared_secret, ANDROID_PAY_INFO, SYMMETRIC_KEY_SIZE)
