"""Key derivation and timing-safe comparison primitives."""

from typing import Union

from cryptography.hazmat.primitives import constant_time
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .types import HKDF_SALT


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def secure_compare(a: Union[str, bytes], b: Union[str, bytes]) -> bool:
    """
    Compare two values in constant time.

    Args:
        a: First value
        b: Second value

    Returns:
        True only if both values are byte-identical and of equal length
    """
    a_bytes = _to_bytes(a)
    b_bytes = _to_bytes(b)

    if len(a_bytes) != len(b_bytes):
        return False

    return constant_time.bytes_eq(a_bytes, b_bytes)


def hkdf_derive(
    secret: Union[str, bytes],
    info: Union[str, bytes],
    length: int,
) -> bytes:
    """
    Derive key material with HKDF-SHA256.

    The extract step is keyed with a 32-byte all-zero salt, as the token
    format requires. The expand step produces T(1) || T(2) || ... truncated
    to ``length`` bytes.

    Args:
        secret: Input key material (e.g., an ECDH shared secret)
        info: Context information
        length: Number of bytes to produce

    Returns:
        ``length`` bytes of derived key material
    """
    if length <= 0:
        raise ValueError(f"Length must be positive, got {length}")

    hkdf = HKDF(
        algorithm=SHA256(),
        length=length,
        salt=HKDF_SALT,
        info=_to_bytes(info),
    )
    return hkdf.derive(_to_bytes(secret))
