"""Symmetric decryption for Google Pay (AES-CTR) and Android Pay (AES-GCM) tokens."""

import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.hashes import SHA256

from .security import secure_compare
from .types import (
    CTR_IV,
    GCM_NONCE,
    SYMMETRIC_KEY_SIZE,
    DecryptionError,
)

logger = logging.getLogger(__name__)


def _check_key(key: bytes) -> None:
    if len(key) != SYMMETRIC_KEY_SIZE:
        raise DecryptionError(
            f"Key must be {SYMMETRIC_KEY_SIZE} bytes for AES-256, got {len(key)}"
        )


def decrypt_aes_ctr(ciphertext: bytes, key: bytes) -> bytes:
    """
    Decrypt with AES-256-CTR and a zero 16-byte IV.

    Args:
        ciphertext: Encrypted message
        key: 32-byte encryption key

    Returns:
        Plaintext bytes

    Raises:
        DecryptionError: If the key is invalid or the cipher fails
    """
    _check_key(key)

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CTR(CTR_IV)).decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()
    except (ValueError, TypeError) as e:
        raise DecryptionError(f"Message decryption failed: {e}") from e


def decrypt_aes_gcm(ciphertext: bytes, key: bytes, tag: bytes) -> bytes:
    """
    Decrypt with AES-256-GCM, a zero 12-byte nonce and empty associated data.

    Args:
        ciphertext: Encrypted message without the tag
        key: 32-byte symmetric key
        tag: Detached authentication tag

    Returns:
        Plaintext bytes

    Raises:
        DecryptionError: If the tag does not match or the cipher fails
    """
    _check_key(key)

    try:
        decryptor = Cipher(algorithms.AES(key), modes.GCM(GCM_NONCE, tag)).decryptor()
        decryptor.authenticate_additional_data(b"")
        return decryptor.update(ciphertext) + decryptor.finalize()
    except InvalidTag as e:
        logger.warning("AES-GCM authentication tag mismatch")
        raise DecryptionError("AES-GCM decryption failed: authentication tag mismatch") from e
    except (ValueError, TypeError) as e:
        raise DecryptionError(f"AES-GCM decryption failed: {e}") from e


def verify_mac(mac_key: bytes, ciphertext: bytes, tag: bytes) -> None:
    """
    Check that tag == HMAC-SHA256(mac_key, ciphertext).

    Raises:
        DecryptionError: If the tag does not match
    """
    h = hmac.HMAC(mac_key, SHA256())
    h.update(ciphertext)

    if not secure_compare(h.finalize(), tag):
        logger.warning("Message MAC verification failed")
        raise DecryptionError("MAC verification failed")
