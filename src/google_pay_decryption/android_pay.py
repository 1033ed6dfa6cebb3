"""Android Pay token decryption."""

import logging
from collections.abc import Mapping
from typing import Union

from .cipher import decrypt_aes_gcm
from .encoding import decode_base64, normalize_attributes
from .keys import (
    compute_shared_secret,
    derive_android_pay_key,
    load_ephemeral_public_key,
    load_private_key,
)
from .types import (
    DecodeStage,
    DecryptionError,
    GooglePayDecryptionError,
    TokenField,
    TokenFamily,
)
from .validation import validate_android_pay_attributes

logger = logging.getLogger(__name__)


class AndroidPayToken:
    """An Android Pay payment token. Authenticity rests on the AES-GCM tag."""

    family = TokenFamily.ANDROID_PAY

    def __init__(self, token_attrs: Mapping) -> None:
        self._attrs = normalize_attributes(token_attrs)
        validate_android_pay_attributes(self._attrs)

        logger.debug("Constructed Android Pay token")

    @property
    def attributes(self) -> Mapping:
        """Returns the normalized, read-only token attributes."""
        return self._attrs

    def decrypt(self, private_key_pem: Union[str, bytes]) -> bytes:
        """
        Decrypt the token.

        Args:
            private_key_pem: Recipient's EC private key in PEM form

        Returns:
            Decrypted payment payload (JSON bytes)

        Raises:
            ValidationError: If a field is not valid base64 or the ephemeral key is malformed
            DecryptionError: If the private key is invalid or the tag does not match
        """
        stage = DecodeStage.CONSTRUCTED

        try:
            encrypted_message = decode_base64(
                self._attrs[TokenField.ENCRYPTED_MESSAGE.value], TokenField.ENCRYPTED_MESSAGE.value
            )
            ephemeral_public_key = decode_base64(
                self._attrs[TokenField.EPHEMERAL_PUBLIC_KEY.value],
                TokenField.EPHEMERAL_PUBLIC_KEY.value,
            )
            tag = decode_base64(self._attrs[TokenField.TAG.value], TokenField.TAG.value)

            private_key = load_private_key(private_key_pem)
            ephemeral_key = load_ephemeral_public_key(ephemeral_public_key)
            shared_secret = compute_shared_secret(private_key, ephemeral_key)
            stage = DecodeStage.KEY_AGREEMENT_DONE

            symmetric_key = derive_android_pay_key(shared_secret)
            stage = DecodeStage.KEYS_DERIVED

            plaintext = decrypt_aes_gcm(encrypted_message, symmetric_key, tag)
            logger.debug("Android Pay token decrypted")
            return plaintext
        except GooglePayDecryptionError as e:
            e.stage = stage
            raise
        except Exception as e:
            error = DecryptionError(f"Failed to decrypt Android Pay token: {e}")
            error.stage = stage
            raise error from e
