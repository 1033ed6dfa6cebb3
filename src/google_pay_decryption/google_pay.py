"""Google Pay (ECv1 / ECv2) token decryption."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional, Tuple, Union

from .cipher import decrypt_aes_ctr, verify_mac
from .encoding import decode_base64, normalize_attributes
from .keys import (
    compute_shared_secret,
    derive_google_pay_keys,
    load_ephemeral_public_key,
    load_private_key,
)
from .models import DecryptionConfig, VerificationKey
from .signature import verify_signature
from .types import (
    SIGNED_MESSAGE_FIELDS,
    DecodeStage,
    DecryptionError,
    GooglePayDecryptionError,
    TokenField,
    TokenFamily,
    ValidationError,
)
from .validation import require_fields, validate_google_pay_attributes

logger = logging.getLogger(__name__)


def parse_signed_message(signed_message: Any) -> Mapping:
    """
    Parse the signedMessage JSON and check its inner fields.

    Raises:
        ValidationError: If the JSON is invalid or a field is missing
    """
    try:
        message = json.loads(signed_message)
    except (json.JSONDecodeError, TypeError) as e:
        raise ValidationError(f"Invalid signedMessage JSON: {e}") from e

    if not isinstance(message, dict):
        raise ValidationError("Invalid signedMessage JSON: expected an object")

    require_fields(message, SIGNED_MESSAGE_FIELDS)
    return message


class GooglePayToken:
    """
    A Google Pay payment token (ECv1 or ECv2).

    Attributes are validated on construction; ``decrypt`` verifies the
    issuer signature before touching any key material.

    Example usage:
        ```python
        token = GooglePayToken(
            token_attrs,
            recipient_id="merchant:12345678901234567890",
            verification_keys=google_verification_keys,
        )
        payload = token.decrypt(private_key_pem)
        ```
    """

    family = TokenFamily.GOOGLE_PAY

    def __init__(
        self,
        token_attrs: Mapping,
        recipient_id: Optional[str] = None,
        verification_keys: Any = None,
        verify_mac: bool = False,
    ) -> None:
        self._attrs = normalize_attributes(token_attrs)
        validate_google_pay_attributes(self._attrs)
        self._config = DecryptionConfig.create(recipient_id, verification_keys, verify_mac)

        logger.debug("Constructed Google Pay token (protocol %s)", self.protocol_version)

    @property
    def attributes(self) -> Mapping:
        """Returns the normalized, read-only token attributes."""
        return self._attrs

    @property
    def config(self) -> DecryptionConfig:
        return self._config

    @property
    def recipient_id(self) -> str:
        return self._config.recipient_id

    @property
    def verification_keys(self) -> Tuple[VerificationKey, ...]:
        return self._config.verification_keys

    @property
    def protocol_version(self) -> str:
        return self._attrs[TokenField.PROTOCOL_VERSION.value]

    def decrypt(self, private_key_pem: Union[str, bytes]) -> bytes:
        """
        Verify and decrypt the token.

        Args:
            private_key_pem: Recipient's EC private key in PEM form

        Returns:
            Decrypted payment payload (JSON bytes)

        Raises:
            SignatureError: If the signature does not verify
            ValidationError: If signedMessage or its fields are malformed
            DecryptionError: If the private key or cipher fails
        """
        stage = DecodeStage.CONSTRUCTED
        signed_message = self._attrs[TokenField.SIGNED_MESSAGE.value]

        try:
            verify_signature(
                signature=self._attrs[TokenField.SIGNATURE.value],
                signed_message=signed_message,
                protocol_version=self.protocol_version,
                recipient_id=self.recipient_id,
                verification_keys=self.verification_keys,
            )
            stage = DecodeStage.SIGNATURE_VERIFIED
            logger.debug("Google Pay signature verified")

            message = parse_signed_message(signed_message)
            encrypted_message = decode_base64(
                message[TokenField.ENCRYPTED_MESSAGE.value], TokenField.ENCRYPTED_MESSAGE.value
            )
            ephemeral_public_key = decode_base64(
                message[TokenField.EPHEMERAL_PUBLIC_KEY.value], TokenField.EPHEMERAL_PUBLIC_KEY.value
            )
            tag = decode_base64(message[TokenField.TAG.value], TokenField.TAG.value)

            private_key = load_private_key(private_key_pem)
            ephemeral_key = load_ephemeral_public_key(ephemeral_public_key)
            shared_secret = compute_shared_secret(private_key, ephemeral_key)
            stage = DecodeStage.KEY_AGREEMENT_DONE

            derived_keys = derive_google_pay_keys(shared_secret, ephemeral_public_key)
            stage = DecodeStage.KEYS_DERIVED

            if self._config.verify_mac:
                verify_mac(derived_keys.mac_key, encrypted_message, tag)

            plaintext = decrypt_aes_ctr(encrypted_message, derived_keys.encryption_key)
            logger.debug("Google Pay token decrypted")
            return plaintext
        except GooglePayDecryptionError as e:
            e.stage = stage
            raise
        except Exception as e:
            error = DecryptionError(f"Failed to decrypt Google Pay token: {e}")
            error.stage = stage
            raise error from e
