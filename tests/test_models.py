"""Tests for verification key sets and decryption configuration."""

import json

import pytest

from google_pay_decryption.models import (
    DecryptionConfig,
    VerificationKey,
    load_verification_keys,
)
from google_pay_decryption.types import ConfigurationError, TokenField

ECV1_ENTRY = {"protocolVersion": "ECv1", "keyValue": "a2V5MQ=="}
ECV2_ENTRY = {"protocolVersion": "ECv2", "keyValue": "a2V5Mg==", "keyExpiration": "2154841200000"}


class TestLoadVerificationKeys:
    """Test the accepted key set shapes."""

    def test_single_entry(self) -> None:
        """A single mapping is a one-element set."""
        assert load_verification_keys(ECV1_ENTRY) == (VerificationKey("ECv1", "a2V5MQ=="),)

    def test_list_preserves_order(self) -> None:
        """Lists keep their order."""
        keys = load_verification_keys([ECV2_ENTRY, ECV1_ENTRY])
        assert [k.protocol_version for k in keys] == ["ECv2", "ECv1"]

    def test_published_document(self) -> None:
        """The issuer's {"keys": [...]} document is accepted."""
        keys = load_verification_keys({"keys": [ECV1_ENTRY, ECV2_ENTRY]})
        assert len(keys) == 2

    def test_json_text(self) -> None:
        """JSON text of the published document is accepted."""
        keys = load_verification_keys(json.dumps({"keys": [ECV1_ENTRY]}))
        assert keys == (VerificationKey("ECv1", "a2V5MQ=="),)

    def test_verification_key_instances(self) -> None:
        """VerificationKey objects pass through."""
        key = VerificationKey("ECv1", "a2V5MQ==")
        assert load_verification_keys(key) == (key,)
        assert load_verification_keys([key]) == (key,)

    def test_symbolic_keys(self) -> None:
        """Entries may use TokenField keys."""
        entry = {TokenField.PROTOCOL_VERSION: "ECv1", "keyValue": "a2V5MQ=="}
        assert load_verification_keys([entry])[0].protocol_version == "ECv1"

    def test_none(self) -> None:
        """None is an empty set."""
        assert load_verification_keys(None) == ()

    def test_malformed_entry(self) -> None:
        """Entries without keyValue are rejected."""
        with pytest.raises(ConfigurationError, match="keyValue"):
            load_verification_keys([{"protocolVersion": "ECv1"}])

    def test_invalid_json(self) -> None:
        """Invalid JSON text is a ConfigurationError."""
        with pytest.raises(ConfigurationError, match="JSON"):
            load_verification_keys("{not json")

    def test_unsupported_type(self) -> None:
        """Other types are rejected."""
        with pytest.raises(ConfigurationError):
            load_verification_keys(42)


class TestDecryptionConfig:
    """Test configuration validation."""

    def test_create(self) -> None:
        """Valid options build a frozen config."""
        config = DecryptionConfig.create("merchant:1", [ECV1_ENTRY])

        assert config.recipient_id == "merchant:1"
        assert config.verification_keys == (VerificationKey("ECv1", "a2V5MQ=="),)
        assert config.verify_mac is False

    def test_frozen(self) -> None:
        """Configs cannot be mutated."""
        config = DecryptionConfig.create("merchant:1", [ECV1_ENTRY])

        with pytest.raises(AttributeError):
            config.recipient_id = "merchant:2"

    def test_missing_recipient(self) -> None:
        """None recipient id is rejected."""
        with pytest.raises(ConfigurationError, match="recipient_id"):
            DecryptionConfig.create(None, [ECV1_ENTRY])

    def test_empty_published_document(self) -> None:
        """A document with no keys is rejected."""
        with pytest.raises(ConfigurationError, match="verification_keys"):
            DecryptionConfig.create("merchant:1", {"keys": []})
