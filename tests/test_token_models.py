"""
Tests for the Token record and its crypto operations
"""

import pytest

from tokenvault.services.crypto import (
    CreateToken,
    Token,
    DecodeError,
    AuthenticationError,
)

from .conftest import PAYLOAD, TOKEN, CIPHERTEXT


def make_token(payload: str = PAYLOAD) -> Token:
    return Token(payload=payload, token_type="access", ttl=3600, metadata={"key": "value"})


class TestTokenize:
    """Test token derivation on the record"""

    def test_tokenize_sets_token(self):
        """Test tokenize derives the token from the payload"""
        token = make_token()
        token.tokenize()

        assert token.token == TOKEN
        assert token.payload == PAYLOAD

    def test_tokenize_before_encrypt_hashes_plaintext(self, crypto):
        """Test the token survives encryption unchanged"""
        token = make_token()
        token.tokenize()
        token.encrypt(crypto)

        assert token.token == TOKEN

    def test_tokenize_after_encrypt_hashes_ciphertext(self, crypto):
        """Test reversing the order produces a different token"""
        token = make_token()
        token.encrypt(crypto)
        token.tokenize()

        assert token.token != TOKEN


class TestEncryptDecrypt:
    """Test payload encryption on the record"""

    def test_encrypt_replaces_payload(self, crypto):
        """Test encrypt swaps the payload for its hex ciphertext"""
        token = make_token()
        token.encrypt(crypto)

        assert token.payload == CIPHERTEXT

    def test_decrypt_does_not_mutate(self, crypto):
        """Test decrypt returns plaintext and leaves the payload encrypted"""
        token = make_token(CIPHERTEXT)

        assert token.decrypt(crypto) == PAYLOAD
        assert token.payload == CIPHERTEXT

    def test_encrypt_uses_process_key_by_default(self):
        """Test the default crypto service is used when none is given"""
        token = make_token()
        token.encrypt()

        assert token.payload == CIPHERTEXT
        assert token.decrypt() == PAYLOAD

    def test_decrypt_invalid_hex(self, crypto):
        """Test a non-hex payload raises DecodeError"""
        with pytest.raises(DecodeError):
            make_token("invalid hex string").decrypt(crypto)

    def test_decrypt_corrupted(self, crypto):
        """Test a short payload raises AuthenticationError"""
        with pytest.raises(AuthenticationError):
            make_token("deadbeef").decrypt(crypto)


class TestIdentity:
    """Test id and timestamp assignment"""

    def test_new_token_has_no_identity(self):
        token = make_token()

        assert token.id is None
        assert token.created_at is None
        assert token.updated_at is None

    def test_assign_identity(self):
        """Test id and matching timestamps are assigned"""
        token = make_token()
        token.assign_identity()

        assert token.id is not None
        assert token.id.version == 7
        assert token.created_at == token.updated_at
        assert token.created_at.tzinfo is not None

    def test_assign_identity_is_write_once(self):
        """Test a second call keeps the original identity"""
        token = make_token()
        token.assign_identity()
        first_id, first_created = token.id, token.created_at

        token.assign_identity()

        assert token.id == first_id
        assert token.created_at == first_created


class TestSerialization:
    """Test the record's wire format"""

    def test_dump_uses_wire_names(self):
        token = make_token()
        token.tokenize()
        token.assign_identity()

        data = token.model_dump(mode="json", by_alias=True)

        assert set(data) == {
            "id", "createdAt", "updatedAt", "payload",
            "token_type", "ttl", "metadata", "token",
        }
        assert data["token"] == TOKEN
        assert data["metadata"] == {"key": "value"}

    def test_load_from_wire_names(self):
        token = make_token()
        token.assign_identity()

        loaded = Token.model_validate(token.model_dump(mode="json", by_alias=True))

        assert loaded.model_dump() == token.model_dump()

    def test_create_token_defaults(self):
        """Test only the payload is required"""
        request = CreateToken(payload="p")

        assert request.token_type == ""
        assert request.ttl == 0
        assert request.metadata == {}

    def test_metadata_is_opaque(self):
        """Test nested metadata is kept verbatim"""
        metadata = {"role": "admin", "permissions": ["read", "write"], "nested": {"n": 1}}
        token = Token(payload="p", metadata=metadata)

        assert token.model_dump()["metadata"] == metadata
