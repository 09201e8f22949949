"""
Core Cryptographic Service for TokenVault

Implements the two primitives the vault is built on:
- Deterministic token derivation (SHA-512/256, lowercase hex)
- AES-GCM authenticated encryption/decryption, hex encoded
"""

import binascii
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ...config import get_settings

# Lone surrogates are valid in a str but not in strict UTF-8; passing them
# through keeps every str tokenizable. Well-formed text encodes unchanged.
_TEXT_ERRORS = "surrogatepass"


class CryptoError(Exception):
    """Base exception for cryptographic operations"""
    pass


class CryptoInitError(CryptoError):
    """Raised when the cipher cannot be constructed from the key"""
    pass


class DecodeError(CryptoError):
    """Raised when stored ciphertext is not valid hex"""
    pass


class AuthenticationError(CryptoError):
    """Raised when ciphertext fails the AEAD integrity check"""
    pass


class CryptoService:
    """
    Cryptographic service backing token derivation and payload protection.

    Features:
    - SHA-512/256 token derivation (64 hex characters)
    - AES-GCM encryption with the tag appended to the ciphertext
    - Hex encoding of ciphertext at rest

    Every encryption uses the same all-zero nonce, so a given plaintext
    always produces the same ciphertext under a given key. Stored
    ciphertexts depend on this; changing the nonce scheme changes the
    format of every record at rest.
    """

    NONCE_SIZE = 12  # 96 bits, standard GCM nonce
    TAG_SIZE = 16
    NONCE = bytes(NONCE_SIZE)

    def __init__(self, key: bytes):
        """
        Initialize CryptoService.

        Args:
            key: AES key, 16, 24 or 32 bytes (AES-128/192/256).

        Raises:
            CryptoInitError: If the cipher cannot be built from the key
        """
        try:
            self._aead = AESGCM(key)
        except (TypeError, ValueError) as e:
            raise CryptoInitError(f"Invalid vault key: {e}") from e

    @staticmethod
    def derive_token(plaintext: str) -> str:
        """
        Derive the lookup token for a plaintext payload.

        Pure function: the same plaintext always yields the same token,
        and every string (the empty string included) has one.

        Args:
            plaintext: Payload to tokenize

        Returns:
            64-character lowercase hex SHA-512/256 digest
        """
        digest = hashes.Hash(hashes.SHA512_256())
        digest.update(plaintext.encode("utf-8", _TEXT_ERRORS))
        return digest.finalize().hex()

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a payload.

        Args:
            plaintext: Payload to encrypt

        Returns:
            Hex encoded ciphertext with the 16-byte tag appended
        """
        ciphertext = self._aead.encrypt(self.NONCE, plaintext.encode("utf-8", _TEXT_ERRORS), None)
        return ciphertext.hex()

    def decrypt(self, ciphertext_hex: str) -> str:
        """
        Authenticate and decrypt a hex encoded ciphertext.

        Args:
            ciphertext_hex: Output of encrypt()

        Returns:
            Original plaintext

        Raises:
            DecodeError: If the input is not valid hex
            AuthenticationError: If the integrity check fails (tampered data,
                wrong key, or input shorter than the tag)
        """
        try:
            ciphertext = binascii.unhexlify(ciphertext_hex)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Ciphertext is not valid hex: {e}") from e

        try:
            plaintext = self._aead.decrypt(self.NONCE, ciphertext, None)
        except InvalidTag as e:
            raise AuthenticationError("Ciphertext failed authentication") from e

        try:
            return plaintext.decode("utf-8", _TEXT_ERRORS)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Decrypted payload is not valid UTF-8: {e}") from e


@lru_cache(maxsize=1)
def get_crypto_service() -> CryptoService:
    """Return the process-wide CryptoService keyed by VAULT_KEY."""
    return CryptoService(get_settings().VAULT_KEY.encode("utf-8"))
