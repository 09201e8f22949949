"""
TokenVault Cryptographic Services Module

Provides the primitives behind tokenization:
- Deterministic token derivation
- Authenticated symmetric encryption/decryption
- The Token record that applies them to its own payload
"""

from .crypto_service import (
    CryptoService,
    CryptoError,
    CryptoInitError,
    DecodeError,
    AuthenticationError,
    get_crypto_service,
)
from .token_models import (
    CreateToken,
    Token,
    NewTokenRequest,
    NewTokenResponse,
    GetTokenResponse,
)

__all__ = [
    "CryptoService",
    "CryptoError",
    "CryptoInitError",
    "DecodeError",
    "AuthenticationError",
    "get_crypto_service",
    "CreateToken",
    "Token",
    "NewTokenRequest",
    "NewTokenResponse",
    "GetTokenResponse",
]
