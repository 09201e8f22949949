"""
Token models and schemas for the vault
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid6 import uuid7

from .crypto_service import CryptoService, get_crypto_service


class CreateToken(BaseModel):
    """
    Caller-supplied fields of a token. id, timestamps and the token value
    are generated by the vault.
    """
    payload: str = Field(..., description="Sensitive content to tokenize")
    token_type: str = Field(default="", description="Free-form classification, e.g. access or refresh")
    ttl: int = Field(default=0, description="Time-to-live hint in seconds, not enforced by the vault")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Opaque caller attributes")


class Token(CreateToken):
    """
    Full token record as persisted by a TokenStore.

    The payload holds plaintext until encrypt() runs and hex ciphertext
    afterwards. tokenize() must run on the plaintext, before encrypt().
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[UUID] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    token: str = ""

    def tokenize(self) -> None:
        """Set the token from the current (plaintext) payload"""
        self.token = CryptoService.derive_token(self.payload)

    def encrypt(self, crypto: Optional[CryptoService] = None) -> None:
        """Replace the payload with its encrypted hex form"""
        crypto = crypto or get_crypto_service()
        self.payload = crypto.encrypt(self.payload)

    def decrypt(self, crypto: Optional[CryptoService] = None) -> str:
        """
        Decrypt the payload without modifying this record

        Raises:
            DecodeError: If the payload is not valid hex
            AuthenticationError: If the payload fails authentication
        """
        crypto = crypto or get_crypto_service()
        return crypto.decrypt(self.payload)

    def assign_identity(self) -> None:
        """Assign id and timestamps once; later calls are no-ops"""
        if self.id is not None:
            return
        now = datetime.now(timezone.utc)
        # uuid6 returns its own UUID subclass
        self.id = UUID(int=uuid7().int)
        self.created_at = now
        self.updated_at = now


class NewTokenRequest(BaseModel):
    """
    Request body for token creation
    """
    data: CreateToken

    @field_validator('data')
    @classmethod
    def validate_payload_text(cls, v: CreateToken) -> CreateToken:
        # The decrypted view must be able to return the payload as UTF-8 JSON
        try:
            v.payload.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("payload must be valid Unicode text")
        return v


class NewTokenResponse(BaseModel):
    """
    Response from token creation
    """
    token: str


class GetTokenResponse(BaseModel):
    """
    Response for both the encrypted and decrypted views of a token
    """
    encrypted_token: Token
