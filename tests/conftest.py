"""Shared fixtures for vault tests."""
import pytest

from tokenvault.adapters.base import TokenStore, TokenNotFound
from tokenvault.adapters.memory import InMemoryTokenStore
from tokenvault.services.crypto import CryptoService, Token
from tokenvault.services.vault import VaultService

# Known vector: SHA-512/256 token and AES-256-GCM (zero nonce) ciphertext
# of PAYLOAD under the default vault key.
PAYLOAD = "this is the payload"
TOKEN = "e3061477f33275654a7beebe7ac6a4941adedec434d870a8bac71e7bff2eb137"
CIPHERTEXT = "fc8df3ea16c7823811c85fead07f6589684f9799084fbad080134cc16d512339f5dfe9"
DEFAULT_KEY = b"this is the secret key and stuff"


class MockStore(TokenStore):
    """Store returning a canned token or error, recording every call."""

    def __init__(self, token=None, create_error=None, get_error=None, delete_error=None):
        self.token = token
        self.create_error = create_error
        self.get_error = get_error
        self.delete_error = delete_error
        self.calls = []

    async def create_token(self, token: Token) -> Token:
        self.calls.append(("create_token", token.model_copy(deep=True)))
        if self.create_error:
            raise self.create_error
        token.assign_identity()
        return token

    async def get_token(self, token: str) -> Token:
        self.calls.append(("get_token", token))
        if self.get_error:
            raise self.get_error
        if self.token is None:
            raise TokenNotFound(token)
        return self.token.model_copy(deep=True)

    async def delete_token(self, token: Token) -> None:
        self.calls.append(("delete_token", token.token))
        if self.delete_error:
            raise self.delete_error

    async def health_check(self) -> bool:
        return True

    def called(self, name: str) -> list:
        return [args for call, args in self.calls if call == name]


def stored_token(payload: str = CIPHERTEXT, **overrides) -> Token:
    """A persisted-looking token record with an encrypted payload."""
    fields = dict(
        token=TOKEN,
        payload=payload,
        token_type="access",
        ttl=3600,
        metadata={"foo": "bar"},
    )
    fields.update(overrides)
    token = Token(**fields)
    token.assign_identity()
    return token


@pytest.fixture
def crypto():
    """CryptoService with the default vault key"""
    return CryptoService(DEFAULT_KEY)


@pytest.fixture
def memory_store():
    """Empty in-memory token store"""
    return InMemoryTokenStore()


@pytest.fixture
def vault(memory_store, crypto):
    """Vault service over an in-memory store"""
    return VaultService(store=memory_store, crypto=crypto)


@pytest.fixture
def api_vault(memory_store, crypto):
    """Install a vault over a fresh in-memory store for API tests"""
    from tokenvault.api import token_router

    previous = token_router._vault_service
    service = VaultService(store=memory_store, crypto=crypto)
    token_router.set_vault_service(service)
    yield service
    token_router.set_vault_service(previous)
