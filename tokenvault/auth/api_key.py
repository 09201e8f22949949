"""API key authentication."""
from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader
from typing import Optional
import structlog
from ..config import get_settings

log = structlog.get_logger()

# API key header scheme
api_key_header = APIKeyHeader(name="X-TokenVault-Key", auto_error=False)


class APIKeyRegistry:
    """
    In-memory API key registry.

    Keys are loaded from the API_KEYS setting at startup.
    """

    def __init__(self, keys: str = ""):
        """Initialize API key registry from a comma-separated list."""
        self._keys: set[str] = set()
        for key in keys.split(","):
            key = key.strip()
            if key:
                self._keys.add(key)

        log.info("api_keys.loaded", count=len(self._keys))

    def validate(self, key: str) -> bool:
        """
        Validate an API key.

        Args:
            key: API key to validate

        Returns:
            True if key is valid
        """
        return key in self._keys

    def add_key(self, key: str):
        """Add an API key to the registry."""
        self._keys.add(key)
        log.info("api_key.added")

    def remove_key(self, key: str) -> bool:
        """
        Remove an API key from the registry.

        Returns:
            True if key was removed
        """
        if key in self._keys:
            self._keys.discard(key)
            log.info("api_key.removed")
            return True
        return False

    def count(self) -> int:
        """Get total number of registered keys."""
        return len(self._keys)


# Global registry instance
registry = APIKeyRegistry(get_settings().API_KEYS)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)) -> str:
    """
    Dependency to verify API key from request header.

    Authentication is enforced only when REQUIRE_AUTH is set and at least
    one key is registered.

    Args:
        api_key: API key from X-TokenVault-Key header

    Returns:
        Validated API key, or "anonymous" when authentication is off

    Raises:
        HTTPException: If API key is missing (401) or invalid (403)
    """
    if not get_settings().REQUIRE_AUTH or registry.count() == 0:
        log.debug("auth.skipped")
        return "anonymous"

    if not api_key:
        log.warning("auth.failed", reason="missing_key")
        raise HTTPException(
            status_code=401,
            detail="Missing API key. Provide X-TokenVault-Key header.",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    if not registry.validate(api_key):
        log.warning("auth.failed", reason="invalid_key")
        raise HTTPException(
            status_code=403,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    log.debug("auth.success")
    return api_key
