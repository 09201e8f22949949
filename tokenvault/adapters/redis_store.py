"""Redis token store."""
import structlog
import orjson
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from .base import TokenStore, TokenNotFound, StoreError
from ..config import get_settings
from ..logging import short_token
from ..services.crypto.token_models import Token

log = structlog.get_logger()
settings = get_settings()


class RedisTokenStore(TokenStore):
    """Redis implementation of the token store.

    Each token is a plain string key holding the JSON record. The ttl
    field is stored as data only; no Redis expiry is set.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        key_prefix: str | None = None,
        socket_timeout: float | None = None,
    ):
        """
        Initialize Redis token store.

        Args:
            redis_url: Redis connection URL (defaults to settings.REDIS_URL)
            key_prefix: Prefix for token keys (defaults to settings.REDIS_KEY_PREFIX)
            socket_timeout: Connect/read timeout in seconds
        """
        self.redis_url = redis_url or str(settings.REDIS_URL)
        self.key_prefix = key_prefix if key_prefix is not None else settings.REDIS_KEY_PREFIX
        self.socket_timeout = socket_timeout or settings.REDIS_SOCKET_TIMEOUT
        self._client: Redis | None = None

    def _get_client(self) -> Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = Redis.from_url(
                self.redis_url,
                decode_responses=False,  # We'll handle encoding ourselves
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
            )
        return self._client

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}{token}"

    async def create_token(self, token: Token) -> Token:
        """
        Write token to Redis, replacing any existing record.

        Raises:
            StoreError: If unable to write to Redis
        """
        token.assign_identity()
        data = orjson.dumps(token.model_dump(mode="json", by_alias=True))

        try:
            await self._get_client().set(self._key(token.token), data)
        except RedisError as e:
            log.error("redis.set_failed", error=str(e), token=short_token(token.token))
            raise StoreError(f"Failed to store token: {e}") from e

        log.info("token.stored", token=short_token(token.token), store="redis")
        return token

    async def get_token(self, token: str) -> Token:
        """
        Read token from Redis.

        Raises:
            TokenNotFound: If the key is missing or holds an empty value
            StoreError: If Redis fails or the record cannot be decoded
        """
        try:
            data = await self._get_client().get(self._key(token))
        except RedisError as e:
            log.error("redis.get_failed", error=str(e), token=short_token(token))
            raise StoreError(f"Failed to read token: {e}") from e

        if not data:
            raise TokenNotFound(token)

        try:
            return Token.model_validate(orjson.loads(data))
        except (orjson.JSONDecodeError, ValidationError) as e:
            log.error("redis.decode_failed", error=str(e), token=short_token(token))
            raise StoreError(f"Stored token record is malformed: {e}") from e

    async def delete_token(self, token: Token) -> None:
        """
        Delete token from Redis.

        Raises:
            StoreError: If Redis fails
        """
        try:
            await self._get_client().delete(self._key(token.token))
        except RedisError as e:
            log.error("redis.delete_failed", error=str(e), token=short_token(token.token))
            raise StoreError(f"Failed to delete token: {e}") from e

        log.info("token.removed", token=short_token(token.token), store="redis")

    async def health_check(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            return bool(await self._get_client().ping())
        except Exception as e:
            log.warning("redis.health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
