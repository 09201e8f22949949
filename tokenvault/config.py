from pydantic import AnyUrl
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # Store backend selection: "memory" or "redis"
    STORE_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: AnyUrl | None = None
    REDIS_KEY_PREFIX: str = "tokenvault:token:"
    REDIS_SOCKET_TIMEOUT: float = 5.0
    # AES key, 16/24/32 bytes once UTF-8 encoded. The default keeps
    # ciphertexts written by earlier deployments readable.
    VAULT_KEY: str = "this is the secret key and stuff"
    # Authentication
    API_KEYS: str = ""  # Comma-separated list of API keys
    REQUIRE_AUTH: bool = False  # Whether to enforce authentication

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
