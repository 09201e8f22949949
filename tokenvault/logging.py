"""
Structured logging configuration using structlog.

Standardized log format:
{
    "ts": "2026-10-16T04:30:00.123456Z",
    "level": "info",
    "service": "tokenvault",
    "correlation_id": "uuid-v4",
    "event": "token.created",
    "token": "e3061477...",
    "token_type": "access",
    "module": "tokenvault.services.vault",
    "function": "create_token",
    "line": 42,
    ...additional context...
}

Secrets never reach the renderer: payload, key and credential fields are
replaced by a marker, and full tokens are cut to their prefix.
"""
import structlog
import logging
from typing import Any

REDACTED = "[REDACTED]"

SENSITIVE_KEYS = frozenset({
    "payload",
    "plaintext",
    "ciphertext",
    "vault_key",
    "api_key",
    "password",
    "redis_url",
})

# Length of a hex SHA-512/256 token
TOKEN_LENGTH = 64


def add_module_info(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Add module, function, and line number to log entries."""
    frame = structlog._frames._find_first_app_frame_and_name([__name__])[0]
    if frame:
        event_dict["module"] = frame.f_globals.get("__name__", "unknown")
        event_dict["function"] = frame.f_code.co_name
        event_dict["line"] = frame.f_lineno
    return event_dict


def redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Mask sensitive fields and shorten full tokens before rendering."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    token = event_dict.get("token")
    if isinstance(token, str) and len(token) == TOKEN_LENGTH:
        event_dict["token"] = short_token(token)
    return event_dict


def short_token(token: str) -> str:
    """Render a token for log output without exposing the full key."""
    return f"{token[:8]}..." if token else "<empty>"


def setup_logging(json_output: bool = True, service_name: str = "tokenvault", level: str = "INFO"):
    """
    Configure structured logging with standardized fields.

    Args:
        json_output: If True, output JSON logs. If False, use console format.
        service_name: Name of the service (for multi-service deployments).
        level: Minimum log level name.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    def add_service_name(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict["service"] = service_name
        return event_dict

    shared_processors = [
        # Add contextvars (includes correlation_id from middleware)
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.add_log_level,
        add_module_info,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
    )

    # Silence uvicorn's default logging to avoid duplicate logs
    logging.getLogger("uvicorn.error").handlers = []
    logging.getLogger("uvicorn.access").handlers = []


def get_logger():
    """Get a configured structlog logger."""
    return structlog.get_logger()
