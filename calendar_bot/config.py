"""Centralised configuration for calendar_bot.

Environment variables are loaded once from `.env` (if present) and grouped
into a :class:`Settings` object so the rest of the package never touches
``os.environ`` directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv
from nostr.key import PrivateKey

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_LOG_DIR: str = "logs"
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_METRICS_DIR: str = "metrics-logs"
DEFAULT_EVENT_DELAY_MINUTES: float = 30.0
DEFAULT_RELAY_CONCURRENCY: int = 1
SUPPORTED_LANGUAGES: tuple[str, ...] = ("en",)

# Relay timeouts (seconds)
RELAY_CONNECT_TIMEOUT: float = 20.0
RELAY_PUBLISH_TIMEOUT: float = 25.0

# Calendar API request settings
API_TIMEOUT: float = 30.0
API_RETRY_ATTEMPTS: int = 3
API_RETRY_DELAY: float = 5.0


class ConfigError(ValueError):
    """Raised when a required setting is missing or invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for one bot run."""

    api_endpoint: str = ""
    api_key: str = ""
    private_key: str = field(default="", repr=False)
    private_key_env: str = ""
    language: str = ""
    relays: List[str] = field(default_factory=list)
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    console_log: bool = False
    debug: bool = False
    metrics_dir: str = DEFAULT_METRICS_DIR
    event_delay_minutes: float = DEFAULT_EVENT_DELAY_MINUTES
    relay_concurrency: int = DEFAULT_RELAY_CONCURRENCY

    def validate(self) -> None:
        if not self.api_endpoint:
            raise ConfigError("BOT_API_ENDPOINT is required")
        if not self.api_key:
            raise ConfigError("BOT_API_KEY is required")
        if not self.private_key:
            raise ConfigError(f"private key variable {self.private_key_env or '?'} is empty or unset")
        if not self.language:
            raise ConfigError("BOT_PROCESSING_LANGUAGE is required")
        if self.language not in SUPPORTED_LANGUAGES:
            raise ConfigError(
                f"invalid BOT_PROCESSING_LANGUAGE {self.language!r}, must be one of {', '.join(SUPPORTED_LANGUAGES)}"
            )
        if not self.relays:
            raise ConfigError("NOSTR_RELAYS must list at least one relay")
        if self.event_delay_minutes < 0:
            raise ConfigError("BOT_EVENT_DELAY_MINUTES must not be negative")
        if self.relay_concurrency < 1:
            raise ConfigError("BOT_RELAY_CONCURRENCY must be at least 1")


def parse_relays(raw: str | None) -> List[str]:
    """Split a comma-separated relay list, dropping blanks."""
    return [r.strip() for r in (raw or "").split(",") if r.strip()]


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() == "true"


def _env_number(name: str, default, cast):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def load_settings(private_key_env: str) -> Settings:
    """Build and validate :class:`Settings` from the environment.

    *private_key_env* is the name of the variable holding the signing key,
    so several bot identities can share one `.env` file.
    """
    if not private_key_env:
        raise ConfigError("name of the private key environment variable is required")

    settings = Settings(
        api_endpoint=os.getenv("BOT_API_ENDPOINT", "").strip().rstrip("/"),
        api_key=os.getenv("BOT_API_KEY", "").strip(),
        private_key=os.getenv(private_key_env, "").strip(),
        private_key_env=private_key_env,
        language=os.getenv("BOT_PROCESSING_LANGUAGE", "").strip(),
        relays=parse_relays(os.getenv("NOSTR_RELAYS")),
        log_dir=os.getenv("BOT_LOG_DIR") or DEFAULT_LOG_DIR,
        log_level=os.getenv("BOT_LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        console_log=_env_flag("BOT_CONSOLE_LOG"),
        debug=_env_flag("BOT_DEBUG"),
        metrics_dir=os.getenv("BOT_METRICS_DIR") or DEFAULT_METRICS_DIR,
        event_delay_minutes=_env_number("BOT_EVENT_DELAY_MINUTES", DEFAULT_EVENT_DELAY_MINUTES, float),
        relay_concurrency=_env_number("BOT_RELAY_CONCURRENCY", DEFAULT_RELAY_CONCURRENCY, int),
    )
    settings.validate()
    return settings


def load_identity(secret: str) -> PrivateKey:
    """Return the signing key for *secret* (``nsec1…`` or 64-char hex)."""
    secret = (secret or "").strip()
    if secret.startswith("nsec1"):
        try:
            return PrivateKey.from_nsec(secret)
        except Exception as exc:
            raise ConfigError("private key is not a valid nsec string") from exc
    try:
        raw = bytes.fromhex(secret)
    except ValueError as exc:
        raise ConfigError("private key must be hex or nsec encoded") from exc
    if len(raw) != 32:
        raise ConfigError("private key must be 32 bytes")
    return PrivateKey(raw)

# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    "ConfigError",
    "Settings",
    "load_settings",
    "load_identity",
    "parse_relays",
    "DEFAULT_METRICS_DIR",
    "RELAY_CONNECT_TIMEOUT",
    "RELAY_PUBLISH_TIMEOUT",
    "API_TIMEOUT",
    "API_RETRY_ATTEMPTS",
    "API_RETRY_DELAY",
]
