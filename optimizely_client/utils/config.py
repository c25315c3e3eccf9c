"""Configuration management for the Optimizely client."""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

from ..core.exceptions import ConfigurationError

DEFAULT_ADDRESS = "https://www.optimizelyapis.com/experiment/v1/"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_timeout(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}")


@dataclass(frozen=True)
class ClientConfig:
    """Construction-time settings for OptimizelyClient."""

    api_token: str
    address: str = DEFAULT_ADDRESS
    use_bearer_auth: bool = False  # Authorization: Bearer instead of Token header
    timeout: Optional[float] = None  # seconds, None = no timeout
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables (and a .env file)."""
        load_dotenv()
        return cls(
            api_token=os.getenv("OPTIMIZELY_API_TOKEN", ""),
            address=os.getenv("OPTIMIZELY_API_URL") or DEFAULT_ADDRESS,
            use_bearer_auth=_env_flag("OPTIMIZELY_OAUTH2"),
            timeout=_env_timeout("OPTIMIZELY_TIMEOUT"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Validate configuration."""
        if not self.api_token:
            raise ConfigurationError("OPTIMIZELY_API_TOKEN is required")

        if not self.address.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"OPTIMIZELY_API_URL must be an http(s) URL, got {self.address!r}"
            )

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("OPTIMIZELY_TIMEOUT must be positive")
