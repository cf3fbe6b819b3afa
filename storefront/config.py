"""Storefront configuration read from environment variables."""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_API_URL = "https://fakestoreapi.com"
DEFAULT_CART_KEY = "storefront"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""
    api_url: str = DEFAULT_API_URL
    http_timeout: float = 10.0
    cart_key: str = DEFAULT_CART_KEY
    cart_file: Optional[str] = None
    redis_url: str = ""
    redis_token: str = ""

    @property
    def redis_enabled(self) -> bool:
        """Upstash Redis is used for the cart snapshot only when both credentials are set."""
        return bool(self.redis_url and self.redis_token)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_url=os.environ.get("STOREFRONT_API_URL", DEFAULT_API_URL).rstrip("/"),
            http_timeout=_env_float("STOREFRONT_HTTP_TIMEOUT", 10.0),
            cart_key=os.environ.get("STOREFRONT_CART_KEY", DEFAULT_CART_KEY),
            cart_file=os.environ.get("STOREFRONT_CART_FILE") or None,
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get settings singleton (read once per process)."""
    return Settings.from_env()
