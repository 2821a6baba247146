"""Lodge API client configuration.

Environment Variables:
- LODGE_API_URL: Base URL of the lodge REST API (required)
- LODGE_API_TOKEN: Bearer token sent with every request (optional)
- LODGE_API_TIMEOUT_SECONDS: Per-request timeout in seconds (default: 30)
- LODGE_DEFAULT_PAGE_SIZE: Initial page size of every store (default: 20)
- LODGE_SEARCH_DEBOUNCE_MS: Quiet period before search text is applied (default: 500)

Values may also come from a .env file, loaded with python-dotenv. Real
environment variables win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from lodge_admin.domain.models.filter_spec import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_SEARCH_DEBOUNCE_MS = 500


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class LodgeClientConfig:
    """Configuration for the lodge API client and its stores.

    Attributes:
        api_url: Base URL of the REST API, without trailing slash.
        api_token: Bearer token, None for unauthenticated access.
        timeout_seconds: Per-request timeout; a timeout is a transient failure.
        default_page_size: Initial page size (one of 10, 20, 50, 100).
        search_debounce_ms: Search quiet period in milliseconds.
    """

    api_url: str
    api_token: str | None = field(default=None, repr=False)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    default_page_size: int = DEFAULT_PAGE_SIZE
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.api_url or not self.api_url.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL, got {self.api_url!r}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.default_page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(
                f"default_page_size must be one of {list(PAGE_SIZE_OPTIONS)}, "
                f"got {self.default_page_size}"
            )
        if self.search_debounce_ms < 0:
            raise ValueError(
                f"search_debounce_ms must be >= 0, got {self.search_debounce_ms}"
            )
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))

    @property
    def search_delay_seconds(self) -> float:
        return self.search_debounce_ms / 1000

    @classmethod
    def from_environment(cls, env_file: str | Path | None = ".env") -> LodgeClientConfig:
        """Create configuration from environment variables.

        Args:
            env_file: Optional .env file to load first; ignored if missing.

        Raises:
            ValueError: If LODGE_API_URL is missing or a value is invalid.
        """
        if env_file is not None and Path(env_file).exists():
            load_dotenv(env_file, override=False)

        api_url = os.environ.get("LODGE_API_URL")
        if not api_url:
            raise ValueError("LODGE_API_URL environment variable is required")

        return cls(
            api_url=api_url,
            api_token=os.environ.get("LODGE_API_TOKEN") or None,
            timeout_seconds=_get_float_env(
                "LODGE_API_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
            ),
            default_page_size=_get_int_env("LODGE_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            search_debounce_ms=_get_int_env(
                "LODGE_SEARCH_DEBOUNCE_MS", DEFAULT_SEARCH_DEBOUNCE_MS
            ),
        )
