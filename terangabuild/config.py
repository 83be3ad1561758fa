"""TerangaBuild configuration management.

Loads configuration from environment variables with sensible defaults.
Follows West African locale defaults (XOF currency shown as FCFA, no decimals).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class BackendConfig:
    """Remote persistence backend connection (endpoint + credential)."""

    url: str
    key: str


@dataclass
class DBConfig:
    """Connection pool tuning for the remote backend."""

    pool_size: int = 10
    pool_max_overflow: int = 20
    pool_timeout: int = 30
    echo: bool = False  # SQL logging


@dataclass
class CacheConfig:
    """Read cache used by the data-access facade."""

    ttl_seconds: float = 30.0


@dataclass
class SearchConfig:
    """Profile search limits."""

    min_query_length: int = 3
    max_results: int = 10
    debounce_seconds: float = 0.3


@dataclass
class ScheduleConfig:
    """Schedule delay detection."""

    tolerance_pct: float = 5.0


@dataclass
class LocaleConfig:
    """Currency and date display defaults (Senegal / UEMOA)."""

    currency: str = "XOF"
    currency_label: str = "FCFA"
    thousands_separator: str = " "
    date_format: str = "%d/%m/%Y"


@dataclass
class AppConfig:
    """Root application configuration.

    A missing backend is not an error: the facade falls back to fixture mode.
    """

    backend: BackendConfig | None = None
    log_level: str = "INFO"
    log_format: str = "console"  # json or console
    invitation_ttl_days: int = 7

    db: DBConfig = field(default_factory=DBConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    locale: LocaleConfig = field(default_factory=LocaleConfig)

    @property
    def demo_mode(self) -> bool:
        """True when no backend is configured (fixture mode)."""
        return self.backend is None

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Backend (both required for live mode):
        - TERANGA_BACKEND_URL: async SQLAlchemy URL
        - TERANGA_BACKEND_KEY: backend credential

        Optional (with defaults):
        - LOG_LEVEL, LOG_FORMAT
        - CACHE_TTL_SECONDS, SEARCH_MIN_QUERY_LENGTH, SEARCH_MAX_RESULTS
        - SCHEDULE_TOLERANCE_PCT, INVITATION_TTL_DAYS
        """
        backend_url = os.getenv("TERANGA_BACKEND_URL")
        backend_key = os.getenv("TERANGA_BACKEND_KEY")
        backend = None
        if backend_url and backend_key:
            backend = BackendConfig(url=backend_url, key=backend_key)

        return cls(
            backend=backend,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "console"),
            invitation_ttl_days=int(os.getenv("INVITATION_TTL_DAYS", "7")),
            db=DBConfig(
                pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
                pool_max_overflow=int(os.getenv("DB_POOL_MAX_OVERFLOW", "20")),
                pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
                echo=os.getenv("DB_ECHO", "false").lower() == "true",
            ),
            cache=CacheConfig(
                ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", "30")),
            ),
            search=SearchConfig(
                min_query_length=int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "3")),
                max_results=int(os.getenv("SEARCH_MAX_RESULTS", "10")),
                debounce_seconds=float(os.getenv("SEARCH_DEBOUNCE_SECONDS", "0.3")),
            ),
            schedule=ScheduleConfig(
                tolerance_pct=float(os.getenv("SCHEDULE_TOLERANCE_PCT", "5")),
            ),
            locale=LocaleConfig(
                currency=os.getenv("DEFAULT_CURRENCY", "XOF"),
                currency_label=os.getenv("CURRENCY_LABEL", "FCFA"),
            ),
        )


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads env."""
    global _config
    _config = None
