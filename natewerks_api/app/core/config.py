"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field except
the Stripe credentials, which must be supplied in any deployment that
accepts subscriptions.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Natewerks API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "natewerks.db")

    stripe_secret_key: str = os.getenv("STRIPE_SECRET_KEY", "")
    # Every subscription is created against this single price.
    stripe_price_id: str = os.getenv("STRIPE_PRICE_ID", "")
    # Empty means the account's default API version.
    stripe_api_version: str = os.getenv("STRIPE_API_VERSION", "")

    # ``plain`` stores and compares passwords verbatim; ``pbkdf2`` stores
    # salted PBKDF2 hashes.  Switching schemes does not migrate stored
    # passwords.
    password_scheme: str = os.getenv("PASSWORD_SCHEME", "plain")

    # Comma‑separated list of allowed origins, ``*`` for any.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must therefore be set before importing this module.
settings = Settings()
