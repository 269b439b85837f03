"""
Tourist Spot API — Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the database layer and services.
When:  Loaded once at module import time; validated during app startup.

Only the values below are read from the environment. Database, Cloudinary and
signing credentials are never logged.
"""

from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Production deployments MUST provide DB_USER, DB_PASS and
    ACCESS_TOKEN_SECRET; everything else has a working default.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    db_user: str = Field(default="", description="MongoDB Atlas user")
    db_pass: str = Field(default="", description="MongoDB Atlas password")
    mongodb_host: str = Field(default="cluster0.2wh4i.mongodb.net")

    # What: Full connection string; when set it wins over the composed SRV URI.
    # Typical local value: mongodb://localhost:27017
    mongodb_uri: Optional[str] = Field(default=None)

    db_name: str = Field(default="travel-agency")
    collection_name: str = Field(default="tourist-spot")

    @property
    def database_url(self) -> str:
        """Connection string handed to AsyncMongoClient."""
        if self.mongodb_uri:
            return self.mongodb_uri
        return (
            f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}"
            f"@{self.mongodb_host}/?retryWrites=true&w=majority&appName=Cluster0"
        )

    # ── Cloudinary ────────────────────────────────────────────────────────
    cloud_name: str = Field(default="")
    cloud_api_key: str = Field(default="")
    cloud_api_secret: str = Field(default="")

    # ── Session Tokens ────────────────────────────────────────────────────
    # What: HMAC secret for HS256 session tokens
    access_token_secret: str = Field(default="", description="Token signing secret")

    # What: Token and cookie lifetime. The cookie never outlives the token.
    token_ttl_seconds: int = Field(default=3600, ge=60, le=86400)
    token_cookie_name: str = Field(default="token")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(
        default="https://tourist-spot-9429c.web.app,http://localhost:5173"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP fixed window (100 requests every 15 minutes)
    rate_limit_requests: int = Field(default=100, ge=1, le=10000)
    rate_limit_window: int = Field(default=900, ge=1, le=86400)  # seconds

    # ── Asset Cleanup ─────────────────────────────────────────────────────
    # What: What happens when Cloudinary refuses to delete a replaced/removed image
    #   ignore: log it and keep going with the document write
    #   abort:  fail the request with 500 before touching the document
    asset_cleanup_policy: str = Field(default="ignore")

    @field_validator("asset_cleanup_policy")
    @classmethod
    def validate_cleanup_policy(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"ignore", "abort"}:
            raise ValueError(
                f"Invalid asset_cleanup_policy '{v}'. Must be 'ignore' or 'abort'"
            )
        return lower

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every missing value and raises one ValueError.
        """
        errors = []
        if not self.mongodb_uri and (not self.db_user or not self.db_pass):
            errors.append("Database credentials are missing (DB_USER / DB_PASS)")
        if not self.access_token_secret:
            errors.append("ACCESS_TOKEN_SECRET is not set; session tokens cannot be signed")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
