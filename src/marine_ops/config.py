"""Configuration and environment variable validation for the marine ops dashboard."""

import os
import logging
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


class Config:
    """Configuration class that loads and validates environment variables."""

    def __init__(self):
        self.load_config()

    def load_config(self):
        """Load and validate all environment variables."""
        # Environment detection comes first, other defaults depend on it
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.is_production = self.environment == "production"
        self.is_development = self.environment == "development"

        # JWT Configuration
        self.jwt_secret_key = os.getenv("JWT_SECRET_KEY")
        if not self.jwt_secret_key:
            logger.warning(
                "JWT_SECRET_KEY not set. "
                "Please set this environment variable in production!"
            )
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

        # Bootstrap admin account, consumed by scripts/create_admin.py
        self.admin_email = os.getenv("ADMIN_EMAIL")
        self.admin_password = os.getenv("ADMIN_PASSWORD")

        # Database configuration
        self.database_url = os.getenv("DATABASE_URL")
        self.db_echo = os.getenv("DB_ECHO", "false").lower() == "true"
        self.db_pool_size = int(os.getenv("DB_POOL_SIZE", "10"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # HTTP
        self.cors_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]
        self.rate_limit_enabled = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
        self.api_host = os.getenv("API_HOST", "0.0.0.0")
        self.api_port = int(os.getenv("API_PORT", "8000"))

        # Crew certifications expiring within this many days are flagged
        self.cert_expiry_warning_days = int(os.getenv("CERT_EXPIRY_WARNING_DAYS", "30"))

        self._validate_config()

    def _validate_config(self):
        """Validate configuration and log warnings for potential issues."""
        if self.is_production:
            if not self.jwt_secret_key or len(self.jwt_secret_key) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be set and at least 32 characters in production"
                )

            if not self.database_url:
                raise ValueError("DATABASE_URL must be set in production")

            if self.admin_password and len(self.admin_password) < 12:
                logger.warning(
                    "ADMIN_PASSWORD should be at least 12 characters in production"
                )
        else:
            logger.info("Running in development mode")
            if not self.jwt_secret_key:
                logger.warning("JWT_SECRET_KEY not set - tokens cannot be issued")
            if not self.database_url:
                logger.warning("DATABASE_URL not set - falling back to the local default")

    def get_admin_credentials(self) -> tuple[str, str]:
        """Get bootstrap admin credentials, with fail-fast validation."""
        if not self.admin_email:
            raise ValueError(
                "ADMIN_EMAIL must be set. Run 'python scripts/validate_production.py' "
                "to check your configuration."
            )

        if not self.admin_password:
            raise ValueError(
                "ADMIN_PASSWORD must be set. Default passwords are not allowed for security."
            )

        if len(self.admin_password) < 8:
            raise ValueError("ADMIN_PASSWORD must be at least 8 characters long.")

        return self.admin_email, self.admin_password


# Global config instance
config = Config()
