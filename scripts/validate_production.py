#!/usr/bin/env python3
"""
Pre-deployment configuration check for the marine ops API.

Fails in production when secrets are missing, weak or still set to
placeholder values; in development it only reports what it finds.
"""

import os
import re
import sys
from pathlib import Path
from typing import List


class ProductionValidator:
    """Checks environment variables and config files for unsafe values."""

    PLACEHOLDER_PATTERNS = [
        r'change[-_]?me',
        r'your[-_].*[-_](key|secret|password)',
        r'\bsecret\b',
        r'admin123',
        r'password123',
    ]

    # Variables the API cannot run safely without
    REQUIRED_VARS = ['JWT_SECRET_KEY', 'DATABASE_URL', 'ADMIN_EMAIL', 'ADMIN_PASSWORD']

    CONFIG_FILES = ['.env', '.env.production', 'alembic.ini']

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.environment = os.getenv('ENVIRONMENT', 'development').lower()

    def validate_environment_variables(self) -> bool:
        print("Validating environment variables...")

        for var_name in self.REQUIRED_VARS:
            value = os.getenv(var_name)
            if not value:
                self.errors.append(f"{var_name} is not set")
            elif self._looks_like_placeholder(value):
                self.errors.append(f"{var_name} contains a placeholder value")

        secret = os.getenv('JWT_SECRET_KEY') or ''
        if secret and len(secret) < 32:
            self.errors.append("JWT_SECRET_KEY must be at least 32 characters")

        admin_password = os.getenv('ADMIN_PASSWORD') or ''
        if admin_password and len(admin_password) < 12:
            self.warnings.append("ADMIN_PASSWORD should be at least 12 characters")

        database_url = os.getenv('DATABASE_URL') or ''
        if database_url.startswith('sqlite'):
            self.errors.append("DATABASE_URL points at SQLite; use PostgreSQL in production")
        elif re.search(r'localhost|127\.0\.0\.1', database_url):
            self.warnings.append("DATABASE_URL points at a local database")

        origins = os.getenv('CORS_ORIGINS', '')
        if not origins:
            self.warnings.append("CORS_ORIGINS not set; only localhost frontends will be allowed")
        elif 'localhost' in origins or '127.0.0.1' in origins:
            self.warnings.append("CORS_ORIGINS allows localhost")

        if os.getenv('RATE_LIMIT_ENABLED', 'true').lower() != 'true':
            self.warnings.append("Rate limiting is disabled")

        return len(self.errors) == 0

    def validate_configuration_files(self) -> bool:
        print("Validating configuration files...")

        for file_path in self.CONFIG_FILES:
            path = Path(file_path)
            if path.exists():
                self._scan_file(path)

        return len(self.errors) == 0

    def _looks_like_placeholder(self, value: str) -> bool:
        return any(re.search(pattern, value, re.IGNORECASE) for pattern in self.PLACEHOLDER_PATTERNS)

    def _scan_file(self, path: Path) -> None:
        try:
            lines = path.read_text(encoding='utf-8').splitlines()
        except OSError as e:
            self.warnings.append(f"Could not read {path}: {e}")
            return

        for line_num, line in enumerate(lines, 1):
            if line.lstrip().startswith('#') or '=' not in line:
                continue
            key, _, value = line.partition('=')
            key = key.strip().upper()
            if any(word in key for word in ('SECRET', 'PASSWORD', 'KEY')) and \
                    self._looks_like_placeholder(value.strip()):
                self.errors.append(f"{path}:{line_num} - placeholder value for {key}")

    def run_validation(self) -> bool:
        print("=" * 50)
        print(f"Environment: {self.environment}")
        if self.environment == 'production':
            print("Running in PRODUCTION mode - strict validation enabled")
        else:
            print("Running in development mode - reporting issues only")
        print("=" * 50)

        self.validate_environment_variables()
        self.validate_configuration_files()

        print("\n" + "=" * 50)
        print("VALIDATION RESULTS")
        print("=" * 50)

        if self.errors:
            print(f"\nERRORS ({len(self.errors)}):")
            for error in self.errors:
                print(f"  - {error}")

        if self.warnings:
            print(f"\nWARNINGS ({len(self.warnings)}):")
            for warning in self.warnings:
                print(f"  - {warning}")

        if not self.errors and not self.warnings:
            print("\nAll checks passed.")

        if self.environment == 'production':
            return not self.errors

        if self.errors:
            print(f"\nFound {len(self.errors)} issues to fix before a production deployment.")
        return True


def main():
    validator = ProductionValidator()
    if not validator.run_validation():
        print("\nDeployment blocked due to validation failures.")
        sys.exit(1)
    print("\nValidation completed.")
    sys.exit(0)


if __name__ == "__main__":
    main()
