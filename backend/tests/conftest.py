"""Root conftest — shared test configuration."""

import os

# Keep tests on an in-memory database and the default identity policy
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ALLOWED_EMAIL_DOMAIN", "fl1capital.com")
os.environ.setdefault("EXPOSE_VERIFICATION_CODE", "true")
os.environ.setdefault("LOG_FORMAT", "text")
