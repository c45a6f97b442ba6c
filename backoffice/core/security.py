"""
Password hashing & session-token helpers.

- Passwords are hashed with bcrypt directly (passlib is unmaintained
  and broken with bcrypt>=4.1).
- Session tokens are opaque, URL-safe random strings.  Only their
  SHA-256 hash is stored, so a leaked sessions table cannot be replayed.
- The bearer scheme is declared with ``auto_error=False``: a missing
  header must surface as our own ``Unauthenticated`` error, not
  FastAPI's default 403.
"""

import hashlib
import secrets

import bcrypt
from fastapi.security import HTTPBearer

from backoffice.core.config import settings

# ── Password hashing ────────────────────────────────────────────────


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# ── Session tokens ──────────────────────────────────────────────────


def generate_session_token() -> str:
    """Cryptographically secure, unguessable bearer token."""
    return secrets.token_urlsafe(settings.SESSION_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """SHA-256 hash — suitable for high-entropy tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


bearer_scheme = HTTPBearer(auto_error=False)
