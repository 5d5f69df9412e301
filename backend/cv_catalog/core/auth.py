from typing import Optional

import bcrypt
import structlog

from cv_catalog.core.config import Settings

logger = structlog.get_logger(__name__)

# bcrypt only looks at the first 72 bytes; older releases truncate silently
MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    encoded = plain_password.encode('utf-8')
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        # checkpw compares in constant time
        return bcrypt.checkpw(encoded, hashed_password.encode('utf-8'))
    except ValueError:
        # malformed hash
        return False


def get_password_hash(password: str) -> str:
    encoded = password.encode('utf-8')
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode('utf-8')


class AdminGate:
    """Checks a submitted password against the single admin secret.

    Stateless apart from the hash: no lockout, no session, no token.
    """

    def __init__(self, password_hash: Optional[str]):
        self.password_hash = password_hash

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminGate":
        if settings.ADMIN_PASSWORD_HASH:
            return cls(settings.ADMIN_PASSWORD_HASH)
        if settings.ADMIN_PASSWORD:
            return cls(get_password_hash(settings.ADMIN_PASSWORD))
        logger.warning("admin_password_not_configured")
        return cls(None)

    def verify(self, password: Optional[str]) -> bool:
        if not self.password_hash or not password:
            return False
        return verify_password(password, self.password_hash)


def verify_admin_password(password: Optional[str], settings: Settings) -> bool:
    """One-shot check; routers use the gate built at startup instead."""
    return AdminGate.from_settings(settings).verify(password)
