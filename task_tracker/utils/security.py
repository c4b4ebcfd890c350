import hmac

import bcrypt

# bcrypt only looks at the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72

# Checked when the email is unknown so a failed login costs the same either way
_DUMMY_HASH = bcrypt.hashpw(b"task-tracker-dummy-password", bcrypt.gensalt()).decode("utf-8")


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Constant-time check of a password against a stored bcrypt hash."""
    if not hashed_password:
        bcrypt.checkpw(_secret_bytes(plain_password), _DUMMY_HASH.encode("utf-8"))
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def tokens_match(presented: str | None, stored: str | None) -> bool:
    if not presented or not stored:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))
