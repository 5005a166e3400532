from datetime import datetime, timedelta, timezone
from jose import jwt
from passlib.context import CryptContext
from app.core.config import settings

# ── Bcrypt Password Hashing ───────────────────────────────────────────
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Stand-in for users without a usable hash; see verify_password.
_DUMMY_HASH = pwd_context.hash("not-a-real-password")

MIN_PASSWORD_LENGTH = 6


def hash_password(plain: str) -> str:
    """bcrypt hash stored in users.password_hash at registration."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Check a login password against the stored hash.

    hashed is None when the email is unknown. That case and an unreadable
    hash both return False after verifying against _DUMMY_HASH, so login
    does one bcrypt round whether or not the account exists.
    """
    if not hashed or len(hashed) < 59:
        pwd_context.verify(plain, _DUMMY_HASH)
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        pwd_context.verify(plain, _DUMMY_HASH)
        return False


# ── JWT Token ─────────────────────────────────────────────────────────
def create_access_token(user_id: int, email: str, name: str) -> str:
    """
    Creates a signed JWT. Change SECRET_KEY in .env to invalidate all tokens.

    Payload contains:
      sub   : user ID (standard JWT claim)
      email, name : for frontend display
      type  : always "access"
      role  : always "student"
      iat / exp
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub":   str(user_id),
        "email": email,
        "name":  name,
        "type":  "access",
        "role":  "student",
        "iat":   now,
        "exp":   now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decodes and verifies JWT signature + expiry.
    Raises jose.JWTError on any failure.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
