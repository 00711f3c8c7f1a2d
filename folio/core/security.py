from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from folio.core.config import settings

# Tokens are issued by the identity service; the content layer only verifies
# them and trusts the `sub` claim as the caller's user id.
DEFAULT_TOKEN_TTL = timedelta(days=7)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None, **claims) -> str:
    to_encode = dict(claims)
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_TTL)
    to_encode.update({"sub": subject, "exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_subject(token: str) -> Optional[str]:
    """Return the user id carried by a bearer token, or None if it does not verify."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    return str(subject)
