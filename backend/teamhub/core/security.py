from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from teamhub.core.config import settings
from teamhub.core.exceptions import Unauthorized


class TokenPayload(BaseModel):
    sub: str
    exp: Optional[int] = None
    type: Optional[str] = None


def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token in the identity provider's format. Used by tooling and tests."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=30))
    to_encode = {
        "exp": expire,
        "iat": now,
        "sub": str(subject),
        "type": "access",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """Verify signature and expiry and return the payload, or raise Unauthorized."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise Unauthorized("Could not validate credentials")

    if token_data.type not in (None, "access"):
        raise Unauthorized("Could not validate credentials")
    return token_data
