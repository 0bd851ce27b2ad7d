# Conta/security.py
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from dotenv import load_dotenv
from jose import JWTError, jwt

load_dotenv()

SECRET_KEY = os.getenv("JWT_SECRET", "dev-change-me")
ALGORITHM = "HS256"
COOKIE_NAME = "app_session_id"
SESSION_MAX_AGE = timedelta(days=int(os.getenv("SESSION_MAX_AGE_DAYS", "365")))


class InvalidSession(Exception):
    pass


def create_session_token(open_id: str, name: Optional[str] = None,
                         expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or SESSION_MAX_AGE)
    to_encode = {"sub": open_id, "name": name or "", "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidSession(str(exc)) from exc
    if not payload.get("sub"):
        raise InvalidSession("session without subject")
    return payload
