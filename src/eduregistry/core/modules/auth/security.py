from datetime import datetime, timedelta
from typing import Any

import bcrypt
import jwt

from eduregistry.core.modules.auth.models import TokenType
from eduregistry.errors import AuthenticationError

JWT_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def encode_token(claims: dict[str, Any], token_type: TokenType, secret: str, issued_at: datetime, lifetime: timedelta) -> str:
    payload = {
        **claims,
        "type": token_type.value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, token_type: TokenType, secret: str) -> dict[str, Any]:
    """Verify signature, expiry and token type.

    Raises:
        AuthenticationError: If the token is invalid, expired or of another type
    """
    try:
        payload: dict[str, Any] = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    if payload.get("type") != token_type.value or "sub" not in payload or "user_type" not in payload:
        raise AuthenticationError("Invalid token payload")
    return payload
