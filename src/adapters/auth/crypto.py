from datetime import timedelta
from typing import Any

from src.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """Auth adapter that uses JWT tokens and passlib (argon2) for password hashing."""

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_token(self, user_id: Any, ttl_minutes: int) -> str:
        return create_access_token({"sub": str(user_id)}, timedelta(minutes=ttl_minutes))

    def validate_token(self, token: str) -> Any | None:
        payload = decode_access_token(token)
        return payload.get("sub") if payload else None
