from typing import Protocol
from uuid import UUID

from src.core.ports.time import TimePort
from src.domain.entities import User


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None: ...
    def get_by_id(self, user_id: UUID) -> User | None: ...
    def save(self, user: User) -> None: ...
    def list_all(self) -> list[User]: ...
    def delete(self, user_id: UUID) -> None: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def create_token(self, user_id: object, ttl_minutes: int) -> str: ...


__all__ = ["AuthAdapterPort", "TimePort", "UserRepoPort"]
