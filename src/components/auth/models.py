from dataclasses import dataclass, field
from uuid import UUID

from src.core.errors import ValidationError
from src.domain.entities import User


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class CreateUserInput:
    email: str
    password: str
    role: str = "USER"
    name: str | None = None


@dataclass
class UpdateUserRoleInput:
    actor: User
    target_id: UUID
    new_role: str


@dataclass
class DeleteUserInput:
    actor: User
    target_id: UUID


@dataclass
class ListUsersInput:
    actor: User


@dataclass
class AuthOutput:
    user: User | None = None
    token_raw: str | None = None
    success: bool = False
    error: str | None = None


@dataclass
class UserOutput:
    user: User | None = None
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = False


@dataclass
class UserListOutput:
    users: list[User]
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = False
