import logging
from typing import cast

from src.core.errors import ValidationError, not_found
from src.domain.entities import ROLES, RoleType, User
from src.domain.policy import PolicyEngine

from .models import (
    AuthOutput,
    CreateUserInput,
    DeleteUserInput,
    ListUsersInput,
    LoginInput,
    UpdateUserRoleInput,
    UserListOutput,
    UserOutput,
)
from .ports import AuthAdapterPort, TimePort, UserRepoPort

logger = logging.getLogger(__name__)

FORBIDDEN = "forbidden"


def _access_denied() -> ValidationError:
    return ValidationError(code=FORBIDDEN, message="Access denied")


def _invalid_role(role: str) -> ValidationError:
    return ValidationError(
        code="invalid_value",
        message=f"Role must be one of: {', '.join(ROLES)}",
        field="role",
    )


def run_login(
    inp: LoginInput, user_repo: UserRepoPort, auth_adapter: AuthAdapterPort
) -> AuthOutput:
    user = user_repo.get_by_email(inp.email.strip().lower())
    if not user:
        return AuthOutput(success=False, error="Invalid credentials")

    if not auth_adapter.verify_password(inp.password, user.password_hash):
        return AuthOutput(success=False, error="Invalid credentials")

    return AuthOutput(user=user, success=True)


def run_create_user(
    inp: CreateUserInput,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
    password_min_length: int = 8,
) -> UserOutput:
    """Create an account. Used by the CLI to bootstrap the first admin."""
    email = inp.email.strip().lower()
    errors: list[ValidationError] = []

    if "@" not in email:
        errors.append(
            ValidationError(code="invalid_email", message="Invalid email address", field="email")
        )
    if inp.role not in ROLES:
        errors.append(_invalid_role(inp.role))
    if len(inp.password) < password_min_length:
        errors.append(
            ValidationError(
                code="min_length",
                message=f"Password must be at least {password_min_length} characters",
                field="password",
            )
        )
    if not errors and user_repo.get_by_email(email):
        errors.append(
            ValidationError(code="email_exists", message="Email already in use", field="email")
        )
    if errors:
        return UserOutput(errors=errors, success=False)

    now = time.now_utc()
    new_user = User(
        email=email,
        name=inp.name or email.split("@")[0],
        password_hash=auth_adapter.hash_password(inp.password),
        role=cast(RoleType, inp.role),
        created_at=now,
        updated_at=now,
    )
    user_repo.save(new_user)
    logger.info("Created user %s with role %s", new_user.id, new_user.role)
    return UserOutput(user=new_user, success=True)


def run_update_role(
    inp: UpdateUserRoleInput,
    user_repo: UserRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> UserOutput:
    if not policy.can_manage_users(inp.actor):
        return UserOutput(errors=[_access_denied()], success=False)

    if inp.new_role not in ROLES:
        return UserOutput(errors=[_invalid_role(inp.new_role)], success=False)

    target = user_repo.get_by_id(inp.target_id)
    if not target:
        return UserOutput(errors=[not_found("User")], success=False)

    # Self-lockout check
    if target.id == inp.actor.id and inp.new_role != target.role:
        return UserOutput(
            errors=[
                ValidationError(
                    code="self_lockout",
                    message="You cannot change your own role",
                    field="role",
                )
            ],
            success=False,
        )

    target.role = cast(RoleType, inp.new_role)
    target.updated_at = time.now_utc()
    user_repo.save(target)
    logger.info("User %s role set to %s by %s", target.id, target.role, inp.actor.id)
    return UserOutput(user=target, success=True)


def run_delete_user(
    inp: DeleteUserInput,
    user_repo: UserRepoPort,
    policy: PolicyEngine,
) -> UserOutput:
    if not policy.can_manage_users(inp.actor):
        return UserOutput(errors=[_access_denied()], success=False)

    if inp.target_id == inp.actor.id:
        return UserOutput(
            errors=[
                ValidationError(code="self_delete", message="You cannot delete your own account")
            ],
            success=False,
        )

    target = user_repo.get_by_id(inp.target_id)
    if not target:
        return UserOutput(errors=[not_found("User")], success=False)

    user_repo.delete(target.id)
    logger.info("User %s deleted by %s", target.id, inp.actor.id)
    return UserOutput(user=target, success=True)


def run_list_users(
    inp: ListUsersInput, user_repo: UserRepoPort, policy: PolicyEngine
) -> UserListOutput:
    if not policy.can_manage_users(inp.actor):
        return UserListOutput(users=[], errors=[_access_denied()], success=False)

    return UserListOutput(users=user_repo.list_all(), success=True)
