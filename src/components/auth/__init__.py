"""
Auth component - Authentication and user management.

Handles login and administration of user accounts and roles.
"""

from .component import (
    FORBIDDEN,
    run_create_user,
    run_delete_user,
    run_list_users,
    run_login,
    run_update_role,
)
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
from .ports import AuthAdapterPort, UserRepoPort

__all__ = [
    # Entry points
    "run_create_user",
    "run_delete_user",
    "run_list_users",
    "run_login",
    "run_update_role",
    "FORBIDDEN",
    # Models
    "AuthOutput",
    "CreateUserInput",
    "DeleteUserInput",
    "ListUsersInput",
    "LoginInput",
    "UpdateUserRoleInput",
    "UserListOutput",
    "UserOutput",
    # Ports
    "AuthAdapterPort",
    "UserRepoPort",
]
