from uuid import UUID

from fastapi import APIRouter, Depends

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import get_clock, get_current_user, get_policy, get_user_repo
from src.api.errors import raise_for_errors
from src.api.schemas import RoleUpdateRequest, SuccessResponse, UserResponse
from src.components.auth import (
    DeleteUserInput,
    ListUsersInput,
    UpdateUserRoleInput,
    run_delete_user,
    run_list_users,
    run_update_role,
)
from src.domain.entities import User
from src.domain.policy import PolicyEngine

router = APIRouter()


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[UserResponse]:
    """List all users (admin only)."""
    result = run_list_users(ListUsersInput(actor=current_user), user_repo=user_repo, policy=policy)
    if not result.success:
        raise_for_errors(result.errors)

    return [UserResponse.model_validate(u) for u in result.users]


@router.patch("/{user_id}", response_model=UserResponse)
def update_user_role(
    user_id: UUID,
    req: RoleUpdateRequest,
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> UserResponse:
    """Change a user's role (admin only)."""
    inp = UpdateUserRoleInput(actor=current_user, target_id=user_id, new_role=req.role)
    result = run_update_role(inp, user_repo=user_repo, policy=policy, time=clock)
    if not result.success or result.user is None:
        raise_for_errors(result.errors)

    return UserResponse.model_validate(result.user)


@router.delete("/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> SuccessResponse:
    """Delete a user account (admin only, never one's own)."""
    result = run_delete_user(
        DeleteUserInput(actor=current_user, target_id=user_id),
        user_repo=user_repo,
        policy=policy,
    )
    if not result.success:
        raise_for_errors(result.errors)

    return SuccessResponse()
