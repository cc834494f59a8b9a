import logging
from typing import Annotated, Any, Literal, cast

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.auth_utils import COOKIE_NAME
from src.api.deps import get_auth_adapter, get_current_user, get_rules, get_user_repo
from src.components.auth import LoginInput, run_login
from src.domain.entities import User
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


class Token(BaseModel):
    access_token: str
    token_type: str


@router.post("/login", response_model=Token)
def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate with email (`username`) and password; sets the session cookie."""
    result = run_login(
        LoginInput(email=form_data.username, password=form_data.password),
        user_repo=user_repo,
        auth_adapter=auth_adapter,
    )
    if not result.success or result.user is None:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error or "Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    ttl_minutes = rules.auth.session_ttl_minutes
    access_token = auth_adapter.create_token(result.user.id, ttl_minutes)

    # Set HttpOnly Cookie
    response.set_cookie(
        key=COOKIE_NAME,
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=ttl_minutes * 60,
        expires=ttl_minutes * 60,
        samesite=cast(Literal["lax", "strict", "none"], rules.auth.cookie.same_site),
        secure=rules.auth.cookie.secure,
    )

    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
def logout(response: Response) -> dict[str, bool]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key=COOKIE_NAME)
    return {"success": True}


@router.get("/me")
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Get current user info."""
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "name": current_user.name,
        "role": current_user.role,
    }
