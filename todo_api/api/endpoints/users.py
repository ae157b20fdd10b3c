"""
User endpoints - registration, login/logout and the caller's own profile.
Challenge: Secure auth, validation, clear status codes.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, File, Response, UploadFile, status

from todo_api.config import get_settings
from todo_api.core.dependencies import Credentials, CurrentIdentity, CurrentUser, Sessions
from todo_api.core.exceptions import ValidationError
from todo_api.schemas.user import AuthResponse, LoginRequest, UserCreate, UserResponse

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


@router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, credentials: Credentials, sessions: Sessions):
    """Create a user and open their first session."""
    user = await credentials.create(data.name, data.email, data.password)
    token = await sessions.issue(user.id)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, credentials: Credentials, sessions: Sessions):
    """Open a new session. Other sessions of the same user stay valid."""
    user = await credentials.find_by_credentials(data.email, data.password)
    token = await sessions.issue(user.id)
    logger.info("User id=%s logged in", user.id)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/logout")
async def logout(identity: CurrentIdentity, sessions: Sessions):
    """End exactly the session the request was made with."""
    await sessions.revoke(identity.token)
    return Response(status_code=status.HTTP_200_OK)


@router.post("/logoutAll")
async def logout_all(user: CurrentUser, sessions: Sessions):
    """End every session of the caller."""
    await sessions.revoke_all(user.id)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/me", response_model=UserResponse)
async def read_me(user: CurrentUser):
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    user: CurrentUser,
    credentials: Credentials,
    changes: Annotated[dict[str, Any], Body()],
):
    """Update name, email and/or password. Any other key is rejected as a whole."""
    user = await credentials.update_profile(user, changes)
    return UserResponse.model_validate(user)


@router.delete("/me", response_model=UserResponse)
async def delete_me(user: CurrentUser, credentials: Credentials):
    """Delete the account together with its sessions and todos."""
    snapshot = UserResponse.model_validate(user)
    await credentials.delete(user)
    return snapshot


@router.post("/me/avatar")
async def upload_avatar(
    user: CurrentUser,
    credentials: Credentials,
    avatar: Annotated[UploadFile | None, File()] = None,
):
    """Store the multipart "avatar" file (PNG or JPEG) as the caller's avatar."""
    if avatar is None:
        raise ValidationError("Please upload an image")
    # One byte past the cap is enough to know the upload is too large
    data = await avatar.read(settings.avatar_max_bytes + 1)
    await credentials.set_avatar(user, data, avatar.content_type)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/me/avatar")
async def delete_avatar(user: CurrentUser, credentials: Credentials):
    await credentials.clear_avatar(user)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/{user_id}/avatar")
async def read_avatar(user_id: int, credentials: Credentials):
    """Public avatar fetch. Missing user and missing avatar are both 404."""
    content, media_type = await credentials.get_avatar(user_id)
    return Response(content=content, media_type=media_type)
