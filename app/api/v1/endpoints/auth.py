from typing import List, Optional

from fastapi import APIRouter, Header

from app.core.common_deps import AdminUserDep, AuthServiceDep, CurrentUserDep
from app.schemas.responses import (
    CurrentUserResponse,
    MessageResponse,
    UserRegistrationResponse,
)
from app.schemas.user import (
    LoginRequest,
    RefreshRequest,
    SessionInfo,
    TokenPair,
    UserCreate,
)

router = APIRouter()


@router.post("/login", response_model=TokenPair)
async def login(
    login_data: LoginRequest,
    service: AuthServiceDep,
    user_agent: Optional[str] = Header(None),
):
    return await service.login(login_data, user_agent)


@router.post("/refresh", response_model=TokenPair)
async def refresh_token(
    refresh_data: RefreshRequest,
    service: AuthServiceDep,
    user_agent: Optional[str] = Header(None),
):
    return await service.refresh(refresh_data.refresh_token, user_agent)


@router.post("/logout", response_model=MessageResponse)
async def logout(refresh_data: RefreshRequest, service: AuthServiceDep):
    await service.logout(refresh_data.refresh_token)
    return MessageResponse(message="Logged out successfully")


@router.get("/sessions", response_model=List[SessionInfo])
async def get_sessions(service: AuthServiceDep, current_user: CurrentUserDep):
    return await service.list_sessions(current_user)


@router.post("/register", response_model=UserRegistrationResponse)
async def register(
    user_data: UserCreate,
    service: AuthServiceDep,
    current_user: AdminUserDep,
):
    new_user = await service.create_user(user_data)
    return UserRegistrationResponse(
        message="User created successfully", user_id=new_user.id
    )


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(current_user: CurrentUserDep):
    return CurrentUserResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        role=current_user.role.value,
        is_active=current_user.is_active,
    )
