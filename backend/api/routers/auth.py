"""Account router"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories import SqlUserRepository
from infrastructure.auth.password_service import hash_password, verify_password
from infrastructure.auth.jwt_service import create_access_token, create_refresh_token
from application.use_cases.login import LoginUseCase, LoginInput, RegisterUseCase, RegisterInput
from api.schemas.common import ResponseBase
from api.schemas.auth import UserRegisterRequest, UserLoginRequest, TokenResponse, UserResponse
from api.dependencies import get_current_active_user

router = APIRouter(prefix="/api/auth", tags=["Accounts"])


@router.post("/register", response_model=ResponseBase, status_code=status.HTTP_201_CREATED)
async def register(request: UserRegisterRequest, session: AsyncSession = Depends(get_session)):
    use_case = RegisterUseCase(SqlUserRepository(session), hash_password)
    await use_case.execute(RegisterInput(email=request.email, password=request.password,
                                         name=request.name, phone=request.phone, city=request.city))
    return ResponseBase(success=True, message="Registration successful")


@router.post("/login", response_model=TokenResponse)
async def login(request: UserLoginRequest, session: AsyncSession = Depends(get_session)):
    use_case = LoginUseCase(SqlUserRepository(session), verify_password)
    result = await use_case.execute(LoginInput(email=request.email, password=request.password))

    access_token = create_access_token({"sub": result.user_id, "role": result.role})
    refresh_token = create_refresh_token({"sub": result.user_id})
    logger.info(f"Login: {result.email}")
    return TokenResponse(access_token=access_token, refresh_token=refresh_token,
                         expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_active_user)):
    return UserResponse(
        id=current_user.id, email=current_user.email, name=current_user.name,
        phone=current_user.phone, city=current_user.city,
        role=current_user.role.value, subscription_plan=current_user.subscription_plan.value,
        center_id=current_user.center_id, created_at=current_user.created_at)
