"""
FastAPI dependencies (Depends)

Shared by every router.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories.user_repository import to_entity
from infrastructure.auth.jwt_service import decode_token
from infrastructure.payment.razorpay_gateway import RazorpayGateway
from application.ports.payment_gateway import PaymentGatewayPort

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    """Return the authenticated user"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication credentials.",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = credentials.credentials
    payload = decode_token(token)

    if payload is None or payload.get("type") != "access":
        raise credentials_exception

    user_id_raw = payload.get("sub")
    if user_id_raw is None:
        raise credentials_exception
    try:
        user_id = int(user_id_raw)
    except (ValueError, TypeError):
        raise credentials_exception

    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="Account is disabled.")
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="Account is disabled.")
    return current_user


def require_role(*roles: str):
    """Dependency factory: the current user must hold one of ``roles`` (403 otherwise)"""

    async def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        to_entity(current_user).require_role(*roles)
        return current_user

    return dependency


get_admin_user = require_role("admin")


def get_payment_gateway() -> PaymentGatewayPort:
    return RazorpayGateway()
