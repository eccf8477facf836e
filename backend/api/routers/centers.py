"""Center onboarding, approval and payouts"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories import (
    SqlCenterRepository, SqlUserRepository, SqlNotificationRepository,
)
from application.ports.payment_gateway import PaymentGatewayPort
from application.use_cases.register_center import RegisterCenterUseCase, RegisterCenterInput
from application.use_cases.approve_center import ApproveCenterUseCase
from domain.exceptions import CenterNotFoundError
from api.schemas.center import (
    CenterRegisterRequest, CenterRegisterResponse, CenterSummary, CenterItem, CenterListResponse,
    PayoutRequest, PayoutResponse,
)
from api.dependencies import get_current_active_user, get_admin_user, get_payment_gateway

router = APIRouter(prefix="/api/centers", tags=["Centers"])


def to_item(center) -> CenterItem:
    return CenterItem(id=center.id, name=center.name, city=center.city,
                      referral_code=center.referral_code, verified=center.verified)


@router.post("/register", response_model=CenterRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_center(request: CenterRegisterRequest,
                          current_user: User = Depends(get_current_active_user),
                          session: AsyncSession = Depends(get_session)):
    use_case = RegisterCenterUseCase(SqlCenterRepository(session),
                                     referral_code_attempts=settings.REFERRAL_CODE_ATTEMPTS,
                                     default_capacity=settings.CENTER_DEFAULT_CAPACITY)
    center = await use_case.execute(RegisterCenterInput(**request.model_dump(), owner_user_id=current_user.id))
    return CenterRegisterResponse(
        success=True,
        message="Center registered successfully! Awaiting admin approval.",
        center=CenterSummary(id=center.id, name=center.name, referral_code=center.referral_code,
                             city=center.city, status="pending_approval"))


@router.get("", response_model=CenterListResponse)
async def list_centers(city: Optional[str] = Query(None), session: AsyncSession = Depends(get_session)):
    centers = await SqlCenterRepository(session).list_verified(city)
    return CenterListResponse(success=True, items=[to_item(c) for c in centers], total=len(centers))


@router.get("/pending", response_model=CenterListResponse)
async def list_pending_centers(admin: User = Depends(get_admin_user),
                               session: AsyncSession = Depends(get_session)):
    centers = await SqlCenterRepository(session).list_pending()
    return CenterListResponse(success=True, items=[to_item(c) for c in centers], total=len(centers))


@router.post("/{center_id}/approve", response_model=CenterListResponse)
async def approve_center(center_id: int,
                         admin: User = Depends(get_admin_user),
                         session: AsyncSession = Depends(get_session)):
    use_case = ApproveCenterUseCase(SqlCenterRepository(session), SqlUserRepository(session),
                                    SqlNotificationRepository(session))
    center = await use_case.execute(center_id)
    logger.info(f"Center {center.id} approved by admin {admin.id}")
    return CenterListResponse(success=True, message="Center approved", items=[to_item(center)], total=1)


@router.post("/payouts", response_model=PayoutResponse)
async def initiate_payout(request: PayoutRequest,
                          admin: User = Depends(get_admin_user),
                          gateway: PaymentGatewayPort = Depends(get_payment_gateway),
                          session: AsyncSession = Depends(get_session)):
    center = await SqlCenterRepository(session).get_by_id(request.centre_id)
    if center is None or not center.upi_id:
        logger.error(f"Payout refused: centre {request.centre_id} missing or without fund account")
        raise CenterNotFoundError(request.centre_id)

    payout = await gateway.create_payout(
        fund_account_id=center.upi_id, amount=round(request.amount * 100),
        notes={"centre_id": center.id, "admin_user_id": admin.id})
    logger.info(f"Payout initiated: centre={center.id} amount={request.amount} id={payout.get('id')}")
    return PayoutResponse(message="Payout initiated successfully.", payout=payout)
