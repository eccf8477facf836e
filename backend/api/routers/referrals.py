"""Referral router"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories import SqlCenterRepository, SqlReferralRepository
from domain.exceptions import ReferralNotFoundError
from api.schemas.center import ReferralRequest, ReferralResponse, ReferralItem, ReferralListResponse
from api.dependencies import get_current_active_user

router = APIRouter(prefix="/api/referrals", tags=["Referrals"])


@router.post("", response_model=ReferralResponse, status_code=status.HTTP_201_CREATED)
async def create_referral(request: ReferralRequest,
                          current_user: User = Depends(get_current_active_user),
                          session: AsyncSession = Depends(get_session)):
    center = await SqlCenterRepository(session).get_by_referral_code(request.referral_code)
    if center is None:
        raise ReferralNotFoundError(request.referral_code)
    referral_id = await SqlReferralRepository(session).create(current_user.id, center.id, center.referral_code)
    logger.info(f"Referral {referral_id}: user={current_user.id} via {center.referral_code}")
    return ReferralResponse(success=True, referral_id=referral_id, center_id=center.id, status="pending")


@router.get("", response_model=ReferralListResponse)
async def list_referrals(current_user: User = Depends(get_current_active_user),
                         session: AsyncSession = Depends(get_session)):
    rows = await SqlReferralRepository(session).list_by_user(current_user.id)
    return ReferralListResponse(success=True, items=[ReferralItem(**row) for row in rows])
