"""Center and referral repositories"""
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import select, update, or_, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.center_repository import CenterRepository, ReferralRepository
from domain.entities.center import CenterEntity
from domain.enums import ReferralStatus
from domain.exceptions import DuplicateCenterError
from infrastructure.persistence.models.center import Center
from infrastructure.persistence.models.referral import Referral


def to_entity(c: Center) -> CenterEntity:
    return CenterEntity(id=c.id, name=c.name, city=c.city, referral_code=c.referral_code,
                        verified=c.verified, owner_user_id=c.owner_user_id, upi_id=c.upi_id,
                        email=c.email, phone=c.phone)


class SqlCenterRepository(CenterRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, center_id: int) -> Optional[CenterEntity]:
        center = await self._session.get(Center, center_id)
        return to_entity(center) if center else None

    async def get_by_referral_code(self, referral_code: str) -> Optional[CenterEntity]:
        result = await self._session.execute(
            select(Center).where(Center.referral_code == referral_code.upper()))
        center = result.scalar_one_or_none()
        return to_entity(center) if center else None

    async def exists_with_contact(self, email: str, phone: str) -> bool:
        result = await self._session.execute(
            select(Center.id).where(or_(Center.email == email, Center.phone == phone)).limit(1))
        return result.scalar_one_or_none() is not None

    async def referral_code_taken(self, referral_code: str) -> bool:
        result = await self._session.execute(
            select(Center.id).where(Center.referral_code == referral_code).limit(1))
        return result.scalar_one_or_none() is not None

    async def create(self, data: Dict[str, Any]) -> CenterEntity:
        center = Center(**data)
        self._session.add(center)
        try:
            await self._session.flush()
        except IntegrityError:
            # lost a race on email, phone or referral code
            raise DuplicateCenterError("Center with this information already exists")
        return to_entity(center)

    async def list_verified(self, city: Optional[str] = None) -> List[CenterEntity]:
        stmt = select(Center).where(Center.verified.is_(True)).order_by(Center.name)
        if city:
            stmt = stmt.where(Center.city == city.lower())
        result = await self._session.execute(stmt)
        return [to_entity(c) for c in result.scalars().all()]

    async def list_pending(self) -> List[CenterEntity]:
        result = await self._session.execute(
            select(Center).where(Center.verified.is_(False)).order_by(Center.created_at))
        return [to_entity(c) for c in result.scalars().all()]

    async def mark_verified(self, center_id: int) -> Optional[CenterEntity]:
        center = await self._session.get(Center, center_id)
        if center is None:
            return None
        center.verified = True
        center.updated_at = datetime.utcnow()
        await self._session.flush()
        return to_entity(center)


class SqlReferralRepository(ReferralRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, user_id: int, center_id: int, referral_code: str) -> int:
        referral = Referral(user_id=user_id, center_id=center_id, referral_code=referral_code,
                            status=ReferralStatus.PENDING)
        self._session.add(referral)
        await self._session.flush()
        return referral.id

    async def get_status(self, referral_id: int) -> Optional[str]:
        result = await self._session.execute(select(Referral.status).where(Referral.id == referral_id))
        status = result.scalar_one_or_none()
        return status.value if status else None

    async def mark_paid(self, referral_id: int) -> bool:
        result = await self._session.execute(
            update(Referral)
            .where(Referral.id == referral_id, Referral.status == ReferralStatus.PENDING)
            .values(status=ReferralStatus.PAID, paid_at=datetime.utcnow())
            .execution_options(synchronize_session=False))
        return result.rowcount > 0

    async def list_by_user(self, user_id: int) -> List[Dict[str, Any]]:
        result = await self._session.execute(
            select(Referral).where(Referral.user_id == user_id).order_by(desc(Referral.created_at)))
        return [{"id": r.id, "center_id": r.center_id, "referral_code": r.referral_code,
                 "status": r.status.value, "created_at": r.created_at, "paid_at": r.paid_at}
                for r in result.scalars().all()]
