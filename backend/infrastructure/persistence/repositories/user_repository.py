"""User repository"""
from datetime import datetime
from typing import Optional, List, Iterable

from sqlalchemy import select, update, exists, and_
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.user_repository import UserRepository
from domain.entities.user import UserEntity
from domain.entities.notification import RecipientFilter
from domain.enums import UserRole, SubscriptionPlan, EnrollmentStatus
from infrastructure.persistence.models.user import User
from infrastructure.persistence.models.enrollment import Enrollment


def to_entity(user: User) -> UserEntity:
    return UserEntity(
        id=user.id, email=user.email, name=user.name,
        role=user.role.value, subscription_plan=user.subscription_plan.value,
        is_active=user.is_active, center_id=user.center_id,
        phone=user.phone, city=user.city,
        password_hash=user.password_hash, last_login_at=user.last_login_at,
    )


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        user = await self._session.get(User, user_id)
        return to_entity(user) if user else None

    async def get_by_email(self, email: str) -> Optional[UserEntity]:
        result = await self._session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        return to_entity(user) if user else None

    async def create(self, email: str, password_hash: str, name: str,
                     phone: Optional[str] = None, city: Optional[str] = None) -> UserEntity:
        user = User(email=email, password_hash=password_hash, name=name, phone=phone, city=city,
                    role=UserRole.STUDENT, subscription_plan=SubscriptionPlan.FREE)
        self._session.add(user)
        await self._session.flush()
        return to_entity(user)

    async def update_last_login(self, user_id: int) -> None:
        await self._session.execute(
            update(User).where(User.id == user_id).values(last_login_at=datetime.utcnow()))

    async def upgrade_subscription(self, user_id: int, plan: str, center_id: int) -> bool:
        result = await self._session.execute(
            update(User).where(User.id == user_id).values(
                subscription_plan=SubscriptionPlan(plan), center_id=center_id,
                updated_at=datetime.utcnow()))
        return result.rowcount > 0

    async def set_role(self, user_id: int, role: str) -> None:
        await self._session.execute(
            update(User).where(User.id == user_id).values(role=UserRole(role), updated_at=datetime.utcnow()))

    async def list_all_ids(self) -> List[int]:
        result = await self._session.execute(select(User.id).order_by(User.id))
        return list(result.scalars().all())

    async def existing_ids(self, user_ids: Iterable[int]) -> List[int]:
        wanted = list(user_ids)
        if not wanted:
            return []
        result = await self._session.execute(select(User.id).where(User.id.in_(wanted)))
        found = set(result.scalars().all())
        return [uid for uid in wanted if uid in found]

    async def find_ids(self, criteria: RecipientFilter) -> List[int]:
        """Single query: plan and city on users, enrollment status via EXISTS"""
        conditions = []
        if criteria.subscription_plan:
            conditions.append(User.subscription_plan == SubscriptionPlan(criteria.subscription_plan))
        if criteria.city:
            conditions.append(User.city == criteria.city)
        if criteria.enrollment_status:
            conditions.append(exists().where(and_(
                Enrollment.user_id == User.id,
                Enrollment.status == EnrollmentStatus(criteria.enrollment_status))))
        stmt = select(User.id).order_by(User.id)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
