"""Payment and enrollment repositories"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.payment_repository import PaymentRepository, EnrollmentRepository
from domain.entities.payment import PaymentEntity, EnrollmentEntity
from domain.enums import PaymentStatus, EnrollmentStatus
from infrastructure.persistence.models.payment import Payment
from infrastructure.persistence.models.enrollment import Enrollment


def to_payment_entity(p: Payment) -> PaymentEntity:
    return PaymentEntity(id=p.id, user_id=p.user_id, order_id=p.order_id, amount=p.amount,
                         currency=p.currency, status=p.status.value, center_id=p.center_id,
                         emi_plan=p.emi_plan, payment_id=p.payment_id,
                         created_at=p.created_at, paid_at=p.paid_at)


def to_enrollment_entity(e: Enrollment) -> EnrollmentEntity:
    return EnrollmentEntity(id=e.id, user_id=e.user_id, center_id=e.center_id, order_id=e.order_id,
                            emi_plan=e.emi_plan, status=e.status.value,
                            enrolled_at=e.enrolled_at, exam_date=e.exam_date)


class SqlPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, user_id: int, order_id: str, amount: int, currency: str,
                     center_id: int, emi_plan: str) -> PaymentEntity:
        payment = Payment(user_id=user_id, order_id=order_id, amount=amount, currency=currency,
                          center_id=center_id, emi_plan=emi_plan, status=PaymentStatus.PENDING)
        self._session.add(payment)
        await self._session.flush()
        return to_payment_entity(payment)

    async def get_by_order_id(self, order_id: str) -> Optional[PaymentEntity]:
        result = await self._session.execute(select(Payment).where(Payment.order_id == order_id))
        payment = result.scalar_one_or_none()
        return to_payment_entity(payment) if payment else None

    async def mark_completed(self, order_id: str, payment_id: str, signature: str) -> bool:
        now = datetime.utcnow()
        result = await self._session.execute(
            update(Payment)
            .where(Payment.order_id == order_id, Payment.status != PaymentStatus.COMPLETED)
            .values(status=PaymentStatus.COMPLETED, payment_id=payment_id, signature=signature,
                    paid_at=now, updated_at=now)
            .execution_options(synchronize_session=False))
        return result.rowcount > 0

    async def list_by_user(self, user_id: int) -> List[PaymentEntity]:
        result = await self._session.execute(
            select(Payment).where(Payment.user_id == user_id).order_by(desc(Payment.created_at)))
        return [to_payment_entity(p) for p in result.scalars().all()]


class SqlEnrollmentRepository(EnrollmentRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_order_id(self, order_id: str) -> Optional[EnrollmentEntity]:
        result = await self._session.execute(select(Enrollment).where(Enrollment.order_id == order_id))
        enrollment = result.scalar_one_or_none()
        return to_enrollment_entity(enrollment) if enrollment else None

    async def create(self, user_id: int, center_id: int, order_id: str,
                     emi_plan: str, status: str = "active") -> EnrollmentEntity:
        enrollment = Enrollment(user_id=user_id, center_id=center_id, order_id=order_id,
                                emi_plan=emi_plan, status=EnrollmentStatus(status),
                                enrolled_at=datetime.utcnow(), exam_date=None)
        self._session.add(enrollment)
        await self._session.flush()
        return to_enrollment_entity(enrollment)
