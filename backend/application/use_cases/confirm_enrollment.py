"""Payment confirmation -> enrollment use case"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from domain.enums import SubscriptionPlan, EnrollmentStatus, NotificationType
from domain.entities.notification import NotificationDraft
from domain.exceptions import (
    DomainError, InvalidSignatureError, PaymentNotFoundError, PaymentOwnershipError,
    CenterNotFoundError, EnrollmentWriteError, InvalidFieldError,
)
from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.payment_repository import PaymentRepository, EnrollmentRepository
from application.ports.user_repository import UserRepository
from application.ports.center_repository import CenterRepository
from application.ports.notification_repository import NotificationRepository
from application.ports.unit_of_work import UnitOfWork


@dataclass
class ConfirmEnrollmentInput:
    order_id: str
    payment_id: str
    signature: str
    user_id: int
    center_id: int
    plan: str


@dataclass
class ConfirmEnrollmentOutput:
    enrollment_id: int
    enrollment_status: str
    already_processed: bool = False

    @property
    def message(self) -> str:
        if self.already_processed:
            return "Payment already verified"
        return "Payment verified successfully"


class ConfirmEnrollmentUseCase:
    """
    Verify a checkout signature and apply the enrollment as one unit.

    The three writes (payment completed, enrollment created, user upgraded)
    share one transaction: any failure rolls all of them back. The payment
    transition is conditional on the payment not being completed yet, so a
    replayed confirmation finds the existing enrollment instead of creating
    a second one.
    """

    def __init__(
        self,
        gateway: PaymentGatewayPort,
        payment_repo: PaymentRepository,
        enrollment_repo: EnrollmentRepository,
        user_repo: UserRepository,
        center_repo: CenterRepository,
        notification_repo: NotificationRepository,
        uow: UnitOfWork,
    ):
        self._gateway = gateway
        self._payment_repo = payment_repo
        self._enrollment_repo = enrollment_repo
        self._user_repo = user_repo
        self._center_repo = center_repo
        self._notification_repo = notification_repo
        self._uow = uow

    async def execute(self, input: ConfirmEnrollmentInput) -> ConfirmEnrollmentOutput:
        # 1. Authenticity; nothing is read or written before this passes
        if not self._gateway.verify_payment_signature(input.order_id, input.payment_id, input.signature):
            logger.warning(f"Payment signature mismatch: order={input.order_id}")
            raise InvalidSignatureError()

        # 2. Preconditions
        payment = await self._payment_repo.get_by_order_id(input.order_id)
        if payment is None:
            raise PaymentNotFoundError(input.order_id)
        if not payment.belongs_to(input.user_id):
            raise PaymentOwnershipError()
        if not payment.covers(input.center_id, input.plan):
            logger.warning(f"Confirmation does not match order {input.order_id}: "
                           f"center={input.center_id} plan={input.plan}")
            raise InvalidFieldError("center_id and plan must match the order.")

        center = await self._center_repo.get_by_id(input.center_id)
        if center is None:
            raise CenterNotFoundError(input.center_id)

        # 3. Writes, all or nothing
        try:
            transitioned = await self._payment_repo.mark_completed(
                input.order_id, input.payment_id, input.signature)

            if not transitioned:
                existing = await self._enrollment_repo.get_by_order_id(input.order_id)
                if existing is not None:
                    await self._uow.rollback()
                    logger.info(f"Duplicate confirmation ignored: order={input.order_id}")
                    return ConfirmEnrollmentOutput(enrollment_id=existing.id,
                                                   enrollment_status=existing.status,
                                                   already_processed=True)

            enrollment = await self._enrollment_repo.create(
                user_id=input.user_id, center_id=input.center_id, order_id=input.order_id,
                emi_plan=input.plan, status=EnrollmentStatus.ACTIVE.value)

            await self._user_repo.upgrade_subscription(
                input.user_id, SubscriptionPlan.PREMIUM.value, input.center_id)

            if center.owner_user_id:
                await self._notification_repo.insert_many([NotificationDraft(
                    user_id=center.owner_user_id,
                    title="New enrollment",
                    message=f"A student enrolled at {center.name} on the {input.plan} plan.",
                    type=NotificationType.SUCCESS.value,
                )])

            await self._uow.commit()
        except DomainError:
            await self._uow.rollback()
            raise
        except Exception as e:
            await self._uow.rollback()
            logger.error(f"Enrollment write failed for order {input.order_id}: {e}")
            raise EnrollmentWriteError(str(e)) from e

        logger.info(f"Enrollment created: user={input.user_id} center={input.center_id} "
                    f"order={input.order_id} plan={input.plan}")
        return ConfirmEnrollmentOutput(enrollment_id=enrollment.id,
                                       enrollment_status=enrollment.status)
