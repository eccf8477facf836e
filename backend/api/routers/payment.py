"""Payment router: checkout order, signature verification, history"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories import (
    SqlUnitOfWork, SqlUserRepository, SqlPaymentRepository, SqlEnrollmentRepository,
    SqlCenterRepository, SqlReferralRepository, SqlNotificationRepository,
)
from infrastructure.payment.razorpay_gateway import generate_receipt
from application.ports.payment_gateway import PaymentGatewayPort
from application.use_cases.confirm_enrollment import ConfirmEnrollmentUseCase, ConfirmEnrollmentInput
from domain.exceptions import CenterNotFoundError, InvalidFieldError
from api.schemas.payment import (
    PlanInfo, PlansResponse, CreateOrderRequest, CreateOrderResponse,
    VerifyPaymentRequest, VerifyPaymentResponse, PaymentHistoryItem, PaymentHistoryResponse,
)
from api.dependencies import get_current_active_user, get_payment_gateway

router = APIRouter(prefix="/api/payment", tags=["Payments"])


@router.get("/plans", response_model=PlansResponse)
async def get_plans():
    plans = [PlanInfo(key=key, name=info["name"], price=info["price"], installments=info["installments"])
             for key, info in settings.ENROLLMENT_PLANS.items()]
    return PlansResponse(plans=plans)


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(request: CreateOrderRequest,
                       current_user: User = Depends(get_current_active_user),
                       gateway: PaymentGatewayPort = Depends(get_payment_gateway),
                       session: AsyncSession = Depends(get_session)):
    plan = settings.ENROLLMENT_PLANS.get(request.plan)
    if plan is None:
        raise InvalidFieldError(f"Unknown plan: {request.plan}")
    if request.amount != plan["price"]:
        raise InvalidFieldError(f"Amount for plan {request.plan} must be {plan['price']}")
    if await SqlCenterRepository(session).get_by_id(request.center_id) is None:
        raise CenterNotFoundError(request.center_id)
    if request.referral_id is not None:
        referrals = await SqlReferralRepository(session).list_by_user(current_user.id)
        if request.referral_id not in {r["id"] for r in referrals}:
            raise InvalidFieldError("Unknown referral_id for this user")

    order = await gateway.create_order(
        amount=request.amount, currency=request.currency, receipt=generate_receipt(),
        notes={"user_id": current_user.id, "center_id": request.center_id, "plan": request.plan,
               "type": "first_installment", "referral_id": request.referral_id})

    await SqlPaymentRepository(session).create(
        user_id=current_user.id, order_id=order["id"], amount=request.amount,
        currency=request.currency, center_id=request.center_id, emi_plan=request.plan)
    logger.info(f"Order created: {order['id']} user={current_user.id} amount={request.amount}")

    return CreateOrderResponse(order_id=order["id"], amount=order.get("amount", request.amount),
                               currency=order.get("currency", request.currency),
                               key_id=settings.RAZORPAY_KEY_ID)


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(request: VerifyPaymentRequest,
                         gateway: PaymentGatewayPort = Depends(get_payment_gateway),
                         session: AsyncSession = Depends(get_session)):
    use_case = ConfirmEnrollmentUseCase(
        gateway=gateway,
        payment_repo=SqlPaymentRepository(session),
        enrollment_repo=SqlEnrollmentRepository(session),
        user_repo=SqlUserRepository(session),
        center_repo=SqlCenterRepository(session),
        notification_repo=SqlNotificationRepository(session),
        uow=SqlUnitOfWork(session),
    )
    result = await use_case.execute(ConfirmEnrollmentInput(
        order_id=request.razorpay_order_id, payment_id=request.razorpay_payment_id,
        signature=request.razorpay_signature, user_id=request.user_id,
        center_id=request.center_id, plan=request.plan))
    return VerifyPaymentResponse(message=result.message, enrollment_status=result.enrollment_status,
                                 enrollment_id=result.enrollment_id,
                                 already_processed=result.already_processed)


@router.get("/history", response_model=PaymentHistoryResponse)
async def get_payment_history(current_user: User = Depends(get_current_active_user),
                              session: AsyncSession = Depends(get_session)):
    payments = await SqlPaymentRepository(session).list_by_user(current_user.id)
    items = [PaymentHistoryItem(id=p.id, order_id=p.order_id, amount=p.amount, currency=p.currency,
                                status=p.status, emi_plan=p.emi_plan, center_id=p.center_id,
                                created_at=p.created_at, paid_at=p.paid_at)
             for p in payments]
    return PaymentHistoryResponse(success=True, items=items, total=len(items))
