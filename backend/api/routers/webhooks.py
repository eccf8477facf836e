"""Inbound webhooks: Razorpay events and Typeform enquiries"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from infrastructure.persistence.database import get_session
from infrastructure.persistence.repositories import (
    SqlUnitOfWork, SqlReferralRepository, SqlEnquiryRepository,
)
from application.ports.payment_gateway import PaymentGatewayPort
from application.use_cases.ingest_gateway_webhook import IngestGatewayWebhookUseCase
from application.use_cases.ingest_form_webhook import IngestFormWebhookUseCase
from api.dependencies import get_payment_gateway

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


@router.post("/razorpay")
async def razorpay_webhook(request: Request,
                           gateway: PaymentGatewayPort = Depends(get_payment_gateway),
                           session: AsyncSession = Depends(get_session)):
    """
    Razorpay event sink.

    The signature covers the exact bytes sent, so the body is read raw.
    Events that cannot be linked to a referral are still acknowledged with
    200 so the gateway does not keep redelivering them.
    """
    raw_body = await request.body()
    use_case = IngestGatewayWebhookUseCase(gateway, SqlReferralRepository(session), SqlUnitOfWork(session))
    outcome = await use_case.execute(raw_body, request.headers.get("x-razorpay-signature"))
    return outcome.response_body()


@router.post("/typeform")
async def typeform_webhook(request: Request, session: AsyncSession = Depends(get_session)):
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    use_case = IngestFormWebhookUseCase(SqlEnquiryRepository(session), SqlUnitOfWork(session),
                                        secret=settings.TYPEFORM_SECRET)
    await use_case.execute(payload, request.headers.get("typeform-signature"))
    return {"message": "Enquiry received and saved."}
