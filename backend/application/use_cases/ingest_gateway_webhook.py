"""Razorpay webhook ingestion use case"""
import json
from dataclasses import dataclass
from typing import Optional, Any, Dict

from loguru import logger

from domain.exceptions import WebhookSignatureError, InvalidFieldError, PersistenceError
from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.center_repository import ReferralRepository
from application.ports.unit_of_work import UnitOfWork

PAYMENT_CAPTURED = "payment.captured"


@dataclass
class GatewayWebhookOutcome:
    event: str
    result: str  # "ignored" | "unlinked" | "paid" | "already_paid" | "unknown_referral"
    referral_id: Optional[int] = None

    def response_body(self) -> Dict[str, Any]:
        if self.result == "unlinked":
            return {"message": "Acknowledged, but no referral_id found."}
        return {"received": True}


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def extract_referral_id(body: Dict[str, Any]) -> Optional[Any]:
    """``payload.order.entity.notes.referral_id``; the gateway sends ``[]`` for empty notes"""
    order = as_dict(as_dict(as_dict(body.get("payload")).get("order")).get("entity"))
    notes = order.get("notes")
    if not isinstance(notes, dict):
        return None
    referral_id = notes.get("referral_id")
    if referral_id in (None, ""):
        return None
    return referral_id


class IngestGatewayWebhookUseCase:
    def __init__(self, gateway: PaymentGatewayPort, referral_repo: ReferralRepository, uow: UnitOfWork):
        self._gateway = gateway
        self._referral_repo = referral_repo
        self._uow = uow

    async def execute(self, raw_body: bytes, signature: Optional[str]) -> GatewayWebhookOutcome:
        if not signature:
            raise WebhookSignatureError("Signature missing.")
        if not self._gateway.verify_webhook_signature(raw_body, signature):
            logger.warning("Razorpay webhook rejected: invalid signature")
            raise WebhookSignatureError("Invalid signature.")

        try:
            body = json.loads(raw_body)
        except ValueError:
            raise InvalidFieldError("Malformed webhook payload.")
        if not isinstance(body, dict):
            raise InvalidFieldError("Malformed webhook payload.")

        event = body.get("event") or ""
        if event != PAYMENT_CAPTURED:
            logger.debug(f"Razorpay webhook ignored: {event}")
            return GatewayWebhookOutcome(event=event, result="ignored")

        payment = as_dict(as_dict(as_dict(body.get("payload")).get("payment")).get("entity"))
        order_id = payment.get("order_id")

        raw_referral = extract_referral_id(body)
        try:
            referral_id = int(raw_referral) if raw_referral is not None else None
        except (TypeError, ValueError):
            logger.warning(f"Webhook for order {order_id} carries a malformed referral_id: {raw_referral!r}")
            referral_id = None
        if referral_id is None:
            logger.warning(f"Webhook received for order {order_id} without a referral_id in notes.")
            return GatewayWebhookOutcome(event=event, result="unlinked")

        try:
            changed = await self._referral_repo.mark_paid(referral_id)
            status = None if changed else await self._referral_repo.get_status(referral_id)
            await self._uow.commit()
        except Exception as e:
            await self._uow.rollback()
            logger.error(f"Referral update failed for referral {referral_id}: {e}")
            raise PersistenceError("Failed to update referral status.") from e

        if changed:
            logger.info(f"Referral {referral_id} marked paid (order {order_id})")
            result = "paid"
        elif status is None:
            logger.warning(f"Referral with ID {referral_id} not found.")
            result = "unknown_referral"
        else:
            logger.info(f"Referral {referral_id} already {status}; left unchanged")
            result = "already_paid"
        return GatewayWebhookOutcome(event=event, result=result, referral_id=referral_id)
