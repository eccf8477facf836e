"""Razorpay API client"""
import hashlib
import hmac
import time
from typing import Dict, Any, Optional
import httpx
from loguru import logger

from config import settings
from application.ports.payment_gateway import PaymentGatewayPort
from domain.exceptions import GatewayError


def compute_signature(secret: str, payload: bytes) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def signatures_match(expected: str, provided: Optional[str]) -> bool:
    if not provided:
        return False
    return hmac.compare_digest(expected, provided)


class RazorpayGateway(PaymentGatewayPort):
    def __init__(self, key_id: Optional[str] = None, key_secret: Optional[str] = None,
                 webhook_secret: Optional[str] = None, api_url: Optional[str] = None,
                 timeout: Optional[int] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.key_id = key_id or settings.RAZORPAY_KEY_ID
        self.key_secret = key_secret or settings.RAZORPAY_KEY_SECRET
        self.webhook_secret = webhook_secret or settings.RAZORPAY_WEBHOOK_SECRET
        self.api_url = api_url or settings.RAZORPAY_API_URL
        self.timeout = timeout or settings.GATEWAY_TIMEOUT
        self._transport = transport

    # ---- signatures ----

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """HMAC-SHA256(key_secret, "<order_id>|<payment_id>") against the checkout signature"""
        if not order_id or not payment_id:
            return False
        expected = compute_signature(self.key_secret, f"{order_id}|{payment_id}".encode())
        return signatures_match(expected, signature)

    def verify_webhook_signature(self, raw_body: bytes, signature: Optional[str]) -> bool:
        """HMAC-SHA256 over the raw webhook body with the webhook secret"""
        expected = compute_signature(self.webhook_secret, raw_body or b"")
        return signatures_match(expected, signature)

    # ---- REST API ----

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(auth=(self.key_id, self.key_secret), timeout=self.timeout,
                                 transport=self._transport)

    async def _post(self, path: str, payload: Dict[str, Any], action: str) -> Dict[str, Any]:
        url = f"{self.api_url}{path}"
        async with self._client() as client:
            try:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Razorpay {action} failed: {e.response.text}")
                raise GatewayError(f"{action} failed: {e.response.text}")
            except httpx.RequestError as e:
                logger.error(f"Razorpay {action} unreachable: {e}")
                raise GatewayError(f"{action} failed: {e}")

    async def create_order(self, amount: int, currency: str, receipt: str,
                           notes: Dict[str, Any]) -> Dict[str, Any]:
        payload = {"amount": amount, "currency": currency, "receipt": receipt,
                   "notes": {k: str(v) for k, v in notes.items() if v is not None}}
        return await self._post("/orders", payload, "Order creation")

    async def create_payout(self, fund_account_id: str, amount: int,
                            notes: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "account_number": settings.RAZORPAY_FUND_ACCOUNT_NUMBER,
            "fund_account_id": fund_account_id,
            "amount": amount,
            "currency": "INR",
            "mode": "UPI",
            "purpose": "payout",
            "queue_if_low_balance": True,
            "notes": {k: str(v) for k, v in notes.items()},
        }
        return await self._post("/payouts", payload, "Payout")


def generate_receipt() -> str:
    return f"receipt_{int(time.time() * 1000)}"
