"""Payment gateway port interface"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class PaymentGatewayPort(ABC):
    @abstractmethod
    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool: ...
    @abstractmethod
    def verify_webhook_signature(self, raw_body: bytes, signature: Optional[str]) -> bool: ...
    @abstractmethod
    async def create_order(self, amount: int, currency: str, receipt: str,
                           notes: Dict[str, Any]) -> Dict[str, Any]: ...
    @abstractmethod
    async def create_payout(self, fund_account_id: str, amount: int,
                            notes: Dict[str, Any]) -> Dict[str, Any]: ...
