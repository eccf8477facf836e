"""Payment and enrollment repository interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List
from domain.entities.payment import PaymentEntity, EnrollmentEntity


class PaymentRepository(ABC):
    @abstractmethod
    async def create(self, user_id: int, order_id: str, amount: int, currency: str,
                     center_id: int, emi_plan: str) -> PaymentEntity: ...
    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> Optional[PaymentEntity]: ...
    @abstractmethod
    async def mark_completed(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Transition to completed unless already completed; True when a row changed"""
    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[PaymentEntity]: ...


class EnrollmentRepository(ABC):
    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> Optional[EnrollmentEntity]: ...
    @abstractmethod
    async def create(self, user_id: int, center_id: int, order_id: str,
                     emi_plan: str, status: str = "active") -> EnrollmentEntity: ...
