"""Payment and enrollment domain entities"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class PaymentEntity:
    id: int
    user_id: int
    order_id: str
    amount: int  # paise
    currency: str
    status: str  # "pending" | "completed" | "failed"
    center_id: Optional[int] = None
    emi_plan: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    def belongs_to(self, user_id: int) -> bool:
        return self.user_id == user_id

    def covers(self, center_id: int, plan: str) -> bool:
        """True when the order was created for this center and plan"""
        return self.center_id == center_id and self.emi_plan == plan


@dataclass
class EnrollmentEntity:
    id: int
    user_id: int
    center_id: int
    order_id: str
    emi_plan: str
    status: str
    enrolled_at: datetime
    exam_date: Optional[datetime] = None
