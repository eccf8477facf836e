"""Payment schemas"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field
from api.schemas.common import ResponseBase


class PlanInfo(BaseModel):
    key: str
    name: str
    price: int
    installments: int


class PlansResponse(BaseModel):
    plans: List[PlanInfo]


class CreateOrderRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in paise")
    currency: str = Field("INR", min_length=3, max_length=3)
    plan: str = Field(..., min_length=1)
    center_id: int
    referral_id: Optional[int] = None


class CreateOrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key_id: str


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    user_id: int
    center_id: int
    plan: str = Field(..., min_length=1)


class VerifyPaymentResponse(BaseModel):
    message: str
    enrollment_status: str
    enrollment_id: int
    already_processed: bool = False


class PaymentHistoryItem(BaseModel):
    id: int
    order_id: str
    amount: int
    currency: str
    status: str
    emi_plan: Optional[str]
    center_id: Optional[int]
    created_at: datetime
    paid_at: Optional[datetime]

    class Config:
        from_attributes = True


class PaymentHistoryResponse(ResponseBase):
    items: List[PaymentHistoryItem]
    total: int
