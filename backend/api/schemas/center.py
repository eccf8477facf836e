"""Center, referral and payout schemas"""
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from api.schemas.common import ResponseBase


class CenterRegisterRequest(BaseModel):
    # presence is checked by the use case so the 400 can list every required field
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    fees: Optional[int] = Field(None, ge=0)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    capacity: Optional[int] = Field(None, gt=0)
    upi_id: Optional[str] = None


class CenterSummary(BaseModel):
    id: int
    name: str
    referral_code: str
    city: str
    status: str


class CenterRegisterResponse(ResponseBase):
    center: CenterSummary


class CenterItem(BaseModel):
    id: int
    name: str
    city: str
    referral_code: str
    verified: bool


class CenterListResponse(ResponseBase):
    items: List[CenterItem]
    total: int


class PayoutRequest(BaseModel):
    centre_id: int
    amount: float = Field(..., gt=0, description="Amount in rupees")


class PayoutResponse(BaseModel):
    message: str
    payout: Dict[str, Any]


class ReferralRequest(BaseModel):
    referral_code: str = Field(..., min_length=4, max_length=20)


class ReferralItem(BaseModel):
    id: int
    center_id: int
    referral_code: str
    status: str
    created_at: datetime
    paid_at: Optional[datetime]


class ReferralResponse(ResponseBase):
    referral_id: int
    center_id: int
    status: str


class ReferralListResponse(ResponseBase):
    items: List[ReferralItem]
