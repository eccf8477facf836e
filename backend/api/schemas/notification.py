"""Notification schemas"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from domain.enums import NotificationType, SubscriptionPlan, EnrollmentStatus
from api.schemas.common import ResponseBase


class NotificationFilter(BaseModel):
    subscription_plan: Optional[SubscriptionPlan] = None
    city: Optional[str] = None
    enrollment_status: Optional[EnrollmentStatus] = None


class SendNotificationRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType
    user_ids: Optional[List[int]] = None
    send_to_all: bool = False
    filter_by: Optional[NotificationFilter] = None


class SendNotificationResponse(ResponseBase):
    recipients: int


class NotificationItem(BaseModel):
    id: int
    title: str
    message: str
    type: str
    read: bool
    created_at: datetime


class NotificationListResponse(ResponseBase):
    items: List[NotificationItem]
    unread: int
