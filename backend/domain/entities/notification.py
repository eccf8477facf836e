"""Notification value objects"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class NotificationDraft:
    """One row to be inserted for one recipient"""
    user_id: int
    title: str
    message: str
    type: str = "info"
    read: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class RecipientFilter:
    """Conjunction over users; unset fields do not constrain"""
    subscription_plan: Optional[str] = None
    city: Optional[str] = None
    enrollment_status: Optional[str] = None
