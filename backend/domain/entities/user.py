"""User domain entity"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.exceptions import PermissionDeniedError


@dataclass
class UserEntity:
    """User domain entity, used by business logic instead of the ORM model"""
    id: int
    email: str
    name: str
    role: str  # "student" | "center" | "admin"
    subscription_plan: str  # "free" | "premium"
    is_active: bool
    center_id: Optional[int] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    password_hash: str = ""
    last_login_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    def require_role(self, *roles: str) -> "UserEntity":
        """Return self when the user holds one of ``roles``, raise otherwise"""
        if not self.has_role(*roles):
            raise PermissionDeniedError(" or ".join(roles))
        return self
