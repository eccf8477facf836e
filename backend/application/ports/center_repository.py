"""Center and referral repository interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from domain.entities.center import CenterEntity


class CenterRepository(ABC):
    @abstractmethod
    async def get_by_id(self, center_id: int) -> Optional[CenterEntity]: ...
    @abstractmethod
    async def get_by_referral_code(self, referral_code: str) -> Optional[CenterEntity]: ...
    @abstractmethod
    async def exists_with_contact(self, email: str, phone: str) -> bool: ...
    @abstractmethod
    async def referral_code_taken(self, referral_code: str) -> bool: ...
    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> CenterEntity: ...
    @abstractmethod
    async def list_verified(self, city: Optional[str] = None) -> List[CenterEntity]: ...
    @abstractmethod
    async def list_pending(self) -> List[CenterEntity]: ...
    @abstractmethod
    async def mark_verified(self, center_id: int) -> Optional[CenterEntity]: ...


class ReferralRepository(ABC):
    @abstractmethod
    async def create(self, user_id: int, center_id: int, referral_code: str) -> int: ...
    @abstractmethod
    async def get_status(self, referral_id: int) -> Optional[str]: ...
    @abstractmethod
    async def mark_paid(self, referral_id: int) -> bool:
        """pending -> paid; True when a row changed. Never moves a referral back."""
    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[Dict[str, Any]]: ...
