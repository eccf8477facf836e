"""User repository interface"""
from abc import ABC, abstractmethod
from typing import Optional, List, Iterable
from domain.entities.user import UserEntity
from domain.entities.notification import RecipientFilter


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[UserEntity]: ...
    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserEntity]: ...
    @abstractmethod
    async def create(self, email: str, password_hash: str, name: str,
                     phone: Optional[str] = None, city: Optional[str] = None) -> UserEntity: ...
    @abstractmethod
    async def update_last_login(self, user_id: int) -> None: ...
    @abstractmethod
    async def upgrade_subscription(self, user_id: int, plan: str, center_id: int) -> bool: ...
    @abstractmethod
    async def set_role(self, user_id: int, role: str) -> None: ...
    @abstractmethod
    async def list_all_ids(self) -> List[int]: ...
    @abstractmethod
    async def existing_ids(self, user_ids: Iterable[int]) -> List[int]: ...
    @abstractmethod
    async def find_ids(self, criteria: RecipientFilter) -> List[int]: ...
