"""Notification repository interface"""
from abc import ABC, abstractmethod
from typing import List, Dict, Any
from domain.entities.notification import NotificationDraft


class NotificationRepository(ABC):
    @abstractmethod
    async def insert_many(self, drafts: List[NotificationDraft]) -> int: ...
    @abstractmethod
    async def list_for_user(self, user_id: int, unread_only: bool = False) -> List[Dict[str, Any]]: ...
    @abstractmethod
    async def mark_read(self, notification_id: int, user_id: int) -> bool: ...
    @abstractmethod
    async def mark_all_read(self, user_id: int) -> int: ...
