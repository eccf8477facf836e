"""Notification repository"""
from typing import List, Dict, Any

from sqlalchemy import select, update, insert, desc
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.notification_repository import NotificationRepository
from domain.entities.notification import NotificationDraft
from domain.enums import NotificationType
from infrastructure.persistence.models.notification import Notification


class SqlNotificationRepository(NotificationRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def insert_many(self, drafts: List[NotificationDraft]) -> int:
        if not drafts:
            return 0
        rows = [{"user_id": d.user_id, "title": d.title, "message": d.message,
                 "type": NotificationType(d.type), "read": d.read, "created_at": d.created_at}
                for d in drafts]
        await self._session.execute(insert(Notification), rows)
        return len(rows)

    async def list_for_user(self, user_id: int, unread_only: bool = False) -> List[Dict[str, Any]]:
        stmt = (select(Notification).where(Notification.user_id == user_id)
                .order_by(desc(Notification.created_at), desc(Notification.id)))
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        result = await self._session.execute(stmt)
        return [{"id": n.id, "title": n.title, "message": n.message, "type": n.type.value,
                 "read": n.read, "created_at": n.created_at}
                for n in result.scalars().all()]

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        result = await self._session.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(read=True)
            .execution_options(synchronize_session=False))
        return result.rowcount > 0

    async def mark_all_read(self, user_id: int) -> int:
        result = await self._session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False))
        return result.rowcount
