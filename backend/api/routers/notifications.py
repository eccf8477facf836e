"""Notification router"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories import (
    SqlUnitOfWork, SqlUserRepository, SqlNotificationRepository,
)
from application.use_cases.dispatch_notifications import (
    DispatchNotificationsUseCase, DispatchNotificationsInput,
)
from domain.entities.notification import RecipientFilter
from domain.exceptions import NotificationNotFoundError
from api.schemas.common import ResponseBase
from api.schemas.notification import (
    SendNotificationRequest, SendNotificationResponse, NotificationItem, NotificationListResponse,
)
from api.dependencies import get_current_active_user, get_admin_user

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.post("/send", response_model=SendNotificationResponse)
async def send_notification(request: SendNotificationRequest,
                            admin: User = Depends(get_admin_user),
                            session: AsyncSession = Depends(get_session)):
    filter_by = None
    if request.filter_by is not None:
        f = request.filter_by
        filter_by = RecipientFilter(
            subscription_plan=f.subscription_plan.value if f.subscription_plan else None,
            city=f.city,
            enrollment_status=f.enrollment_status.value if f.enrollment_status else None)

    use_case = DispatchNotificationsUseCase(SqlUserRepository(session), SqlNotificationRepository(session),
                                            SqlUnitOfWork(session), batch_size=settings.NOTIFICATION_BATCH_SIZE)
    result = await use_case.execute(DispatchNotificationsInput(
        title=request.title, message=request.message, type=request.type.value,
        user_ids=request.user_ids, send_to_all=request.send_to_all, filter_by=filter_by))
    return SendNotificationResponse(success=True,
                                    message=f"Notification sent successfully to {result.recipients} users",
                                    recipients=result.recipients)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(unread_only: bool = Query(False),
                             current_user: User = Depends(get_current_active_user),
                             session: AsyncSession = Depends(get_session)):
    rows = await SqlNotificationRepository(session).list_for_user(current_user.id, unread_only=unread_only)
    items = [NotificationItem(**row) for row in rows]
    return NotificationListResponse(success=True, items=items, unread=sum(1 for i in items if not i.read))


@router.post("/read-all", response_model=ResponseBase)
async def mark_all_read(current_user: User = Depends(get_current_active_user),
                        session: AsyncSession = Depends(get_session)):
    count = await SqlNotificationRepository(session).mark_all_read(current_user.id)
    return ResponseBase(success=True, message=f"{count} notifications marked as read")


@router.post("/{notification_id}/read", response_model=ResponseBase)
async def mark_read(notification_id: int,
                    current_user: User = Depends(get_current_active_user),
                    session: AsyncSession = Depends(get_session)):
    if not await SqlNotificationRepository(session).mark_read(notification_id, current_user.id):
        raise NotificationNotFoundError(notification_id)
    return ResponseBase(success=True, message="Notification marked as read")
