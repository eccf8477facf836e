"""Center approval use case"""
from loguru import logger

from domain.entities.center import CenterEntity
from domain.entities.notification import NotificationDraft
from domain.enums import UserRole, NotificationType
from domain.exceptions import CenterNotFoundError
from application.ports.center_repository import CenterRepository
from application.ports.user_repository import UserRepository
from application.ports.notification_repository import NotificationRepository


class ApproveCenterUseCase:
    """Publish a pending center and hand its owner the center role"""

    def __init__(self, center_repo: CenterRepository, user_repo: UserRepository,
                 notification_repo: NotificationRepository):
        self._center_repo = center_repo
        self._user_repo = user_repo
        self._notification_repo = notification_repo

    async def execute(self, center_id: int) -> CenterEntity:
        center = await self._center_repo.mark_verified(center_id)
        if center is None:
            raise CenterNotFoundError(center_id)

        owner = await self._user_repo.get_by_id(center.owner_user_id) if center.owner_user_id else None
        if owner is not None:
            if not owner.is_admin:
                await self._user_repo.set_role(owner.id, UserRole.CENTER.value)
            await self._notification_repo.insert_many([NotificationDraft(
                user_id=owner.id,
                title="Center approved",
                message=f"{center.name} is now live. Share your referral code {center.referral_code}.",
                type=NotificationType.SUCCESS.value,
            )])

        logger.info(f"Center {center.id} ({center.referral_code}) approved")
        return center
