"""Bulk in-app notification use case"""
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from domain.entities.notification import NotificationDraft, RecipientFilter
from domain.exceptions import NoRecipientsError, NotificationDispatchError
from application.ports.user_repository import UserRepository
from application.ports.notification_repository import NotificationRepository
from application.ports.unit_of_work import UnitOfWork

DEFAULT_BATCH_SIZE = 1000


@dataclass
class DispatchNotificationsInput:
    title: str
    message: str
    type: str
    user_ids: Optional[List[int]] = None
    send_to_all: bool = False
    filter_by: Optional[RecipientFilter] = None


@dataclass
class DispatchNotificationsOutput:
    recipients: int
    batches: List[int] = field(default_factory=list)


def chunked(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class DispatchNotificationsUseCase:
    """
    Fan one notification out to a resolved set of users.

    Recipients: ``send_to_all`` wins, then ``filter_by``, then ``user_ids``.
    Rows are inserted ``batch_size`` at a time and each batch is committed
    on its own; a failing batch stops the dispatch and earlier batches stay.
    """

    def __init__(self, user_repo: UserRepository, notification_repo: NotificationRepository,
                 uow: UnitOfWork, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._user_repo = user_repo
        self._notification_repo = notification_repo
        self._uow = uow
        self._batch_size = batch_size

    async def resolve_recipients(self, input: DispatchNotificationsInput) -> List[int]:
        if input.send_to_all:
            return await self._user_repo.list_all_ids()
        if input.filter_by is not None:
            return await self._user_repo.find_ids(input.filter_by)
        if input.user_ids:
            wanted = list(dict.fromkeys(input.user_ids))
            found = await self._user_repo.existing_ids(wanted)
            if len(found) < len(wanted):
                logger.warning(f"Skipping {len(wanted) - len(found)} unknown notification recipients")
            return found
        raise NoRecipientsError("Must specify user_ids, send_to_all, or filter_by")

    async def execute(self, input: DispatchNotificationsInput) -> DispatchNotificationsOutput:
        recipients = await self.resolve_recipients(input)
        if not recipients:
            raise NoRecipientsError()

        drafts = [NotificationDraft(user_id=uid, title=input.title, message=input.message, type=input.type)
                  for uid in recipients]

        output = DispatchNotificationsOutput(recipients=0)
        for batch in chunked(drafts, self._batch_size):
            try:
                await self._notification_repo.insert_many(batch)
                await self._uow.commit()
            except Exception as e:
                await self._uow.rollback()
                logger.error(f"Notification batch failed after {output.recipients} rows: {e}")
                raise NotificationDispatchError(output.recipients, str(e)) from e
            output.recipients += len(batch)
            output.batches.append(len(batch))

        logger.info(f"Notification '{input.title}' sent to {output.recipients} users "
                    f"in {len(output.batches)} batch(es)")
        return output
