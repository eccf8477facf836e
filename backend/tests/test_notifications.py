"""Bulk notifications and the recipient inbox"""
import pytest
from sqlalchemy import select

from infrastructure.persistence.database import async_session_factory
from infrastructure.persistence.models import (
    Notification, Enrollment, Payment, UserRole, SubscriptionPlan, EnrollmentStatus, PaymentStatus,
)
from application.use_cases.dispatch_notifications import (
    DispatchNotificationsUseCase, DispatchNotificationsInput, chunked,
)
from domain.entities.notification import RecipientFilter
from domain.exceptions import NoRecipientsError, NotificationDispatchError

from conftest import auth_header, count_rows


class FakeUsers:
    def __init__(self, ids):
        self.ids = list(ids)

    async def list_all_ids(self):
        return list(self.ids)

    async def existing_ids(self, user_ids):
        return [uid for uid in user_ids if uid in self.ids]

    async def find_ids(self, criteria):
        return list(self.ids)


class FakeNotifications:
    def __init__(self, fail_on_call=None):
        self.calls = []
        self.fail_on_call = fail_on_call

    async def insert_many(self, drafts):
        self.calls.append(list(drafts))
        if self.fail_on_call == len(self.calls):
            raise RuntimeError("lock timeout")
        return len(drafts)


class FakeUnitOfWork:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1


def announcement(**kwargs):
    return DispatchNotificationsInput(title="Exam schedule", message="Exams start 1 March", type="info",
                                      **kwargs)


# ---- batching ----

async def test_2500_recipients_go_out_in_three_batches():
    notifications, uow = FakeNotifications(), FakeUnitOfWork()
    use_case = DispatchNotificationsUseCase(FakeUsers(range(1, 2501)), notifications, uow)

    result = await use_case.execute(announcement(send_to_all=True))

    assert result.recipients == 2500
    assert result.batches == [1000, 1000, 500]
    assert [len(call) for call in notifications.calls] == [1000, 1000, 500]
    assert uow.commits == 3
    assert {d.user_id for call in notifications.calls for d in call} == set(range(1, 2501))


async def test_failed_batch_stops_the_dispatch():
    notifications, uow = FakeNotifications(fail_on_call=2), FakeUnitOfWork()
    use_case = DispatchNotificationsUseCase(FakeUsers(range(1, 2501)), notifications, uow)

    with pytest.raises(NotificationDispatchError) as exc_info:
        await use_case.execute(announcement(send_to_all=True))

    assert exc_info.value.inserted == 1000
    assert len(notifications.calls) == 2
    assert uow.commits == 1
    assert uow.rollbacks == 1


async def test_explicit_ids_are_deduplicated_and_checked():
    notifications = FakeNotifications()
    use_case = DispatchNotificationsUseCase(FakeUsers([1, 2, 3]), notifications, FakeUnitOfWork())

    result = await use_case.execute(announcement(user_ids=[2, 2, 3, 99]))

    assert result.recipients == 2
    assert [d.user_id for d in notifications.calls[0]] == [2, 3]


async def test_send_to_all_wins_over_user_ids():
    notifications = FakeNotifications()
    use_case = DispatchNotificationsUseCase(FakeUsers([1, 2, 3]), notifications, FakeUnitOfWork())

    result = await use_case.execute(announcement(send_to_all=True, user_ids=[1]))

    assert result.recipients == 3


async def test_no_targeting_is_rejected():
    use_case = DispatchNotificationsUseCase(FakeUsers([1]), FakeNotifications(), FakeUnitOfWork())

    with pytest.raises(NoRecipientsError) as exc_info:
        await use_case.execute(announcement())

    assert exc_info.value.message == "Must specify user_ids, send_to_all, or filter_by"


async def test_empty_resolution_is_rejected():
    use_case = DispatchNotificationsUseCase(FakeUsers([]), FakeNotifications(), FakeUnitOfWork())

    with pytest.raises(NoRecipientsError):
        await use_case.execute(announcement(filter_by=RecipientFilter(city="nowhere")))


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        DispatchNotificationsUseCase(FakeUsers([]), FakeNotifications(), FakeUnitOfWork(), batch_size=0)


def test_chunked():
    assert [len(c) for c in chunked(list(range(7)), 3)] == [3, 3, 1]


# ---- API ----

@pytest.fixture
async def admin_headers(make_user):
    admin_id = await make_user(email="admin@example.com", role=UserRole.ADMIN)
    return auth_header(admin_id)


async def test_send_to_all_reaches_every_user(client, make_user, admin_headers):
    for i in range(3):
        await make_user(email=f"s{i}@example.com")

    response = await client.post("/api/notifications/send", headers=admin_headers, json={
        "title": "Holiday", "message": "Centers closed on Monday", "type": "warning", "send_to_all": True,
    })

    assert response.status_code == 200
    assert response.json()["message"] == "Notification sent successfully to 4 users"
    assert await count_rows(Notification) == 4


async def test_filter_selects_matching_users(client, make_user, admin_headers):
    premium_pune = await make_user(email="a@example.com", plan=SubscriptionPlan.PREMIUM, city="pune")
    await make_user(email="b@example.com", plan=SubscriptionPlan.FREE, city="pune")
    await make_user(email="c@example.com", plan=SubscriptionPlan.PREMIUM, city="delhi")

    response = await client.post("/api/notifications/send", headers=admin_headers, json={
        "title": "Pune batch", "message": "Orientation", "type": "info",
        "filter_by": {"subscription_plan": "premium", "city": "pune"},
    })

    assert response.status_code == 200
    assert response.json()["recipients"] == 1
    async with async_session_factory() as s:
        rows = (await s.execute(select(Notification))).scalars().all()
    assert [n.user_id for n in rows] == [premium_pune]


async def test_filter_by_enrollment_status(client, make_user, make_center, admin_headers):
    enrolled = await make_user(email="enrolled@example.com")
    await make_user(email="browsing@example.com")
    center_id = await make_center()
    async with async_session_factory() as s:
        s.add(Payment(user_id=enrolled, center_id=center_id, order_id="order_e1", amount=100,
                      currency="INR", status=PaymentStatus.COMPLETED))
        s.add(Enrollment(user_id=enrolled, center_id=center_id, order_id="order_e1", emi_plan="full",
                         status=EnrollmentStatus.ACTIVE))
        await s.commit()

    response = await client.post("/api/notifications/send", headers=admin_headers, json={
        "title": "Exam", "message": "Hall tickets out", "type": "success",
        "filter_by": {"enrollment_status": "active"},
    })

    assert response.status_code == 200
    assert response.json()["recipients"] == 1


async def test_no_match_is_400(client, admin_headers):
    response = await client.post("/api/notifications/send", headers=admin_headers, json={
        "title": "x", "message": "y", "type": "info", "filter_by": {"city": "atlantis"},
    })

    assert response.status_code == 400
    assert response.json() == {"detail": "No users found matching criteria"}


async def test_invalid_type_is_400(client, admin_headers):
    response = await client.post("/api/notifications/send", headers=admin_headers, json={
        "title": "x", "message": "y", "type": "urgent", "send_to_all": True,
    })

    assert response.status_code == 400
    assert await count_rows(Notification) == 0


async def test_students_cannot_send(client, make_user):
    student_id = await make_user()

    response = await client.post("/api/notifications/send", headers=auth_header(student_id), json={
        "title": "x", "message": "y", "type": "info", "send_to_all": True,
    })

    assert response.status_code == 403
    assert await count_rows(Notification) == 0


async def test_inbox_and_mark_read(client, make_user, admin_headers):
    student_id = await make_user()
    headers = auth_header(student_id)
    for title in ("first", "second"):
        await client.post("/api/notifications/send", headers=admin_headers, json={
            "title": title, "message": "body", "type": "info", "user_ids": [student_id],
        })

    inbox = (await client.get("/api/notifications", headers=headers)).json()
    assert inbox["unread"] == 2
    assert [n["title"] for n in inbox["items"]] == ["second", "first"]

    first_id = inbox["items"][1]["id"]
    assert (await client.post(f"/api/notifications/{first_id}/read", headers=headers)).status_code == 200
    unread = (await client.get("/api/notifications?unread_only=true", headers=headers)).json()
    assert [n["title"] for n in unread["items"]] == ["second"]

    assert (await client.post("/api/notifications/read-all", headers=headers)).status_code == 200
    assert (await client.get("/api/notifications", headers=headers)).json()["unread"] == 0


async def test_cannot_mark_someone_elses_notification(client, make_user, admin_headers):
    owner_id = await make_user(email="owner@example.com")
    other_id = await make_user(email="other@example.com")
    await client.post("/api/notifications/send", headers=admin_headers, json={
        "title": "t", "message": "m", "type": "info", "user_ids": [owner_id],
    })
    notification_id = (await client.get("/api/notifications", headers=auth_header(owner_id))).json()["items"][0]["id"]

    response = await client.post(f"/api/notifications/{notification_id}/read", headers=auth_header(other_id))

    assert response.status_code == 404
