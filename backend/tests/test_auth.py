"""Accounts and role checks"""
import pytest

from infrastructure.persistence.models import UserRole, SubscriptionPlan
from infrastructure.auth.jwt_service import decode_token, create_refresh_token
from domain.entities.user import UserEntity
from domain.exceptions import PermissionDeniedError

from conftest import PASSWORD, auth_header


async def test_register_then_login(client):
    registered = await client.post("/api/auth/register", json={
        "email": "new@example.com", "password": "longenough", "name": "New Student", "city": "pune",
    })
    assert registered.status_code == 201

    login = await client.post("/api/auth/login", json={"email": "new@example.com", "password": "longenough"})
    assert login.status_code == 200
    claims = decode_token(login.json()["access_token"])
    assert claims["type"] == "access"
    assert claims["role"] == "student"

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"})
    assert me.json()["email"] == "new@example.com"
    assert me.json()["subscription_plan"] == "free"
    assert me.json()["role"] == "student"


async def test_duplicate_email_is_409(client, make_user):
    await make_user(email="taken@example.com")

    response = await client.post("/api/auth/register", json={
        "email": "taken@example.com", "password": "longenough", "name": "Someone",
    })

    assert response.status_code == 409


async def test_short_password_is_400(client):
    response = await client.post("/api/auth/register", json={
        "email": "short@example.com", "password": "123", "name": "Someone",
    })

    assert response.status_code == 400


async def test_wrong_password_is_401(client, make_user):
    await make_user(email="student@example.com")

    response = await client.post("/api/auth/login", json={"email": "student@example.com", "password": "nope"})

    assert response.status_code == 401


async def test_disabled_account_cannot_log_in(client, make_user):
    await make_user(email="gone@example.com", is_active=False)

    response = await client.post("/api/auth/login", json={"email": "gone@example.com", "password": PASSWORD})

    assert response.status_code == 403


async def test_refresh_token_is_not_an_access_token(client, make_user):
    user_id = await make_user()
    token = create_refresh_token({"sub": user_id})

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


async def test_me_reports_premium_after_upgrade(client, make_user):
    user_id = await make_user(plan=SubscriptionPlan.PREMIUM)

    response = await client.get("/api/auth/me", headers=auth_header(user_id))

    assert response.json()["subscription_plan"] == "premium"


def test_require_role():
    admin = UserEntity(id=1, email="a@example.com", name="A", role=UserRole.ADMIN.value,
                       subscription_plan="free", is_active=True)
    student = UserEntity(id=2, email="s@example.com", name="S", role=UserRole.STUDENT.value,
                         subscription_plan="free", is_active=True)

    assert admin.require_role("admin") is admin
    assert student.require_role("student", "center") is student
    with pytest.raises(PermissionDeniedError) as exc_info:
        student.require_role("admin", "center")
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Forbidden: admin or center role required."
