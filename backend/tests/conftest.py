"""Shared fixtures: a throwaway SQLite file, an ASGI client and a mocked Razorpay API"""
import json
import os
import tempfile
from functools import lru_cache

_tmp = tempfile.mkdtemp(prefix="enrollment-tests-")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ["DEBUG"] = "false"
os.environ["LOG_FILE"] = os.path.join(_tmp, "test.log")
os.environ["LOG_LEVEL"] = "INFO"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_key_secret"
os.environ["RAZORPAY_WEBHOOK_SECRET"] = "test_webhook_secret"
os.environ["RAZORPAY_API_URL"] = "https://api.razorpay.test/v1"

import httpx
import pytest
from sqlalchemy import select, func

from infrastructure.persistence.database import engine, init_db, async_session_factory
from infrastructure.persistence.models import (
    User, Center, Payment, UserRole, SubscriptionPlan, PaymentStatus,
)
from infrastructure.payment.razorpay_gateway import RazorpayGateway, compute_signature
from infrastructure.auth.jwt_service import create_access_token
from infrastructure.auth.password_service import hash_password

KEY_SECRET = "test_key_secret"
WEBHOOK_SECRET = "test_webhook_secret"
PASSWORD = "password123"


@lru_cache()
def password_hash(password: str) -> str:
    return hash_password(password)


def sign_checkout(order_id: str, payment_id: str) -> str:
    return compute_signature(KEY_SECRET, f"{order_id}|{payment_id}".encode())


def sign_webhook(raw_body: bytes) -> str:
    return compute_signature(WEBHOOK_SECRET, raw_body)


def auth_header(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


async def count_rows(model, *where) -> int:
    async with async_session_factory() as s:
        stmt = select(func.count()).select_from(model)
        if where:
            stmt = stmt.where(*where)
        return (await s.execute(stmt)).scalar()


class RazorpayStub:
    """Answers /orders and /payouts like the live API and keeps every request"""

    def __init__(self):
        self.requests = []
        self.fail_with = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": {"description": "gateway down"}})
        body = json.loads(request.content)
        if request.url.path.endswith("/orders"):
            return httpx.Response(200, json={
                "id": f"order_test{len(self.requests)}", "entity": "order",
                "amount": body["amount"], "currency": body["currency"],
                "receipt": body["receipt"], "notes": body["notes"], "status": "created",
            })
        if request.url.path.endswith("/payouts"):
            return httpx.Response(200, json={
                "id": "pout_test1", "entity": "payout", "amount": body["amount"],
                "status": "queued", "notes": body["notes"],
            })
        return httpx.Response(404, json={"error": {"description": "not found"}})

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
async def db():
    await init_db(drop_existing=True)
    yield
    await engine.dispose()


@pytest.fixture
def razorpay():
    return RazorpayStub()


@pytest.fixture
def gateway(razorpay):
    return RazorpayGateway(transport=httpx.MockTransport(razorpay))


@pytest.fixture
async def client(db, gateway):
    from main import app
    from api.dependencies import get_payment_gateway

    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make(email="student@example.com", role=UserRole.STUDENT,
                    plan=SubscriptionPlan.FREE, city=None, is_active=True) -> int:
        async with async_session_factory() as s:
            user = User(email=email, password_hash=password_hash(PASSWORD), name=email.split("@")[0],
                        role=role, subscription_plan=plan, city=city, is_active=is_active)
            s.add(user)
            await s.commit()
            return user.id
    return _make


@pytest.fixture
def make_center(db):
    async def _make(name="Bright Future Academy", city="bangalore", referral_code="BANA1B2C3",
                    owner_user_id=None, verified=True, upi_id=None,
                    email="center@example.com", phone="9876543210") -> int:
        async with async_session_factory() as s:
            center = Center(name=name, address="12 MG Road", city=city, phone=phone, email=email,
                            owner_name="Owner", owner_phone="9876500000", owner_user_id=owner_user_id,
                            fees=15000, capacity=50, referral_code=referral_code,
                            verified=verified, upi_id=upi_id, rating=0.0)
            s.add(center)
            await s.commit()
            return center.id
    return _make


@pytest.fixture
def make_payment(db):
    async def _make(user_id: int, center_id: int, order_id="order_abc123", amount=1500000,
                    emi_plan="full") -> int:
        async with async_session_factory() as s:
            payment = Payment(user_id=user_id, center_id=center_id, order_id=order_id, amount=amount,
                              currency="INR", emi_plan=emi_plan, status=PaymentStatus.PENDING)
            s.add(payment)
            await s.commit()
            return payment.id
    return _make
