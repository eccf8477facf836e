"""Checkout orders, plans, history and health"""
from sqlalchemy import select

from infrastructure.persistence.database import async_session_factory
from infrastructure.persistence.models import Payment, Referral, PaymentStatus, ReferralStatus

from conftest import auth_header, sign_checkout


async def test_plans_are_listed_in_paise(client):
    response = await client.get("/api/payment/plans")

    assert response.status_code == 200
    plans = {p["key"]: p for p in response.json()["plans"]}
    assert set(plans) == {"full", "emi_3", "emi_6"}
    assert plans["emi_3"]["installments"] == 3


async def test_create_order_records_pending_payment(client, razorpay, make_user, make_center):
    student_id = await make_user()
    center_id = await make_center()

    response = await client.post("/api/payment/create-order", headers=auth_header(student_id), json={
        "amount": 520000, "currency": "INR", "plan": "emi_3", "center_id": center_id,
    })

    assert response.status_code == 200
    data = response.json()
    assert data["order_id"] == "order_test1"
    assert data["amount"] == 520000
    assert data["key_id"] == "rzp_test_key"

    sent = razorpay.last_json()
    assert sent["receipt"].startswith("receipt_")
    assert sent["notes"] == {"user_id": str(student_id), "center_id": str(center_id),
                             "plan": "emi_3", "type": "first_installment"}

    async with async_session_factory() as s:
        payment = (await s.execute(select(Payment).where(Payment.order_id == "order_test1"))).scalar_one()
    assert payment.status == PaymentStatus.PENDING
    assert payment.user_id == student_id
    assert payment.amount == 520000


async def test_create_order_carries_referral_into_notes(client, razorpay, make_user, make_center):
    student_id = await make_user()
    center_id = await make_center()
    async with async_session_factory() as s:
        referral = Referral(user_id=student_id, center_id=center_id, referral_code="BANA1B2C3",
                            status=ReferralStatus.PENDING)
        s.add(referral)
        await s.commit()
        referral_id = referral.id

    response = await client.post("/api/payment/create-order", headers=auth_header(student_id), json={
        "amount": 1500000, "plan": "full", "center_id": center_id, "referral_id": referral_id,
    })

    assert response.status_code == 200
    assert razorpay.last_json()["notes"]["referral_id"] == str(referral_id)


async def test_create_order_rejects_someone_elses_referral(client, razorpay, make_user, make_center):
    student_id = await make_user()
    other_id = await make_user(email="other@example.com")
    center_id = await make_center()
    async with async_session_factory() as s:
        referral = Referral(user_id=other_id, center_id=center_id, referral_code="BANA1B2C3")
        s.add(referral)
        await s.commit()
        referral_id = referral.id

    response = await client.post("/api/payment/create-order", headers=auth_header(student_id), json={
        "amount": 1500000, "plan": "full", "center_id": center_id, "referral_id": referral_id,
    })

    assert response.status_code == 400
    assert razorpay.requests == []


async def test_create_order_rejects_unknown_plan(client, razorpay, make_user, make_center):
    student_id = await make_user()
    center_id = await make_center()

    response = await client.post("/api/payment/create-order", headers=auth_header(student_id), json={
        "amount": 1500000, "plan": "lifetime", "center_id": center_id,
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown plan: lifetime"
    assert razorpay.requests == []


async def test_create_order_amount_must_match_plan_price(client, razorpay, make_user, make_center):
    student_id = await make_user()
    center_id = await make_center()

    response = await client.post("/api/payment/create-order", headers=auth_header(student_id), json={
        "amount": 1, "plan": "emi_6", "center_id": center_id,
    })

    assert response.status_code == 400
    assert razorpay.requests == []
    async with async_session_factory() as s:
        assert (await s.execute(select(Payment))).scalars().all() == []


async def test_create_order_unknown_center_is_404(client, razorpay, make_user):
    response = await client.post("/api/payment/create-order", headers=auth_header(await make_user()), json={
        "amount": 1500000, "plan": "full", "center_id": 404,
    })

    assert response.status_code == 404
    assert razorpay.requests == []


async def test_create_order_gateway_failure_is_500(client, razorpay, make_user, make_center):
    student_id = await make_user()
    center_id = await make_center()
    razorpay.fail_with = 500

    response = await client.post("/api/payment/create-order", headers=auth_header(student_id), json={
        "amount": 1500000, "plan": "full", "center_id": center_id,
    })

    assert response.status_code == 500
    async with async_session_factory() as s:
        assert (await s.execute(select(Payment))).scalars().all() == []


async def test_history_shows_completed_payment(client, make_user, make_center, make_payment):
    student_id = await make_user()
    center_id = await make_center()
    await make_payment(student_id, center_id, order_id="order_h1")
    await client.post("/api/payment/verify", json={
        "razorpay_order_id": "order_h1", "razorpay_payment_id": "pay_h1",
        "razorpay_signature": sign_checkout("order_h1", "pay_h1"),
        "user_id": student_id, "center_id": center_id, "plan": "full",
    })

    response = await client.get("/api/payment/history", headers=auth_header(student_id))

    items = response.json()["items"]
    assert [(i["order_id"], i["status"]) for i in items] == [("order_h1", "completed")]
    assert items[0]["paid_at"] is not None


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
