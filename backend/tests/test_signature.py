"""Checkout and webhook signature checks"""
import json

from infrastructure.payment.razorpay_gateway import RazorpayGateway, compute_signature, signatures_match

from conftest import KEY_SECRET, WEBHOOK_SECRET, sign_checkout


def gateway():
    return RazorpayGateway(key_secret=KEY_SECRET, webhook_secret=WEBHOOK_SECRET)


def test_checkout_signature_accepts_matching_digest():
    signature = sign_checkout("order_1", "pay_1")
    assert gateway().verify_payment_signature("order_1", "pay_1", signature)


def test_checkout_signature_is_bound_to_both_ids():
    signature = sign_checkout("order_1", "pay_1")
    g = gateway()
    assert not g.verify_payment_signature("order_2", "pay_1", signature)
    assert not g.verify_payment_signature("order_1", "pay_2", signature)


def test_checkout_signature_rejects_single_flipped_character():
    signature = sign_checkout("order_1", "pay_1")
    flipped = ("0" if signature[0] != "0" else "1") + signature[1:]
    assert not gateway().verify_payment_signature("order_1", "pay_1", flipped)


def test_checkout_signature_rejects_empty_inputs():
    g = gateway()
    assert not g.verify_payment_signature("order_1", "pay_1", "")
    assert not g.verify_payment_signature("", "pay_1", sign_checkout("", "pay_1"))


def test_checkout_signature_uses_key_secret_not_webhook_secret():
    wrong = compute_signature(WEBHOOK_SECRET, b"order_1|pay_1")
    assert not gateway().verify_payment_signature("order_1", "pay_1", wrong)


def test_webhook_signature_covers_raw_bytes():
    raw = b'{"event":"payment.captured","payload":{}}'
    signature = compute_signature(WEBHOOK_SECRET, raw)
    g = gateway()
    assert g.verify_webhook_signature(raw, signature)

    # same JSON, different bytes
    reformatted = json.dumps(json.loads(raw), indent=2).encode()
    assert not g.verify_webhook_signature(reformatted, signature)


def test_webhook_signature_missing_header():
    assert not gateway().verify_webhook_signature(b"{}", None)


def test_signatures_match():
    assert signatures_match("abc", "abc")
    assert not signatures_match("abc", "abd")
    assert not signatures_match("abc", None)
