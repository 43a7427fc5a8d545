import uuid
from datetime import timedelta
from urllib.parse import unquote

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from linkwedding.models.order import Order
from linkwedding.models.types import utc_now
from linkwedding.services.payment_confirmation import _record_proof
from linkwedding.services.r2_client import StorageError

PNG = ("bukti.png", b"\x89PNG\r\n\x1a\nfake", "image/png")


def _order(session, order_id) -> Order:
    return session.get(Order, uuid.UUID(order_id))


def test_confirm_moves_order_to_in_progress(client, make_order, verify, session, outbox):
    data = make_order()
    headers = verify(data["order_id"])

    response = client.post(
        f"/invoices/{data['order_id']}/confirm",
        files={"proof": PNG},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["payment_status"] == "in_progress"
    assert body["payment_proof_url"]

    order = _order(session, data["order_id"])
    assert order.payment_status == "in_progress"
    assert order.payment_proof_url == outbox["uploads"][0]
    assert outbox["proof_notifications"] == [order.invoice_number]


def test_confirm_requires_verified_email(client, make_order):
    data = make_order()

    response = client.post(f"/invoices/{data['order_id']}/confirm", files={"proof": PNG})
    assert response.status_code == 401


def test_confirm_requires_a_file(client, make_order, verify, session):
    data = make_order()
    headers = verify(data["order_id"])

    response = client.post(f"/invoices/{data['order_id']}/confirm", headers=headers)

    assert response.status_code == 400
    assert _order(session, data["order_id"]).payment_status == "pending"


def test_confirm_rejects_non_images(client, make_order, verify):
    data = make_order()
    headers = verify(data["order_id"])

    response = client.post(
        f"/invoices/{data['order_id']}/confirm",
        files={"proof": ("bukti.pdf", b"%PDF-1.4", "application/pdf")},
        headers=headers,
    )
    assert response.status_code == 400


def test_confirm_twice_is_a_conflict(client, make_order, verify, outbox):
    data = make_order()
    headers = verify(data["order_id"])
    url = f"/invoices/{data['order_id']}/confirm"

    assert client.post(url, files={"proof": PNG}, headers=headers).status_code == 200
    second = client.post(url, files={"proof": PNG}, headers=headers)

    assert second.status_code == 409
    assert second.json()["detail"] == "Payment already confirmed"
    assert len(outbox["uploads"]) == 1


def test_confirm_after_deadline_expires_order(client, make_order, verify, session, outbox):
    data = make_order()
    headers = verify(data["order_id"])

    order = _order(session, data["order_id"])
    order.payment_deadline = utc_now() - timedelta(minutes=1)
    session.add(order)
    session.commit()

    response = client.post(
        f"/invoices/{data['order_id']}/confirm", files={"proof": PNG}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Payment deadline has passed"
    assert _order(session, data["order_id"]).payment_status == "expired"
    assert outbox["uploads"] == []


def test_upload_failure_leaves_order_untouched(client, make_order, verify, session, monkeypatch):
    def broken_upload(file, order_id):
        raise StorageError("bucket unavailable")

    monkeypatch.setattr(
        "linkwedding.services.payment_confirmation.upload_payment_proof", broken_upload
    )

    data = make_order()
    headers = verify(data["order_id"])
    response = client.post(
        f"/invoices/{data['order_id']}/confirm", files={"proof": PNG}, headers=headers
    )

    assert response.status_code == 502
    order = _order(session, data["order_id"])
    assert order.payment_status == "pending"
    assert order.payment_proof_url is None


class FlakySession:
    """Fails the first ``failures`` commits."""

    def __init__(self, failures):
        self.failures = failures
        self.commits = 0
        self.rollbacks = 0

    def add(self, obj):
        pass

    def commit(self):
        self.commits += 1
        if self.commits <= self.failures:
            raise OperationalError("UPDATE order", {}, Exception("connection lost"))

    def rollback(self):
        self.rollbacks += 1

    def refresh(self, obj):
        pass


def _unsaved_order():
    now = utc_now()
    return Order(
        invoice_number="INV-20261018-ABCDE",
        product_name="Rustic Garden",
        package_name="Basic",
        package_price=129000,
        customer_name="Rina",
        customer_email="rina@example.com",
        customer_phone="0812",
        subtotal=129000,
        total=129000,
        payment_deadline=now + timedelta(hours=24),
    )


def test_failed_update_is_retried_with_same_url():
    session = FlakySession(failures=2)
    order = _unsaved_order()
    url = "https://cdn.linkwedding.test/payment-proofs/x.png"

    order = _record_proof(session, order, url, utc_now())

    assert session.commits == 3
    assert session.rollbacks == 2
    assert order.payment_proof_url == url
    assert order.payment_status == "in_progress"


def test_update_gives_up_after_configured_attempts():
    session = FlakySession(failures=10)

    with pytest.raises(HTTPException) as exc:
        _record_proof(session, _unsaved_order(), "https://cdn/x.png", utc_now())

    assert exc.value.status_code == 500
    assert session.commits == 3


def test_confirm_page(client, make_order, verify):
    data = make_order(discount_code="HEMAT10")
    headers = verify(data["order_id"])

    body = client.get(f"/invoices/{data['order_id']}/confirm", headers=headers).json()

    assert body["total"] == 116100
    assert body["already_confirmed"] is False
    assert body["bank_account"]["bank_name"] == "BCA"
    assert body["whatsapp_url"].startswith("https://wa.me/6289524556302?text=")
    assert data["invoice_number"] in unquote(body["whatsapp_url"])
    assert "Rp116.100" in unquote(body["whatsapp_url"])


def test_confirm_cancelled_order(client, make_order, verify, admin_headers, outbox):
    data = make_order()
    headers = verify(data["order_id"])
    client.post(
        f"/admin/orders/{data['order_id']}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )

    response = client.post(
        f"/invoices/{data['order_id']}/confirm", files={"proof": PNG}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Order has been cancelled"
    assert outbox["uploads"] == []
