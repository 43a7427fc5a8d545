import uuid
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from linkwedding.models.discount import DiscountCode
from linkwedding.models.order import Order
from linkwedding.models.types import utc_now


def _order(session, order_id) -> Order:
    return session.get(Order, uuid.UUID(order_id))


def test_order_without_discount(client, session, make_order, bank_accounts, outbox):
    data = make_order()

    assert data["subtotal"] == 129000
    assert data["discount_amount"] == 0
    assert data["tax"] == 0
    assert data["total"] == 129000
    assert data["payment_status"] == "pending"
    assert data["invoice_url"] == f"/invoice/{data['order_id']}"

    order = _order(session, data["order_id"])
    assert order.package_name == "Basic"
    assert order.package_details["foto"] == "10 foto"
    assert order.payment_bank == "BCA"
    assert order.payment_bank_id == bank_accounts[0].id
    assert order.discount_code is None

    assert outbox["order_emails"] == [order.invoice_number]
    assert outbox["analytics"] == [("Purchase", 129000)]


def test_order_with_hemat10(make_order, session):
    data = make_order(discount_code="hemat10")

    assert data["subtotal"] == 129000
    assert data["discount_amount"] == 12900
    assert data["tax"] == 0
    assert data["total"] == 116100
    assert data["payment_status"] == "pending"
    assert data["discount_code"] == "HEMAT10"

    rule = session.exec(select(DiscountCode).where(DiscountCode.code == "HEMAT10")).one()
    assert rule.used_count == 1


def test_order_with_hemat20_on_second_package(make_order):
    data = make_order(package_index=1, discount_code="HEMAT20")

    assert data["subtotal"] == 249000
    assert data["discount_amount"] == 249000 * 0.20
    assert data["total"] == 249000 - 49800


def test_unknown_discount_code_charges_full_price(make_order):
    data = make_order(discount_code="GRATIS")

    assert data["discount_amount"] == 0
    assert data["discount_code"] is None
    assert data["total"] == 129000


def test_deadline_is_24_hours_after_creation(make_order, session):
    data = make_order()
    order = _order(session, data["order_id"])

    assert order.payment_deadline - order.created_at == timedelta(hours=24)


def test_blank_customer_fields_are_rejected(client, product, bank_accounts):
    response = client.post("/orders", json={
        "product_id": product.id,
        "customer_name": "   ",
        "customer_email": "rina@example.com",
        "customer_phone": "0812",
        "bank_account_id": bank_accounts[0].id,
    })
    assert response.status_code == 422


def test_bank_account_required_when_accounts_exist(client, product, bank_accounts):
    response = client.post("/orders", json={
        "product_id": product.id,
        "customer_name": "Rina",
        "customer_email": "rina@example.com",
        "customer_phone": "0812",
    })
    assert response.status_code == 400


def test_inactive_bank_account_is_rejected(client, session, product, bank_accounts):
    bank_accounts[1].is_active = False
    session.add(bank_accounts[1])
    session.commit()

    response = client.post("/orders", json={
        "product_id": product.id,
        "customer_name": "Rina",
        "customer_email": "rina@example.com",
        "customer_phone": "0812",
        "bank_account_id": bank_accounts[1].id,
    })
    assert response.status_code == 400


def test_no_bank_accounts_configured(client, product):
    response = client.post("/orders", json={
        "product_id": product.id,
        "customer_name": "Rina",
        "customer_email": "rina@example.com",
        "customer_phone": "0812",
    })
    assert response.status_code == 201
    assert response.json()["total"] == 129000


def test_unknown_product_and_package(client, product, bank_accounts):
    base = {
        "customer_name": "Rina",
        "customer_email": "rina@example.com",
        "customer_phone": "0812",
        "bank_account_id": bank_accounts[0].id,
    }
    assert client.post("/orders", json={**base, "product_id": 999}).status_code == 404
    assert client.post(
        "/orders", json={**base, "product_id": product.id, "package_index": 5}
    ).status_code == 400


def test_invoice_number_collision_is_retried(make_order, monkeypatch, session):
    first = make_order()
    taken = first["invoice_number"]

    numbers = iter([taken, "INV-20261018-ZZZZZ"])
    monkeypatch.setattr(
        "linkwedding.services.order_service.generate_invoice_number",
        lambda now=None: next(numbers),
    )

    second = make_order(customer_email="budi@example.com")
    assert second["invoice_number"] == "INV-20261018-ZZZZZ"
    assert len(session.exec(select(Order)).all()) == 2


def test_invoice_number_gives_up_after_attempts(client, make_order, monkeypatch, product, bank_accounts):
    taken = make_order()["invoice_number"]
    monkeypatch.setattr(
        "linkwedding.services.order_service.generate_invoice_number",
        lambda now=None: taken,
    )

    response = client.post("/orders", json={
        "product_id": product.id,
        "customer_name": "Budi",
        "customer_email": "budi@example.com",
        "customer_phone": "0812",
        "bank_account_id": bank_accounts[0].id,
    })
    assert response.status_code == 500


def test_other_integrity_errors_are_not_retried(client, monkeypatch, session, product, bank_accounts):
    attempts = []

    def next_number(now=None):
        attempts.append(now)
        return f"INV-20261018-A000{len(attempts)}"

    def failing_commit():
        raise IntegrityError("INSERT INTO order", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr("linkwedding.services.order_service.generate_invoice_number", next_number)
    monkeypatch.setattr(session, "commit", failing_commit)

    response = client.post("/orders", json={
        "product_id": product.id,
        "customer_name": "Budi",
        "customer_email": "budi@example.com",
        "customer_phone": "0812",
        "bank_account_id": bank_accounts[0].id,
    })

    assert response.status_code == 409
    assert "invoice number" not in response.json()["detail"]
    assert len(attempts) == 1


def test_checkout_context(client, product, bank_accounts, outbox):
    response = client.get("/orders/checkout", params={"product_id": product.id, "package": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["package_index"] == 1
    assert body["package"]["name"] == "Premium"
    assert [b["bank_name"] for b in body["bank_accounts"]] == ["BCA", "Mandiri"]
    assert outbox["analytics"] == [("InitiateCheckout", 249000)]


def test_checkout_out_of_range_package_falls_back_to_first(client, product):
    body = client.get("/orders/checkout", params={"product_id": product.id, "package": 9}).json()
    assert body["package_index"] == 0
    assert body["package"]["name"] == "Basic"


def test_discount_preview(client, product):
    response = client.post("/orders/discount/preview", json={
        "product_id": product.id,
        "package_index": 0,
        "code": "hemat10",
    })
    assert response.status_code == 200
    assert response.json() == {
        "code": "HEMAT10",
        "subtotal": 129000,
        "discount_amount": 12900,
        "tax": 0,
        "total": 116100,
    }

    # preview follows the chosen package
    premium = client.post("/orders/discount/preview", json={
        "product_id": product.id,
        "package_index": 1,
        "code": "HEMAT10",
    }).json()
    assert premium["discount_amount"] == 24900


def test_discount_preview_rejects_unknown_code(client, product):
    response = client.post("/orders/discount/preview", json={
        "product_id": product.id,
        "code": "HEMAT99",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid discount code"


def test_public_catalogue_and_bank_accounts(client, product, bank_accounts, session):
    bank_accounts[1].is_active = False
    session.add(bank_accounts[1])
    session.commit()

    products = client.get("/products").json()
    assert [p["name"] for p in products] == ["Rustic Garden"]
    assert client.get(f"/products/{product.id}").json()["packages"][1]["price"] == 249000
    assert client.get("/products/999").status_code == 404

    banks = client.get("/bank-accounts").json()
    assert [b["bank_name"] for b in banks] == ["BCA"]


def test_created_at_is_recent(make_order, session):
    before = utc_now()
    order = _order(session, make_order()["order_id"])
    assert before - timedelta(seconds=5) <= order.created_at <= utc_now()
