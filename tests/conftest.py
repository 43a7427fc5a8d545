import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("R2_PUBLIC_BASE", "https://cdn.linkwedding.test")
os.environ.setdefault("ADMIN_EMAILS", '["admin@linkwedding.id"]')
os.environ.setdefault("ADMIN_WHATSAPP", "6289524556302")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import linkwedding.models  # noqa: F401
from linkwedding.database import get_session
from linkwedding.main import app
from linkwedding.models.bank_account import BankAccount
from linkwedding.models.product import Product
from linkwedding.models.user import User
from linkwedding.services.pricing import seed_discount_codes
from linkwedding.utils.hash import hash_password
from linkwedding.utils.token import create_access_token

PACKAGES = [
    {
        "name": "Basic",
        "price": 129000,
        "undangan": "Undangan digital 1 halaman",
        "foto": "10 foto",
        "video": "-",
        "share": "Unlimited share",
    },
    {
        "name": "Premium",
        "price": 249000,
        "undangan": "Undangan digital lengkap",
        "foto": "30 foto",
        "video": "1 video",
        "share": "Unlimited share",
    },
]


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        seed_discount_codes(session)
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """Stub every call that would leave the process and record it."""
    sent = {
        "order_emails": [],
        "proof_notifications": [],
        "analytics": [],
        "uploads": [],
        "deleted_keys": [],
    }

    def fake_upload(file, order_id):
        url = f"https://cdn.linkwedding.test/payment-proofs/payment-proof-{order_id}.png"
        sent["uploads"].append(url)
        return url

    monkeypatch.setattr(
        "linkwedding.routes.orders.send_order_confirmation_email",
        lambda order: sent["order_emails"].append(order.invoice_number) or True,
    )
    monkeypatch.setattr(
        "linkwedding.routes.orders.track_purchase",
        lambda order: sent["analytics"].append(("Purchase", order.total)) or True,
    )
    monkeypatch.setattr(
        "linkwedding.routes.orders.track_initiate_checkout",
        lambda product, package: sent["analytics"].append(("InitiateCheckout", package["price"])) or True,
    )
    monkeypatch.setattr(
        "linkwedding.services.payment_confirmation.upload_payment_proof",
        fake_upload,
    )
    monkeypatch.setattr(
        "linkwedding.services.payment_confirmation.send_payment_proof_notification",
        lambda order: sent["proof_notifications"].append(order.invoice_number) or True,
    )
    monkeypatch.setattr(
        "linkwedding.services.order_status.delete_from_r2",
        lambda key: sent["deleted_keys"].append(key),
    )
    return sent


@pytest.fixture(name="product")
def product_fixture(session):
    product = Product(
        name="Rustic Garden",
        description="Tema rustic dengan nuansa hijau",
        category="undangan",
        packages=PACKAGES,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture(name="bank_accounts")
def bank_accounts_fixture(session):
    accounts = [
        BankAccount(bank_name="BCA", account_number="1234567890", account_name="LinkWedding"),
        BankAccount(bank_name="Mandiri", account_number="9876543210", account_name="LinkWedding"),
    ]
    for account in accounts:
        session.add(account)
    session.commit()
    for account in accounts:
        session.refresh(account)
    return accounts


@pytest.fixture(name="admin_user")
def admin_user_fixture(session):
    user = User(
        email="admin@linkwedding.id",
        full_name="Admin",
        password=hash_password("rahasia123"),
        role="admin",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin_user):
    token = create_access_token({"user_id": admin_user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="make_order")
def make_order_fixture(client, product, bank_accounts):
    def make_order(**overrides):
        payload = {
            "product_id": product.id,
            "package_index": 0,
            "customer_name": "Rina Ayu",
            "customer_email": "rina@example.com",
            "customer_phone": "081234567890",
            "bank_account_id": bank_accounts[0].id,
        }
        payload.update(overrides)
        response = client.post("/orders", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return make_order


@pytest.fixture(name="verify")
def verify_fixture(client):
    def verify(order_id, email="rina@example.com"):
        response = client.post(f"/invoices/{order_id}/verify", json={"email": email})
        assert response.status_code == 200, response.text
        return {"X-Invoice-Token": response.json()["access_token"]}

    return verify
