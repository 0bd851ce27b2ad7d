# tests/conftest.py
# ---------------------------------------------------------------------
# - One in-memory SQLite store per test (StaticPool keeps it alive)
# - The app is built around that store; lifespan is not entered
# - Clients are authenticated by minting our own session cookie
# ---------------------------------------------------------------------
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from Conta.database import Store
from Conta.models import Sale
from Conta.security import COOKIE_NAME, create_session_token
from Conta.users import IdentityAssertion, upsert_user
from Vendas.crud import create_sale
from main import create_app


@pytest.fixture
def store():
    s = Store("sqlite://")
    s.init_schema()
    yield s
    s.dispose()


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def anon(app):
    return TestClient(app)


@pytest.fixture
def make_user(store):
    def _make(open_id: str, role: str | None = None, email: str | None = None):
        return upsert_user(store, IdentityAssertion(
            open_id=open_id,
            name=open_id.title(),
            email=email or f"{open_id}@example.com",
            login_method="google",
            role=role,
        ))
    return _make


@pytest.fixture
def client_for(app):
    def _client(user):
        token = create_session_token(user.open_id, user.name)
        return TestClient(app, cookies={COOKIE_NAME: token})
    return _client


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def admin(make_user):
    return make_user("boss", role="admin")


@pytest.fixture
def add_sale(store):
    def _add(user, value="100.00", method="PIX", client="João Silva",
             paid=date(2024, 3, 1), product="JOI-001", kind="Anel"):
        return create_sale(store, Sale(
            user_id=user.id,
            product_code=product,
            client_name=client,
            type=kind,
            value=Decimal(value),
            payment_method=method,
            payment_date=paid,
        ))
    return _add


SALE_BODY = {
    "productCode": "JOI-001",
    "clientName": "João Silva",
    "type": "Anel",
    "value": "150.00",
    "paymentMethod": "PIX",
    "paymentDate": "2024-03-01",
}


@pytest.fixture
def sale_body():
    return dict(SALE_BODY)
