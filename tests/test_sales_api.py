from datetime import date

import pytest


def test_requires_login(anon, sale_body):
    assert anon.get("/sales/list").status_code == 401
    assert anon.get("/sales/stats").status_code == 401
    assert anon.post("/sales/create", json=sale_body).status_code == 401


def test_invalid_cookie_is_unauthenticated(app):
    from fastapi.testclient import TestClient
    from Conta.security import COOKIE_NAME

    c = TestClient(app, cookies={COOKIE_NAME: "not-a-jwt"})
    assert c.get("/sales/list").status_code == 401


def test_create_then_list_and_stats(client_for, alice, sale_body):
    c = client_for(alice)
    r = c.post("/sales/create", json=sale_body)
    assert r.status_code == 200
    assert r.json() == {"success": True}

    rows = c.get("/sales/list").json()
    assert len(rows) == 1
    row = rows[0]
    assert row["productCode"] == "JOI-001"
    assert row["clientName"] == "João Silva"
    assert row["type"] == "Anel"
    assert row["value"] == 150.00
    assert row["paymentMethod"] == "PIX"
    assert row["paymentDate"] == "2024-03-01"
    assert row["userId"] == alice.id

    stats = c.get("/sales/stats").json()
    assert stats == {
        "totalGross": 150.0,
        "totalNet": 105.0,
        "totalCommission": 45.0,
        "count": 1,
        "byPaymentMethod": {"PIX": 150.0},
    }


def test_value_accepts_number_and_iso_timestamp(client_for, alice, sale_body):
    c = client_for(alice)
    sale_body.update(value=99.999, paymentDate="2024-05-10T13:00:00.000Z")
    assert c.post("/sales/create", json=sale_body).status_code == 200
    row = c.get("/sales/list").json()[0]
    assert row["value"] == 100.00
    assert row["paymentDate"] == "2024-05-10"


@pytest.mark.parametrize("field, value, message", [
    ("productCode", "  ", "Código do produto é obrigatório"),
    ("clientName", "", "Nome do cliente é obrigatório"),
    ("type", "", "Tipo é obrigatório"),
    ("paymentMethod", "", "Forma de pagamento é obrigatória"),
    ("value", "-5", "Valor deve ser positivo"),
    ("value", "0", "Valor deve ser positivo"),
    ("value", "abc", "Valor inválido"),
    ("value", "1e30", "Valor muito alto"),
    ("value", "-1e30", "Valor deve ser positivo"),
    ("paymentDate", "2024-02-30", "Data do pagamento inválida"),
    ("paymentDate", "2024-03-01garbage", "Data do pagamento inválida"),
])
def test_create_validation(client_for, alice, sale_body, field, value, message):
    c = client_for(alice)
    sale_body[field] = value
    r = c.post("/sales/create", json=sale_body)
    assert r.status_code == 400
    assert r.json()["detail"] == message
    assert r.json()["errors"][0]["field"] == field
    assert c.get("/sales/list").json() == []


def test_list_newest_payment_first(client_for, alice, add_sale):
    add_sale(alice, paid=date(2024, 1, 1), product="OLD")
    add_sale(alice, paid=date(2024, 6, 1), product="NEW")
    add_sale(alice, paid=date(2024, 3, 1), product="MID")
    rows = client_for(alice).get("/sales/list").json()
    assert [r["productCode"] for r in rows] == ["NEW", "MID", "OLD"]


def test_update_own_sale(client_for, alice, add_sale, sale_body):
    sale = add_sale(alice)
    c = client_for(alice)
    body = dict(sale_body, id=sale.id, value="200.50", paymentMethod="Boleto")
    assert c.post("/sales/update", json=body).status_code == 200
    row = c.get("/sales/list").json()[0]
    assert row["value"] == 200.50
    assert row["paymentMethod"] == "Boleto"


def test_update_validates_like_create(client_for, alice, add_sale, sale_body):
    sale = add_sale(alice)
    r = client_for(alice).post("/sales/update", json=dict(sale_body, id=sale.id, value="0"))
    assert r.status_code == 400


def test_delete_own_sale(client_for, alice, add_sale):
    sale = add_sale(alice)
    c = client_for(alice)
    assert c.post("/sales/delete", json={"id": sale.id}).status_code == 200
    assert c.get("/sales/list").json() == []


def test_ownership_isolation(client_for, alice, bob, add_sale, sale_body):
    sale = add_sale(alice, value="80.00")
    as_bob = client_for(bob)

    assert as_bob.get("/sales/list").json() == []
    assert as_bob.get("/sales/stats").json()["count"] == 0

    r = as_bob.post("/sales/update", json=dict(sale_body, id=sale.id))
    assert r.status_code == 404
    r = as_bob.post("/sales/delete", json={"id": sale.id})
    assert r.status_code == 404

    rows = client_for(alice).get("/sales/list").json()
    assert len(rows) == 1
    assert rows[0]["value"] == 80.00
    assert rows[0]["productCode"] == "JOI-001"


def test_missing_sale_is_not_found(client_for, alice, sale_body):
    c = client_for(alice)
    assert c.post("/sales/delete", json={"id": 999}).status_code == 404
    assert c.post("/sales/update", json=dict(sale_body, id=999)).status_code == 404


@pytest.mark.parametrize("bad_id", [0, -1, 2**31, 2**70])
def test_out_of_range_id_is_rejected(client_for, alice, add_sale, sale_body, bad_id):
    add_sale(alice)
    c = client_for(alice)
    assert c.post("/sales/delete", json={"id": bad_id}).status_code == 400
    assert c.post("/sales/update", json=dict(sale_body, id=bad_id)).status_code == 400
    assert len(c.get("/sales/list").json()) == 1


def test_report_filters_and_totals(client_for, alice, add_sale):
    add_sale(alice, value="100.00", method="PIX", client="João Silva", paid=date(2024, 3, 1))
    add_sale(alice, value="50.00", method="Boleto", client="Maria", paid=date(2024, 3, 10))
    add_sale(alice, value="25.00", method="PIX", client="Joana", paid=date(2024, 4, 1))
    c = client_for(alice)

    r = c.get("/sales/report", params={"paymentMethod": "PIX", "endDate": "2024-03-31"}).json()
    assert r["count"] == 1
    assert r["totalGross"] == 100.0
    assert r["totalCommission"] == 30.0
    assert [s["clientName"] for s in r["sales"]] == ["João Silva"]
    assert set(r["paymentMethods"]) == {"PIX", "Boleto"}

    r = c.get("/sales/report", params={"clientName": "jo"}).json()
    assert r["count"] == 2


def test_unfiltered_report_matches_stats(client_for, alice, add_sale):
    for v in ("10.10", "20.25", "33.33", "0.01"):
        add_sale(alice, value=v)
    c = client_for(alice)
    report = c.get("/sales/report").json()
    stats = c.get("/sales/stats").json()
    assert report["totalGross"] == stats["totalGross"] == 63.69
    assert report["totalCommission"] == stats["totalCommission"]
    assert report["totalNet"] == stats["totalNet"]
    assert report["count"] == stats["count"] == 4


def test_options(client_for, alice):
    body = client_for(alice).get("/sales/options").json()
    assert "PIX" in body["paymentMethods"]
    assert "Anel" in body["jewelryTypes"]
    assert body["commissionRate"] == 0.3
