from datetime import date

import pytest

ADMIN_GETS = ["/admin/users", "/admin/allSales", "/admin/userSales?userId=1"]


@pytest.mark.parametrize("path", ADMIN_GETS)
def test_non_admin_is_forbidden(client_for, alice, path):
    r = client_for(alice).get(path)
    assert r.status_code == 403
    assert r.json() == {"detail": "Apenas administradores podem acessar"}


def test_non_admin_cannot_mutate(client_for, alice, bob, add_sale, sale_body):
    sale = add_sale(bob)
    c = client_for(alice)
    assert c.post("/admin/updateSale", json=dict(sale_body, id=sale.id)).status_code == 403
    assert c.post("/admin/deleteSale", json={"id": sale.id}).status_code == 403
    assert len(client_for(bob).get("/sales/list").json()) == 1


def test_anonymous_admin_call_is_unauthenticated(anon):
    assert anon.get("/admin/users").status_code == 401


def test_users_ordered_by_email(client_for, make_user, admin):
    make_user("zed", email="a@example.com")
    make_user("amy", email="z@example.com")
    rows = client_for(admin).get("/admin/users").json()
    assert [u["email"] for u in rows] == ["a@example.com", "boss@example.com", "z@example.com"]
    assert {u["role"] for u in rows if u["openId"] == "boss"} == {"admin"}


def test_all_and_user_sales(client_for, admin, alice, bob, add_sale):
    add_sale(alice, paid=date(2024, 1, 1), product="A1")
    add_sale(bob, paid=date(2024, 2, 1), product="B1")
    c = client_for(admin)

    every = c.get("/admin/allSales").json()
    assert [s["productCode"] for s in every] == ["B1", "A1"]

    only_alice = c.get("/admin/userSales", params={"userId": alice.id}).json()
    assert [s["productCode"] for s in only_alice] == ["A1"]


def test_admin_can_edit_and_delete_any_sale(client_for, admin, alice, add_sale, sale_body):
    sale = add_sale(alice)
    c = client_for(admin)

    r = c.post("/admin/updateSale", json=dict(sale_body, id=sale.id, clientName="Ana", value="300"))
    assert r.status_code == 200
    row = client_for(alice).get("/sales/list").json()[0]
    assert row["clientName"] == "Ana"
    assert row["value"] == 300.0
    assert row["userId"] == alice.id

    assert c.post("/admin/deleteSale", json={"id": sale.id}).status_code == 200
    assert client_for(alice).get("/sales/list").json() == []


def test_admin_missing_sale_is_not_found(client_for, admin, sale_body):
    c = client_for(admin)
    assert c.post("/admin/updateSale", json=dict(sale_body, id=404)).status_code == 404
    assert c.post("/admin/deleteSale", json={"id": 404}).status_code == 404


@pytest.mark.parametrize("user_id", ["0", "-3", str(2**31), str(2**70)])
def test_user_sales_rejects_out_of_range_id(client_for, admin, user_id):
    r = client_for(admin).get("/admin/userSales", params={"userId": user_id})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "userId"


def test_admin_mutations_reject_out_of_range_id(client_for, admin, alice, add_sale, sale_body):
    add_sale(alice)
    c = client_for(admin)
    assert c.post("/admin/updateSale", json=dict(sale_body, id=2**70)).status_code == 400
    assert c.post("/admin/deleteSale", json={"id": 2**70}).status_code == 400
    assert len(c.get("/admin/allSales").json()) == 1
