from luxeplan.models import User
from tests.conftest import auth


def test_register_creates_client(client):
    response = client.post("/users", json={"name": "Jane"}, headers=auth("Jane@LuxePlan.test"))
    assert response.status_code == 200
    body = response.json()
    assert body["created"] is True
    assert body["user"]["email"] == "jane@luxeplan.test"
    assert body["user"]["role"] == "client"


def test_register_again_only_refreshes_last_login(client, database):
    headers = auth("jane@luxeplan.test")
    first = client.post("/users", json={"name": "Jane"}, headers=headers).json()["user"]

    # Role changes made elsewhere must survive a later sign-in
    with database.session() as s:
        s.query(User).filter(User.email == "jane@luxeplan.test").update({"role": "decorator"})
        s.commit()

    second = client.post("/users", json={"name": "Someone Else"}, headers=headers).json()
    assert second["created"] is False
    assert second["user"]["id"] == first["id"]
    assert second["user"]["role"] == "decorator"
    assert second["user"]["lastLogin"] >= first["lastLogin"]

    with database.session() as s:
        assert s.query(User).filter(User.email == "jane@luxeplan.test").count() == 1


def test_register_ignores_role_in_body(client):
    response = client.post("/users", json={"name": "Eve", "role": "admin"}, headers=auth("eve@luxeplan.test"))
    assert response.json()["user"]["role"] == "client"


def test_role_defaults_to_client_for_unknown_user(client):
    response = client.get("/users/role", headers=auth("nobody@luxeplan.test"))
    assert response.json() == {"role": "client"}


def test_role_lookup(client, make_user):
    make_user("deco@luxeplan.test", role="decorator")
    response = client.get("/users/role", headers=auth("deco@luxeplan.test"))
    assert response.json() == {"role": "decorator"}


def test_admin_lists_users_except_self(client, admin, make_user):
    make_user("a@luxeplan.test")
    make_user("b@luxeplan.test", role="decorator")

    body = client.get("/users", headers=admin).json()
    emails = {u["email"] for u in body["items"]}
    assert emails == {"a@luxeplan.test", "b@luxeplan.test"}
    assert body["count"] == 2

    filtered = client.get("/users", params={"role": "decorator"}, headers=admin).json()
    assert [u["email"] for u in filtered["items"]] == ["b@luxeplan.test"]


def test_admin_updates_role(client, admin, make_user):
    user_id = make_user("a@luxeplan.test")
    response = client.patch(f"/users/{user_id}/role", json={"role": "admin"}, headers=admin)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_update_role_rejects_unknown_role(client, admin, make_user):
    user_id = make_user("a@luxeplan.test")
    response = client.patch(f"/users/{user_id}/role", json={"role": "owner"}, headers=admin)
    assert response.status_code == 422


def test_update_role_missing_user(client, admin):
    response = client.patch("/users/999/role", json={"role": "client"}, headers=admin)
    assert response.status_code == 404
