from luxeplan.models import User
from tests.conftest import auth


def test_apply_creates_pending_profile(client, make_user):
    make_user("deco@luxeplan.test")
    response = client.post(
        "/decorators",
        json={"name": "Deco", "phone": "555 123 4567", "specialty": "wedding"},
        headers=auth("deco@luxeplan.test"),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["workStatus"] == "available"
    assert body["phone"] == "+15551234567"


def test_apply_twice_conflicts(client, make_user):
    make_user("deco@luxeplan.test")
    headers = auth("deco@luxeplan.test")
    client.post("/decorators", json={"name": "Deco"}, headers=headers)
    response = client.post("/decorators", json={"name": "Deco"}, headers=headers)
    assert response.status_code == 409


def test_accepting_promotes_and_rejecting_demotes(client, admin, make_user, database):
    make_user("deco@luxeplan.test")
    decorator_id = client.post("/decorators", json={"name": "Deco"}, headers=auth("deco@luxeplan.test")).json()["id"]

    accepted = client.patch(f"/decorators/{decorator_id}/status", json={"status": "accepted"}, headers=admin)
    assert accepted.json()["status"] == "accepted"
    assert client.get("/users/role", headers=auth("deco@luxeplan.test")).json() == {"role": "decorator"}

    me = client.get("/decorators/me", headers=auth("deco@luxeplan.test"))
    assert me.status_code == 200
    assert me.json()["email"] == "deco@luxeplan.test"

    client.patch(f"/decorators/{decorator_id}/status", json={"status": "rejected"}, headers=admin)
    with database.session() as s:
        assert s.query(User).filter(User.email == "deco@luxeplan.test").one().role == "client"


def test_available_lists_only_accepted_and_free(client, admin, make_decorator):
    make_decorator("free@luxeplan.test")
    make_decorator("busy@luxeplan.test", work_status="working")
    make_decorator("new@luxeplan.test", status="pending")

    body = client.get("/decorators/available", headers=admin).json()
    assert [d["email"] for d in body["items"]] == ["free@luxeplan.test"]

    body = client.get("/decorators", params={"status": "accepted"}, headers=admin).json()
    assert body["count"] == 2


def test_delete_decorator_demotes_user(client, admin, make_decorator):
    decorator_id = make_decorator("deco@luxeplan.test")
    assert client.delete(f"/decorators/{decorator_id}", headers=admin).status_code == 200
    assert client.get("/users/role", headers=auth("deco@luxeplan.test")).json() == {"role": "client"}
