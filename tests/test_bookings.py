from datetime import datetime

import pytest

from luxeplan.domain.bookings.service import BookingService, day_bounds
from luxeplan.models import Booking, BookingDecorator, Decorator, utcnow
from tests.conftest import auth

CLIENT = "jane@luxeplan.test"


@pytest.fixture
def service_id(make_service):
    return make_service(name="Wedding Stage", cost=600.0)


@pytest.fixture
def booking_id(client, make_user, service_id):
    make_user(CLIENT)
    response = client.post(
        "/bookings",
        json={"serviceId": service_id, "date": "2026-10-19", "time": "18:00", "location": "Dhaka", "phone": "+8801712345678"},
        headers=auth(CLIENT),
    )
    assert response.status_code == 201
    return response.json()["id"]


def work_status(database, decorator_id: int) -> str:
    with database.session() as s:
        return s.query(Decorator).filter(Decorator.id == decorator_id).one().work_status


def test_create_booking_uses_catalog_cost(client, make_user, service_id, sender):
    make_user(CLIENT)
    response = client.post(
        "/bookings",
        json={"serviceId": service_id, "date": "2026-10-19", "phone": "+8801712345678"},
        headers=auth(CLIENT),
    )
    body = response.json()
    assert body["status"] == "pending"
    assert body["paymentStatus"] == "unpaid"
    assert body["cost"] == 600.0
    assert body["service_name"] == "Wedding Stage"
    assert body["userEmail"] == CLIENT
    assert body["decoratorIds"] == []

    assert len(sender.sent) == 1
    recipient, message = sender.sent[0]
    assert recipient == "+8801712345678"
    assert "Wedding Stage" in message


def test_notification_failure_does_not_fail_booking(client, make_user, service_id, sender, database):
    make_user(CLIENT)
    sender.fail = True
    response = client.post("/bookings", json={"serviceId": service_id, "date": "2026-10-19"}, headers=auth(CLIENT))
    assert response.status_code == 201
    with database.session() as s:
        assert s.query(Booking).count() == 1


def test_create_booking_rejects_bad_date(client, make_user, service_id):
    make_user(CLIENT)
    response = client.post("/bookings", json={"serviceId": service_id, "date": "19/10/2026"}, headers=auth(CLIENT))
    assert response.status_code == 422


def test_create_booking_unknown_service(client, make_user):
    make_user(CLIENT)
    response = client.post("/bookings", json={"serviceId": 42, "date": "2026-10-19"}, headers=auth(CLIENT))
    assert response.status_code == 404


def test_assign_two_decorators(client, admin, booking_id, make_decorator, database):
    first = make_decorator("rina@luxeplan.test", name="Rina")
    second = make_decorator("omar@luxeplan.test", name="Omar")

    response = client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first, second]}, headers=admin)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "assigned"
    assert body["decoratorIds"] == [first, second]
    assert body["decoratorNames"] == ["Rina", "Omar"]
    assert body["decoratorEmails"] == ["rina@luxeplan.test", "omar@luxeplan.test"]
    assert work_status(database, first) == "working"
    assert work_status(database, second) == "working"


def test_reassign_releases_dropped_decorator(client, admin, booking_id, make_decorator, database):
    first = make_decorator("rina@luxeplan.test")
    second = make_decorator("omar@luxeplan.test")
    third = make_decorator("lee@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first, second]}, headers=admin)

    response = client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [third, second]}, headers=admin)
    assert response.status_code == 200
    assert response.json()["decoratorIds"] == [third, second]
    assert work_status(database, first) == "available"
    assert work_status(database, second) == "working"
    assert work_status(database, third) == "working"


def test_assign_rejects_busy_or_unaccepted(client, admin, booking_id, make_decorator):
    busy = make_decorator("busy@luxeplan.test", work_status="working")
    pending = make_decorator("new@luxeplan.test", status="pending")

    assert client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [busy]}, headers=admin).status_code == 409
    assert client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [pending]}, headers=admin).status_code == 409
    assert client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [999]}, headers=admin).status_code == 404


def test_assign_requires_non_empty_unique_list(client, admin, booking_id):
    assert client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": []}, headers=admin).status_code == 422
    assert client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [1, 1]}, headers=admin).status_code == 422


def test_workflow_through_completion(client, admin, booking_id, make_decorator, database, sender):
    first = make_decorator("rina@luxeplan.test", name="Rina")
    second = make_decorator("omar@luxeplan.test", name="Omar")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first, second]}, headers=admin)

    planning = client.patch(f"/bookings/{booking_id}/progress", headers=auth("omar@luxeplan.test"))
    assert planning.status_code == 200
    assert planning.json()["status"] == "planning"
    assert planning.json()["planningAt"] is not None
    assert "Rina, Omar" in sender.sent[-1][1]

    done = client.patch(f"/bookings/{booking_id}/complete", headers=auth("rina@luxeplan.test"))
    assert done.status_code == 200
    assert done.json()["status"] == "completed"
    assert work_status(database, first) == "available"
    assert work_status(database, second) == "available"

    # Terminal state
    again = client.patch(f"/bookings/{booking_id}/progress", headers=auth("rina@luxeplan.test"))
    assert again.status_code == 409
    assert again.json()["status"] == "completed"
    assert client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first]}, headers=admin).status_code == 409


def test_progress_on_pending_booking_conflicts(client, booking_id, make_decorator, database):
    make_decorator("rina@luxeplan.test")
    with database.session() as s:
        booking = s.query(Booking).filter(Booking.id == booking_id).one()
        decorator = s.query(Decorator).filter(Decorator.email == "rina@luxeplan.test").one()
        booking.assignments = [BookingDecorator(decorator_id=decorator.id, decorator_email=decorator.email, position=0)]
        s.commit()

    response = client.patch(f"/bookings/{booking_id}/progress", headers=auth("rina@luxeplan.test"))
    assert response.status_code == 409


def test_unassigned_decorator_cannot_progress(client, admin, booking_id, make_decorator):
    first = make_decorator("rina@luxeplan.test")
    make_decorator("other@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first]}, headers=admin)

    response = client.patch(f"/bookings/{booking_id}/progress", headers=auth("other@luxeplan.test"))
    assert response.status_code == 403


def test_client_sees_only_own_bookings(client, booking_id, make_user):
    make_user("other@luxeplan.test")
    mine = client.get("/bookings/mine", headers=auth(CLIENT)).json()
    assert mine["count"] == 1

    theirs = client.get("/bookings/mine", headers=auth("other@luxeplan.test")).json()
    assert theirs["count"] == 0
    assert client.get(f"/bookings/{booking_id}", headers=auth("other@luxeplan.test")).status_code == 403
    assert client.get(f"/bookings/{booking_id}", headers=auth(CLIENT)).status_code == 200


def test_owner_updates_schedule(client, booking_id):
    response = client.put(
        f"/bookings/{booking_id}", json={"date": "2026-11-02", "location": "Chattogram"}, headers=auth(CLIENT)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2026-11-02"
    assert body["location"] == "Chattogram"
    assert body["cost"] == 600.0
    assert body["updatedAt"] is not None


def test_stranger_cannot_update_or_delete(client, booking_id, make_user):
    make_user("other@luxeplan.test")
    headers = auth("other@luxeplan.test")
    assert client.put(f"/bookings/{booking_id}", json={"location": "x"}, headers=headers).status_code == 403
    assert client.delete(f"/bookings/{booking_id}", headers=headers).status_code == 403


def test_delete_releases_assigned_decorators(client, admin, booking_id, make_decorator, database):
    first = make_decorator("rina@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first]}, headers=admin)

    assert client.delete(f"/bookings/{booking_id}", headers=auth(CLIENT)).json() == {"message": "Booking deleted"}
    assert work_status(database, first) == "available"
    assert client.get(f"/bookings/{booking_id}", headers=admin).status_code == 404


def test_admin_filters(client, admin, booking_id, make_decorator, service_id):
    first = make_decorator("rina@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [first]}, headers=admin)
    client.post("/bookings", json={"serviceId": service_id, "date": "2026-12-01"}, headers=auth(CLIENT))

    assert client.get("/bookings", headers=admin).json()["count"] == 2
    assert client.get("/bookings", params={"date": "2026-10"}, headers=admin).json()["count"] == 1
    assert client.get("/bookings", params={"status": "assigned"}, headers=admin).json()["count"] == 1
    by_decorator = client.get("/bookings", params={"decoratorEmail": "RINA@luxeplan.test"}, headers=admin).json()
    assert [b["id"] for b in by_decorator["items"]] == [booking_id]

    assigned = client.get("/bookings/decorator/assigned", headers=auth("rina@luxeplan.test")).json()
    assert assigned["count"] == 1


def test_day_bounds():
    assert day_bounds(datetime(2026, 12, 31, 23, 59).date()) == ("2026-12-31", "2027-01-01")


def _booking(s, date, status="assigned", email="rina@luxeplan.test"):
    booking = Booking(
        user_email=CLIENT,
        service_id=1,
        service_name="Wedding Stage",
        date=date,
        cost=100.0,
        status=status,
    )
    booking.assignments = [BookingDecorator(decorator_id=1, decorator_email=email, position=0)]
    s.add(booking)
    return booking


def test_todays_schedule_excludes_other_days_and_completed(database):
    with database.session() as s:
        _booking(s, "2026-10-19")
        _booking(s, "2026-10-19T09:30")
        _booking(s, "2026-10-19", status="completed")
        _booking(s, "2026-10-18")
        _booking(s, "2026-10-20")
        _booking(s, "2026-10-19", email="other@luxeplan.test")
        s.commit()

        today = BookingService(s).todays_schedule("rina@luxeplan.test", now=datetime(2026, 10, 19, 15, 0))
        assert sorted(b.date for b in today) == ["2026-10-19", "2026-10-19T09:30"]


def test_today_endpoint(client, make_decorator, database):
    make_decorator("rina@luxeplan.test")
    today = utcnow().date().isoformat()
    with database.session() as s:
        _booking(s, today)
        _booking(s, today, status="completed")
        s.commit()

    response = client.get("/bookings/decorator/today", headers=auth("rina@luxeplan.test"))
    assert response.status_code == 200
    assert [b["status"] for b in response.json()] == ["assigned"]


def test_decorator_on_open_booking_cannot_be_rejected(client, admin, booking_id, service_id, make_decorator, database):
    decorator = make_decorator("rina@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [decorator]}, headers=admin)

    response = client.patch(f"/decorators/{decorator}/status", json={"status": "rejected"}, headers=admin)
    assert response.status_code == 409
    assert response.json()["bookingIds"] == [booking_id]
    assert work_status(database, decorator) == "working"

    # Still busy, so a second open booking cannot take them
    other = client.post("/bookings", json={"serviceId": service_id, "date": "2026-10-20"}, headers=auth(CLIENT)).json()["id"]
    assert client.patch(f"/bookings/{other}/assign", json={"decoratorIds": [decorator]}, headers=admin).status_code == 409


def test_decorator_on_open_booking_cannot_be_deleted(client, admin, booking_id, make_decorator):
    decorator = make_decorator("rina@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [decorator]}, headers=admin)

    response = client.delete(f"/decorators/{decorator}", headers=admin)
    assert response.status_code == 409
    booking = client.get(f"/bookings/{booking_id}", headers=admin).json()
    assert booking["status"] == "assigned"
    assert booking["decoratorIds"] == [decorator]


def test_decorator_can_be_rejected_after_completion(client, admin, booking_id, make_decorator):
    decorator = make_decorator("rina@luxeplan.test")
    client.patch(f"/bookings/{booking_id}/assign", json={"decoratorIds": [decorator]}, headers=admin)
    client.patch(f"/bookings/{booking_id}/complete", headers=auth("rina@luxeplan.test"))

    response = client.patch(f"/decorators/{decorator}/status", json={"status": "rejected"}, headers=admin)
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"


def test_date_filter_treats_wildcards_literally(client, admin, booking_id):
    assert client.get("/bookings", params={"date": "%"}, headers=admin).json()["count"] == 0
    assert client.get("/bookings", params={"date": "2026_10"}, headers=admin).json()["count"] == 0
    assert client.get("/bookings", params={"date": "2026-10-19"}, headers=admin).json()["count"] == 1
