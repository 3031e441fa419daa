"""HTTP contract of the REST endpoints."""

import requests
from datetime import datetime
from unittest.mock import MagicMock, patch
from app.models.user import User
from app.models.vehicle_request import VehicleRequest
from app.services.errors import AuthenticationFailedError, DomainError
from conftest import PASSWORD, future, make_request, make_user, make_vehicle


def iso(dt):
    return dt.isoformat()


class TestAuthEndpoints:
    def test_register_returns_user_without_password(self, client, db):
        resp = client.post("/api/auth/register", json={
            "email": "new@corp.com", "password": "hunter22", "name": "New Hire",
            "department": "Sales",
        })
        assert resp.status_code == 201
        user = resp.json()["user"]
        assert user["email"] == "new@corp.com"
        assert user["role"] == "employee"
        assert "password" not in user and "passwordHash" not in user

    def test_register_duplicate_email_conflicts(self, client, db):
        make_user(db, "dup@corp.com")
        resp = client.post("/api/auth/register", json={
            "email": "DUP@corp.com", "password": "hunter22", "name": "Again",
        })
        assert resp.status_code == 409
        assert db.query(User).count() == 1

    def test_register_invalid_body(self, client):
        resp = client.post("/api/auth/register", json={"email": "not-an-email", "name": "X"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request data"
        assert resp.json()["errors"]

    def test_login_success(self, client, db):
        make_user(db, "emp@corp.com", name="Emp")
        resp = client.post("/api/auth/login", json={"email": "emp@corp.com", "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Emp"

    def test_login_wrong_password(self, client, db):
        make_user(db, "emp@corp.com")
        resp = client.post("/api/auth/login", json={"email": "emp@corp.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials"

    def test_login_failure_is_domain_error(self):
        assert issubclass(AuthenticationFailedError, DomainError)
        assert AuthenticationFailedError.status_code == 401

    def test_login_missing_password(self, client):
        resp = client.post("/api/auth/login", json={"email": "emp@corp.com"})
        assert resp.status_code == 400

    def test_users_filter_by_email(self, client, db):
        make_user(db, "a@corp.com")
        make_user(db, "b@corp.com")
        resp = client.get("/api/users", params={"email": "B@corp.com"})
        assert [u["email"] for u in resp.json()] == ["b@corp.com"]


class TestVehicleEndpoints:
    def test_list_vehicles_camel_case(self, client, db):
        make_vehicle(db, "FLT-009")
        resp = client.get("/api/vehicles")
        assert resp.status_code == 200
        assert resp.json()[0]["plateNumber"] == "FLT-009"

    def test_available_requires_both_dates(self, client):
        resp = client.get("/api/vehicles/available", params={"startDate": "2030-06-01"})
        assert resp.status_code == 400

    def test_available_rejects_garbage_dates(self, client):
        resp = client.get("/api/vehicles/available",
                          params={"startDate": "tomorrow", "endDate": "2030-06-05"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid date format"

    def test_available_rejects_inverted_range(self, client):
        resp = client.get("/api/vehicles/available",
                          params={"startDate": "2030-06-05", "endDate": "2030-06-01"})
        assert resp.status_code == 400

    def test_available_example_from_booking(self, client, db):
        emp = make_user(db)
        car = make_vehicle(db)
        make_request(db, car, emp, datetime(2030, 6, 1), datetime(2030, 6, 5), status="approved")

        busy = client.get("/api/vehicles/available",
                          params={"startDate": "2030-06-03", "endDate": "2030-06-07"})
        free = client.get("/api/vehicles/available",
                          params={"startDate": "2030-06-06T00:00:00Z", "endDate": "2030-06-10"})
        assert busy.json() == []
        assert [v["id"] for v in free.json()] == [car.id]


class TestRequestEndpoints:
    def test_create_request(self, client, db):
        emp = make_user(db)
        car = make_vehicle(db)
        resp = client.post("/api/requests", json={
            "vehicleId": car.id, "userId": emp.id,
            "startDate": iso(future(1)), "endDate": iso(future(3)), "purpose": "Audit",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "pending"
        assert data["accessCode"] is None

    def test_create_request_bad_dates(self, client, db):
        emp = make_user(db)
        car = make_vehicle(db)
        resp = client.post("/api/requests", json={
            "vehicleId": car.id, "userId": emp.id,
            "startDate": iso(future(3)), "endDate": iso(future(1)),
        })
        assert resp.status_code == 400
        assert resp.json()["detail"] == "End date must be after start date"

    def test_create_request_in_past(self, client, db):
        emp = make_user(db)
        car = make_vehicle(db)
        resp = client.post("/api/requests", json={
            "vehicleId": car.id, "userId": emp.id,
            "startDate": iso(future(-3)), "endDate": iso(future(1)),
        })
        assert resp.status_code == 400

    def test_create_request_schema_error(self, client):
        resp = client.post("/api/requests", json={"vehicleId": "abc"})
        assert resp.status_code == 400

    def test_create_request_unavailable(self, client, db):
        emp = make_user(db)
        car = make_vehicle(db)
        make_request(db, car, emp, future(1), future(5))
        resp = client.post("/api/requests", json={
            "vehicleId": car.id, "userId": emp.id,
            "startDate": iso(future(2)), "endDate": iso(future(3)),
        })
        assert resp.status_code == 409
        assert db.query(VehicleRequest).count() == 1

    def test_list_requests_with_details(self, client, db):
        emp = make_user(db)
        boss = make_user(db, "boss@corp.com", role="admin")
        car = make_vehicle(db)
        make_request(db, car, emp, future(1), future(2))
        make_request(db, car, boss, future(3), future(4), status="approved")

        mine = client.get("/api/requests", params={"userId": emp.id}).json()
        assert len(mine) == 1
        assert mine[0]["vehicle"]["plateNumber"] == car.plate_number
        assert mine[0]["user"]["email"] == emp.email

        pending = client.get("/api/requests", params={"status": "pending"}).json()
        assert [r["userId"] for r in pending] == [emp.id]
        assert len(client.get("/api/requests").json()) == 2

    def test_list_requests_bad_status(self, client):
        assert client.get("/api/requests", params={"status": "maybe"}).status_code == 400

    def test_get_request_not_found(self, client):
        assert client.get("/api/requests/123").status_code == 404

    def test_approve_returns_details_and_code(self, client, db):
        emp = make_user(db)
        boss = make_user(db, "boss@corp.com", role="admin", name="Boss")
        req = make_request(db, make_vehicle(db), emp, future(1), future(2))

        resp = client.patch(f"/api/requests/{req.id}/status",
                            json={"status": "approved", "adminId": boss.id})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "approved"
        assert len(data["accessCode"]) == 4 and data["accessCode"].isdigit()
        assert data["admin"]["name"] == "Boss"
        assert data["vehicle"]["id"] == req.vehicle_id

    def test_reject_has_no_code(self, client, db):
        emp = make_user(db)
        req = make_request(db, make_vehicle(db), emp, future(1), future(2))

        resp = client.patch(f"/api/requests/{req.id}/status", json={"status": "rejected"})
        assert resp.status_code == 200
        assert resp.json()["accessCode"] is None

    def test_invalid_status_value(self, client, db):
        emp = make_user(db)
        req = make_request(db, make_vehicle(db), emp, future(1), future(2))
        resp = client.patch(f"/api/requests/{req.id}/status", json={"status": "pending"})
        assert resp.status_code == 400

    def test_unknown_request_id(self, client):
        resp = client.patch("/api/requests/999/status", json={"status": "approved"})
        assert resp.status_code == 404

    def test_second_decision_conflicts(self, client, db):
        emp = make_user(db)
        req = make_request(db, make_vehicle(db), emp, future(1), future(2), status="rejected")
        resp = client.patch(f"/api/requests/{req.id}/status", json={"status": "approved"})
        assert resp.status_code == 409


class TestStatsEndpoints:
    def test_vehicle_stats(self, client, db):
        make_vehicle(db)
        resp = client.get("/api/stats/vehicles")
        assert resp.json() == {"total": 1, "available": 1, "inUse": 0, "pendingRequests": 0}

    def test_pending_count(self, client, db):
        emp = make_user(db)
        car = make_vehicle(db)
        make_request(db, car, emp, future(1), future(2))
        make_request(db, car, emp, future(3), future(4), status="approved")
        assert client.get("/api/stats/pending-requests").json() == {"count": 1}


class TestHealth:
    def test_identity_provider_down_degrades(self, client):
        with patch("app.routers.health.requests.get",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            data = client.get("/api/health").json()
        assert data["database"] == "ok"
        assert data["identityProvider"] == "unreachable"
        assert data["status"] == "degraded"

    def test_all_ok(self, client):
        with patch("app.routers.health.requests.get", return_value=MagicMock(status_code=200)):
            data = client.get("/api/health").json()
        assert data["status"] == "ok"
        assert data["identityProvider"] == "ok"
