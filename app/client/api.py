"""
Thin REST client for the Fleet Reservation API, used by the CLI.
Non-2xx responses raise ApiError carrying the status code and server detail.
"""

from typing import Optional
import requests
from app.config import settings


class ApiError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class FleetApiClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: float = 10):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.API_KEY
        self.timeout = timeout

    def _call(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        try:
            resp = requests.request(method, f"{self.base_url}{path}", headers=headers,
                                    timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ApiError(0, f"API unreachable: {e}") from e

        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise ApiError(resp.status_code, detail)
        return resp.json()

    # ── Users ──────────────────────────────────────────────────────────────
    def find_user(self, email: str) -> Optional[dict]:
        users = self._call("GET", "/api/users", params={"email": email})
        return users[0] if users else None

    # ── Vehicles ───────────────────────────────────────────────────────────
    def list_vehicles(self) -> list[dict]:
        return self._call("GET", "/api/vehicles")

    def available_vehicles(self, start_date: str, end_date: str) -> list[dict]:
        return self._call("GET", "/api/vehicles/available",
                          params={"startDate": start_date, "endDate": end_date})

    # ── Requests ───────────────────────────────────────────────────────────
    def list_requests(self, user_id: Optional[int] = None, status: Optional[str] = None) -> list[dict]:
        params = {}
        if user_id is not None:
            params["userId"] = user_id
        if status:
            params["status"] = status
        return self._call("GET", "/api/requests", params=params)

    def create_request(self, vehicle_id: int, user_id: int, start_date: str, end_date: str,
                       purpose: Optional[str] = None) -> dict:
        body = {"vehicleId": vehicle_id, "userId": user_id,
                "startDate": start_date, "endDate": end_date}
        if purpose:
            body["purpose"] = purpose
        return self._call("POST", "/api/requests", json=body)

    def set_request_status(self, request_id: int, status: str,
                           admin_id: Optional[int] = None) -> dict:
        body = {"status": status}
        if admin_id is not None:
            body["adminId"] = admin_id
        return self._call("PATCH", f"/api/requests/{request_id}/status", json=body)

    # ── Stats ──────────────────────────────────────────────────────────────
    def vehicle_stats(self) -> dict:
        return self._call("GET", "/api/stats/vehicles")

    def pending_count(self) -> int:
        return self._call("GET", "/api/stats/pending-requests")["count"]
