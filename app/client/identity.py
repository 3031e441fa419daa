"""
Async client for the external identity provider (GoTrue-style auth + PostgREST
profile table, as exposed by Supabase).

Endpoints used:
  POST /auth/v1/token?grant_type=password       sign in
  POST /auth/v1/token?grant_type=refresh_token  refresh
  POST /auth/v1/logout                          sign out
  GET  /rest/v1/users?id=eq.<id>                profile row

State changes (SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED) are pushed to the
callbacks registered with on_auth_state_change().
"""

import time
from dataclasses import dataclass, asdict
from typing import Awaitable, Callable, Optional
import httpx
from app.client.session_store import SessionStore
from app.config import settings
from app.schemas.user import UserProfile
from app.utils.logger import get_logger

logger = get_logger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"

# Refresh a little before the provider's expiry
_EXPIRY_LEEWAY_SECONDS = 30


class IdentityProviderError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidCredentialsError(IdentityProviderError):
    pass


@dataclass
class ProviderSession:
    access_token: str
    refresh_token: str
    expires_at: int            # epoch seconds
    user_id: str
    email: Optional[str] = None

    @classmethod
    def from_token_response(cls, data: dict) -> "ProviderSession":
        user = data.get("user") or {}
        expires_at = data.get("expires_at") or int(time.time()) + int(data.get("expires_in", 3600))
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token", ""),
            expires_at=int(expires_at),
            user_id=user.get("id", ""),
            email=user.get("email"),
        )

    def is_expired(self) -> bool:
        return self.expires_at <= time.time() + _EXPIRY_LEEWAY_SECONDS

    def to_dict(self) -> dict:
        return asdict(self)


AuthStateCallback = Callable[[str, Optional[ProviderSession]], Awaitable[None]]


class Subscription:
    """Handle returned by on_auth_state_change(); call unsubscribe() to stop events."""

    def __init__(self, listeners: list, callback: AuthStateCallback):
        self._listeners = listeners
        self.callback = callback

    def unsubscribe(self):
        if self.callback in self._listeners:
            self._listeners.remove(self.callback)


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if not isinstance(data, dict):
        return str(data)
    return (data.get("msg") or data.get("error_description") or data.get("message")
            or data.get("error") or f"HTTP {resp.status_code}")


def _parse(resp: httpx.Response, parse):
    """Decode a 200 body with `parse`. Malformed payloads become IdentityProviderError."""
    try:
        return parse(resp.json())
    except (ValueError, KeyError, TypeError) as e:   # pydantic ValidationError is a ValueError
        raise IdentityProviderError(
            f"Unexpected response from identity provider: {e}", resp.status_code
        ) from e


class IdentityProviderClient:
    def __init__(self, base_url: str, api_key: str, store: Optional[SessionStore] = None,
                 timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"apikey": api_key},
            timeout=timeout,
            transport=transport,
        )
        self._store = store
        self._session: Optional[ProviderSession] = None
        self._listeners: list[AuthStateCallback] = []

    @classmethod
    def from_settings(cls, store: Optional[SessionStore] = None) -> "IdentityProviderClient":
        return cls(settings.IDENTITY_PROVIDER_URL, settings.IDENTITY_PROVIDER_KEY,
                   store=store, timeout=settings.IDENTITY_TIMEOUT_SECONDS)

    # ── Subscriptions ──────────────────────────────────────────────────────
    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    async def _emit(self, event: str, session: Optional[ProviderSession]):
        for callback in list(self._listeners):
            try:
                await callback(event, session)
            except Exception as e:
                logger.error(f"[IDP] Auth listener failed on {event}: {e}", exc_info=True)

    # ── Session handling ───────────────────────────────────────────────────
    def _set_session(self, session: Optional[ProviderSession]):
        self._session = session
        if self._store is None:
            return
        if session is None:
            self._store.clear()
        else:
            self._store.save(session.to_dict())

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

    def _auth_headers(self) -> dict:
        if self._session is None:
            return {}
        return {"Authorization": f"Bearer {self._session.access_token}"}

    async def get_session(self) -> Optional[ProviderSession]:
        """Current session, loaded from the store on first use and refreshed if expired."""
        if self._session is None and self._store is not None:
            data = self._store.load()
            if data:
                try:
                    self._session = ProviderSession(**data)
                except TypeError:
                    logger.warning("[IDP] Stored session has an unexpected shape, discarding")
                    self._set_session(None)

        if self._session is not None and self._session.is_expired():
            try:
                await self.refresh_session()
            except IdentityProviderError:
                self._set_session(None)
                raise
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> ProviderSession:
        resp = await self._request("POST", "/auth/v1/token", params={"grant_type": "password"},
                                   json={"email": email, "password": password})
        if resp.status_code in (400, 401, 422):
            raise InvalidCredentialsError(_error_message(resp), resp.status_code)
        if resp.status_code != 200:
            raise IdentityProviderError(_error_message(resp), resp.status_code)

        session = _parse(resp, ProviderSession.from_token_response)
        self._set_session(session)
        logger.info(f"[IDP] Signed in {session.email or session.user_id}")
        await self._emit(SIGNED_IN, session)
        return session

    async def refresh_session(self) -> ProviderSession:
        if self._session is None:
            raise IdentityProviderError("No session to refresh")
        resp = await self._request("POST", "/auth/v1/token", params={"grant_type": "refresh_token"},
                                   json={"refresh_token": self._session.refresh_token})
        if resp.status_code != 200:
            raise IdentityProviderError(_error_message(resp), resp.status_code)

        session = _parse(resp, ProviderSession.from_token_response)
        self._set_session(session)
        await self._emit(TOKEN_REFRESHED, session)
        return session

    async def sign_out(self):
        """Revoke the session remotely. The local session is dropped even if that fails."""
        try:
            if self._session is not None:
                resp = await self._request("POST", "/auth/v1/logout", headers=self._auth_headers())
                if resp.status_code not in (200, 204, 401):
                    logger.warning(f"[IDP] Logout returned HTTP {resp.status_code}")
        finally:
            self._set_session(None)
            await self._emit(SIGNED_OUT, None)

    # ── Profiles ───────────────────────────────────────────────────────────
    async def fetch_profile(self, user_id: str) -> UserProfile:
        resp = await self._request(
            "GET", "/rest/v1/users",
            params={"id": f"eq.{user_id}", "select": "*"},
            headers={**self._auth_headers(), "Accept": "application/vnd.pgrst.object+json"},
        )
        if resp.status_code != 200:
            raise IdentityProviderError(_error_message(resp), resp.status_code)
        return _parse(resp, UserProfile.model_validate)

    async def aclose(self):
        await self._http.aclose()
