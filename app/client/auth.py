"""
Auth bridge: the client's single view of who is signed in.

Wraps IdentityProviderClient and keeps the current user's profile, a loading
flag, and a subscription to provider state changes. The bridge owns no global
state: create one, start() it, pass it to whatever needs it, stop() it.

    async with AuthBridge(IdentityProviderClient.from_settings(store)) as auth:
        await auth.login(email, password)
        if auth.is_admin: ...
"""

import asyncio
import contextlib
from typing import Optional
from app.client.identity import (
    IdentityProviderClient, IdentityProviderError, ProviderSession, Subscription, SIGNED_OUT,
)
from app.models.enums import UserRole
from app.schemas.user import UserProfile
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AuthBridge:
    def __init__(self, client: IdentityProviderClient):
        self.client = client
        self.user: Optional[UserProfile] = None
        self._loading = True
        self._profile_task: Optional[asyncio.Task] = None
        self._subscription: Optional[Subscription] = None

    # ── Lifecycle ──────────────────────────────────────────────────────────
    async def start(self):
        """Check for an existing session, then start listening for state changes."""
        try:
            session = await self.client.get_session()
            if session is not None and session.user_id:
                await self._fetch_profile(session.user_id)
            else:
                logger.debug("[AUTH] No user in session")
                self.user = None
        except IdentityProviderError as e:
            logger.error(f"[AUTH] Initial session check failed: {e.message}")
            self.user = None
        finally:
            self._loading = False

        if self._subscription is None:
            self._subscription = self.client.on_auth_state_change(self._on_auth_state_change)

    async def stop(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self._profile_task is not None and not self._profile_task.done():
            self._profile_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._profile_task
        await self.client.aclose()

    async def __aenter__(self) -> "AuthBridge":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    # ── State ──────────────────────────────────────────────────────────────
    @property
    def is_fetching_profile(self) -> bool:
        return self._profile_task is not None and not self._profile_task.done()

    @property
    def is_loading(self) -> bool:
        return self._loading or self.is_fetching_profile

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == UserRole.admin.value

    @property
    def is_employee(self) -> bool:
        return self.user is not None and self.user.role == UserRole.employee.value

    # ── Actions ────────────────────────────────────────────────────────────
    async def login(self, email: str, password: str) -> UserProfile:
        """Sign in and load the profile. Provider errors propagate immediately."""
        self._loading = True
        try:
            session = await self.client.sign_in_with_password(email, password)
            if session.user_id and (self.user is None or self.user.id != session.user_id):
                await self._fetch_profile(session.user_id)
            return self.user
        finally:
            self._loading = False

    async def logout(self):
        self._loading = True
        try:
            await self.client.sign_out()
        finally:
            self.user = None
            self._loading = False

    async def refresh_profile(self) -> Optional[UserProfile]:
        session = await self.client.get_session()
        if session is None:
            self.user = None
            return None
        return await self._fetch_profile(session.user_id)

    # ── Internals ──────────────────────────────────────────────────────────
    async def _fetch_profile(self, user_id: str) -> Optional[UserProfile]:
        """Load the profile row. Concurrent callers share the fetch already in flight."""
        if self.is_fetching_profile:
            logger.debug("[AUTH] Profile fetch already in flight, joining it")
            return await asyncio.shield(self._profile_task)

        self._profile_task = asyncio.create_task(self._load_profile(user_id))
        return await asyncio.shield(self._profile_task)

    async def _load_profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            self.user = await self.client.fetch_profile(user_id)
            logger.info(f"[AUTH] Profile loaded for {self.user.email} ({self.user.role})")
        except IdentityProviderError as e:
            logger.error(f"[AUTH] Error fetching profile for {user_id}: {e.message}")
            self.user = None
        return self.user

    async def _on_auth_state_change(self, event: str, session: Optional[ProviderSession]):
        logger.debug(f"[AUTH] State changed: {event}")
        if event == SIGNED_OUT:
            self.user = None
            self._loading = False
            return

        if session is not None and session.user_id:
            self._loading = True
            try:
                await self._fetch_profile(session.user_id)
            finally:
                self._loading = False
