# src/workboard/adapters/supabase/auth.py
"""
Supabase adapter for the auth port.

Every call goes through handle_auth_error, so callers only ever see
AuthError from this module.
"""

import logging
from typing import Optional

from ...core.ports.auth import AuthRepository, AuthSession
from ..errors import handle_auth_error
from .client import get_supabase_client

logger = logging.getLogger(__name__)


def _to_session(session) -> Optional[AuthSession]:
    if session is None or session.user is None:
        return None
    return AuthSession(
        user_id=str(session.user.id),
        email=session.user.email or "",
        access_token=session.access_token,
    )


class SupabaseAuthRepository(AuthRepository):
    """Email/password auth against Supabase Auth."""

    def __init__(self, client=None, url: Optional[str] = None, key: Optional[str] = None):
        self._client = client
        self._url = url
        self._key = key

    async def get_client(self):
        if self._client is None:
            self._client = await get_supabase_client(self._url, self._key)
        return self._client

    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            client = await self.get_client()
            response = await client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
            session = _to_session(response.session)
            if session is None:
                raise ValueError("Sign in returned no session")
            logger.info(f"Signed in user {session.user_id}")
            return session
        except Exception as e:
            handle_auth_error(e)

    async def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        try:
            client = await self.get_client()
            response = await client.auth.sign_up({"email": email, "password": password})
            session = _to_session(response.session)
            if session is None:
                logger.info(f"Sign up for {email} pending email verification")
            return session
        except Exception as e:
            handle_auth_error(e)

    async def sign_out(self) -> None:
        try:
            client = await self.get_client()
            await client.auth.sign_out()
        except Exception as e:
            handle_auth_error(e)

    async def get_current_session(self) -> Optional[AuthSession]:
        try:
            client = await self.get_client()
            return _to_session(await client.auth.get_session())
        except Exception as e:
            handle_auth_error(e)
