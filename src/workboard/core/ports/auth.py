# src/workboard/core/ports/auth.py
"""
Auth Port

Only the error classification at this boundary belongs to the core:
every method either returns its result or raises AuthError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthSession:
    """Authenticated session as seen by the core."""
    user_id: str
    email: str
    access_token: str


class AuthRepository(ABC):
    """Authentication port."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        """Returns None while the account awaits email verification."""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass

    @abstractmethod
    async def get_current_session(self) -> Optional[AuthSession]:
        pass
