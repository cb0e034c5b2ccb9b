"""
Port Interfaces for Dependency Inversion

Abstract async interfaces that storage and auth adapters must implement.
"""

from .auth import AuthRepository, AuthSession
from .repositories import BoardRepository, EpicRepository, TicketRepository

__all__ = [
    "AuthRepository",
    "AuthSession",
    "BoardRepository",
    "EpicRepository",
    "TicketRepository",
]
