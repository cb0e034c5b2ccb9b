"""
Storage and auth adapters implementing the core ports.
"""

from .errors import (
    handle_auth_error,
    handle_repository_error,
    map_auth_error,
    map_storage_error,
)
from .memory import (
    InMemoryBoardRepository,
    InMemoryEpicRepository,
    InMemoryTicketRepository,
    MemoryStore,
)

__all__ = [
    "handle_auth_error",
    "handle_repository_error",
    "map_auth_error",
    "map_storage_error",
    "InMemoryBoardRepository",
    "InMemoryEpicRepository",
    "InMemoryTicketRepository",
    "MemoryStore",
]
