"""
Supabase adapters

Async implementations of the repository and auth ports backed by Supabase.
"""

from .auth import SupabaseAuthRepository
from .boards import SupabaseBoardRepository
from .client import get_supabase_client, reset_supabase_client
from .epics import SupabaseEpicRepository
from .tickets import SupabaseTicketRepository

__all__ = [
    "SupabaseAuthRepository",
    "SupabaseBoardRepository",
    "SupabaseEpicRepository",
    "SupabaseTicketRepository",
    "get_supabase_client",
    "reset_supabase_client",
]
