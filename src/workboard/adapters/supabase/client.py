# src/workboard/adapters/supabase/client.py
"""
Supabase Client

Provides the async Supabase client shared by all Supabase adapters.

Usage:
    from .client import get_supabase_client

    client = await get_supabase_client()
    result = await client.table("tickets").select("*").execute()
"""

import logging
import os
from typing import Optional

from supabase import AsyncClient, acreate_client

logger = logging.getLogger(__name__)

# Singleton client
_supabase_client: Optional[AsyncClient] = None


async def get_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> AsyncClient:
    """
    Get the async Supabase client singleton.

    Args:
        url: Supabase project URL (defaults to SUPABASE_URL env var)
        key: Supabase anon/service key (defaults to SUPABASE_KEY env var)

    Raises:
        ValueError: if no URL or key is configured
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    supabase_url = url or os.environ.get("SUPABASE_URL")
    supabase_key = key or os.environ.get("SUPABASE_KEY") or os.environ.get("SUPABASE_ANON_KEY")

    if not supabase_url or not supabase_key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")

    _supabase_client = await acreate_client(supabase_url, supabase_key)
    logger.info(f"Connected to Supabase: {supabase_url}")
    return _supabase_client


def reset_supabase_client() -> None:
    """Drop the cached client (tests, credential rotation)."""
    global _supabase_client
    _supabase_client = None
