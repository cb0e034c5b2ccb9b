# src/workboard/adapters/supabase/base.py
"""
Shared plumbing for the Supabase repository adapters.

Every query runs through ``_execute`` so storage failures always reach
handle_repository_error and come out as RepositoryError.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..errors import handle_repository_error
from .client import get_supabase_client

logger = logging.getLogger(__name__)


class SupabaseRepository:
    """
    Base for Supabase adapters.

    Args:
        client: An AsyncClient; when omitted the shared client is resolved
            lazily on first use.
        url: Project URL for the lazily resolved client
        key: API key for the lazily resolved client
    """

    def __init__(self, client=None, url: Optional[str] = None, key: Optional[str] = None):
        self._client = client
        self._url = url
        self._key = key

    async def get_client(self):
        """Lazy-load Supabase client."""
        if self._client is None:
            self._client = await get_supabase_client(self._url, self._key)
        return self._client

    async def _execute(
        self,
        build: Callable[[Any], Any],
        entity_type: str,
        entity_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Build a query against the client, execute it, return its rows.

        Args:
            build: Receives the client, returns an executable query builder
            entity_type: Entity name for error context
            entity_id: Entity id for error context
        """
        try:
            client = await self.get_client()
            response = await build(client).execute()
            return response.data or []
        except Exception as e:
            handle_repository_error(e, entity_type, entity_id)

    async def _first(
        self,
        build: Callable[[Any], Any],
        entity_type: str,
        entity_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        rows = await self._execute(build, entity_type, entity_id)
        return rows[0] if rows else None
