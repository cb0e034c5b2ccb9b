# src/workboard/adapters/supabase/epics.py
"""
Supabase adapter for the epic repository port.

Table: epics (id, project_id, name, description, created_at, updated_at)
"""

import logging
from typing import Any, Dict, List, Optional

from ...core.domain.errors import DatabaseError, NotFoundError
from ...core.domain.models import Epic, Ticket
from ...core.domain.schemas import CreateEpicInput
from ...core.ports.repositories import EpicRepository
from .base import SupabaseRepository

logger = logging.getLogger(__name__)

TABLE = "epics"


class SupabaseEpicRepository(SupabaseRepository, EpicRepository):
    """Supabase adapter for epics."""

    async def find_by_id(self, epic_id: str) -> Optional[Epic]:
        row = await self._first(
            lambda c: c.table(TABLE).select("*").eq("id", epic_id).limit(1),
            "Epic",
            epic_id,
        )
        return Epic.from_row(row) if row else None

    async def list_by_project(self, project_id: str) -> List[Epic]:
        rows = await self._execute(
            lambda c: c.table(TABLE).select("*").eq("project_id", project_id).order("created_at"),
            "Epic",
        )
        return [Epic.from_row(row) for row in rows]

    async def create(self, data: CreateEpicInput) -> Epic:
        row = await self._first(
            lambda c: c.table(TABLE).insert(data.model_dump()),
            "Epic",
        )
        if row is None:
            raise DatabaseError("No data returned from insert")
        return Epic.from_row(row)

    async def update(self, epic_id: str, changes: Dict[str, Any]) -> Epic:
        row = await self._first(
            lambda c: c.table(TABLE).update(dict(changes)).eq("id", epic_id),
            "Epic",
            epic_id,
        )
        if row is None:
            raise NotFoundError("Epic", epic_id)
        return Epic.from_row(row)

    async def delete(self, epic_id: str) -> None:
        rows = await self._execute(
            lambda c: c.table(TABLE).delete().eq("id", epic_id),
            "Epic",
            epic_id,
        )
        if not rows:
            raise NotFoundError("Epic", epic_id)

    async def list_tickets_by_epic(self, epic_id: str) -> List[Ticket]:
        rows = await self._execute(
            lambda c: c.table("tickets").select("*").eq("epic_id", epic_id).order("position"),
            "Ticket",
        )
        return [Ticket.from_row(row) for row in rows]
