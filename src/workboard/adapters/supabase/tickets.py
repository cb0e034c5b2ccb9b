# src/workboard/adapters/supabase/tickets.py
"""
Supabase adapter for the ticket repository port.

Table: tickets (id, project_id, title, description, status, position,
epic_id, parent_id, created_at, updated_at)
"""

import logging
from typing import Any, Dict, List, Optional

from ...core.domain.errors import DatabaseError, NotFoundError
from ...core.domain.models import Ticket
from ...core.domain.schemas import CreateTicketInput, TicketFilters, TicketPosition, TicketSort
from ...core.ports.repositories import TicketRepository
from .base import SupabaseRepository

logger = logging.getLogger(__name__)

TABLE = "tickets"


class SupabaseTicketRepository(SupabaseRepository, TicketRepository):
    """Supabase adapter for tickets."""

    async def _update_row(self, ticket_id: str, data: Dict[str, Any]) -> Ticket:
        row = await self._first(
            lambda c: c.table(TABLE).update(data).eq("id", ticket_id),
            "Ticket",
            ticket_id,
        )
        if row is None:
            raise NotFoundError("Ticket", ticket_id)
        return Ticket.from_row(row)

    async def find_by_id(self, ticket_id: str) -> Optional[Ticket]:
        row = await self._first(
            lambda c: c.table(TABLE).select("*").eq("id", ticket_id).limit(1),
            "Ticket",
            ticket_id,
        )
        return Ticket.from_row(row) if row else None

    async def list_by_project(
        self,
        project_id: str,
        filters: Optional[TicketFilters] = None,
        sort: Optional[TicketSort] = None,
    ) -> List[Ticket]:
        sort = sort or TicketSort()

        def build(client):
            query = client.table(TABLE).select("*").eq("project_id", project_id)
            if filters:
                for key, value in filters.model_dump(exclude_none=True).items():
                    query = query.eq(key, value)
            return query.order(sort.field, desc=sort.direction == "desc")

        rows = await self._execute(build, "Ticket")
        return [Ticket.from_row(row) for row in rows]

    async def create(self, data: CreateTicketInput) -> Ticket:
        row = await self._first(
            lambda c: c.table(TABLE).insert(data.model_dump()),
            "Ticket",
        )
        if row is None:
            raise DatabaseError("No data returned from insert")
        return Ticket.from_row(row)

    async def update(self, ticket_id: str, changes: Dict[str, Any]) -> Ticket:
        return await self._update_row(ticket_id, dict(changes))

    async def delete(self, ticket_id: str) -> None:
        rows = await self._execute(
            lambda c: c.table(TABLE).delete().eq("id", ticket_id),
            "Ticket",
            ticket_id,
        )
        if not rows:
            raise NotFoundError("Ticket", ticket_id)

    async def update_positions(self, positions: List[TicketPosition]) -> List[Ticket]:
        updated = []
        for entry in positions:
            updated.append(await self._update_row(entry.id, {"position": entry.position}))
        return updated

    async def move_ticket(self, ticket_id: str, status: str, position: int) -> Ticket:
        return await self._update_row(ticket_id, {"status": status, "position": position})

    async def assign_to_epic(self, ticket_id: str, epic_id: str) -> Ticket:
        return await self._update_row(ticket_id, {"epic_id": epic_id})

    async def unassign_from_epic(self, ticket_id: str) -> Ticket:
        return await self._update_row(ticket_id, {"epic_id": None})
