# src/workboard/services/ticket_service.py
"""
Ticket Service

Orchestrates ticket use cases: hierarchy-checked creation, partial updates,
guarded deletion, board moves and epic assignment.

Every operation returns domain entities or raises one of the three error
families. Storage errors propagate untouched; DomainRuleError is raised
only after an explicit rule evaluation fails.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from ..core.domain.errors import NotFoundError
from ..core.domain.models import Epic, Ticket
from ..core.domain.rules import (
    validate_assignment,
    validate_deletable,
    validate_epic_membership,
    validate_parent,
    validate_subtask_parent,
    validate_ticket,
)
from ..core.domain.schemas import (
    CreateSubtaskInput,
    CreateTicketInput,
    MoveTicketInput,
    ReorderTicketsInput,
    TicketFilters,
    TicketSort,
    UpdateTicketInput,
)
from ..core.ports.repositories import EpicRepository, TicketRepository

logger = logging.getLogger(__name__)


class TicketService:
    """
    Ticket use cases.

    Args:
        ticket_repository: Ticket storage port
        epic_repository: Epic storage port, used to resolve epic references
    """

    def __init__(self, ticket_repository: TicketRepository, epic_repository: EpicRepository):
        self.tickets = ticket_repository
        self.epics = epic_repository

    # -------------------------
    # Lookups
    # -------------------------

    async def _require_ticket(self, ticket_id: str) -> Ticket:
        ticket = await self.tickets.find_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket", ticket_id)
        return ticket

    async def _require_epic(self, epic_id: str) -> Epic:
        epic = await self.epics.find_by_id(epic_id)
        if epic is None:
            raise NotFoundError("Epic", epic_id)
        return epic

    async def _require_parent(self, parent_id: str, project_id: str) -> Ticket:
        """Resolve a parent and check it can hold subtasks of ``project_id``."""
        parent = await self._require_ticket(parent_id)
        validate_subtask_parent(parent, project_id)
        return parent

    # -------------------------
    # Creation
    # -------------------------

    async def create_ticket(self, data: CreateTicketInput) -> Ticket:
        """
        Create a ticket, top-level unless ``parent_id`` is given.

        Raises:
            NotFoundError: parent or epic does not exist
            DomainRuleError: hierarchy or epic membership violation
        """
        if data.parent_id is not None:
            await self._require_parent(data.parent_id, data.project_id)
            all_tickets = await self.tickets.list_by_project(data.project_id)
            validate_ticket(data, all_tickets)

        if data.epic_id is not None:
            epic = await self._require_epic(data.epic_id)
            validate_epic_membership(data.project_id, epic)

        ticket = await self.tickets.create(data)
        logger.info(f"Created ticket {ticket.id} in project {ticket.project_id}")
        return ticket

    async def create_subtask(self, data: CreateSubtaskInput) -> Ticket:
        """
        Create a ticket nested under an existing top-level ticket.

        The parent must exist, be top-level and share the subtask's project;
        the full hierarchy check then runs against every project ticket.
        """
        await self._require_parent(data.parent_id, data.project_id)

        all_tickets = await self.tickets.list_by_project(data.project_id)
        validate_ticket(data, all_tickets)

        if data.epic_id is not None:
            epic = await self._require_epic(data.epic_id)
            validate_epic_membership(data.project_id, epic)

        ticket = await self.tickets.create(data)
        logger.info(f"Created subtask {ticket.id} under ticket {data.parent_id}")
        return ticket

    # -------------------------
    # Reads
    # -------------------------

    async def get_ticket_detail(self, ticket_id: str) -> Ticket:
        return await self._require_ticket(ticket_id)

    async def list_tickets(
        self,
        project_id: str,
        filters: Optional[TicketFilters] = None,
        sort: Optional[TicketSort] = None,
    ) -> List[Ticket]:
        return await self.tickets.list_by_project(project_id, filters, sort)

    # -------------------------
    # Updates
    # -------------------------

    async def update_ticket(self, ticket_id: str, data: UpdateTicketInput) -> Ticket:
        """
        Apply a partial update.

        The hierarchy is revalidated only when ``parent_id`` is in the payload
        and differs from the stored value. A changed non-null ``epic_id`` goes
        through the assignment rules; ``epic_id=None`` unassigns.
        """
        current = await self._require_ticket(ticket_id)
        changes = data.changes()

        if "parent_id" in changes and changes["parent_id"] != current.parent_id:
            candidate = replace(current, parent_id=changes["parent_id"])
            validate_parent(candidate)
            if candidate.parent_id is not None:
                await self._require_parent(candidate.parent_id, current.project_id)
            all_tickets = await self.tickets.list_by_project(current.project_id)
            validate_ticket(candidate, all_tickets)
        else:
            logger.debug(f"Hierarchy revalidation skipped for ticket {ticket_id}")

        new_epic_id = changes.get("epic_id")
        if "epic_id" in changes and new_epic_id is not None and new_epic_id != current.epic_id:
            epic = await self._require_epic(new_epic_id)
            validate_assignment(current, epic)

        if not changes:
            return current

        return await self.tickets.update(ticket_id, changes)

    async def move_ticket(self, ticket_id: str, data: MoveTicketInput) -> Ticket:
        """Move a ticket to another status column and position."""
        await self._require_ticket(ticket_id)
        return await self.tickets.move_ticket(ticket_id, data.status, data.position)

    async def reorder_tickets(self, data: ReorderTicketsInput) -> List[Ticket]:
        return await self.tickets.update_positions(data.ticket_positions)

    # -------------------------
    # Deletion
    # -------------------------

    async def delete_ticket(self, ticket_id: str) -> None:
        """
        Delete a ticket.

        Raises:
            DomainRuleError: TICKET_HAS_SUBTASKS when any ticket in the project
                references this one as parent (nothing is deleted)
        """
        ticket = await self._require_ticket(ticket_id)
        all_tickets = await self.tickets.list_by_project(ticket.project_id)
        validate_deletable(ticket, all_tickets)

        await self.tickets.delete(ticket_id)
        logger.info(f"Deleted ticket {ticket_id}")

    # -------------------------
    # Epic assignment
    # -------------------------

    async def assign_ticket_to_epic(self, ticket_id: str, epic_id: str) -> Ticket:
        """
        Assign a ticket to an epic.

        Assigning to the epic the ticket already belongs to is a no-op.

        Raises:
            DomainRuleError: TICKET_PROJECT_MISMATCH or DUPLICATE_EPIC_ASSIGNMENT
        """
        ticket = await self._require_ticket(ticket_id)
        epic = await self._require_epic(epic_id)
        validate_assignment(ticket, epic)

        if ticket.epic_id == epic.id:
            return ticket

        return await self.tickets.assign_to_epic(ticket_id, epic_id)

    async def unassign_ticket_from_epic(self, ticket_id: str) -> Ticket:
        await self._require_ticket(ticket_id)
        return await self.tickets.unassign_from_epic(ticket_id)
