# src/workboard/services/epic_service.py
"""
Epic Service

Epic CRUD plus progress. Deleting an epic first unassigns every ticket
that references it, one write per ticket through the ticket service, and
only then removes the epic row.
"""

import asyncio
import logging
from typing import List

from ..core.domain.errors import NotFoundError
from ..core.domain.models import COMPLETED_STATUS, Epic, EpicDetail, EpicWithProgress, TicketSummary
from ..core.domain.rules import calculate_progress, validate_epic_with_tickets
from ..core.domain.schemas import CreateEpicInput, UpdateEpicInput
from ..core.ports.repositories import EpicRepository
from .ticket_service import TicketService

logger = logging.getLogger(__name__)


class EpicService:
    """
    Epic use cases.

    Args:
        epic_repository: Epic storage port
        ticket_service: Used for the per-ticket unassign on deletion
        completed_status: Status value counted as done for progress
    """

    def __init__(
        self,
        epic_repository: EpicRepository,
        ticket_service: TicketService,
        completed_status: str = COMPLETED_STATUS,
    ):
        self.epics = epic_repository
        self.ticket_service = ticket_service
        self.completed_status = completed_status

    async def _require_epic(self, epic_id: str) -> Epic:
        epic = await self.epics.find_by_id(epic_id)
        if epic is None:
            raise NotFoundError("Epic", epic_id)
        return epic

    async def create_epic(self, data: CreateEpicInput) -> Epic:
        epic = await self.epics.create(data)
        logger.info(f"Created epic {epic.id} in project {epic.project_id}")
        return epic

    async def update_epic(self, epic_id: str, data: UpdateEpicInput) -> Epic:
        current = await self._require_epic(epic_id)
        changes = data.changes()
        if not changes:
            return current
        return await self.epics.update(epic_id, changes)

    async def get_epic_detail(self, epic_id: str) -> EpicDetail:
        """Epic with progress and a minimal view of its tickets."""
        epic = await self._require_epic(epic_id)
        tickets = await self.epics.list_tickets_by_epic(epic_id)
        validate_epic_with_tickets(epic, tickets)

        return EpicDetail(
            epic=epic,
            progress=calculate_progress(tickets, self.completed_status),
            tickets=[TicketSummary(id=t.id, title=t.title, status=t.status) for t in tickets],
        )

    async def list_epics(self, project_id: str) -> List[EpicWithProgress]:
        epics = await self.epics.list_by_project(project_id)
        ticket_lists = await asyncio.gather(
            *(self.epics.list_tickets_by_epic(epic.id) for epic in epics)
        )
        return [
            EpicWithProgress(epic=epic, progress=calculate_progress(tickets, self.completed_status))
            for epic, tickets in zip(epics, ticket_lists)
        ]

    async def delete_epic(self, epic_id: str) -> None:
        """
        Unassign every referencing ticket, then delete the epic.

        The epic row is never removed while a ticket still references it.
        """
        await self._require_epic(epic_id)
        tickets = await self.epics.list_tickets_by_epic(epic_id)

        for ticket in tickets:
            await self.ticket_service.unassign_ticket_from_epic(ticket.id)

        await self.epics.delete(epic_id)
        logger.info(f"Deleted epic {epic_id} after unassigning {len(tickets)} ticket(s)")
