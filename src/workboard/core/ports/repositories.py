# src/workboard/core/ports/repositories.py
"""
Repository Ports

Async interfaces for each aggregate (Ticket, Epic, Board/Column).
Concrete implementations (adapters) provide the actual behavior:
- Supabase adapters (production)
- In-memory adapters (local runs, tests)

Contract shared by every adapter:
- find_* return None when the entity does not exist
- writes against a missing entity raise NotFoundError
- every storage failure surfaces as a RepositoryError
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..domain.models import Board, Column, Epic, Ticket
from ..domain.schemas import (
    CreateColumnInput,
    CreateEpicInput,
    CreateTicketInput,
    TicketFilters,
    TicketPosition,
    TicketSort,
    UpdateColumnInput,
)


class TicketRepository(ABC):
    """Ticket persistence port."""

    @abstractmethod
    async def find_by_id(self, ticket_id: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def list_by_project(
        self,
        project_id: str,
        filters: Optional[TicketFilters] = None,
        sort: Optional[TicketSort] = None,
    ) -> List[Ticket]:
        """List tickets of a project, ordered by position unless ``sort`` says otherwise."""
        pass

    @abstractmethod
    async def create(self, data: CreateTicketInput) -> Ticket:
        pass

    @abstractmethod
    async def update(self, ticket_id: str, changes: Dict[str, Any]) -> Ticket:
        """Write only the given fields."""
        pass

    @abstractmethod
    async def delete(self, ticket_id: str) -> None:
        pass

    @abstractmethod
    async def update_positions(self, positions: List[TicketPosition]) -> List[Ticket]:
        pass

    @abstractmethod
    async def move_ticket(self, ticket_id: str, status: str, position: int) -> Ticket:
        pass

    @abstractmethod
    async def assign_to_epic(self, ticket_id: str, epic_id: str) -> Ticket:
        pass

    @abstractmethod
    async def unassign_from_epic(self, ticket_id: str) -> Ticket:
        pass


class EpicRepository(ABC):
    """Epic persistence port."""

    @abstractmethod
    async def find_by_id(self, epic_id: str) -> Optional[Epic]:
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str) -> List[Epic]:
        pass

    @abstractmethod
    async def create(self, data: CreateEpicInput) -> Epic:
        pass

    @abstractmethod
    async def update(self, epic_id: str, changes: Dict[str, Any]) -> Epic:
        pass

    @abstractmethod
    async def delete(self, epic_id: str) -> None:
        pass

    @abstractmethod
    async def list_tickets_by_epic(self, epic_id: str) -> List[Ticket]:
        pass


class BoardRepository(ABC):
    """Board and column persistence port."""

    @abstractmethod
    async def find_by_project(self, project_id: str) -> Optional[Board]:
        pass

    @abstractmethod
    async def create(self, project_id: str) -> Board:
        pass

    @abstractmethod
    async def list_columns_by_board(self, board_id: str) -> List[Column]:
        """Columns of a board ordered by position."""
        pass

    @abstractmethod
    async def create_column(self, data: CreateColumnInput) -> Column:
        pass

    @abstractmethod
    async def update_column(self, column_id: str, data: UpdateColumnInput) -> Column:
        pass

    @abstractmethod
    async def delete_column(self, column_id: str) -> None:
        pass
