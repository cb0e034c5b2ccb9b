# src/workboard/adapters/memory.py
"""
In-Memory Repository Adapters

Implements the repository ports on plain dicts. Used for local runs
(storage_backend: memory) and throughout the test suite.

All three repositories share one MemoryStore so cross-aggregate reads
(tickets by epic, columns by board) see the same state. Foreign keys are
enforced like the remote store does: deleting a referenced epic or parent
ticket raises ConstraintError("23503").
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..core.domain.errors import ConstraintError, NotFoundError
from ..core.domain.models import Board, Column, Epic, Ticket
from ..core.domain.schemas import (
    CreateColumnInput,
    CreateEpicInput,
    CreateTicketInput,
    TicketFilters,
    TicketPosition,
    TicketSort,
    UpdateColumnInput,
)
from ..core.ports.repositories import BoardRepository, EpicRepository, TicketRepository

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStore:
    """Shared row storage for the in-memory adapters."""

    def __init__(self, enforce_foreign_keys: bool = True):
        self.enforce_foreign_keys = enforce_foreign_keys
        self.boards: Dict[str, Dict[str, Any]] = {}
        self.columns: Dict[str, Dict[str, Any]] = {}
        self.epics: Dict[str, Dict[str, Any]] = {}
        self.tickets: Dict[str, Dict[str, Any]] = {}
        # (operation, table, id) for every write, in order
        self.write_log: List[Tuple[str, str, str]] = []

    def record(self, operation: str, table: str, row_id: str) -> None:
        logger.debug(f"memory {operation} {table} {row_id}")
        self.write_log.append((operation, table, row_id))

    def writes_for(self, table: str) -> List[Tuple[str, str, str]]:
        return [w for w in self.write_log if w[1] == table]


class InMemoryTicketRepository(TicketRepository):
    """Ticket repository over a MemoryStore."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def _get_row(self, ticket_id: str) -> Dict[str, Any]:
        row = self._store.tickets.get(ticket_id)
        if row is None:
            raise NotFoundError("Ticket", ticket_id)
        return row

    def _write(self, ticket_id: str, changes: Dict[str, Any]) -> Ticket:
        row = self._get_row(ticket_id)
        row.update(changes)
        row["updated_at"] = _now()
        self._store.record("update", "tickets", ticket_id)
        return Ticket.from_row(row)

    async def find_by_id(self, ticket_id: str) -> Optional[Ticket]:
        row = self._store.tickets.get(ticket_id)
        return Ticket.from_row(row) if row else None

    async def list_by_project(
        self,
        project_id: str,
        filters: Optional[TicketFilters] = None,
        sort: Optional[TicketSort] = None,
    ) -> List[Ticket]:
        rows = [r for r in self._store.tickets.values() if r["project_id"] == project_id]
        if filters:
            for key, value in filters.model_dump(exclude_none=True).items():
                rows = [r for r in rows if r.get(key) == value]
        sort = sort or TicketSort()
        rows.sort(
            key=lambda r: (r.get(sort.field) is None, r.get(sort.field)),
            reverse=sort.direction == "desc",
        )
        return [Ticket.from_row(r) for r in rows]

    async def create(self, data: CreateTicketInput) -> Ticket:
        if self._store.enforce_foreign_keys:
            if data.parent_id is not None and data.parent_id not in self._store.tickets:
                raise ConstraintError(FOREIGN_KEY_VIOLATION, f"parent ticket {data.parent_id} does not exist")
            if data.epic_id is not None and data.epic_id not in self._store.epics:
                raise ConstraintError(FOREIGN_KEY_VIOLATION, f"epic {data.epic_id} does not exist")
        ticket_id = _new_id()
        now = _now()
        row = {
            "id": ticket_id,
            "project_id": data.project_id,
            "title": data.title,
            "description": data.description,
            "status": data.status,
            "position": data.position,
            "epic_id": data.epic_id,
            "parent_id": data.parent_id,
            "created_at": now,
            "updated_at": now,
        }
        self._store.tickets[ticket_id] = row
        self._store.record("create", "tickets", ticket_id)
        return Ticket.from_row(row)

    async def update(self, ticket_id: str, changes: Dict[str, Any]) -> Ticket:
        return self._write(ticket_id, dict(changes))

    async def delete(self, ticket_id: str) -> None:
        self._get_row(ticket_id)
        if self._store.enforce_foreign_keys and any(
            r.get("parent_id") == ticket_id for r in self._store.tickets.values()
        ):
            raise ConstraintError(FOREIGN_KEY_VIOLATION, f"ticket {ticket_id} is referenced as a parent")
        del self._store.tickets[ticket_id]
        self._store.record("delete", "tickets", ticket_id)

    async def update_positions(self, positions: List[TicketPosition]) -> List[Ticket]:
        for entry in positions:
            self._get_row(entry.id)
        return [self._write(entry.id, {"position": entry.position}) for entry in positions]

    async def move_ticket(self, ticket_id: str, status: str, position: int) -> Ticket:
        return self._write(ticket_id, {"status": status, "position": position})

    async def assign_to_epic(self, ticket_id: str, epic_id: str) -> Ticket:
        if self._store.enforce_foreign_keys and epic_id not in self._store.epics:
            raise ConstraintError(FOREIGN_KEY_VIOLATION, f"epic {epic_id} does not exist")
        return self._write(ticket_id, {"epic_id": epic_id})

    async def unassign_from_epic(self, ticket_id: str) -> Ticket:
        return self._write(ticket_id, {"epic_id": None})


class InMemoryEpicRepository(EpicRepository):
    """Epic repository over a MemoryStore."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def _get_row(self, epic_id: str) -> Dict[str, Any]:
        row = self._store.epics.get(epic_id)
        if row is None:
            raise NotFoundError("Epic", epic_id)
        return row

    async def find_by_id(self, epic_id: str) -> Optional[Epic]:
        row = self._store.epics.get(epic_id)
        return Epic.from_row(row) if row else None

    async def list_by_project(self, project_id: str) -> List[Epic]:
        rows = [r for r in self._store.epics.values() if r["project_id"] == project_id]
        rows.sort(key=lambda r: r["created_at"])
        return [Epic.from_row(r) for r in rows]

    async def create(self, data: CreateEpicInput) -> Epic:
        epic_id = _new_id()
        now = _now()
        row = {
            "id": epic_id,
            "project_id": data.project_id,
            "name": data.name,
            "description": data.description,
            "created_at": now,
            "updated_at": now,
        }
        self._store.epics[epic_id] = row
        self._store.record("create", "epics", epic_id)
        return Epic.from_row(row)

    async def update(self, epic_id: str, changes: Dict[str, Any]) -> Epic:
        row = self._get_row(epic_id)
        row.update(changes)
        row["updated_at"] = _now()
        self._store.record("update", "epics", epic_id)
        return Epic.from_row(row)

    async def delete(self, epic_id: str) -> None:
        self._get_row(epic_id)
        if self._store.enforce_foreign_keys and any(
            r.get("epic_id") == epic_id for r in self._store.tickets.values()
        ):
            raise ConstraintError(FOREIGN_KEY_VIOLATION, f"epic {epic_id} is still referenced by tickets")
        del self._store.epics[epic_id]
        self._store.record("delete", "epics", epic_id)

    async def list_tickets_by_epic(self, epic_id: str) -> List[Ticket]:
        rows = [r for r in self._store.tickets.values() if r.get("epic_id") == epic_id]
        rows.sort(key=lambda r: r.get("position") or 0)
        return [Ticket.from_row(r) for r in rows]


class InMemoryBoardRepository(BoardRepository):
    """Board and column repository over a MemoryStore."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def _get_column_row(self, column_id: str) -> Dict[str, Any]:
        row = self._store.columns.get(column_id)
        if row is None:
            raise NotFoundError("Column", column_id)
        return row

    async def find_by_project(self, project_id: str) -> Optional[Board]:
        for row in self._store.boards.values():
            if row["project_id"] == project_id:
                return Board.from_row(row)
        return None

    async def create(self, project_id: str) -> Board:
        if any(r["project_id"] == project_id for r in self._store.boards.values()):
            raise ConstraintError(UNIQUE_VIOLATION, f"board for project {project_id} already exists")
        board_id = _new_id()
        now = _now()
        row = {"id": board_id, "project_id": project_id, "created_at": now, "updated_at": now}
        self._store.boards[board_id] = row
        self._store.record("create", "boards", board_id)
        return Board.from_row(row)

    async def list_columns_by_board(self, board_id: str) -> List[Column]:
        rows = [r for r in self._store.columns.values() if r["board_id"] == board_id]
        rows.sort(key=lambda r: r["position"])
        return [Column.from_row(r) for r in rows]

    async def create_column(self, data: CreateColumnInput) -> Column:
        if self._store.enforce_foreign_keys and data.board_id not in self._store.boards:
            raise ConstraintError(FOREIGN_KEY_VIOLATION, f"board {data.board_id} does not exist")
        column_id = _new_id()
        now = _now()
        row = {
            "id": column_id,
            "board_id": data.board_id,
            "name": data.name,
            "status": data.status,
            "position": data.position,
            "visible": data.visible,
            "created_at": now,
            "updated_at": now,
        }
        self._store.columns[column_id] = row
        self._store.record("create", "columns", column_id)
        return Column.from_row(row)

    async def update_column(self, column_id: str, data: UpdateColumnInput) -> Column:
        row = self._get_column_row(column_id)
        row.update(data.changes())
        row["updated_at"] = _now()
        self._store.record("update", "columns", column_id)
        return Column.from_row(row)

    async def delete_column(self, column_id: str) -> None:
        self._get_column_row(column_id)
        del self._store.columns[column_id]
        self._store.record("delete", "columns", column_id)
