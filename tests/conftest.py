# tests/conftest.py
"""
Pytest configuration and fixtures for the Workboard test suite.

Provides:
- In-memory store, repositories and services
- Async Supabase mock client for the Supabase adapters
- Small factories for domain entities

Note: Tests never talk to a real Supabase project.
"""

import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

# Set test environment before imports
os.environ["WORKBOARD_ENV"] = "test"
os.environ["SUPABASE_URL"] = "https://test.supabase.co"
os.environ["SUPABASE_KEY"] = "test-key"

from workboard.adapters.memory import (
    InMemoryBoardRepository,
    InMemoryEpicRepository,
    InMemoryTicketRepository,
    MemoryStore,
)
from workboard.core.domain.models import Board, Column, Epic, Ticket
from workboard.services import BoardService, EpicService, TicketService


# ============== Supabase Mock Fixtures ==============

class MockSupabaseResponse:
    """Mock response from Supabase operations."""
    def __init__(self, data: List[Dict] = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseTable:
    """Mock async Supabase table with chainable methods."""

    def __init__(self, table_name: str, client: "MockSupabaseClient"):
        self.table_name = table_name
        self._client = client
        self._operation = "select"
        self._payload: Any = None
        self._filters: List[tuple] = []
        self._order_by: Optional[tuple] = None
        self._limit: Optional[int] = None

    def select(self, columns: str = "*"):
        self._operation = "select"
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def update(self, data: Dict):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column: str, value: Any):
        self._filters.append((column, value))
        return self

    def is_(self, column: str, value: Any):
        self._filters.append((column, None if value == "null" else value))
        return self

    def order(self, column: str, desc: bool = False):
        self._order_by = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def _matches(self, row: Dict) -> bool:
        return all(row.get(col) == val for col, val in self._filters)

    async def execute(self) -> MockSupabaseResponse:
        """Execute the query and return results."""
        self._client.calls.append((self.table_name, self._operation, list(self._filters)))

        error = self._client._errors.get((self.table_name, self._operation))
        if error is not None:
            raise error

        rows = self._client._data_store.setdefault(self.table_name, [])

        if self._operation == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            created = []
            for item in items:
                row = dict(item)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                rows.append(row)
                created.append(dict(row))
            return MockSupabaseResponse(data=created)

        matched = [r for r in rows if self._matches(r)]

        if self._operation == "update":
            for row in matched:
                row.update(self._payload)
            return MockSupabaseResponse(data=[dict(r) for r in matched])

        if self._operation == "delete":
            self._client._data_store[self.table_name] = [r for r in rows if not self._matches(r)]
            return MockSupabaseResponse(data=[dict(r) for r in matched])

        if self._order_by:
            column, desc = self._order_by
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        if self._limit:
            matched = matched[:self._limit]
        return MockSupabaseResponse(data=[dict(r) for r in matched])


class MockSupabaseClient:
    """Mock async Supabase client for testing."""

    def __init__(self):
        self._data_store: Dict[str, List[Dict]] = {}
        self._errors: Dict[tuple, BaseException] = {}
        self.calls: List[tuple] = []

    def table(self, name: str) -> MockSupabaseTable:
        return MockSupabaseTable(name, self)

    def fail(self, table: str, operation: str, error: BaseException):
        """Make every ``operation`` on ``table`` raise ``error``."""
        self._errors[(table, operation)] = error

    def seed(self, table: str, rows: List[Dict]):
        """Seed data for a table."""
        self._data_store.setdefault(table, []).extend(dict(r) for r in rows)

    def rows(self, table: str) -> List[Dict]:
        return self._data_store.get(table, [])


class PostgrestLikeError(Exception):
    """Shape of a PostgREST API error: code, message, details."""

    def __init__(self, code: str, message: str = "", details: str = ""):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


@pytest.fixture
def mock_supabase():
    """Provide a mock async Supabase client."""
    return MockSupabaseClient()


# ============== In-memory backend ==============

@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def ticket_repo(store):
    return InMemoryTicketRepository(store)


@pytest.fixture
def epic_repo(store):
    return InMemoryEpicRepository(store)


@pytest.fixture
def board_repo(store):
    return InMemoryBoardRepository(store)


@pytest.fixture
def ticket_service(ticket_repo, epic_repo) -> TicketService:
    return TicketService(ticket_repo, epic_repo)


@pytest.fixture
def epic_service(epic_repo, ticket_service) -> EpicService:
    return EpicService(epic_repo, ticket_service)


@pytest.fixture
def board_service(board_repo) -> BoardService:
    return BoardService(board_repo)


# ============== Entity factories ==============

def make_ticket(
    ticket_id: str = "t1",
    project_id: str = "p1",
    parent_id: Optional[str] = None,
    epic_id: Optional[str] = None,
    status: str = "todo",
    **extra,
) -> Ticket:
    return Ticket(
        id=ticket_id,
        project_id=project_id,
        title=extra.pop("title", f"Ticket {ticket_id}"),
        status=status,
        parent_id=parent_id,
        epic_id=epic_id,
        **extra,
    )


def make_epic(epic_id: str = "e1", project_id: str = "p1", name: str = "Epic") -> Epic:
    return Epic(id=epic_id, project_id=project_id, name=name)


def make_column(
    column_id: str,
    position: int,
    status: str,
    board_id: str = "b1",
    name: Optional[str] = None,
) -> Column:
    return Column(
        id=column_id,
        board_id=board_id,
        name=name or status.title(),
        status=status,
        position=position,
    )


def make_board(board_id: str = "b1", project_id: str = "p1") -> Board:
    return Board(id=board_id, project_id=project_id)
