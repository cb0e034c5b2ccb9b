# src/workboard/adapters/supabase/boards.py
"""
Supabase adapter for the board repository port.

Tables:
- boards (id, project_id unique, created_at, updated_at)
- columns (id, board_id, name, status, position, visible, created_at, updated_at)
"""

import logging
from typing import List, Optional

from ...core.domain.errors import DatabaseError, NotFoundError
from ...core.domain.models import Board, Column
from ...core.domain.schemas import CreateColumnInput, UpdateColumnInput
from ...core.ports.repositories import BoardRepository
from .base import SupabaseRepository

logger = logging.getLogger(__name__)

BOARDS = "boards"
COLUMNS = "columns"


class SupabaseBoardRepository(SupabaseRepository, BoardRepository):
    """Supabase adapter for boards and their columns."""

    async def find_by_project(self, project_id: str) -> Optional[Board]:
        row = await self._first(
            lambda c: c.table(BOARDS).select("*").eq("project_id", project_id).limit(1),
            "Board",
        )
        return Board.from_row(row) if row else None

    async def create(self, project_id: str) -> Board:
        row = await self._first(
            lambda c: c.table(BOARDS).insert({"project_id": project_id}),
            "Board",
        )
        if row is None:
            raise DatabaseError("No data returned from insert")
        return Board.from_row(row)

    async def list_columns_by_board(self, board_id: str) -> List[Column]:
        rows = await self._execute(
            lambda c: c.table(COLUMNS).select("*").eq("board_id", board_id).order("position"),
            "Column",
        )
        return [Column.from_row(row) for row in rows]

    async def create_column(self, data: CreateColumnInput) -> Column:
        row = await self._first(
            lambda c: c.table(COLUMNS).insert(data.model_dump()),
            "Column",
        )
        if row is None:
            raise DatabaseError("No data returned from insert")
        return Column.from_row(row)

    async def update_column(self, column_id: str, data: UpdateColumnInput) -> Column:
        row = await self._first(
            lambda c: c.table(COLUMNS).update(data.changes()).eq("id", column_id),
            "Column",
            column_id,
        )
        if row is None:
            raise NotFoundError("Column", column_id)
        return Column.from_row(row)

    async def delete_column(self, column_id: str) -> None:
        rows = await self._execute(
            lambda c: c.table(COLUMNS).delete().eq("id", column_id),
            "Column",
            column_id,
        )
        if not rows:
            raise NotFoundError("Column", column_id)
