# src/workboard/services/board_service.py
"""
Board Service

Board materialisation and column reconciliation.

configure_columns converges a project's stored columns onto a desired list:

1. Find or lazily create the project's single board
2. Diff the desired list against the stored columns (ColumnPlan)
3. Validate the simulated end state; nothing is written if it is invalid
4. Issue updates and creates concurrently, then deletes
5. If any write fails, compensate: delete created columns, restore updated
   ones, re-create deleted ones, then re-raise the failure
6. Re-read the board's columns and validate what storage actually holds

Both public operations run under a per-project lock, so reconciliations of
one board inside this process never interleave.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple, Union

from ..core.domain.errors import ConstraintError
from ..core.domain.models import Board, BoardConfiguration, Column
from ..core.domain.rules import (
    ColumnPlan,
    default_board_columns,
    plan_column_changes,
    validate_board_with_columns,
)
from ..core.domain.schemas import (
    ColumnInput,
    ConfigureColumnsInput,
    CreateColumnInput,
    UpdateColumnInput,
)
from ..core.ports.repositories import BoardRepository

logger = logging.getLogger(__name__)


class BoardLocks:
    """
    One asyncio.Lock per project id.

    A project's lock lives only while some caller holds or awaits it, so
    the map does not grow with every project ever touched.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    @asynccontextmanager
    async def for_project(self, project_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(project_id)
        if lock is None:
            lock = self._locks[project_id] = asyncio.Lock()
        self._holders[project_id] = self._holders.get(project_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[project_id] -= 1
            if not self._holders[project_id]:
                del self._holders[project_id]
                del self._locks[project_id]


def _sorted(columns: Sequence[Column]) -> List[Column]:
    return sorted(columns, key=lambda c: c.position)


def _settings(source: Union[Column, ColumnInput]) -> UpdateColumnInput:
    return UpdateColumnInput(
        name=source.name,
        status=source.status,
        position=source.position,
        visible=source.visible,
    )


def _create_input(board_id: str, source: Union[Column, ColumnInput]) -> CreateColumnInput:
    return CreateColumnInput(
        board_id=board_id,
        name=source.name,
        status=source.status,
        position=source.position,
        visible=source.visible,
    )


class BoardService:
    """
    Board configuration use cases.

    Args:
        board_repository: Board and column storage port
        default_columns: Seeded on first read of an empty board
            (defaults to Todo / In Progress / Done)
        locks: Shared BoardLocks; pass one instance to every service that
            must serialise against the same boards
    """

    def __init__(
        self,
        board_repository: BoardRepository,
        default_columns: Optional[Sequence[ColumnInput]] = None,
        locks: Optional[BoardLocks] = None,
    ):
        self.boards = board_repository
        self.default_columns = list(default_columns) if default_columns else default_board_columns()
        self.locks = locks or BoardLocks()

    # -------------------------
    # Board materialisation
    # -------------------------

    async def _ensure_board(self, project_id: str) -> Board:
        board = await self.boards.find_by_project(project_id)
        if board is not None:
            return board

        try:
            board = await self.boards.create(project_id)
        except ConstraintError:
            # Another writer created it first
            board = await self.boards.find_by_project(project_id)
            if board is None:
                raise
            return board

        logger.info(f"Created board {board.id} for project {project_id}")
        return board

    async def ensure_board(self, project_id: str) -> Board:
        """Return the project's board, creating it if absent."""
        async with self.locks.for_project(project_id):
            return await self._ensure_board(project_id)

    # -------------------------
    # Read path
    # -------------------------

    async def get_board_configuration(self, project_id: str) -> BoardConfiguration:
        """
        The project's board and its columns in position order.

        An empty board is seeded with the default columns first, so every
        project resolves to a non-empty configuration.
        """
        async with self.locks.for_project(project_id):
            board = await self._ensure_board(project_id)
            columns = await self.boards.list_columns_by_board(board.id)

            if not columns:
                await asyncio.gather(
                    *(self.boards.create_column(_create_input(board.id, c)) for c in self.default_columns)
                )
                columns = await self.boards.list_columns_by_board(board.id)
                logger.info(f"Seeded {len(columns)} default columns on board {board.id}")

            return BoardConfiguration(board=board, columns=_sorted(columns))

    # -------------------------
    # Reconciliation
    # -------------------------

    async def configure_columns(
        self,
        project_id: str,
        columns: Sequence[Union[ColumnInput, dict]],
    ) -> BoardConfiguration:
        """
        Converge the project's columns onto ``columns``.

        Entries with the id of a stored column update it in place; entries
        without an id (or with an unknown one) are created; stored columns
        not listed are deleted. Re-submitting a returned configuration is a
        no-op.

        Raises:
            DomainRuleError: DUPLICATE_COLUMN_ID, INVALID_COLUMN_ORDER,
                DUPLICATE_COLUMN_STATUS, MIXED_BOARD_COLUMNS or
                INVALID_BOARD_COLUMN_RELATIONSHIP. Raised before any column
                write when the desired set itself is invalid.
            RepositoryError: a storage call failed (after compensation)
        """
        request = ConfigureColumnsInput(project_id=project_id, columns=list(columns))

        async with self.locks.for_project(project_id):
            board = await self._ensure_board(project_id)
            existing = await self.boards.list_columns_by_board(board.id)

            plan = plan_column_changes(board, existing, request.columns)
            validate_board_with_columns(board, plan.simulate())

            if plan.is_noop:
                logger.debug(f"Column configuration for board {board.id} unchanged")
                return BoardConfiguration(board=board, columns=_sorted(existing))

            await self._apply(plan)

            stored = await self.boards.list_columns_by_board(board.id)
            validate_board_with_columns(board, stored)

            logger.info(
                f"Reconciled board {board.id}: {len(plan.pending_updates)} updated, "
                f"{len(plan.creates)} created, {len(plan.deletes)} deleted"
            )
            return BoardConfiguration(board=board, columns=_sorted(stored))

    async def _apply(self, plan: ColumnPlan) -> None:
        updates = plan.pending_updates
        updated: List[Column] = []
        created: List[Column] = []
        deleted: List[Column] = []

        results = await asyncio.gather(
            *(self.boards.update_column(current.id, _settings(desired)) for current, desired in updates),
            *(self.boards.create_column(_create_input(plan.board_id, desired)) for desired in plan.creates),
            return_exceptions=True,
        )
        failure: Optional[BaseException] = None
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                failure = failure or result
            elif index < len(updates):
                updated.append(updates[index][0])
            else:
                created.append(result)

        if failure is None:
            for column in plan.deletes:
                try:
                    await self.boards.delete_column(column.id)
                except Exception as e:
                    failure = e
                    break
                deleted.append(column)

        if failure is not None:
            logger.error(f"Column write failed on board {plan.board_id}, compensating: {failure!r}")
            await self._compensate(plan.board_id, updated, created, deleted)
            raise failure

    async def _compensate(
        self,
        board_id: str,
        updated: List[Column],
        created: List[Column],
        deleted: List[Column],
    ) -> None:
        """
        Undo applied writes. Re-created columns get new ids.

        ``updated`` holds the column state from before the update.
        """
        steps: List[Tuple[str, Column]] = (
            [("delete", c) for c in created]
            + [("restore", c) for c in updated]
            + [("recreate", c) for c in deleted]
        )
        for action, column in steps:
            try:
                if action == "delete":
                    await self.boards.delete_column(column.id)
                elif action == "restore":
                    await self.boards.update_column(column.id, _settings(column))
                else:
                    await self.boards.create_column(_create_input(board_id, column))
            except Exception:
                logger.exception(f"Compensation step {action} failed for column {column.id}")
