# tests/test_board_service.py
"""
Tests for BoardService: board materialisation, default seeding and
column reconciliation over the in-memory backend.
"""

import asyncio

import pytest

from workboard.core.domain.errors import (
    ConstraintError,
    DatabaseError,
    DomainRuleCode,
    DomainRuleError,
)
from workboard.core.domain.schemas import ColumnInput
from workboard.services import BoardLocks, BoardService

TODO_DONE = [
    {"name": "Todo", "status": "todo", "position": 0},
    {"name": "Done", "status": "done", "position": 1},
]


def _settings(configuration):
    return [(c.id, c.name, c.status, c.position, c.visible) for c in configuration.columns]


def _as_desired(configuration):
    return [
        ColumnInput(id=c.id, name=c.name, status=c.status, position=c.position, visible=c.visible)
        for c in configuration.columns
    ]


class TestConfigureColumns:

    @pytest.mark.asyncio
    async def test_empty_project_end_to_end(self, board_service, store):
        configuration = await board_service.configure_columns("p1", TODO_DONE)

        assert len(store.boards) == 1
        assert configuration.board.project_id == "p1"
        assert [(c.name, c.position) for c in configuration.columns] == [("Todo", 0), ("Done", 1)]
        assert [w[0] for w in store.writes_for("columns")] == ["create", "create"]

    @pytest.mark.asyncio
    async def test_idempotent(self, board_service, store):
        first = await board_service.configure_columns("p1", TODO_DONE)
        writes_after_first = len(store.write_log)

        second = await board_service.configure_columns("p1", _as_desired(first))

        assert _settings(second) == _settings(first)
        assert len(store.columns) == 2
        assert len(store.write_log) == writes_after_first

    @pytest.mark.asyncio
    async def test_duplicate_position_writes_nothing(self, board_service, store):
        """
        The simulated end state is validated before any column write.

        The duplicate raises INVALID_COLUMN_ORDER with zero column writes,
        rather than after both columns are written. The board row itself is
        still created, since materialising it is part of the read path too.
        """
        desired = [
            {"name": "Todo", "status": "todo", "position": 0},
            {"name": "Done", "status": "done", "position": 0},
        ]

        with pytest.raises(DomainRuleError) as exc:
            await board_service.configure_columns("p1", desired)

        assert exc.value.code == DomainRuleCode.INVALID_COLUMN_ORDER
        assert store.writes_for("columns") == []

    @pytest.mark.asyncio
    async def test_duplicate_status_writes_nothing(self, board_service, store):
        desired = [
            {"name": "Todo", "status": "todo", "position": 0},
            {"name": "Also todo", "status": "todo", "position": 1},
        ]

        with pytest.raises(DomainRuleError) as exc:
            await board_service.configure_columns("p1", desired)

        assert exc.value.code == DomainRuleCode.DUPLICATE_COLUMN_STATUS
        assert store.writes_for("columns") == []

    @pytest.mark.asyncio
    async def test_duplicate_ids_rejected(self, board_service, store):
        first = await board_service.configure_columns("p1", TODO_DONE)
        todo_id = first.columns[0].id
        desired = [
            {"id": todo_id, "name": "Todo", "status": "todo", "position": 0},
            {"id": todo_id, "name": "Doing", "status": "doing", "position": 1},
        ]

        with pytest.raises(DomainRuleError) as exc:
            await board_service.configure_columns("p1", desired)

        assert exc.value.code == DomainRuleCode.DUPLICATE_COLUMN_ID

    @pytest.mark.asyncio
    async def test_update_create_and_delete(self, board_service, store):
        first = await board_service.configure_columns("p1", TODO_DONE)
        todo, done = first.columns
        desired = [
            {"id": todo.id, "name": "Backlog", "status": "todo", "position": 0},
            {"name": "Review", "status": "review", "position": 1},
            {"id": "unknown-id", "name": "Shipped", "status": "shipped", "position": 2},
        ]

        result = await board_service.configure_columns("p1", desired)

        assert [(c.name, c.status, c.position) for c in result.columns] == [
            ("Backlog", "todo", 0),
            ("Review", "review", 1),
            ("Shipped", "shipped", 2),
        ]
        assert result.columns[0].id == todo.id
        assert done.id not in store.columns
        assert "unknown-id" not in store.columns

    @pytest.mark.asyncio
    async def test_swapping_positions(self, board_service):
        first = await board_service.configure_columns("p1", TODO_DONE)
        todo, done = first.columns
        desired = [
            {"id": todo.id, "name": "Todo", "status": "todo", "position": 1},
            {"id": done.id, "name": "Done", "status": "done", "position": 0},
        ]

        result = await board_service.configure_columns("p1", desired)

        assert [c.id for c in result.columns] == [done.id, todo.id]

    @pytest.mark.asyncio
    async def test_gaps_in_positions(self, board_service):
        desired = [
            {"name": "A", "status": "a", "position": 0},
            {"name": "B", "status": "b", "position": 2},
            {"name": "C", "status": "c", "position": 5},
        ]

        result = await board_service.configure_columns("p1", desired)

        assert [c.position for c in result.columns] == [0, 2, 5]

    @pytest.mark.asyncio
    async def test_empty_desired_list_clears_board(self, board_service, store):
        await board_service.configure_columns("p1", TODO_DONE)

        result = await board_service.configure_columns("p1", [])

        assert result.columns == []
        assert store.columns == {}

    @pytest.mark.asyncio
    async def test_validates_stored_result(self, board_service, board_repo, store, monkeypatch):
        """A foreign write landing between apply and re-read is detected."""
        original = board_repo.create_column

        async def racing_create(data):
            column = await original(data)
            store.columns["rogue"] = {
                "id": "rogue", "board_id": data.board_id, "name": "Rogue",
                "status": data.status, "position": 99, "visible": True,
            }
            return column

        monkeypatch.setattr(board_repo, "create_column", racing_create)

        with pytest.raises(DomainRuleError) as exc:
            await board_service.configure_columns("p1", TODO_DONE[:1])

        assert exc.value.code == DomainRuleCode.DUPLICATE_COLUMN_STATUS


class TestCompensation:

    @pytest.mark.asyncio
    async def test_failed_create_rolls_back(self, board_service, board_repo, store, monkeypatch):
        first = await board_service.configure_columns("p1", TODO_DONE)
        todo, done = first.columns
        error = DatabaseError("insert failed")

        async def failing_create(data):
            raise error

        monkeypatch.setattr(board_repo, "create_column", failing_create)
        desired = [
            {"id": todo.id, "name": "Backlog", "status": "todo", "position": 0},
            {"name": "Review", "status": "review", "position": 2},
        ]

        with pytest.raises(DatabaseError) as exc:
            await board_service.configure_columns("p1", desired)

        assert exc.value is error
        stored = await board_repo.list_columns_by_board(first.board.id)
        assert [(c.id, c.name) for c in stored] == [(todo.id, "Todo"), (done.id, "Done")]

    @pytest.mark.asyncio
    async def test_failed_delete_rolls_back(self, board_service, board_repo, store, monkeypatch):
        first = await board_service.configure_columns("p1", TODO_DONE)
        todo, done = first.columns
        error = ConstraintError("23503")

        async def failing_delete(column_id):
            raise error

        monkeypatch.setattr(board_repo, "delete_column", failing_delete)
        desired = [
            {"id": todo.id, "name": "Backlog", "status": "todo", "position": 0},
            {"name": "Review", "status": "review", "position": 1},
        ]

        with pytest.raises(ConstraintError):
            await board_service.configure_columns("p1", desired)

        stored = await board_repo.list_columns_by_board(first.board.id)
        names = sorted(c.name for c in stored)
        # The created "Review" column could not be removed either
        assert "Backlog" not in names
        assert {"Todo", "Done"} <= set(names)

    @pytest.mark.asyncio
    async def test_compensation_failure_is_logged(self, board_service, board_repo, monkeypatch, caplog):
        first = await board_service.configure_columns("p1", TODO_DONE)
        original_update = board_repo.update_column
        calls = []

        async def update_once(column_id, data):
            calls.append(column_id)
            if len(calls) > 1:
                raise DatabaseError("restore failed")
            return await original_update(column_id, data)

        async def failing_create(data):
            raise DatabaseError("insert failed")

        monkeypatch.setattr(board_repo, "update_column", update_once)
        monkeypatch.setattr(board_repo, "create_column", failing_create)
        desired = [
            {"id": first.columns[0].id, "name": "Backlog", "status": "todo", "position": 0},
            {"name": "Review", "status": "review", "position": 2},
        ]

        with pytest.raises(DatabaseError):
            await board_service.configure_columns("p1", desired)

        assert "Compensation step restore failed" in caplog.text


class TestBoardConfiguration:

    @pytest.mark.asyncio
    async def test_seeds_defaults(self, board_service):
        configuration = await board_service.get_board_configuration("p1")

        assert [(c.name, c.status, c.position) for c in configuration.columns] == [
            ("Todo", "todo", 0),
            ("In Progress", "in-progress", 1),
            ("Done", "completed", 2),
        ]

    @pytest.mark.asyncio
    async def test_seeds_once(self, board_service, store):
        first = await board_service.get_board_configuration("p1")
        second = await board_service.get_board_configuration("p1")

        assert _settings(first) == _settings(second)
        assert len(store.columns) == 3
        assert len(store.boards) == 1

    @pytest.mark.asyncio
    async def test_existing_columns_not_reseeded(self, board_service):
        await board_service.configure_columns("p1", TODO_DONE)

        configuration = await board_service.get_board_configuration("p1")

        assert [c.status for c in configuration.columns] == ["todo", "done"]

    @pytest.mark.asyncio
    async def test_custom_defaults(self, board_repo):
        service = BoardService(board_repo, default_columns=[ColumnInput(name="Only", status="only", position=0)])

        configuration = await service.get_board_configuration("p1")

        assert [c.name for c in configuration.columns] == ["Only"]


class TestBoardMaterialisation:

    @pytest.mark.asyncio
    async def test_lost_create_race_rereads(self, board_service, board_repo, monkeypatch):
        existing = await board_repo.create("p1")
        original_find = board_repo.find_by_project
        calls = []

        async def stale_then_fresh(project_id):
            calls.append(project_id)
            if len(calls) == 1:
                return None
            return await original_find(project_id)

        monkeypatch.setattr(board_repo, "find_by_project", stale_then_fresh)

        board = await board_service.ensure_board("p1")

        assert board.id == existing.id

    @pytest.mark.asyncio
    async def test_concurrent_reads_seed_once(self, board_repo, store, monkeypatch):
        service = BoardService(board_repo, locks=BoardLocks())
        original_list = board_repo.list_columns_by_board

        async def yielding_list(board_id):
            await asyncio.sleep(0)
            return await original_list(board_id)

        monkeypatch.setattr(board_repo, "list_columns_by_board", yielding_list)

        first, second = await asyncio.gather(
            service.get_board_configuration("p1"),
            service.get_board_configuration("p1"),
        )

        assert first.board.id == second.board.id
        assert len(store.boards) == 1
        assert len(store.columns) == 3

    @pytest.mark.asyncio
    async def test_concurrent_reconfiguration_serialised(self, board_service, board_repo, store, monkeypatch):
        original_list = board_repo.list_columns_by_board

        async def yielding_list(board_id):
            await asyncio.sleep(0)
            return await original_list(board_id)

        monkeypatch.setattr(board_repo, "list_columns_by_board", yielding_list)

        await asyncio.gather(
            board_service.configure_columns("p1", TODO_DONE),
            board_service.configure_columns("p1", TODO_DONE),
        )

        statuses = sorted(row["status"] for row in store.columns.values())
        assert statuses == ["done", "todo"]

    @pytest.mark.asyncio
    async def test_locks_are_per_project(self):
        locks = BoardLocks()

        async with locks.for_project("p1"):
            # p2 is not blocked while p1 is held
            async with locks.for_project("p2"):
                assert set(locks._locks) == {"p1", "p2"}

        assert locks._locks == {}

    @pytest.mark.asyncio
    async def test_idle_project_locks_are_released(self, board_repo):
        locks = BoardLocks()
        service = BoardService(board_repo, locks=locks)

        await asyncio.gather(
            *(service.get_board_configuration(f"p{i}") for i in range(20)),
            service.configure_columns("p0", TODO_DONE),
        )

        assert locks._locks == {}
        assert locks._holders == {}
