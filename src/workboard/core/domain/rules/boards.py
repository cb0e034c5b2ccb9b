# src/workboard/core/domain/rules/boards.py
"""
Board Configuration Rules

Board invariants (per board):
- no two columns share a position (gaps are fine: 0, 2, 5 is valid)
- no two columns share a status
- every column's board_id is the board it was fetched through

Also holds the pure half of column reconciliation: diffing a desired column
list against stored columns into a ColumnPlan whose simulated end state can
be validated before any write is issued.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from ..errors import DomainRuleCode, DomainRuleError
from ..models import COMPLETED_STATUS, Board, Column
from ..schemas import ColumnInput

# Seeded on first read of a board that has no columns
DEFAULT_COLUMNS = (
    {"name": "Todo", "status": "todo", "position": 0, "visible": True},
    {"name": "In Progress", "status": "in-progress", "position": 1, "visible": True},
    {"name": "Done", "status": COMPLETED_STATUS, "position": 2, "visible": True},
)

# Id prefix for columns that only exist in a simulated plan
PLANNED_ID_PREFIX = "planned:"


def default_board_columns(completed_status: str = COMPLETED_STATUS) -> List[ColumnInput]:
    """The default column set; the Done column carries ``completed_status``."""
    columns = [ColumnInput(**column) for column in DEFAULT_COLUMNS]
    columns[-1].status = completed_status
    return columns


def _group_by_board(columns: Sequence[Column]) -> Dict[str, List[Column]]:
    grouped: Dict[str, List[Column]] = {}
    for column in columns:
        grouped.setdefault(column.board_id, []).append(column)
    return grouped


def _duplicates(values) -> list:
    return sorted(v for v, n in Counter(values).items() if n > 1)


def validate_column_order(columns: Sequence[Column]) -> None:
    """Raise INVALID_COLUMN_ORDER if two columns of a board share a position."""
    for board_id, board_columns in _group_by_board(columns).items():
        duplicates = _duplicates(c.position for c in board_columns)
        if duplicates:
            raise DomainRuleError(
                DomainRuleCode.INVALID_COLUMN_ORDER,
                f"Duplicate column positions found in board {board_id}: "
                f"{', '.join(str(p) for p in duplicates)}",
                field="position",
            )


def validate_column_status_uniqueness(columns: Sequence[Column]) -> None:
    """Raise DUPLICATE_COLUMN_STATUS if two columns of a board share a status."""
    for board_id, board_columns in _group_by_board(columns).items():
        duplicates = _duplicates(c.status for c in board_columns)
        if duplicates:
            raise DomainRuleError(
                DomainRuleCode.DUPLICATE_COLUMN_STATUS,
                f"Duplicate column statuses found in board {board_id}: {', '.join(duplicates)}",
                field="status",
            )


def validate_board_column_relationship(column: Column, board_id: str) -> None:
    """Raise INVALID_BOARD_COLUMN_RELATIONSHIP if the column is not on ``board_id``."""
    if column.board_id != board_id:
        raise DomainRuleError(
            DomainRuleCode.INVALID_BOARD_COLUMN_RELATIONSHIP,
            f"Column belongs to board {column.board_id}, but expected board {board_id}",
            field="board_id",
        )


def validate_board_with_columns(board: Board, columns: Sequence[Column]) -> None:
    """
    Validate a board together with its full column set.

    Checks, in order: all columns on this board (MIXED_BOARD_COLUMNS),
    unique positions, unique statuses, per-column board relationship.
    """
    if not columns:
        return

    foreign = sorted({c.board_id for c in columns if c.board_id != board.id})
    if foreign:
        raise DomainRuleError(
            DomainRuleCode.MIXED_BOARD_COLUMNS,
            f"Columns from multiple boards passed: board {board.id} and boards {', '.join(foreign)}",
        )

    validate_column_order(columns)
    validate_column_status_uniqueness(columns)
    for column in columns:
        validate_board_column_relationship(column, board.id)


def validate_desired_ids(desired: Sequence[ColumnInput]) -> None:
    """Raise DUPLICATE_COLUMN_ID if one id appears twice in a desired list."""
    duplicates = _duplicates(c.id for c in desired if c.id)
    if duplicates:
        raise DomainRuleError(
            DomainRuleCode.DUPLICATE_COLUMN_ID,
            f"Duplicate column ids in configuration: {', '.join(duplicates)}",
            field="id",
        )


@dataclass
class ColumnPlan:
    """
    Diff between stored columns and a desired configuration.

    updates: (stored column, desired settings) pairs for in-place updates
    creates: desired entries with no id or an unknown id
    deletes: stored columns absent from the desired list
    """
    board_id: str
    updates: List[tuple] = field(default_factory=list)
    creates: List[ColumnInput] = field(default_factory=list)
    deletes: List[Column] = field(default_factory=list)

    @property
    def keep_ids(self) -> set:
        return {current.id for current, _ in self.updates}

    @property
    def pending_updates(self) -> List[tuple]:
        """Updates whose desired settings differ from the stored column."""
        return [(c, d) for c, d in self.updates if not _matches(c, d)]

    @property
    def is_noop(self) -> bool:
        return not self.creates and not self.deletes and not self.pending_updates

    def simulate(self) -> List[Column]:
        """The column set storage will hold once the plan is applied."""
        result = [
            replace(
                current,
                name=desired.name,
                status=desired.status,
                position=desired.position,
                visible=desired.visible,
            )
            for current, desired in self.updates
        ]
        for index, desired in enumerate(self.creates):
            result.append(
                Column(
                    id=f"{PLANNED_ID_PREFIX}{index}",
                    board_id=self.board_id,
                    name=desired.name,
                    status=desired.status,
                    position=desired.position,
                    visible=desired.visible,
                )
            )
        return sorted(result, key=lambda c: c.position)


def _matches(current: Column, desired: ColumnInput) -> bool:
    return (
        current.name == desired.name
        and current.status == desired.status
        and current.position == desired.position
        and current.visible == desired.visible
    )


def plan_column_changes(
    board: Board,
    existing: Sequence[Column],
    desired: Sequence[ColumnInput],
) -> ColumnPlan:
    """
    Partition a desired column list against the stored columns.

    Entries whose id matches a stored column update it in place; entries with
    no id or an unknown id are created; stored columns not kept are deleted.
    """
    validate_desired_ids(desired)

    existing_by_id: Dict[str, Column] = {c.id: c for c in existing}
    plan = ColumnPlan(board_id=board.id)

    for entry in desired:
        current: Optional[Column] = existing_by_id.get(entry.id) if entry.id else None
        if current is not None:
            plan.updates.append((current, entry))
        else:
            plan.creates.append(entry)

    keep = plan.keep_ids
    plan.deletes = [c for c in existing if c.id not in keep]
    return plan
