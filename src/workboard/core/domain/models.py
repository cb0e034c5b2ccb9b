# src/workboard/core/domain/models.py
"""
Domain Models

Pure dataclasses representing the core business entities.
These are database-agnostic and contain no infrastructure concerns.

Design Principles:
- Immutable (frozen=True); updates go through dataclasses.replace
- Relationships are plain identifiers (parent_id, epic_id, board_id),
  resolved by lookup, never object references
- from_row builds an entity from a snake_case storage row
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Reserved status value counted as "done" for epic progress
COMPLETED_STATUS = "completed"


@dataclass(frozen=True)
class Ticket:
    """A unit of work in exactly one project."""
    id: str
    project_id: str
    title: str
    status: str
    position: int = 0
    description: Optional[str] = None
    epic_id: Optional[str] = None
    parent_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_subtask(self) -> bool:
        return self.parent_id is not None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Ticket":
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            title=row.get("title", ""),
            status=row.get("status", ""),
            position=row.get("position") or 0,
            description=row.get("description"),
            epic_id=row.get("epic_id"),
            parent_id=row.get("parent_id"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class Epic:
    """Grouping entity owning zero or more tickets in one project."""
    id: str
    project_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Epic":
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            name=row.get("name", ""),
            description=row.get("description"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class Board:
    """The single per-project container of columns."""
    id: str
    project_id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Board":
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class Column:
    """A named, positioned, status-mapped lane on a board."""
    id: str
    board_id: str
    name: str
    status: str
    position: int
    visible: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Column":
        visible = row.get("visible")
        return cls(
            id=row["id"],
            board_id=row["board_id"],
            name=row.get("name", ""),
            status=row.get("status", ""),
            position=row.get("position") or 0,
            visible=True if visible is None else bool(visible),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class BoardConfiguration:
    """A board with its columns in position order."""
    board: Board
    columns: List[Column] = field(default_factory=list)


@dataclass(frozen=True)
class TicketSummary:
    """Minimal ticket info embedded in epic detail."""
    id: str
    title: str
    status: str


@dataclass(frozen=True)
class EpicWithProgress:
    """Epic plus its completion percentage (0-100)."""
    epic: Epic
    progress: int


@dataclass(frozen=True)
class EpicDetail:
    """Epic with progress and the tickets assigned to it."""
    epic: Epic
    progress: int
    tickets: List[TicketSummary] = field(default_factory=list)
