# src/workboard/core/domain/schemas.py
"""
Pydantic input models.

Structural validation only (required fields, non-empty strings,
non-negative positions). Business rules run afterwards in the rule layer.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# -------------------------
# Tickets
# -------------------------

class CreateTicketInput(BaseModel):
    """Input for creating a ticket (top-level unless parent_id is given)."""
    project_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    description: Optional[str] = None
    position: int = Field(default=0, ge=0)
    epic_id: Optional[str] = Field(None, min_length=1)
    parent_id: Optional[str] = Field(None, min_length=1)


class CreateSubtaskInput(CreateTicketInput):
    """Input for creating a subtask; parent_id is required."""
    parent_id: str = Field(..., min_length=1)


class UpdateTicketInput(BaseModel):
    """
    Partial ticket update.

    Only explicitly provided fields are written; use ``changes()`` to get
    them. Passing ``parent_id=None`` removes the parent.
    """
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1)
    position: Optional[int] = Field(None, ge=0)
    epic_id: Optional[str] = Field(None, min_length=1)
    parent_id: Optional[str] = Field(None, min_length=1)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class MoveTicketInput(BaseModel):
    """Drag-and-drop move to another status/column and position."""
    status: str = Field(..., min_length=1)
    position: int = Field(..., ge=0)


class TicketPosition(BaseModel):
    id: str = Field(..., min_length=1)
    position: int = Field(..., ge=0)


class ReorderTicketsInput(BaseModel):
    ticket_positions: List[TicketPosition] = Field(..., min_length=1)


class TicketFilters(BaseModel):
    """Optional equality filters for listing tickets."""
    status: Optional[str] = None
    epic_id: Optional[str] = None
    parent_id: Optional[str] = None


class TicketSort(BaseModel):
    field: Literal["position", "created_at", "updated_at", "title"] = "position"
    direction: Literal["asc", "desc"] = "asc"


# -------------------------
# Epics
# -------------------------

class CreateEpicInput(BaseModel):
    project_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class UpdateEpicInput(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# -------------------------
# Boards / columns
# -------------------------

class ColumnInput(BaseModel):
    """One entry of a desired column configuration."""
    id: Optional[str] = Field(None, min_length=1)
    name: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    position: int = Field(..., ge=0)
    visible: bool = True


class ConfigureColumnsInput(BaseModel):
    project_id: str = Field(..., min_length=1)
    columns: List[ColumnInput] = Field(default_factory=list)


class CreateColumnInput(BaseModel):
    """Storage-port input for a new column."""
    board_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    position: int = Field(default=0, ge=0)
    visible: bool = True


class UpdateColumnInput(BaseModel):
    """Storage-port input for an in-place column update."""
    name: Optional[str] = Field(None, min_length=1)
    status: Optional[str] = Field(None, min_length=1)
    position: Optional[int] = Field(None, ge=0)
    visible: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
