# src/workboard/core/domain/rules/epics.py
"""
Epic Assignment Rules

- A ticket and its epic always share a project
- A ticket belongs to at most one epic; moving it requires an explicit
  unassign first
- Progress is the rounded share of tickets in the reserved completed status
"""

from typing import Sequence

from ..errors import DomainRuleCode, DomainRuleError
from ..models import COMPLETED_STATUS, Epic, Ticket


def validate_epic_membership(project_id: str, epic: Epic) -> None:
    """Raise TICKET_PROJECT_MISMATCH unless ``epic`` lives in ``project_id``."""
    if project_id != epic.project_id:
        raise DomainRuleError(
            DomainRuleCode.TICKET_PROJECT_MISMATCH,
            f"Ticket belongs to project {project_id}, "
            f"but epic belongs to project {epic.project_id}",
            field="project_id",
        )


def validate_assignment(ticket: Ticket, epic: Epic) -> None:
    """
    Validate assigning ``ticket`` to ``epic``.

    Re-assigning a ticket to the epic it already belongs to is allowed.

    Raises:
        DomainRuleError: TICKET_PROJECT_MISMATCH or DUPLICATE_EPIC_ASSIGNMENT
    """
    validate_epic_membership(ticket.project_id, epic)

    if ticket.epic_id is not None and ticket.epic_id != epic.id:
        raise DomainRuleError(
            DomainRuleCode.DUPLICATE_EPIC_ASSIGNMENT,
            f"Ticket is already assigned to epic {ticket.epic_id}, "
            f"cannot assign to epic {epic.id}",
            field="epic_id",
        )


def calculate_progress(tickets: Sequence[Ticket], completed_status: str = COMPLETED_STATUS) -> int:
    """
    Percentage (0-100) of tickets whose status equals ``completed_status``.

    Rounds half up; an empty list yields 0.
    """
    total = len(tickets)
    if total == 0:
        return 0
    completed = sum(1 for t in tickets if t.status == completed_status)
    # round(100 * completed / total), half up, in integer arithmetic
    return (200 * completed + total) // (2 * total)


def validate_epic_with_tickets(epic: Epic, tickets: Sequence[Ticket]) -> None:
    """
    Consistency check of an epic against the tickets listed under it.

    Raises:
        DomainRuleError: TICKET_PROJECT_MISMATCH or INVALID_EPIC_TICKET_CONSISTENCY
    """
    for ticket in tickets:
        if ticket.project_id != epic.project_id:
            raise DomainRuleError(
                DomainRuleCode.TICKET_PROJECT_MISMATCH,
                f"Ticket {ticket.id} belongs to project {ticket.project_id}, "
                f"but epic belongs to project {epic.project_id}",
                field="project_id",
            )
        if ticket.epic_id != epic.id:
            raise DomainRuleError(
                DomainRuleCode.INVALID_EPIC_TICKET_CONSISTENCY,
                f"Ticket {ticket.id} has epic_id {ticket.epic_id}, but expected {epic.id}",
                field="epic_id",
            )
