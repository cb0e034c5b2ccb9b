# src/workboard/core/domain/rules/tickets.py
"""
Ticket Hierarchy Rules

Pure, synchronous checks over in-memory tickets. Nesting depth is at most
one: a ticket referenced as a parent must itself be top-level.

validate_parent has two modes:
- without the project ticket set, only the self-parent check runs
- with the full project ticket set, multi-level nesting is also checked

Every service call site passes the full set.
"""

from typing import Iterable, Optional, Sequence, Union

from ..errors import DomainRuleCode, DomainRuleError
from ..models import Ticket
from ..schemas import CreateTicketInput

TicketLike = Union[Ticket, CreateTicketInput]


def validate_parent(
    ticket: TicketLike,
    all_project_tickets: Optional[Sequence[Ticket]] = None,
) -> None:
    """
    Validate a ticket's parent relationship.

    Args:
        ticket: Stored ticket or creation input
        all_project_tickets: Every ticket in the ticket's project, or None
            for the self-parent check only

    Raises:
        DomainRuleError: INVALID_TICKET_PARENT or INVALID_TICKET_PARENT_MULTI_LEVEL
    """
    if ticket.parent_id is None:
        return

    ticket_id = getattr(ticket, "id", None)
    if ticket_id is not None and ticket_id == ticket.parent_id:
        raise DomainRuleError(
            DomainRuleCode.INVALID_TICKET_PARENT,
            "Ticket cannot be its own parent (circular reference)",
            field="parent_id",
        )

    if all_project_tickets is None:
        return

    parent = find_ticket(all_project_tickets, ticket.parent_id)
    if parent is not None and parent.parent_id is not None:
        raise DomainRuleError(
            DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL,
            f"Parent ticket {parent.id} already has a parent",
            field="parent_id",
        )

    # A ticket that already has subtasks cannot become a subtask itself
    if ticket_id is not None:
        children = subtasks_of(all_project_tickets, ticket_id)
        if children:
            raise DomainRuleError(
                DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL,
                f"Ticket {ticket_id} has {len(children)} subtask(s) and cannot be nested",
                field="parent_id",
            )


def validate_ticket(
    ticket: TicketLike,
    all_project_tickets: Optional[Sequence[Ticket]] = None,
) -> None:
    """Run every ticket rule; the first violation raises."""
    validate_parent(ticket, all_project_tickets)


def validate_subtask_parent(parent: Ticket, project_id: str) -> None:
    """A subtask's parent must be top-level and in the same project."""
    if parent.parent_id is not None:
        raise DomainRuleError(
            DomainRuleCode.INVALID_TICKET_PARENT_MULTI_LEVEL,
            f"Parent ticket {parent.id} is already a subtask. Multi-level nesting is not allowed.",
            field="parent_id",
        )
    if parent.project_id != project_id:
        raise DomainRuleError(
            DomainRuleCode.TICKET_PROJECT_MISMATCH,
            f"Subtask project {project_id} does not match parent ticket project {parent.project_id}",
            field="project_id",
        )


def validate_deletable(ticket: Ticket, all_project_tickets: Iterable[Ticket]) -> None:
    """A ticket with subtasks cannot be deleted; there is no implicit cascade."""
    children = subtasks_of(all_project_tickets, ticket.id)
    if children:
        raise DomainRuleError(
            DomainRuleCode.TICKET_HAS_SUBTASKS,
            f"Ticket {ticket.id} cannot be deleted because it has {len(children)} subtask(s). "
            "Delete subtasks first.",
            field="id",
        )


def find_ticket(tickets: Iterable[Ticket], ticket_id: str) -> Optional[Ticket]:
    for candidate in tickets:
        if candidate.id == ticket_id:
            return candidate
    return None


def subtasks_of(tickets: Iterable[Ticket], parent_id: str) -> list:
    return [t for t in tickets if t.parent_id == parent_id]
