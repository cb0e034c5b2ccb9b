"""
Domain rules - pure, synchronous business-rule validators.

Each validator returns None on success and raises DomainRuleError on the
first violation.
"""

from .boards import (
    DEFAULT_COLUMNS,
    ColumnPlan,
    default_board_columns,
    plan_column_changes,
    validate_board_column_relationship,
    validate_board_with_columns,
    validate_column_order,
    validate_column_status_uniqueness,
    validate_desired_ids,
)
from .epics import (
    calculate_progress,
    validate_assignment,
    validate_epic_membership,
    validate_epic_with_tickets,
)
from .tickets import (
    validate_deletable,
    validate_parent,
    validate_subtask_parent,
    validate_ticket,
)

__all__ = [
    # Boards
    "DEFAULT_COLUMNS",
    "ColumnPlan",
    "default_board_columns",
    "plan_column_changes",
    "validate_board_column_relationship",
    "validate_board_with_columns",
    "validate_column_order",
    "validate_column_status_uniqueness",
    "validate_desired_ids",
    # Epics
    "calculate_progress",
    "validate_assignment",
    "validate_epic_membership",
    "validate_epic_with_tickets",
    # Tickets
    "validate_deletable",
    "validate_parent",
    "validate_subtask_parent",
    "validate_ticket",
]
