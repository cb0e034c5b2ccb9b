# src/workboard/core/domain/__init__.py
"""
Domain layer for Workboard

Entities, input models, the error taxonomy and the business rules.
Nothing here performs I/O.
"""

from .errors import (
    AUTH_ERROR_CODES,
    DOMAIN_RULE_CODES,
    REPOSITORY_ERROR_CODES,
    AuthError,
    AuthErrorCode,
    ConstraintError,
    DatabaseError,
    DomainRuleCode,
    DomainRuleError,
    ErrorFamily,
    NotFoundError,
    RepositoryError,
    RepositoryErrorCode,
    WorkboardError,
    classify,
)
from .models import (
    COMPLETED_STATUS,
    Board,
    BoardConfiguration,
    Column,
    Epic,
    EpicDetail,
    EpicWithProgress,
    Ticket,
    TicketSummary,
)

__all__ = [
    # Errors
    "AUTH_ERROR_CODES",
    "DOMAIN_RULE_CODES",
    "REPOSITORY_ERROR_CODES",
    "AuthError",
    "AuthErrorCode",
    "ConstraintError",
    "DatabaseError",
    "DomainRuleCode",
    "DomainRuleError",
    "ErrorFamily",
    "NotFoundError",
    "RepositoryError",
    "RepositoryErrorCode",
    "WorkboardError",
    "classify",
    # Models
    "COMPLETED_STATUS",
    "Board",
    "BoardConfiguration",
    "Column",
    "Epic",
    "EpicDetail",
    "EpicWithProgress",
    "Ticket",
    "TicketSummary",
]
