# src/workboard/core/domain/errors.py
"""
Error Taxonomy

Three disjoint error families cross the core boundary:

- RepositoryError: storage failures (NOT_FOUND, CONSTRAINT_VIOLATION, DATABASE_ERROR)
- AuthError: credential and account lifecycle failures
- DomainRuleError: business-invariant violations

Every family carries a closed enum of codes. Only the code (plus field and
entity metadata) is meant for the presentation layer; debug messages and
causes are diagnostics only.

Usage:
    from workboard.core.domain.errors import NotFoundError, classify

    try:
        ...
    except WorkboardError as e:
        family = classify(e)
        payload = e.to_public()
"""

from enum import Enum
from typing import Any, Dict, Optional


class RepositoryErrorCode(str, Enum):
    """Closed code set for repository failures."""
    NOT_FOUND = "NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    DATABASE_ERROR = "DATABASE_ERROR"


class AuthErrorCode(str, Enum):
    """Closed code set for authentication failures."""
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_EMAIL = "INVALID_EMAIL"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    EMAIL_VERIFICATION_ERROR = "EMAIL_VERIFICATION_ERROR"
    PASSWORD_RESET_ERROR = "PASSWORD_RESET_ERROR"
    INVALID_TOKEN = "INVALID_TOKEN"


class DomainRuleCode(str, Enum):
    """Business rule violations raised by the rule layer and services."""
    # Ticket hierarchy
    INVALID_TICKET_PARENT = "INVALID_TICKET_PARENT"
    INVALID_TICKET_PARENT_MULTI_LEVEL = "INVALID_TICKET_PARENT_MULTI_LEVEL"
    TICKET_HAS_SUBTASKS = "TICKET_HAS_SUBTASKS"
    TICKET_PROJECT_MISMATCH = "TICKET_PROJECT_MISMATCH"

    # Epic assignment
    DUPLICATE_EPIC_ASSIGNMENT = "DUPLICATE_EPIC_ASSIGNMENT"
    INVALID_EPIC_TICKET_CONSISTENCY = "INVALID_EPIC_TICKET_CONSISTENCY"

    # Board configuration
    INVALID_COLUMN_ORDER = "INVALID_COLUMN_ORDER"
    DUPLICATE_COLUMN_STATUS = "DUPLICATE_COLUMN_STATUS"
    DUPLICATE_COLUMN_ID = "DUPLICATE_COLUMN_ID"
    MIXED_BOARD_COLUMNS = "MIXED_BOARD_COLUMNS"
    INVALID_BOARD_COLUMN_RELATIONSHIP = "INVALID_BOARD_COLUMN_RELATIONSHIP"


class ErrorFamily(str, Enum):
    """The three error families."""
    REPOSITORY = "repository"
    AUTH = "auth"
    DOMAIN_RULE = "domain_rule"


# Frozen at import time, never mutated
REPOSITORY_ERROR_CODES = frozenset(c.value for c in RepositoryErrorCode)
AUTH_ERROR_CODES = frozenset(c.value for c in AuthErrorCode)
DOMAIN_RULE_CODES = frozenset(c.value for c in DomainRuleCode)


class WorkboardError(Exception):
    """Base class for every error that may cross the core boundary."""

    family: ErrorFamily

    def __init__(self, code: Enum, debug_message: Optional[str] = None):
        self.code = code
        self.debug_message = debug_message
        super().__init__(debug_message or code.value)

    def to_public(self) -> Dict[str, Any]:
        """Presentation-safe payload: the code plus field/entity metadata."""
        return {"code": self.code.value}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r})"


# =============================================================================
# REPOSITORY ERRORS
# =============================================================================

class RepositoryError(WorkboardError):
    """Base class for storage failures."""

    family = ErrorFamily.REPOSITORY

    def __init__(self, code: RepositoryErrorCode, debug_message: Optional[str] = None):
        super().__init__(RepositoryErrorCode(code), debug_message)


class NotFoundError(RepositoryError):
    """A requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: str, debug_message: Optional[str] = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            RepositoryErrorCode.NOT_FOUND,
            debug_message or f"{entity_type} with id {entity_id} not found",
        )

    def to_public(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
        }


class ConstraintError(RepositoryError):
    """A storage constraint (unique, foreign key, check, policy) was violated."""

    def __init__(self, constraint: str, debug_message: Optional[str] = None):
        self.constraint = constraint
        super().__init__(
            RepositoryErrorCode.CONSTRAINT_VIOLATION,
            debug_message or f"Database constraint violation: {constraint}",
        )


class DatabaseError(RepositoryError):
    """Any other storage failure. ``cause`` is kept for diagnostics only."""

    def __init__(self, debug_message: str, cause: Any = None):
        self.cause = cause
        super().__init__(RepositoryErrorCode.DATABASE_ERROR, debug_message)


# =============================================================================
# AUTH ERRORS
# =============================================================================

class AuthError(WorkboardError):
    """Credential or account lifecycle failure."""

    family = ErrorFamily.AUTH

    def __init__(self, code: AuthErrorCode, debug_message: Optional[str] = None, cause: Any = None):
        self.cause = cause
        super().__init__(AuthErrorCode(code), debug_message)


# =============================================================================
# DOMAIN RULE ERRORS
# =============================================================================

class DomainRuleError(WorkboardError):
    """
    A business invariant was violated.

    The code must be a DomainRuleCode member (or its string value); anything
    else raises ValueError at construction.
    """

    family = ErrorFamily.DOMAIN_RULE

    def __init__(
        self,
        code: DomainRuleCode,
        debug_message: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.field = field
        super().__init__(DomainRuleCode(code), debug_message)

    def to_public(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code.value}
        if self.field:
            payload["field"] = self.field
        return payload


def classify(error: BaseException) -> Optional[ErrorFamily]:
    """
    Return the family of an error, or None when it belongs to none.

    Matching is by type only; a foreign object that merely carries a
    ``code`` attribute is never classified.
    """
    if isinstance(error, RepositoryError):
        return ErrorFamily.REPOSITORY
    if isinstance(error, AuthError):
        return ErrorFamily.AUTH
    if isinstance(error, DomainRuleError):
        return ErrorFamily.DOMAIN_RULE
    return None
