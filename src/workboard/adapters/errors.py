# src/workboard/adapters/errors.py
"""
Error Boundaries

Standardized error handling for every repository-facing and auth-facing
adapter method. Each boundary:

1. Logs the error with context (entity type, id, code)
2. Re-raises errors of its own family unchanged (same object, never re-wrapped)
3. Translates anything else through a mapper and raises the mapped error

Mappers only inspect low-level shapes (PostgREST / Supabase Auth errors,
plain exceptions, dicts). Causes stay on the mapped error for diagnostics.

Usage:
    try:
        result = await client.table("tickets").select("*").execute()
    except Exception as e:
        handle_repository_error(e, "Ticket", ticket_id)
"""

import logging
from typing import Any, NoReturn, Optional

from ..core.domain.errors import (
    AuthError,
    AuthErrorCode,
    ConstraintError,
    DatabaseError,
    DomainRuleError,
    NotFoundError,
    RepositoryError,
)

logger = logging.getLogger(__name__)
auth_logger = logging.getLogger(f"{__name__}.auth")

# PostgREST "no rows" for .single()
PGRST_NO_ROWS = "PGRST116"
# Postgres unique / foreign key / check violations
CONSTRAINT_CODES = frozenset({"23505", "23503", "23514"})
# Postgres insufficient_privilege, raised by row-level security
PERMISSION_DENIED_CODE = "42501"
RLS_POLICY_VIOLATION = "RLS_POLICY_VIOLATION"


def _field(error: Any, name: str) -> Any:
    """Read ``name`` from an exception attribute or a dict key."""
    if isinstance(error, dict):
        return error.get(name)
    return getattr(error, name, None)


def _is_postgrest_error(error: Any) -> bool:
    if isinstance(error, dict):
        return "code" in error and "message" in error and "details" in error
    return all(hasattr(error, attr) for attr in ("code", "message", "details"))


# =============================================================================
# REPOSITORY BOUNDARY
# =============================================================================

def map_storage_error(
    error: Any,
    entity_type: str = "Entity",
    entity_id: Optional[str] = None,
) -> RepositoryError:
    """
    Translate a low-level storage error into a RepositoryError.

    Args:
        error: PostgREST error, exception, or any other value
        entity_type: Entity name for context (e.g. "Ticket")
        entity_id: Entity id used when the error means "not found"
    """
    if _is_postgrest_error(error):
        code = str(_field(error, "code") or "")
        message = _field(error, "message") or _field(error, "details")

        if code == PGRST_NO_ROWS:
            return NotFoundError(entity_type, entity_id or "unknown", message or None)

        if code in CONSTRAINT_CODES:
            return ConstraintError(code, message or None)

        if code == PERMISSION_DENIED_CODE or (
            message and "row-level security" in str(message).lower()
        ):
            return ConstraintError(RLS_POLICY_VIOLATION, message or None)

        return DatabaseError(message or f"Supabase error: {code}", cause=error)

    if isinstance(error, Exception):
        return DatabaseError(str(error) or type(error).__name__, cause=error)

    return DatabaseError("Unknown repository error", cause=error)


def handle_repository_error(
    error: Any,
    entity_type: str = "Entity",
    entity_id: Optional[str] = None,
) -> NoReturn:
    """
    Re-raise repository and domain rule errors unchanged, translate the rest.

    Raises:
        RepositoryError | DomainRuleError: always
    """
    if isinstance(error, (RepositoryError, DomainRuleError)):
        logger.error(
            f"Repository error: {error.code.value} "
            f"(entity_type={entity_type}, entity_id={entity_id}, debug={error.debug_message})"
        )
        raise error

    mapped = map_storage_error(error, entity_type, entity_id)
    logger.error(
        f"Repository error (mapped from infrastructure error): {mapped.code.value} "
        f"(entity_type={entity_type}, entity_id={entity_id}, original={error!r})"
    )
    if isinstance(error, BaseException):
        raise mapped from error
    raise mapped


# =============================================================================
# AUTH BOUNDARY
# =============================================================================

def map_auth_error(error: Any) -> AuthError:
    """Translate a Supabase Auth error (or anything else) into an AuthError."""
    message = _field(error, "message")
    if message is None and isinstance(error, Exception):
        message = str(error)

    if isinstance(message, str) and (_field(error, "status") is not None or isinstance(error, Exception)):
        text = message.lower()
        code = _field(error, "code")
        status = _field(error, "status")

        if code == "email_not_confirmed" or "email not confirmed" in text or "email address not confirmed" in text:
            return AuthError(AuthErrorCode.EMAIL_VERIFICATION_ERROR, message, cause=error)

        if code == "invalid_credentials" or (
            status == 400
            and any(s in text for s in ("invalid login credentials", "invalid password", "user not found"))
        ) or ("invalid" in text and ("credentials" in text or "password" in text)):
            return AuthError(AuthErrorCode.INVALID_CREDENTIALS, message, cause=error)

        if code in ("user_already_exists", "email_exists") or any(
            s in text for s in ("user already registered", "email already exists")
        ) or ("email" in text and "already" in text):
            return AuthError(AuthErrorCode.EMAIL_ALREADY_EXISTS, message, cause=error)

        if code == "weak_password" or (
            "password" in text and any(s in text for s in ("weak", "too short", "requirements"))
        ):
            return AuthError(AuthErrorCode.WEAK_PASSWORD, message, cause=error)

        if code in ("validation_failed", "email_address_invalid") or any(
            s in text for s in ("invalid email", "email format")
        ):
            return AuthError(AuthErrorCode.INVALID_EMAIL, message, cause=error)

        if code in ("invalid_token", "token_expired", "otp_expired") or any(
            s in text for s in ("invalid token", "token expired", "token has expired")
        ):
            return AuthError(AuthErrorCode.INVALID_TOKEN, message, cause=error)

        if any(s in text for s in ("email verification", "verification failed")):
            return AuthError(AuthErrorCode.EMAIL_VERIFICATION_ERROR, message, cause=error)

        if code == "email_not_found" or any(s in text for s in ("password reset", "reset failed")):
            return AuthError(AuthErrorCode.PASSWORD_RESET_ERROR, message, cause=error)

        return AuthError(AuthErrorCode.AUTHENTICATION_ERROR, message, cause=error)

    if isinstance(error, str) and error:
        return AuthError(AuthErrorCode.AUTHENTICATION_ERROR, error, cause=error)

    if isinstance(message, str) and message:
        return AuthError(AuthErrorCode.AUTHENTICATION_ERROR, message, cause=error)

    return AuthError(
        AuthErrorCode.AUTHENTICATION_ERROR,
        "An unknown authentication error occurred",
        cause=error,
    )


def handle_auth_error(error: Any) -> NoReturn:
    """
    Re-raise AuthError unchanged, translate the rest.

    Raises:
        AuthError: always
    """
    if isinstance(error, AuthError):
        auth_logger.error(f"Authentication error: {error.code.value}")
        raise error

    mapped = map_auth_error(error)
    auth_logger.error(
        f"Authentication error (mapped from infrastructure error): {mapped.code.value} "
        f"(original={error!r})"
    )
    if isinstance(error, BaseException):
        raise mapped from error
    raise mapped
