"""Application errors and the wrapper used at service boundaries.

Services raise ``AppError`` subclasses; the FastAPI handler in ``main`` turns
them into ``{"code", "message", "details"}`` JSON with the matching status.
"""
import functools
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

log = logging.getLogger(__name__)

ERROR_MESSAGES = {
    "invalid-argument": "The request contains invalid data.",
    "unauthenticated": "Authentication is required.",
    "permission-denied": "You do not have permission to perform this action.",
    "not-found": "The requested record was not found.",
    "already-exists": "A record with these details already exists.",
    "internal": "An unexpected error occurred.",
}


class AppError(Exception):
    code = "internal"
    status_code = 500

    def __init__(self, message: str | None = None, *, code: str | None = None,
                 status_code: int | None = None, metadata: dict[str, Any] | None = None):
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.message = message or ERROR_MESSAGES.get(self.code, ERROR_MESSAGES["internal"])
        self.metadata = metadata or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.metadata}


class InvalidArgumentError(AppError):
    code = "invalid-argument"
    status_code = 400


class UnauthenticatedError(AppError):
    code = "unauthenticated"
    status_code = 401


class PermissionDeniedError(AppError):
    code = "permission-denied"
    status_code = 403


class NotFoundError(AppError):
    code = "not-found"
    status_code = 404


class AlreadyExistsError(AppError):
    code = "already-exists"
    status_code = 409


def service_operation(name: str):
    """Log and convert persistence errors raised inside a service method.

    ``AppError`` passes through untouched. ``IntegrityError`` becomes
    ``already-exists`` and any other ``SQLAlchemyError`` becomes ``internal``.
    The session is rolled back when the wrapped object exposes one.
    """
    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(self, *args, **kwargs):
            try:
                return await fn(self, *args, **kwargs)
            except AppError as e:
                log.info(f"{name} rejected: {e.code} {e.message}")
                raise
            except IntegrityError as e:
                await _rollback(self)
                log.warning(f"{name} violated a constraint: {e.orig}")
                raise AlreadyExistsError(metadata={"operation": name}) from e
            except SQLAlchemyError as e:
                await _rollback(self)
                log.exception(f"{name} failed")
                raise AppError(f"{name} failed", metadata={"operation": name}) from e
        return wrapper
    return decorator


async def _rollback(service) -> None:
    session = getattr(service, "session", None)
    if session is not None:
        await session.rollback()
