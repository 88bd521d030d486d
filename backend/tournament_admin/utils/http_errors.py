"""
HTTP mapping for core service failures.

Services raise CoreError subclasses and never know about HTTP; routes wrap calls in
core_errors_as_http() to turn them into HTTPException with the reason as detail.
"""
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from tournament_admin.services.errors import (
    AlreadyCancelled,
    AlreadyCompleted,
    BusinessRuleError,
    DuplicateActiveRegistration,
    NotFoundError,
    TransientStoreError,
)

# 409 for state conflicts; other business-rule rejections are 400
_CONFLICTS = (DuplicateActiveRegistration, AlreadyCancelled, AlreadyCompleted)


def status_code_for(exc: Exception) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, _CONFLICTS):
        return 409
    if isinstance(exc, BusinessRuleError):
        return 400
    if isinstance(exc, TransientStoreError):
        return 503
    return 500


@contextmanager
def core_errors_as_http() -> Iterator[None]:
    try:
        yield
    except (NotFoundError, BusinessRuleError, TransientStoreError) as exc:
        raise HTTPException(status_code=status_code_for(exc), detail=str(exc)) from exc
