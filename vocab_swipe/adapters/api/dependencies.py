# vocab_swipe/adapters/api/dependencies.py
from __future__ import annotations

from typing import NoReturn

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import Depends, HTTPException, status

from vocab_swipe.core.domain.exceptions import (
    DomainError,
    NoActiveSourceError,
    SourceLoadError,
    SourceNotFoundError,
    ValidationError,
)
from vocab_swipe.core.use_cases.source_store import WordSourceStore
from vocab_swipe.core.use_cases.study_session import StudySession
from vocab_swipe.shared.container import Container

logger = structlog.get_logger()

# -----------------------------------------------------------------------------
# Domain error -> HTTP status
# -----------------------------------------------------------------------------
_STATUS_BY_ERROR = (
    (SourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NoActiveSourceError, status.HTTP_409_CONFLICT),
    (SourceLoadError, status.HTTP_502_BAD_GATEWAY),
)


def raise_http(error: DomainError) -> NoReturn:
    """Re-raises a domain error as the matching HTTPException."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            break
    else:
        code = status.HTTP_400_BAD_REQUEST

    if code >= 500:
        logger.error("request_failed", error=type(error).__name__, message=error.message)
    raise HTTPException(status_code=code, detail=error.message)


# -----------------------------------------------------------------------------
# Use case injection
# -----------------------------------------------------------------------------
@inject
def get_source_store(
    store: WordSourceStore = Depends(Provide[Container.source_store]),
) -> WordSourceStore:
    return store


@inject
def get_study_session(
    session: StudySession = Depends(Provide[Container.study_session]),
) -> StudySession:
    """The process-wide session (single learner per server)."""
    return session
