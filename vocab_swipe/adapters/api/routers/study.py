# vocab_swipe/adapters/api/routers/study.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from vocab_swipe.adapters.api.dependencies import get_study_session, raise_http
from vocab_swipe.adapters.api.schemas import (
    MarkRequest,
    ResetRequest,
    SelectSourceRequest,
    history_body,
    next_word_body,
    progress_body,
)
from vocab_swipe.core.domain.exceptions import DomainError
from vocab_swipe.core.use_cases.study_session import StudySession

logger = structlog.get_logger()

router = APIRouter(prefix="/api/study", tags=["Study"])


@router.post("/select", summary="Select Source")
async def select_source(
    request: SelectSourceRequest,
    session: StudySession = Depends(get_study_session),
):
    """
    Makes a source active and returns its first card.
    `stale: true` means a later selection overtook this one.
    """
    try:
        result = await session.select_source(request.name)
    except DomainError as e:
        raise_http(e)

    if result is None:
        return {"success": True, "stale": True, "source": request.name}
    return next_word_body(result)


@router.get("/next", summary="Next Word")
async def next_word(session: StudySession = Depends(get_study_session)):
    try:
        result = await session.next_word()
    except DomainError as e:
        raise_http(e)
    return next_word_body(result)


@router.post("/learned", summary="Mark Learned")
async def mark_learned(
    request: Optional[MarkRequest] = None,
    session: StudySession = Depends(get_study_session),
):
    """Marks the given term (or the current card) learned and returns the next card."""
    try:
        result = await session.mark_learned(request.term if request else None)
    except DomainError as e:
        raise_http(e)
    return next_word_body(result)


@router.post("/skipped", summary="Mark Skipped")
async def mark_skipped(
    request: Optional[MarkRequest] = None,
    session: StudySession = Depends(get_study_session),
):
    try:
        result = await session.mark_skipped(request.term if request else None)
    except DomainError as e:
        raise_http(e)
    return next_word_body(result)


@router.delete("/learned/{source}/{term}", summary="Unmark Learned")
async def unmark_learned(
    source: str,
    term: str,
    session: StudySession = Depends(get_study_session),
):
    try:
        summary = await session.unmark_learned(term, source_name=source)
    except DomainError as e:
        raise_http(e)
    return {"success": True, "progress": progress_body(summary)}


@router.delete("/skipped/{source}/{term}", summary="Unmark Skipped")
async def unmark_skipped(
    source: str,
    term: str,
    session: StudySession = Depends(get_study_session),
):
    try:
        summary = await session.unmark_skipped(term, source_name=source)
    except DomainError as e:
        raise_http(e)
    return {"success": True, "progress": progress_body(summary)}


@router.post("/reset", summary="Reset Progress")
async def reset_progress(
    request: Optional[ResetRequest] = None,
    session: StudySession = Depends(get_study_session),
):
    """
    Empties learned/skipped state. Resetting the active source also
    returns its next card.
    """
    name = request.name if request else None
    try:
        result = await session.reset(name)
    except DomainError as e:
        raise_http(e)

    if result is None:
        return {"success": True, "source": name, "message": "Progress reset"}
    return next_word_body(result)


@router.get("/progress", summary="Progress Overview")
async def progress_overview(session: StudySession = Depends(get_study_session)):
    try:
        summaries = await session.all_progress()
    except DomainError as e:
        raise_http(e)
    return {
        "success": True,
        "activeSource": session.active_source,
        "state": session.state.value,
        "sources": [progress_body(s) for s in summaries],
    }


@router.get("/history", summary="Learned / Skipped History")
async def history(
    source: Optional[str] = Query(None, description="Restrict to one source"),
    session: StudySession = Depends(get_study_session),
):
    try:
        result = await session.history(source)
    except DomainError as e:
        raise_http(e)
    return history_body(result)
